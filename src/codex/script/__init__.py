"""Bridge between the story runtime and the embedded Lua interpreter."""

from .context import ScriptContext
from .engine import ScriptEngine
from .errors import ScriptEngineUnavailableError, ScriptError, ScriptEvaluationError
from .values import ScriptValue, ValueKind

__all__ = [
    "ScriptContext",
    "ScriptEngine",
    "ScriptEngineUnavailableError",
    "ScriptError",
    "ScriptEvaluationError",
    "ScriptValue",
    "ValueKind",
]
