"""Exceptions raised at the interpreter boundary."""


class ScriptError(Exception):
    """Base exception for the script layer."""


class ScriptEngineUnavailableError(ScriptError):
    """Raised when the interpreter has been closed or never started."""


class ScriptEvaluationError(ScriptError):
    """Raised when story code fails and the caller asked for the value anyway."""
