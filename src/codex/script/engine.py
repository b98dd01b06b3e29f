"""Lua interpreter wrapper that speaks in tagged values."""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable

import lupa

from .errors import ScriptEngineUnavailableError
from .values import ScriptValue

logger = logging.getLogger(__name__)

# Tables nested deeper than this (including cycles such as _G._G) read as nil.
MAX_TABLE_DEPTH = 5

TEXT_ENCODING = "utf-8"

_UNMARSHALLED_TYPES = ("function", "userdata", "thread")
_PLAIN_TYPES = (bool, int, float, str, bytes)
_KEY_TYPES = (bool, int, float, str)
_SCRIPT_FAILURES = (lupa.LuaError, TypeError, ValueError)


class ScriptEngine:
    """Executes Lua code and moves values in and out of its global namespace.

    Script failures never raise: ``execute`` and ``call_function`` return an
    error-tagged :class:`ScriptValue` instead. Only a closed engine raises
    (:class:`ScriptEngineUnavailableError`).

    Lua strings are byte strings. The runtime hands them over undecoded and
    this class decodes them as UTF-8, replacing invalid bytes, so reading a
    value never fails on its encoding. Table keys keep their Lua type.
    """

    def __init__(self, runtime: Any | None = None) -> None:
        self._runtime = runtime if runtime is not None else lupa.LuaRuntime(
            encoding=None,
            unpack_returned_tuples=True,
            register_eval=False,
        )
        # lupa exposes a "python" module to Lua by default; stories get no access to it.
        self._runtime.globals()[_encode("python")] = None
        self._builtin_names = frozenset(_decode(key) for key in self._runtime.globals().keys())

    @property
    def is_ready(self) -> bool:
        """True while the interpreter answers a trivial query."""
        if self._runtime is None:
            return False
        try:
            return self._runtime.globals()[_encode("_VERSION")] is not None
        except _SCRIPT_FAILURES:
            return False

    @property
    def version(self) -> str:
        return self.get_global("_VERSION").as_text()

    def close(self) -> None:
        self._runtime = None

    def execute(self, code: str) -> ScriptValue:
        """Run a chunk of code and return its first return value."""
        runtime = self._require_runtime()
        try:
            result = runtime.execute(code)
        except _SCRIPT_FAILURES as exc:
            logger.debug("Lua chunk failed: %s", exc)
            return ScriptValue.error(_error_text(exc))
        if isinstance(result, tuple):
            result = result[0] if result else None
        return ScriptValue.of(self._to_python(result))

    def get_global(self, name: str) -> ScriptValue:
        return ScriptValue.of(self._to_python(self._lookup(name)))

    def set_global(self, name: str, value: object) -> None:
        self._globals()[_encode(name)] = self._to_lua(value)

    def get_all_globals(self) -> Dict[str, ScriptValue]:
        """Return every marshallable global that is not part of the standard library."""
        values: Dict[str, ScriptValue] = {}
        for key, value in self._globals().items():
            if not isinstance(key, (bytes, str)):
                continue
            name = _decode(key)
            if name in self._builtin_names or not _is_data(value):
                continue
            values[name] = ScriptValue.of(self._to_python(value))
        return values

    def call_function(self, name: str, *args: object) -> ScriptValue:
        function = self._lookup(name)
        if lupa.lua_type(function) != "function":
            return ScriptValue.error(f"'{name}' is not a function")
        try:
            result = function(*(self._to_lua(arg) for arg in args))
        except _SCRIPT_FAILURES as exc:
            logger.debug("Lua function %s failed: %s", name, exc)
            return ScriptValue.error(_error_text(exc))
        if isinstance(result, tuple):
            result = result[0] if result else None
        return ScriptValue.of(self._to_python(result))

    def is_function(self, name: str) -> bool:
        return lupa.lua_type(self._lookup(name)) == "function"

    def define_function(self, name: str, params: Iterable[str], body: str) -> ScriptValue:
        """Compile ``function name(params) body end`` into the global namespace."""
        code = f"function {name}({', '.join(params)})\n{body}\nend"
        return self.execute(code)

    def register_callable(self, name: str, function: Callable[..., object]) -> None:
        """Expose a Python callable to story code under ``name``."""
        self._globals()[_encode(name)] = function

    def new_table(self, name: str) -> None:
        self._globals()[_encode(name)] = self._require_runtime().table()

    def ensure_table(self, name: str) -> None:
        if lupa.lua_type(self._lookup(name)) != "table":
            self.new_table(name)

    def alias_global(self, alias: str, name: str) -> None:
        """Bind ``alias`` to the very same object as ``name`` (no copy)."""
        g = self._globals()
        g[_encode(alias)] = g[_encode(name)]

    def set_field(self, name: str, key: str, value: object) -> None:
        table = self._lookup(name)
        if lupa.lua_type(table) != "table":
            raise TypeError(f"Global '{name}' is not a table.")
        table[_encode(key)] = self._to_lua(value)

    def _require_runtime(self) -> Any:
        if self._runtime is None:
            raise ScriptEngineUnavailableError("Lua runtime is not available.")
        return self._runtime

    def _globals(self) -> Any:
        return self._require_runtime().globals()

    def _lookup(self, name: str) -> object:
        return self._globals()[_encode(name)]

    def _to_lua(self, value: object) -> object:
        if isinstance(value, ScriptValue):
            value = value.to_python()
        if isinstance(value, str):
            return _encode(value)
        if value is None or isinstance(value, (bool, int, float, bytes)):
            return value
        runtime = self._require_runtime()
        if isinstance(value, (list, tuple)):
            return runtime.table_from([self._to_lua(item) for item in value])
        if isinstance(value, dict):
            return runtime.table_from({self._to_lua(key): self._to_lua(item) for key, item in value.items()})
        raise TypeError(f"Cannot pass {type(value).__name__} to Lua.")

    def _to_python(self, value: object, depth: int = 0) -> object:
        lua_type = lupa.lua_type(value)
        if lua_type is None:
            if isinstance(value, bytes):
                return _decode(value)
            return value if _is_data(value) else None
        if lua_type != "table" or depth >= MAX_TABLE_DEPTH:
            return None
        entries = []
        for key, item in value.items():
            key = _normalize_key(key)
            if isinstance(key, _KEY_TYPES) and _is_data(item):
                entries.append((key, item))
        keys = [key for key, _ in entries]
        if all(isinstance(key, int) and not isinstance(key, bool) for key in keys) and sorted(keys) == list(
            range(1, len(keys) + 1)
        ):
            ordered = sorted(entries, key=lambda entry: entry[0])
            return [self._to_python(item, depth + 1) for _, item in ordered]
        return {key: self._to_python(item, depth + 1) for key, item in entries}


def _encode(text: str) -> bytes:
    return text.encode(TEXT_ENCODING)


def _decode(raw: bytes | str) -> str:
    if isinstance(raw, bytes):
        return raw.decode(TEXT_ENCODING, errors="replace")
    return raw


def _error_text(exc: BaseException) -> str:
    message = exc.args[0] if exc.args else exc
    if isinstance(message, bytes):
        return _decode(message)
    return str(message)


def _is_data(value: object) -> bool:
    """False for functions, coroutines, userdata and Python objects handed to Lua."""
    lua_type = lupa.lua_type(value)
    if lua_type is None:
        return value is None or isinstance(value, _PLAIN_TYPES)
    return lua_type not in _UNMARSHALLED_TYPES


def _normalize_key(key: object) -> object:
    # Lua 5.1 and LuaJIT hand back array indices as floats.
    if isinstance(key, float) and key.is_integer():
        return int(key)
    if isinstance(key, bytes):
        return _decode(key)
    return key
