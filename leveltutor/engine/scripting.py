#!/usr/bin/env python3
"""
Embedded Lua environment shared by every level.

Level metadata runs here, and captured values are published back into
its globals so later levels can build on them.
"""

from typing import Any, List, Optional, Tuple

from lupa import LuaError, LuaRuntime, lua_type

from ..errors import MetadataExecutionError


# Globals removed from the runtime before any metadata runs.
SANDBOX_SETUP = """
io = nil
dofile = nil
loadfile = nil
load = nil
require = nil
package = nil
debug = nil
python = nil
collectgarbage = nil
string.dump = nil
os = { time = os.time, clock = os.clock, date = os.date }
"""

# Global accessors bound to the real globals table and the raw primitives,
# so metadata can neither replace them nor route them through metamethods.
RAWGET = "(function(G, rawget) return function(name) return rawget(G, name) end end)(_G, rawget)"
RAWSET = "(function(G, rawset) return function(name, value) rawset(G, name, value) end end)(_G, rawset)"
RESET_METATABLE = "(function(G, setmetatable) return function() setmetatable(G, nil) end end)(_G, debug.setmetatable)"


class ScriptingContext:
    """
    A sandboxed Lua runtime with settable and readable globals.

    One instance lives for the whole process. Globals are never reset
    between levels, except for the names a caller explicitly clears.
    Reads and writes bypass any metatable metadata puts on _G.
    """

    def __init__(self):
        self._lua = LuaRuntime(register_eval=False, register_builtins=False)
        self._rawget = self._lua.eval(RAWGET)
        self._rawset = self._lua.eval(RAWSET)
        self._reset_metatable = self._lua.eval(RESET_METATABLE)
        self._lua.execute(SANDBOX_SETUP)

    def execute(self, code: str) -> None:
        """Run a chunk of Lua code, raising MetadataExecutionError on any fault"""
        try:
            self._lua.execute(code)
        except LuaError as e:
            raise MetadataExecutionError(f"Lua error: {e}") from e

    def get_global(self, name: str) -> Any:
        """
        Raw value of a global (None when nil).

        Raises:
            MetadataExecutionError: If the value is a string that is not UTF-8
        """
        try:
            return self._rawget(name)
        except LuaError as e:
            raise MetadataExecutionError(f"Failed to read global '{name}': {e}") from e
        except UnicodeDecodeError as e:
            raise MetadataExecutionError(f"Global '{name}' is not valid UTF-8 text") from e

    def get_string(self, name: str) -> Optional[str]:
        """Value of a global if it is a Lua string, else None"""
        value = self.get_global(name)
        if isinstance(value, str):
            return value
        return None

    def get_table(self, name: str) -> Optional[List[Tuple[Any, Any]]]:
        """
        Entries of a global table as (key, value) pairs.

        Returns None when the global is nil.
        Raises TypeError when it holds something other than a table.
        """
        value = self.get_global(name)
        if value is None:
            return None
        if lua_type(value) != 'table':
            raise TypeError(f"global '{name}' is a {lua_type(value) or type(value).__name__}, not a table")
        try:
            return list(value.items())
        except UnicodeDecodeError as e:
            raise MetadataExecutionError(f"Table '{name}' holds text that is not valid UTF-8") from e

    def set_global(self, name: str, value: Any) -> None:
        """Bind a global variable"""
        self._rawset(name, value)

    def clear(self, *names: str) -> None:
        """Drop any metatable on _G and set the given globals back to nil"""
        self._reset_metatable()
        for name in names:
            self._rawset(name, None)
