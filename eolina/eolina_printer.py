"""
A debug printer for Eolina data structures.

`str(value)` is what `>` prints; the printer produces the unambiguous form
used for queue dumps and the REPL's `!queue` command, where a `String`
needs its quotes to be told apart from a one element `StringList`.
"""
import collections

from eolina.eolina_datatypes import Bool, SourceSpan, String, StringList, Token
from eolina.eolina_range import EolinaIndex, EolinaRange


def quote(text: str) -> str:
    escaped = text.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
    return f'"{escaped}"'


class Printer:
    """Formats Eolina objects into readable debug strings."""

    def __init__(self):
        self._handlers = self._create_handlers()

    def pformat(self, obj) -> str:
        """Public entry point to format an object."""
        handler = self._get_handler(obj)
        return handler(obj)

    def _get_handler(self, obj):
        """Dispatcher to find the correct formatting method."""
        obj_type = type(obj)
        if obj_type in self._handlers:
            return self._handlers[obj_type]
        if isinstance(obj, Token): return self._pformat_token
        if isinstance(obj, (EolinaIndex, EolinaRange, SourceSpan)): return str
        if isinstance(obj, (list, tuple, collections.deque)): return self._pformat_sequence
        # Default to Python's repr for unknown types
        return repr

    def _create_handlers(self):
        return {
            String: self._pformat_string,
            StringList: self._pformat_string_list,
            Bool: self._pformat_bool,
            str: quote,
            bool: lambda b: "true" if b else "false",
            type(None): lambda _: "none",
        }

    def _pformat_string(self, obj):
        return quote(obj.value)

    def _pformat_string_list(self, obj):
        return "[" + ", ".join(quote(item) for item in obj.items) + "]"

    def _pformat_bool(self, obj):
        return str(obj)

    def _pformat_token(self, obj):
        return str(obj)

    def _pformat_sequence(self, obj):
        return "[" + ", ".join(self.pformat(item) for item in obj) + "]"
