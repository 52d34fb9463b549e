"""
Canonical JSON serialization of permission records.

Two records built independently from identical data must serialize to the
same string, so object keys are sorted and no whitespace is emitted. Only the
value types a record can hold are supported.
"""

from typing import Any


class RecordCanonicalizer:
    """
    Deterministic serializer for record wire dictionaries.

    Produces the same output for equal content by:
    1. Sorting object keys by code point
    2. Emitting no whitespace between tokens
    3. Keeping array order (team order is significant)
    4. Escaping only what JSON requires
    """

    def canonicalize(self, value: Any) -> str:
        """
        Serialize a record dictionary (or any nested part of one).

        Args:
            value: None, bool, int, str, list/tuple or dict of those

        Returns:
            Canonical JSON string

        Raises:
            TypeError: On any other value type
        """
        if value is None:
            return "null"
        elif isinstance(value, bool):
            return "true" if value else "false"
        elif isinstance(value, str):
            return self._canonicalize_string(value)
        elif isinstance(value, int):
            return str(value)
        elif isinstance(value, dict):
            return self._canonicalize_object(value)
        elif isinstance(value, (list, tuple)):
            return "[" + ",".join(self.canonicalize(item) for item in value) + "]"
        else:
            raise TypeError(f"Cannot canonicalize type: {type(value).__name__}")

    def _canonicalize_object(self, obj: dict[str, Any]) -> str:
        pairs = [
            f"{self._canonicalize_string(key)}:{self.canonicalize(obj[key])}"
            for key in sorted(obj)
        ]
        return "{" + ",".join(pairs) + "}"

    def _canonicalize_string(self, s: str) -> str:
        result = ['"']
        for char in s:
            code = ord(char)
            if char == '"':
                result.append('\\"')
            elif char == "\\":
                result.append("\\\\")
            elif char == "\n":
                result.append("\\n")
            elif char == "\r":
                result.append("\\r")
            elif char == "\t":
                result.append("\\t")
            elif code < 0x20:
                result.append(f"\\u{code:04x}")
            else:
                result.append(char)
        result.append('"')
        return "".join(result)


_canonicalizer = RecordCanonicalizer()


def canonicalize(value: Any) -> str:
    """Canonicalize a value with the module-level ``RecordCanonicalizer``."""
    return _canonicalizer.canonicalize(value)
