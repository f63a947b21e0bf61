"""Ordered key/value field lists and their JSON-shaped rendering.

A :class:`FieldList` is a flat, immutable sequence of alternating keys and
values.  ``add`` never touches the receiver; it always returns a fresh list,
so a list may be shared freely between threads and log lines.
"""

import json
from typing import Any


def is_zero(value: Any) -> bool:
    """Return True for values that are left out of a rendered record.

    ``None``, the empty string and an empty list or tuple are zero values.
    Other empty containers (dicts, sets) are still rendered.
    """
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return False


def safe_str(value: Any) -> str:
    """Return ``str(value)``, or a placeholder naming the type if that raises."""
    try:
        return str(value)
    except Exception:
        return f"<unprintable {type(value).__name__}>"


def quote(value: Any) -> str:
    """
    Encode a single value as JSON text.

    ``None`` is treated as the empty string and exceptions as their message.
    Anything the JSON encoder does not understand is converted with
    :func:`safe_str`, so this function never raises.

    Args:
        value: Arbitrary field value.

    Returns:
        JSON text for the value, e.g. ``"prod"``, ``3.14`` or ``true``.
    """
    if value is None:
        value = ""
    if isinstance(value, BaseException):
        value = safe_str(value)
    try:
        return json.dumps(
            value,
            default=safe_str,
            ensure_ascii=False,
            allow_nan=False,
            separators=(",", ":"),
        )
    except Exception:
        # NaN, circular or too deeply nested containers, unsupported mapping keys
        return json.dumps(safe_str(value), ensure_ascii=False)


def quote_key(key: Any) -> str:
    """Encode a key; keys are always emitted as JSON strings."""
    if key is None:
        key = ""
    return json.dumps(safe_str(key), ensure_ascii=False)


class FieldList(tuple):
    """
    Immutable sequence of interleaved key/value pairs.

    Even positions hold keys, odd positions hold values.  The length is always
    even: a trailing unpaired key passed to :meth:`add` is dropped.

    Duplicate keys are not merged.  If the same key is added twice both pairs
    are rendered, in insertion order.

    Example:
        >>> f = FieldList().add("railway", "east", "stop", 5)
        >>> f.render()
        '{"railway":"east", "stop":5}'
    """

    __slots__ = ()

    def __new__(cls, items=()):
        items = tuple(items)
        if len(items) % 2:
            items = items[:-1]
        return super().__new__(cls, items)

    def add(self, *pairs: Any) -> "FieldList":
        """Return a new list holding this list's pairs followed by ``pairs``."""
        if len(pairs) % 2:
            pairs = pairs[:-1]
        return FieldList(tuple(self) + pairs)

    def pairs(self):
        """Iterate over ``(key, value)`` tuples in insertion order."""
        for i in range(0, len(self) - 1, 2):
            yield self[i], self[i + 1]

    def entries(self) -> list[str]:
        """Encode every non-zero pair as ``"key":value`` text."""
        return [
            f"{quote_key(key)}:{quote(value)}"
            for key, value in self.pairs()
            if not is_zero(value)
        ]

    def render(self) -> str:
        """Render the list as a JSON object, skipping zero-valued pairs."""
        return "{" + ", ".join(self.entries()) + "}"

    def export(self) -> list[tuple[str, str]]:
        """
        Return the pairs as plain, unquoted strings.

        A pair is omitted if its key is empty, its value is ``None`` or the
        empty string, or either side converts to the empty string.  Empty
        lists are *not* omitted here; they export as ``"[]"``.
        """
        kv: list[tuple[str, str]] = []
        for key, value in self.pairs():
            if value is None or (isinstance(key, str) and key == ""):
                continue
            if isinstance(value, str) and value == "":
                continue
            k, v = safe_str(key), safe_str(value)
            if k == "" or v == "":
                continue
            kv.append((k, v))
        return kv

    def __repr__(self) -> str:
        return f"FieldList({tuple.__repr__(self)})"
