"""
Reading of JSON-with-comments documents, the dialect `tsconfig.json` is written in.

Line comments, block comments and trailing commas are removed outside of string
literals, then the remaining text is handed to the standard `json` parser. Removed
characters are replaced with spaces (newlines are kept) so that line and column
numbers in parse errors still point into the original text.
"""

from __future__ import annotations

import json
from typing import Any


def strip_jsonc(text: str) -> str:
    """Blank out comments and trailing commas that are not inside strings."""
    out = list(text)
    i = 0
    n = len(text)
    # Index of the last comma seen outside a string with only whitespace or
    # comments after it, or -1.
    pending_comma = -1

    while i < n:
        ch = text[i]
        if ch == '"':
            pending_comma = -1
            i += 1
            while i < n and text[i] != '"':
                if text[i] == "\\":
                    i += 1
                i += 1
            i += 1
        elif ch == "/" and i + 1 < n and text[i + 1] == "/":
            while i < n and text[i] != "\n":
                out[i] = " "
                i += 1
        elif ch == "/" and i + 1 < n and text[i + 1] == "*":
            end = text.find("*/", i + 2)
            stop = n if end == -1 else end + 2
            for j in range(i, stop):
                if out[j] != "\n":
                    out[j] = " "
            i = stop
        elif ch == ",":
            pending_comma = i
            i += 1
        elif ch in "]}":
            if pending_comma != -1:
                out[pending_comma] = " "
                pending_comma = -1
            i += 1
        else:
            if not ch.isspace():
                pending_comma = -1
            i += 1

    return "".join(out)


def loads(text: str) -> Any:
    """
    Parse a JSONC document. Raises `json.JSONDecodeError` on malformed input.
    A leading byte order mark is ignored.
    """
    if text.startswith("\ufeff"):
        text = text[1:]
    return json.loads(strip_jsonc(text))
