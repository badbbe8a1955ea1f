"""
Reader/writer for Java-properties style text.

Parsing follows ``java.util.Properties.load``: ``#``/``!`` comment lines,
``=``, ``:`` or whitespace separating key and value, backslash escapes
(``\\:``, ``\\=``, ``\\\\``, ``\\t``, ``\\uXXXX`` and so on) and lines continued
with a trailing backslash. Writing produces the plain ``key=value`` layout of
``Properties.store``, escaping only what the reader needs to get the same
values back.
"""

import re
import string
from datetime import datetime, timezone
from typing import Iterator, Mapping, Optional

_WHITESPACE = " \t\f"
_SEPARATORS = "=:"
_LINE_BREAK = re.compile(r"\r\n|\r|\n")
_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
_ESCAPED = {"\\": "\\\\", "\t": "\\t", "\n": "\\n", "\r": "\\r", "\f": "\\f"}
_KEY_SPECIALS = re.compile(r"[=: #!]")


def parse_properties(text: str) -> dict[str, str]:
    """
    Parse properties text into a dictionary.

    Raises:
        ValueError: If the text holds a malformed ``\\uXXXX`` escape

    Example:
        >>> parse_properties("# comment\\nversion=17.0.15\\n")
        {'version': '17.0.15'}
        >>> parse_properties("distributionUrl=https\\\\://host/x.zip")
        {'distributionUrl': 'https://host/x.zip'}
    """
    properties = {}
    for line in _logical_lines(text):
        key, value = _split_key_value(line)
        properties[_unescape(key)] = _unescape(value)
    return properties


def _logical_lines(text: str) -> Iterator[str]:
    """Yield non-comment lines with continuations joined."""
    lines = iter(_LINE_BREAK.split(text))
    for line in lines:
        line = line.lstrip(_WHITESPACE)
        if not line or line[0] in "#!":
            continue

        while _is_continued(line):
            line = line[:-1]
            following = next(lines, None)
            if following is None:
                break
            line += following.lstrip(_WHITESPACE)

        yield line


def _is_continued(line: str) -> bool:
    """A line is continued when it ends in an odd number of backslashes."""
    return (len(line) - len(line.rstrip("\\"))) % 2 == 1


def _split_key_value(line: str) -> tuple[str, str]:
    """Split a logical line at its first unescaped separator."""
    index = 0
    while index < len(line):
        char = line[index]
        if char == "\\":
            index += 2
            continue
        if char in _SEPARATORS or char in _WHITESPACE:
            break
        index += 1

    key = line[:index]
    value = line[index:].lstrip(_WHITESPACE)
    if value[:1] and value[0] in _SEPARATORS:
        value = value[1:].lstrip(_WHITESPACE)
    return key, value


def _unescape(text: str) -> str:
    if "\\" not in text:
        return text

    chars = []
    index = 0
    while index < len(text):
        char = text[index]
        index += 1
        if char != "\\":
            chars.append(char)
            continue
        if index == len(text):
            break

        char = text[index]
        index += 1
        if char == "u":
            digits = text[index : index + 4]
            if len(digits) != 4 or not all(c in string.hexdigits for c in digits):
                raise ValueError(f"Malformed \\uxxxx encoding: \\u{digits}")
            chars.append(chr(int(digits, 16)))
            index += 4
        else:
            chars.append(_ESCAPES.get(char, char))

    return "".join(chars)


def _escape(text: str, is_key: bool = False) -> str:
    escaped = "".join(_ESCAPED.get(char, char) for char in text)
    if is_key:
        return _KEY_SPECIALS.sub(r"\\\g<0>", escaped)
    if escaped.startswith(" "):
        # Leading whitespace of a value is dropped on read unless escaped
        escaped = "\\" + escaped
    return escaped


def format_properties(
    properties: Mapping[str, str],
    comment: Optional[str] = None,
    timestamp: Optional[datetime] = None,
) -> str:
    """
    Render properties the way ``java.util.Properties.store`` lays them out.

    A comment line (if given) and a date line come first, followed by one
    ``key=value`` line per entry.
    """
    lines = []
    if comment:
        lines.append(f"#{comment}")
    timestamp = timestamp or datetime.now(timezone.utc)
    lines.append(f"#{timestamp.strftime('%a %b %d %H:%M:%S %Z %Y')}")
    for key, value in properties.items():
        lines.append(f"{_escape(key, is_key=True)}={_escape(value)}")
    return "\n".join(lines) + "\n"
