"""Wall-clock values for `format_as_time` fields.

A format is either `unix_long` (epoch milliseconds), a `strftime` pattern
(anything containing `%`), or a date pattern in the `yyyy-MM-dd HH:mm:ss.SSS`
style, which is compiled to strftime fragments once.
"""

from datetime import datetime
from typing import List, Union

from streamgen.common.constants import FieldTags
from streamgen.common.exceptions import InvalidConfigurationError

_MILLIS = object()


def _letter_directive(letter: str, count: int):
    if letter == "y":
        return "%y" if count == 2 else "%Y"
    if letter == "M":
        if count >= 4:
            return "%B"
        return "%b" if count == 3 else "%m"
    if letter == "E":
        return "%A" if count >= 4 else "%a"
    if letter == "S":
        return _MILLIS
    simple = {
        "d": "%d",
        "H": "%H",
        "h": "%I",
        "m": "%M",
        "s": "%S",
        "a": "%p",
        "Z": "%z",
        "X": "%z",
        "z": "%Z",
        "D": "%j",
    }
    if letter not in simple:
        raise InvalidConfigurationError(f"Unsupported date pattern letter '{letter}'")
    return simple[letter]


def compile_pattern(pattern: str) -> List[object]:
    """Compile a date pattern into strftime fragments and millisecond markers."""
    if "%" in pattern:
        return [pattern]

    parts: List[object] = []
    literal: List[str] = []
    i = 0
    while i < len(pattern):
        ch = pattern[i]
        if ch == "'":
            end = pattern.find("'", i + 1)
            if end == -1:
                raise InvalidConfigurationError(f"Unterminated quote in date pattern: {pattern}")
            # '' is an escaped single quote
            literal.append(pattern[i + 1:end].replace("%", "%%") if end > i + 1 else "'")
            i = end + 1
        elif ch.isalpha():
            j = i
            while j < len(pattern) and pattern[j] == ch:
                j += 1
            directive = _letter_directive(ch, j - i)
            if directive is _MILLIS:
                if literal:
                    parts.append("".join(literal))
                    literal = []
                parts.append(_MILLIS)
            else:
                literal.append(directive)
            i = j
        else:
            literal.append("%%" if ch == "%" else ch)
            i += 1
    if literal:
        parts.append("".join(literal))
    return parts


class TimeFormatter:
    """Renders the current time for one `format_as_time` specifier."""

    def __init__(self, spec: str):
        self.spec = spec
        self.is_epoch = spec == FieldTags.UNIX_LONG
        self._parts = [] if self.is_epoch else compile_pattern(spec)

    def format(self, moment: datetime) -> Union[int, str]:
        if self.is_epoch:
            return int(moment.timestamp() * 1000)
        return "".join(
            f"{moment.microsecond // 1000:03d}" if part is _MILLIS else moment.strftime(part)
            for part in self._parts
        )
