#!/usr/bin/env python3
"""
Line-oriented pattern matchers for completion and capture rules.
"""

import re
from typing import Iterator, Optional

from ..errors import InvalidPattern


class LinePattern:
    """A compiled regular expression applied to one line at a time"""

    def __init__(self, name: str, regex: re.Pattern):
        self.name = name
        self.regex = regex

    @property
    def pattern(self) -> str:
        return self.regex.pattern

    @property
    def groups(self) -> int:
        return self.regex.groups

    def search(self, line: str) -> Optional[re.Match]:
        return self.regex.search(line)

    def matches(self, line: str) -> bool:
        return self.search(line) is not None

    def any_line(self, content: str) -> bool:
        """True if some single line of content matches"""
        return any(self.matches(line) for line in iter_lines(content))

    def first_match(self, content: str) -> Optional[re.Match]:
        """Match object for the first matching line, in file order"""
        for line in iter_lines(content):
            match = self.search(line)
            if match:
                return match
        return None

    def __repr__(self):
        return f"LinePattern({self.name!r}, {self.pattern!r})"


def iter_lines(content: str) -> Iterator[str]:
    r"""
    Lines of content without their line endings.

    Only \n ends a line (an optional \r before it is dropped). A trailing
    newline does not produce an extra empty line.
    """
    lines = content.split('\n')
    if lines[-1] == '':
        lines.pop()
    for line in lines:
        yield line[:-1] if line.endswith('\r') else line


def compile_pattern(pattern: str, name: str, require_group: bool = False) -> LinePattern:
    """
    Compile a pattern into a LinePattern.

    Args:
        pattern: Regular expression source
        name: What the pattern is for ('completion' or a capture variable)
        require_group: Reject patterns without a capturing group

    Raises:
        InvalidPattern: If the pattern does not compile or lacks a group
    """
    try:
        regex = re.compile(pattern)
    except re.error as e:
        raise InvalidPattern(name, pattern, str(e)) from e

    if require_group and regex.groups < 1:
        raise InvalidPattern(name, pattern, "pattern has no capturing group")

    return LinePattern(name, regex)
