#!/usr/bin/env python3
"""
Level definitions and the parser that builds them.

A definition is Lua metadata and free-text instructions separated by '---':

    completion = "^done$"
    capture = { name = [[^name:\\s*(\\w+)]] }
    ---
    Write your name as "name: <you>", then a line with "done".
"""

from dataclasses import dataclass, field
from typing import Dict, Optional

from ..errors import MalformedDefinition, MissingCompletionRule
from .patterns import LinePattern, compile_pattern
from .scripting import ScriptingContext


DELIMITER = '---'

COMPLETION_GLOBAL = 'completion'
CAPTURE_GLOBAL = 'capture'


@dataclass(frozen=True)
class Level:
    """One tutorial exercise"""
    instructions: str
    completion_matcher: LinePattern
    capture_matchers: Dict[str, LinePattern] = field(default_factory=dict)
    source_id: Optional[str] = None    # Set by the repository after loading

    @property
    def display_name(self) -> str:
        return self.source_id or '<unknown>'


def parse_level(raw: str, scripting: ScriptingContext) -> Level:
    """
    Parse a raw definition into a Level.

    The metadata block runs in the shared scripting context. The
    `completion` and `capture` globals are cleared first and read right
    after, so a rule from one definition never carries over to another.

    Raises:
        MalformedDefinition: Wrong number of sections or a bad capture table
        MetadataExecutionError: The metadata block failed to run
        MissingCompletionRule: No string `completion` global was set
        InvalidPattern: A completion or capture pattern did not compile
    """
    parts = raw.split(DELIMITER)
    if len(parts) != 2:
        raise MalformedDefinition(
            f"Expected metadata and instructions separated by '{DELIMITER}', "
            f"found {len(parts)} section(s)"
        )

    metadata, instructions = parts[0], parts[1].strip()

    scripting.clear(COMPLETION_GLOBAL, CAPTURE_GLOBAL)
    scripting.execute(metadata)

    completion = scripting.get_string(COMPLETION_GLOBAL)
    if completion is None:
        raise MissingCompletionRule(
            f"Metadata must set '{COMPLETION_GLOBAL}' to a pattern string"
        )

    try:
        capture_entries = scripting.get_table(CAPTURE_GLOBAL)
    except TypeError as e:
        raise MalformedDefinition(str(e)) from e

    completion_matcher = compile_pattern(completion, COMPLETION_GLOBAL)
    capture_matchers = _compile_captures(capture_entries or [])

    return Level(
        instructions=instructions,
        completion_matcher=completion_matcher,
        capture_matchers=capture_matchers,
    )


def _compile_captures(entries) -> Dict[str, LinePattern]:
    """Compile capture table entries, ordered by variable name"""
    patterns = {}
    for name, pattern in entries:
        if not isinstance(name, str) or not isinstance(pattern, str):
            raise MalformedDefinition(
                f"'{CAPTURE_GLOBAL}' entries must map variable names to pattern strings "
                f"(got {name!r} = {pattern!r})"
            )
        patterns[name] = pattern

    return {
        name: compile_pattern(patterns[name], name, require_group=True)
        for name in sorted(patterns)
    }
