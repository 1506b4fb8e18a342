#!/usr/bin/env python3
"""
Exception types raised by the level engine.
"""

from typing import List, Tuple


class LevelTutorError(Exception):
    """Base class for all leveltutor errors"""


class LevelLoadError(LevelTutorError):
    """A single level definition could not be loaded"""


class MalformedDefinition(LevelLoadError):
    """Definition does not have the expected sections or shapes"""


class MetadataExecutionError(LevelLoadError):
    """The Lua metadata block failed to run"""


class MissingCompletionRule(LevelLoadError):
    """Metadata did not set a string `completion` global"""


class InvalidPattern(LevelLoadError):
    """A completion or capture pattern could not be compiled"""

    def __init__(self, name: str, pattern: str, reason: str):
        self.name = name
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid pattern for '{name}' ({pattern!r}): {reason}")


class NoValidLevels(LevelTutorError):
    """Every definition in the content folder failed to load"""

    def __init__(self, folder: str, errors: List[Tuple[str, Exception]]):
        self.folder = folder
        self.errors = errors
        super().__init__(
            f"No valid levels found in {folder} ({len(errors)} failed)"
        )


class WatchSetupError(LevelTutorError):
    """The watch subscription could not be established"""


class WatchError(LevelTutorError):
    """The watch subscription failed after it was established"""


class FileIOError(LevelTutorError):
    """Reading or writing a definition or the edit target failed"""
