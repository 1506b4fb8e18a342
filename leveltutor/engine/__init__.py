#!/usr/bin/env python3
"""
Level engine: definition parsing, pattern matching, file watching
and the session loop that ties them together.
"""

from .scripting import ScriptingContext
from .patterns import LinePattern, compile_pattern
from .level import Level, parse_level
from .repository import LevelRepository, LoadReport
from .file_watcher import Notification, WatchSubscription, watch_file
from .session import SessionResult, SessionState, TutorialSession
from .runner import TutorialRunner

__all__ = [
    'ScriptingContext',
    'LinePattern',
    'compile_pattern',
    'Level',
    'parse_level',
    'LevelRepository',
    'LoadReport',
    'Notification',
    'WatchSubscription',
    'watch_file',
    'SessionResult',
    'SessionState',
    'TutorialSession',
    'TutorialRunner',
]
