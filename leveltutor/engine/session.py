#!/usr/bin/env python3
"""
Session loop for a single level.
Writes the instructions, watches the edit target and checks each edit
against the level's completion and capture patterns.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict

from watchdog.events import FileCreatedEvent, FileModifiedEvent, FileMovedEvent

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from ..errors import FileIOError, WatchError
from .file_watcher import Notification, watch_file
from .level import Level
from .scripting import ScriptingContext


# Events that mean the target's content may have changed
CONTENT_EVENTS = (FileModifiedEvent, FileCreatedEvent, FileMovedEvent)


class SessionState(Enum):
    """Where a session is in its lifecycle"""
    INSTRUCTING = 'instructing'            # Writing instructions to the target
    WATCHING = 'watching'                  # Waiting for an edit
    EMPTY_FILE_RETRY = 'empty_file_retry'  # Edit left the file blank
    COMPLETED = 'completed'                # Completion pattern matched
    WATCH_ERROR = 'watch_error'            # Watcher died, fatal


@dataclass
class SessionResult:
    """What a finished session produced"""
    level: Level
    captured: Dict[str, str] = field(default_factory=dict)


class TutorialSession:
    """
    Runs one level from instructions to completion.

    Workflow:
    1. Write instructions to the target file
    2. Watch the file for changes
    3. On each change, test the completion pattern line by line
    4. On completion, publish captured values into the scripting context
    """

    def __init__(
        self,
        level: Level,
        scripting: ScriptingContext,
        target_path: str,
        console: Console = None,
        subscribe=watch_file,
    ):
        self.level = level
        self.scripting = scripting
        self.target_path = target_path
        self.console = console or Console()
        self.subscribe = subscribe
        self.state = SessionState.INSTRUCTING
        self.captured: Dict[str, str] = {}

    def run(self) -> SessionResult:
        """
        Run the session until the level is complete.

        Raises:
            FileIOError: If the instructions cannot be written
            WatchSetupError: If the target cannot be watched
            WatchError: If the watcher stops delivering notifications
        """
        self.write_instructions()
        self.state = SessionState.WATCHING

        with self.subscribe(self.target_path) as subscription:
            while self.state is not SessionState.COMPLETED:
                try:
                    notification = subscription.receive()
                except WatchError:
                    self.state = SessionState.WATCH_ERROR
                    raise
                self.handle(notification)

        return SessionResult(level=self.level, captured=dict(self.captured))

    def write_instructions(self):
        """Overwrite the target with the level's instructions"""
        try:
            with open(self.target_path, 'w', encoding='utf-8', newline='') as f:
                f.write(self.level.instructions)
        except OSError as e:
            raise FileIOError(f"Failed to write to {self.target_path}: {e}") from e

        self.console.print(Panel(
            f"Instructions from [cyan]{escape(self.level.display_name)}[/cyan] "
            f"written to [cyan]{escape(self.target_path)}[/cyan].\n"
            f"Edit the file to complete the level.",
            title="Level",
            border_style="blue"
        ))

    def handle(self, notification: Notification):
        """Process one notification from the watcher"""
        if notification.error is not None:
            self.console.print(f"[yellow]Watch error: {escape(str(notification.error))}[/yellow]")
            return

        event = notification.event
        if event is None or event.is_directory or not isinstance(event, CONTENT_EVENTS):
            return

        try:
            content = self._read_target()
        except FileIOError as e:
            self.console.print(f"[yellow]{escape(str(e))}[/yellow]")
            return

        self.evaluate(content)

    def evaluate(self, content: str) -> SessionState:
        """
        Check content against the level and update the session state.

        Returns the outcome: EMPTY_FILE_RETRY, WATCHING or COMPLETED.
        """
        if not content.strip():
            self.console.print("[dim]Empty file, skipping.[/dim]")
            self.state = SessionState.WATCHING
            return SessionState.EMPTY_FILE_RETRY

        if not self.level.completion_matcher.any_line(content):
            self.console.print("[dim]Pattern not matched yet. Keep trying![/dim]")
            self.state = SessionState.WATCHING
            return SessionState.WATCHING

        self.console.print("[bold green]Completion pattern matched! Level complete.[/bold green]")
        self._apply_captures(content)
        self.state = SessionState.COMPLETED
        return SessionState.COMPLETED

    def _apply_captures(self, content: str):
        """Publish the first group of each capture's first matching line"""
        for name, matcher in self.level.capture_matchers.items():
            match = matcher.first_match(content)

            if match is None:
                self.console.print(
                    f"[yellow]No match for capture {escape(name)}, "
                    f"pattern: {escape(repr(matcher.pattern))}.[/yellow]"
                )
                continue

            value = match.group(1)
            if value is None:
                self.console.print(
                    f"[yellow]Capture for {escape(name)} matched, but no group was captured.[/yellow]"
                )
                continue

            self.scripting.set_global(name, value)
            self.captured[name] = value
            self.console.print(f"[green]Captured {escape(name)}:[/green] {escape(value)}")

    def _read_target(self) -> str:
        try:
            with open(self.target_path, 'r', encoding='utf-8', newline='') as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise FileIOError(f"Failed to read {os.path.basename(self.target_path)}: {e}") from e
