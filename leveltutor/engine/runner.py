#!/usr/bin/env python3
"""
Tutorial runner.
Repeatedly picks a random level and runs a session for it.
"""

from typing import Optional

from rich.console import Console
from rich.panel import Panel
from rich.markup import escape

from .file_watcher import watch_file
from .repository import LevelRepository
from .scripting import ScriptingContext
from .session import SessionResult, TutorialSession


class TutorialRunner:
    """
    Drives the level cycle.

    Workflow:
    1. Load all levels and pick one at random
    2. Run a session for it until completion
    3. Repeat with a freshly picked level

    The scripting context is created once and shared by every session,
    so values captured in one level stay visible to the levels after it.
    """

    def __init__(
        self,
        content_dir: str,
        target_path: str,
        scripting: ScriptingContext = None,
        console: Console = None,
        repository: LevelRepository = None,
        subscribe=watch_file,
    ):
        self.content_dir = content_dir
        self.target_path = target_path
        self.scripting = scripting or ScriptingContext()
        self.console = console or Console()
        self.repository = repository or LevelRepository(self.scripting)
        self.subscribe = subscribe

    def run_once(self) -> SessionResult:
        """Load a random level and run one session to completion"""
        level = self.repository.load_random(self.content_dir)
        session = TutorialSession(
            level=level,
            scripting=self.scripting,
            target_path=self.target_path,
            console=self.console,
            subscribe=self.subscribe,
        )
        return session.run()

    def run(self, max_sessions: Optional[int] = None) -> int:
        """
        Run sessions back to back.

        Args:
            max_sessions: Stop after this many completed levels (None = forever)

        Returns:
            Number of completed levels
        """
        self.console.print(Panel(
            f"[bold blue]Tutorial Mode[/bold blue]\n\n"
            f"Levels: [cyan]{escape(str(self.content_dir))}[/cyan]\n"
            f"Edit: [cyan]{escape(str(self.target_path))}[/cyan]\n\n"
            f"[dim]Press Ctrl+C to exit at any time.[/dim]",
            title="leveltutor",
            border_style="blue"
        ))

        completed = 0
        try:
            while max_sessions is None or completed < max_sessions:
                self.run_once()
                completed += 1
                self.console.print(f"[dim]Levels completed: {completed}[/dim]\n")
        except KeyboardInterrupt:
            self.console.print("\n[yellow]Tutorial interrupted.[/yellow]")

        return completed
