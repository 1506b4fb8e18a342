#!/usr/bin/env python3
"""
leveltutor - Interactive edit-a-file tutorial

Usage:
    leveltutor                         # Play random levels from ./content
    leveltutor --content levels/       # Use another level folder
    leveltutor --target notes.txt      # Edit a different file
    leveltutor --once                  # Play a single level
    leveltutor --check                 # Validate every level definition
    leveltutor --set content_dir=levels
"""

import sys
import argparse
from pathlib import Path
from typing import List, Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from . import __version__
from .config import DEFAULTS, resolve_settings, set_config_value
from .errors import LevelTutorError
from .engine import LevelRepository, ScriptingContext, TutorialRunner


def check_levels(content_dir: str, console: Console) -> int:
    """Parse every definition and print what loaded and what failed"""
    repository = LevelRepository(ScriptingContext(), console=console)
    report = repository.load_all(content_dir)

    table = Table(title=f"Levels in {escape(content_dir)}")
    table.add_column("Definition")
    table.add_column("Status")
    table.add_column("Details")

    for level in report.levels:
        captures = ", ".join(level.capture_matchers) or "-"
        table.add_row(escape(Path(level.display_name).name), "[green]ok[/green]", f"captures: {escape(captures)}")
    for path, err in report.errors:
        table.add_row(escape(Path(path).name), "[red]error[/red]", escape(f"{type(err).__name__}: {err}"))

    console.print(table)

    if not report.levels:
        console.print("[red]No valid levels found.[/red]")
        return 1
    return 0


def _set_option(assignment: str, console: Console) -> int:
    key, sep, value = assignment.partition('=')
    key = key.strip()
    if not sep or key not in DEFAULTS:
        console.print(f"[red]Expected KEY=VALUE with KEY one of: {', '.join(DEFAULTS)}[/red]")
        return 2
    set_config_value(key, value.strip())
    console.print(f"Saved {escape(key)} = {escape(value.strip())}")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point"""

    parser = argparse.ArgumentParser(
        prog='leveltutor',
        description='leveltutor - learn by editing a file until each level is complete',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  leveltutor                          # Play random levels forever
  leveltutor --once                   # Play one level, then exit
  leveltutor --check                  # List valid and broken level files
  leveltutor --set tutorial_path=t.txt  # Remember a different edit target
        """
    )

    parser.add_argument('--content', metavar='DIR',
                        help=f"Folder of level definitions (default: {DEFAULTS['content_dir']})")
    parser.add_argument('--target', metavar='FILE',
                        help=f"File to edit (default: {DEFAULTS['tutorial_path']})")
    parser.add_argument('--once', action='store_true',
                        help='Stop after completing one level')
    parser.add_argument('--check', action='store_true',
                        help='Validate level definitions and exit')
    parser.add_argument('--set', metavar='KEY=VALUE',
                        help='Save a setting to the config file')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

    args = parser.parse_args(argv)
    console = Console()

    if args.set:
        return _set_option(args.set, console)

    settings = resolve_settings({
        'content_dir': args.content,
        'tutorial_path': args.target,
    })

    try:
        if args.check:
            return check_levels(settings['content_dir'], console)

        runner = TutorialRunner(
            content_dir=settings['content_dir'],
            target_path=settings['tutorial_path'],
            console=console,
        )
        runner.run(max_sessions=1 if args.once else None)
    except LevelTutorError as e:
        console.print(f"[red]Error: {escape(str(e))}[/red]")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
