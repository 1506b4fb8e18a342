#!/usr/bin/env python3
"""
Level repository.
Loads every definition in a content folder and picks one at random.
"""

import dataclasses
import random
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Tuple, Union

from rich.console import Console
from rich.markup import escape

from ..errors import FileIOError, LevelLoadError, NoValidLevels
from .level import Level, parse_level
from .scripting import ScriptingContext


@dataclass
class LoadReport:
    """Outcome of loading a content folder"""
    levels: List[Level] = field(default_factory=list)
    errors: List[Tuple[str, Exception]] = field(default_factory=list)


class LevelRepository:
    """Loads level definitions from a folder of files"""

    def __init__(
        self,
        scripting: ScriptingContext,
        rng: random.Random = None,
        console: Console = None,
    ):
        self.scripting = scripting
        self.rng = rng or random.Random()
        self.console = console or Console(stderr=True)

    def load_all(self, folder: Union[str, Path]) -> LoadReport:
        """
        Parse every file directly under folder.

        Subdirectories are skipped. A definition that fails to read or
        parse is recorded in the report and does not stop the others.

        Raises:
            FileIOError: If the folder itself cannot be listed
        """
        folder = Path(folder)
        try:
            entries = sorted(folder.iterdir())
        except OSError as e:
            raise FileIOError(f"Failed to read content folder {folder}: {e}") from e

        report = LoadReport()
        for path in entries:
            if not path.is_file():
                continue

            try:
                level = parse_level(self._read(path), self.scripting)
            except (LevelLoadError, FileIOError) as e:
                report.errors.append((str(path), e))
                continue

            report.levels.append(dataclasses.replace(level, source_id=str(path)))

        return report

    def load_random(self, folder: Union[str, Path]) -> Level:
        """
        Load the folder and choose one level uniformly at random.

        Raises:
            NoValidLevels: If no definition loaded (failures are printed first)
            FileIOError: If the folder cannot be listed
        """
        report = self.load_all(folder)

        if not report.levels:
            self.console.print("[red]Failed to load any levels. Errors:[/red]")
            for path, err in report.errors:
                self.console.print(f"  {escape(path)}: {escape(str(err))}")
            raise NoValidLevels(str(folder), report.errors)

        return self.rng.choice(report.levels)

    def _read(self, path: Path) -> str:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return f.read()
        except (OSError, UnicodeDecodeError) as e:
            raise FileIOError(f"Failed to read file {path}: {e}") from e
