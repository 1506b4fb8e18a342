"""
Shared fixtures for the leveltutor test suite.
"""

import io

import pytest
from rich.console import Console
from watchdog.events import FileModifiedEvent

from leveltutor.engine import Notification, ScriptingContext
from leveltutor.errors import WatchError


@pytest.fixture
def scripting():
    """A fresh Lua context"""
    return ScriptingContext()


@pytest.fixture
def console():
    """A console that records output to a string buffer"""
    return Console(file=io.StringIO(), width=300, color_system=None)


def console_output(console: Console) -> str:
    return console.file.getvalue()


@pytest.fixture
def output():
    """Read back everything printed to a recording console"""
    return console_output


@pytest.fixture
def write_level(tmp_path):
    """Write a level definition into tmp_path/content and return its path"""
    content_dir = tmp_path / 'content'
    content_dir.mkdir(exist_ok=True)

    def write(name: str, text: str):
        path = content_dir / name
        path.write_text(text, encoding='utf-8')
        return path

    return write


class FakeSubscription:
    """
    Stands in for a watch subscription.

    Each step is (content, notification). receive() writes the content to
    the target (when not None) and hands back the notification. Once the
    steps run out it raises WatchError, like a dead observer would.
    """

    def __init__(self, steps):
        self.steps = list(steps)
        self.target_path = None
        self.subscribed = []
        self.exited = 0

    def __call__(self, target_path):
        self.target_path = target_path
        self.subscribed.append(target_path)
        return self

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.exited += 1
        return False

    def receive(self):
        if not self.steps:
            raise WatchError("no more notifications")
        content, notification = self.steps.pop(0)
        if isinstance(notification, BaseException):
            raise notification
        if content is not None:
            with open(self.target_path, 'w', encoding='utf-8', newline='') as f:
                f.write(content)
        return notification


@pytest.fixture
def fake_watch():
    """Build a FakeSubscription; edit(content) makes a modification step"""
    return FakeSubscription


def edit(content: str, path: str = 'unused'):
    """A step that writes content and reports a modification"""
    return (content, Notification(event=FileModifiedEvent(path)))


@pytest.fixture
def edit_step():
    return edit
