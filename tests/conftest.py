import logging

import pytest

from openurl.aliases import AliasSource, AliasStore
from openurl.config import Settings
from openurl.launcher import Launcher
from openurl.resolver import Resolver

SAMPLE_ALIASES = """\
# sample aliases
gh
    https://github.com/{search}

wiki<>dump
    https://en.wikipedia.org/wiki/{search}

news<>browser=gui2
    https://news.ycombinator.com<|>https://lobste.rs<>browser=gui3
    https://old.reddit.com/r/programming<>dump+2
"""

EXTRA_ALIASES = """\
a
    https://a.example/{search}
b<>browser=gui2
    https://b.example/?q={search}
ddg
    https://duckduckgo.com/?q={search\\+}
man<>browser=term2
    https://man.archlinux.org/search?q={search}
broken<>browser=gui7
    https://broken.example/{search}
"""

HANDLERS = {
    "gui1": "firefox",
    "gui2": "chromium",
    "gui3": "links -g",
    "term1": "w3m",
    "term2": {"command": "lynx", "post_command": "clear"},
}


class RecordingLauncher(Launcher):
    """Launcher double that records dispatches instead of starting processes."""

    def __init__(self, missing=()):
        self.missing = set(missing)
        self.gui_calls = []
        self.sessions = []
        self.clipboard = []

    def spawn_gui(self, command, urls):
        self.gui_calls.append((command, list(urls)))

    def spawn_terminal_session(self, title, command):
        self.sessions.append((title, command))

    def write_clipboard(self, text):
        self.clipboard.append(text)

    def command_exists(self, path):
        return path not in self.missing

    @property
    def spawned(self):
        return len(self.gui_calls) + len(self.sessions)


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logger = logging.getLogger("openurl")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)


@pytest.fixture
def settings():
    return Settings(
        alias_files=[],
        handlers=HANDLERS,
        default_gui="gui1",
        default_terminal="term1",
        search_url="https://duckduckgo.com/?q={search\\+}",
        search_if_not_found=True,
    )


@pytest.fixture
def store():
    return AliasStore.load([
        AliasSource("sample", SAMPLE_ALIASES),
        AliasSource("extra", EXTRA_ALIASES),
    ])


@pytest.fixture
def launcher():
    return RecordingLauncher()


@pytest.fixture
def resolver(settings, store, launcher):
    return Resolver(settings=settings, store=store, launcher=launcher)
