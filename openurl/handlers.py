from __future__ import annotations

import shlex
from dataclasses import dataclass
from typing import Callable, Mapping, Optional

from .errors import ConfigError, HandlerNotConfiguredError, HandlerNotFoundError
from .models import HandlerEntry, HandlerKind

GUI_PREFIX = "gui"
TERMINAL_PREFIX = "term"


def handler_kind(name: str) -> Optional[HandlerKind]:
    """Infer the handler kind from its symbolic name (gui1..gui9, term1..term7)."""
    if name.startswith(GUI_PREFIX) and name[len(GUI_PREFIX):].isdigit():
        return HandlerKind.GUI
    if name.startswith(TERMINAL_PREFIX) and name[len(TERMINAL_PREFIX):].isdigit():
        return HandlerKind.TERMINAL
    return None


def gui_name(number: int) -> str:
    return f"{GUI_PREFIX}{number}"


def terminal_name(number: int) -> str:
    return f"{TERMINAL_PREFIX}{number}"


@dataclass(frozen=True)
class HandlerRegistry:
    """Symbolic handler name -> configured command line."""

    entries: Mapping[str, HandlerEntry]

    def get(self, name: str) -> HandlerEntry:
        entry = self.entries.get(name)
        if entry is None or not entry.command.strip() or handler_kind(name) is None:
            raise HandlerNotConfiguredError(name)
        return entry

    def kind(self, name: str) -> HandlerKind:
        kind = handler_kind(name)
        if kind is None:
            raise HandlerNotConfiguredError(name)
        return kind

    def executable(self, name: str) -> str:
        try:
            return shlex.split(self.get(name).command)[0]
        except ValueError as e:
            raise ConfigError(f"handler '{name}' has a malformed command: {e}") from e

    def validate(self, name: str, command_exists: Callable[[str], bool]) -> HandlerEntry:
        entry = self.get(name)
        executable = self.executable(name)
        if not command_exists(executable):
            raise HandlerNotFoundError(name, executable)
        return entry
