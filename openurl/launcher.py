"""Viewer process launching.

The resolver only talks to the ``Launcher`` interface so tests can record
dispatches without opening windows. ``SystemLauncher`` starts real processes:
GUI handlers detached (fire-and-forget), terminal handlers inside a new
terminal session whose shell also runs the handler's post command.
"""

from __future__ import annotations

import os
import shlex
import shutil
import subprocess
from abc import ABC, abstractmethod
from typing import Iterable, List

from .config import Settings
from .errors import ConfigError, DispatchError
from .handlers import HandlerRegistry
from .logging_utils import get_logger
from .models import HandlerEntry, HandlerKind, ResolvedAction

logger = get_logger("launcher")


class Launcher(ABC):
    """Process and clipboard collaborators used for dispatch."""

    @abstractmethod
    def spawn_gui(self, command: str, urls: List[str]) -> None:
        """Start a GUI viewer with all URLs as arguments, without waiting."""
        ...

    @abstractmethod
    def spawn_terminal_session(self, title: str, command: str) -> None:
        """Run a shell command line inside a new terminal window."""
        ...

    @abstractmethod
    def write_clipboard(self, text: str) -> None:
        ...

    @abstractmethod
    def command_exists(self, path: str) -> bool:
        ...


class SystemLauncher(Launcher):

    def __init__(self, settings: Settings):
        self.settings = settings

    def spawn_gui(self, command: str, urls: List[str]) -> None:
        argv = shlex.split(command) + list(urls)
        logger.debug(f"spawning GUI handler: {argv}")
        self._popen(argv)

    def spawn_terminal_session(self, title: str, command: str) -> None:
        try:
            line = self.settings.terminal_command.format(
                title=shlex.quote(title), command=shlex.quote(command)
            )
        except (KeyError, IndexError, ValueError) as e:
            raise ConfigError(f"bad terminal_command template: {e}") from e
        argv = shlex.split(line)
        logger.debug(f"spawning terminal session: {argv}")
        self._popen(argv)

    def write_clipboard(self, text: str) -> None:
        argv = shlex.split(self.settings.clipboard_command)
        try:
            subprocess.run(argv, input=text, text=True, check=True)
        except (OSError, subprocess.CalledProcessError) as e:
            raise DispatchError(f"clipboard command failed: {e}") from e

    def command_exists(self, path: str) -> bool:
        if os.path.isabs(path):
            return os.path.isfile(path) and os.access(path, os.X_OK)
        return shutil.which(path) is not None

    def _popen(self, argv: List[str]) -> None:
        try:
            subprocess.Popen(
                argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as e:
            raise DispatchError(f"cannot start '{argv[0]}': {e}") from e


def chain_post_command(command: str, entry: HandlerEntry) -> str:
    if entry.post_command.strip():
        return f"{command}; {entry.post_command}"
    return command


def build_session_command(entry: HandlerEntry, urls: Iterable[str]) -> str:
    command = " ".join([entry.command] + [shlex.quote(u) for u in urls])
    return chain_post_command(command, entry)


def build_dump_command(entry: HandlerEntry, url: str, page_forward: int, settings: Settings) -> str:
    pager = settings.pager
    if page_forward > 0:
        try:
            pager = settings.pager_forward.format(
                pager=settings.pager,
                pages=page_forward,
                lines=page_forward * settings.page_lines + 1,
            )
        except (KeyError, IndexError, ValueError) as e:
            raise ConfigError(f"bad pager_forward template: {e}") from e
    command = f"{entry.command} -dump {shlex.quote(url)} | {pager}"
    return chain_post_command(command, entry)


def session_title(action: ResolvedAction) -> str:
    first = action.urls[0]
    more = f" (+{len(action.urls) - 1})" if len(action.urls) > 1 else ""
    return f"openurl {action.handler_name}: {first}{more}"


def dispatch(
    actions: Iterable[ResolvedAction],
    launcher: Launcher,
    registry: HandlerRegistry,
    settings: Settings,
) -> int:
    """Start one viewer process per action; returns the number started.

    Every command line is built before the first process starts, so a bad
    template or handler leaves nothing half-dispatched.
    """
    planned = []
    for action in actions:
        entry = registry.get(action.handler_name)
        if action.dump:
            command = build_dump_command(entry, action.urls[0], action.dump_page_forward, settings)
            planned.append((HandlerKind.TERMINAL, session_title(action), command, action.urls))
        elif action.handler_kind == HandlerKind.GUI:
            planned.append((HandlerKind.GUI, None, entry.command, action.urls))
        else:
            command = build_session_command(entry, action.urls)
            planned.append((HandlerKind.TERMINAL, session_title(action), command, action.urls))

    for kind, title, command, urls in planned:
        if kind == HandlerKind.GUI:
            launcher.spawn_gui(command, urls)
        else:
            launcher.spawn_terminal_session(title, command)
    return len(planned)
