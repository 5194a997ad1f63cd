from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from .detect import DEFAULT_TLDS
from .errors import ConfigError
from .models import HandlerEntry

# Load environment variables from .env (if present)
load_dotenv()

DEFAULT_CONFIG_FILE = Path("~/.config/openurl/config.yml")
DEFAULT_ALIASES_FILE = "~/.config/openurl/aliases"


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name, "")
    if not raw.strip():
        return list(default)
    return [p for p in raw.split(os.pathsep) if p.strip()]


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):
    # Alias definition files, read in this order
    alias_files: List[str] = Field(default_factory=lambda: _env_list("OPENURL_ALIASES", [DEFAULT_ALIASES_FILE]))

    # Symbolic handler name (gui1..gui9, term1..term7) -> command line
    handlers: Dict[str, HandlerEntry] = Field(default_factory=dict)

    default_gui: str = Field(default_factory=lambda: os.getenv("OPENURL_DEFAULT_GUI", "gui1"))
    default_terminal: str = Field(default_factory=lambda: os.getenv("OPENURL_DEFAULT_TERMINAL", "term1"))

    # Used when no alias matches and search_if_not_found is on
    search_url: str = Field(
        default_factory=lambda: os.getenv("OPENURL_SEARCH_URL", "https://duckduckgo.com/?q={search\\+}")
    )
    search_if_not_found: bool = Field(default_factory=lambda: _env_flag("OPENURL_SEARCH_IF_NOT_FOUND", True))

    # Top-level domains that make a bare word look like a URL
    tlds: List[str] = Field(default_factory=lambda: list(DEFAULT_TLDS))

    # {title} and {command} are shell-quoted before substitution
    terminal_command: str = "xterm -T {title} -e sh -c {command}"
    clipboard_command: str = "xclip -selection clipboard"

    # Dump output is piped into the pager; pager_forward is used when paging ahead
    pager: str = "less"
    pager_forward: str = "{pager} +{lines}g"
    page_lines: int = Field(24, gt=0)

    log_level: str = Field(default_factory=lambda: os.getenv("OPENURL_LOG_LEVEL", "WARNING"))

    @field_validator("handlers", mode="before")
    @classmethod
    def _expand_handlers(cls, value):
        if value is None:
            return {}
        if not isinstance(value, dict):
            raise ValueError("handlers must be a mapping of name -> command")
        out = {}
        for name, entry in value.items():
            if entry is None:
                entry = {}
            elif isinstance(entry, str):
                entry = {"command": entry}
            out[str(name)] = entry
        return out

    @field_validator("terminal_command")
    @classmethod
    def _check_terminal_command(cls, value: str) -> str:
        try:
            value.format(title="t", command="c")
        except (KeyError, IndexError, ValueError) as e:
            raise ValueError(f"terminal_command accepts only {{title}} and {{command}}: {e}") from e
        return value

    @field_validator("pager_forward")
    @classmethod
    def _check_pager_forward(cls, value: str) -> str:
        try:
            value.format(pager="less", pages=1, lines=1)
        except (KeyError, IndexError, ValueError) as e:
            raise ValueError(f"pager_forward accepts only {{pager}}, {{pages}} and {{lines}}: {e}") from e
        return value

    def alias_paths(self) -> List[Path]:
        return [Path(p).expanduser() for p in self.alias_files]


def load_settings(config_file: Optional[Path] = None) -> Settings:
    """
    Build Settings from the YAML config file and the environment.

    Args:
        config_file: explicit config path; falls back to $OPENURL_CONFIG,
            then ~/.config/openurl/config.yml when that exists

    Returns:
        Settings: environment defaults overlaid with the file's keys

    An explicitly requested file that is missing is an error; a missing
    default file just yields the environment defaults.
    """
    explicit = config_file is not None or bool(os.getenv("OPENURL_CONFIG", "").strip())
    path = Path(config_file or os.getenv("OPENURL_CONFIG", "") or DEFAULT_CONFIG_FILE).expanduser()

    data: dict = {}
    if path.exists():
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"cannot read config {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"config {path} must be a mapping")
    elif explicit:
        raise ConfigError(f"config file not found: {path}")

    try:
        return Settings(**data)
    except ValidationError as e:
        raise ConfigError(f"invalid config {path}: {e}") from e
