from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional, Sequence

from .errors import ParseError

OPTION_MARKER = "<>"
ENTRY_MARKER = "<|>"

NAME_RE = re.compile(r"^[^\s<>]+$")
OPTION_RE = re.compile(r"^([A-Za-z][\w.-]*)(?:([=+])(\S+))?$")


@dataclass(frozen=True)
class Option:
    key: str
    value: Optional[str] = None

    def __str__(self) -> str:
        if self.value is None:
            return self.key
        sep = "+" if self.key == "dump" else "="
        return f"{self.key}{sep}{self.value}"


@dataclass(frozen=True)
class UrlEntry:
    template: str
    options: tuple[Option, ...] = ()


@dataclass(frozen=True)
class AliasDefinition:
    name: str
    url_entries: tuple[UrlEntry, ...]
    options: tuple[Option, ...] = ()
    source: Optional[str] = None
    line: int = 0


@dataclass(frozen=True)
class AliasSource:
    """One alias definition text, e.g. the contents of an aliases file."""

    name: str
    text: str

    @classmethod
    def from_path(cls, path: Path) -> "AliasSource":
        path = Path(path).expanduser()
        return cls(name=str(path), text=path.read_text(encoding="utf-8"))


@dataclass(frozen=True)
class AliasLookup:
    matched: tuple[AliasDefinition, ...]
    consumed: int
    remaining: tuple[str, ...]

    @property
    def found(self) -> bool:
        return bool(self.matched)


def parse_options(chunks: Sequence[str], line_no: int, alias: str, source: str) -> tuple[Option, ...]:
    options = []
    for chunk in chunks:
        chunk = chunk.strip()
        if not chunk or "<" in chunk or ">" in chunk:
            raise ParseError(line_no, "unterminated option list", alias, source)
        m = OPTION_RE.match(chunk)
        if not m:
            raise ParseError(line_no, f"malformed option '{chunk}'", alias, source)
        options.append(Option(key=m.group(1), value=m.group(3)))
    return tuple(options)


def parse_source(source: AliasSource) -> list[AliasDefinition]:
    """
    Parse the alias definitions of one source.

    Args:
        source: alias text with its display name

    Returns:
        list[AliasDefinition]: aliases in definition order

    Flow:
        1. skip blank lines and '#' comments
        2. a line starting in column 0 opens a new alias header
        3. indented lines add URL entries to the open alias
        4. an alias closed without URL entries is an error
    """
    aliases: list[AliasDefinition] = []
    header: Optional[tuple[str, tuple[Option, ...], int]] = None
    entries: list[UrlEntry] = []

    def _close() -> None:
        if header is None:
            return
        name, options, line_no = header
        if not entries:
            raise ParseError(line_no, "alias has no URL entries", name, source.name)
        aliases.append(
            AliasDefinition(
                name=name,
                url_entries=tuple(entries),
                options=options,
                source=source.name,
                line=line_no,
            )
        )

    for line_no, raw in enumerate(source.text.splitlines(), start=1):
        stripped = raw.strip()
        if not stripped or stripped.startswith("#"):
            continue

        if not raw[0].isspace():
            _close()
            name, *chunks = stripped.split(OPTION_MARKER)
            name = name.strip()
            if not NAME_RE.match(name):
                if "<" in name or ">" in name:
                    raise ParseError(line_no, "unterminated option list", name, source.name)
                raise ParseError(line_no, f"malformed alias name '{name}'", None, source.name)
            header = (name, parse_options(chunks, line_no, name, source.name), line_no)
            entries = []
            continue

        if header is None:
            raise ParseError(line_no, "URL entry outside of an alias", None, source.name)

        for item in stripped.split(ENTRY_MARKER):
            template, *chunks = item.split(OPTION_MARKER)
            template = template.strip()
            if not template:
                raise ParseError(line_no, "empty URL entry", header[0], source.name)
            entries.append(UrlEntry(template, parse_options(chunks, line_no, header[0], source.name)))

    _close()
    return aliases


@dataclass(frozen=True)
class AliasStore:
    """Alias lookup table, read-only once loaded."""

    aliases: dict[str, AliasDefinition] = field(default_factory=dict)

    @classmethod
    def load(cls, sources: Iterable[AliasSource]) -> "AliasStore":
        table: dict[str, AliasDefinition] = {}
        for source in sources:
            for alias in parse_source(source):
                if alias.name in table:
                    first = table[alias.name]
                    raise ParseError(
                        alias.line,
                        f"duplicate alias name (first defined at {first.source}:{first.line})",
                        alias.name,
                        source.name,
                    )
                table[alias.name] = alias
        return cls(aliases=table)

    @classmethod
    def from_files(cls, paths: Iterable[Path]) -> "AliasStore":
        return cls.load(AliasSource.from_path(p) for p in paths)

    def __contains__(self, name: str) -> bool:
        return name in self.aliases

    def __len__(self) -> int:
        return len(self.aliases)

    def get(self, name: str) -> Optional[AliasDefinition]:
        return self.aliases.get(name)

    def names(self) -> list[str]:
        return list(self.aliases)

    def resolve(self, args: Sequence[str], multi_alias: bool = False) -> AliasLookup:
        """
        Match leading arguments against alias names.

        Single-alias mode only tests the first argument. Multi-alias mode
        consumes arguments while they name aliases and stops at the first
        one that does not. Matching is exact and case-sensitive.
        """
        matched: list[AliasDefinition] = []
        for arg in args:
            alias = self.aliases.get(arg)
            if alias is None:
                break
            matched.append(alias)
            if not multi_alias:
                break
        consumed = len(matched)
        return AliasLookup(matched=tuple(matched), consumed=consumed, remaining=tuple(args[consumed:]))
