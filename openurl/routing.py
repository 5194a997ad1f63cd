from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

from .aliases import AliasLookup


class Mode(str, Enum):
    """Resolution branches, evaluated in declaration order."""
    DIRECT = "direct"             # Arguments already contain literal URLs
    ALIAS = "alias"               # Leading argument(s) name aliases
    SEARCH = "search"             # No alias; query the default search URL
    NOT_FOUND = "not_found"       # No alias and search fallback disabled
    NO_ALIASES = "no_aliases"     # Multi-alias mode matched nothing


@dataclass(frozen=True)
class RoutingDecision:
    """Result of routing policy decision."""
    mode: Mode
    reason: Optional[str] = None

    @property
    def fatal(self) -> bool:
        return self.mode == Mode.NO_ALIASES


@dataclass(frozen=True)
class RoutingPolicy:
    """Policy deciding which resolution branch handles an invocation.

    - Literal URLs anywhere in the arguments: open them directly
    - Alias match: alias mode
    - Otherwise: search fallback when enabled, "not found" when not;
      multi-alias mode never falls back
    """

    search_if_not_found: bool = True

    def decide(
        self,
        direct_urls: Sequence[str],
        lookup: Optional[AliasLookup],
        multi_alias: bool = False,
    ) -> RoutingDecision:
        if direct_urls:
            return RoutingDecision(Mode.DIRECT, reason=f"{len(direct_urls)} literal URL(s) in arguments")

        if lookup is not None and lookup.found:
            names = ", ".join(a.name for a in lookup.matched)
            return RoutingDecision(Mode.ALIAS, reason=f"alias match: {names}")

        if multi_alias:
            return RoutingDecision(Mode.NO_ALIASES, reason="no aliases found")

        if self.search_if_not_found:
            return RoutingDecision(Mode.SEARCH, reason="alias not found, searching")

        return RoutingDecision(Mode.NOT_FOUND, reason="alias not found")
