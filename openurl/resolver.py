from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Optional

from .aliases import AliasStore
from .config import Settings
from .detect import UrlDetector
from .errors import AliasNotFoundError, IncompatibleOptionsError, OpenurlError
from .grouping import group
from .handlers import HandlerRegistry
from .launcher import Launcher, dispatch
from .logging_utils import create_session_id, get_logger, log_resolution
from .models import ResolveResult
from .options import CliOverride, EffectiveConfig, OptionMerger
from .placeholder import has_placeholder, substitute
from .routing import Mode, RoutingPolicy

logger = get_logger("resolver")


@dataclass(frozen=True)
class Invocation:
    """One command-line request, after flag parsing."""

    args: tuple[str, ...]
    multi_alias: bool = False
    clipboard: bool = False
    dry_run: bool = False
    cli_override: Optional[CliOverride] = None


@dataclass(frozen=True)
class Resolver:
    """Turns an invocation into dispatch actions and carries them out.

    Resolution order:
    1. literal URLs in the arguments (direct mode)
    2. alias lookup (single or multi-alias)
    3. search fallback, when enabled

    Everything is resolved and validated before the first process starts,
    so a failing alias in a batch opens nothing.
    """

    settings: Settings
    store: AliasStore
    launcher: Launcher
    registry: Optional[HandlerRegistry] = None

    def __post_init__(self):
        registry = self.registry or HandlerRegistry(self.settings.handlers)
        object.__setattr__(self, "registry", registry)
        object.__setattr__(self, "detector", UrlDetector(tuple(self.settings.tlds)))
        object.__setattr__(self, "routing_policy", RoutingPolicy(self.settings.search_if_not_found))
        object.__setattr__(
            self,
            "merger",
            OptionMerger(
                registry=registry,
                default_terminal=self.settings.default_terminal,
                command_exists=self.launcher.command_exists,
            ),
        )

    def defaults(self) -> EffectiveConfig:
        name = self.settings.default_gui
        return EffectiveConfig(handler_name=name, handler_kind=self.registry.kind(name))

    def resolve(self, invocation: Invocation) -> ResolveResult:
        args = list(invocation.args)
        override = invocation.cli_override
        if override is not None and override.is_empty():
            override = None
        logger.debug(f"resolving {args} (multi_alias={invocation.multi_alias})")

        # Step 1: literal URLs win over everything else
        direct_urls = self.detector.find_urls(args)
        lookup = None if direct_urls else self.store.resolve(args, invocation.multi_alias)
        decision = self.routing_policy.decide(direct_urls, lookup, invocation.multi_alias)
        logger.debug(f"routing: {decision.mode.value} ({decision.reason})")

        if decision.fatal:
            raise AliasNotFoundError(decision.reason)

        if decision.mode == Mode.NOT_FOUND:
            return ResolveResult(
                mode=decision.mode.value,
                found=False,
                remaining_args=args,
                reason=decision.reason,
            )

        defaults = self.defaults()
        resolved = []
        aliases = []
        remaining = args

        if decision.mode == Mode.DIRECT:
            if invocation.clipboard:
                raise IncompatibleOptionsError("clipboard output cannot be used with literal URLs")
            cfg = self.merger.merge(defaults, override)
            resolved = [(url, cfg) for url in direct_urls]
            remaining = []

        elif decision.mode == Mode.ALIAS:
            # Step 2: every URL entry of every matched alias
            remaining = list(lookup.remaining)
            for alias in lookup.matched:
                aliases.append(alias.name)
                for entry in alias.url_entries:
                    if remaining and not has_placeholder(entry.template):
                        logger.debug(f"alias '{alias.name}': {entry.template} takes no search terms")
                    url = substitute(entry.template, remaining)
                    resolved.append((url, self.merger.merge(defaults, override, alias, entry)))

        else:
            # Step 3: search fallback with the whole argument list as query
            url = substitute(self.settings.search_url, args, expect_placeholder=True, require_query=True)
            resolved = [(url, self.merger.merge(defaults, override))]

        actions = group(resolved)
        result = ResolveResult(
            mode=decision.mode.value,
            found=True,
            actions=actions,
            aliases=aliases,
            remaining_args=remaining,
            reason=decision.reason,
        )
        if invocation.clipboard:
            result.clipboard_text = "\n".join(result.urls)
        logger.info(f"resolved {len(result.urls)} URL(s) into {len(actions)} action(s)")
        return result

    def run(self, invocation: Invocation) -> ResolveResult:
        """Resolve, then dispatch the actions or copy the URLs to the clipboard."""
        session_id = create_session_id()
        start_time = time.time()

        try:
            result = self.resolve(invocation)
            if result.found and not invocation.dry_run:
                if invocation.clipboard:
                    self.launcher.write_clipboard(result.clipboard_text)
                else:
                    dispatch(result.actions, self.launcher, self.registry, self.settings)
        except OpenurlError as e:
            log_resolution(
                logger, session_id, list(invocation.args), "error", False,
                (time.time() - start_time) * 1000, error=str(e)
            )
            raise

        log_resolution(
            logger, session_id, list(invocation.args), result.mode, result.found,
            (time.time() - start_time) * 1000,
            aliases=result.aliases,
            actions=result.actions,
            clipboard=invocation.clipboard,
            dry_run=invocation.dry_run,
        )
        return result
