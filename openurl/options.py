from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, Iterable, Optional

from .aliases import AliasDefinition, Option, UrlEntry
from .errors import InvalidOptionError
from .handlers import HandlerRegistry
from .models import HandlerKind


@dataclass(frozen=True)
class EffectiveConfig:
    """Dispatch configuration resolved for one URL."""

    handler_name: str
    handler_kind: HandlerKind
    dump: bool = False
    dump_page_forward: int = 0

    def as_options(self) -> tuple[Option, ...]:
        """Express this config in alias option syntax."""
        dump = Option("dump", str(self.dump_page_forward)) if self.dump else Option("nodump")
        return (Option("browser", self.handler_name), dump)


@dataclass(frozen=True)
class CliOverride:
    """Handler and dump settings given explicitly on the command line.

    Only fields that are not None take part in the override, so a dump-only
    override leaves the alias handler alone.
    """

    handler_name: Optional[str] = None
    dump: Optional[bool] = None
    dump_page_forward: Optional[int] = None

    def is_empty(self) -> bool:
        return self.handler_name is None and self.dump is None and self.dump_page_forward is None


@dataclass(frozen=True)
class OptionMerger:
    """Combine defaults, alias options, URL options and CLI flags.

    Precedence (low -> high): defaults, alias options, URL options, CLI
    override. Only the handler name is tracked while merging; its kind is
    looked up once the override has been applied, so a handler replaced on
    the command line is never checked. A dump request on a GUI handler is
    then moved to the default terminal handler, and the final handler is
    checked against the registry.
    """

    registry: HandlerRegistry
    default_terminal: str
    command_exists: Callable[[str], bool]

    def merge(
        self,
        defaults: EffectiveConfig,
        cli_override: Optional[CliOverride] = None,
        alias: Optional[AliasDefinition] = None,
        url: Optional[UrlEntry] = None,
    ) -> EffectiveConfig:
        alias_name = alias.name if alias else "<direct>"
        cfg = defaults
        if alias is not None:
            cfg = self._apply(cfg, alias.options, alias_name)
        if url is not None:
            cfg = self._apply(cfg, url.options, alias_name)
        if cli_override is not None:
            cfg = self._apply_override(cfg, cli_override)
        cfg = replace(cfg, handler_kind=self.registry.kind(cfg.handler_name))

        if cfg.dump and cfg.handler_kind == HandlerKind.GUI:
            cfg = replace(
                cfg,
                handler_name=self.default_terminal,
                handler_kind=self.registry.kind(self.default_terminal),
            )

        self.registry.validate(cfg.handler_name, self.command_exists)
        return cfg

    def _apply(self, cfg: EffectiveConfig, options: Iterable[Option], alias_name: str) -> EffectiveConfig:
        for opt in options:
            if opt.key == "browser":
                if not opt.value:
                    raise InvalidOptionError(alias_name, opt.key, opt.value)
                cfg = replace(cfg, handler_name=opt.value)
            elif opt.key == "dump":
                cfg = replace(cfg, dump=True, dump_page_forward=_page_forward(opt, alias_name))
            elif opt.key == "nodump":
                cfg = replace(cfg, dump=False, dump_page_forward=0)
            # unknown keys are ignored
        return cfg

    def _apply_override(self, cfg: EffectiveConfig, override: CliOverride) -> EffectiveConfig:
        if override.handler_name is not None:
            cfg = replace(cfg, handler_name=override.handler_name)
        if override.dump is not None:
            cfg = replace(cfg, dump=override.dump)
            if not override.dump:
                cfg = replace(cfg, dump_page_forward=0)
        if override.dump_page_forward is not None:
            cfg = replace(cfg, dump=True, dump_page_forward=override.dump_page_forward)
        return cfg


def _page_forward(opt: Option, alias_name: str) -> int:
    if opt.value is None:
        return 0
    try:
        pages = int(opt.value)
    except ValueError:
        raise InvalidOptionError(alias_name, opt.key, opt.value) from None
    if pages < 0:
        raise InvalidOptionError(alias_name, opt.key, opt.value)
    return pages
