from __future__ import annotations

from typing import Iterable

from .models import ResolvedAction
from .options import EffectiveConfig


def group(resolved: Iterable[tuple[str, EffectiveConfig]]) -> list[ResolvedAction]:
    """Batch resolved URLs into dispatch actions.

    Non-dump URLs sharing a handler open in one process, in first-seen
    handler order. Every dump URL gets its own action, since each page is
    rendered in a separate pager session. Non-dump actions come first so
    interactive windows are not held back by paging sessions.
    """
    batches: dict[tuple[str, bool], ResolvedAction] = {}
    dumps: list[ResolvedAction] = []

    for url, cfg in resolved:
        if cfg.dump:
            dumps.append(
                ResolvedAction(
                    urls=[url],
                    handler_name=cfg.handler_name,
                    handler_kind=cfg.handler_kind,
                    dump=True,
                    dump_page_forward=cfg.dump_page_forward,
                )
            )
            continue

        key = (cfg.handler_name, False)
        action = batches.get(key)
        if action is None:
            batches[key] = ResolvedAction(
                urls=[url],
                handler_name=cfg.handler_name,
                handler_kind=cfg.handler_kind,
            )
        else:
            action.urls.append(url)

    return list(batches.values()) + dumps
