from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field


class HandlerKind(str, Enum):
    GUI = "gui"
    TERMINAL = "term"


class HandlerEntry(BaseModel):
    command: str = ""
    post_command: str = ""  # chained after a terminal session's command exits


class ResolvedAction(BaseModel):
    urls: List[str] = Field(..., min_length=1)
    handler_name: str
    handler_kind: HandlerKind
    dump: bool = False
    dump_page_forward: int = Field(0, ge=0)


class ResolveResult(BaseModel):
    mode: str  # "direct" | "alias" | "search" | "not_found"
    found: bool
    actions: List[ResolvedAction] = []
    aliases: List[str] = []
    remaining_args: List[str] = []
    reason: Optional[str] = None
    clipboard_text: Optional[str] = None

    @property
    def urls(self) -> List[str]:
        return [url for action in self.actions for url in action.urls]
