"""
Presenters for openurl
Render alias listings and resolved actions as plain text for the terminal
"""

from __future__ import annotations

from typing import Iterable, List

from .aliases import AliasDefinition, Option
from .models import ResolveResult


class BasePresenter:
    """Base presenter with common formatting utilities"""

    def format_options(self, options: Iterable[Option]) -> str:
        """Render options the way they are written in alias files"""
        return ",".join(str(o) for o in options)

    def truncate(self, text: str, width: int = 80) -> str:
        if len(text) <= width:
            return text
        return text[:width - 3] + "..."


class AliasListPresenter(BasePresenter):
    """Convert alias definitions to an aligned listing"""

    def to_text(self, aliases: List[AliasDefinition]) -> str:
        if not aliases:
            return "No aliases defined."

        width = max(len(a.name) for a in aliases)
        lines = [f"{len(aliases)} aliases", ""]

        for alias in aliases:
            opts = self.format_options(alias.options)
            head = f"{alias.name:<{width}}"
            if opts:
                head += f"  [{opts}]"
            lines.append(head)

            for entry in alias.url_entries:
                line = " " * (width + 2) + self.truncate(entry.template)
                entry_opts = self.format_options(entry.options)
                if entry_opts:
                    line += f"  [{entry_opts}]"
                lines.append(line)

        return "\n".join(lines)


class ActionsPresenter(BasePresenter):
    """Convert a resolve result to a dry-run report"""

    def to_text(self, result: ResolveResult) -> str:
        if not result.found:
            return result.reason or "nothing to open"

        header = f"mode: {result.mode}"
        if result.aliases:
            header += f" ({', '.join(result.aliases)})"
        lines = [header]

        if result.clipboard_text is not None:
            lines.append("clipboard:")
            lines.extend(f"  {url}" for url in result.urls)
            return "\n".join(lines)

        for i, action in enumerate(result.actions, 1):
            desc = f"{action.handler_name} ({action.handler_kind.value})"
            if action.dump:
                desc += f" dump+{action.dump_page_forward}"
            lines.append(f"{i}. {desc}")
            lines.extend(f"     {url}" for url in action.urls)

        return "\n".join(lines)


# Factory function for easy access
def create_presenter(content_type: str) -> BasePresenter:
    """Create appropriate presenter for content type"""
    presenters = {
        'aliases': AliasListPresenter(),
        'actions': ActionsPresenter(),
    }
    if content_type not in presenters:
        raise ValueError(f"Unknown content type: {content_type}")
    return presenters[content_type]
