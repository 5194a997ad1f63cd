from __future__ import annotations

from typing import Optional


class OpenurlError(Exception):
    """Base exception for openurl resolution and dispatch errors."""

    exit_code = 1


class ConfigError(OpenurlError):
    """Raised when the configuration file cannot be read or validated."""

    pass


class ParseError(OpenurlError):
    """Raised when an alias source is malformed."""

    def __init__(
        self,
        line: int,
        reason: str,
        alias: Optional[str] = None,
        source: Optional[str] = None,
    ):
        self.line = line
        self.reason = reason
        self.alias = alias
        self.source = source
        where = f"{source}:{line}" if source else f"line {line}"
        subject = f" (alias '{alias}')" if alias else ""
        super().__init__(f"{where}{subject}: {reason}")


class InvalidOptionError(OpenurlError):
    """Raised when an alias or URL option carries a bad value."""

    def __init__(self, alias: str, key: str, value: Optional[str]):
        self.alias = alias
        self.key = key
        self.value = value
        super().__init__(f"invalid value {value!r} for option '{key}' in alias '{alias}'")


class HandlerNotConfiguredError(OpenurlError):
    """Raised when a handler name has no command in the registry."""

    def __init__(self, handler: str):
        self.handler = handler
        super().__init__(f"handler '{handler}' is not configured")


class HandlerNotFoundError(OpenurlError):
    """Raised when a configured handler command cannot be executed."""

    def __init__(self, handler: str, executable: str):
        self.handler = handler
        self.executable = executable
        super().__init__(f"handler '{handler}': command '{executable}' not found")


class MalformedTemplateError(OpenurlError):
    """Raised when a URL template lacks the expected search placeholder."""

    def __init__(self, template: str):
        self.template = template
        super().__init__(f"URL template has no search placeholder: {template}")


class EmptyQueryError(OpenurlError):
    """Raised when a search placeholder needs a query but none was given."""

    def __init__(self, template: str):
        self.template = template
        super().__init__(f"no search terms given for {template}")


class IncompatibleOptionsError(OpenurlError):
    """Raised when mutually exclusive options are combined."""

    pass


class AliasNotFoundError(OpenurlError):
    """Raised in multi-alias mode when no argument names an alias."""

    pass


class DispatchError(OpenurlError):
    """Raised when a viewer process or clipboard command cannot be started."""

    pass
