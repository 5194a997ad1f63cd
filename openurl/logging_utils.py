import logging
import sys
import time
from typing import Optional

ROOT_LOGGER = "openurl"


def setup_logger(name: str = ROOT_LOGGER, level: str = "WARNING") -> logging.Logger:
    """Setup the openurl logger writing to stderr (stdout carries tool output)."""
    logger = logging.getLogger(name)

    if not logger.handlers:  # Avoid duplicate handlers
        handler = logging.StreamHandler(sys.stderr)
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
    return logger


def get_logger(component: str) -> logging.Logger:
    """Child logger of the openurl root; inherits its handler and level."""
    return logging.getLogger(f"{ROOT_LOGGER}.{component}")


def log_resolution(logger: logging.Logger,
                   session_id: str,
                   args: list,
                   mode: str,
                   success: bool,
                   duration_ms: float,
                   aliases: Optional[list] = None,
                   actions: Optional[list] = None,
                   clipboard: bool = False,
                   dry_run: bool = False,
                   error: Optional[str] = None) -> None:
    """Log one invocation's outcome in a structured format."""

    log_data = {
        "session_id": session_id,
        "args": args,
        "mode": mode,
        "success": success,
        "duration_ms": round(duration_ms, 1)
    }

    if aliases:
        log_data["aliases"] = aliases

    if actions:
        log_data["actions"] = _summarize_actions(actions)

    if clipboard:
        log_data["clipboard"] = True

    if dry_run:
        log_data["dry_run"] = True

    if error:
        log_data["error"] = error

    status = "ok" if success else "failed"

    if error:
        logger.error(f"resolution {status}: {log_data}")
    else:
        logger.info(f"resolution {status}: {log_data}")


def _summarize_actions(actions: list) -> list:
    """Compact per-action summary; long URL lists are truncated."""
    summary = []
    for action in actions:
        item = {
            "handler": action.handler_name,
            "urls": len(action.urls),
        }
        if action.dump:
            item["dump"] = action.dump_page_forward
        first = action.urls[0]
        item["first_url"] = first if len(first) <= 200 else first[:197] + "..."
        summary.append(item)
    return summary


def create_session_id() -> str:
    """Create unique session ID for tracking."""
    return f"session_{int(time.time() * 1000)}"
