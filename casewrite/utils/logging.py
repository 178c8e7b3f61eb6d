"""Logging setup with per-case context for the intake service."""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(case_id)s] %(message)s"


class CaseContextFilter(logging.Filter):
    """Stamp every record with the case being processed (``-`` when idle)."""

    defaults: Dict[str, Any] = {"case_id": "-"}

    def __init__(self):
        super().__init__()
        self.fields: Dict[str, Any] = {}

    def filter(self, record: logging.LogRecord) -> bool:
        for name, value in {**self.defaults, **self.fields}.items():
            setattr(record, name, value)
        return True


_case_filter = CaseContextFilter()


def setup_logging(
    level: str = "INFO",
    log_format: str = DEFAULT_FORMAT,
    log_file: Optional[str] = None
) -> logging.Logger:
    """
    Route all service logs through one formatter and the case filter.

    Args:
        level: Level name; unknown names fall back to INFO
        log_format: Format string; may reference ``%(case_id)s``
        log_file: Also append to this file (parent directories are created)

    Returns:
        The root logger
    """
    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        resolved = logging.INFO

    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        Path(log_file).parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(resolved)

    formatter = logging.Formatter(log_format)
    for handler in handlers:
        handler.setLevel(resolved)
        handler.setFormatter(formatter)
        handler.addFilter(_case_filter)
        root.addHandler(handler)

    return root


def clear_context():
    _case_filter.fields.clear()


def current_context() -> Dict[str, Any]:
    return dict(_case_filter.fields)


@contextmanager
def case_context(**fields) -> Iterator[None]:
    """
    Attach context fields for the duration of the block.

    Example:
        with case_context(case_id="CASE-123"):
            logger.info("Analyzing document")  # [CASE-123] in the output

    The previous fields are restored on exit, including when the block raises.
    """
    saved = dict(_case_filter.fields)
    _case_filter.fields.update(fields)
    try:
        yield
    finally:
        _case_filter.fields = saved
