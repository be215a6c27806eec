# spiral_journal/logging_config.py
from __future__ import annotations

import logging
import re
import sys

from spiral_journal.config import log_level

_SENSITIVE_PATTERNS = [
    (re.compile(r"sk-ant-[A-Za-z0-9_\-]+"), "sk-ant-***"),
    (re.compile(r'(id_?token|refresh_?token|api_?key)(["\']?\s*[:=]\s*["\']?)([^"\'\s&,}]+)', re.I), r"\1\2***"),
]

_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def mask_sensitive(text: str) -> str:
    for pattern, replacement in _SENSITIVE_PATTERNS:
        text = pattern.sub(replacement, text)
    return text


class SensitiveDataFilter(logging.Filter):
    """Mask API keys and auth tokens in log messages and their args."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.msg, str):
            record.msg = mask_sensitive(record.msg)
        if record.args and isinstance(record.args, tuple):
            record.args = tuple(mask_sensitive(a) if isinstance(a, str) else a for a in record.args)
        return True


def setup_logging(level: str | None = None) -> logging.Logger:
    """
    Configure the `spiral_journal` logger once: one stderr handler with the
    masking filter. Safe to call on every Streamlit rerun.
    """
    logger = logging.getLogger("spiral_journal")
    logger.setLevel(level or log_level())
    if not any(getattr(h, "_spiral", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(_FORMAT))
        handler.addFilter(SensitiveDataFilter())
        handler._spiral = True
        logger.addHandler(handler)
    logger.propagate = False
    return logger
