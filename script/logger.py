"""Logging setup shared by the deploy scripts.

The root logger is configured once, on the first ``get_logger`` call. The
level comes from the LOG_LEVEL environment variable.
"""
from __future__ import annotations

import logging
import os
from typing import Optional

_configured = False


def _ensure_configured() -> None:
    global _configured
    if _configured:
        return

    level = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(level)

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    root.addHandler(handler)

    _configured = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    _ensure_configured()
    return logging.getLogger(name)
