"""Shared utilities: logging setup and text cleanup."""

from .logging_config import configure_logging_from_config, log_with_context, setup_logging
from .text_normalization import clean_text, split_names, title_key


__all__ = [
    "clean_text",
    "configure_logging_from_config",
    "log_with_context",
    "setup_logging",
    "split_names",
    "title_key",
]
