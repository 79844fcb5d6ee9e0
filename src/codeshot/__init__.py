"""Codeshot package."""

from codeshot.exceptions import (
    ClipboardError,
    DependencyError,
    EncodingError,
    ModelError,
    PackageError,
    SaveError,
    SettingsError,
    TargetNotADirectoryError,
    UnsupportedRepresentationError,
)
from codeshot.logging import configure_logging, get_logger
from codeshot.settings import Settings, get_settings

__version__ = "0.1.0"

# Initialize package logger at import time via `get_logger`.
logger = get_logger("codeshot")

__all__ = [
    "ClipboardError",
    "DependencyError",
    "EncodingError",
    "ModelError",
    "PackageError",
    "SaveError",
    "Settings",
    "SettingsError",
    "TargetNotADirectoryError",
    "UnsupportedRepresentationError",
    "__version__",
    "configure_logging",
    "get_logger",
    "get_settings",
    "logger",
]
