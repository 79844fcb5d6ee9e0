"""Package exceptions."""

from __future__ import annotations

from dataclasses import dataclass


class PackageError(Exception):
    """Root exception for the package."""


@dataclass(frozen=True)
class SettingsError(PackageError):
    """Raised when settings cannot be loaded or validated."""

    message: str = "Failed to load settings"
    exc: BaseException | None = None

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.message}: {self.exc}" if self.exc else self.message


@dataclass(frozen=True)
class DependencyError(PackageError):
    """Raised when optional runtime dependencies are missing."""

    missing_package: list[str]
    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return f"Missing runtime dependencies for '{self.message}': {', '.join(self.missing_package)}"


@dataclass(frozen=True)
class ModelError(PackageError):
    """Raised when the styled-text selection is empty or malformed."""

    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message


@dataclass(frozen=True)
class EncodingError(PackageError):
    """Raised when a codec rejects a pixel buffer or a layout."""

    image_format: str
    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return f"Cannot encode {self.image_format} image: {self.message}"


@dataclass(frozen=True)
class SaveError(PackageError):
    """Raised when an encoded image cannot be written to disk."""

    path: str
    reason: str

    def __str__(self) -> str:
        """Return error message payload."""
        return f"Cannot save image: {self.path}: {self.reason}"


@dataclass(frozen=True)
class TargetNotADirectoryError(SaveError):
    """Raised when the save location exists but is not a directory."""

    reason: str = "Not a directory"

    def __str__(self) -> str:
        """Return error message payload."""
        return f"Cannot save image: Not a directory: {self.path}"


@dataclass(frozen=True)
class UnsupportedRepresentationError(PackageError):
    """Raised when a transfer package is asked for a representation it does not offer."""

    representation: str
    image_format: str

    def __str__(self) -> str:
        """Return error message payload."""
        return f"Representation '{self.representation}' is not offered for {self.image_format} images"


@dataclass(frozen=True)
class ClipboardError(PackageError):
    """Raised when no clipboard mechanism accepts the payload."""

    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return f"Cannot copy image to clipboard: {self.message}"
