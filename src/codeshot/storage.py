"""Write encoded screenshots to disk."""

from __future__ import annotations

import os
import sys
import tempfile
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

from codeshot import logger
from codeshot.exceptions import SaveError, TargetNotADirectoryError
from codeshot.typing.models import DEFAULT_DATE_TIME_PATTERN

if TYPE_CHECKING:
    from codeshot.typing.models import EncodedImage

APP_DIRECTORY_NAME = "Codeshot"
FILE_PREFIX = "Shot_"

_XDG_PICTURES_KEY = "XDG_PICTURES_DIR"


def timestamped_filename(extension: str, *, now: datetime | None = None, pattern: str | None = None) -> str:
    """Return `Shot_<timestamp>.<extension>`.

    Args:
        extension (str): File extension without dot.
        now (datetime | None): Timestamp; current local time when omitted.
        pattern (str | None): `strftime` pattern; `%Y%m%d_%H%M%S` when omitted.

    Returns:
        str: File name.
    """
    moment = now or datetime.now()  # noqa: DTZ005
    return f"{FILE_PREFIX}{moment.strftime(pattern or DEFAULT_DATE_TIME_PATTERN)}.{extension}"


def _xdg_pictures_dir(home: Path) -> Path | None:
    config = home / ".config" / "user-dirs.dirs"
    if not config.is_file():
        return None
    for line in config.read_text(encoding="utf-8").splitlines():
        key, sep, value = line.partition("=")
        if sep and key.strip() == _XDG_PICTURES_KEY:
            return Path(value.strip().strip('"').replace("$HOME", str(home)))
    return None


def _windows_pictures_dir() -> Path | None:
    import winreg  # noqa: PLC0415

    key_path = r"Software\Microsoft\Windows\CurrentVersion\Explorer\Shell Folders"
    try:
        with winreg.OpenKey(winreg.HKEY_CURRENT_USER, key_path) as key:
            value, _ = winreg.QueryValueEx(key, "My Pictures")
    except OSError:
        return None
    return Path(value)


def pictures_directory(home: Path | None = None) -> Path | None:
    """Return the user's pictures directory, or None when it cannot be found.

    Windows reads the shell folder registry entry and other non-macOS systems
    follow `XDG_PICTURES_DIR`. An existing `~/Pictures` is the fallback.

    Args:
        home (Path | None): Home directory; the current user's when omitted.

    Returns:
        Path | None: Pictures directory.
    """
    user_home = home or Path.home()
    if sys.platform.startswith("win"):
        found = _windows_pictures_dir()
        if found is not None:
            return found
    elif sys.platform != "darwin":
        try:
            found = _xdg_pictures_dir(user_home)
        except OSError as exc:
            logger.warning("Cannot read XDG user directories", extra={"error": str(exc)})
            found = None
        if found is not None:
            return found
    pictures = user_home / "Pictures"
    return pictures if pictures.is_dir() else None


def default_save_directory(home: Path | None = None) -> Path:
    """Return the default save directory, an app folder in pictures or home."""
    user_home = home or Path.home()
    base = pictures_directory(user_home) or user_home
    return base / APP_DIRECTORY_NAME


def _default_file_mode() -> int:
    """Return the mode a plain `open(..., "w")` would give a new file."""
    mask = os.umask(0)
    os.umask(mask)
    return 0o666 & ~mask


def ensure_directory(directory: Path) -> Path:
    """Create a directory and its parents when missing.

    Args:
        directory (Path): Directory to create.

    Raises:
        TargetNotADirectoryError: If the path, or one of its parents, exists as a non-directory.
        SaveError: If the directory cannot be created.

    Returns:
        Path: The directory.
    """
    for candidate in (directory, *directory.parents):
        if candidate.exists() and not candidate.is_dir():
            raise TargetNotADirectoryError(path=str(candidate))
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except FileExistsError as exc:
        raise TargetNotADirectoryError(path=str(directory)) from exc
    except OSError as exc:
        raise SaveError(path=str(directory), reason=exc.strerror or str(exc)) from exc
    return directory


def save_image(
    image: EncodedImage,
    directory: Path,
    *,
    now: datetime | None = None,
    pattern: str | None = None,
) -> Path:
    """Save an encoded image as `Shot_<timestamp>.<ext>` in a directory.

    Bytes go to a temporary file in the target directory, then replace the
    final name in one step, so readers never see a partial image.

    Args:
        image (EncodedImage): Image to save.
        directory (Path): Target directory, created when absent.
        now (datetime | None): Timestamp for the file name.
        pattern (str | None): `strftime` pattern for the timestamp.

    Raises:
        TargetNotADirectoryError: If the target exists but is not a directory.
        SaveError: If writing fails.

    Returns:
        Path: Saved file.
    """
    target_dir = ensure_directory(directory)
    target = target_dir / timestamped_filename(image.extension, now=now, pattern=pattern)

    temp_name: str | None = None
    try:
        fd, temp_name = tempfile.mkstemp(prefix=".codeshot_", suffix=".part", dir=target_dir)
        with os.fdopen(fd, "wb") as handle:
            handle.write(image.content)
        Path(temp_name).chmod(_default_file_mode())
        Path(temp_name).replace(target)
    except OSError as exc:
        if temp_name is not None:
            Path(temp_name).unlink(missing_ok=True)
        raise SaveError(path=str(target), reason=exc.strerror or str(exc)) from exc

    logger.info("Image saved", extra={"path": str(target), "bytes": len(image.content)})
    return target
