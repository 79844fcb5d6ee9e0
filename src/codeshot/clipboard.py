"""Clipboard payloads and a command-line clipboard backend."""

from __future__ import annotations

import os
import platform
import subprocess
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

from codeshot import logger
from codeshot.exceptions import ClipboardError
from codeshot.settings import get_settings
from codeshot.typing.enums import Representation

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from codeshot.transfer import TransferPackage
    from codeshot.typing.protocol import ClipboardBackend

_PNG_MIME = "image/png"
_COMMAND_TIMEOUT_S = 5
TRANSFER_FILE_STEM = "codeshot_clipboard"


def transfer_file_path(extension: str, temp_dir: Path | None = None) -> Path:
    """Return the file offered through the file-list flavor for an extension.

    Each format has one fixed name, so every copy replaces the previous file
    instead of adding a new one.

    Args:
        extension (str): File extension without dot.
        temp_dir (Path | None): Directory; `codeshot` under the system temp dir when omitted.

    Returns:
        Path: Transfer file location.
    """
    directory = temp_dir if temp_dir is not None else Path(tempfile.gettempdir()) / "codeshot"
    return directory / f"{TRANSFER_FILE_STEM}.{extension}"


def write_transfer_file(package: TransferPackage, temp_dir: Path | None = None) -> Path:
    """Write the encoded image to the transfer file of its format.

    Args:
        package (TransferPackage): Package to write.
        temp_dir (Path | None): Target directory.

    Raises:
        ClipboardError: If the file cannot be written.

    Returns:
        Path: Written file, named with the format extension.
    """
    content, extension = package.as_bytes()
    target = transfer_file_path(extension, temp_dir)
    temp_name: str | None = None
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_name = tempfile.mkstemp(prefix=".codeshot_", suffix=".part", dir=target.parent)
        with os.fdopen(fd, "wb") as handle:
            handle.write(content)
        Path(temp_name).replace(target)
    except OSError as exc:
        if temp_name is not None:
            Path(temp_name).unlink(missing_ok=True)
        raise ClipboardError(message=f"cannot write {target}: {exc.strerror or exc}") from exc
    return target


def build_clipboard_payload(
    package: TransferPackage,
    temp_dir: Path | None = None,
) -> dict[Representation, object]:
    """Map every offered representation to its clipboard data.

    `ENCODED_BYTES` maps to `(content, mime_type)`, `TEXT` to the document
    string, `NATIVE_IMAGE` to a Pillow image and `FILE_LIST` to a one-element
    list holding the rewritten transfer file of the format.

    Args:
        package (TransferPackage): Package to expose.
        temp_dir (Path | None): Directory for the file-list flavor.

    Returns:
        dict[Representation, object]: Data keyed by representation.
    """
    payload: dict[Representation, object] = {}
    for representation in package.representations:
        if representation is Representation.ENCODED_BYTES:
            content, _ = package.as_bytes()
            payload[representation] = (content, package.image.mime_type)
        elif representation is Representation.FILE_LIST:
            payload[representation] = [write_transfer_file(package, temp_dir)]
        else:
            payload[representation] = package.get(representation)
    return payload


def copy_to_clipboard(
    package: TransferPackage,
    backend: ClipboardBackend,
    temp_dir: Path | None = None,
) -> Mapping[Representation, object]:
    """Hand a package to a clipboard backend.

    Args:
        package (TransferPackage): Package to copy.
        backend (ClipboardBackend): Platform clipboard binding.
        temp_dir (Path | None): Directory for the file-list flavor; `TEMP_DIR` setting when omitted.

    Returns:
        Mapping[Representation, object]: Payload given to the backend.
    """
    if temp_dir is None and get_settings().temp_dir:
        temp_dir = Path(get_settings().temp_dir)
    payload = build_clipboard_payload(package, temp_dir)
    backend.set_contents(payload)
    logger.info(
        "Image placed on clipboard",
        extra={"format": package.image_format.name, "representations": [rep.value for rep in payload]},
    )
    return payload


def _run(command: Sequence[str], data: bytes) -> bool:
    # wl-copy and xclip fork a selection owner that inherits captured pipes.
    try:
        subprocess.run(  # noqa: S603
            list(command),
            input=data,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=True,
            timeout=_COMMAND_TIMEOUT_S,
        )
    except subprocess.TimeoutExpired:
        logger.warning("Clipboard command timed out", extra={"command": command[0], "timeout_s": _COMMAND_TIMEOUT_S})
        return False
    except (subprocess.CalledProcessError, OSError) as exc:
        logger.debug("Clipboard command failed", extra={"command": command[0], "error": str(exc)})
        return False
    return True


class CommandClipboardBackend:
    """`ClipboardBackend` driving the platform clipboard tools.

    Linux uses `wl-copy`, then `xclip`, with the encoded MIME type. macOS uses
    `osascript` for PNG files and `pbcopy` for text.
    """

    def __init__(self, system: str | None = None) -> None:
        self.system = system or platform.system()

    def set_contents(self, payload: Mapping[Representation, object]) -> None:
        """Place the payload on the clipboard.

        Args:
            payload (Mapping[Representation, object]): Data keyed by representation.

        Raises:
            ClipboardError: If no tool accepted the payload.
        """
        if self.system == "Linux":
            self._copy_linux(payload)
        elif self.system == "Darwin":
            self._copy_macos(payload)
        else:
            raise ClipboardError(message=f"unsupported platform {self.system}")

    def _copy_linux(self, payload: Mapping[Representation, object]) -> None:
        encoded = payload.get(Representation.ENCODED_BYTES)
        if not isinstance(encoded, tuple):
            raise ClipboardError(message="payload holds no encoded image")
        content, mime_type = encoded
        commands = (
            ("wl-copy", "--type", mime_type),
            ("xclip", "-selection", "clipboard", "-t", mime_type),
        )
        if not any(_run(command, content) for command in commands):
            raise ClipboardError(message="wl-copy and xclip are unavailable")

    def _copy_macos(self, payload: Mapping[Representation, object]) -> None:
        text = payload.get(Representation.TEXT)
        if isinstance(text, str):
            if not _run(("pbcopy",), text.encode("utf-8")):
                raise ClipboardError(message="pbcopy failed")
            return

        files = payload.get(Representation.FILE_LIST)
        encoded = payload.get(Representation.ENCODED_BYTES)
        if not files or not isinstance(encoded, tuple) or encoded[1] != _PNG_MIME:
            raise ClipboardError(message="only PNG images and text can be copied on macOS")
        escaped = str(Path(files[0]).resolve()).replace('"', '\\"')
        script = f'set the clipboard to (read (POSIX file "{escaped}") as «class PNGf»)'
        if not _run(("osascript", "-e", script), b""):
            raise ClipboardError(message="osascript failed")
