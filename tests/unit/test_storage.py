from __future__ import annotations

import os
import stat
import sys
from datetime import datetime
from typing import TYPE_CHECKING

import pytest

from codeshot.exceptions import SaveError, TargetNotADirectoryError
from codeshot.storage import (
    APP_DIRECTORY_NAME,
    default_save_directory,
    ensure_directory,
    pictures_directory,
    save_image,
    timestamped_filename,
)
from codeshot.typing.enums import ImageFormat
from codeshot.typing.models import EncodedImage

if TYPE_CHECKING:
    from pathlib import Path

MOMENT = datetime(2024, 3, 9, 14, 5, 7)  # noqa: DTZ001


def _image(image_format: ImageFormat = ImageFormat.PNG) -> EncodedImage:
    return EncodedImage(image_format=image_format, content=b"image-bytes", width=1, height=1)


def test_timestamped_filename_uses_default_pattern() -> None:
    assert timestamped_filename("png", now=MOMENT) == "Shot_20240309_140507.png"
    assert timestamped_filename("svg", now=MOMENT, pattern="%Y-%m-%d") == "Shot_2024-03-09.svg"


def test_save_image_creates_directory_and_writes_bytes(tmp_path: Path) -> None:
    target_dir = tmp_path / "shots" / "nested"

    saved = save_image(_image(ImageFormat.JPEG), target_dir, now=MOMENT)

    assert saved == target_dir / "Shot_20240309_140507.jpg"
    assert saved.read_bytes() == b"image-bytes"
    assert [path.name for path in target_dir.iterdir()] == [saved.name]


def test_save_image_overwrites_same_timestamp(tmp_path: Path) -> None:
    save_image(_image(), tmp_path, now=MOMENT)
    second = EncodedImage(image_format=ImageFormat.PNG, content=b"newer", width=1, height=1)

    saved = save_image(second, tmp_path, now=MOMENT)

    assert saved.read_bytes() == b"newer"


def test_save_into_file_path_raises_not_a_directory(tmp_path: Path) -> None:
    blocker = tmp_path / "taken"
    blocker.write_text("keep", encoding="utf-8")

    with pytest.raises(TargetNotADirectoryError) as exc_info:
        save_image(_image(), blocker, now=MOMENT)

    assert str(exc_info.value) == f"Cannot save image: Not a directory: {blocker}"
    assert blocker.read_text(encoding="utf-8") == "keep"
    assert sorted(path.name for path in tmp_path.iterdir()) == ["taken"]


def test_ensure_directory_rejects_file_parent(tmp_path: Path) -> None:
    blocker = tmp_path / "taken"
    blocker.write_text("", encoding="utf-8")

    with pytest.raises(TargetNotADirectoryError, match="taken"):
        ensure_directory(blocker / "child")


def test_write_failure_raises_save_error_and_cleans_up(tmp_path: Path, mocker) -> None:
    mocker.patch("codeshot.storage.Path.replace", side_effect=PermissionError(13, "Permission denied"))

    with pytest.raises(SaveError, match="Permission denied"):
        save_image(_image(), tmp_path, now=MOMENT)

    assert list(tmp_path.iterdir()) == []


def test_pictures_directory_reads_xdg_config(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr("codeshot.storage.sys.platform", "linux")
    config_dir = tmp_path / ".config"
    config_dir.mkdir()
    (config_dir / "user-dirs.dirs").write_text(
        '# comment\nXDG_DESKTOP_DIR="$HOME/Desktop"\nXDG_PICTURES_DIR="$HOME/Bilder"\n',
        encoding="utf-8",
    )

    assert pictures_directory(tmp_path) == tmp_path / "Bilder"


def test_pictures_directory_falls_back_to_home_pictures(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr("codeshot.storage.sys.platform", "linux")

    assert pictures_directory(tmp_path) is None
    (tmp_path / "Pictures").mkdir()
    assert pictures_directory(tmp_path) == tmp_path / "Pictures"


def test_default_save_directory_falls_back_to_home(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr("codeshot.storage.sys.platform", "linux")

    assert default_save_directory(tmp_path) == tmp_path / APP_DIRECTORY_NAME


@pytest.mark.skipif(sys.platform.startswith("win"), reason="POSIX permission bits")
def test_saved_file_gets_umask_default_mode(tmp_path: Path) -> None:
    previous = os.umask(0o022)
    try:
        saved = save_image(_image(), tmp_path, now=MOMENT)
    finally:
        os.umask(previous)

    assert stat.S_IMODE(saved.stat().st_mode) == 0o644
