"""Pytest marker auto-assignment by folder and shared fakes."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from codeshot import logger
from codeshot.settings import get_settings

if TYPE_CHECKING:
    from collections.abc import Iterator

    from codeshot.typing.models import FontDescriptor

CHAR_WIDTH = 10.0
LINE_HEIGHT = 20.0
ASCENT = 15.0


class FixedMetrics:
    """Monospace metrics: every character is 10px wide, every line 20px tall."""

    def advance(self, text: str, font: FontDescriptor) -> float:
        _ = font
        return CHAR_WIDTH * len(text)

    def line_height(self, font: FontDescriptor) -> float:
        _ = font
        return LINE_HEIGHT

    def ascent(self, font: FontDescriptor) -> float:
        _ = font
        return ASCENT


@pytest.fixture
def fixed_metrics() -> FixedMetrics:
    return FixedMetrics()


@pytest.fixture(autouse=True)
def _isolated_settings(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.setenv("OPTIONS_PATH", str(tmp_path / "options.json"))
    monkeypatch.setenv("TEMP_DIR", str(tmp_path / "clipboard"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def _mark_tests_by_directory(
    config: pytest.Config,
    items: list[pytest.Item],
    marker: str,
) -> None:
    """Mark collected tests located under tests/<marker>/."""
    target_dir = (Path(config.rootpath) / "tests" / marker).resolve()

    for item in items:
        try:
            path = Path(str(item.path)).resolve()
        except OSError:
            logger.warning(
                "Could not resolve test path; skipping marker assignment",
                extra={"test": item.name, "marker": marker},
            )
            continue

        if path == target_dir or target_dir in path.parents:
            item.add_marker(getattr(pytest.mark, marker))


def pytest_collection_modifyitems(
    config: pytest.Config,
    items: list[pytest.Item],
) -> None:
    """Apply directory-based markers to test items."""
    _mark_tests_by_directory(config, items, "unit")
    _mark_tests_by_directory(config, items, "integration")
    _mark_tests_by_directory(config, items, "end2end")
