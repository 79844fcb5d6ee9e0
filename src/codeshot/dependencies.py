"""Runtime dependency checks for CLI commands."""

from __future__ import annotations

import importlib.util
import shutil

from codeshot.exceptions import DependencyError


def _is_module_available(module_name: str) -> bool:
    """Check whether a module can be imported.

    Args:
        module_name (str): Python module name.

    Returns:
        bool: True if import spec exists.
    """
    return importlib.util.find_spec(module_name) is not None


def _collect_missing_dependencies(modules_by_package: dict[str, str]) -> list[str]:
    """Collect missing packages for a module mapping.

    Args:
        modules_by_package (Mapping[str, str]): Mapping of package name -> import module.

    Returns:
        list[str]: Missing package names.
    """
    return [package for package, module in modules_by_package.items() if not _is_module_available(module)]


def ensure_cli_dependencies_for_render() -> None:
    """Validate required runtime dependencies for `codeshot render`.

    Raises:
        DependencyError: If one or more required modules are missing.
    """
    missing = _collect_missing_dependencies(
        {
            "pillow": "PIL",
            "pydantic": "pydantic",
        },
    )
    if missing:
        raise DependencyError(missing_package=missing, message="render")


_CLIPBOARD_TOOLS_BY_SYSTEM = {
    "Linux": ("wl-copy", "xclip"),
    "Darwin": ("osascript", "pbcopy"),
}


def ensure_clipboard_tools(system: str) -> None:
    """Validate that at least one clipboard tool exists for `codeshot render --copy`.

    Args:
        system (str): Platform name as returned by `platform.system()`.

    Raises:
        DependencyError: If the platform has no supported tool on `PATH`.
    """
    tools = _CLIPBOARD_TOOLS_BY_SYSTEM.get(system, ())
    if not any(shutil.which(tool) for tool in tools):
        raise DependencyError(missing_package=list(tools) or [f"clipboard support for {system}"], message="copy")
