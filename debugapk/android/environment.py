"""Pre-flight checks for apktool, keytool and jarsigner."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
import shutil

from debugapk.config import PipelineConfig
from debugapk.errors import EnvironmentCheckError, ToolError
from debugapk.helpers.subprocess import ToolDescriptor, run_tool


def get_installed_version(tool: ToolDescriptor) -> str:
    """Return the first token of the first line of ``<tool> --version``."""
    try:
        result = run_tool(tool, ["--version"], f"Checking {tool} version")
    except ToolError as e:
        raise EnvironmentCheckError(
            f"Failed to check installed {tool} version: {e}"
        ) from e

    lines = result.stdout.splitlines()
    tokens = lines[0].split() if lines else []
    if not tokens:
        raise EnvironmentCheckError(f"{tool} --version printed no version")
    return tokens[0]


def require_on_path(name: str) -> str:
    """Return the resolved path of ``name``, or raise if it is not installed."""
    found = shutil.which(name)
    if found is None:
        raise EnvironmentCheckError(f"I require {name} but it's not installed. Aborting.")
    return found


def resolve_environment(
    config: PipelineConfig,
    *,
    cwd: Path | None = None,
    on_progress: Callable[[str], None] | None = None,
) -> PipelineConfig:
    """Check every external tool and return the config to run with.

    If the installed apktool is not exactly the required version, a matching
    apktool jar in ``cwd`` is used through ``java -jar`` instead.

    Raises:
        EnvironmentCheckError: If a tool is missing or the version is wrong
            and no fallback jar is available.
    """
    installed = get_installed_version(config.apktool)

    if installed != config.apktool_version:
        jar = (cwd or Path.cwd()) / config.fallback_jar
        if not jar.is_file():
            raise EnvironmentCheckError(
                f"I require apktool version {config.apktool_version} "
                f"but found version {installed}. Aborting."
            )
        if on_progress:
            on_progress(
                f"Found {config.fallback_jar} file in the current directory. Proceeding..."
            )
        config = config.model_copy(
            update={"apktool": ToolDescriptor("java", ("-jar", str(jar)))}
        )

    require_on_path(config.keytool)
    require_on_path(config.jarsigner)
    return config
