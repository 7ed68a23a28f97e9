"""External tool runner with uniform error handling."""

from __future__ import annotations

from dataclasses import dataclass
import subprocess

from debugapk.errors import ToolError


@dataclass(frozen=True)
class ToolDescriptor:
    """An external tool: executable plus arguments that precede every call.

    ``prefix_args`` is used when the tool has to go through a launcher,
    e.g. ``ToolDescriptor("java", ("-jar", "apktool_2.5.0.jar"))``.
    """

    executable: str
    prefix_args: tuple[str, ...] = ()

    def argv(self, *args: str) -> list[str]:
        return [self.executable, *self.prefix_args, *args]

    def __str__(self) -> str:
        return " ".join(self.argv())


def run_tool(
    tool: ToolDescriptor,
    args: list[str],
    description: str,
    *,
    capture: bool = False,
) -> subprocess.CompletedProcess[str]:
    """Run an external tool, raising ToolError on failure.

    stdout and stderr are always captured in memory and never echoed. Bytes
    that are not valid UTF-8 are replaced rather than failing the call, and
    there is no timeout.

    Args:
        tool: The tool to launch.
        args: Arguments appended after the tool's prefix arguments.
        description: Human-readable label for error messages.
        capture: Keep the captured output on the ToolError for diagnostics.

    Returns:
        The CompletedProcess on success.

    Raises:
        ToolError: If the process cannot be started or exits non-zero.
    """
    argv = tool.argv(*args)
    try:
        result = subprocess.run(
            argv, capture_output=True, text=True, encoding="utf-8", errors="replace"
        )
    except OSError as e:
        raise ToolError(description, argv, os_error=e) from e

    if result.returncode != 0:
        raise ToolError(
            description,
            argv,
            returncode=result.returncode,
            stdout=result.stdout if capture else None,
            stderr=result.stderr if capture else None,
        )
    return result
