"""Exceptions raised while turning a release APK into a debug APK."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from debugapk.android.pipeline import PipelineRun, Stage


class DebugApkError(Exception):
    """Base class for every error this tool reports."""


class ToolError(DebugApkError):
    """Raised when an external tool cannot be launched or exits non-zero.

    ``stdout``/``stderr`` are only populated when the caller asked for
    captured output to be kept for diagnostics.
    """

    def __init__(
        self,
        description: str,
        argv: list[str],
        returncode: int | None = None,
        os_error: OSError | None = None,
        stdout: str | None = None,
        stderr: str | None = None,
    ):
        self.description = description
        self.argv = argv
        self.returncode = returncode
        self.os_error = os_error
        self.stdout = stdout
        self.stderr = stderr
        if os_error is not None:
            reason = str(os_error)
        else:
            reason = f"exit status {returncode}"
        super().__init__(f"{description} failed: {reason}")


class ManifestError(DebugApkError):
    """Raised when AndroidManifest.xml cannot be made debuggable."""


class EnvironmentCheckError(DebugApkError):
    """Raised when a required tool is missing or has the wrong version."""


class InputNotFoundError(DebugApkError):
    """Raised when the input APK does not exist."""

    def __init__(self, path: object):
        self.path = path
        super().__init__(f"File not found: {path}")


class StageError(DebugApkError):
    """Raised when a pipeline stage fails. Remaining stages are skipped."""

    def __init__(self, stage: Stage, cause: BaseException, run: PipelineRun | None = None):
        self.stage = stage
        self.cause = cause
        self.run = run
        super().__init__(f"{stage.label} failed: {cause}")

    @property
    def stdout(self) -> str | None:
        return getattr(self.cause, "stdout", None)

    @property
    def stderr(self) -> str | None:
        return getattr(self.cause, "stderr", None)
