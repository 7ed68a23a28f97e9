"""Release APK -> debuggable, re-signed APK.

The run is a strict chain of six stages:

    unpack -> patch manifest -> repack -> generate keystore -> sign -> verify

Each stage starts only if the previous one succeeded. The first failure
raises StageError and nothing after it runs. All intermediate files live in
a temporary workspace that is removed whatever happens; the output APK is
written beside the input by the repack stage and is left as-is on failure.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from debugapk.android.manifest import patch_manifest
from debugapk.android.workspace import Workspace, workspace
from debugapk.config import PipelineConfig
from debugapk.errors import InputNotFoundError, StageError
from debugapk.helpers.subprocess import run_tool

DEBUG_MARKER = ".debug"
VERIFY_LINES = 2


class Stage(Enum):
    UNPACKING = ("Unpacking", "Unpacking APK...")
    PATCHING_MANIFEST = ("PatchingManifest", "Adding debug flag...")
    REPACKING = ("Repacking", "Repacking APK...")
    GENERATING_CREDENTIALS = ("GeneratingCredentials", "Generating keystore...")
    SIGNING = ("Signing", "Signing APK...")
    VERIFYING = ("Verifying", "Checking your debug APK...")

    def __init__(self, label: str, banner: str):
        self.label = label
        self.banner = banner


class StageStatus(Enum):
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class RunState(Enum):
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"


@dataclass
class PipelineRun:
    """Progress of one run over the ordered stages."""

    statuses: dict[Stage, StageStatus] = field(
        default_factory=lambda: {stage: StageStatus.PENDING for stage in Stage}
    )
    failed_stage: Stage | None = None
    cause: BaseException | None = None

    @property
    def state(self) -> Stage | RunState:
        """The stage currently due, or a terminal state."""
        if self.failed_stage is not None:
            return RunState.FAILED
        for stage, status in self.statuses.items():
            if status is StageStatus.PENDING:
                return stage
        return RunState.SUCCEEDED

    def succeed(self, stage: Stage) -> None:
        self.statuses[stage] = StageStatus.SUCCEEDED

    def fail(self, stage: Stage, cause: BaseException) -> None:
        self.statuses[stage] = StageStatus.FAILED
        self.failed_stage = stage
        self.cause = cause


@dataclass
class PipelineResult:
    output_path: Path
    verification: list[str]
    run: PipelineRun


def derive_output_path(apk_path: Path) -> Path:
    """``app.apk`` -> ``app.debug.apk``, next to the input."""
    suffix = apk_path.suffix or ".apk"
    return apk_path.with_name(apk_path.stem + DEBUG_MARKER + suffix)


class _Stages:
    """The action behind each stage, bound to one run's paths and config."""

    def __init__(
        self,
        apk_path: Path,
        output_path: Path,
        ws: Workspace,
        config: PipelineConfig,
        capture: bool,
    ):
        self.apk_path = apk_path
        self.output_path = output_path
        self.ws = ws
        self.config = config
        self.capture = capture
        self.verification: list[str] = []

    def unpack(self) -> None:
        run_tool(
            self.config.apktool,
            ["-q", "d", str(self.apk_path), "-o", str(self.ws.app_dir)],
            "Unpacking APK",
            capture=self.capture,
        )

    def patch_manifest(self) -> None:
        patch_manifest(self.ws.manifest_path)

    def repack(self) -> None:
        run_tool(
            self.config.apktool,
            ["-q", "b", str(self.ws.app_dir), "--use-aapt2", "-o", str(self.output_path)],
            "Repacking APK",
            capture=self.capture,
        )

    def generate_keystore(self) -> None:
        cfg = self.config
        run_tool(
            cfg.keytool_tool,
            [
                "-genkey", "-noprompt",
                "-alias", cfg.key_alias,
                "-dname", cfg.key_dname,
                "-keystore", str(self.ws.keystore_path),
                "-keyalg", cfg.key_algorithm,
                "-storepass", cfg.key_password,
                "-keypass", cfg.key_password,
            ],
            "Generating keystore",
            capture=self.capture,
        )

    def sign(self) -> None:
        cfg = self.config
        run_tool(
            cfg.jarsigner_tool,
            [
                "-keystore", str(self.ws.keystore_path),
                "-storepass", cfg.key_password,
                "-keypass", cfg.key_password,
                str(self.output_path),
                cfg.key_alias,
            ],
            "Signing APK",
            capture=self.capture,
        )

    def verify(self) -> None:
        result = run_tool(
            self.config.jarsigner_tool,
            ["-verify", str(self.output_path)],
            "Verifying debug APK",
            capture=self.capture,
        )
        self.verification = result.stdout.splitlines()[:VERIFY_LINES]

    def ordered(self) -> list[tuple[Stage, Callable[[], None]]]:
        return [
            (Stage.UNPACKING, self.unpack),
            (Stage.PATCHING_MANIFEST, self.patch_manifest),
            (Stage.REPACKING, self.repack),
            (Stage.GENERATING_CREDENTIALS, self.generate_keystore),
            (Stage.SIGNING, self.sign),
            (Stage.VERIFYING, self.verify),
        ]


def build_debug_apk(
    apk_path: Path,
    config: PipelineConfig,
    *,
    debug: bool = False,
    on_progress: Callable[[str], None] | None = None,
) -> PipelineResult:
    """Turn ``apk_path`` into a debuggable APK signed with a throwaway key.

    Args:
        apk_path: The release APK. Never modified.
        config: Resolved tool and signing configuration.
        debug: Keep captured tool output on failures for diagnostics.
        on_progress: Called with a banner before each stage.

    Returns:
        A PipelineResult with the output path and the first verification lines.

    Raises:
        InputNotFoundError: If ``apk_path`` does not exist.
        StageError: On the first stage that fails.
    """
    if not apk_path.exists():
        raise InputNotFoundError(apk_path)

    output_path = derive_output_path(apk_path)
    run = PipelineRun()

    with workspace() as ws:
        stages = _Stages(apk_path, output_path, ws, config, capture=debug)
        for stage, action in stages.ordered():
            if on_progress:
                on_progress(f"=> {stage.banner}")
            try:
                action()
            except Exception as e:
                run.fail(stage, e)
                raise StageError(stage, e, run) from e
            run.succeed(stage)

    return PipelineResult(output_path, stages.verification, run)
