"""Temporary working directory for one pipeline run."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
import tempfile


@dataclass(frozen=True)
class Workspace:
    """Layout of the intermediate files of a run."""

    root: Path

    @property
    def app_dir(self) -> Path:
        return self.root / "app"

    @property
    def manifest_path(self) -> Path:
        return self.app_dir / "AndroidManifest.xml"

    @property
    def keystore_path(self) -> Path:
        return self.root / "keystore"


@contextmanager
def workspace(prefix: str = "apkdebug") -> Iterator[Workspace]:
    """Yield a fresh Workspace, removed with all its contents on exit."""
    with tempfile.TemporaryDirectory(prefix=prefix) as tmpdir:
        yield Workspace(Path(tmpdir))
