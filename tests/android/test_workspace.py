"""Tests for the per-run temporary workspace."""

from __future__ import annotations

import pytest

from debugapk.android.workspace import workspace


class TestWorkspace:
    def test_layout(self) -> None:
        with workspace() as ws:
            assert ws.root.is_dir()
            assert ws.root.name.startswith("apkdebug")
            assert ws.app_dir == ws.root / "app"
            assert ws.manifest_path == ws.root / "app" / "AndroidManifest.xml"
            assert ws.keystore_path == ws.root / "keystore"

    def test_removed_after_success(self) -> None:
        with workspace() as ws:
            ws.app_dir.mkdir()
            ws.manifest_path.write_text("<manifest/>")
            root = ws.root
        assert not root.exists()

    def test_removed_after_error(self) -> None:
        with pytest.raises(RuntimeError):
            with workspace() as ws:
                root = ws.root
                ws.keystore_path.write_bytes(b"ks")
                raise RuntimeError("stage failed")
        assert not root.exists()

    def test_each_run_gets_its_own_directory(self) -> None:
        with workspace() as first, workspace() as second:
            assert first.root != second.root
