"""Mark an unpacked AndroidManifest.xml as debuggable."""

from __future__ import annotations

from pathlib import Path
import re

from debugapk.errors import ManifestError

DEBUGGABLE_ATTR = 'android:debuggable="true"'

_EXISTING_DEBUGGABLE = re.compile(r'\s+android:debuggable="[^"]*"')
# The tag name only, so "<application-foo" never matches
_APPLICATION_TAG = re.compile(r"<application(?=[\s/>])")


def make_debuggable(content: str) -> str:
    """Return ``content`` with exactly one debuggable="true" on <application>.

    The attribute is inserted right after the tag name, e.g.
    ``<application android:label="x">`` becomes
    ``<application android:debuggable="true" android:label="x">``.
    """
    content = _EXISTING_DEBUGGABLE.sub("", content)
    patched, count = _APPLICATION_TAG.subn(
        f"<application {DEBUGGABLE_ATTR}", content, count=1
    )
    if count == 0:
        raise ManifestError("No <application> element found in AndroidManifest.xml")
    return patched


def patch_manifest(manifest_path: Path) -> None:
    """Rewrite the manifest at ``manifest_path`` in place.

    Bytes are decoded and re-encoded without newline translation, so line
    endings survive untouched.
    """
    content = manifest_path.read_bytes().decode("utf-8")
    manifest_path.write_bytes(make_debuggable(content).encode("utf-8"))
