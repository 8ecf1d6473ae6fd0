"""
Pytest configuration and shared fixtures.
"""

import json
import sys
import zipfile
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from moddetective.host.base import ModHandle, ModLoader, SchemaTier
from moddetective.host.metadata import ModMetadata


# =============================================================================
# IN-MEMORY HOST
# =============================================================================

class FakePath:
    """Path handle with a fixed existence answer (or a failure)."""

    def __init__(self, present=False, error=None):
        self.present = present
        self.error = error

    def exists(self):
        if self.error is not None:
            raise self.error
        return self.present


class FakeMod(ModHandle):
    """Mod handle backed by a metadata record and a set of present paths."""

    def __init__(self, metadata, files=(), io_error=None):
        self._metadata = metadata
        self.files = set(files)
        self.io_error = io_error

    def metadata(self):
        return self._metadata

    def resolve_path(self, relative):
        return FakePath(relative in self.files, self.io_error)

    def root_path(self):
        raise NotImplementedError


class FakeLoader(ModLoader):
    def __init__(self, mods):
        self.mods = list(mods)

    def list_mods(self):
        return list(self.mods)


def make_meta(mod_id, version="1.0.0", tier=SchemaTier.V1, name=None, authors=(), warnings=()):
    """Build a ModMetadata for tests."""
    return ModMetadata(
        id=mod_id,
        name=name or mod_id.title(),
        version=version,
        authors=tuple(authors),
        schema_tier=tier,
        format_warnings=list(warnings),
    )


def make_mod(mod_id, refmap=False, io_error=None, **kwargs):
    """Build a FakeMod, optionally shipping build-refmap.json."""
    files = {"build-refmap.json"} if refmap else set()
    return FakeMod(make_meta(mod_id, **kwargs), files, io_error)


# =============================================================================
# FILESYSTEM FIXTURES
# =============================================================================

@pytest.fixture
def mods_dir(tmp_path):
    """Empty mods directory."""
    path = tmp_path / "mods"
    path.mkdir()
    return path


def write_mod_dir(mods_dir, folder, metadata, files=None):
    """Create an unpacked mod with a fabric.mod.json and extra files."""
    root = mods_dir / folder
    root.mkdir(parents=True)
    text = metadata if isinstance(metadata, str) else json.dumps(metadata)
    (root / "fabric.mod.json").write_text(text, encoding="utf-8")
    for rel, content in (files or {}).items():
        target = root / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    return root


def write_mod_jar(mods_dir, filename, metadata, files=None):
    """Create a packaged mod archive."""
    path = mods_dir / filename
    with zipfile.ZipFile(path, "w") as zf:
        text = metadata if isinstance(metadata, str) else json.dumps(metadata)
        zf.writestr("fabric.mod.json", text)
        for rel, content in (files or {}).items():
            zf.writestr(rel, content)
    return path
