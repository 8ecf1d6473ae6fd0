"""
Directory Mod Loader

Enumerates installed mods from a mods directory. Two layouts are supported:

- unpacked mods: a sub-directory holding a metadata file at its root
- packaged mods: a .jar or .zip archive holding a metadata file at its root

Packaged contents are exposed through zipfile.Path so rules can check for
files the same way for both layouts.
"""

from __future__ import annotations

import logging
import zipfile
from pathlib import Path
from typing import List, Optional, Union

from ..errors import MetadataError, ModLoaderError
from .base import ModHandle, ModLoader, PathHandle
from .metadata import ModMetadata, parse_mod_metadata

logger = logging.getLogger(__name__)


DEFAULT_METADATA_FILENAME = "fabric.mod.json"
ARCHIVE_SUFFIXES = (".jar", ".zip")


class FileModHandle(ModHandle):
    """A mod backed by a directory or an archive on disk."""

    def __init__(
        self,
        origin: Path,
        root: PathHandle,
        metadata: ModMetadata,
        archive: Optional[zipfile.ZipFile] = None,
    ):
        self.origin = origin
        self.archive = archive
        self._root = root
        self._metadata = metadata

    def metadata(self) -> ModMetadata:
        return self._metadata

    def resolve_path(self, relative: str) -> PathHandle:
        return self._root / relative

    def root_path(self) -> PathHandle:
        return self._root

    def close(self) -> None:
        """Close the backing archive, if any."""
        if self.archive is not None:
            self.archive.close()

    def __repr__(self) -> str:
        return f"FileModHandle({self._metadata.id!r}, {str(self.origin)!r})"


class DirectoryModLoader(ModLoader):
    """
    Loads every mod found directly under mods_dir.

    Archives stay open while their handles are in use. Use the loader as a
    context manager (or call close()) to release them:

        with DirectoryModLoader(mods_dir) as loader:
            report = collect(loader)
    """

    def __init__(self, mods_dir: Union[str, Path], metadata_filename: str = DEFAULT_METADATA_FILENAME):
        self.mods_dir = Path(mods_dir)
        self.metadata_filename = metadata_filename
        self._handles: List[FileModHandle] = []

    def __enter__(self) -> "DirectoryModLoader":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        """Close every archive opened by list_mods()."""
        for mod in self._handles:
            mod.close()
        self._handles = []

    def list_mods(self) -> List[FileModHandle]:
        if not self.mods_dir.is_dir():
            raise ModLoaderError(f"Mods directory not found: {self.mods_dir}")

        mods = []
        for entry in sorted(self.mods_dir.iterdir()):
            mod = self._load_entry(entry)
            if mod is not None:
                mods.append(mod)

        self._handles.extend(mods)
        logger.info(f"Loaded {len(mods)} mods from {self.mods_dir}")
        return mods

    def _load_entry(self, entry: Path) -> Optional[FileModHandle]:
        archive = None
        if entry.is_dir():
            root: PathHandle = entry
        elif entry.is_file() and entry.suffix.lower() in ARCHIVE_SUFFIXES:
            try:
                archive = zipfile.ZipFile(entry)
            except (OSError, zipfile.BadZipFile) as e:
                logger.warning(f"Skipping unreadable archive {entry.name}: {e}")
                return None
            root = zipfile.Path(archive)
        else:
            return None

        metadata = None
        try:
            metadata = self._read_metadata(entry, root)
        finally:
            if metadata is None and archive is not None:
                archive.close()

        if metadata is None:
            return None

        return FileModHandle(entry, root, metadata, archive)

    def _read_metadata(self, entry: Path, root: PathHandle) -> Optional[ModMetadata]:
        meta_path = root / self.metadata_filename
        if not meta_path.exists():
            logger.debug(f"No {self.metadata_filename} in {entry.name}, skipping")
            return None

        try:
            return parse_mod_metadata(
                meta_path.read_text(encoding="utf-8"),
                origin=f"{entry.name}/{self.metadata_filename}",
            )
        except (MetadataError, OSError, UnicodeDecodeError) as e:
            logger.warning(f"Skipping {entry.name}: {e}")
            return None
