"""
Host contracts.

The detective never discovers or parses mods itself. It talks to the host
through the small set of base classes below:

- ModLoader: enumerates installed mods
- ModHandle: one installed mod (metadata + packaged files)
- MetadataRecord: parsed mod metadata, tagged with its schema tier
- SubtypeFinder: optional class scanning capability

Packaged files are exposed as path-like handles. Anything with exists(),
iterdir(), is_dir(), is_file(), read_text(), name and "/" works, which
covers both pathlib.Path and zipfile.Path.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any, Callable, List, Sequence


WarningSink = Callable[[str], None]

# Path-like handle (pathlib.Path, zipfile.Path)
PathHandle = Any


class SchemaTier(IntEnum):
    """Metadata schema tiers, oldest first."""
    V0 = 0
    V1 = 1
    V2 = 2


# Only the latest tier can validate itself and emit format warnings
LATEST_SCHEMA_TIER = SchemaTier.V2


class MetadataRecord:
    """Parsed metadata of a single mod."""

    id: str = ""
    name: str = ""
    version: str = ""
    authors: Sequence[str] = ()
    schema_tier: SchemaTier = SchemaTier.V0

    def emit_format_warnings(self, sink: WarningSink) -> None:
        """Call sink once per format warning, in document order."""


class ModHandle:
    """An installed mod as seen by the host."""

    def metadata(self) -> MetadataRecord:
        raise NotImplementedError

    def resolve_path(self, relative: str) -> PathHandle:
        """Resolve a path relative to the mod's packaged root."""
        raise NotImplementedError

    def root_path(self) -> PathHandle:
        raise NotImplementedError


class ModLoader:
    """Source of the installed mod list."""

    def list_mods(self) -> Sequence[ModHandle]:
        raise NotImplementedError


class SubtypeFinder:
    """Class scanning capability supplied by the host."""

    def index(self, mods: Sequence[ModHandle]) -> None:
        """Called once by the driver with the mod list it is checking."""

    def find_subtype_names_matching(self, base_type_id: str, name_suffix: str) -> List[str]:
        """
        Return fully-qualified names of subtypes of base_type_id whose
        simple name ends with name_suffix.

        Raises TypeResolutionError if base_type_id cannot be resolved.
        """
        raise NotImplementedError

    def owner_of(self, name: str) -> str:
        """Identity of whatever loaded the class (defaults to "unknown")."""
        return "unknown"
