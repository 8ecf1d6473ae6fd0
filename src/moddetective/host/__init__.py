"""
moddetective.host - Host-side contracts and adapters.

- base: abstract contracts the detection core depends on
- metadata: fabric.mod.json parsing into schema-tiered records
- loader: mods directory enumeration (folders and .jar/.zip archives)
- classpath: ast-based subtype scanning over packaged sources
"""

from moddetective.host.base import (
    LATEST_SCHEMA_TIER,
    MetadataRecord,
    ModHandle,
    ModLoader,
    SchemaTier,
    SubtypeFinder,
    WarningSink,
)
from moddetective.host.metadata import ModMetadata, parse_mod_metadata
from moddetective.host.loader import DirectoryModLoader, FileModHandle
from moddetective.host.classpath import SourceTreeSubtypeFinder

__all__ = [
    # Contracts
    "LATEST_SCHEMA_TIER",
    "MetadataRecord",
    "ModHandle",
    "ModLoader",
    "SchemaTier",
    "SubtypeFinder",
    "WarningSink",
    # Adapters
    "ModMetadata",
    "parse_mod_metadata",
    "DirectoryModLoader",
    "FileModHandle",
    "SourceTreeSubtypeFinder",
]
