"""
Mod Metadata Parser

Parses fabric.mod.json style metadata files into MetadataRecord objects.

Schema tiers:
- schemaVersion missing or 0 -> V0 (outdated layout)
- schemaVersion 1            -> latest tier (strict, collects format warnings)

The intermediate tier V1 is never produced here, it exists for hosts that
supply one.

Format warnings are only collected for the latest tier. They are stored on
the record and replayed through emit_format_warnings() so the caller
decides what to do with them.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, List, Tuple

from ..errors import MetadataError
from .base import LATEST_SCHEMA_TIER, MetadataRecord, SchemaTier, WarningSink


# schemaVersion value -> tier
SCHEMA_VERSIONS = {
    0: SchemaTier.V0,
    1: LATEST_SCHEMA_TIER,
}

KNOWN_ROOT_ENTRIES = {
    "schemaVersion",
    "id",
    "version",
    "name",
    "description",
    "authors",
    "contributors",
    "contact",
    "license",
    "icon",
    "environment",
    "entrypoints",
    "jars",
    "languageAdapters",
    "mixins",
    "accessWidener",
    "depends",
    "recommends",
    "suggests",
    "conflicts",
    "breaks",
    "custom",
}


@dataclass
class ModMetadata(MetadataRecord):
    """Metadata parsed from a mod's metadata file."""
    id: str
    name: str
    version: str
    authors: Tuple[str, ...] = ()
    schema_tier: SchemaTier = SchemaTier.V0
    format_warnings: List[str] = field(default_factory=list)

    def emit_format_warnings(self, sink: WarningSink) -> None:
        for message in self.format_warnings:
            sink(message)


def _collect_pairs(pairs: List[Tuple[str, Any]]) -> "_OrderedPairs":
    return _OrderedPairs(pairs)


class _OrderedPairs(dict):
    """JSON object that remembers every key, duplicates included."""

    def __init__(self, pairs: List[Tuple[str, Any]]):
        super().__init__(pairs)
        self.keys_in_order = [key for key, _ in pairs]


def _schema_tier(raw: Any, origin: str) -> SchemaTier:
    if raw is None:
        return SchemaTier.V0
    if isinstance(raw, bool) or not isinstance(raw, int):
        raise MetadataError(f"schemaVersion must be an integer, got {raw!r}", origin)
    try:
        return SCHEMA_VERSIONS[raw]
    except KeyError:
        raise MetadataError(f"Unsupported schemaVersion {raw}", origin) from None


def _author_name(entry: Any) -> str | None:
    if isinstance(entry, str):
        return entry
    if isinstance(entry, dict) and isinstance(entry.get("name"), str):
        return entry["name"]
    return None


def parse_mod_metadata(text: str, origin: str = "<string>") -> ModMetadata:
    """
    Parse metadata JSON text.

    Raises MetadataError for invalid JSON, a non-object root, a missing id
    or an unsupported schemaVersion.
    """
    try:
        data = json.loads(text, object_pairs_hook=_collect_pairs)
    except json.JSONDecodeError as e:
        raise MetadataError(f"Invalid JSON: {e}", origin) from e

    if not isinstance(data, dict):
        raise MetadataError("Root element must be an object", origin)

    tier = _schema_tier(data.get("schemaVersion"), origin)

    mod_id = data.get("id")
    if not isinstance(mod_id, str) or not mod_id:
        raise MetadataError("Missing mod id", origin)

    warnings: List[str] = []
    strict = tier == LATEST_SCHEMA_TIER

    if strict:
        seen = set()
        for key in data.keys_in_order:
            if key in seen:
                warnings.append(f'Duplicate root entry "{key}"')
                continue
            seen.add(key)
            if key not in KNOWN_ROOT_ENTRIES:
                warnings.append(f'Unsupported root entry "{key}"')

    version = data.get("version", "")
    if not isinstance(version, str):
        if strict:
            warnings.append(f'"version" should be a string, got {type(version).__name__}')
        version = str(version)

    authors = []
    raw_authors = data.get("authors") or []
    if not isinstance(raw_authors, list):
        raw_authors = []
    for index, entry in enumerate(raw_authors):
        name = _author_name(entry)
        if name is None:
            if strict:
                warnings.append(f"Author entry at index {index} is not a string or object with a name")
            continue
        authors.append(name)

    name = data.get("name")
    if not isinstance(name, str) or not name:
        name = mod_id

    return ModMetadata(
        id=mod_id,
        name=name,
        version=version,
        authors=tuple(authors),
        schema_tier=tier,
        format_warnings=warnings,
    )
