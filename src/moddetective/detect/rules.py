"""
Detection rules.

The rule set is fixed:

- Missing version replacement: version is still a build placeholder
- Outdated schema: metadata uses schema tier 0
- Format warnings: latest-tier metadata reports its own format problems
- Unnamed mixin refmap: build-refmap.json shipped at the mod root
- Menu is called 'con tater': a *Container class that is really a menu

Rules never raise for a detected defect, they add a finding to the report.
Infrastructure failures (I/O, type resolution) are logged and the rule is
treated as not having fired.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..errors import TypeResolutionError
from ..host.base import LATEST_SCHEMA_TIER, ModHandle, SchemaTier, SubtypeFinder
from .report import BadModReport
from .sources import ClassSource, ModSource, PackageSource

logger = logging.getLogger(__name__)


VERSION_PLACEHOLDERS = ("$version", "${version}")
UNNAMED_REFMAP = "build-refmap.json"

# Intermediary name of the vanilla menu base type
MENU_BASE_TYPE = "net.minecraft.class_1703"
CONTAINER_SUFFIX = "Container"

ATTRIBUTIONS = ("class", "package")

_MISSING = object()


def _field(meta, name: str, mod_id: str):
    try:
        value = getattr(meta, name)
    except Exception as e:
        logger.debug(f"Could not read '{name}' of {mod_id}: {e}")
        return _MISSING
    if value is None:
        logger.debug(f"Metadata of {mod_id} has no '{name}'")
        return _MISSING
    return value


def _source_for(meta) -> Optional[ModSource]:
    """ModSource for a record, or None when it has no usable id."""
    mod_id = _field(meta, "id", "<unknown mod>")
    if mod_id is _MISSING or mod_id == "":
        return None
    mod_id = str(mod_id)

    name = _field(meta, "name", mod_id)
    authors = _field(meta, "authors", mod_id)
    return ModSource(
        id=mod_id,
        name="" if name is _MISSING else str(name),
        authors=() if authors is _MISSING else tuple(str(a) for a in authors),
    )


def check_metadata(mod: ModHandle, report: BadModReport) -> None:
    """Apply the metadata rules to one mod."""
    meta = mod.metadata()
    source = _source_for(meta)
    if source is None:
        logger.warning(f"Skipping mod without an id: {mod!r}")
        return

    version = _field(meta, "version", source.id)
    if version is not _MISSING and version in VERSION_PLACEHOLDERS:
        report.add(source, f"Missing version replacement: {version}")

    tier = _field(meta, "schema_tier", source.id)
    if tier is _MISSING:
        return

    if tier == SchemaTier.V0:
        report.add(source, "Outdated schema: v0")
    elif tier == LATEST_SCHEMA_TIER:
        meta.emit_format_warnings(lambda message: report.add(source, message))
    # V1 is accepted without checks


def check_files(mod: ModHandle, report: BadModReport) -> None:
    """Apply the packaged-file rules to one mod."""
    source = _source_for(mod.metadata())
    if source is None:
        return

    try:
        found = mod.resolve_path(UNNAMED_REFMAP).exists()
    except OSError as e:
        logger.warning(f"Could not check {UNNAMED_REFMAP} in {source.id}: {e}")
        return

    if found:
        report.add(source, f"Found unnamed mixin refmap '{UNNAMED_REFMAP}'")


def check_class_collisions(
    finder: Optional[SubtypeFinder],
    report: BadModReport,
    attribution: str = "class",
) -> None:
    """
    Flag menu subclasses named like containers.

    Runs once per invocation, not per mod. Findings go to a ClassSource
    (default) or to the class's PackageSource.
    """
    if finder is None:
        return

    try:
        names = finder.find_subtype_names_matching(MENU_BASE_TYPE, CONTAINER_SUFFIX)
    except TypeResolutionError as e:
        logger.warning(f"Skipping class collision check: {e}")
        return

    for name in names:
        message = f"Menu is called 'con tater': {name}"
        if attribution == "package":
            report.add(PackageSource.of_class(name), message)
        else:
            report.add(ClassSource(name, finder.owner_of(name)), message)
