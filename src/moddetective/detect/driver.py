"""
Detective driver.

Runs every rule over the host's mod list and decides the outcome:
no findings -> a single success line, otherwise a single BadModsFound
carrying the rendered report.
"""

from __future__ import annotations

import logging
from typing import Optional

from ..host.base import ModLoader, SubtypeFinder
from .report import BadModReport
from .rules import check_class_collisions, check_files, check_metadata

logger = logging.getLogger(__name__)


SUCCESS_MESSAGE = "No bad mods found!"


def collect(
    loader: ModLoader,
    finder: Optional[SubtypeFinder] = None,
    attribution: str = "class",
) -> BadModReport:
    """Run all rules and return the report without raising."""
    report = BadModReport()
    mods = list(loader.list_mods())

    for mod in mods:
        check_metadata(mod, report)
        check_files(mod, report)

    if finder is not None:
        finder.index(mods)
    check_class_collisions(finder, report, attribution)

    logger.debug(f"Collected {len(report)} findings")
    return report


def initialize(
    loader: ModLoader,
    finder: Optional[SubtypeFinder] = None,
    attribution: str = "class",
) -> None:
    """
    Entry point: inspect every mod, raise BadModsFound if anything is wrong.

    The exception is meant to propagate and abort host startup.
    """
    report = collect(loader, finder, attribution)
    report.raise_if_needed()
    logger.info(SUCCESS_MESSAGE)
