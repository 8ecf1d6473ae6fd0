"""
moddetective.detect - Rules, error aggregation and reporting.
"""

from moddetective.detect.sources import (
    ClassSource,
    ModSource,
    PackageSource,
    Source,
    sort_key,
)
from moddetective.detect.report import BadModReport, BadModsFound
from moddetective.detect.rules import (
    check_class_collisions,
    check_files,
    check_metadata,
)
from moddetective.detect.driver import collect, initialize

__all__ = [
    # Sources
    "ClassSource",
    "ModSource",
    "PackageSource",
    "Source",
    "sort_key",
    # Aggregation
    "BadModReport",
    "BadModsFound",
    # Rules
    "check_class_collisions",
    "check_files",
    "check_metadata",
    # Driver
    "collect",
    "initialize",
]
