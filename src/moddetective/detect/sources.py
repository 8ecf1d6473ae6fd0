"""
Error sources.

A source is whatever a finding is attributed to:

- ModSource: an installed mod (identity = mod id)
- ClassSource: a single class (identity = fully-qualified name)
- PackageSource: a package prefix of a class name (at most 3 segments)

Only the identity takes part in equality and hashing, so two findings for
the same mod always land under the same key even when built from different
handles. Sorting uses (rank, identity): mods first, then classes/packages.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence, Tuple, Union

from ..host.base import MetadataRecord, ModHandle


PACKAGE_DEPTH = 3

RANK_MOD = 0
RANK_PACKAGE = 1


@dataclass(frozen=True)
class ModSource:
    """Findings attributed to an installed mod."""
    id: str
    name: str = field(default="", compare=False)
    authors: Tuple[str, ...] = field(default=(), compare=False)

    rank = RANK_MOD

    @classmethod
    def from_metadata(cls, meta: MetadataRecord) -> "ModSource":
        return cls(
            id=meta.id,
            name=getattr(meta, "name", "") or "",
            authors=tuple(getattr(meta, "authors", ()) or ()),
        )

    @property
    def identity(self) -> str:
        return self.id

    @property
    def info(self) -> str:
        authors = ", ".join(self.authors) if self.authors else "unknown"
        return f"{self.id} ({self.name}) by {authors}"


@dataclass(frozen=True)
class ClassSource:
    """Findings attributed to a loaded class."""
    name: str
    loader: str = field(default="unknown", compare=False)

    rank = RANK_PACKAGE

    @property
    def identity(self) -> str:
        return self.name

    @property
    def info(self) -> str:
        return f"Class {self.name} loaded by {self.loader}"


@dataclass(frozen=True)
class PackageSource:
    """Findings attributed to a package prefix."""
    prefix: str

    rank = RANK_PACKAGE

    @classmethod
    def of_class(cls, class_name: str) -> "PackageSource":
        return cls(package_prefix(class_name))

    @property
    def identity(self) -> str:
        return self.prefix

    @property
    def info(self) -> str:
        return f"Package {self.prefix}"


Source = Union[ModSource, ClassSource, PackageSource]


def package_prefix(class_name: str, depth: int = PACKAGE_DEPTH) -> str:
    """First `depth` dotted segments of a class name."""
    parts: Sequence[str] = class_name.split(".")
    return ".".join(parts[:depth])


def mod_source(mod: Union[ModHandle, MetadataRecord]) -> ModSource:
    """Build a ModSource from a mod handle or its metadata."""
    meta = mod.metadata() if callable(getattr(mod, "metadata", None)) else mod
    return ModSource.from_metadata(meta)


def sort_key(source: Source) -> Tuple[int, str]:
    """Report ordering: mods before classes/packages, then by identity."""
    return (source.rank, source.identity)
