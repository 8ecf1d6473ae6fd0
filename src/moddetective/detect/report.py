"""
Bad Mod Report

Collects findings per source and renders them as a deterministic tree:

    Bad mods found:
    - examplemod (Example Mod) by Alice, Bob
      - Missing version replacement: ${version}
      - Outdated schema: v0
    - Class gui.ShopContainer loaded by examplemod
      - Menu is called 'con tater': gui.ShopContainer

Sources are sorted by (rank, identity), findings keep insertion order, so
the output does not depend on the order the host enumerated mods in.

The report is a plain value. Turning it into a failure is the caller's
decision (see raise_if_needed / BadModsFound).
"""

from __future__ import annotations

import json
from typing import Dict, List

from ..errors import ModDetectiveError
from .sources import (
    ClassSource,
    ModSource,
    PackageSource,
    Source,
    mod_source,
    sort_key,
)


REPORT_HEADER = "Bad mods found: \n"

_KINDS = {
    ModSource: "mod",
    ClassSource: "class",
    PackageSource: "package",
}


class BadModReport:
    """Multi-valued mapping of source -> ordered findings. Append only."""

    def __init__(self) -> None:
        self._errors: Dict[Source, List[str]] = {}

    def add(self, source: Source, message: str) -> None:
        """Append a finding to source, creating the entry on first use."""
        self._errors.setdefault(source, []).append(message)

    def add_error(self, mod, message: str) -> None:
        """Append a finding for a mod handle or metadata record."""
        self.add(mod_source(mod), message)

    def add_class_error(self, class_name: str, loader: str, message: str) -> None:
        self.add(ClassSource(class_name, loader), message)

    def add_package_error(self, class_name: str, message: str) -> None:
        self.add(PackageSource.of_class(class_name), message)

    def is_empty(self) -> bool:
        return not self._errors

    def __len__(self) -> int:
        return sum(len(errors) for errors in self._errors.values())

    def __bool__(self) -> bool:
        return not self.is_empty()

    def sources(self) -> List[Source]:
        """Sources in report order."""
        return sorted(self._errors, key=sort_key)

    def errors_for(self, source: Source) -> List[str]:
        return list(self._errors.get(source, ()))

    def render(self) -> str:
        """Render the full report, header included."""
        return REPORT_HEADER + self.build_tree()

    def build_tree(self) -> str:
        lines = []
        for source in self.sources():
            lines.append(f"- {source.info}")
            for error in self._errors[source]:
                lines.append(f"  - {error}")
        return "\n".join(lines)

    def render_json(self) -> str:
        """Render the report as JSON, in the same order as render()."""
        return json.dumps(
            [
                {
                    "source": source.identity,
                    "kind": _KINDS[type(source)],
                    "info": source.info,
                    "errors": list(self._errors[source]),
                }
                for source in self.sources()
            ],
            indent=2,
        )

    def raise_if_needed(self) -> None:
        """Raise BadModsFound if any finding was recorded."""
        if not self.is_empty():
            raise BadModsFound(self)


class BadModsFound(ModDetectiveError):
    """Terminal failure carrying the rendered report as its message."""

    def __init__(self, report: BadModReport):
        super().__init__(report.render())
        self.report = report
