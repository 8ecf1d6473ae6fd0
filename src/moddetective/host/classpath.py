"""
Source Tree Subtype Finder

Class scanning for Python-packaged mods. Every .py file under each mod root
is parsed with ast and its class definitions are indexed:

    fully-qualified name -> (owner mod id, resolved base class names)

The fully-qualified name is the module path relative to the mod root plus
the class name, e.g. "examplemod/gui/shop.py" + "ShopContainer" gives
"examplemod.gui.shop.ShopContainer".

Base classes are resolved the way the defining module sees them: classes
defined in the same module first, then the module's imports (absolute and
relative). Subtype matching compares fully-qualified names. Only the mapped
host base type may also match by simple name, for sources that use it
without importing it.

Host type identifiers are resolved through a name mapping table before
searching, the same way a host maps obfuscated names to readable ones.
"""

from __future__ import annotations

import ast
import logging
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from ..errors import TypeResolutionError
from .base import ModHandle, PathHandle, SubtypeFinder

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClassEntry:
    """A class definition found in a mod's sources."""
    name: str               # fully-qualified
    owner: str              # mod id
    bases: Tuple[str, ...]  # resolved dotted base names

    @property
    def simple_name(self) -> str:
        return self.name.rsplit(".", 1)[-1]


def _dotted(node: ast.expr) -> Optional[str]:
    parts = []
    cur = node
    while isinstance(cur, ast.Attribute):
        parts.append(cur.attr)
        cur = cur.value
    if isinstance(cur, ast.Name):
        parts.append(cur.id)
        return ".".join(reversed(parts))
    return None


def _walk_py_files(root: PathHandle, prefix: Tuple[str, ...] = ()) -> Iterator[Tuple[Tuple[str, ...], PathHandle]]:
    for child in sorted(root.iterdir(), key=lambda p: p.name):
        if child.is_dir():
            yield from _walk_py_files(child, prefix + (child.name,))
        elif child.name.endswith(".py"):
            yield prefix + (child.name[:-3],), child


def _import_base(module: str, is_package: bool, level: int, target: Optional[str]) -> str:
    """Absolute module named by a (possibly relative) from-import."""
    if level == 0:
        return target or ""
    parts = module.split(".") if module else []
    if not is_package:
        parts = parts[:-1]
    if level > 1:
        parts = parts[:len(parts) - (level - 1)]
    if target:
        parts.append(target)
    return ".".join(parts)


def module_imports(tree: ast.Module, module: str, is_package: bool = False) -> Dict[str, str]:
    """Map of local name -> dotted name bound by the module's imports."""
    aliases: Dict[str, str] = {}
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                if alias.asname:
                    aliases[alias.asname] = alias.name
                else:
                    head = alias.name.split(".", 1)[0]
                    aliases[head] = head
        elif isinstance(node, ast.ImportFrom):
            base = _import_base(module, is_package, node.level, node.module)
            for alias in node.names:
                if alias.name == "*":
                    continue
                full = f"{base}.{alias.name}" if base else alias.name
                aliases[alias.asname or alias.name] = full
    return aliases


def index_classes(source: str, module: str, owner: str, is_package: bool = False) -> List[ClassEntry]:
    """Index top-level and nested classes in one module's source."""
    tree = ast.parse(source)
    aliases = module_imports(tree, module, is_package)
    local = {node.name for node in tree.body if isinstance(node, ast.ClassDef)}

    def resolve(dotted: str) -> str:
        head, _, rest = dotted.partition(".")
        tail = f".{rest}" if rest else ""
        if head in local:
            return f"{module}.{dotted}" if module else dotted
        if head in aliases:
            return aliases[head] + tail
        return dotted

    entries = []

    def visit(body, scope: str) -> None:
        for node in body:
            if isinstance(node, ast.ClassDef):
                name = f"{scope}.{node.name}" if scope else node.name
                bases = tuple(resolve(b) for b in (_dotted(base) for base in node.bases) if b)
                entries.append(ClassEntry(name, owner, bases))
                visit(node.body, name)

    visit(tree.body, module)
    return entries


class SourceTreeSubtypeFinder(SubtypeFinder):
    """SubtypeFinder over the .py sources packaged in each mod."""

    def __init__(self, mappings: Optional[Dict[str, str]] = None):
        self.mappings = dict(mappings or {})
        self._index: Dict[str, ClassEntry] = {}

    def map_class_name(self, type_id: str) -> str:
        """Resolve a host type identifier to a class name."""
        try:
            return self.mappings[type_id]
        except KeyError:
            raise TypeResolutionError(f"No mapping for type '{type_id}'") from None

    def index(self, mods: Sequence[ModHandle]) -> None:
        """Index the classes of every mod in the list."""
        index: Dict[str, ClassEntry] = {}
        for mod in mods:
            owner = mod.metadata().id
            try:
                files = list(_walk_py_files(mod.root_path()))
            except OSError as e:
                logger.warning(f"Could not list sources of {owner}: {e}")
                continue

            for parts, path in files:
                is_package = parts[-1] == "__init__"
                module = ".".join(parts[:-1] if is_package else parts)
                try:
                    entries = index_classes(path.read_text(encoding="utf-8"), module, owner, is_package)
                except (OSError, SyntaxError, UnicodeDecodeError, ValueError) as e:
                    logger.warning(f"Skipping {owner}:{'/'.join(parts)}.py: {e}")
                    continue
                for entry in entries:
                    index.setdefault(entry.name, entry)

        logger.debug(f"Indexed {len(index)} classes")
        self._index = index

    def classes(self) -> Dict[str, ClassEntry]:
        return self._index

    def find_subtype_names_matching(self, base_type_id: str, name_suffix: str) -> List[str]:
        base = self.map_class_name(base_type_id)
        base_simple = base.rsplit(".", 1)[-1]
        classes = self._index

        def is_host_base(name: str) -> bool:
            if name == base:
                return True
            # Unresolved reference to the host type by its short name
            return name not in classes and name.rsplit(".", 1)[-1] == base_simple

        subtypes = set()
        changed = True
        while changed:
            changed = False
            for entry in classes.values():
                if entry.name in subtypes or entry.name == base:
                    continue
                if any(b in subtypes or is_host_base(b) for b in entry.bases):
                    subtypes.add(entry.name)
                    changed = True

        return sorted(
            name for name in subtypes
            if classes[name].simple_name.endswith(name_suffix)
        )

    def owner_of(self, name: str) -> str:
        entry = self._index.get(name)
        return entry.owner if entry else "unknown"
