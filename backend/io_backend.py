""" Input processing backend: reads extracted resource trees and .zip/.jar archives, so the generator works the same inside a host or from the CLI. """
#  Sources are laid out like game content: assets/<namespace>/... for client assets, data/<namespace>/... for tags.

import json
import os
import zipfile
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Set


ARCHIVE_TYPES: tuple[str, ...] = (".zip", ".jar")
TAG_FOLDERS: tuple[str, ...] = ("tags/item", "tags/items") # Current and legacy item tag folders.


@dataclass
class ResourceSource:
    path: str # Absolute path to a directory or an archive.
    is_archive: bool = False
    archive_names: Optional[Set[str]] = None # Member names, read once on first access.


@dataclass
class ResourceSources:
    paths: List[str] = field(default_factory=list) # Highest priority first.
    sources: List[ResourceSource] = field(default_factory=list)

    def __post_init__(self) -> None:
        for raw_path in self.paths:
            if not raw_path or not raw_path.strip():
                continue
            absolute_path = os.path.abspath(raw_path.strip())
            if os.path.isdir(absolute_path):
                self.sources.append(ResourceSource(absolute_path))
            elif absolute_path.lower().endswith(ARCHIVE_TYPES) and zipfile.is_zipfile(absolute_path):
                self.sources.append(ResourceSource(absolute_path, is_archive=True))
            # Paths that are neither are reported by the caller; they hold no resources.

    def _archive_names(self, source: ResourceSource) -> Set[str]:
        if source.archive_names is None:
            with zipfile.ZipFile(source.path) as archive:
                source.archive_names = {name for name in archive.namelist() if not name.endswith("/")}
        return source.archive_names

    def read(self, relative_path: str) -> Optional[bytes]:
    # Returns bytes of the first source holding relative_path (forward slashes), None when absent.

        relative_path = relative_path.lstrip("/")
        for source in self.sources:
            if source.is_archive:
                if relative_path not in self._archive_names(source):
                    continue
                with zipfile.ZipFile(source.path) as archive:
                    return archive.read(relative_path)
            else:
                absolute_path = os.path.join(source.path, *relative_path.split("/"))
                if os.path.isfile(absolute_path):
                    with open(absolute_path, "rb") as f:
                        return f.read()
        return None

    def list_files(self, prefix: str) -> List[str]:
    # Lists relative paths (forward slashes) under prefix across all sources, sorted, without duplicates.

        prefix = prefix.strip("/") + "/"
        found: Set[str] = set()
        for source in self.sources:
            if source.is_archive:
                found.update(name for name in self._archive_names(source) if name.startswith(prefix))
                continue
            prefix_directory = os.path.join(source.path, *prefix.strip("/").split("/"))
            if not os.path.isdir(prefix_directory):
                continue
            for root, _subdirectories, filenames in os.walk(prefix_directory):
                for filename in filenames:
                    relative_path = os.path.relpath(os.path.join(root, filename), source.path).replace("\\", "/")
                    found.add(relative_path)
        return sorted(found)

    def list_namespaces(self, root: str) -> List[str]:
    # Namespaces present under a root folder, e.g., "assets" > ["minecraft", "somemod"].

        root = root.strip("/") + "/"
        namespaces: Set[str] = set()
        for relative_path in self.list_files(root):
            parts = relative_path[len(root):].split("/", 1)
            if len(parts) == 2 and parts[0]:
                namespaces.add(parts[0])
        return sorted(namespaces)




#                                     === Host boundary implementations ===


class FolderAssetLoader:
# Asset loader over resource sources: "ns:path" > assets/ns/path.

    def __init__(self, sources: ResourceSources) -> None:
        self.sources = sources

    def load(self, location: str) -> Optional[bytes]:
        namespace, separator, path = location.partition(":")
        if not separator or not namespace or not path:
            return None
        try:
            return self.sources.read(f"assets/{namespace}/{path}")
        except (OSError, zipfile.BadZipFile):
            return None
        # Unreadable sources count as absent, like any other missing asset.


class ResourceTreeCatalog:
# Item catalog over resource sources.
# Items are taken from item models (assets/<ns>/models/item/<path>.json), tags from data/<ns>/tags/item/<path>.json.

    def __init__(self, sources: ResourceSources) -> None:
        self.sources = sources
        self._tags: Optional[Dict[str, Set[str]]] = None # Raw tag entries: "c:ingots" > {"somemod:lead_ingot", "#c:ingots/lead"}
        self._resolved_tags: Dict[str, Set[str]] = {}

    def iter_item_ids(self) -> Iterable[str]:
        model_prefix = "models/item/"
        for namespace in self.sources.list_namespaces("assets"):
            root = f"assets/{namespace}/{model_prefix}"
            for relative_path in self.sources.list_files(root):
                if relative_path.endswith(".json"):
                    yield f"{namespace}:{relative_path[len(root):-len('.json')]}"

    def has_tag(self, item_id: str, tag: str) -> bool:
        return item_id in self._resolve_tag(tag, set())

    def _load_tags(self) -> Dict[str, Set[str]]:
        if self._tags is not None:
            return self._tags

        tags: Dict[str, Set[str]] = defaultdict(set)
        for namespace in self.sources.list_namespaces("data"):
            for tag_folder in TAG_FOLDERS:
                root = f"data/{namespace}/{tag_folder}/"
                for relative_path in self.sources.list_files(root):
                    if not relative_path.endswith(".json"):
                        continue
                    tag_name = f"{namespace}:{relative_path[len(root):-len('.json')]}"
                    tags[tag_name].update(self._read_tag_values(relative_path))
        self._tags = dict(tags)
        return self._tags

    def _read_tag_values(self, relative_path: str) -> List[str]:
        try:
            raw = self.sources.read(relative_path)
            tag_data = json.loads(raw.decode("utf-8")) if raw else {}
        except (OSError, ValueError, zipfile.BadZipFile):
            return []
        values: List[str] = []
        for value in tag_data.get("values", []) if isinstance(tag_data, dict) else []:
            if isinstance(value, dict):
                value = value.get("id")
            if isinstance(value, str) and value:
                values.append(value)
        # Entries may be plain ids, "#tag" references or {"id": ..., "required": false} objects.
        return values

    def _resolve_tag(self, tag: str, visiting: Set[str]) -> Set[str]:
        if tag in self._resolved_tags:
            return self._resolved_tags[tag]
        if tag in visiting:
            return set()
        # Cyclic tag references resolve to nothing instead of recursing forever.

        visiting.add(tag)
        members: Set[str] = set()
        for value in self._load_tags().get(tag, set()):
            if value.startswith("#"):
                members.update(self._resolve_tag(value[1:], visiting))
            else:
                members.add(value)
        visiting.discard(tag)
        self._resolved_tags[tag] = members
        return members
