"""Project asset access for Assembly Definition Editor.

This module handles:
- Reading and writing assembly definition JSON files
- Resolving reference identifiers (assembly names or GUID: form) to paths
- Reading asset GUIDs from .meta sidecar files
- Discovering precompiled assemblies in the project
"""

import json
import logging
import re
from pathlib import Path
from typing import Any

from asmdef_editor.constants import (
    ASMDEF_FILE_EXTENSION,
    GUID_REFERENCE_PREFIX,
    META_FILE_EXTENSION,
    PRECOMPILED_FILE_EXTENSION,
    DEFAULT_JSON_INDENT,
)
from asmdef_editor.errors import CommitError, LoadError
from asmdef_editor.models import PrecompiledAssembly

logger = logging.getLogger(__name__)

_META_GUID_RE = re.compile(r'^guid:\s*([0-9a-fA-F]{32})\s*$', re.MULTILINE)
_GUID_REFERENCE_RE = re.compile(r'^' + re.escape(GUID_REFERENCE_PREFIX) + r'[0-9a-fA-F]{32}$')

REFERENCE_TYPE_NAME = "name"
REFERENCE_TYPE_GUID = "guid"


def get_meta_path(path: Path) -> Path:
    """Get the .meta sidecar path for an asset."""
    return path.with_name(path.name + META_FILE_EXTENSION)


def get_reference_type(reference: str) -> str:
    """Tell whether a serialized reference is in GUID form or plain name form."""
    if _GUID_REFERENCE_RE.match(reference or ''):
        return REFERENCE_TYPE_GUID
    return REFERENCE_TYPE_NAME


def guid_to_reference(guid: str) -> str:
    """Build the GUID: form of a reference from an asset GUID."""
    return f"{GUID_REFERENCE_PREFIX}{guid}"


class AssetDatabase:
    """Index of assembly definitions and precompiled assemblies under a project root."""

    def __init__(self, project_root: Path):
        """Initialize the asset database.

        Args:
            project_root: Directory searched for .asmdef, .meta and .dll files.
        """
        self.project_root = Path(project_root)
        self._name_to_path: dict[str, Path] = {}
        self._guid_to_path: dict[str, Path] = {}
        self._precompiled: list[PrecompiledAssembly] = []
        self._indexed = False

    def refresh(self):
        """Rescan the project root."""
        self._name_to_path = {}
        self._guid_to_path = {}
        self._precompiled = []

        if not self.project_root.exists():
            logger.warning("Project root not found: %s", self.project_root)
            self._indexed = True
            return

        for asmdef_path in sorted(self.project_root.rglob(f"*{ASMDEF_FILE_EXTENSION}")):
            self._index_asmdef(asmdef_path)

        for dll_path in sorted(self.project_root.rglob(f"*{PRECOMPILED_FILE_EXTENSION}")):
            self._precompiled.append(PrecompiledAssembly(dll_path))
            self._index_guid(dll_path)

        self._indexed = True
        logger.debug("Indexed %d assembly definitions and %d precompiled assemblies",
                     len(self._name_to_path), len(self._precompiled))

    def _ensure_indexed(self):
        if not self._indexed:
            self.refresh()

    def _index_asmdef(self, path: Path):
        self._index_guid(path)
        try:
            data = self.read_record(path)
        except LoadError as e:
            logger.warning("Skipping unreadable assembly definition: %s", e)
            return

        name = data.get('name')
        if not isinstance(name, str) or not name:
            return
        if name in self._name_to_path and self._name_to_path[name] != path:
            logger.warning("Duplicate assembly name '%s' in %s and %s",
                           name, self._name_to_path[name], path)
            return
        self._name_to_path[name] = path

    def _index_guid(self, path: Path):
        guid = self.path_to_guid(path)
        if guid:
            self._guid_to_path[guid.lower()] = path

    @staticmethod
    def read_record(path: Path) -> dict[str, Any]:
        """Read the raw JSON content of an assembly definition.

        Raises:
            LoadError: If the file is missing, unreadable or not a JSON object.
        """
        path = Path(path)
        if not path.exists():
            raise LoadError("Assembly definition file not found", path)
        try:
            with open(path, 'r', encoding='utf-8-sig') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise LoadError(f"Invalid JSON: {e}", path) from e
        except OSError as e:
            raise LoadError(f"Could not read file: {e}", path) from e

        if not isinstance(data, dict):
            raise LoadError("Assembly definition must be a JSON object", path)
        return data

    @staticmethod
    def write_record(path: Path, data: dict[str, Any], indent: int = DEFAULT_JSON_INDENT):
        """Write the raw JSON content of an assembly definition.

        Raises:
            CommitError: If the file could not be written.
        """
        try:
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=indent, ensure_ascii=False)
                f.write('\n')
        except OSError as e:
            raise CommitError(f"Could not write file: {e}", path) from e

    def import_asset(self, path: Path):
        """Re-index an asset after it was written."""
        self._ensure_indexed()
        path = Path(path)
        for name, indexed_path in list(self._name_to_path.items()):
            if indexed_path == path:
                del self._name_to_path[name]
        self._index_asmdef(path)
        logger.info("Imported %s", path)

    @staticmethod
    def path_to_guid(path: Path | None) -> str | None:
        """Read an asset's GUID from its .meta file, or None if unavailable."""
        if path is None:
            return None
        meta_path = get_meta_path(Path(path))
        try:
            text = meta_path.read_text(encoding='utf-8')
        except OSError:
            return None
        match = _META_GUID_RE.search(text)
        return match.group(1).lower() if match else None

    def get_path_from_reference(self, reference: str) -> Path | None:
        """Resolve a serialized reference to an assembly definition path."""
        self._ensure_indexed()
        if get_reference_type(reference) == REFERENCE_TYPE_GUID:
            guid = reference[len(GUID_REFERENCE_PREFIX):].lower()
            path = self._guid_to_path.get(guid)
            if path is not None and path.suffix == ASMDEF_FILE_EXTENSION:
                return path
            return None
        return self._name_to_path.get(reference)

    def assembly_names(self) -> list[str]:
        self._ensure_indexed()
        return sorted(self._name_to_path)

    def precompiled_assemblies(self) -> list[PrecompiledAssembly]:
        self._ensure_indexed()
        return list(self._precompiled)
