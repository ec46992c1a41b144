"""Loading of assembly definition records.

This module handles:
- Parsing the raw JSON content of one .asmdef into an AssemblyDefinitionState
- Validating define symbols and skipping malformed list entries
- Resolving references to other assembly definitions
- Rebuilding the platform filter from include/exclude lists
"""

import logging
from pathlib import Path
from typing import Any, Callable

from asmdef_editor.asset_database import (
    AssetDatabase,
    REFERENCE_TYPE_GUID,
    get_reference_type,
)
from asmdef_editor.catalogs import OptionalModuleCatalog, PlatformCatalog
from asmdef_editor.errors import (
    EntryValidationError,
    LoadError,
    UnresolvedReferenceWarning,
)
from asmdef_editor.mixed_bool import MixedBool, to_mixed_bool
from asmdef_editor.models import (
    AssemblyDefinitionState,
    AssemblyReference,
    DefineConstraint,
    PrecompiledReference,
    VersionDefine,
)
from asmdef_editor.symbols import is_valid_symbol_name, strip_not_prefix

logger = logging.getLogger(__name__)

# Keys of the persisted format modeled by AssemblyDefinitionState.
KNOWN_KEYS = (
    'name',
    'references',
    'optionalUnityReferences',
    'includePlatforms',
    'excludePlatforms',
    'allowUnsafeCode',
    'overrideReferences',
    'precompiledReferences',
    'autoReferenced',
    'defineConstraints',
    'versionDefines',
)


def _get_list(data: dict[str, Any], key: str, path: Path) -> list:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise LoadError(f"'{key}' must be an array", path)
    return value


def _get_bool(data: dict[str, Any], key: str, default: bool, path: Path) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise LoadError(f"'{key}' must be true or false", path)
    return value


class RecordLoader:
    """Builds AssemblyDefinitionState objects from persisted records."""

    def __init__(
        self,
        asset_database: AssetDatabase,
        platforms: PlatformCatalog | None = None,
        optional_modules: OptionalModuleCatalog | None = None,
        symbol_validator: Callable[[str], bool] = is_valid_symbol_name,
    ):
        """Initialize the loader.

        Args:
            asset_database: Used to read records and resolve references.
            platforms: Platform catalog; defaults to the built-in list.
            optional_modules: Optional module catalog; defaults to the built-in list.
            symbol_validator: Predicate for define symbol names.
        """
        self.asset_database = asset_database
        self.platforms = platforms or PlatformCatalog()
        self.optional_modules = optional_modules or OptionalModuleCatalog()
        self.is_valid_symbol = symbol_validator

    def load(self, path: Path) -> AssemblyDefinitionState:
        """Read and parse one record.

        Raises:
            LoadError: If the record cannot be read or parsed. No partial
                state is returned.
        """
        path = Path(path)
        data = self.asset_database.read_record(path)
        return self.load_from_data(path, data)

    def load_from_data(self, path: Path, data: dict[str, Any]) -> AssemblyDefinitionState:
        """Parse the raw content of one record."""
        if not isinstance(data, dict):
            raise LoadError("Assembly definition must be a JSON object", path)

        name = data.get('name', '')
        if not isinstance(name, str):
            raise LoadError("'name' must be a string", path)

        state = AssemblyDefinitionState(path=path, name=name)
        state.allow_unsafe_code = to_mixed_bool(_get_bool(data, 'allowUnsafeCode', False, path))
        state.override_references = to_mixed_bool(_get_bool(data, 'overrideReferences', False, path))
        state.auto_referenced = to_mixed_bool(_get_bool(data, 'autoReferenced', True, path))
        state.extra_fields = {k: v for k, v in data.items() if k not in KNOWN_KEYS}

        references = _get_list(data, 'references', path)

        # A record without references (e.g. a new one) defaults to GUID
        # references. Any GUID reference below switches it on as well.
        state.use_guids = to_mixed_bool(not references)

        self._load_version_defines(state, _get_list(data, 'versionDefines', path))
        self._load_define_constraints(state, _get_list(data, 'defineConstraints', path))
        self._load_references(state, references)
        self._load_precompiled_references(state, _get_list(data, 'precompiledReferences', path))
        self._load_optional_references(state, _get_list(data, 'optionalUnityReferences', path))
        self._load_platforms(
            state,
            _get_list(data, 'includePlatforms', path),
            _get_list(data, 'excludePlatforms', path),
        )

        if state.modified:
            logger.info("Loaded %s with %d skipped or unresolved entries",
                        path, len(state.diagnostics))
        return state

    def _skip_entry(self, state: AssemblyDefinitionState, error: EntryValidationError):
        logger.error("%s", error)
        state.diagnostics.append(error)
        state.modified = True

    def _load_version_defines(self, state: AssemblyDefinitionState, entries: list):
        for entry in entries:
            try:
                if not isinstance(entry, dict):
                    raise EntryValidationError(f"Invalid version define entry {entry!r}", state.path)
                define = entry.get('define')
                if not isinstance(define, str) or not self.is_valid_symbol(define):
                    raise EntryValidationError(f"Invalid version define {define}", state.path)

                state.version_defines.append(VersionDefine(
                    name=entry.get('name'),
                    expression=entry.get('expression'),
                    define=define,
                ))
            except EntryValidationError as e:
                self._skip_entry(state, e)

    def _load_define_constraints(self, state: AssemblyDefinitionState, entries: list):
        for entry in entries:
            try:
                if not isinstance(entry, str):
                    raise EntryValidationError(f"Invalid define constraint {entry!r}", state.path)
                symbol_name = strip_not_prefix(entry)
                if not self.is_valid_symbol(symbol_name):
                    raise EntryValidationError(f"Invalid define constraint {symbol_name}", state.path)

                state.define_constraints.append(DefineConstraint(name=entry))
            except EntryValidationError as e:
                self._skip_entry(state, e)

    def _load_references(self, state: AssemblyDefinitionState, entries: list):
        for entry in entries:
            try:
                if not isinstance(entry, str) or not entry:
                    raise EntryValidationError(f"Invalid reference {entry!r}", state.path)
            except EntryValidationError as e:
                self._skip_entry(state, e)
                continue

            reference = AssemblyReference(name=entry, serialized_reference=entry)

            if get_reference_type(entry) == REFERENCE_TYPE_GUID:
                state.use_guids = MixedBool.TRUE

            reference_path = self.asset_database.get_path_from_reference(entry)
            if reference_path is None:
                warning = UnresolvedReferenceWarning(f"Missing reference {entry}", state.path)
                logger.warning("%s (%s)", warning, state.path)
                state.diagnostics.append(warning)
            else:
                try:
                    nested = self.asset_database.read_record(reference_path)
                    nested_name = nested.get('name')
                    if not isinstance(nested_name, str) or not nested_name:
                        raise LoadError("Referenced assembly definition has no name", reference_path)
                    reference.path = reference_path
                    reference.data = nested
                    reference.name = nested_name
                except LoadError as e:
                    warning = UnresolvedReferenceWarning(
                        f"Could not load reference {entry}: {e}", state.path)
                    logger.warning("%s", warning)
                    state.diagnostics.append(warning)
                    state.modified = True

            state.references.append(reference)

    def _load_precompiled_references(self, state: AssemblyDefinitionState, entries: list):
        name_to_precompiled = {
            assembly.file_name: assembly
            for assembly in self.asset_database.precompiled_assemblies()
        }

        for entry in entries:
            try:
                if not isinstance(entry, str):
                    raise EntryValidationError(f"Invalid precompiled reference {entry!r}", state.path)
            except EntryValidationError as e:
                self._skip_entry(state, e)
                continue

            precompiled = name_to_precompiled.get(entry)
            if precompiled is None and entry:
                logger.warning("Missing precompiled reference %s (%s)", entry, state.path)
            state.precompiled_references.append(
                PrecompiledReference(name=entry, precompiled=precompiled))

    def _load_optional_references(self, state: AssemblyDefinitionState, entries: list):
        modules = self.optional_modules.list_optional_modules()
        state.optional_unity_references = [
            to_mixed_bool(module.token in entries) for module in modules
        ]

        known_tokens = {module.token for module in modules}
        for entry in entries:
            if not isinstance(entry, str):
                self._skip_entry(state, EntryValidationError(
                    f"Invalid optional reference {entry!r}", state.path))
            elif entry not in known_tokens:
                self._skip_entry(state, EntryValidationError(
                    f"Unknown optional reference {entry!r}", state.path))

    def _load_platforms(self, state: AssemblyDefinitionState, include: list, exclude: list):
        state.platform_compatibility = [MixedBool.FALSE] * len(self.platforms)
        state.compatible_with_any_platform = MixedBool.TRUE

        if include and exclude:
            logger.warning("Both include and exclude platforms set in %s, using include list",
                           state.path)

        include_indices = self._resolve_platforms(state, include)
        exclude_indices = self._resolve_platforms(state, exclude)

        if include:
            state.compatible_with_any_platform = MixedBool.FALSE
            indices = include_indices
        else:
            indices = exclude_indices

        for index in indices:
            state.platform_compatibility[index] = MixedBool.TRUE

    def _resolve_platforms(self, state: AssemblyDefinitionState, names: list) -> list[int]:
        """Map platform names to catalog indices; any unknown name fails the load."""
        indices = []
        for platform_name in names:
            if not isinstance(platform_name, str):
                raise LoadError(f"Invalid platform entry {platform_name!r}", state.path)
            indices.append(self.platforms.get_index(platform_name, state.path))
        return indices
