"""Writing edits from the combined view back to the records.

This module handles:
- Copying every non-Mixed field of the combined state onto each record
- Converting a record back to its persisted JSON form
- Writing and re-importing each record, one at a time
"""

import logging
from pathlib import Path
from typing import Any

from asmdef_editor.asset_database import AssetDatabase, guid_to_reference
from asmdef_editor.catalogs import OptionalModuleCatalog, PlatformCatalog
from asmdef_editor.constants import DEFAULT_JSON_INDENT
from asmdef_editor.errors import CommitError
from asmdef_editor.mixed_bool import MixedBool, to_bool
from asmdef_editor.models import (
    LIST_FIELDS,
    SCALAR_FIELDS,
    AssemblyDefinitionState,
    AssemblyReference,
)

logger = logging.getLogger(__name__)


def _apply_array(combined_values: list[MixedBool], values: list[MixedBool]) -> list[MixedBool]:
    """Copy the non-Mixed elements of combined_values over values."""
    result = list(values)
    for i, value in enumerate(combined_values):
        if value != MixedBool.MIXED:
            result[i] = value
    return result


def apply_combined_state(combined: AssemblyDefinitionState, states: list[AssemblyDefinitionState]):
    """Copy accepted edits from the combined state onto every record.

    A field, array element or list row is copied only when it is not Mixed.
    Rows past the combined list length are left as they are.
    """
    # Names are only editable when a single record is selected.
    if len(states) == 1:
        states[0].name = combined.name

    for state in states:
        for field_name in SCALAR_FIELDS:
            value = getattr(combined, field_name)
            if value != MixedBool.MIXED:
                setattr(state, field_name, value)

        for list_name in LIST_FIELDS:
            rows = state.rows(list_name)
            for i, row in enumerate(combined.rows(list_name)):
                if row.display_value != MixedBool.MIXED:
                    rows[i] = row.copy()

        if combined.compatible_with_any_platform != MixedBool.MIXED:
            state.compatible_with_any_platform = combined.compatible_with_any_platform

        state.platform_compatibility = _apply_array(
            combined.platform_compatibility, state.platform_compatibility)
        state.optional_unity_references = _apply_array(
            combined.optional_unity_references, state.optional_unity_references)


class EditCommitter:
    """Serializes and saves assembly definition records."""

    def __init__(
        self,
        asset_database: AssetDatabase,
        platforms: PlatformCatalog | None = None,
        optional_modules: OptionalModuleCatalog | None = None,
        json_indent: int = DEFAULT_JSON_INDENT,
    ):
        self.asset_database = asset_database
        self.platforms = platforms or PlatformCatalog()
        self.optional_modules = optional_modules or OptionalModuleCatalog()
        self.json_indent = json_indent

    def _serialize_reference(self, reference: AssemblyReference, use_guids: MixedBool) -> str | None:
        if use_guids == MixedBool.TRUE:
            guid = self.asset_database.path_to_guid(reference.path)
            if not guid:
                return reference.serialized_reference
            return guid_to_reference(guid)
        if use_guids == MixedBool.FALSE:
            return reference.name
        return reference.serialized_reference

    def serialize(self, state: AssemblyDefinitionState) -> dict[str, Any]:
        """Convert a record to its persisted JSON structure."""
        data: dict[str, Any] = {'name': state.name}

        references = (self._serialize_reference(r, state.use_guids) for r in state.references)
        data['references'] = [r for r in references if r]

        modules = self.optional_modules.list_optional_modules()
        data['optionalUnityReferences'] = [
            module.token
            for module, value in zip(modules, state.optional_unity_references)
            if value == MixedBool.TRUE
        ]

        platform_names = [
            platform.name
            for platform, value in zip(self.platforms.list_platforms(), state.platform_compatibility)
            if value == MixedBool.TRUE
        ]
        if platform_names:
            if state.compatible_with_any_platform == MixedBool.TRUE:
                data['excludePlatforms'] = platform_names
            else:
                data['includePlatforms'] = platform_names

        data['allowUnsafeCode'] = to_bool(state.allow_unsafe_code)
        data['overrideReferences'] = to_bool(state.override_references)
        data['precompiledReferences'] = [r.name for r in state.precompiled_references if r.name]
        data['autoReferenced'] = to_bool(state.auto_referenced)
        data['defineConstraints'] = [c.name for c in state.define_constraints if c.name]
        data['versionDefines'] = [
            {
                'name': v.name or '',
                'expression': v.expression or '',
                'define': v.define or '',
            }
            for v in state.version_defines
        ]

        for key, value in state.extra_fields.items():
            data.setdefault(key, value)

        return data

    def save_state(self, state: AssemblyDefinitionState):
        """Write one record and re-import it.

        Raises:
            CommitError: If the record has no path or could not be written.
        """
        if state.path is None:
            raise CommitError(f"Assembly definition '{state.name}' has no file path")

        data = self.serialize(state)
        self.asset_database.write_record(state.path, data, self.json_indent)
        state.modified = False
        self.asset_database.import_asset(state.path)
        logger.info("Saved %s", state.path)

    def commit(
        self,
        combined: AssemblyDefinitionState,
        states: list[AssemblyDefinitionState],
    ) -> list[tuple[Path | None, str | None]]:
        """Apply the combined state to every record and save each one.

        Records are saved in order. A failure is reported for that record and
        the remaining records are still saved; records already written stay
        written.

        Returns:
            One (path, error message or None) tuple per record.
        """
        apply_combined_state(combined, states)

        results = []
        for state in states:
            try:
                self.save_state(state)
                results.append((state.path, None))
            except CommitError as e:
                logger.error("Error saving %s: %s", state.path, e)
                results.append((state.path, str(e)))

        combined.modified = any(state.modified for state in states)
        return results
