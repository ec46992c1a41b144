"""Editing session over one or more selected assembly definitions.

The session owns the loaded records and the combined view built from them,
and exposes the editing commands used by the inspector window and the batch
edit helper: load, revert, apply, row add/remove/edit, flag toggles and the
platform selection commands.
"""

import logging
from pathlib import Path

from asmdef_editor.asset_database import AssetDatabase, guid_to_reference
from asmdef_editor.catalogs import OptionalModuleCatalog, PlatformCatalog
from asmdef_editor.constants import (
    ASMDEF_FILE_EXTENSION,
    DEFAULT_JSON_INDENT,
    INVALID_EXPRESSION_TEXT,
    MISSING_VALUE_TEXT,
)
from asmdef_editor.edit_committer import EditCommitter
from asmdef_editor.errors import LoadError
from asmdef_editor.list_patcher import insert_row, move_row, remove_row
from asmdef_editor.mixed_bool import MixedBool, to_mixed_bool
from asmdef_editor.models import (
    ROW_TYPES,
    SCALAR_FIELDS,
    AssemblyDefinitionState,
    AssemblyReference,
    PrecompiledReference,
)
from asmdef_editor.platform_compatibility import set_platform_compatibility, toggle_any_platform
from asmdef_editor.reconciler import combine_states, has_mixed_values
from asmdef_editor.record_loader import RecordLoader
from asmdef_editor.version_ranges import ExpressionError, SemVersionRanges

logger = logging.getLogger(__name__)


class InspectorSession:
    """Combined editing of the selected assembly definition files."""

    def __init__(
        self,
        paths: list[Path],
        asset_database: AssetDatabase,
        platforms: PlatformCatalog | None = None,
        optional_modules: OptionalModuleCatalog | None = None,
        json_indent: int = DEFAULT_JSON_INDENT,
        version_resources: list[str] | None = None,
    ):
        """Initialize the session.

        Args:
            paths: The selected .asmdef files, at least one.
            asset_database: Project asset access.
            platforms: Platform catalog; defaults to the built-in list.
            optional_modules: Optional module catalog; defaults to the built-in list.
            json_indent: Indentation used when saving.
            version_resources: Known package/module names offered for version defines.
        """
        if not paths:
            raise ValueError("At least one assembly definition must be selected")

        self.paths = [Path(p) for p in paths]
        self.asset_database = asset_database
        self.platforms = platforms or PlatformCatalog()
        self.optional_modules = optional_modules or OptionalModuleCatalog()
        self.loader = RecordLoader(asset_database, self.platforms, self.optional_modules)
        self.committer = EditCommitter(
            asset_database, self.platforms, self.optional_modules, json_indent)
        self.version_ranges = SemVersionRanges()
        self.version_resources = list(version_resources or [])

        self.states: list[AssemblyDefinitionState] | None = None
        self.combined: AssemblyDefinitionState | None = None
        self.load_error: str | None = None

    # Loading -----------------------------------------------------------

    def load(self) -> bool:
        """Load every selected record and build the combined view.

        If any record fails to load, no view is built and load_error holds
        the reason.

        Returns:
            True if all records loaded.
        """
        try:
            states = [self.loader.load(path) for path in self.paths]
        except LoadError as e:
            logger.error("Load error: %s", e)
            self.states = None
            self.combined = None
            self.load_error = str(e)
            return False

        self.states = states
        self.combined = combine_states(states)
        self.load_error = None
        return True

    def revert(self) -> bool:
        """Discard unapplied edits by reloading from disk."""
        logger.info("Reverting %d assembly definition(s)", len(self.paths))
        return self.load()

    def apply(self) -> list[tuple[Path | None, str | None]]:
        """Commit the combined view to every record and save them.

        Returns:
            One (path, error message or None) tuple per record.
        """
        combined, states = self._require_loaded()
        results = self.committer.commit(combined, states)
        self.combined = combine_states(states)
        return results

    def close(self, apply_changes: bool) -> list[tuple[Path | None, str | None]] | None:
        """Close the session, applying unsaved edits when asked to."""
        results = None
        if self.has_unsaved_changes and apply_changes:
            results = self.apply()
        self.states = None
        self.combined = None
        return results

    def _require_loaded(self) -> tuple[AssemblyDefinitionState, list[AssemblyDefinitionState]]:
        if self.combined is None or self.states is None:
            raise RuntimeError(self.load_error or "Assembly definitions are not loaded")
        return self.combined, self.states

    # State queries -----------------------------------------------------

    @property
    def is_loaded(self) -> bool:
        return self.combined is not None

    @property
    def is_multi_edit(self) -> bool:
        return len(self.paths) > 1

    @property
    def can_edit_name(self) -> bool:
        return not self.is_multi_edit

    @property
    def can_reorder(self) -> bool:
        return not self.is_multi_edit

    @property
    def has_unsaved_changes(self) -> bool:
        return self.combined is not None and self.combined.modified

    def unsaved_changes_message(self) -> str:
        if self.is_multi_edit:
            return f"Unapplied import settings for '{len(self.paths)}' files"
        return f"Unapplied import settings for '{self.paths[0]}'"

    def display_name(self) -> str:
        """Name shown in the name field; all names when several are selected."""
        combined, states = self._require_loaded()
        if self.is_multi_edit:
            return ", ".join(state.name for state in states)
        return combined.name

    def has_mixed_values(self) -> bool:
        """True when the selected files disagree on any field or row."""
        combined, _ = self._require_loaded()
        return has_mixed_values(combined)

    def available_assembly_names(self) -> list[str]:
        """Assembly definition names in the project, other than the selected ones."""
        _, states = self._require_loaded()
        selected = {state.name for state in states}
        return [name for name in self.asset_database.assembly_names() if name not in selected]

    def has_missing_references(self) -> bool:
        combined, _ = self._require_loaded()
        return any(r.is_missing for r in combined.references)

    def has_missing_precompiled_references(self) -> bool:
        combined, _ = self._require_loaded()
        return any(r.is_missing for r in combined.precompiled_references)

    def available_precompiled_names(self) -> list[str]:
        """Precompiled assembly file names that are not referenced yet."""
        combined, _ = self._require_loaded()
        selected = {r.file_name for r in combined.precompiled_references}
        return sorted(
            assembly.file_name
            for assembly in self.asset_database.precompiled_assemblies()
            if assembly.file_name not in selected
        )

    def available_version_resources(self, index: int | None = None) -> list[str]:
        """Resource names offered for version defines."""
        combined, states = self._require_loaded()
        names = list(self.version_resources)
        for state in states:
            for version_define in state.version_defines:
                if version_define.name and version_define.name not in names:
                    names.append(version_define.name)
        if index is not None:
            own_name = combined.version_defines[index].name
            if own_name and own_name not in names:
                names.append(own_name)
        return names

    def expression_outcome(self, index: int) -> str | None:
        """Describe the expression of a version define row, or 'Invalid'."""
        combined, _ = self._require_loaded()
        expression = combined.version_defines[index].expression
        if not expression:
            return None
        try:
            return self.version_ranges.evaluate(expression)
        except ExpressionError:
            return INVALID_EXPRESSION_TEXT

    # Field edits -------------------------------------------------------

    def set_name(self, name: str):
        combined, _ = self._require_loaded()
        if not self.can_edit_name:
            raise ValueError("The name can only be edited with a single assembly definition selected")
        if name != combined.name:
            combined.name = name
            combined.modified = True

    def set_flag(self, field_name: str, value: bool):
        """Set one of the scalar flags (allow_unsafe_code, use_guids, ...)."""
        combined, _ = self._require_loaded()
        if field_name not in SCALAR_FIELDS:
            raise KeyError(f"Unknown flag: {field_name}")
        setattr(combined, field_name, to_mixed_bool(value))
        combined.modified = True

    def set_optional_reference(self, index: int, value: bool):
        combined, _ = self._require_loaded()
        combined.optional_unity_references[index] = to_mixed_bool(value)
        combined.modified = True

    def set_platform(self, index: int, value: bool):
        combined, _ = self._require_loaded()
        combined.platform_compatibility[index] = to_mixed_bool(value)
        combined.modified = True

    def toggle_any_platform(self, value: bool):
        combined, states = self._require_loaded()
        toggle_any_platform(combined, states, to_mixed_bool(value))

    def select_all_platforms(self):
        combined, _ = self._require_loaded()
        set_platform_compatibility(combined, MixedBool.TRUE)
        combined.modified = True

    def deselect_all_platforms(self):
        combined, _ = self._require_loaded()
        set_platform_compatibility(combined, MixedBool.FALSE)
        combined.modified = True

    # List rows ---------------------------------------------------------

    def add_row(self, list_name: str, index: int | None = None) -> int:
        """Add an empty row. Appends when index is None."""
        combined, states = self._require_loaded()
        template = ROW_TYPES[list_name]()
        if index is None:
            index = len(combined.rows(list_name))
        return insert_row(combined, states, list_name, index, template)

    def remove_row(self, list_name: str, index: int):
        combined, states = self._require_loaded()
        remove_row(combined, states, list_name, index)

    def move_row(self, list_name: str, old_index: int, new_index: int):
        combined, _ = self._require_loaded()
        if not self.can_reorder:
            raise ValueError("Rows can only be reordered with a single assembly definition selected")
        move_row(combined, list_name, old_index, new_index)

    def _set_row(self, list_name: str, index: int, row):
        combined, _ = self._require_loaded()
        row.display_value = MixedBool.FALSE
        combined.rows(list_name)[index] = row
        combined.modified = True

    def set_reference(self, index: int, target: str | Path):
        """Point a reference row at another assembly definition.

        Args:
            target: Path to an .asmdef file, an assembly name, or a GUID: reference.

        Raises:
            LoadError: If the target cannot be found or read.
        """
        combined, _ = self._require_loaded()
        target_path = Path(target) if str(target).endswith(ASMDEF_FILE_EXTENSION) else None
        if target_path is None:
            target_path = self.asset_database.get_path_from_reference(str(target))
        if target_path is None:
            raise LoadError(f"Could not get assembly definition filename for assembly '{target}'")

        data = self.asset_database.read_record(target_path)
        name = data.get('name')
        if not isinstance(name, str) or not name:
            raise LoadError("Referenced assembly definition has no name", target_path)

        guid = self.asset_database.path_to_guid(target_path)
        serialized = guid_to_reference(guid) if guid and combined.use_guids == MixedBool.TRUE else name
        self._set_row('references', index, AssemblyReference(
            name=name, serialized_reference=serialized, path=target_path, data=data))

    def set_precompiled_reference(self, index: int, file_name: str):
        """Point a precompiled reference row at a discovered assembly."""
        matches = [
            assembly for assembly in self.asset_database.precompiled_assemblies()
            if assembly.file_name == file_name
        ]
        if not matches:
            raise ValueError(f"Unknown precompiled assembly '{file_name}'")
        self._set_row('precompiled_references', index,
                      PrecompiledReference(name=file_name, precompiled=matches[0]))

    def set_define_constraint(self, index: int, name: str):
        """Change a define constraint. Empty values are ignored."""
        combined, _ = self._require_loaded()
        if not name or name == MISSING_VALUE_TEXT:
            return
        row = combined.define_constraints[index].copy()
        if row.name == name and row.display_value != MixedBool.MIXED:
            return
        row.name = name
        self._set_row('define_constraints', index, row)

    def set_version_define(
        self,
        index: int,
        name: str | None = None,
        define: str | None = None,
        expression: str | None = None,
    ):
        """Change fields of a version define row. None leaves a field as it is.

        A call that changes nothing is ignored, so a Mixed row stays Mixed
        until one of its fields is actually edited.
        """
        combined, _ = self._require_loaded()
        row = combined.version_defines[index].copy()
        if name is not None:
            row.name = name
        if define is not None:
            row.define = define
        if expression is not None:
            row.expression = expression
        if row.identity() == combined.version_defines[index].identity():
            return
        self._set_row('version_defines', index, row)
