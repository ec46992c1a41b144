"""Folding several loaded records into one combined, editable state."""

import logging

from asmdef_editor.mixed_bool import MixedBool, combine_all
from asmdef_editor.models import LIST_FIELDS, SCALAR_FIELDS, AssemblyDefinitionState

logger = logging.getLogger(__name__)


def _combine_rows(states: list[AssemblyDefinitionState], list_name: str) -> list:
    """Combine one list field.

    The combined list is as long as the shortest source list. Each row is a
    copy of the first record's row, marked Mixed as soon as any other record
    has a different row at that index.
    """
    min_count = min(len(state.rows(list_name)) for state in states)
    combined_rows = []

    for index in range(min_count):
        row = states[0].rows(list_name)[index].copy()
        row.display_value = MixedBool.FALSE
        identity = row.identity()

        for state in states[1:]:
            if state.rows(list_name)[index].identity() != identity:
                row.display_value = MixedBool.MIXED
                break

        combined_rows.append(row)

    return combined_rows


def _combine_arrays(arrays: list[list[MixedBool]]) -> list[MixedBool]:
    """Element-wise combine of equal length MixedBool arrays."""
    return [combine_all(values) for values in zip(*arrays)]


def update_combined_platforms(
    combined: AssemblyDefinitionState,
    states: list[AssemblyDefinitionState],
):
    """Recompute the platform filter of the combined state from the records."""
    combined.compatible_with_any_platform = combine_all(
        state.compatible_with_any_platform for state in states)
    combined.platform_compatibility = _combine_arrays(
        [state.platform_compatibility for state in states])


def update_combined_compatibility(
    combined: AssemblyDefinitionState,
    states: list[AssemblyDefinitionState],
):
    """Recompute the platform filter and optional module flags of the combined state."""
    update_combined_platforms(combined, states)
    combined.optional_unity_references = _combine_arrays(
        [state.optional_unity_references for state in states])


def combine_states(states: list[AssemblyDefinitionState]) -> AssemblyDefinitionState:
    """Build the combined view of one or more records.

    Args:
        states: Loaded records, at least one.

    Returns:
        A new AssemblyDefinitionState whose scalar fields are Mixed where the
        records disagree. The sources are not modified.
    """
    if not states:
        raise ValueError("At least one assembly definition state is required")

    combined = AssemblyDefinitionState(
        path=states[0].path if len(states) == 1 else None,
        name=states[0].name,
    )

    for field_name in SCALAR_FIELDS:
        setattr(combined, field_name,
                combine_all(getattr(state, field_name) for state in states))

    for list_name in LIST_FIELDS:
        setattr(combined, list_name, _combine_rows(states, list_name))

    combined.modified = any(state.modified for state in states)

    update_combined_compatibility(combined, states)

    logger.debug("Combined %d assembly definition(s)", len(states))
    return combined


def has_mixed_values(combined: AssemblyDefinitionState) -> bool:
    """Check whether any field or row of a combined state is Mixed."""
    if any(getattr(combined, name) == MixedBool.MIXED for name in SCALAR_FIELDS):
        return True
    if combined.compatible_with_any_platform == MixedBool.MIXED:
        return True
    if MixedBool.MIXED in combined.platform_compatibility:
        return True
    if MixedBool.MIXED in combined.optional_unity_references:
        return True
    return any(
        row.display_value == MixedBool.MIXED
        for list_name in LIST_FIELDS
        for row in combined.rows(list_name)
    )
