"""Adding and removing list rows across the combined view and every record."""

import logging

from asmdef_editor.mixed_bool import MixedBool
from asmdef_editor.models import AssemblyDefinitionState

logger = logging.getLogger(__name__)


def insert_row(
    combined: AssemblyDefinitionState,
    states: list[AssemblyDefinitionState],
    list_name: str,
    index: int,
    template,
) -> int:
    """Insert a copy of template into the combined list and the records.

    Only records whose list is not longer than the combined list receive the
    row, at min(index, own length).

    Returns:
        The index the row was inserted at in the combined list.
    """
    combined_rows = combined.rows(list_name)
    combined_count = len(combined_rows)
    index = max(0, min(index, combined_count))

    row = template.copy()
    row.display_value = MixedBool.FALSE
    combined_rows.insert(index, row)

    for state in states:
        rows = state.rows(list_name)
        if len(rows) <= combined_count:
            rows.insert(min(index, len(rows)), template.copy())

    combined.modified = True
    logger.debug("Inserted %s row at %d", list_name, index)
    return index


def remove_row(
    combined: AssemblyDefinitionState,
    states: list[AssemblyDefinitionState],
    list_name: str,
    index: int,
):
    """Remove row index from the combined list and from every record.

    Rows past the combined length in longer records are kept.

    Raises:
        IndexError: If index is not a row of the combined list.
    """
    combined_rows = combined.rows(list_name)
    if not 0 <= index < len(combined_rows):
        raise IndexError(f"{list_name} row {index} out of range")

    for state in states:
        del state.rows(list_name)[index]
    del combined_rows[index]

    combined.modified = True
    logger.debug("Removed %s row %d", list_name, index)


def move_row(combined: AssemblyDefinitionState, list_name: str, old_index: int, new_index: int):
    """Reorder a row of the combined list. Only used with a single record."""
    rows = combined.rows(list_name)
    row = rows.pop(old_index)
    rows.insert(new_index, row)
    combined.modified = True
