"""Include/exclude platform handling.

platform_compatibility always lists platforms in the opposite sense of
compatible_with_any_platform: when the record is compatible with any
platform the flags mark excluded platforms, otherwise they mark included
platforms.
"""

import logging

from asmdef_editor.errors import InvalidStateError
from asmdef_editor.mixed_bool import MixedBool, invert
from asmdef_editor.models import AssemblyDefinitionState
from asmdef_editor.reconciler import update_combined_platforms

logger = logging.getLogger(__name__)


def inverse_platform_compatibility(state: AssemblyDefinitionState):
    """Negate every platform flag of a state in place."""
    state.platform_compatibility = [invert(value) for value in state.platform_compatibility]


def update_platform_compatibility(
    compatible_with_any_platform: MixedBool,
    states: list[AssemblyDefinitionState],
):
    """Bring every state to the same include/exclude mode.

    States already in the target mode are left alone. The others switch mode
    and have their platform flags inverted, so the set of platforms the
    assembly builds for does not change.

    Raises:
        InvalidStateError: If the target value is Mixed.
    """
    if compatible_with_any_platform == MixedBool.MIXED:
        raise InvalidStateError("Cannot normalize platform compatibility to a Mixed value")

    for state in states:
        if state.compatible_with_any_platform == compatible_with_any_platform:
            continue

        state.compatible_with_any_platform = compatible_with_any_platform
        inverse_platform_compatibility(state)
        logger.debug("Switched %s to %s platforms", state.path,
                     "exclude" if compatible_with_any_platform == MixedBool.TRUE else "include")


def set_platform_compatibility(state: AssemblyDefinitionState, value: MixedBool):
    """Set every platform flag of a state to one value (select all / deselect all)."""
    state.platform_compatibility = [value] * len(state.platform_compatibility)


def toggle_any_platform(
    combined: AssemblyDefinitionState,
    states: list[AssemblyDefinitionState],
    value: MixedBool,
):
    """Apply a user edit of the combined "Any Platform" toggle.

    Going from Mixed to a concrete value normalizes every record to that
    mode and rebuilds the combined platform flags from them. Going from one
    concrete value to the other inverts the flags of the combined state and
    of the records, keeping pending per-platform edits.

    Raises:
        InvalidStateError: If value is Mixed.
    """
    if value == MixedBool.MIXED:
        raise InvalidStateError("Any Platform cannot be set to a Mixed value")

    previous = combined.compatible_with_any_platform
    if previous == value:
        return

    if previous == MixedBool.MIXED:
        update_platform_compatibility(value, states)
        update_combined_platforms(combined, states)
    else:
        combined.compatible_with_any_platform = value
        inverse_platform_compatibility(combined)
        update_platform_compatibility(value, states)

    combined.modified = True
