"""Three-valued boolean used to show agreement across several records."""

from enum import IntEnum
from typing import Iterable

from asmdef_editor.errors import InvalidStateError


class MixedBool(IntEnum):
    """False / True, or Mixed when the selected records disagree."""

    MIXED = -1
    FALSE = 0
    TRUE = 1


def to_mixed_bool(value: bool) -> MixedBool:
    """Convert a plain bool to MixedBool."""
    return MixedBool.TRUE if value else MixedBool.FALSE


def to_bool(value: MixedBool) -> bool:
    """Convert a concrete MixedBool to bool.

    Raises:
        InvalidStateError: If value is Mixed.
    """
    if value == MixedBool.MIXED:
        raise InvalidStateError("Cannot convert MixedBool.MIXED to bool")
    return value == MixedBool.TRUE


def invert(value: MixedBool) -> MixedBool:
    """Negate a MixedBool. Mixed stays Mixed."""
    if value == MixedBool.TRUE:
        return MixedBool.FALSE
    if value == MixedBool.FALSE:
        return MixedBool.TRUE
    return MixedBool.MIXED


def combine(a: MixedBool, b: MixedBool) -> MixedBool:
    """Return a if both values agree, Mixed otherwise."""
    return a if a == b else MixedBool.MIXED


def combine_all(values: Iterable[MixedBool]) -> MixedBool:
    """Fold combine() over a non-empty sequence of values."""
    iterator = iter(values)
    try:
        result = next(iterator)
    except StopIteration:
        raise ValueError("combine_all() requires at least one value") from None

    for value in iterator:
        if result == MixedBool.MIXED:
            break
        result = combine(result, value)
    return result


def clicked_value(value: MixedBool, checked: bool) -> bool:
    """Value a checkbox showing value should set after a click.

    A Mixed checkbox is drawn checked, so the click would read as unchecked;
    it sets True for every record instead.
    """
    if value == MixedBool.MIXED:
        return True
    return checked
