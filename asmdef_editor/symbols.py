"""Naming rules for scripting define symbols."""

import re

from asmdef_editor.constants import DEFINE_NOT_PREFIX

_SYMBOL_RE = re.compile(r'^[A-Za-z_][A-Za-z0-9_]*$')


def is_valid_symbol_name(name: str | None) -> bool:
    """Check whether name is a legal define symbol."""
    if not name:
        return False
    return _SYMBOL_RE.match(name) is not None


def strip_not_prefix(constraint: str) -> str:
    """Remove a leading negation marker from a define constraint."""
    if constraint.startswith(DEFINE_NOT_PREFIX):
        return constraint[len(DEFINE_NOT_PREFIX):]
    return constraint
