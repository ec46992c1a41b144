"""Unit tests for adding, removing and moving list rows."""

import pytest

from asmdef_editor.mixed_bool import MixedBool
from asmdef_editor.models import DefineConstraint
from asmdef_editor.list_patcher import insert_row, move_row, remove_row
from asmdef_editor.reconciler import combine_states

from asmdef_fixtures import make_state


def constraints(*names):
    return [DefineConstraint(name=n) for n in names]


def names(rows):
    return [row.name for row in rows]


class TestInsertRow:
    """Tests for insert_row function."""

    def test_insert_into_equal_lists(self):
        states = [make_state('A', define_constraints=constraints('X', 'Y')),
                  make_state('B', define_constraints=constraints('X', 'Y'))]
        combined = combine_states(states)

        index = insert_row(combined, states, 'define_constraints', 1, DefineConstraint('NEW'))

        assert index == 1
        assert names(combined.define_constraints) == ['X', 'NEW', 'Y']
        assert names(states[0].define_constraints) == ['X', 'NEW', 'Y']
        assert names(states[1].define_constraints) == ['X', 'NEW', 'Y']
        assert combined.modified is True

    def test_longer_record_not_inserted(self):
        states = [make_state('A', define_constraints=constraints('X', 'EXTRA')),
                  make_state('B', define_constraints=constraints('X'))]
        combined = combine_states(states)

        insert_row(combined, states, 'define_constraints', 1, DefineConstraint('NEW'))

        assert names(combined.define_constraints) == ['X', 'NEW']
        assert names(states[0].define_constraints) == ['X', 'EXTRA']
        assert names(states[1].define_constraints) == ['X', 'NEW']

    def test_index_clamped(self):
        states = [make_state('A', define_constraints=constraints('X'))]
        combined = combine_states(states)
        assert insert_row(combined, states, 'define_constraints', 10, DefineConstraint('NEW')) == 1
        assert insert_row(combined, states, 'define_constraints', -3, DefineConstraint('FIRST')) == 0
        assert names(states[0].define_constraints) == ['FIRST', 'X', 'NEW']

    def test_inserted_rows_are_independent(self):
        states = [make_state('A'), make_state('B')]
        combined = combine_states(states)
        template = DefineConstraint()

        insert_row(combined, states, 'define_constraints', 0, template)
        combined.define_constraints[0].name = 'EDITED'

        assert template.name is None
        assert states[0].define_constraints[0].name is None
        assert states[0].define_constraints[0] is not states[1].define_constraints[0]
        assert combined.define_constraints[0].display_value == MixedBool.FALSE

    def test_unknown_list(self):
        states = [make_state('A')]
        combined = combine_states(states)
        with pytest.raises(KeyError):
            insert_row(combined, states, 'unknown', 0, DefineConstraint())


class TestRemoveRow:
    """Tests for remove_row function."""

    def test_remove_from_all(self):
        states = [make_state('A', define_constraints=constraints('X', 'Y', 'EXTRA')),
                  make_state('B', define_constraints=constraints('Z', 'Y'))]
        combined = combine_states(states)

        remove_row(combined, states, 'define_constraints', 0)

        assert names(combined.define_constraints) == ['Y']
        assert names(states[0].define_constraints) == ['Y', 'EXTRA']
        assert names(states[1].define_constraints) == ['Y']
        assert combined.modified is True

    def test_remove_out_of_range(self):
        states = [make_state('A', define_constraints=constraints('X', 'EXTRA')),
                  make_state('B', define_constraints=constraints('X'))]
        combined = combine_states(states)
        with pytest.raises(IndexError):
            remove_row(combined, states, 'define_constraints', 1)
        assert names(states[0].define_constraints) == ['X', 'EXTRA']


class TestMoveRow:
    """Tests for move_row function."""

    def test_move(self):
        states = [make_state('A', define_constraints=constraints('X', 'Y', 'Z'))]
        combined = combine_states(states)
        move_row(combined, 'define_constraints', 0, 2)
        assert names(combined.define_constraints) == ['Y', 'Z', 'X']
        assert names(states[0].define_constraints) == ['X', 'Y', 'Z']
        assert combined.modified is True
