import pytest

from core.errors import UnknownEntityTypeError, UnknownStatusError
from core.statuses import (
    STATUS_ENUMS,
    TRANSITIONS,
    EntityType,
    allowed_transitions,
    is_terminal,
    parse_status,
)


def test_procurement_table():
    assert allowed_transitions("procurement_request", "draft") == {"submitted", "cancelled"}
    assert allowed_transitions("procurement_request", "submitted") == {"approved", "rejected", "cancelled"}
    for status in ("approved", "rejected", "cancelled", "ordered", "received"):
        assert allowed_transitions("procurement_request", status) == frozenset()


def test_maintenance_table():
    assert allowed_transitions("maintenance_record", "scheduled") == {"in_progress", "cancelled"}
    assert allowed_transitions("maintenance_record", "in_progress") == {"completed", "cancelled"}
    assert is_terminal("maintenance_record", "completed")
    assert is_terminal("maintenance_record", "cancelled")


def test_assignment_table():
    assert allowed_transitions(EntityType.ASSET_ASSIGNMENT, "active") == {"returned"}
    assert is_terminal(EntityType.ASSET_ASSIGNMENT, "returned")


def test_asset_table_leaves_assignment_and_maintenance_to_cascades():
    assert allowed_transitions("asset", "procurement") == {"in_stock", "retired"}
    assert allowed_transitions("asset", "in_stock") == {"retired"}
    assert allowed_transitions("asset", "retired") == {"in_stock"}
    assert allowed_transitions("asset", "assigned") == frozenset()
    assert allowed_transitions("asset", "maintenance") == frozenset()


def test_every_status_has_a_row_and_no_self_loops():
    for entity_type, enum in STATUS_ENUMS.items():
        table = TRANSITIONS[entity_type]
        assert set(table) == {member.value for member in enum}
        for status, targets in table.items():
            assert status not in targets


def test_unknown_entity_type():
    with pytest.raises(UnknownEntityTypeError):
        allowed_transitions("invoice", "draft")


def test_unknown_status():
    with pytest.raises(UnknownStatusError):
        allowed_transitions("asset", "lost")
    with pytest.raises(UnknownStatusError):
        parse_status("procurement_request", "APPROVED")


def test_parse_status_accepts_enum_members():
    assert parse_status("asset", "in_stock") == "in_stock"
    assert parse_status(EntityType.MAINTENANCE_RECORD, "in_progress") == "in_progress"
