# core/statuses.py
"""
Status registry: the valid states of every lifecycle entity and the table of
transitions a user may request directly.

Pure lookups, no I/O.
"""
from enum import Enum

from core.errors import UnknownEntityTypeError, UnknownStatusError


class EntityType(str, Enum):
    ASSET = "asset"
    ASSET_ASSIGNMENT = "asset_assignment"
    MAINTENANCE_RECORD = "maintenance_record"
    PROCUREMENT_REQUEST = "procurement_request"


class AssetStatus(str, Enum):
    PROCUREMENT = "procurement"
    IN_STOCK = "in_stock"
    ASSIGNED = "assigned"
    MAINTENANCE = "maintenance"
    RETIRED = "retired"


class AssignmentStatus(str, Enum):
    ACTIVE = "active"
    RETURNED = "returned"


class MaintenanceStatus(str, Enum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class MaintenanceType(str, Enum):
    PREVENTIVE = "preventive"
    CORRECTIVE = "corrective"
    CALIBRATION = "calibration"
    INSPECTION = "inspection"


class ProcurementStatus(str, Enum):
    DRAFT = "draft"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"
    ORDERED = "ordered"
    RECEIVED = "received"
    CANCELLED = "cancelled"


class PurchaseOrderStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    CONFIRMED = "confirmed"
    PARTIALLY_RECEIVED = "partially_received"
    RECEIVED = "received"
    CANCELLED = "cancelled"


STATUS_ENUMS: dict[EntityType, type[Enum]] = {
    EntityType.ASSET: AssetStatus,
    EntityType.ASSET_ASSIGNMENT: AssignmentStatus,
    EntityType.MAINTENANCE_RECORD: MaintenanceStatus,
    EntityType.PROCUREMENT_REQUEST: ProcurementStatus,
}


def _table(pairs: dict[Enum, set[Enum]]) -> dict[str, frozenset[str]]:
    return {src.value: frozenset(dst.value for dst in dsts) for src, dsts in pairs.items()}


# ordered/received are reached only through the purchase-order workflow, so
# they are terminal as far as direct requests go.
TRANSITIONS: dict[EntityType, dict[str, frozenset[str]]] = {
    EntityType.PROCUREMENT_REQUEST: _table({
        ProcurementStatus.DRAFT: {ProcurementStatus.SUBMITTED, ProcurementStatus.CANCELLED},
        ProcurementStatus.SUBMITTED: {
            ProcurementStatus.APPROVED,
            ProcurementStatus.REJECTED,
            ProcurementStatus.CANCELLED,
        },
        ProcurementStatus.APPROVED: set(),
        ProcurementStatus.REJECTED: set(),
        ProcurementStatus.CANCELLED: set(),
        ProcurementStatus.ORDERED: set(),
        ProcurementStatus.RECEIVED: set(),
    }),
    EntityType.MAINTENANCE_RECORD: _table({
        MaintenanceStatus.SCHEDULED: {MaintenanceStatus.IN_PROGRESS, MaintenanceStatus.CANCELLED},
        MaintenanceStatus.IN_PROGRESS: {MaintenanceStatus.COMPLETED, MaintenanceStatus.CANCELLED},
        MaintenanceStatus.COMPLETED: set(),
        MaintenanceStatus.CANCELLED: set(),
    }),
    EntityType.ASSET_ASSIGNMENT: _table({
        AssignmentStatus.ACTIVE: {AssignmentStatus.RETURNED},
        AssignmentStatus.RETURNED: set(),
    }),
    # Direct edits only. assigned/maintenance are entered and left as side
    # effects of assignment and maintenance transitions.
    EntityType.ASSET: _table({
        AssetStatus.PROCUREMENT: {AssetStatus.IN_STOCK, AssetStatus.RETIRED},
        AssetStatus.IN_STOCK: {AssetStatus.RETIRED},
        AssetStatus.RETIRED: {AssetStatus.IN_STOCK},
        AssetStatus.ASSIGNED: set(),
        AssetStatus.MAINTENANCE: set(),
    }),
}


def parse_entity_type(entity_type: "EntityType | str") -> EntityType:
    try:
        return EntityType(entity_type)
    except ValueError:
        raise UnknownEntityTypeError(f"Unknown entity type: {entity_type!r}") from None


def parse_status(entity_type: "EntityType | str", status: str) -> str:
    """Return the canonical status value, or raise UnknownStatusError."""
    et = parse_entity_type(entity_type)
    try:
        return STATUS_ENUMS[et](status).value
    except ValueError:
        raise UnknownStatusError(f"Unknown {et.value} status: {status!r}") from None


def allowed_transitions(entity_type: "EntityType | str", from_status: str) -> frozenset[str]:
    """
    Statuses a user may move an entity to from `from_status`.

    Raises:
        UnknownEntityTypeError: entity_type is not a lifecycle entity
        UnknownStatusError: from_status is not a status of that entity type
    """
    et = parse_entity_type(entity_type)
    return TRANSITIONS[et][parse_status(et, from_status)]


def is_terminal(entity_type: "EntityType | str", status: str) -> bool:
    return not allowed_transitions(entity_type, status)
