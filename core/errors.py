# core/errors.py
"""
Exceptions raised by the asset/procurement lifecycle core.

Views translate these into HTTP responses; nothing in the core catches them.
"""


class LifecycleError(Exception):
    """Base class for every lifecycle rule violation."""
    pass


class UnknownEntityTypeError(LifecycleError):
    """Raised for an entity type the status registry has no table for."""
    pass


class UnknownStatusError(LifecycleError):
    """Raised for a status value outside the entity type's enumeration."""
    pass


class IllegalTransitionError(LifecycleError):
    """Raised when the requested status is not reachable from the current one."""

    def __init__(self, entity_type: str, from_status: str | None, to_status: str):
        self.entity_type = entity_type
        self.from_status = from_status
        self.to_status = to_status
        super().__init__(
            f"Invalid status transition for {entity_type}: "
            f"{from_status} -> {to_status}"
        )


class InvalidReferenceError(LifecycleError):
    """Raised when a referenced id does not resolve within the tenant."""
    pass


class InvalidApproverError(InvalidReferenceError):
    """Raised when approving without an approver that belongs to the tenant."""
    pass


class AssetUnavailableError(LifecycleError):
    """Raised when the asset's current state forbids the requested operation."""
    pass


class StatusLockedError(LifecycleError):
    """Raised when an entity cannot be edited or deleted in its current status."""
    pass


class HasDependentsError(LifecycleError):
    """Raised when a delete is blocked by rows that still reference the entity."""

    def __init__(self, message: str, dependents: list[str] | None = None):
        self.dependents = dependents or []
        super().__init__(message)


class EntityNotFoundError(LifecycleError):
    """Raised when an entity id does not exist in the tenant (or is deleted)."""
    pass


class ApplyError(LifecycleError):
    """
    Raised when persisting a validated transition fails.

    The unit of work has already been rolled back when this is raised.
    `conflict` is True when the storage layer rejected the write because of
    a constraint (e.g. a second active assignment for the same asset).
    """

    def __init__(self, message: str, conflict: bool = False):
        self.conflict = conflict
        super().__init__(message)
