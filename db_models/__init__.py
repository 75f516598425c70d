# db_models/__init__.py
# Importing the package registers every model on Base.metadata.
from db_models.tenant import Tenant
from db_models.person import Person
from db_models.reference import AssetCategory, Location, Vendor
from db_models.asset import Asset
from db_models.assignment import AssetAssignment
from db_models.maintenance import MaintenanceRecord
from db_models.procurement import ProcurementRequest, ProcurementItem, PurchaseOrder

__all__ = [
    "Tenant",
    "Person",
    "AssetCategory",
    "Location",
    "Vendor",
    "Asset",
    "AssetAssignment",
    "MaintenanceRecord",
    "ProcurementRequest",
    "ProcurementItem",
    "PurchaseOrder",
]
