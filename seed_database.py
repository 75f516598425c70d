"""Script to manually seed the database with a demo tenant"""
import sys
from datetime import datetime, timezone

from sqlalchemy import create_engine, select
from sqlalchemy.orm import sessionmaker

from config import settings
from config.database import get_sync_url
from core.request_numbers import format_request_number
# Import models and base
from db_base import Base
import db_models  # noqa: F401
from db_models.asset import Asset
from db_models.person import Person
from db_models.procurement import ProcurementItem, ProcurementRequest
from db_models.reference import AssetCategory, Location, Vendor
from db_models.tenant import Tenant

DATABASE_URL = get_sync_url(settings.DATABASE_URL)
DEMO_DOMAIN = "demo.example.com"

PEOPLE = [
    ("Alice Martin", "alice@demo.example.com", "manager", "IT Manager"),
    ("Bob Chen", "bob@demo.example.com", "employee", "Sales"),
    ("Carla Diaz", "carla@demo.example.com", "technician", "Field Technician"),
]

ASSETS = [
    ("Dell Latitude 7440", "Laptops", "DL7440-001", "in_stock"),
    ("Dell Latitude 7440", "Laptops", "DL7440-002", "in_stock"),
    ("MacBook Pro 14", "Laptops", "MBP14-001", "procurement"),
    ("Dell U2723QE", "Monitors", "U2723-001", "in_stock"),
]


def create_tables():
    """Create all database tables"""
    print("Creating database tables...")
    engine = create_engine(DATABASE_URL)
    Base.metadata.create_all(bind=engine)
    print("[OK] Tables created successfully")
    return engine


def seed_demo_tenant(engine):
    """Seed one tenant with people, reference data, assets and a draft request"""
    Session = sessionmaker(bind=engine)

    with Session() as session:
        existing = session.execute(select(Tenant).where(Tenant.domain == DEMO_DOMAIN)).scalar_one_or_none()
        if existing is not None:
            print(f"Demo tenant already exists (id={existing.id}), skipping seed")
            return

        tenant = Tenant(name="Demo Corp", domain=DEMO_DOMAIN, plan="pro")
        session.add(tenant)
        session.flush()

        people = [
            Person(tenant_id=tenant.id, name=name, email=email, role=role, position=position)
            for name, email, role, position in PEOPLE
        ]
        categories = {
            name: AssetCategory(tenant_id=tenant.id, name=name)
            for name in ("Laptops", "Monitors")
        }
        hq = Location(tenant_id=tenant.id, name="Headquarters", type="office", address="1 Main St")
        vendor = Vendor(tenant_id=tenant.id, name="Acme Supplies", contact_email="sales@acme.example.com")
        session.add_all([*people, *categories.values(), hq, vendor])
        session.flush()

        for name, category, serial, status in ASSETS:
            asset = Asset(
                tenant_id=tenant.id,
                name=name,
                category_id=categories[category].id,
                serial_number=serial,
                status=status,
                location_id=hq.id,
            )
            session.add(asset)
            print(f"  Added: {serial} - {name} ({status})")

        now = datetime.now(timezone.utc)
        request = ProcurementRequest(
            tenant_id=tenant.id,
            request_number=format_request_number(now.date(), 1),
            requested_by_id=people[1].id,
            status="draft",
            request_date=now,
            notes="Laptops for new hires",
        )
        session.add(request)
        session.flush()
        session.add(ProcurementItem(
            tenant_id=tenant.id,
            procurement_id=request.id,
            category_id=categories["Laptops"].id,
            description="14in business laptop",
            quantity=2,
            estimated_price=1400.0,
            preferred_vendor_id=vendor.id,
        ))

        session.commit()
        print(f"\n[OK] Seeded demo tenant {tenant.id} ({tenant.name})")
        print(f"[OK] Use header X-Tenant-ID: {tenant.id}")


if __name__ == "__main__":
    print("=" * 60)
    print("DATABASE SEEDING SCRIPT")
    print("=" * 60)
    print(f"Database: {DATABASE_URL}")
    print()

    try:
        engine = create_tables()
        seed_demo_tenant(engine)
        print("\n" + "=" * 60)
        print("[OK] Database setup complete!")
        print("=" * 60)
    except Exception as e:
        print(f"\n[ERROR] {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)
