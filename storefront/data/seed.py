# storefront/data/seed.py
from decimal import Decimal

from storefront.data.database import SessionLocal, Base, engine
from storefront.data.models import ProductModel
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

PRODUCTS = [
    {"id": "prod-cleanser", "name": "Gentle Foaming Cleanser", "sku": "TC-CLN-150", "price": Decimal("8500.00"), "quantity": 40, "weight_kg": Decimal("0.20")},
    {"id": "prod-serum", "name": "Niacinamide 10% Serum", "sku": "TC-SER-030", "price": Decimal("12500.00"), "quantity": 25, "weight_kg": Decimal("0.10")},
    {"id": "prod-sunscreen", "name": "Mineral Sunscreen SPF 50", "sku": "TC-SPF-050", "price": Decimal("15000.00"), "quantity": 30, "weight_kg": Decimal("0.15")},
    {"id": "prod-moisturizer", "name": "Ceramide Barrier Moisturizer", "sku": "TC-MST-050", "price": Decimal("11000.00"), "quantity": 0, "weight_kg": Decimal("0.25")},
    {"id": "prod-gift-card", "name": "Gift Card", "sku": "TC-GFT-001", "price": Decimal("20000.00"), "quantity": 0, "weight_kg": Decimal("0"), "track_quantity": False},
]


def seed():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        # not forcing: only seed if empty
        if db.query(ProductModel).first():
            return
        for data in PRODUCTS:
            db.add(ProductModel(status="ACTIVE", **data))
        db.commit()
        logger.info(f"Seeded {len(PRODUCTS)} products")
    finally:
        db.close()


if __name__ == "__main__":
    seed()
