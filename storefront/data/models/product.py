# storefront/data/models/product.py
import uuid

from sqlalchemy import Column, String, Integer, Numeric, Boolean

from storefront.data.database import Base


class ProductModel(Base):
    __tablename__ = "products"

    id = Column(String(32), primary_key=True, default=lambda: uuid.uuid4().hex)
    name = Column(String, nullable=False)
    sku = Column(String, nullable=True, unique=True)
    price = Column(Numeric(10, 2), nullable=False)

    status = Column(String, nullable=False, default="ACTIVE")  # ACTIVE, DRAFT, ARCHIVED
    track_quantity = Column(Boolean, nullable=False, default=True)
    quantity = Column(Integer, nullable=False, default=0)
    reserved_quantity = Column(Integer, nullable=False, default=0)
    sale_count = Column(Integer, nullable=False, default=0)
    weight_kg = Column(Numeric(6, 2), nullable=False, default=0)
