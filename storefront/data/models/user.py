import uuid

from sqlalchemy import Column, String
from storefront.data.database import Base


class UserModel(Base):
    __tablename__ = "users"
    id = Column(String(32), primary_key=True, default=lambda: uuid.uuid4().hex)
    name = Column(String, nullable=False)
    email = Column(String, nullable=True, unique=True)
