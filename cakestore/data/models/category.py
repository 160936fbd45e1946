from sqlalchemy import Column, Integer, String, Text
from sqlalchemy.orm import relationship

from cakestore.data.database import Base
from cakestore.data.models._mixins import TimestampMixin


class CategoryModel(TimestampMixin, Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False, unique=True)
    description = Column(Text, nullable=True)

    products = relationship("ProductModel", back_populates="category")
