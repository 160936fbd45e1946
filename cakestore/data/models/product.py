from sqlalchemy import Column, Integer, String, Text, Float, Boolean, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship

from cakestore.data.database import Base
from cakestore.data.models._mixins import TimestampMixin


class ProductModel(TimestampMixin, Base):
    __tablename__ = "products"
    __table_args__ = (
        CheckConstraint("count_in_stock >= 0", name="ck_products_stock_non_negative"),
    )

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False, index=True)
    image = Column(String(500), nullable=True)
    brand = Column(String(100), nullable=True)
    description = Column(Text, nullable=True)

    price = Column(Integer, nullable=False)  # VND
    count_in_stock = Column(Integer, nullable=False, default=0)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True, index=True)

    #derived from reviews, written only by RatingService
    rating = Column(Float, nullable=False, default=0)
    num_reviews = Column(Integer, nullable=False, default=0)

    is_active = Column(Boolean, nullable=False, default=True)

    category = relationship("CategoryModel", back_populates="products")
