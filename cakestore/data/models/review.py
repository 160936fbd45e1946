from sqlalchemy import Column, Integer, ForeignKey, String, Text, Float, UniqueConstraint

from cakestore.data.database import Base
from cakestore.data.models._mixins import TimestampMixin


class ReviewModel(TimestampMixin, Base):
    __tablename__ = "reviews"
    __table_args__ = (UniqueConstraint("product_id", "user_id", name="u_review_product_user"),)

    id = Column(Integer, primary_key=True)
    product_id = Column(Integer, ForeignKey("products.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    name = Column(String(100), nullable=False)
    rating = Column(Float, nullable=False)
    comment = Column(Text, nullable=True)
