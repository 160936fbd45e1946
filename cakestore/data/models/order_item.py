from sqlalchemy import Column, Integer, ForeignKey, String, CheckConstraint
from sqlalchemy.orm import relationship

from cakestore.data.database import Base


class OrderItemModel(Base):
    __tablename__ = "order_items"
    __table_args__ = (CheckConstraint("qty >= 1", name="ck_order_items_qty_positive"),)

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False, index=True)

    name = Column(String(255), nullable=False)
    qty = Column(Integer, nullable=False)
    image = Column(String(500), nullable=True)
    price = Column(Integer, nullable=False)  # snapshot at purchase time

    order = relationship("OrderModel", back_populates="items")
