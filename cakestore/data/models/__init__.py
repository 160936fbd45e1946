#import all models so SQLAlchemy registers them in Base.metadata

from cakestore.data.models.user import UserModel
from cakestore.data.models.category import CategoryModel
from cakestore.data.models.product import ProductModel
from cakestore.data.models.order import OrderModel
from cakestore.data.models.order_item import OrderItemModel
from cakestore.data.models.review import ReviewModel

__all__ = [
    "UserModel",
    "CategoryModel",
    "ProductModel",
    "OrderModel",
    "OrderItemModel",
    "ReviewModel",
]
