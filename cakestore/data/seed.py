# cakestore/data/seed.py
from cakestore.data.database import Base, SessionLocal, engine
from cakestore.data.models import CategoryModel, ProductModel, UserModel
from cakestore.services.auth_service import hash_password
from cakestore.utils.logging import get_logger

logger = get_logger(__name__)

CATALOG = {
    "Birthday cakes": [
        ("Strawberry cream cake", 350000, 12),
        ("Chocolate fudge cake", 420000, 8),
    ],
    "Cupcakes": [
        ("Vanilla cupcake box", 120000, 30),
        ("Matcha cupcake box", 150000, 20),
    ],
    "Bread": [
        ("Butter croissant", 35000, 50),
    ],
}


def seed(admin_email: str = "admin@cakestore.vn", admin_password: str = "admin123") -> bool:
    db = SessionLocal()
    try:
        # only seed an empty catalog
        if db.query(ProductModel).first():
            return False

        for category_name, products in CATALOG.items():
            category = CategoryModel(name=category_name)
            db.add(category)
            db.flush()
            for name, price, stock in products:
                db.add(ProductModel(name=name, price=price, count_in_stock=stock, category_id=category.id))

        if not db.query(UserModel).filter(UserModel.email == admin_email).first():
            db.add(UserModel(name="Admin", email=admin_email, password=hash_password(admin_password), is_admin=True))

        db.commit()
        logger.info(f"Seeded {sum(len(p) for p in CATALOG.values())} products in {len(CATALOG)} categories")
        return True
    finally:
        db.close()


if __name__ == "__main__":
    Base.metadata.create_all(bind=engine)
    seed()
