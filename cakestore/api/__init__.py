# cakestore/api/__init__.py
from fastapi import APIRouter

from cakestore.api.routers import (
    auth,
    users,
    categories,
    products,
    orders,
    reviews,
    recommendations,
)

api_router = APIRouter(prefix="/api")
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(categories.router)
api_router.include_router(products.router)
api_router.include_router(orders.router)
api_router.include_router(reviews.router)
api_router.include_router(recommendations.router)
