# cakestore/api/routers/products.py
from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from cakestore.api.deps import authorize_admin
from cakestore.data.database import get_db
from cakestore.domain.schemas import ApiResponse, ProductDeleteOut, ProductIn, ProductOut, ProductUpdate
from cakestore.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["products"])

SortBy = Literal["created_at", "price", "name", "rating", "sold_qty"]
SortOrder = Literal["asc", "desc"]


def get_service(db: Session):
    return ProductService(db)


@router.get("", response_model=ApiResponse[List[ProductOut]])
def list_products(
    category_id: Optional[int] = Query(None),
    brand: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    min_price: Optional[int] = Query(None, ge=0),
    max_price: Optional[int] = Query(None, ge=0),
    sort_by: SortBy = Query("created_at"),
    sort_order: SortOrder = Query("desc"),
    db: Session = Depends(get_db),
):
    filters = {
        "category_id": category_id,
        "brand": brand,
        "search": search,
        "min_price": min_price,
        "max_price": max_price,
        "sort_by": sort_by,
        "sort_order": sort_order,
    }
    return {"success": True, "data": get_service(db).list_products(filters)}


@router.get(
    "/admin/all",
    response_model=ApiResponse[List[ProductOut]],
    dependencies=[Depends(authorize_admin)],
)
def list_products_admin(
    category_id: Optional[int] = Query(None),
    brand: Optional[str] = Query(None),
    search: Optional[str] = Query(None),
    min_price: Optional[int] = Query(None, ge=0),
    max_price: Optional[int] = Query(None, ge=0),
    is_active: Optional[bool] = Query(None),
    sort_by: SortBy = Query("created_at"),
    sort_order: SortOrder = Query("desc"),
    db: Session = Depends(get_db),
):
    filters = {
        "category_id": category_id,
        "brand": brand,
        "search": search,
        "min_price": min_price,
        "max_price": max_price,
        "is_active": is_active,
        "sort_by": sort_by,
        "sort_order": sort_order,
    }
    return {"success": True, "data": get_service(db).list_products(filters, include_inactive=True)}


@router.get(
    "/admin/{product_id}",
    response_model=ApiResponse[ProductOut],
    dependencies=[Depends(authorize_admin)],
)
def get_product_admin(product_id: int, db: Session = Depends(get_db)):
    return {"success": True, "data": get_service(db).get_product(product_id, include_inactive=True)}


@router.get("/{product_id}", response_model=ApiResponse[ProductOut])
def get_product(product_id: int, db: Session = Depends(get_db)):
    return {"success": True, "data": get_service(db).get_product(product_id)}


@router.post(
    "",
    response_model=ApiResponse[ProductOut],
    status_code=201,
    dependencies=[Depends(authorize_admin)],
)
def create_product(payload: ProductIn, db: Session = Depends(get_db)):
    return {"success": True, "data": get_service(db).create_product(payload)}


@router.put("/{product_id}", response_model=ApiResponse[ProductOut], dependencies=[Depends(authorize_admin)])
def update_product(product_id: int, payload: ProductUpdate, db: Session = Depends(get_db)):
    return {"success": True, "data": get_service(db).update_product(product_id, payload)}


@router.delete("/{product_id}", response_model=ApiResponse[ProductDeleteOut], dependencies=[Depends(authorize_admin)])
def delete_product(product_id: int, db: Session = Depends(get_db)):
    return {"success": True, "data": get_service(db).delete_product(product_id)}
