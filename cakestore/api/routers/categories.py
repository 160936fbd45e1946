# cakestore/api/routers/categories.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from cakestore.api.deps import authorize_admin
from cakestore.data.database import get_db
from cakestore.domain.schemas import (
    ApiResponse,
    CategoryIn,
    CategoryOut,
    CategoryUpdate,
    DeletedOut,
    ProductOut,
)
from cakestore.services.category_service import CategoryService

router = APIRouter(prefix="/categories", tags=["categories"])


def get_service(db: Session):
    return CategoryService(db)


@router.get("", response_model=ApiResponse[List[CategoryOut]])
def list_categories(db: Session = Depends(get_db)):
    return {"success": True, "data": get_service(db).list_categories()}


@router.get("/{category_id}", response_model=ApiResponse[CategoryOut])
def get_category(category_id: int, db: Session = Depends(get_db)):
    return {"success": True, "data": get_service(db).get_category(category_id)}


@router.get("/{category_id}/products", response_model=ApiResponse[List[ProductOut]])
def list_category_products(category_id: int, db: Session = Depends(get_db)):
    return {"success": True, "data": get_service(db).list_products(category_id)}


@router.post(
    "",
    response_model=ApiResponse[CategoryOut],
    status_code=201,
    dependencies=[Depends(authorize_admin)],
)
def create_category(payload: CategoryIn, db: Session = Depends(get_db)):
    return {"success": True, "data": get_service(db).create_category(payload)}


@router.put("/{category_id}", response_model=ApiResponse[CategoryOut], dependencies=[Depends(authorize_admin)])
def update_category(category_id: int, payload: CategoryUpdate, db: Session = Depends(get_db)):
    return {"success": True, "data": get_service(db).update_category(category_id, payload)}


@router.delete("/{category_id}", response_model=ApiResponse[DeletedOut], dependencies=[Depends(authorize_admin)])
def delete_category(category_id: int, db: Session = Depends(get_db)):
    get_service(db).delete_category(category_id)
    return {"success": True, "data": {"id": category_id}}
