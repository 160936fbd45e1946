# cakestore/api/routers/orders.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from cakestore.api.deps import authorize_admin, protect
from cakestore.data.database import get_db
from cakestore.data.models.user import UserModel
from cakestore.domain.schemas import ApiResponse, OrderCreate, OrderOut
from cakestore.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(db: Session):
    return OrderService(db)


@router.post("", response_model=ApiResponse[OrderOut], status_code=201)
def create_order(
    payload: OrderCreate,
    user: UserModel = Depends(protect),
    db: Session = Depends(get_db),
):
    """
    Creates an order for the current user.
    Prices, tax and shipping are computed server-side.
    """
    return {"success": True, "data": get_service(db).create_order(user.id, payload)}


@router.get("/my", response_model=ApiResponse[List[OrderOut]])
def my_orders(user: UserModel = Depends(protect), db: Session = Depends(get_db)):
    return {"success": True, "data": get_service(db).list_my_orders(user.id)}


@router.get("", response_model=ApiResponse[List[OrderOut]], dependencies=[Depends(authorize_admin)])
def list_orders(db: Session = Depends(get_db)):
    return {"success": True, "data": get_service(db).list_orders()}


@router.get("/{order_id}", response_model=ApiResponse[OrderOut])
def get_order(
    order_id: int,
    user: UserModel = Depends(protect),
    db: Session = Depends(get_db),
):
    return {"success": True, "data": get_service(db).get_order(order_id, user)}


@router.put("/{order_id}/pay", response_model=ApiResponse[OrderOut])
def pay_order(
    order_id: int,
    user: UserModel = Depends(protect),
    db: Session = Depends(get_db),
):
    return {"success": True, "data": get_service(db).mark_paid(order_id, user)}


@router.put(
    "/{order_id}/deliver",
    response_model=ApiResponse[OrderOut],
    dependencies=[Depends(authorize_admin)],
)
def deliver_order(order_id: int, db: Session = Depends(get_db)):
    return {"success": True, "data": get_service(db).mark_delivered(order_id)}
