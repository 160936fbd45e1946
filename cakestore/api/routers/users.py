from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from cakestore.api.deps import authorize_admin
from cakestore.data.database import get_db
from cakestore.domain.schemas import ApiResponse, DeletedOut, UserAdminUpdate, UserOut
from cakestore.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"], dependencies=[Depends(authorize_admin)])


@router.get("", response_model=ApiResponse[List[UserOut]])
def list_users(db: Session = Depends(get_db)):
    return {"success": True, "data": UserService(db).list_users()}


@router.get("/{user_id}", response_model=ApiResponse[UserOut])
def get_user(user_id: int, db: Session = Depends(get_db)):
    return {"success": True, "data": UserService(db).get_user(user_id)}


@router.put("/{user_id}", response_model=ApiResponse[UserOut])
def update_user(user_id: int, payload: UserAdminUpdate, db: Session = Depends(get_db)):
    return {"success": True, "data": UserService(db).update_user(user_id, payload)}


@router.delete("/{user_id}", response_model=ApiResponse[DeletedOut])
def delete_user(user_id: int, db: Session = Depends(get_db)):
    UserService(db).delete_user(user_id)
    return {"success": True, "data": {"id": user_id}}
