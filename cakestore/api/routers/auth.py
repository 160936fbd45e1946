# cakestore/api/routers/auth.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from cakestore.api.deps import protect
from cakestore.data.database import get_db
from cakestore.data.models.user import UserModel
from cakestore.domain.schemas import ApiResponse, AuthOut, LoginIn, ProfileUpdate, RegisterIn, UserOut
from cakestore.services.auth_service import AuthService, user_to_dict

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=ApiResponse[AuthOut], status_code=201)
def register(payload: RegisterIn, db: Session = Depends(get_db)):
    return {"success": True, "data": AuthService(db).register(payload)}


@router.post("/login", response_model=ApiResponse[AuthOut])
def login(payload: LoginIn, db: Session = Depends(get_db)):
    return {"success": True, "data": AuthService(db).login(payload)}


@router.get("/profile", response_model=ApiResponse[UserOut])
def get_profile(user: UserModel = Depends(protect)):
    return {"success": True, "data": user_to_dict(user)}


@router.put("/profile", response_model=ApiResponse[UserOut])
def update_profile(
    payload: ProfileUpdate,
    user: UserModel = Depends(protect),
    db: Session = Depends(get_db),
):
    return {"success": True, "data": AuthService(db).update_profile(user, payload)}
