# cakestore/api/routers/reviews.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from cakestore.api.deps import protect
from cakestore.data.database import get_db
from cakestore.data.models.user import UserModel
from cakestore.domain.schemas import ApiResponse, DeletedOut, ReviewCreate, ReviewOut, ReviewUpdate
from cakestore.services.review_service import ReviewService

router = APIRouter(prefix="/reviews", tags=["reviews"])


def get_service(db: Session):
    return ReviewService(db)


@router.get("/product/{product_id}", response_model=ApiResponse[List[ReviewOut]])
def list_product_reviews(product_id: int, db: Session = Depends(get_db)):
    return {"success": True, "data": get_service(db).list_for_product(product_id)}


@router.get("/{review_id}", response_model=ApiResponse[ReviewOut])
def get_review(review_id: int, db: Session = Depends(get_db)):
    return {"success": True, "data": get_service(db).get_review(review_id)}


@router.post("", response_model=ApiResponse[ReviewOut], status_code=201)
def create_review(
    payload: ReviewCreate,
    user: UserModel = Depends(protect),
    db: Session = Depends(get_db),
):
    display_name = (payload.name or "").strip() or user.name or "Anonymous"
    review = get_service(db).create_review(
        product_id=payload.product_id,
        user_id=user.id,
        rating=payload.rating,
        name=display_name,
        comment=payload.comment or None,
    )
    return {"success": True, "data": review}


@router.put("/{review_id}", response_model=ApiResponse[ReviewOut])
def update_review(
    review_id: int,
    payload: ReviewUpdate,
    user: UserModel = Depends(protect),
    db: Session = Depends(get_db),
):
    return {"success": True, "data": get_service(db).update_review(review_id, user, payload)}


@router.delete("/{review_id}", response_model=ApiResponse[DeletedOut])
def delete_review(
    review_id: int,
    user: UserModel = Depends(protect),
    db: Session = Depends(get_db),
):
    return {"success": True, "data": get_service(db).delete_review(review_id, user)}
