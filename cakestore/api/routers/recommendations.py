# cakestore/api/routers/recommendations.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from cakestore.api.deps import optional_auth, protect
from cakestore.data.database import get_db
from cakestore.data.models.user import UserModel
from cakestore.domain.schemas import RecommendationOut
from cakestore.services.recommendation_service import DEFAULT_LIMIT, RecommendationService

router = APIRouter(prefix="/recommendations", tags=["recommendations"])


def _out(products: list[dict], personalized: bool) -> dict:
    return {"success": True, "count": len(products), "is_personalized": personalized, "data": products}


@router.get("", response_model=RecommendationOut)
def recommendations(
    limit: int = Query(DEFAULT_LIMIT),
    user: UserModel | None = Depends(optional_auth),
    db: Session = Depends(get_db),
):
    """Personalized for logged-in users, top-selling otherwise."""
    user_id = user.id if user else None
    products = RecommendationService(db).recommend(user_id, limit)
    return _out(products, personalized=user_id is not None)


@router.get("/personalized", response_model=RecommendationOut)
def personalized(
    limit: int = Query(DEFAULT_LIMIT),
    user: UserModel = Depends(protect),
    db: Session = Depends(get_db),
):
    return _out(RecommendationService(db).personalized(user.id, limit), personalized=True)


@router.get("/top-selling", response_model=RecommendationOut)
def top_selling(limit: int = Query(DEFAULT_LIMIT), db: Session = Depends(get_db)):
    return _out(RecommendationService(db).top_selling(limit), personalized=False)
