# cakestore/api/deps.py
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from cakestore.data.database import get_db
from cakestore.data.models.user import UserModel
from cakestore.domain.errors import AuthError, ForbiddenError
from cakestore.services.auth_service import AuthService

bearer = HTTPBearer(auto_error=False)


def protect(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
    db: Session = Depends(get_db),
) -> UserModel:
    if credentials is None:
        raise AuthError("Not authorized, no token")
    return AuthService(db).resolve_user(credentials.credentials)


def authorize_admin(user: UserModel = Depends(protect)) -> UserModel:
    if not user.is_admin:
        raise ForbiddenError("Admin access required")
    return user


def optional_auth(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
    db: Session = Depends(get_db),
) -> UserModel | None:
    #bad or expired tokens fall back to anonymous
    if credentials is None:
        return None
    try:
        return AuthService(db).resolve_user(credentials.credentials)
    except AuthError:
        return None
