# cakestore/services/auth_service.py
from datetime import datetime, timedelta, timezone

import jwt
from passlib.context import CryptContext
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from cakestore.data.models.user import UserModel
from cakestore.domain.errors import AuthError, ConflictError
from cakestore.domain.schemas import LoginIn, ProfileUpdate, RegisterIn
from cakestore.repos.user_repo import UserRepo
from cakestore.utils.logging import get_logger
from cakestore.utils.settings import JWT_ALGORITHM, JWT_EXPIRE_MINUTES, JWT_SECRET

logger = get_logger(__name__)

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def create_access_token(user: UserModel, expires_delta: timedelta | None = None) -> str:
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=JWT_EXPIRE_MINUTES))
    payload = {"id": user.id, "email": user.email, "is_admin": user.is_admin, "exp": expire}
    return jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    try:
        payload = jwt.decode(token, JWT_SECRET, algorithms=[JWT_ALGORITHM])
    except jwt.ExpiredSignatureError:
        raise AuthError("Token expired")
    except jwt.InvalidTokenError:
        raise AuthError("Invalid token")

    if not payload.get("id"):
        raise AuthError("Invalid token")
    return payload


def user_to_dict(user: UserModel) -> dict:
    # never expose the password hash
    return {
        "id": user.id,
        "name": user.name,
        "email": user.email,
        "is_admin": user.is_admin,
        "created_at": user.created_at,
        "updated_at": user.updated_at,
    }


class AuthService:
    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def register(self, payload: RegisterIn) -> dict:
        if self.repo.get_by_email(payload.email):
            raise ConflictError("User with this email already exists")

        try:
            user = self.repo.create_user(
                UserModel(
                    name=payload.name,
                    email=payload.email,
                    password=hash_password(payload.password),
                    is_admin=False,
                )
            )
        except IntegrityError as e:
            self.repo.rollback()
            raise ConflictError("User with this email already exists") from e

        logger.info(f"User {user.id} registered")
        return {"user": user_to_dict(user), "token": create_access_token(user)}

    def login(self, payload: LoginIn) -> dict:
        user = self.repo.get_by_email(payload.email)
        if not user or not verify_password(payload.password, user.password):
            raise AuthError("Invalid credentials")

        return {"user": user_to_dict(user), "token": create_access_token(user)}

    def resolve_user(self, token: str) -> UserModel:
        """Token -> current user row, the user must still exist."""
        payload = decode_access_token(token)
        user = self.repo.get_user(payload["id"])
        if not user:
            raise AuthError("User not found")
        return user

    def update_profile(self, user: UserModel, payload: ProfileUpdate) -> dict:
        changes = payload.model_dump(exclude_unset=True, exclude_none=True)

        if "email" in changes and changes["email"] != user.email and self.repo.get_by_email(changes["email"]):
            raise ConflictError("User with this email already exists")
        if "password" in changes:
            changes["password"] = hash_password(changes["password"])

        for field, value in changes.items():
            setattr(user, field, value)

        try:
            self.repo.save(user)
        except IntegrityError as e:
            self.repo.rollback()
            raise ConflictError("User with this email already exists") from e

        return user_to_dict(user)
