from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from cakestore.domain.errors import ConflictError, DatastoreError, NotFoundError
from cakestore.domain.schemas import UserAdminUpdate
from cakestore.repos.user_repo import UserRepo
from cakestore.services.auth_service import user_to_dict


class UserService:
    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def list_users(self) -> list[dict]:
        return [user_to_dict(u) for u in self.repo.list_users()]

    def get_user(self, user_id: int) -> dict:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFoundError("User not found")
        return user_to_dict(user)

    def update_user(self, user_id: int, payload: UserAdminUpdate) -> dict:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFoundError("User not found")

        for field, value in payload.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(user, field, value)

        try:
            self.repo.save(user)
        except IntegrityError as e:
            self.repo.rollback()
            raise ConflictError("User with this email already exists") from e
        return user_to_dict(user)

    def delete_user(self, user_id: int) -> None:
        user = self.repo.get_user(user_id)
        if not user:
            raise NotFoundError("User not found")

        try:
            self.repo.delete_user(user)
        except IntegrityError as e:
            # orders/reviews keep a reference to the user
            self.repo.rollback()
            raise ConflictError("User has orders or reviews and cannot be deleted") from e
        except SQLAlchemyError as e:
            self.repo.rollback()
            raise DatastoreError("Unable to delete user") from e
