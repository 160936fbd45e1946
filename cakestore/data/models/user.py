from sqlalchemy import Column, Integer, String, Boolean

from cakestore.data.database import Base
from cakestore.data.models._mixins import TimestampMixin


class UserModel(TimestampMixin, Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password = Column(String(255), nullable=False)  # bcrypt hash
    is_admin = Column(Boolean, nullable=False, default=False)
