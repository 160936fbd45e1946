# cakestore/domain/schemas.py
from datetime import datetime
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from cakestore.domain.errors import ValidationError
from cakestore.utils.money import to_vnd

T = TypeVar("T")


def _money(value):
    if value is None:
        return value
    try:
        return to_vnd(value)
    except ValidationError as e:
        raise ValueError(e.message)


class ApiResponse(BaseModel, Generic[T]):
    """Envelope shared by every endpoint: {success, data}."""

    success: bool = True
    data: T


class MessageOut(BaseModel):
    message: str


# ---------------------------------------------------------------- users/auth

class RegisterIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=72)


class LoginIn(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(None, min_length=6, max_length=72)


class UserAdminUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[EmailStr] = None
    is_admin: Optional[bool] = None


class UserOut(BaseModel):
    id: int
    name: str
    email: str
    is_admin: bool
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class AuthOut(BaseModel):
    user: UserOut
    token: str


# ---------------------------------------------------------------- catalog

class CategoryIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None


class CategoryUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None


class CategoryBrief(BaseModel):
    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class CategoryOut(CategoryBrief):
    description: Optional[str] = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProductIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    price: int = Field(..., ge=0, description="Price in VND")
    count_in_stock: int = Field(0, ge=0)
    category_id: Optional[int] = Field(None, gt=0)
    image: Optional[str] = None
    brand: Optional[str] = None
    description: Optional[str] = None
    is_active: bool = True

    @field_validator("price", mode="before")
    @classmethod
    def price_to_vnd(cls, value):
        return _money(value)


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    price: Optional[int] = Field(None, ge=0)
    count_in_stock: Optional[int] = Field(None, ge=0)
    category_id: Optional[int] = Field(None, gt=0)
    image: Optional[str] = None
    brand: Optional[str] = None
    description: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("price", mode="before")
    @classmethod
    def price_to_vnd(cls, value):
        return _money(value)


class ProductOut(BaseModel):
    id: int
    name: str
    image: Optional[str] = None
    brand: Optional[str] = None
    description: Optional[str] = None
    price: int
    count_in_stock: int
    category_id: Optional[int] = None
    category: Optional[CategoryBrief] = None
    rating: float
    num_reviews: int
    is_active: bool
    sold_qty: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProductDeleteOut(BaseModel):
    deleted: bool
    soft_deleted: bool
    message: str


# ---------------------------------------------------------------- orders

class OrderItemIn(BaseModel):
    """Line item of a new order. Prices are never taken from the client."""

    product_id: int = Field(..., gt=0)
    qty: int = Field(..., ge=1)


class OrderCreate(BaseModel):
    order_items: List[OrderItemIn] = Field(..., min_length=1)
    payment_method: str = Field(..., min_length=1, max_length=50)
    shipping_address: str = Field(..., min_length=1, max_length=255)
    shipping_city: str = Field(..., min_length=1, max_length=100)
    shipping_postal_code: str = Field(..., min_length=1, max_length=20)
    shipping_country: str = Field(..., min_length=1, max_length=100)

    model_config = ConfigDict(str_strip_whitespace=True)


class OrderItemOut(BaseModel):
    id: int
    product_id: int
    name: str
    qty: int
    image: Optional[str] = None
    price: int

    model_config = ConfigDict(from_attributes=True)


class OrderOut(BaseModel):
    id: int
    user_id: int
    payment_method: str
    items_price: int
    tax_price: int
    shipping_price: int
    total_price: int
    is_paid: bool
    paid_at: datetime | None = None
    is_delivered: bool
    delivered_at: datetime | None = None
    shipping_address: str
    shipping_city: str
    shipping_postal_code: str
    shipping_country: str
    order_items: List[OrderItemOut]
    created_at: datetime | None = None
    updated_at: datetime | None = None


# ---------------------------------------------------------------- reviews

def _one_decimal(value):
    if value is not None and round(value, 1) != value:
        raise ValueError("rating allows at most one decimal")
    return value


class ReviewCreate(BaseModel):
    product_id: int = Field(..., gt=0)
    rating: float = Field(..., ge=1, le=5)
    comment: Optional[str] = None
    name: Optional[str] = Field(None, max_length=100)

    model_config = ConfigDict(str_strip_whitespace=True)

    @field_validator("rating")
    @classmethod
    def rating_precision(cls, value):
        return _one_decimal(value)


class ReviewUpdate(BaseModel):
    rating: Optional[float] = Field(None, ge=1, le=5)
    comment: Optional[str] = None
    name: Optional[str] = Field(None, min_length=1, max_length=100)

    model_config = ConfigDict(str_strip_whitespace=True)

    @field_validator("rating")
    @classmethod
    def rating_precision(cls, value):
        return _one_decimal(value)


class ReviewOut(BaseModel):
    id: int
    product_id: int
    user_id: int
    name: str
    rating: float
    comment: Optional[str] = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class DeletedOut(BaseModel):
    id: int


# ---------------------------------------------------------------- recommendations

class RecommendationOut(BaseModel):
    success: bool = True
    count: int
    is_personalized: bool
    data: List[ProductOut]
