"""
Storefront API Pydantic Models

Request bodies shared by the routers.
"""
from decimal import Decimal
from typing import Optional
from pydantic import BaseModel


# ==================== AUTH MODELS ====================

class LoginRequest(BaseModel):
    email: str
    password: str


class SignupRequest(BaseModel):
    email: str
    password: str
    confirm_password: str


# ==================== CART MODELS ====================

class AddToCartRequest(BaseModel):
    product_id: int
    title: str
    price: Decimal
    quantity: Optional[int] = 1  # ignored when the product is already in the cart
