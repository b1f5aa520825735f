"""Checkout form and the record sent to the checkout sink."""
import re
from typing import List

from pydantic import BaseModel, field_validator
from pydantic_core import PydanticCustomError

from storefront.errors import ERROR_NAME_TOO_SHORT, ERROR_INVALID_PHONE, ERROR_ADDRESS_TOO_SHORT

# Optional +, no leading zero, up to 15 digits in total
PHONE_PATTERN = re.compile(r"^\+?[1-9]\d{1,14}$")


class CheckoutForm(BaseModel):
    """Contact details collected on the checkout page."""
    name: str
    phone_number: str
    address: str

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        if len(v) < 2:
            raise PydanticCustomError("name_too_short", ERROR_NAME_TOO_SHORT)
        return v

    @field_validator("phone_number")
    @classmethod
    def validate_phone_number(cls, v: str) -> str:
        if not PHONE_PATTERN.match(v):
            raise PydanticCustomError("invalid_phone_number", ERROR_INVALID_PHONE)
        return v

    @field_validator("address")
    @classmethod
    def validate_address(cls, v: str) -> str:
        if len(v) < 5:
            raise PydanticCustomError("address_too_short", ERROR_ADDRESS_TOO_SHORT)
        return v


class CheckoutItem(BaseModel):
    name: str
    price: float
    quantity: int


class CheckoutRecord(BaseModel):
    """Row inserted into the checkout table."""
    user_email: str
    name: str
    phone_number: str
    address: str
    items: List[CheckoutItem]
    total_price: str  # two decimals, e.g. "20.00"
