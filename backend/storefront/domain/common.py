"""
Shared field types for domain models
"""
from decimal import ROUND_HALF_UP, Decimal
from typing import Annotated

from pydantic import BaseModel, PlainSerializer

CENT = Decimal("0.01")

# Decimal in Python, float in JSON responses
Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


def quantize_money(value: Decimal) -> Decimal:
    """Round to cents, half up"""
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


class MessageResponse(BaseModel):
    message: str
