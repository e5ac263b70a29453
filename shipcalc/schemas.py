# shipcalc/schemas.py
"""Request/response models for the carrier-service callback."""
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from shipcalc.engine.parcels import LineItem


class RateItem(BaseModel):
    model_config = ConfigDict(allow_inf_nan=False)

    grams: float = Field(..., ge=0)
    quantity: int = Field(..., ge=1, le=10000)
    name: Optional[str] = None
    sku: Optional[str] = None
    variant_id: Optional[Union[int, str]] = None
    product_id: Optional[Union[int, str]] = None
    requires_shipping: bool = True

    @property
    def identifier(self) -> Optional[Union[int, str]]:
        return self.variant_id or self.sku or self.product_id or self.name

    @property
    def ships(self) -> bool:
        """Zero-gram or non-shipping items add nothing to any parcel."""
        return self.requires_shipping and self.grams > 0

    def to_line_item(self) -> LineItem:
        return LineItem(identifier=self.identifier, unit_weight_grams=self.grams, quantity=self.quantity)


class Destination(BaseModel):
    country_code: Optional[str] = None
    # the host platform sends "country"; older payloads use "country_code"
    country: Optional[str] = None
    province: Optional[str] = None
    postal_code: Optional[str] = None
    city: Optional[str] = None

    @property
    def code(self) -> Optional[str]:
        return self.country_code or self.country


class RateRequestBody(BaseModel):
    items: List[RateItem] = []
    destination: Destination = Field(default_factory=Destination)
    currency: Optional[str] = None
    locale: Optional[str] = None

    @field_validator("items", mode="before")
    @classmethod
    def none_as_empty(cls, v):
        return v or []

    @field_validator("destination", mode="before")
    @classmethod
    def none_as_blank(cls, v):
        return v or {}


class RateRequest(BaseModel):
    rate: RateRequestBody


class ShippingRate(BaseModel):
    service_name: str
    service_code: str
    total_price: int
    description: str
    currency: str


class RatesResponse(BaseModel):
    rates: List[ShippingRate]
