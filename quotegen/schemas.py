"""
Request models for the quotation pipeline.

Wire keys are the camelCase names the quotation form posts (clientName,
gstRate, serviceWarranty, ...). Attributes are snake_case.
"""

from datetime import date
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .calculator import parse_number


class _WireModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class LineItem(_WireModel):
    id: Optional[Any] = None
    name: str
    description: Optional[str] = None
    quantity: float = 0.0
    rate: float = 0.0

    @field_validator("quantity", "rate", mode="before")
    @classmethod
    def coerce_number(cls, value):
        return parse_number(value)


class ServiceWarranty(_WireModel):
    description: str = ""
    duration: str = ""
    conditions: str = ""


class QuotationRecord(_WireModel):
    """One quotation as submitted by the form. Built fresh per request."""

    # Identity
    quotation_number: str = ""
    quotation_date: Optional[date] = None
    valid_until: Optional[date] = None

    # Client
    client_name: Optional[str] = None
    client_company: Optional[str] = None
    client_email: Optional[str] = None
    client_phone: Optional[str] = None
    client_gstin: Optional[str] = None

    # Issuer
    company_name: str = ""
    company_address: str = ""
    company_email: str = ""
    company_phone: str = ""
    company_gstin: Optional[str] = None
    company_logo: Optional[str] = Field(default=None, repr=False)  # passthrough only

    items: List[LineItem] = []
    gst_rate: float = 0.0
    discount_percentage: float = 0.0

    terms: Optional[str] = None
    service_warranty: Optional[ServiceWarranty] = None

    @field_validator("gst_rate", "discount_percentage", mode="before")
    @classmethod
    def coerce_percent(cls, value):
        return parse_number(value)

    @field_validator("quotation_date", "valid_until", mode="before")
    @classmethod
    def coerce_date(cls, value):
        """Blank means absent; ISO datetimes keep only their date part."""
        if isinstance(value, str):
            value = value.strip()
            if not value:
                return None
            if "T" in value:
                return value.split("T", 1)[0]
        return value
