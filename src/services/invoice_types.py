from enum import Enum
from pydantic import BaseModel, Field


class FormatTag(str, Enum):
    """Which paper layout a ticket appears to use (informational, never gating)."""
    LEGACY_REPAIR_FORM = "legacy_repair_form"
    SERVICE_TICKET = "service_ticket"


class InstrumentEntry(BaseModel):
    type: str
    description: str


class MaterialLine(BaseModel):
    description: str
    quantity: int = Field(gt=0)
    unit_cost: float = Field(gt=0)


class ExtractedInvoiceData(BaseModel):
    customer_name: str | None = None
    customer_phone: str | None = None
    customer_email: str | None = None
    customer_address: str | None = None
    date_received: str | None = None  # ISO YYYY-MM-DD
    invoice_number: str | None = None
    format_tag: FormatTag | None = None
    instruments: list[InstrumentEntry] = Field(default_factory=list)
    repair_description: str | None = None
    materials: list[MaterialLine] = Field(default_factory=list)
    labor_hours: float | None = None  # Filled in by hand on the invoice form
    hourly_rate: float | None = None
    in_service_area: bool | None = None  # Advisory only, set when an address is found
    diagnostic_log: list[str] = Field(default_factory=list)
