from pydantic import BaseModel, Field

class Instrument(BaseModel):
    type: str = ""
    description: str = ""


class RepairMaterial(BaseModel):
    description: str = ""
    quantity: int = Field(default=1, ge=0)
    unit_cost: float = Field(default=0.0, ge=0)


class RepairInvoice(BaseModel):
    id: str | None = Field(default=None)
    invoice_number: str = Field(default="")
    date_received: str | None = Field(default=None)
    date: str | None = Field(default=None)
    customer_name: str = Field(default="")
    customer_phone: str = Field(default="")
    customer_email: str = Field(default="")
    customer_address: str = Field(default="")
    instruments: list[Instrument] = Field(default_factory=list)
    repair_description: str = Field(default="")
    materials: list[RepairMaterial] = Field(default_factory=list)
    labor_hours: float = Field(default=0.0)
    hourly_rate: float = Field(default=0.0)
    notes: str = Field(default="")
    is_georges_music: bool = Field(default=False)
    is_no_delivery_fee: bool = Field(default=False)
    delivery_miles: float | None = Field(default=None)
    delivery_fee: float = Field(default=0.0)
    created_at: str | None = Field(default=None)


class ParseTextRequest(BaseModel):
    text: str = Field(default="")


class TotalsRequest(BaseModel):
    materials: list[RepairMaterial] = Field(default_factory=list)
    delivery_fee: float = Field(default=0.0)
    is_georges_music: bool = Field(default=False)
    is_no_delivery_fee: bool = Field(default=False)


class DeliveryEstimateRequest(BaseModel):
    address: str
    is_georges_music: bool = Field(default=False)
    is_no_delivery_fee: bool = Field(default=False)
