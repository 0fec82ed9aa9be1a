# schemas.py
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from models import OrderItem

# Shape only: 2024-02-31 still passes; SAP decides whether the date is real.
ISO_DATE_PATTERN = r"^\d{4}-\d{2}-\d{2}$"
URL_PATTERN = r"^https?://\S+$"

NonEmptyStr = Annotated[str, Field(min_length=1)]
IsoDate = Annotated[str, Field(pattern=ISO_DATE_PATTERN)]
HttpUrlStr = Annotated[str, Field(pattern=URL_PATTERN)]
PositiveMs = Annotated[int, Field(gt=0)]


class OrderItemInput(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    material_no: NonEmptyStr = Field(description="Material number (numeric6)")
    material: NonEmptyStr = Field(description="Material description (char40)")
    unit: NonEmptyStr = Field(description="Unit (unit3)")
    qty: NonEmptyStr = Field(description="Quantity (up to 15.3 decimals)")
    cust_material: NonEmptyStr = Field(description="Customer material (char35)")
    plant: NonEmptyStr = Field(description="Plant (char4)")
    shipping_point: NonEmptyStr = Field(description="Shipping point (char4)")
    delivery_date: IsoDate = Field(description="Delivery date, YYYY-MM-DD")

    def to_item(self) -> OrderItem:
        return OrderItem(**self.model_dump())
