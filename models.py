#models.py
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List, Mapping, Optional


def camel(name: str) -> str:
    """cust_po -> custPo; the tool's wire keys are the camelCase attribute names."""
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


@dataclass
class OrderItem:
    material_no: Optional[str] = None
    material: Optional[str] = None
    unit: Optional[str] = None
    qty: Optional[str] = None              # decimal kept as text, e.g. "10.000"
    cust_material: Optional[str] = None
    plant: Optional[str] = None
    shipping_point: Optional[str] = None
    delivery_date: Optional[str] = None    # YYYY-MM-DD

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "OrderItem":
        return cls(**{f.name: data.get(camel(f.name)) for f in fields(cls)})


@dataclass
class SalesOrder:
    cust_po: Optional[str] = None
    cust_po_date: Optional[str] = None
    order_type: Optional[str] = None
    sales_channel: Optional[str] = None
    sales_division: Optional[str] = None
    sales_org: Optional[str] = None
    ship_to_party: Optional[str] = None
    sold_to_party: Optional[str] = None
    items: Optional[List[OrderItem]] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "SalesOrder":
        header = {f.name: data.get(camel(f.name)) for f in fields(cls) if f.name != "items"}
        raw_items = data.get("items")
        items = None if raw_items is None else [OrderItem.from_dict(it) for it in raw_items]
        return cls(items=items, **header)


@dataclass
class CallResult:
    ok: bool
    status: int
    status_text: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "ok": self.ok,
            "status": self.status,
            "statusText": self.status_text,
            "headers": dict(self.headers),
            "body": self.body,
        }
