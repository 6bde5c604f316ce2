"""Validation of clinic records payloads into domain models

Records arrive camelCased from the clinic API (unitPrice, sessionDate) and
with loosely-typed numbers and timestamps. Everything is normalized here
once, so the engine only sees domain dataclasses.
"""

import json
import logging
from datetime import date
from typing import Annotated, Any, List, Optional
from pydantic import AliasChoices, BaseModel, BeforeValidator, ConfigDict, Field, model_validator
from budget_gateway.domain.models import BudgetItem, BudgetSettings, ProductUsage, SessionRecord
from budget_gateway.utils.date_utils import parse_iso_date
from budget_gateway.utils.numbers import coerce_number, parse_number


def _lenient_number(value: Any) -> float:
    return coerce_number(value, "payload")


def _lenient_date(value: Any) -> Optional[date]:
    parsed = parse_iso_date(value)
    if parsed is None and value not in (None, ""):
        logging.warning(
            "Malformed date in record payload",
            extra={"step": "data_quality", "reason": "malformed_date", "raw_value": str(value)},
        )
    return parsed


def _optional_number(value: Any) -> Optional[float]:
    return parse_number(value, "payload")


def _clean_products(products: List[Any], session_id: Any) -> List[dict]:
    """Drop product entries without a usable item code; codes are kept as strings"""
    cleaned = []
    for product in products:
        code = None
        if isinstance(product, dict):
            code = next((product[key] for key in ("itemCode", "code", "item_code") if product.get(key) is not None), None)
        if code is None or isinstance(code, (bool, dict, list)) or not str(code).strip():
            logging.warning(
                "Dropping malformed product entry",
                extra={
                    "step": "data_quality",
                    "reason": "malformed_product",
                    "session_id": session_id,
                    "raw_value": str(product),
                },
            )
            continue
        cleaned.append({**product, "itemCode": str(code)})
    return cleaned


LenientNumber = Annotated[float, BeforeValidator(_lenient_number)]
OptionalNumber = Annotated[Optional[float], BeforeValidator(_optional_number)]
LenientDate = Annotated[Optional[date], BeforeValidator(_lenient_date)]


class RecordPayload(BaseModel):
    """Base for records API payloads: accept aliases and ignore unknown keys"""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class BudgetItemPayload(RecordPayload):
    id: int
    client_id: int = Field(validation_alias=AliasChoices("clientId", "patientId", "client_id"))
    item_code: str = Field(validation_alias=AliasChoices("itemCode", "item_code"))
    description: str = ""
    unit_price: LenientNumber = Field(0.0, validation_alias=AliasChoices("unitPrice", "unit_price"))
    quantity: LenientNumber = 0.0
    category: Optional[str] = None
    name: Optional[str] = None

    def to_domain(self) -> BudgetItem:
        return BudgetItem(
            id=self.id,
            client_id=self.client_id,
            item_code=self.item_code,
            description=self.description,
            unit_price=self.unit_price,
            quantity=self.quantity,
            category=self.category,
            name=self.name,
        )


class BudgetSettingsPayload(RecordPayload):
    id: int
    client_id: int = Field(validation_alias=AliasChoices("clientId", "patientId", "client_id"))
    start_date: LenientDate = Field(None, validation_alias=AliasChoices("startDate", "start_date"))
    end_date: LenientDate = Field(None, validation_alias=AliasChoices("endDate", "endOfPlan", "end_date"))
    total_funds: OptionalNumber = Field(
        None, validation_alias=AliasChoices("totalFunds", "ndisFunds", "total_funds")
    )
    is_active: bool = Field(True, validation_alias=AliasChoices("isActive", "is_active"))
    plan_name: Optional[str] = Field(None, validation_alias=AliasChoices("planName", "plan_name"))
    plan_serial_number: Optional[str] = Field(
        None, validation_alias=AliasChoices("planSerialNumber", "plan_serial_number")
    )
    created_at: LenientDate = Field(None, validation_alias=AliasChoices("createdAt", "created_at"))

    def to_domain(self) -> BudgetSettings:
        return BudgetSettings(
            id=self.id,
            client_id=self.client_id,
            start_date=self.start_date,
            end_date=self.end_date,
            total_funds=self.total_funds,
            is_active=self.is_active,
            plan_name=self.plan_name,
            plan_serial_number=self.plan_serial_number,
            created_at=self.created_at,
        )


class ProductUsagePayload(RecordPayload):
    item_code: str = Field(validation_alias=AliasChoices("itemCode", "code", "item_code"))
    quantity: LenientNumber = 0.0
    unit_price: OptionalNumber = Field(None, validation_alias=AliasChoices("unitPrice", "unit_price"))
    description: Optional[str] = None

    def to_domain(self) -> ProductUsage:
        return ProductUsage(
            item_code=self.item_code,
            quantity=self.quantity,
            unit_price=self.unit_price,
            description=self.description,
        )


class SessionPayload(RecordPayload):
    id: int
    status: str = "draft"
    session_date: LenientDate = Field(None, validation_alias=AliasChoices("sessionDate", "date", "session_date"))
    therapist_name: Optional[str] = Field(None, validation_alias=AliasChoices("therapistName", "therapist_name"))
    products: List[ProductUsagePayload] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _lift_note_products(cls, data: Any) -> Any:
        """Products may sit under note.products and may be a JSON-encoded string"""
        if not isinstance(data, dict):
            return data

        data = dict(data)
        products = data.get("products")
        note = data.get("note")
        if products is None and isinstance(note, dict):
            products = note.get("products")

        if isinstance(products, str):
            try:
                products = json.loads(products) if products.strip() else []
            except ValueError:
                logging.warning(
                    "Session products field is not valid JSON",
                    extra={"step": "data_quality", "reason": "malformed_products", "session_id": data.get("id")},
                )
                products = []

        data["products"] = _clean_products(products, data.get("id")) if isinstance(products, list) else []
        return data

    def to_domain(self) -> SessionRecord:
        return SessionRecord(
            id=self.id,
            status=self.status,
            session_date=self.session_date,
            products=[product.to_domain() for product in self.products],
            therapist_name=self.therapist_name,
        )
