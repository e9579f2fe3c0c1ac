"""
Invoice form schemas (request/response models).

Form fields arrive as strings from a submitted form and use the browser
field names (`customerId`, `amount`, `status`).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

InvoiceStatus = Literal["pending", "paid"]

FORM_FIELDS = ("customerId", "amount", "status")

FIELD_MESSAGES = {
    "customerId": "Please select a customer.",
    "amount": "Please enter an amount greater than $0.",
    "status": "Please select an invoice status.",
}

_FIELD_ALIASES = {
    "customer_id": "customerId",
    "customerId": "customerId",
    "amount": "amount",
    "status": "status",
}


class InvoiceForm(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    customer_id: str = Field(..., alias="customerId", min_length=1)
    # Coerced from the submitted string before the bound check.
    amount: float = Field(..., gt=0, allow_inf_nan=False)
    status: InvoiceStatus

    @field_validator("amount")
    @classmethod
    def amount_has_cents(cls, value: float) -> float:
        # Stored in cents; anything that rounds to 0 would be a zero invoice.
        if to_cents(value) < 1:
            raise ValueError(FIELD_MESSAGES["amount"])
        return value


class State(BaseModel):
    """
    Result returned by a mutation handler that did not navigate away.
    """

    ok: bool = False
    message: str | None = None
    errors: dict[str, list[str]] = Field(default_factory=dict)


@dataclass(frozen=True)
class FormResult:
    ok: bool
    data: InvoiceForm | None = None
    errors: dict[str, list[str]] = field(default_factory=dict)


def form_input(form: Mapping[str, Any]) -> dict[str, Any]:
    """
    Pick the invoice fields out of a submitted form, ignoring anything else.
    """
    return {name: form.get(name) for name in FORM_FIELDS}


def _errors_by_field(exc: ValidationError) -> dict[str, list[str]]:
    errors: dict[str, list[str]] = {}
    for err in exc.errors():
        loc = err.get("loc") or ()
        name = _FIELD_ALIASES.get(str(loc[0]), str(loc[0])) if loc else "form"
        message = FIELD_MESSAGES.get(name) or str(err.get("msg") or "Invalid value.")
        messages = errors.setdefault(name, [])
        if message not in messages:
            messages.append(message)
    return errors


def parse_invoice_form(form: Mapping[str, Any]) -> InvoiceForm:
    """
    Throwing mode: raises pydantic.ValidationError on invalid input.
    """
    return InvoiceForm.model_validate(form_input(form))


def validate_invoice_form(form: Mapping[str, Any]) -> FormResult:
    """
    Non-throwing mode: per-field error lists instead of an exception.
    """
    try:
        data = parse_invoice_form(form)
    except ValidationError as exc:
        return FormResult(ok=False, errors=_errors_by_field(exc))
    return FormResult(ok=True, data=data)


def to_cents(amount: float) -> int:
    """
    Convert a major-unit amount into integer minor units (cents).
    """
    return int(round(amount * 100))


def from_cents(amount: int) -> float:
    return amount / 100
