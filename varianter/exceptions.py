"""Varianter exceptions."""

from typing import Any


ERROR_MESSAGES = {
    # Programming errors (raised)
    "UNKNOWN_DIMENSION": "Unknown dimension",
    "INVALID_BACKEND": "Installment backend does not implement InstallmentBackend",
    # Data quality / shopper input (reported, never raised)
    "DUPLICATE_COMBINATION": "Several variants share the same combination",
    "MISSING_IDENTIFIERS": "Variant has neither SKU nor market code",
    "EMPTY_CATALOG": "Product has no variants",
    "UNAVAILABLE_VALUE": "Value is not offered for this dimension",
    "SKU_NOT_FOUND": "SKU not found",
    "INVALID_PRICE": "Invalid price",
    "NO_RESOLUTION": "No variant matches the selection",
}

RAISED_CODES = frozenset({"UNKNOWN_DIMENSION", "INVALID_BACKEND"})
REPORTED_CODES = frozenset(ERROR_MESSAGES) - RAISED_CODES


def code_category(code: str) -> str:
    """"raised" for caller bugs, "reported" for data issues, "unknown" otherwise."""
    if code in RAISED_CODES:
        return "raised"
    if code in REPORTED_CODES:
        return "reported"
    return "unknown"


class VariantError(Exception):
    """
    Structured exception for contract violations.

    Only raised for caller bugs (RAISED_CODES). Bad catalog data and
    shopper clicks use REPORTED_CODES and go through
    ``varianter.quality.report`` instead; building a VariantError with one
    of those is itself a bug.

    Usage:
        try:
            state = select_dimension(state, "size", "XL")
        except VariantError as e:
            if e.code == "UNKNOWN_DIMENSION":
                print(f"{e.dimension!r} is not one of {e.data['allowed']}")
    """

    def __init__(self, code: str, message: str = "", **data: Any) -> None:
        if code in REPORTED_CODES:
            raise ValueError(f"{code} is a data-quality code; use varianter.quality.report")
        self.code = code
        self.message = message or ERROR_MESSAGES.get(code, code)
        self.data = data
        super().__init__(f"[{code}] {self.message}")

    @property
    def category(self) -> str:
        return code_category(self.code)

    @property
    def dimension(self) -> str | None:
        return self.data.get("dimension")

    def as_dict(self) -> dict:
        return {
            "code": self.code,
            "category": self.category,
            "message": self.message,
            "data": self.data,
        }
