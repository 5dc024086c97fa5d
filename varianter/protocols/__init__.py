"""Varianter protocols."""

from varianter.protocols.catalog import (
    BaseProduct,
    Dimension,
    InstallmentPlan,
    Variant,
)
from varianter.protocols.installments import InstallmentBackend

__all__ = [
    "BaseProduct",
    "Dimension",
    "InstallmentBackend",
    "InstallmentPlan",
    "Variant",
]
