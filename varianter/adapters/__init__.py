"""Varianter adapters."""

from varianter.adapters.api_record import catalog_from_record, variants_from_record
from varianter.adapters.noop import NoopInstallmentBackend

__all__ = [
    "NoopInstallmentBackend",
    "catalog_from_record",
    "variants_from_record",
]
