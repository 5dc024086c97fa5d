"""
Noop InstallmentBackend -- default for projects without a zero-interest table.

This adapter implements the InstallmentBackend protocol and always returns
an empty table, so VariantService.installment_plan() returns None and the
price display falls back to the plain cash price.

Usage in settings.py:
    VARIANTER = {
        "INSTALLMENT_BACKEND": "varianter.adapters.noop.NoopInstallmentBackend",
    }

This is equivalent to leaving INSTALLMENT_BACKEND unset (None), but makes the
intent explicit in configuration.
"""

from __future__ import annotations

from varianter.protocols.installments import InstallmentBackend


class NoopInstallmentBackend:
    """InstallmentBackend with no plans for any product."""

    def get_prices(self, product_id: str, prices: list[int]) -> dict[int, int]:
        """Always returns an empty table."""
        return {}


# Verify protocol compliance at import time.
if not isinstance(NoopInstallmentBackend(), InstallmentBackend):
    raise TypeError("NoopInstallmentBackend does not implement InstallmentBackend protocol")
