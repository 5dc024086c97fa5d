"""
InstallmentBackend protocol.

Allows an external app (e.g. the payments integration) to provide the
zero-interest price table for a product without Varianter importing it.

Usage:
    # In settings.py
    VARIANTER = {
        "INSTALLMENT_BACKEND": "payments.adapters.varianter.CeroInteresBackend",
    }

    # The payments app implements the adapter:
    class CeroInteresBackend:
        def get_prices(self, product_id: str, prices: list[int]) -> dict[int, int]:
            rows = CeroInteres.objects.filter(price_q__in=prices)
            return {row.term_count: row.price_q for row in rows}
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class InstallmentBackend(Protocol):
    """
    Interface for retrieving the zero-interest price table.

    Varianter turns the table into an InstallmentPlan; the backend only
    owns the data.
    """

    def get_prices(self, product_id: str, prices: list[int]) -> dict[int, int]:
        """
        Return the listed price for each installment term count.

        Args:
            product_id: Base product identifier
            prices: Sale prices of the product's variants

        Returns:
            {term_count: price_q}; empty when no plan applies.
        """
        ...
