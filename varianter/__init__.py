"""
Django Varianter - Product variant resolution and installment pricing.

Usage:
    from varianter import VariantService, Dimension

    catalog = VariantService.from_record(api_record)
    state = VariantService.initialize(catalog)
    state = VariantService.select(state, Dimension.CAPACITY, "256GB")
    plan = VariantService.installment_plan(state, {6: 600000, 12: 1140000})
"""


def __getattr__(name):
    if name == "VariantService":
        from varianter.service import VariantService

        return VariantService
    elif name == "VariantError":
        from varianter.exceptions import VariantError

        return VariantError
    elif name == "Dimension":
        from varianter.protocols.catalog import Dimension

        return Dimension
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["VariantService", "VariantError", "Dimension"]
__version__ = "0.1.0"
