"""
Varianter configuration.

Usage in settings.py:
    VARIANTER = {
        "CURRENCY_SYMBOL": "$",
        "CURRENCY_DECIMAL_PLACES": 0,
        "INSTALLMENT_BACKEND": None,  # e.g. "payments.adapters.varianter.CeroInteresBackend"
        "INSTALLMENT_CACHE_TIMEOUT": 300,  # seconds, 0 disables
    }
"""

import importlib
import threading
from dataclasses import dataclass
from typing import Any

from django.conf import settings

from varianter.exceptions import VariantError


@dataclass
class VarianterSettings:
    """Varianter configuration settings."""

    CURRENCY_SYMBOL: str = "$"
    CURRENCY_DECIMAL_PLACES: int = 0
    THOUSAND_SEPARATOR: str = "."
    DECIMAL_SEPARATOR: str = ","
    ABSENT_DIMENSION_VALUES: tuple[str, ...] = ("no aplica", "")
    MAX_VALID_PRICE_Q: int = 100_000_000
    INSTALLMENTS_ENABLED: bool = True
    INSTALLMENT_BACKEND: str | None = None
    INSTALLMENT_CACHE_TIMEOUT: int = 300


def get_varianter_settings() -> VarianterSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "VARIANTER", {})
    return VarianterSettings(**user_settings)


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_varianter_settings(), name)


varianter_settings = _LazySettings()


# InstallmentBackend singleton
_installment_backend_lock = threading.Lock()
_installment_backend_instance = None


def get_installment_backend():
    """
    Return the configured InstallmentBackend instance.

    Loads from VARIANTER["INSTALLMENT_BACKEND"] (dotted path), falling back
    to NoopInstallmentBackend when unset.
    If _installment_backend_instance was set directly (e.g. in tests), returns it as-is.
    """
    global _installment_backend_instance
    if _installment_backend_instance is not None:
        return _installment_backend_instance
    backend_path = (
        varianter_settings.INSTALLMENT_BACKEND
        or "varianter.adapters.noop.NoopInstallmentBackend"
    )
    with _installment_backend_lock:
        if _installment_backend_instance is None:
            from varianter.protocols.installments import InstallmentBackend

            module_path, cls_name = backend_path.rsplit(".", 1)
            module = importlib.import_module(module_path)
            backend = getattr(module, cls_name)()
            if not isinstance(backend, InstallmentBackend):
                raise VariantError("INVALID_BACKEND", backend=backend_path)
            _installment_backend_instance = backend
    return _installment_backend_instance


def reset_installment_backend():
    """Reset InstallmentBackend singleton (for tests)."""
    global _installment_backend_instance
    _installment_backend_instance = None
