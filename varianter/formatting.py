"""Price display helpers."""

from decimal import Decimal

from django.utils import numberformat
from django.utils.translation import gettext as _

from varianter.conf import varianter_settings
from varianter.protocols.catalog import discount_percent


def format_amount(amount_q: int) -> str:
    """Amount in the smallest currency unit, grouped, without symbol."""
    places = varianter_settings.CURRENCY_DECIMAL_PLACES
    value = Decimal(amount_q).scaleb(-places)
    return str(
        numberformat.format(
            value,
            varianter_settings.DECIMAL_SEPARATOR,
            decimal_pos=places,
            grouping=3,
            thousand_sep=varianter_settings.THOUSAND_SEPARATOR,
            force_grouping=True,
            use_l10n=False,
        )
    )


def format_price(amount_q: int) -> str:
    """E.g. 1234567 -> "$ 1.234.567"."""
    return f"{varianter_settings.CURRENCY_SYMBOL} {format_amount(amount_q)}"


def format_price_or_placeholder(amount_q: int | None) -> str:
    if not amount_q or amount_q <= 0:
        return _("Precio no disponible")
    return format_price(amount_q)


def format_discount(price_q: int, list_price_q: int) -> str | None:
    """Discount badge, e.g. "-17%"; None when the price is not discounted."""
    percent = discount_percent(price_q, list_price_q)
    if percent is None:
        return None
    return f"-{percent}%"
