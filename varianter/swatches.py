"""Swatch colors for color dimension labels."""

import re

DEFAULT_SWATCH = "#808080"

_HEX_RE = re.compile(r"^#[0-9a-f]{6}$", re.IGNORECASE)

COLOR_SWATCHES = {
    "azul": "#1E40AF",
    "azul naval": "#1E3A8A",
    "azul hielo": "#BFDBFE",
    "negro": "#000000",
    "blanco": "#FFFFFF",
    "verde": "#10B981",
    "rosado": "#EC4899",
    "rosa": "#EC4899",
    "gris": "#808080",
    "plateado": "#C0C0C0",
    "dorado": "#D4AF37",
    "menta": "#86EFAC",
    "gris titanio": "#4B5563",
    "negro titanio": "#1F2937",
}


def swatch_hex(label: str) -> str:
    """Hex swatch for a color label; labels that already are hex pass through."""
    label = label.strip()
    if _HEX_RE.match(label):
        return label.upper()
    return COLOR_SWATCHES.get(label.lower(), DEFAULT_SWATCH)
