"""Unit conversion utilities using pint.

All internal data is stored in metric units:
- Pasture height: centimeters (cm)
- Area: hectares (ha)
- Forage mass: kilograms of dry matter (kg DM)
- Rainfall: millimeters (mm)

Display units are controlled by settings.display_units:
- "metric": Display as stored
- "imperial": Convert to inches, acres, pounds
"""

import pint

from pasturewatch.core.config import settings

# Create a unit registry (lazily initialized)
_ureg: pint.UnitRegistry | None = None


def get_ureg() -> pint.UnitRegistry:
    """Get the pint unit registry (lazily initialized)."""
    global _ureg
    if _ureg is None:
        _ureg = pint.UnitRegistry()
    return _ureg


def is_imperial() -> bool:
    """Check if display units are imperial."""
    return settings.display_units == "imperial"


# =============================================================================
# Height / Rainfall
# =============================================================================


def height_cm_to_display(cm: float) -> tuple[float, str]:
    """Convert a pasture height to display units.

    Returns:
        Tuple of (value, unit_symbol) in display units
    """
    if is_imperial():
        ureg = get_ureg()
        return ((cm * ureg.centimeter).to(ureg.inch).magnitude, "in")
    return (cm, "cm")


def format_height(cm: float | None, decimals: int = 1) -> str:
    """Format a pasture height, e.g. "12.5 cm" or "4.9 in"."""
    if cm is None:
        return "—"
    value, unit = height_cm_to_display(cm)
    return f"{value:.{decimals}f} {unit}"


def format_rate(cm_per_day: float | None) -> str:
    """Format a growth velocity, e.g. "-0.50 cm/day"."""
    if cm_per_day is None:
        return "—"
    value, unit = height_cm_to_display(cm_per_day)
    return f"{value:+.2f} {unit}/day"


def format_rainfall(mm: float) -> str:
    """Format a rainfall total, e.g. "21.0 mm" or '0.83"'."""
    if is_imperial():
        ureg = get_ureg()
        return f'{(mm * ureg.mm).to(ureg.inch).magnitude:.2f}"'
    return f"{mm:.1f} mm"


# =============================================================================
# Area / Mass
# =============================================================================


def format_area(ha: float | None) -> str:
    """Format an area, e.g. "10.0 ha" or "24.7 ac"."""
    if ha is None:
        return "—"
    if is_imperial():
        ureg = get_ureg()
        return f"{(ha * ureg.hectare).to(ureg.acre).magnitude:.1f} ac"
    return f"{ha:.1f} ha"


def format_mass(kg: float | None) -> str:
    """Format forage dry matter, e.g. "20,000 kg DM" or "44,092 lb DM"."""
    if kg is None:
        return "—"
    if is_imperial():
        ureg = get_ureg()
        return f"{(kg * ureg.kilogram).to(ureg.pound).magnitude:,.0f} lb DM"
    return f"{kg:,.0f} kg DM"
