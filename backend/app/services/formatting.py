"""
Quantity display helpers.

Stored quantities are exact sums; these only shape them for reading.
"""

# Common fractions for display (using precise values)
COMMON_FRACTIONS = {
    0.125: "1/8", 0.25: "1/4", 1 / 3: "1/3", 0.375: "3/8",
    0.5: "1/2", 0.625: "5/8", 2 / 3: "2/3", 0.75: "3/4", 0.875: "7/8",
}

FRACTION_TOLERANCE = 0.02


def float_to_fraction(value: float | None) -> str:
    """Convert a float to a kitchen-friendly string ("1 1/2", "3/4", "2.45")."""
    if value is None or value == 0:
        return "0"
    if value == int(value):
        return str(int(value))

    whole = int(value)
    decimal = value - whole
    for dec, frac in COMMON_FRACTIONS.items():
        if abs(decimal - dec) < FRACTION_TOLERANCE:
            if whole > 0:
                return f"{whole} {frac}"
            return frac

    return f"{value:.2f}".rstrip("0").rstrip(".")


def format_quantity(quantity: float | None, unit: str | None) -> str:
    """Format a quantity with its unit for shopping list display."""
    amount = float_to_fraction(quantity)
    if not unit:
        return amount
    return f"{amount} {unit}"
