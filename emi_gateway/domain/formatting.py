"""Currency display formatting"""

NON_BREAKING_SPACES = ("\u00a0", "\u202f")


def normalize_spaces(text: str) -> str:
    """Replace non-breaking separators with ordinary spaces for stable comparison"""
    for char in NON_BREAKING_SPACES:
        text = text.replace(char, " ")
    return text


def format_currency(amount: float, symbol: str = "K") -> str:
    """
    Render an amount with a currency symbol prefix, comma grouping and two decimals.

    Examples:
        1250    -> "K1,250.00"
        -500    -> "-K500.00"
        926.356 -> "K926.36"
    """
    sign = "-" if amount < 0 else ""
    magnitude = f"{abs(amount):,.2f}"
    # -0.001 rounds to 0.00, which should not carry a sign
    if magnitude == "0.00":
        sign = ""
    return normalize_spaces(f"{sign}{symbol}{magnitude}")
