def fmt_amount(value: float, symbol: str = "₱") -> str:
    """Format money: 1234567.891 -> ₱1,234,567.89"""
    if value < 0:
        return f"-{symbol}{abs(value):,.2f}"
    return f"{symbol}{value:,.2f}"


def fmt_rate(value: float) -> str:
    """Format a percent rate: 12 -> 12.00%"""
    return f"{value:.2f}%"


def fmt_percent(value: float) -> str:
    """Format a ratio: 0.3456 -> 34.56%"""
    return f"{value * 100:.2f}%"


def fmt_months(months: int) -> str:
    """Format a term: 30 -> 2 yrs 6 mos"""
    years = months // 12
    remain = months % 12
    year_part = f"{years} yr" + ("s" if years != 1 else "")
    month_part = f"{remain} mo" + ("s" if remain != 1 else "")
    if remain == 0 and years > 0:
        return year_part
    if years == 0:
        return month_part
    return f"{year_part} {month_part}"
