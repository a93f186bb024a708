#!/usr/bin/env python
# coding: utf-8


def num_fmt(num: float, is_ccy: bool = False, scale: float = 1000) -> str:
    """
    Format an amount in units of scale (thousands by default) with one decimal.

    Args:
        num: Raw amount
        is_ccy: Prefix a dollar sign
        scale: Divisor applied before formatting

    Returns:
        Formatted string, e.g. num_fmt(25300, True) -> "$25.3"
    """
    scaled = num / scale
    text = f"{abs(scaled):,.1f}".rstrip("0").rstrip(".")
    sign = "-" if scaled < 0 and text != "0" else ""
    return f"{sign}${text}" if is_ccy else f"{sign}{text}"


def ccy_fmt(amount: float) -> str:
    """Whole-dollar currency text, e.g. 1234.6 -> "$1,235"."""
    sign = "-" if round(amount) < 0 else ""
    return f"{sign}${abs(amount):,.0f}"


def short_date_str(d, sep: str = "/") -> str:
    return sep.join(str(part) for part in (d.month, d.day, d.year))


def trim_date_axis_text(labels, nchar: int = 3) -> list[str]:
    """Trim the non-numeric tick labels to their first nchar characters (years stay whole)."""
    return [text if text.isdigit() else text[:nchar] for text in labels]


def month_tick_label(d) -> str:
    # January ticks carry the year, the others the month name
    return str(d.year) if d.month == 1 else d.strftime("%B")


def set_date_axis(ax, x_scale, ticks, nchar: int = 3):
    """
    Put month ticks on the x-axis of ax.

    Args:
        ax: Matplotlib axes drawn in scaled x units
        x_scale: TimeScale mapping dates to x units
        ticks: Dates to tick (typically first-of-month dates)
        nchar: Length month names are trimmed to
    """
    positions = [x_scale(d) for d in ticks]
    labels = trim_date_axis_text([month_tick_label(d) for d in ticks], nchar)
    ax.set_xticks(positions)
    ax.set_xticklabels(labels)
    return labels
