#!/usr/bin/env python
# coding: utf-8
"""
Sliding date-window totals and the "show empty" view control shared by the charts.
"""

import logging
import pandas as pd
from matplotlib.widgets import CheckButtons

from chart_utils.formatting import ccy_fmt, short_date_str
from chart_utils.scales import month_offset

logger = logging.getLogger(__name__)


def window_totals(val_data: dict, from_dt, to_dt) -> list[dict]:
    """
    Sum each named series over the inclusive date window [from_dt, to_dt].

    Args:
        val_data: Dictionary mapping series names to lists of {'raw_dt', 'raw_amt'} dicts
        from_dt: Window start
        to_dt: Window end

    Returns:
        List of {'val_type': name, 'val_total': total} in series order
    """
    totals = []
    lo, hi = pd.Timestamp(from_dt), pd.Timestamp(to_dt)
    for val_type, vals in val_data.items():
        frame = pd.DataFrame(list(vals), columns=["raw_dt", "raw_amt"])
        if frame.empty:
            totals.append({"val_type": val_type, "val_total": 0})
            continue
        dates = pd.to_datetime(frame["raw_dt"])
        in_window = (dates >= lo) & (dates <= hi)
        totals.append({"val_type": val_type, "val_total": frame.loc[in_window, "raw_amt"].sum()})
    return totals


class SliderWindow:
    """
    State behind the sliding cash-flow window: a span of whole months starting
    at a fixed "now" date, the rectangle showing it and the totals inside it.
    """

    def __init__(self):
        self.months_val = 0
        self.slider_max = 0
        self.from_dt = None
        self.to_dt = None
        self.total_amts = []
        self.slider = None
        self._rect = None
        self._x_scale = None
        self._val_data = {}
        self._listeners = []

    def set_slider_max(self, max_mths: int):
        self.slider_max = max(0, int(max_mths))
        if self.slider is not None:
            self.slider.valmax = self.slider_max
            self.slider.ax.set_xlim(self.slider.valmin, max(self.slider_max, self.slider.valmin + 1))

    def reset_window(self):
        self.months_val = 0
        self.to_dt = self.from_dt
        self.total_amts = []
        if self.slider is not None:
            self.slider.reset()
        if self._rect is not None:
            self._rect.set_width(0)

    def set_rect_sizer(self, rect, now_dt, x_scale, val_data: dict):
        """
        Attach the window to a drawn rectangle.

        Args:
            rect: Matplotlib Rectangle whose left edge sits at x_scale(now_dt)
            now_dt: Fixed window start
            x_scale: Scale projecting dates to the chart's x units
            val_data: Series to total, see window_totals; read on every resize
        """
        self.from_dt = now_dt
        self.to_dt = now_dt
        self._rect = rect
        self._x_scale = x_scale
        self._val_data = val_data

    def resize_rect(self):
        if self.from_dt is None:
            return
        self.to_dt = month_offset(self.from_dt, self.months_val)
        if self._rect is not None and self._x_scale is not None:
            self._rect.set_width(self._x_scale(self.to_dt) - self._x_scale(self.from_dt))
        self.total_amts = window_totals(self._val_data, self.from_dt, self.to_dt)

    def refresh_totals(self) -> str:
        self.resize_rect()
        text = self.display_text()
        for listener in self._listeners:
            listener(text)
        return text

    def set_new_val(self, new_val) -> str:
        self.months_val = int(new_val)
        return self.refresh_totals()

    def display_text(self) -> str:
        if self.months_val <= 0 or self.from_dt is None:
            return ""
        suffix = " mths" if self.months_val > 1 else " mth"
        lines = [
            f"{self.months_val}{suffix}",
            f"range: {short_date_str(self.from_dt)} to {short_date_str(self.to_dt)}",
        ]
        lines += [f"{amt['val_type']}: {ccy_fmt(amt['val_total'])}" for amt in self.total_amts]
        return "\n".join(lines)

    def on_change(self, listener):
        """Register listener(text), called with the summary text after every refresh."""
        self._listeners.append(listener)

    def connect(self, slider):
        """Drive the window from a matplotlib Slider widget."""
        self.slider = slider
        self.set_slider_max(self.slider_max)
        return slider.on_changed(self.set_new_val)


class ViewControlsWindow:
    """Single "show empty" checkbox forwarding its state to a handler."""

    def __init__(self, ax=None, label: str = "show empty"):
        self.label = label
        self.checked = False
        self._handlers = []
        self.check_buttons = None
        if ax is not None:
            self.attach(ax)

    def attach(self, ax):
        """Draw the checkbox into ax and start forwarding clicks."""
        self.check_buttons = CheckButtons(ax, [self.label], [self.checked])
        self.check_buttons.on_clicked(self._on_clicked)
        return self.check_buttons

    def set_chkbox_handler(self, handler):
        self._handlers.append(handler)

    def _on_clicked(self, label):
        self.toggle(self.check_buttons.get_status()[0])

    def toggle(self, checked: bool):
        self.checked = bool(checked)
        logger.debug(f"{self.label}: {self.checked}")
        for handler in self._handlers:
            handler(self.checked)
