#!/usr/bin/env python
# coding: utf-8
"""
Bar chart with dates on the x-axis and an optional running-total line.
"""

import logging
from matplotlib.ticker import FuncFormatter
import pandas as pd

from chart_utils.chart import ChartBase
from chart_utils.formatting import set_date_axis
from chart_utils.scales import TimeScale, add_days, month_range

logger = logging.getLogger(__name__)


def bar_dataset(input_data: list) -> pd.DataFrame:
    """
    Copy the input into a frame sorted by date with a running total column.

    Args:
        input_data: List of dicts with 'date', 'y' and 'txt'

    Returns:
        DataFrame with columns date, y, txt, y_cum (stable sort by date)
    """
    dataset = pd.DataFrame(list(input_data), columns=["date", "y", "txt"])
    dataset = dataset.sort_values("date", kind="mergesort").reset_index(drop=True)
    dataset["y_cum"] = dataset["y"].cumsum()
    return dataset


def _fmt_tick(value, pos):
    # the baseline tick stays unlabelled
    return "" if pos == 0 else f"{value:,.0f}"


class BarChart(ChartBase):
    DEFAULT_CONFIG = {
        "title": "",
        "show_running_total": True,
        "bar_days": 10,     # bar width in days
    }

    def __init__(self, ax=None, config: dict | None = None):
        super().__init__(ax, config)
        self.dataset = bar_dataset([])
        self.x_scale = None

    def make_chart(self, input_data: list, reuse_data: bool = False) -> pd.DataFrame:
        """
        Draw the bars (and the running total) for a fresh dataset.

        Returns:
            The dataset as built by bar_dataset (empty if nothing was drawn)
        """
        ax = self.start_drawing(reuse_data, input_data)
        self.dataset = bar_dataset(input_data)
        if self.dataset.empty:
            logger.warning("No data to draw in the bar chart")
            return self.dataset

        min_date = self.dataset["date"].iloc[0]
        max_date = self.dataset["date"].iloc[-1]
        self.x_scale = TimeScale((min_date, max_date), (0, self.width)).nice()

        cum_total = self.dataset["y_cum"].iloc[-1]
        y_max = cum_total if self.config["show_running_total"] else self.dataset["y"].max()

        bar_width = self.x_scale(add_days(min_date, self.config["bar_days"])) - self.x_scale(min_date)
        xs = [self.x_scale(d) for d in self.dataset["date"]]

        ax.set_xlim(0, self.width)
        ax.set_ylim(0, 1.1 * y_max if y_max > 0 else 1)
        start, stop = self.x_scale.domain
        set_date_axis(ax, self.x_scale, month_range(start, add_days(stop, 1)))
        ax.yaxis.set_major_formatter(FuncFormatter(_fmt_tick))
        ax.grid(True, axis="y", linestyle="--", alpha=0.5)
        for side in ("top", "right"):
            ax.spines[side].set_visible(False)

        self._bars = ax.bar(xs, self.dataset["y"], width=bar_width, color="steelblue", zorder=2)

        if self.config["show_running_total"]:
            ax.plot(xs, self.dataset["y_cum"], color="darkorange", linewidth=2, marker="o",
                    markerfacecolor="white", zorder=3)

        self._val_text = ax.text(0, 0, "", rotation=90, ha="left", va="bottom", fontsize=8,
                                 visible=False, zorder=4)
        self.connect("motion_notify_event", self._on_motion)

        ax.set_title(self.config["title"], fontsize=14, fontweight="bold")
        return self.dataset

    def bar_index_at(self, event) -> int | None:
        for i, bar in enumerate(self._bars):
            hit, _ = bar.contains(event)
            if hit:
                return i
        return None

    def _on_motion(self, event):
        if event.inaxes != self.ax:
            return
        i = self.bar_index_at(event)
        if i is None:
            if not self._val_text.get_visible():
                return
            self._val_text.set_visible(False)
        else:
            row = self.dataset.iloc[i]
            self._val_text.set_text(row["txt"])
            self._val_text.set_position((self.x_scale(row["date"]), row["y"] * 1.02))
            self._val_text.set_visible(True)
        self.ax.figure.canvas.draw_idle()
