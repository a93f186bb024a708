#!/usr/bin/env python
# coding: utf-8
"""
Timeline/schedule chart: one horizontal bar per project from its start
(feasibility expiry) to its close date, with the dated cash flows of the
project drawn as vertical lines standing on the bar. Overlapping projects are
stacked onto separate tracks.
"""

import logging
from matplotlib.lines import Line2D
import matplotlib.patches as patches

from chart_utils.chart import ChartBase
from chart_utils.formatting import set_date_axis, short_date_str
from chart_utils.scales import LinearScale, TimeScale, add_days, month_offset, month_range, months_between
from chart_utils.stacking import Rect, stack_rects

logger = logging.getLogger(__name__)


def layout_schedule(input_data: list, x_scale, y_scale, x_min_gap: float, track_gap: float,
                    track_height: float) -> list:
    """
    Convert projects to scaled plot data and stack the bars onto tracks.

    Args:
        input_data: List of dicts with 'dt1', 'dt2', 'txt' and 'cf' (list of {'dt', 'amt'})
        x_scale: Maps dates to x
        y_scale: Maps cash flow amounts to bar heights
        x_min_gap: Minimum horizontal gap between bars on one track
        track_gap: Vertical gap between tracks
        track_height: Uniform track height

    Returns:
        List of plot dicts sorted by x1, each with 'idx' (its position), 'x1',
        'x2', 'ybase', 'dt_str1', 'dt_str2', 'txt' and 'cf' (list of
        {'x', 'h', 'raw_dt', 'raw_amt'} sorted by x)
    """
    plot_data = []
    for d in input_data:
        cash_flows = [
            {"x": x_scale(c["dt"]), "h": y_scale(c["amt"]), "raw_dt": c["dt"], "raw_amt": c["amt"]}
            for c in d["cf"]
        ]
        cash_flows.sort(key=lambda c: c["x"])
        plot_data.append({
            "idx": 0,
            "x1": x_scale(d["dt1"]),
            "x2": x_scale(d["dt2"]),
            "ybase": 0,
            "dt_str1": short_date_str(d["dt1"], "."),
            "dt_str2": short_date_str(d["dt2"], "."),
            "txt": d["txt"],
            "cf": cash_flows,
        })

    plot_data.sort(key=lambda p: p["x1"])
    for i, p in enumerate(plot_data):
        p["idx"] = i

    # rect height is the tallest cash flow bar of the project
    rects = [
        Rect(p["idx"], p["x1"], 0, p["x2"] - p["x1"], max((c["h"] for c in p["cf"]), default=0))
        for p in plot_data
    ]
    y_base = stack_rects(rects, x_min_gap, track_gap, track_height, compact=False)

    for p in plot_data:
        p["ybase"] = y_base[p["idx"]]

    return plot_data


class ScheduleChart(ChartBase):
    DEFAULT_CONFIG = {
        "chart_title": "Cash flow schedule",
        "cf_legend": "cash flow",
    }

    def __init__(self, ax=None, config: dict | None = None):
        super().__init__(ax, config)
        # project track geometry
        self.x_min_gap = 4 * self.em_size
        self.track_gap = 4 * self.em_size
        self.track_height = 10 * self.em_size
        self.chart_height = 0
        self.x_scale = None

    def make_chart(self, input_data: list, reuse_data: bool = False) -> list:
        """
        Draw the schedule; may be called repeatedly with fresh data.

        Args:
            input_data: List of project dicts, see layout_schedule
            reuse_data: Redraw without replacing the saved data (view-control toggles)

        Returns:
            The plot data as laid out by layout_schedule ([] if nothing was drawn)
        """
        ax = self.start_drawing(reuse_data, input_data)

        filtered = [p for p in input_data if self.show_empty or len(p["cf"]) > 0]
        if not filtered:
            logger.warning("No projects to draw in the schedule chart")
            self.plot_data = []
            return self.plot_data

        now_dt = self.now()

        # data bounds
        min_date = min(d["dt1"] for d in filtered)
        max_date = max(d["dt2"] for d in filtered)
        max_cf = max((c["amt"] for d in filtered for c in d["cf"]), default=0)

        # graph date limits: whole months, three months around the data
        first_of_months = month_range(month_offset(min_date, -3), month_offset(max_date, 3))
        min_graph_date, max_graph_date = first_of_months[0], first_of_months[-1]

        self.slider_window.set_slider_max(months_between(now_dt, max_graph_date) - 1)

        self.x_scale = TimeScale((min_graph_date, max_graph_date), (0, self.width)).nice()
        y_scale = LinearScale((0, 1.1 * max_cf or 1), (0, self.track_height))

        self.plot_data = layout_schedule(filtered, self.x_scale, y_scale,
                                         self.x_min_gap, self.track_gap, self.track_height)
        self.chart_height = max(p["ybase"] for p in self.plot_data) + self.track_height + self.track_gap

        self._draw(ax, now_dt)
        return self.plot_data

    def _draw(self, ax, now_dt):
        em = self.em_size
        ax.set_xlim(0, self.width)
        ax.set_ylim(self.chart_height, 0)
        ax.xaxis.tick_top()
        start, stop = self.x_scale.domain
        set_date_axis(ax, self.x_scale, month_range(start, add_days(stop, 1)))
        ax.set_yticks([])
        for side in ("left", "right", "bottom"):
            ax.spines[side].set_visible(False)

        # sliding cf window
        cf_window = patches.Rectangle((self.x_scale(now_dt), 0), 0, self.chart_height,
                                      facecolor="steelblue", alpha=0.15, zorder=0)
        ax.add_patch(cf_window)
        v_data = [
            {"raw_dt": c["raw_dt"], "raw_amt": c["raw_amt"]}
            for p in self.plot_data for c in p["cf"]
        ]
        self.slider_window.set_rect_sizer(cf_window, now_dt, self.x_scale, {"Earnest money": v_data})

        # vertical cash flow lines, their dots and amounts in $k
        for p in self.plot_data:
            for c in p["cf"]:
                top = p["ybase"] - c["h"]
                ax.plot([c["x"], c["x"]], [p["ybase"], top], color="gray", linewidth=1.5, zorder=2)
                ax.plot(c["x"], top, "o", color="black", markersize=3, zorder=3)
                ax.text(c["x"], top - em, f"{c['raw_amt'] / 1000:.1f}", ha="center", fontsize=7)

        # horizontal bars, open box at the start and filled box at the close date
        for p in self.plot_data:
            ax.plot([p["x1"], p["x2"]], [p["ybase"], p["ybase"]], color="black", linewidth=2, zorder=2)
            ax.plot(p["x1"], p["ybase"], "s", markerfacecolor="white", markeredgecolor="black", zorder=3)
            ax.plot(p["x2"], p["ybase"], "s", color="black", zorder=3)
            ax.text((p["x1"] + p["x2"]) / 2, p["ybase"] + 1.5 * em, p["txt"], ha="center", fontsize=8)

        # hover labels, added last so they draw on top
        box = dict(boxstyle="round,pad=0.3", facecolor="white", edgecolor="black")
        self._left_text = ax.text(0, 0, "", ha="right", va="center", fontsize=8, bbox=box,
                                  visible=False, zorder=10)
        self._right_text = ax.text(0, 0, "", ha="left", va="center", fontsize=8, bbox=box,
                                   visible=False, zorder=10)
        self.connect("motion_notify_event", self._on_motion)

        ax.set_title(self.config["chart_title"], fontsize=14, fontweight="bold", pad=30)
        legend_items = [
            Line2D([], [], color="black", marker="s", markerfacecolor="white", label="feas exp"),
            Line2D([], [], color="black", marker="s", label="close"),
            Line2D([], [], color="black", marker="o", linestyle="none", markersize=3,
                   label=self.config["cf_legend"]),
        ]
        ax.legend(handles=legend_items, loc="lower center", bbox_to_anchor=(0.5, 1.04),
                  ncol=3, frameon=False, fontsize=9)
        self.add_window_text(ax)
        self.resize_figure(self.chart_height)

    def bar_at(self, x: float, y: float):
        """Plot dict of the horizontal bar under (x, y), or None."""
        tolerance = self.em_size / 2
        for p in self.plot_data:
            if p["x1"] - tolerance <= x <= p["x2"] + tolerance and abs(y - p["ybase"]) <= tolerance:
                return p
        return None

    def _on_motion(self, event):
        if event.inaxes != self.ax or event.xdata is None or event.ydata is None:
            return
        p = self.bar_at(event.xdata, event.ydata)
        if p is None:
            changed = self._left_text.get_visible()
            self._left_text.set_visible(False)
            self._right_text.set_visible(False)
        else:
            changed = True
            self._left_text.set_text(p["dt_str1"])
            self._left_text.set_position((p["x1"] - self.em_size / 2, p["ybase"]))
            self._right_text.set_text(p["dt_str2"])
            self._right_text.set_position((p["x2"] + self.em_size / 2, p["ybase"]))
            self._left_text.set_visible(True)
            self._right_text.set_visible(True)
        if changed:
            self.ax.figure.canvas.draw_idle()
