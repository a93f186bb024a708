#!/usr/bin/env python
# coding: utf-8

from datetime import date
import matplotlib.pyplot as plt
from matplotlib.widgets import Slider

from chart_utils.overlay_controls import SliderWindow, ViewControlsWindow


class ChartBase:
    """
    Figure/axes handling, configuration and overlay controls shared by the charts.

    Subclasses define DEFAULT_CONFIG and implement make_chart(data, reuse_data=False).
    """
    DEFAULT_CONFIG = {
        "em_size": 16,      # px, all chart geometry is a multiple of this
        "width": 1200,      # px
        "now": None,        # start of the sliding window, today if None
    }

    def __init__(self, ax=None, config: dict | None = None):
        self.config = {**ChartBase.DEFAULT_CONFIG, **self.DEFAULT_CONFIG, **(config or {})}
        self.ax = ax
        self.owns_figure = ax is None

        self.em_size = self.config["em_size"]
        self.margin = 4 * self.em_size
        self.title_height = 4 * self.em_size
        self.legend_height = 4 * self.em_size
        self.width = self.config["width"] - 2 * self.margin

        self.saved_data = []
        self.show_empty = False
        self.plot_data = []

        self.slider_window = SliderWindow()
        self.slider_window.on_change(self._show_window_text)
        self.view_ctls = ViewControlsWindow()
        self.view_ctls.set_chkbox_handler(self.set_show_empty)
        self._window_text = None
        self._event_ids = []

    def get_ax(self):
        if self.ax is None:
            _, self.ax = plt.subplots(figsize=(self.config["width"] / 100, 8))
        return self.ax

    def now(self):
        return self.config["now"] or date.today()

    def set_show_empty(self, checked: bool):
        """View-control handler: redraw the saved data with or without empty projects."""
        self.show_empty = bool(checked)
        return self.make_chart(self.saved_data, reuse_data=True)

    def attach_controls(self, slider_ax=None, check_ax=None):
        """
        Add a month slider for the cash-flow window and a "show empty" checkbox.

        Args:
            slider_ax: Axes to hold the Slider widget
            check_ax: Axes to hold the CheckButtons widget
        """
        if slider_ax is not None:
            slider = Slider(slider_ax, "window (mths)", 0, max(1, self.slider_window.slider_max),
                            valinit=0, valstep=1)
            self.slider_window.connect(slider)
        if check_ax is not None:
            self.view_ctls.attach(check_ax)

    def start_drawing(self, reuse_data: bool, data):
        """Save the data, clear the axes and the previous event hooks; return the axes."""
        if not reuse_data:
            self.saved_data = data
        ax = self.get_ax()
        for cid in self._event_ids:
            ax.figure.canvas.mpl_disconnect(cid)
        self._event_ids = []
        self._window_text = None
        ax.clear()
        self.slider_window.reset_window()
        return ax

    def connect(self, event_name: str, handler):
        cid = self.get_ax().figure.canvas.mpl_connect(event_name, handler)
        self._event_ids.append(cid)
        return cid

    def add_window_text(self, ax):
        self._window_text = ax.text(0.99, 0.02, "", transform=ax.transAxes,
                                    ha="right", va="bottom", fontsize=9,
                                    bbox=dict(boxstyle="round", facecolor="white", alpha=0.8))

    def _show_window_text(self, text: str):
        if self._window_text is not None:
            self._window_text.set_text(text)
            self._window_text.set_visible(bool(text))
            self.ax.figure.canvas.draw_idle()

    def resize_figure(self, chart_height: float):
        if self.owns_figure:
            total = chart_height + self.title_height + self.legend_height + 2 * self.margin
            self.ax.figure.set_size_inches(self.config["width"] / 100, max(total, 200) / 100)
