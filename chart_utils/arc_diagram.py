#!/usr/bin/env python
# coding: utf-8
"""
Project schedule diagram with each project's proformas arranged around a
circular cell centred at the project's closing date. Acquisition and
additional cash are shown as radial bars; cells that would collide are
stacked onto separate tracks. Cash flows of the selected proformas can be
totalled over any period with the sliding date window.
"""

import logging
import math
from matplotlib.lines import Line2D
from matplotlib.patches import Rectangle
import numpy as np

from chart_utils.chart import ChartBase
from chart_utils.formatting import num_fmt, set_date_axis, short_date_str
from chart_utils.scales import LinearScale, TimeScale, add_days, month_range, months_between
from chart_utils.stacking import Rect, stack_rects

logger = logging.getLogger(__name__)


def layout_arcs(proj_data: list, x_scale, r_scale, cell_radius: float, cell_gap: float) -> list:
    """
    Convert projects to scaled cells and stack cells that collide.

    Args:
        proj_data: List of Proj (dt, desc, proformas)
        x_scale: Maps project dates to cell centre x
        r_scale: Maps cash amounts to radial bar lengths
        cell_radius: Cell radius; a cell occupies a 2 * cell_radius square
        cell_gap: Minimum gap between cells, horizontally and between tracks

    Returns:
        List of cell dicts sorted by cx with 'idx', 'proj_desc', 'dt', 'cx',
        'cy' and 'proformas' (dicts with 'name', 'rank', 'desc', 'r_acq',
        'r_addl', 'amt_acq', 'amt_addl')
    """
    plot_data = []
    for prj in proj_data:
        cell = {
            "proj_desc": prj.desc,
            "dt": prj.dt,
            "cx": x_scale(prj.dt),
            "cy": 0,
            "proformas": [],
        }
        for prf in prj.proformas:
            cell["proformas"].append({
                "name": prf.name,
                "rank": prf.rank,
                "desc": prf.desc,
                "r_acq": r_scale(prf.acq_cash),
                "r_addl": r_scale(prf.addl_cash),
                "amt_acq": prf.acq_cash,
                "amt_addl": prf.addl_cash,
            })
        plot_data.append(cell)

    plot_data.sort(key=lambda cell: cell["cx"])
    for i, cell in enumerate(plot_data):
        cell["idx"] = i

    rects = [Rect(cell["idx"], cell["cx"] - cell_radius, 0, 2 * cell_radius, 2 * cell_radius)
             for cell in plot_data]
    y_base = stack_rects(rects, cell_gap, cell_gap, 2 * cell_radius, compact=False)

    for cell in plot_data:
        cell["ybase"] = y_base[cell["idx"]]
        cell["cy"] = y_base[cell["idx"]] - cell_radius + 2 * cell_gap
        logger.debug(f"cell {cell['idx']}: {cell['proj_desc']} at ({cell['cx']:.1f}, {cell['cy']:.1f})")

    return plot_data


def polar_point(cell: dict, r: float, theta: float) -> tuple:
    # y grows downwards, so positive angles point up on screen
    return (cell["cx"] + r * math.cos(theta), cell["cy"] - r * math.sin(theta))


def radial_geometry(cell: dict, inner_radius: float, max_radials: int, start_theta: float,
                    d_theta: float, em_size: float, pointer_radius: float) -> list:
    """
    Radial bar geometry for the first max_radials proformas of a cell.

    Proforma i sits at angle start_theta - i * d_theta; its acquisition bar runs
    from inner_radius outwards by r_acq, the additional cash bar continues by
    r_addl. Text rotations are in degrees, counter-clockwise on screen. The
    pointer line of each proforma ends at pointer_radius on the 135 degree ray.

    Returns:
        List of dicts with 'rank', 'theta', 'acq' and 'addl' segments
        ((x1, y1), (x2, y2)), 'total_pos', 'total_text', 'rank_pos',
        'rotation' and 'pointer' (three points through the cell centre)
    """
    radials = []
    pointer_end = polar_point(cell, pointer_radius, 3 * math.pi / 4)
    for i, proforma in enumerate(cell["proformas"][:max_radials]):
        theta = start_theta - i * d_theta

        acq_start = polar_point(cell, inner_radius, theta)
        r = inner_radius + proforma["r_acq"]
        acq_end = polar_point(cell, r, theta)
        r += proforma["r_addl"]
        addl_end = polar_point(cell, r, theta)

        rank_r = inner_radius - em_size / 4
        pointer_r = rank_r - 2 * em_size

        radials.append({
            "rank": proforma["rank"],
            "theta": theta,
            "acq": (acq_start, acq_end),
            "addl": (acq_end, addl_end),
            "total_pos": polar_point(cell, r + em_size / 4, theta),
            "total_text": num_fmt(proforma["amt_acq"] + proforma["amt_addl"]),
            "rank_pos": polar_point(cell, rank_r, theta),
            "rotation": math.degrees(theta),
            "pointer": (polar_point(cell, pointer_r, theta), (cell["cx"], cell["cy"]), pointer_end),
        })
    return radials


def arc_points(cell: dict, radius: float, theta1: float, theta2: float, num: int = 30) -> tuple:
    """Points along the cell circle from angle theta1 to theta2 (radians, counter-clockwise on screen)."""
    thetas = np.linspace(theta1, theta2, num)
    return cell["cx"] + radius * np.cos(thetas), cell["cy"] - radius * np.sin(thetas)


class ArcScheduleChart(ChartBase):
    DEFAULT_CONFIG = {
        "chart_title": "Proforma cash flows",
        "cell_radius": 125,
        "inner_radius": 50,
        "max_radials": 5,
    }

    def __init__(self, ax=None, config: dict | None = None):
        super().__init__(ax, config)
        self.start_theta = math.pi / 4
        self.d_theta = math.pi / 4
        self.theta_offset = math.pi / 24
        self.max_radials = self.config["max_radials"]
        self.cell_radius = self.config["cell_radius"]
        self.inner_radius = self.config["inner_radius"]
        self.text_arc_gap = 1.5 * self.em_size
        self.cell_gap = 4 * self.em_size

        self.proforma_display_status = {}
        self.cf_window_data = {}
        self.chart_height = 0
        self.x_scale = None
        self._detail_texts = {}
        self._pointer_lines = {}
        self._rank_artists = {}

    def make_chart(self, proj_data: list, reuse_data: bool = False) -> list:
        """
        Draw the diagram; may be called repeatedly with fresh data.

        Args:
            proj_data: List of Proj
            reuse_data: Redraw without replacing the saved data (view-control toggles)

        Returns:
            The cells as laid out by layout_arcs ([] if nothing was drawn)
        """
        ax = self.start_drawing(reuse_data, proj_data)
        self.proforma_display_status = {}
        self.cf_window_data.clear()

        filtered = [p for p in proj_data if self.show_empty or len(p.proformas) > 0]
        if not filtered:
            logger.warning("No projects to draw in the arc diagram")
            self.plot_data = []
            return self.plot_data

        now_dt = self.now()

        # data bounds
        max_total_cash = max((prf.acq_cash + prf.addl_cash for p in filtered for prf in p.proformas),
                             default=0)
        min_dt = min(p.dt for p in filtered)
        max_dt = max(p.dt for p in filtered)

        self.slider_window.set_slider_max(months_between(now_dt, max_dt) + 1)

        # max total cash fills the annulus outside the inner radius
        r_scale = LinearScale((0, max_total_cash or 1), (0, self.cell_radius - self.inner_radius))
        # x-range inset by the cell radius so the first and last cells fit
        self.x_scale = TimeScale((min_dt, max_dt), (self.cell_radius, self.width - self.cell_radius)).nice()

        self.plot_data = layout_arcs(filtered, self.x_scale, r_scale, self.cell_radius, self.cell_gap)
        self.chart_height = max(cell["ybase"] for cell in self.plot_data) + 2 * self.margin

        self._draw(ax, now_dt)

        # start with the top-ranked proforma of every project
        for cell in self.plot_data:
            if any(prf["rank"] == 1 for prf in cell["proformas"]):
                self.show_proforma_details(cell["idx"], 1)
        self.set_cf_window_data()

        return self.plot_data

    def _draw(self, ax, now_dt):
        em = self.em_size
        ax.set_xlim(0, self.width)
        ax.set_ylim(self.chart_height, 0)
        ax.set_aspect("equal")
        ax.xaxis.tick_top()
        start, stop = self.x_scale.domain
        set_date_axis(ax, self.x_scale, month_range(start, add_days(stop, 1)))
        ax.set_yticks([])
        for side in ("left", "right", "bottom"):
            ax.spines[side].set_visible(False)

        # sliding cf window
        cf_window = Rectangle((self.x_scale(now_dt), 0), 0, self.chart_height,
                              facecolor="steelblue", alpha=0.15, zorder=0)
        ax.add_patch(cf_window)
        self.slider_window.set_rect_sizer(cf_window, now_dt, self.x_scale, self.cf_window_data)

        self._detail_texts = {}
        self._pointer_lines = {}
        self._rank_artists = {}
        detail_theta = 3 * math.pi / 4
        for cell in self.plot_data:
            # outer arc border, broken where the radials and the text sit
            xs, ys = arc_points(cell, self.cell_radius, self.start_theta + self.theta_offset, math.pi / 2)
            ax.plot(xs, ys, color="gray", linewidth=1)
            xs, ys = arc_points(cell, self.cell_radius, math.pi, math.pi + self.start_theta - self.theta_offset)
            ax.plot(xs, ys, color="gray", linewidth=1)

            # project description on the outer arc, proforma details on the two inner ones
            texts = {}
            for i, key in enumerate(("proj_desc", "proforma_desc", "cash")):
                x, y = polar_point(cell, self.cell_radius - i * self.text_arc_gap, detail_theta)
                texts[key] = ax.text(x, y, "", rotation=45, ha="center", va="center",
                                     fontsize=8 if i == 0 else 7)
            texts["proj_desc"].set_text(cell["proj_desc"])
            self._detail_texts[cell["idx"]] = texts

            self._pointer_lines[cell["idx"]] = {}
            for radial in radial_geometry(cell, self.inner_radius, self.max_radials,
                                          self.start_theta, self.d_theta, em,
                                          self.cell_radius - 5 * em):
                (x1, y1), (x2, y2) = radial["acq"]
                ax.plot([x1, x2], [y1, y2], color="tab:blue", linewidth=6, solid_capstyle="butt")
                (x1, y1), (x2, y2) = radial["addl"]
                ax.plot([x1, x2], [y1, y2], color="tab:orange", linewidth=6, solid_capstyle="butt")

                x, y = radial["total_pos"]
                ax.text(x, y, radial["total_text"], rotation=radial["rotation"], rotation_mode="anchor",
                        ha="left", va="center", fontsize=7)
                x, y = radial["rank_pos"]
                rank_text = ax.text(x, y, f"#{radial['rank']}", rotation=radial["rotation"],
                                    rotation_mode="anchor", ha="right", va="center", fontsize=8,
                                    picker=True)
                self._rank_artists[rank_text] = (cell["idx"], radial["rank"])

                pxs, pys = zip(*radial["pointer"])
                pointer, = ax.plot(pxs, pys, color="gray", linewidth=1, marker="o", markersize=3,
                                   markevery=[1], visible=False)
                self._pointer_lines[cell["idx"]][radial["rank"]] = pointer

        # floating date line shown while hovering a cell
        self._date_line, = ax.plot([], [], color="black", linewidth=1, linestyle=":", marker="o",
                                   markevery=[0], markersize=4)
        self._date_text = ax.text(0, 0, "", rotation=90, ha="right", va="bottom", fontsize=8)

        self.connect("pick_event", self._on_pick)
        self.connect("motion_notify_event", self._on_motion)

        ax.set_title(self.config["chart_title"], fontsize=14, fontweight="bold", pad=30)
        legend_items = [
            Line2D([], [], color="tab:blue", linewidth=6, label="acq cash $K"),
            Line2D([], [], color="tab:orange", linewidth=6, label="addl cash $K"),
        ]
        ax.legend(handles=legend_items, loc="lower center", bbox_to_anchor=(0.5, 1.04),
                  ncol=2, frameon=False, fontsize=9)
        self.add_window_text(ax)
        self.resize_figure(self.chart_height)

    def cell_by_idx(self, proj_idx: int) -> dict | None:
        for cell in self.plot_data:
            if cell["idx"] == proj_idx:
                return cell
        return None

    def show_proforma_details(self, proj_idx: int, rank: int, from_click: bool = False) -> bool:
        """
        Show a proforma's description and cash amounts on its cell's inner arcs.

        Args:
            proj_idx: Cell idx
            rank: Proforma rank within the project
            from_click: Also rebuild the cf window series and refresh the window totals

        Returns:
            False if that proforma was already displayed, True otherwise

        Raises:
            KeyError: If the project has no proforma of that rank
        """
        if self.proforma_display_status.get(proj_idx) == rank:
            return False

        cell = self.cell_by_idx(proj_idx)
        matches = [prf for prf in cell["proformas"] if prf["rank"] == rank] if cell else []
        if not matches:
            raise KeyError(f"No proforma of rank {rank} for project {proj_idx}")
        proforma = matches[0]

        texts = self._detail_texts.get(proj_idx)
        if texts is not None:
            texts["proforma_desc"].set_text(proforma["desc"])
            texts["cash"].set_text(f"acq: {num_fmt(proforma['amt_acq'], True)}   "
                                   f"addl: {num_fmt(proforma['amt_addl'], True)}")
        for rnk, pointer in self._pointer_lines.get(proj_idx, {}).items():
            pointer.set_visible(rnk == rank)

        self.proforma_display_status[proj_idx] = rank

        if from_click:
            self.set_cf_window_data()
            self.slider_window.refresh_totals()
        return True

    def set_cf_window_data(self) -> dict:
        """Rebuild the cf window series from the proformas currently displayed."""
        acq_cash = []
        addl_cash = []
        for proj_idx, current_rank in self.proforma_display_status.items():
            cell = self.cell_by_idx(proj_idx)
            if cell is None:
                continue
            for prf in cell["proformas"]:
                if prf["rank"] == current_rank:
                    acq_cash.append({"raw_dt": cell["dt"], "raw_amt": prf["amt_acq"]})
                    addl_cash.append({"raw_dt": cell["dt"], "raw_amt": prf["amt_addl"]})
                    break
        self.cf_window_data["acq cash"] = acq_cash
        self.cf_window_data["addl cash"] = addl_cash
        return self.cf_window_data

    def _on_pick(self, event):
        target = self._rank_artists.get(event.artist)
        if target is None:
            return
        if self.show_proforma_details(*target, from_click=True):
            self.ax.figure.canvas.draw_idle()

    def cell_at(self, x: float, y: float) -> dict | None:
        for cell in self.plot_data:
            if math.hypot(x - cell["cx"], y - cell["cy"]) <= self.cell_radius:
                return cell
        return None

    def _on_motion(self, event):
        if event.inaxes != self.ax or event.xdata is None or event.ydata is None:
            return
        cell = self.cell_at(event.xdata, event.ydata)
        if cell is None:
            if not self._date_text.get_text():
                return
            self._date_line.set_data([], [])
            self._date_text.set_text("")
        else:
            self._date_line.set_data([cell["cx"], cell["cx"]], [cell["cy"], 0])
            self._date_text.set_text(short_date_str(cell["dt"]))
            self._date_text.set_position((cell["cx"] - self.em_size / 2, cell["cy"] - self.cell_radius - self.em_size))
        self.ax.figure.canvas.draw_idle()
