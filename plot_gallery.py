#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
Standalone script drawing the schedule chart, the arc diagram and the bar chart
from freshly generated demo data.
"""
import argparse
import logging
import random
import matplotlib.pyplot as plt

from chart_utils.arc_diagram import ArcScheduleChart
from chart_utils.barchart import BarChart
from chart_utils.demo_data import get_bar_data, get_projects_cf_array, get_projects_em_array
from chart_utils.schedule import ScheduleChart


def add_chart_figure(chart_cls, config, with_controls=True):
    fig = plt.figure(figsize=(config.get("width", 1200) / 100, 9))
    ax = fig.add_axes([0.05, 0.18, 0.9, 0.72])
    chart = chart_cls(ax, config)
    if with_controls:
        slider_ax = fig.add_axes([0.2, 0.06, 0.45, 0.03])
        check_ax = fig.add_axes([0.75, 0.03, 0.15, 0.08])
        chart.attach_controls(slider_ax, check_ax)
    return chart


parser = argparse.ArgumentParser(description="Draw the demo charts")
parser.add_argument("--seed", type=int, default=None, help="Seed for the demo data")
parser.add_argument("--save", type=str, default=None, help="Save the figures with this file name prefix")
parser.add_argument("--debug", action="store_true", help="Log the track layout")
args = parser.parse_args()

logging.basicConfig(level=logging.DEBUG if args.debug else logging.INFO)
rng = random.Random(args.seed)

schedule_chart = add_chart_figure(ScheduleChart, {
    "chart_title": "Project schedule and earnest money",
    "cf_legend": "earnest money $k",
})
plot_data = schedule_chart.make_chart(get_projects_em_array(rng))
tracks = len({p["ybase"] for p in plot_data})
print(f"Schedule chart: {len(plot_data)} projects on {tracks} tracks")

arc_diagram = add_chart_figure(ArcScheduleChart, {"chart_title": "Proforma cash flows"})
cells = arc_diagram.make_chart(get_projects_cf_array(rng))
print(f"Arc diagram: {len(cells)} projects on {len({c['ybase'] for c in cells})} tracks")

bar_chart = add_chart_figure(BarChart, {"title": "Earnest money", "show_running_total": True},
                             with_controls=False)
dataset = bar_chart.make_chart(get_bar_data(rng.randint(5, 20), rng))
print(f"Bar chart: {len(dataset)} bars, running total {dataset['y_cum'].iloc[-1]:,.0f}")

if args.save:
    for name, chart in (("schedule", schedule_chart), ("arc", arc_diagram), ("bar", bar_chart)):
        filename = f"{args.save}_{name}.png"
        chart.ax.figure.savefig(filename, dpi=150, bbox_inches="tight")
        print(f"Saved {filename}")
else:
    print("Hover bars and cells for dates, click proforma ranks, drag the slider to total cash flows.")
    plt.show()
