"""Tests for the schedule chart layout and drawing."""

from datetime import date, datetime
import logging

import matplotlib.pyplot as plt
import pytest

from chart_utils.schedule import ScheduleChart, layout_schedule

pytestmark = pytest.mark.unit

BASE = date(2021, 1, 1)


def _days(d) -> float:
    return float((d - BASE).days)


def _projects():
    return [
        {"dt1": date(2022, 6, 1), "dt2": date(2022, 9, 1), "txt": "empty", "cf": []},
        {"dt1": date(2021, 3, 1), "dt2": date(2021, 9, 1), "txt": "first", "cf": [
            {"dt": date(2021, 9, 1), "amt": 20000},
            {"dt": date(2021, 5, 1), "amt": 10000},
        ]},
        {"dt1": date(2021, 5, 1), "dt2": date(2021, 12, 1), "txt": "second", "cf": [
            {"dt": date(2021, 12, 1), "amt": 30000},
        ]},
    ]


def _chart(**config):
    fig = plt.figure()
    ax = fig.add_axes([0.05, 0.2, 0.9, 0.7])
    chart = ScheduleChart(ax, {"now": BASE, **config})
    chart.attach_controls(fig.add_axes([0.2, 0.05, 0.4, 0.03]), fig.add_axes([0.7, 0.02, 0.2, 0.08]))
    return chart


def test_layout_schedule_tracks_and_order() -> None:
    """Bars are sorted by start, renumbered and stacked where they overlap."""

    plot_data = layout_schedule(_projects(), _days, lambda amt: amt / 1000,
                                x_min_gap=10, track_gap=4, track_height=20)

    assert [p["txt"] for p in plot_data] == ["first", "second", "empty"]
    assert [p["idx"] for p in plot_data] == [0, 1, 2]
    assert [p["ybase"] for p in plot_data] == [24, 48, 24]
    assert plot_data[0]["dt_str1"] == "3.1.2021"
    assert plot_data[0]["dt_str2"] == "9.1.2021"


def test_layout_schedule_cash_flows() -> None:
    """Cash flows are scaled, sorted by x and keep their raw values."""

    plot_data = layout_schedule(_projects(), _days, lambda amt: amt / 1000, 10, 4, 20)

    first = plot_data[0]
    assert [c["raw_dt"] for c in first["cf"]] == [date(2021, 5, 1), date(2021, 9, 1)]
    assert [c["h"] for c in first["cf"]] == [10, 20]
    assert first["cf"][0]["x"] == _days(date(2021, 5, 1))
    assert plot_data[2]["cf"] == []


def test_layout_schedule_empty() -> None:
    """No projects give no plot data."""

    assert layout_schedule([], _days, lambda amt: amt, 10, 4, 20) == []


def test_config_defaults_merge() -> None:
    """Chart and base defaults are merged under the caller's config."""

    chart = ScheduleChart(config={"width": 800})
    assert chart.config["chart_title"] == "Cash flow schedule"
    assert chart.config["em_size"] == 16
    assert chart.width == 800 - 2 * 64
    assert chart.track_height == 160


def test_make_chart_skips_projects_without_cash_flows() -> None:
    """Only projects with cash flows are drawn until show empty is set."""

    chart = _chart()
    plot_data = chart.make_chart(_projects())

    assert [p["txt"] for p in plot_data] == ["first", "second"]
    assert [p["ybase"] for p in plot_data] == [224, 448]
    assert chart.chart_height == 448 + 160 + 64
    assert chart.ax.get_ylim() == (chart.chart_height, 0)
    assert chart.saved_data == _projects()


def test_show_empty_checkbox_redraws_with_saved_data() -> None:
    """Ticking show empty brings the empty project back onto a free track."""

    chart = _chart()
    chart.make_chart(_projects())
    chart.view_ctls.check_buttons.set_active(0)

    assert chart.show_empty is True
    assert [p["txt"] for p in chart.plot_data] == ["first", "second", "empty"]
    assert chart.plot_data[2]["ybase"] == 224


def test_slider_totals_earnest_money() -> None:
    """The slider window totals the cash flows dated inside it."""

    chart = _chart()
    chart.make_chart(_projects())
    assert chart.slider_window.slider_max == 12

    chart.slider_window.slider.set_val(12)

    text = chart.slider_window.display_text()
    assert text.splitlines() == ["12 mths", "range: 1/1/2021 to 1/1/2022", "Earnest money: $60,000"]
    assert chart._window_text.get_text() == text
    assert chart._window_text.get_visible()


def test_bar_at_finds_project() -> None:
    """Points on a bar resolve to its plot dict."""

    chart = _chart()
    plot_data = chart.make_chart(_projects())
    first = plot_data[0]
    assert chart.bar_at((first["x1"] + first["x2"]) / 2, first["ybase"] + 2) is first
    assert chart.bar_at(first["x1"], first["ybase"] + 100) is None


def test_make_chart_without_projects_warns(caplog: pytest.LogCaptureFixture) -> None:
    """Nothing drawable logs a warning and returns no plot data."""

    chart = _chart()
    with caplog.at_level(logging.WARNING):
        assert chart.make_chart([{"dt1": datetime(2021, 1, 1), "dt2": datetime(2021, 6, 1),
                                  "txt": "x", "cf": []}]) == []
    assert "No projects" in caplog.text
