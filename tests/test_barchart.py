"""Tests for the bar chart."""

from datetime import date
import logging

import matplotlib.pyplot as plt
import pytest

from chart_utils.barchart import BarChart, _fmt_tick, bar_dataset

pytestmark = pytest.mark.unit


def _data():
    return [
        {"date": date(2020, 3, 1), "y": 300, "txt": "c"},
        {"date": date(2020, 1, 1), "y": 100, "txt": "a"},
        {"date": date(2020, 2, 1), "y": 200, "txt": "b"},
    ]


def test_bar_dataset_sorts_and_sums() -> None:
    """Rows are ordered by date with a running total."""

    dataset = bar_dataset(_data())
    assert list(dataset["txt"]) == ["a", "b", "c"]
    assert list(dataset["y_cum"]) == [100, 300, 600]


def test_bar_dataset_does_not_touch_input() -> None:
    """The caller's list keeps its order."""

    data = _data()
    bar_dataset(data)
    assert [d["txt"] for d in data] == ["c", "a", "b"]


def test_fmt_tick_hides_baseline() -> None:
    """The first y tick is left blank."""

    assert _fmt_tick(0, 0) == ""
    assert _fmt_tick(25000, 1) == "25,000"


@pytest.mark.parametrize("show_running_total, y_max", [(True, 600), (False, 300)])
def test_make_chart_y_limit(show_running_total: bool, y_max: float) -> None:
    """The y range leaves headroom above the running total or the tallest bar."""

    _, ax = plt.subplots()
    chart = BarChart(ax, {"title": "EM", "show_running_total": show_running_total})
    dataset = chart.make_chart(_data())

    assert len(dataset) == 3
    assert ax.get_ylim()[1] == pytest.approx(1.1 * y_max)
    assert len(chart._bars) == 3
    assert ax.get_title() == "EM"


def test_bar_width_spans_configured_days() -> None:
    """Bars are as wide as the configured number of days."""

    _, ax = plt.subplots()
    chart = BarChart(ax, {"bar_days": 10})
    chart.make_chart(_data())

    expected = chart.x_scale(date(2020, 1, 11)) - chart.x_scale(date(2020, 1, 1))
    assert chart._bars[0].get_width() == pytest.approx(expected)


def test_make_chart_without_data_warns(caplog: pytest.LogCaptureFixture) -> None:
    """An empty dataset logs a warning and draws nothing."""

    _, ax = plt.subplots()
    chart = BarChart(ax)
    with caplog.at_level(logging.WARNING):
        dataset = chart.make_chart([])
    assert dataset.empty
    assert "No data" in caplog.text
