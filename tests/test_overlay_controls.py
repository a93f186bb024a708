"""Unit tests for the sliding window and the view controls."""

from datetime import date, datetime

import matplotlib.pyplot as plt
from matplotlib.patches import Rectangle
import pytest

from chart_utils.overlay_controls import SliderWindow, ViewControlsWindow, window_totals
from chart_utils.scales import TimeScale

pytestmark = pytest.mark.unit


def _series():
    return {
        "Earnest money": [
            {"raw_dt": date(2021, 1, 1), "raw_amt": 1000},
            {"raw_dt": date(2021, 2, 1), "raw_amt": 2000},
            {"raw_dt": date(2021, 3, 1), "raw_amt": 4000},
        ],
        "Other": [],
    }


def _window():
    window = SliderWindow()
    rect = Rectangle((0, 0), 0, 10)
    x_scale = TimeScale((date(2021, 1, 1), date(2022, 1, 1)), (0, 365))
    window.set_rect_sizer(rect, date(2021, 1, 1), x_scale, _series())
    return window, rect


def test_window_totals_include_both_ends() -> None:
    """Amounts dated on either edge of the window count."""

    totals = window_totals(_series(), date(2021, 1, 1), date(2021, 2, 1))
    assert totals == [
        {"val_type": "Earnest money", "val_total": 3000},
        {"val_type": "Other", "val_total": 0},
    ]


def test_window_totals_mixed_date_types() -> None:
    """Datetimes in the data compare against date window bounds."""

    data = {"em": [{"raw_dt": datetime(2021, 1, 31, 12), "raw_amt": 500}]}
    assert window_totals(data, date(2021, 1, 1), date(2021, 2, 1))[0]["val_total"] == 500
    assert window_totals(data, date(2021, 2, 1), date(2021, 3, 1))[0]["val_total"] == 0


def test_slider_window_resizes_rect_and_totals() -> None:
    """Moving to one month widens the rect and totals the covered amounts."""

    window, rect = _window()
    text = window.set_new_val(1)

    assert window.to_dt == date(2021, 2, 1)
    assert rect.get_width() == pytest.approx(31)
    assert text == "1 mth\nrange: 1/1/2021 to 2/1/2021\nEarnest money: $3,000\nOther: $0"


def test_slider_window_plural_months() -> None:
    """Longer windows say mths."""

    window, _ = _window()
    assert window.set_new_val(2.0).startswith("2 mths\n")
    assert "Earnest money: $7,000" in window.display_text()


def test_slider_window_zero_months_has_no_text() -> None:
    """An empty window shows nothing."""

    window, rect = _window()
    window.set_new_val(3)
    assert window.set_new_val(0) == ""
    assert rect.get_width() == 0


def test_slider_window_notifies_listeners() -> None:
    """Every refresh passes the summary text to the listeners."""

    window, _ = _window()
    seen = []
    window.on_change(seen.append)
    window.set_new_val(1)
    window.set_new_val(0)
    assert seen[0].startswith("1 mth\n")
    assert seen[1] == ""


def test_slider_window_reset() -> None:
    """Reset collapses the window back onto its start date."""

    window, rect = _window()
    window.set_new_val(5)
    window.reset_window()
    assert window.months_val == 0
    assert window.to_dt == window.from_dt
    assert rect.get_width() == 0
    assert window.display_text() == ""


def test_slider_window_without_sizer() -> None:
    """Before a rect is attached there is nothing to total."""

    window = SliderWindow()
    assert window.set_new_val(4) == ""
    assert window.total_amts == []


def test_slider_max_is_never_negative() -> None:
    """The slider range cannot go below zero."""

    window = SliderWindow()
    window.set_slider_max(-3)
    assert window.slider_max == 0
    window.set_slider_max(7)
    assert window.slider_max == 7


def test_view_controls_forward_toggle() -> None:
    """Toggling calls every registered handler with the new state."""

    calls = []
    controls = ViewControlsWindow()
    controls.set_chkbox_handler(calls.append)
    controls.toggle(True)
    controls.toggle(False)
    assert calls == [True, False]
    assert controls.checked is False


def test_view_controls_checkbox_click() -> None:
    """Activating the drawn checkbox reaches the handler."""

    _, ax = plt.subplots()
    calls = []
    controls = ViewControlsWindow(ax)
    controls.set_chkbox_handler(calls.append)
    controls.check_buttons.set_active(0)
    assert calls == [True]
