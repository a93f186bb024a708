"""Pytest configuration shared by the chart tests."""

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import pytest


@pytest.fixture(autouse=True)
def close_figures():
    """Close every figure a test opened."""

    yield
    plt.close("all")
