#!/usr/bin/env python
# coding: utf-8
"""
Synthetic projects, proformas and cash flows for the demo charts.

Every generator accepts an optional random.Random so runs can be repeated.
"""

from datetime import date, datetime, timedelta
import random

from chart_utils.scales import add_days

RES_TYPES = ["Townhouse", "Loft", "Flat", "Attached Townhouse"]
CITY_PREFIXES = ["Indigo", "Blue", "Green", "Yellow", "Orange", "Apple", "Peach"]
CITY_SUFFIXES = ["burg", "ville", "town"]


def _rng(rng: random.Random | None) -> random.Random:
    return rng if rng is not None else random.Random()


def rand_int(a: int, b: int, rng: random.Random | None = None) -> int:
    """Random integer between a and b inclusive, in either argument order."""
    x1, x2 = min(a, b), max(a, b)
    return _rng(rng).randint(x1, x2)


def gen_city(rng: random.Random | None = None) -> str:
    rng = _rng(rng)
    return rng.choice(CITY_PREFIXES) + rng.choice(CITY_SUFFIXES)


def gen_address(rng: random.Random | None = None) -> str:
    rng = _rng(rng)
    suffixes = ["th"] * 10
    suffixes[1], suffixes[2], suffixes[3] = "st", "nd", "rd"

    house_num = rand_int(1, 2, rng) * 900
    street = rand_int(20, 120, rng)
    return f"{house_num} {street}{suffixes[street % 10]} Avenue, {gen_city(rng)}"


class Proforma:
    def __init__(self, name: str, rank: int, acq_cash: float, addl_cash: float,
                 rng: random.Random | None = None):
        self.name = name
        self.rank = rank
        self.desc = self.get_desc(_rng(rng))
        self.acq_cash = acq_cash
        self.addl_cash = addl_cash

    @staticmethod
    def get_desc(rng: random.Random) -> str:
        res_type = rng.choice(RES_TYPES)
        num_res = rand_int(4, 10, rng)
        return f"{num_res} {res_type}{'s' if num_res > 1 else ''}"

    @property
    def total_cash(self) -> float:
        return self.acq_cash + self.addl_cash


class Proj:
    def __init__(self, dt: date, desc: str):
        self.dt = dt
        self.desc = desc
        self.proformas = []

    def add_proforma(self, name: str, rank: int, acq_cash: float, addl_cash: float,
                     rng: random.Random | None = None) -> Proforma:
        proforma = Proforma(name, rank, acq_cash, addl_cash, rng)
        self.proformas.append(proforma)
        return proforma


def get_projects_cf_array(rng: random.Random | None = None, nproj: int = 5) -> list[Proj]:
    """Projects with 0-6 ranked proformas each, dated between Nov 2020 and Dec 2022."""
    rng = _rng(rng)
    min_proformas, max_proformas = 0, 6
    cash_min, cash_max = 20000, 100000
    dt_min = datetime(2020, 11, 1)
    dt_span = (datetime(2022, 12, 1) - dt_min).total_seconds()

    projects = []
    for _ in range(nproj):
        desc = gen_address(rng)
        dt = (dt_min + timedelta(seconds=round(dt_span * rng.random()))).date()
        proj = Proj(dt, desc)

        nproformas = rand_int(min_proformas, max_proformas, rng)
        for iproforma in range(nproformas):
            acq_cash = rand_int(cash_min, cash_max, rng)
            addl_cash = rand_int(cash_min, cash_max, rng)
            proj.add_proforma(f"proforma{iproforma}", iproforma + 1, acq_cash, addl_cash, rng)
        projects.append(proj)

    return projects


def get_projects_em_array(rng: random.Random | None = None, num_proj: int = 10) -> list[dict]:
    """
    Feasibility-expiry / closing date pairs with earnest money payments.

    The payments are spread evenly between the two dates, the last one on the
    closing date, and together make up a total of 25k-100k.

    Returns:
        List of dicts with keys 'dt1', 'dt2', 'txt' and 'cf' (list of {'dt', 'amt'})
    """
    rng = _rng(rng)
    projects = []

    for _ in range(num_proj):
        fe_date = datetime(rand_int(2020, 2022, rng), rand_int(1, 12, rng), rand_int(1, 28, rng))
        mths_to_close = rand_int(6, 12, rng)
        cl_date = add_days(fe_date, mths_to_close * 30)

        em_total_amt = 1000 * rand_int(25, 100, rng)
        num_em = rand_int(0, 4, rng)
        em_amt = em_total_amt / (num_em + 1)
        em_interval = (cl_date - fe_date) / (num_em + 1)

        cash_flows = [{"dt": fe_date + (i + 1) * em_interval, "amt": em_amt} for i in range(num_em)]
        cash_flows.append({"dt": cl_date, "amt": em_amt})

        projects.append({"dt1": fe_date, "dt2": cl_date, "txt": gen_address(rng), "cf": cash_flows})

    return projects


def get_bar_data(num_points: int, rng: random.Random | None = None) -> list[dict]:
    """Monthly points from January 2020 with random values below 100k."""
    rng = _rng(rng)
    dataset = []
    for i in range(num_points):
        dt = date(2020 + i // 12, i % 12 + 1, 1)
        dataset.append({"date": dt, "y": rng.random() * 100000, "txt": gen_address(rng)})
    return dataset
