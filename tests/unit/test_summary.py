# tests/unit/test_summary.py
import pandas as pd
import pytest

from emi_engine.config import Settings
from emi_engine.errors import InvalidInputError
from emi_engine.models import FixedLoan, Prepayment
from emi_engine.schedule import build_schedule
from emi_engine.summary import (
    MONTHLY_COLUMNS,
    average_rate,
    chart_markers,
    chart_points,
    compare_schedules,
    crossover_month,
    export_csv,
    hybrid_installment_difference,
    installment_steps,
    schedule_to_frame,
    yearly_summary,
)
from tests.utils import make_fixed_loan


def test_schedule_to_frame(fixed_schedule):
    df = schedule_to_frame(fixed_schedule)
    assert list(df.columns) == MONTHLY_COLUMNS
    assert len(df) == 240
    assert df["Principal Paid"].sum() == 1_000_000
    assert df["Cumulative Principal"].iloc[-1] == 1_000_000
    assert df["Cumulative Interest"].iloc[-1] == fixed_schedule.total_interest_paid
    assert df["Year"].iloc[12] == 2


def test_yearly_summary(fixed_schedule):
    yearly = yearly_summary(fixed_schedule)
    assert len(yearly) == 20
    assert yearly["Opening Balance"].iloc[0] == 1_000_000
    assert yearly["Outstanding"].iloc[-1] == 0
    assert yearly["Principal Paid"].sum() == 1_000_000
    assert yearly["Interest"].sum() == fixed_schedule.total_interest_paid
    # each year opens where the previous one closed
    assert (yearly["Opening Balance"].iloc[1:].values == yearly["Outstanding"].iloc[:-1].values).all()


def test_crossover_month(fixed_schedule):
    month = crossover_month(fixed_schedule)
    assert month is not None and 1 < month < 240
    rows = fixed_schedule.rows
    assert rows[month - 1].principal > rows[month - 1].interest
    assert rows[month - 2].principal <= rows[month - 2].interest


def test_crossover_month_from_start_at_zero_rate():
    schedule = build_schedule(FixedLoan(120_000, 0, 12), settings=Settings())
    assert crossover_month(schedule) == 1


def test_average_rate(fixed_schedule, floating_schedule):
    assert average_rate(fixed_schedule) == 8.5
    assert 8.5 < average_rate(floating_schedule) < 13.0


def test_installment_steps(fixed_schedule, floating_schedule):
    assert installment_steps(fixed_schedule) == [(1, fixed_schedule.installment)]
    months = [m for m, _ in installment_steps(floating_schedule)]
    assert months == [1] + list(range(25, 241, 24))


def test_compare_schedules_with_prepayment(fixed_schedule):
    prepaid = build_schedule(make_fixed_loan(), [Prepayment(24, 250_000)], settings=Settings())
    impact = compare_schedules(fixed_schedule, prepaid)
    assert impact["months_saved"] > 0
    assert impact["interest_saved"] > 0
    assert impact["total_saved"] == impact["interest_saved"]
    assert 0 < impact["percentage_saved"] < 100
    assert impact["baseline_months"] == 240


def test_compare_schedule_with_itself(fixed_schedule):
    impact = compare_schedules(fixed_schedule, fixed_schedule)
    assert impact["months_saved"] == 0
    assert impact["interest_saved"] == 0


def test_chart_points_one_per_year_plus_final(fixed_schedule):
    points = chart_points(fixed_schedule)
    assert [p.month for p in points] == list(range(12, 241, 12))

    short = build_schedule(FixedLoan(300_000, 9, 30), settings=Settings())
    assert [p.month for p in chart_points(short)] == [12, 24, 30]


def test_chart_markers(hybrid_schedule, fixed_schedule):
    markers = chart_markers(hybrid_schedule)
    assert markers[0] == (61, "Fixed to floating at 8.50%")
    assert markers[1] == (73, "Rate change to 10.00%")
    assert chart_markers(fixed_schedule) == []


def test_export_csv(fixed_schedule, tmp_path):
    out = export_csv(fixed_schedule, tmp_path / "out" / "monthly.csv")
    df = pd.read_csv(out)
    assert len(df) == 240
    assert list(df.columns) == MONTHLY_COLUMNS

    yearly = pd.read_csv(export_csv(fixed_schedule, tmp_path / "yearly.csv", yearly=True))
    assert len(yearly) == 20


def test_hybrid_installment_difference(hybrid_schedule):
    result = hybrid_installment_difference(hybrid_schedule)
    fixed_emi = hybrid_schedule.rows[0].installment
    floating_emi = hybrid_schedule.rows[60].installment

    assert result["fixed_emi"] == fixed_emi
    assert result["floating_emi"] == floating_emi
    assert result["difference"] == round(floating_emi - fixed_emi, 2)
    assert result["difference"] > 0
    assert result["percentage_change"] == round((floating_emi - fixed_emi) / fixed_emi * 100, 2)


def test_hybrid_installment_difference_needs_a_transition(fixed_schedule):
    with pytest.raises(InvalidInputError):
        hybrid_installment_difference(fixed_schedule)
