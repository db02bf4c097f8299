from pathlib import Path

import pandas as pd

from .errors import InvalidInputError
from .models import AmortizationRow, AmortizationSchedule

MONTHLY_COLUMNS = [
    "Month",
    "Year",
    "Rate (%)",
    "Opening Balance",
    "EMI",
    "Interest",
    "Principal Paid",
    "Prepayment",
    "Outstanding",
    "Cumulative Interest",
    "Cumulative Principal",
]


def schedule_to_frame(schedule: AmortizationSchedule) -> pd.DataFrame:
    df = pd.DataFrame(
        [
            {
                "Month": r.month,
                "Year": r.year,
                "Rate (%)": r.annual_rate,
                "Opening Balance": r.opening_balance,
                "EMI": r.installment,
                "Interest": r.interest,
                "Principal Paid": r.principal,
                "Prepayment": r.prepayment,
                "Outstanding": r.closing_balance,
            }
            for r in schedule.rows
        ],
        columns=MONTHLY_COLUMNS[:-2],
    )

    df["Cumulative Interest"] = df["Interest"].cumsum()
    df["Cumulative Principal"] = (df["Principal Paid"] + df["Prepayment"]).cumsum()
    return df


def yearly_summary(schedule: AmortizationSchedule) -> pd.DataFrame:
    """
    One row per loan year: opening balance of its first month, closing
    balance of its last month, and the sums paid in between.
    """
    df = schedule_to_frame(schedule)
    return (
        df.groupby("Year", as_index=False)
        .agg(
            **{
                "Opening Balance": ("Opening Balance", "first"),
                "Total EMI": ("EMI", "sum"),
                "Principal Paid": ("Principal Paid", "sum"),
                "Interest": ("Interest", "sum"),
                "Prepayment": ("Prepayment", "sum"),
                "Outstanding": ("Outstanding", "last"),
            }
        )
    )


def crossover_month(schedule: AmortizationSchedule) -> int | None:
    """First month where the principal component exceeds the interest."""
    return next((r.month for r in schedule.rows if r.principal > r.interest), None)


def average_rate(schedule: AmortizationSchedule) -> float:
    """Annual rate weighted by the balance outstanding at each rate."""
    weight = sum(r.opening_balance for r in schedule.rows)
    if weight <= 0:
        return 0.0
    weighted = sum(r.annual_rate * r.opening_balance for r in schedule.rows)
    return round(weighted / weight, 2)


def hybrid_installment_difference(schedule: AmortizationSchedule) -> dict:
    """Fixed-period EMI against the first floating EMI of a hybrid schedule."""
    month = schedule.transition_month
    if month is None:
        raise InvalidInputError("schedule has no fixed to floating transition")
    if month > len(schedule.rows):
        raise InvalidInputError(f"loan was paid off before the transition at month {month}")

    fixed_emi = schedule.rows[0].installment
    floating_emi = schedule.rows[month - 1].installment
    difference = floating_emi - fixed_emi

    return {
        "fixed_emi": fixed_emi,
        "floating_emi": floating_emi,
        "difference": round(difference, 2),
        "percentage_change": round(difference / fixed_emi * 100, 2),
    }


def installment_steps(schedule: AmortizationSchedule) -> list[tuple[int, float]]:
    # the final row carries the reconciliation amount, not a repriced installment
    steps: list[tuple[int, float]] = []
    for r in schedule.rows[:-1] or schedule.rows:
        if not steps or steps[-1][1] != r.installment:
            steps.append((r.month, r.installment))
    return steps


def compare_schedules(baseline: AmortizationSchedule, scenario: AmortizationSchedule) -> dict:
    baseline_interest = baseline.total_interest_paid
    interest_saved = baseline_interest - scenario.total_interest_paid

    baseline_months = len(baseline.rows)
    scenario_months = len(scenario.rows)

    return {
        "interest_saved": round(interest_saved, 2),
        "total_saved": round(baseline.total_paid - scenario.total_paid, 2),
        "percentage_saved": round(interest_saved / baseline_interest * 100, 2) if baseline_interest else 0.0,
        "months_saved": baseline_months - scenario_months,
        "baseline_months": baseline_months,
        "scenario_months": scenario_months,
    }


def chart_points(schedule: AmortizationSchedule, every: int = 12) -> list[AmortizationRow]:
    """Down-sample to one row per `every` months, always keeping the final row."""
    if every < 1:
        raise ValueError("every must be >= 1")
    points = [r for r in schedule.rows if r.month % every == 0]
    if schedule.rows and (not points or points[-1] is not schedule.rows[-1]):
        points.append(schedule.rows[-1])
    return points


def chart_markers(schedule: AmortizationSchedule) -> list[tuple[int, str]]:
    markers = []
    for rc in schedule.rate_changes:
        if rc.from_month == schedule.transition_month:
            markers.append((rc.from_month, f"Fixed to floating at {rc.annual_rate:.2f}%"))
        else:
            markers.append((rc.from_month, f"Rate change to {rc.annual_rate:.2f}%"))
    return markers


def export_csv(schedule: AmortizationSchedule, path, yearly: bool = False) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    df = yearly_summary(schedule) if yearly else schedule_to_frame(schedule)
    df.to_csv(path, index=False)
    return path
