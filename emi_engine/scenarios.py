from dataclasses import dataclass, replace

from .config import Settings, get_settings
from .errors import InvalidInputError
from .models import AmortizationSchedule, FloatingLoan, HybridLoan
from .schedule import build_schedule
from .summary import average_rate


@dataclass(frozen=True)
class ScenarioResult:
    schedule: AmortizationSchedule
    total_interest: float
    average_rate: float


def compare_rate_scenarios(
    terms: FloatingLoan | HybridLoan,
    increase_percent: float | None = None,
    decrease_percent: float | None = None,
    *,
    settings: Settings | None = None,
) -> dict[str, ScenarioResult]:
    """
    Optimistic / realistic / pessimistic runs of the same floating or hybrid
    loan. Only the per-change step differs: -decrease, +increase and
    +2 * increase. The change frequency is taken from `terms`.
    """
    if not isinstance(terms, (FloatingLoan, HybridLoan)):
        raise InvalidInputError("Rate scenarios need a floating or hybrid loan")

    settings = settings or get_settings()
    if increase_percent is None:
        increase_percent = settings.scenario_increase_percent
    if decrease_percent is None:
        decrease_percent = settings.scenario_decrease_percent

    steps = {
        "optimistic": -abs(decrease_percent),
        "realistic": increase_percent,
        "pessimistic": increase_percent * 2,
    }

    results = {}
    for name, step in steps.items():
        schedule = build_schedule(replace(terms, rate_increase_percent=step), settings=settings)
        results[name] = ScenarioResult(
            schedule=schedule,
            total_interest=schedule.total_interest_paid,
            average_rate=average_rate(schedule),
        )
    return results
