import logging

from .models import FixedLoan, FloatingLoan, HybridLoan, RateChange

logger = logging.getLogger(__name__)

# generated rates are additive steps; this drops float noise like 8.799999
_RATE_DIGITS = 6


def generate_rate_changes(
    base_rate: float,
    increase_percent: float,
    frequency_months: int,
    horizon_months: int,
    start_month: int = 1,
) -> list[RateChange]:
    """
    Periodic rate changes: one every `frequency_months`, first at
    `start_month + frequency_months`, each `increase_percent` above the
    previous rate. Stops past `horizon_months`. A negative increase is
    allowed but the rate is clamped at zero, after which nothing more
    is generated.
    """
    changes: list[RateChange] = []
    if frequency_months <= 0 or increase_percent == 0:
        return changes

    step = 1
    month = start_month + frequency_months
    while month <= horizon_months:
        rate = round(base_rate + step * increase_percent, _RATE_DIGITS)
        if rate <= 0:
            if base_rate > 0:
                changes.append(RateChange(month, 0.0))
            break
        changes.append(RateChange(month, rate))
        step += 1
        month += frequency_months

    return changes


def floating_boundaries(loan: FloatingLoan) -> list[RateChange]:
    return generate_rate_changes(
        loan.annual_rate,
        loan.rate_increase_percent,
        loan.rate_change_frequency_months,
        loan.tenure_months,
    )


def hybrid_boundaries(loan: HybridLoan) -> list[RateChange]:
    """
    Fixed -> floating transition followed by the floating-side changes.

    The floating path is generated from loan month 1 on the floating rate and
    only the part after the fixed period is kept. A generated change that
    falls on the transition month replaces the base floating rate.
    """
    transition = loan.transition_month
    generated = [
        rc
        for rc in generate_rate_changes(
            loan.floating_rate,
            loan.rate_increase_percent,
            loan.rate_change_frequency_months,
            loan.tenure_months,
        )
        if rc.from_month > loan.fixed_period_months
    ]

    if generated and generated[0].from_month == transition:
        return generated
    return [RateChange(transition, loan.floating_rate)] + generated


def rate_boundaries(terms) -> list[RateChange]:
    """Rate changes after origination for any loan variant, ordered by month."""
    if isinstance(terms, HybridLoan):
        boundaries = hybrid_boundaries(terms)
    elif isinstance(terms, FloatingLoan):
        boundaries = floating_boundaries(terms)
    elif isinstance(terms, FixedLoan):
        boundaries = []
    else:
        raise TypeError(f"Unsupported loan terms: {type(terms).__name__}")

    logger.debug("%s loan: %d rate boundaries", terms.loan_type.value, len(boundaries))
    return boundaries
