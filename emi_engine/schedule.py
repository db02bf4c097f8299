import logging

from .config import Settings, get_settings
from .errors import InvalidInputError, NegativeAmortizationFault
from .interest import compute_installment, monthly_rate, round_currency
from .models import (
    AmortizationRow,
    AmortizationSchedule,
    FixedLoan,
    FloatingLoan,
    HybridLoan,
    Prepayment,
)
from .rates import rate_boundaries

logger = logging.getLogger(__name__)


def _check_terms(terms, settings):
    if not isinstance(terms, (FixedLoan, FloatingLoan, HybridLoan)):
        raise InvalidInputError(f"Unsupported loan terms: {type(terms).__name__}")
    if terms.tenure_months > settings.max_tenure_months:
        raise InvalidInputError(
            f"tenure_months ({terms.tenure_months}) exceeds the maximum of "
            f"{settings.max_tenure_months}"
        )


def _prepayments_by_month(prepayments, tenure_months):
    """
    Returns dict[month] -> total prepayment for that month
    """
    by_month: dict[int, float] = {}
    for p in prepayments:
        if not isinstance(p, Prepayment):
            raise InvalidInputError(f"Expected Prepayment, got {type(p).__name__}")
        if p.month > tenure_months:
            raise InvalidInputError(
                f"prepayment month {p.month} is after the last month {tenure_months}"
            )
        by_month[p.month] = by_month.get(p.month, 0.0) + p.amount
    return by_month


def _reprice(balance, annual_rate, remaining_months, month, places):
    installment = compute_installment(balance, monthly_rate(annual_rate), remaining_months, places)
    interest = round_currency(balance * monthly_rate(annual_rate) / 100, places)

    if installment < interest:
        raise NegativeAmortizationFault(month, installment, interest)

    logger.debug(
        "month %d: rate %.4f%%, balance %.2f over %d months -> installment %.2f",
        month, annual_rate, balance, remaining_months, installment,
    )
    return installment


def build_schedule(
    terms,
    prepayments: tuple[Prepayment, ...] | list[Prepayment] = (),
    *,
    settings: Settings | None = None,
) -> AmortizationSchedule:
    """
    Month-by-month amortization for a fixed, floating or hybrid loan.

    Every loan type runs through the same loop; only the rate boundaries
    differ (none for fixed, periodic changes for floating, transition plus
    periodic changes for hybrid). At a boundary the installment is repriced
    over the remaining contractual months, so tenure never moves.

    The last scheduled month, or any month whose principal would overshoot
    the balance, pays exactly the opening balance. That row's installment is
    interest + principal, which absorbs the rounding drift of earlier rows.
    """
    settings = settings or get_settings()
    _check_terms(terms, settings)

    places = settings.currency_places
    tenure = terms.tenure_months
    boundaries = rate_boundaries(terms)
    rate_by_month = {rc.from_month: rc.annual_rate for rc in boundaries}
    extra = _prepayments_by_month(prepayments, tenure)

    balance = round_currency(terms.principal, places)
    if balance != terms.principal:
        raise InvalidInputError(
            f"principal {terms.principal} has more than {places} decimal places"
        )
    rate = terms.annual_rate
    installment = _reprice(balance, rate, tenure, 1, places)

    rows: list[AmortizationRow] = []

    for month in range(1, tenure + 1):
        if month in rate_by_month:
            rate = rate_by_month[month]
            installment = _reprice(balance, rate, tenure - (month - 1), month, places)

        interest = round_currency(balance * monthly_rate(rate) / 100, places)
        principal_paid = round_currency(installment - interest, places)
        paid = installment

        if month == tenure or principal_paid >= balance:
            principal_paid = balance
            paid = round_currency(interest + principal_paid, places)

        prepay = min(extra.get(month, 0.0), round_currency(balance - principal_paid, places))
        closing = max(round_currency(balance - principal_paid - prepay, places), 0.0)

        rows.append(
            AmortizationRow(
                month=month,
                opening_balance=balance,
                installment=paid,
                principal=principal_paid,
                interest=interest,
                closing_balance=closing,
                annual_rate=rate,
                prepayment=prepay,
            )
        )

        balance = closing
        if balance <= 0:
            break

    logger.debug(
        "%s loan of %.2f paid off in %d of %d months",
        terms.loan_type.value, terms.principal, len(rows), tenure,
    )

    return AmortizationSchedule(
        rows=tuple(rows),
        rate_changes=tuple(rc for rc in boundaries if rc.from_month <= len(rows)),
        transition_month=terms.transition_month if isinstance(terms, HybridLoan) else None,
        places=places,
    )
