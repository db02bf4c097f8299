import math
from decimal import ROUND_HALF_UP, Decimal

from .errors import InvalidInputError, NegativeAmortizationFault


def monthly_rate(annual_rate):
    """Monthly rate in percent for an annual rate in percent."""
    return annual_rate / 12


def round_currency(value, places=0):
    """Round half-up to `places` decimals (0 = whole currency units)."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def compute_installment(balance, monthly_rate_percent, remaining_months, places=0):
    """
    Level installment (EMI) that amortizes `balance` over `remaining_months`.

    Formula (standard annuity):
        EMI = B * r * (1 + r)^n / ((1 + r)^n - 1)

    Where r = monthly_rate_percent / 100 and n = remaining_months. A zero rate
    degenerates to B / n. The result is rounded the same way schedule rows are.
    """
    if not balance > 0:
        raise InvalidInputError(f"balance must be > 0, got {balance}")
    if remaining_months < 1:
        raise InvalidInputError(f"remaining_months must be >= 1, got {remaining_months}")
    if monthly_rate_percent < 0:
        raise InvalidInputError(f"monthly rate must be >= 0, got {monthly_rate_percent}")

    emi = round_currency(_annuity(balance, monthly_rate_percent / 100, remaining_months), places)
    # tiny balances round to nothing; charge at least one minor unit
    return max(emi, float(Decimal(1).scaleb(-places)))


def _annuity(balance, r, n):
    if r == 0:
        return balance / n
    growth = (1 + r) ** n
    return balance * r * growth / (growth - 1)


def total_interest(principal, annual_rate, tenure_months, places=0):
    emi = compute_installment(principal, monthly_rate(annual_rate), tenure_months, places)
    return round_currency(emi * tenure_months - principal, places)


def loan_amount_for_installment(installment, annual_rate, tenure_months, places=0):
    """Largest principal that `installment` fully repays over `tenure_months`."""
    if not installment > 0:
        raise InvalidInputError(f"installment must be > 0, got {installment}")
    if tenure_months < 1 or annual_rate < 0:
        raise InvalidInputError("tenure_months must be >= 1 and annual_rate >= 0")

    r = monthly_rate(annual_rate) / 100
    if r == 0:
        return round_currency(installment * tenure_months, places)

    growth = (1 + r) ** tenure_months
    return round_currency(installment * (growth - 1) / (r * growth), places)


def months_to_repay(principal, installment, annual_rate):
    """Number of installments needed to clear `principal` at a fixed rate."""
    if not principal > 0 or not installment > 0:
        raise InvalidInputError("principal and installment must be > 0")
    if annual_rate < 0:
        raise InvalidInputError(f"annual_rate must be >= 0, got {annual_rate}")

    r = monthly_rate(annual_rate) / 100
    if r == 0:
        return math.ceil(principal / installment)

    first_interest = principal * r
    if installment <= first_interest:
        raise NegativeAmortizationFault(1, installment, first_interest)

    months = math.log(installment / (installment - first_interest)) / math.log(1 + r)
    # absorb float noise when the installment is an exact annuity
    return math.ceil(months - 1e-9)


def outstanding_after(principal, annual_rate, tenure_months, months_elapsed, places=0):
    """Closed-form balance left after `months_elapsed` level payments."""
    if months_elapsed <= 0:
        return round_currency(principal, places)
    if months_elapsed >= tenure_months:
        return 0.0

    r = monthly_rate(annual_rate) / 100
    if r == 0:
        return round_currency(principal - principal / tenure_months * months_elapsed, places)

    total = (1 + r) ** tenure_months
    elapsed = (1 + r) ** months_elapsed
    return round_currency(principal * (total - elapsed) / (total - 1), places)


def interest_percentage(principal, annual_rate, tenure_months):
    """Total interest as a percentage of the principal."""
    return round(total_interest(principal, annual_rate, tenure_months) / principal * 100, 2)


def effective_rate(principal, annual_rate, processing_fee, tenure_months):
    """
    Annual rate actually paid once a processing fee is deducted up front.

    The installment is charged on the full principal but the borrower only
    receives principal - processing_fee; the effective rate is the rate at
    which that net amount is repaid by the same installment. Found by
    bisection.
    """
    if not principal > 0 or tenure_months < 1 or annual_rate < 0:
        raise InvalidInputError("principal must be > 0, tenure_months >= 1 and annual_rate >= 0")
    if processing_fee < 0 or processing_fee >= principal:
        raise InvalidInputError(f"processing_fee must be in [0, principal), got {processing_fee}")

    target = _annuity(principal, monthly_rate(annual_rate) / 100, tenure_months)
    net = principal - processing_fee

    low, high = 0.0, max(2 * annual_rate, 50.0)
    while _annuity(net, monthly_rate(high) / 100, tenure_months) < target:
        high *= 2

    for _ in range(100):
        mid = (low + high) / 2
        if _annuity(net, monthly_rate(mid) / 100, tenure_months) < target:
            low = mid
        else:
            high = mid

    return round((low + high) / 2, 2)
