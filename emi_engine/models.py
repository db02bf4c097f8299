import math
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Union

from .errors import InvalidInputError


class LoanType(str, Enum):
    FIXED = "fixed"
    FLOATING = "floating"
    HYBRID = "hybrid"


def _check_number(name, value):
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not math.isfinite(value):
        raise InvalidInputError(f"{name} must be a finite number, got {value!r}")


def _check_months(name, value, minimum=None):
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidInputError(f"{name} must be an integer number of months, got {value!r}")
    if minimum is not None and value < minimum:
        raise InvalidInputError(f"{name} must be >= {minimum}, got {value}")


def _check_loan(loan):
    _check_number("principal", loan.principal)
    _check_number("annual_rate", loan.annual_rate)
    _check_months("tenure_months", loan.tenure_months, 1)
    if loan.principal <= 0:
        raise InvalidInputError(f"principal must be > 0, got {loan.principal}")
    if loan.annual_rate < 0:
        raise InvalidInputError(f"annual_rate must be >= 0, got {loan.annual_rate}")


def _check_rate_rule(loan):
    _check_number("rate_increase_percent", loan.rate_increase_percent)
    # zero or negative frequency means no rate changes
    _check_months("rate_change_frequency_months", loan.rate_change_frequency_months)


@dataclass(frozen=True)
class RateChange:
    from_month: int
    annual_rate: float  # annual %, effective from from_month


@dataclass(frozen=True)
class Prepayment:
    month: int
    amount: float

    def __post_init__(self):
        _check_months("month", self.month, 1)
        _check_number("amount", self.amount)
        if self.amount <= 0:
            raise InvalidInputError(f"prepayment amount must be > 0, got {self.amount}")


@dataclass(frozen=True)
class FixedLoan:
    principal: float
    annual_rate: float  # annual %
    tenure_months: int

    loan_type: ClassVar[LoanType] = LoanType.FIXED

    def __post_init__(self):
        _check_loan(self)


@dataclass(frozen=True)
class FloatingLoan:
    principal: float
    annual_rate: float  # annual %, until the first change
    tenure_months: int
    rate_increase_percent: float = 0.0
    rate_change_frequency_months: int = 0

    loan_type: ClassVar[LoanType] = LoanType.FLOATING

    def __post_init__(self):
        _check_loan(self)
        _check_rate_rule(self)


@dataclass(frozen=True)
class HybridLoan:
    principal: float
    annual_rate: float  # annual %, fixed period
    tenure_months: int
    floating_rate: float
    fixed_period_months: int
    rate_increase_percent: float = 0.0
    rate_change_frequency_months: int = 0

    loan_type: ClassVar[LoanType] = LoanType.HYBRID

    def __post_init__(self):
        _check_loan(self)
        _check_rate_rule(self)
        _check_number("floating_rate", self.floating_rate)
        _check_months("fixed_period_months", self.fixed_period_months, 1)
        if self.floating_rate < 0:
            raise InvalidInputError(f"floating_rate must be >= 0, got {self.floating_rate}")
        if self.fixed_period_months >= self.tenure_months:
            raise InvalidInputError(
                f"fixed_period_months ({self.fixed_period_months}) must be shorter "
                f"than tenure_months ({self.tenure_months})"
            )

    @property
    def transition_month(self) -> int:
        return self.fixed_period_months + 1


LoanTerms = Union[FixedLoan, FloatingLoan, HybridLoan]


@dataclass(frozen=True)
class AmortizationRow:
    month: int
    opening_balance: float
    installment: float
    principal: float
    interest: float
    closing_balance: float
    annual_rate: float
    prepayment: float = 0.0

    @property
    def year(self) -> int:
        return (self.month - 1) // 12 + 1


@dataclass(frozen=True)
class AmortizationSchedule:
    rows: tuple[AmortizationRow, ...]
    rate_changes: tuple[RateChange, ...] = ()
    transition_month: int | None = None
    places: int = 0

    def _total(self, value):
        return round(value, self.places)

    @property
    def total_principal_paid(self) -> float:
        return self._total(sum(r.principal + r.prepayment for r in self.rows))

    @property
    def total_interest_paid(self) -> float:
        return self._total(sum(r.interest for r in self.rows))

    @property
    def total_paid(self) -> float:
        return self._total(self.total_principal_paid + self.total_interest_paid)

    @property
    def payoff_month(self) -> int:
        return self.rows[-1].month if self.rows else 0

    @property
    def installment(self) -> float:
        return self.rows[0].installment if self.rows else 0.0
