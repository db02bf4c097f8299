# tests/utils.py
from __future__ import annotations

from emi_engine.models import FixedLoan, FloatingLoan, HybridLoan

# 10 lakh over 20 years, the reference loan used across the suite
PRINCIPAL = 1_000_000
RATE = 8.5
TENURE = 240


def make_fixed_loan(**overrides) -> FixedLoan:
    params = dict(principal=PRINCIPAL, annual_rate=RATE, tenure_months=TENURE)
    params.update(overrides)
    return FixedLoan(**params)


def make_floating_loan(**overrides) -> FloatingLoan:
    params = dict(
        principal=PRINCIPAL,
        annual_rate=RATE,
        tenure_months=TENURE,
        rate_increase_percent=0.5,
        rate_change_frequency_months=24,
    )
    params.update(overrides)
    return FloatingLoan(**params)


def make_hybrid_loan(**overrides) -> HybridLoan:
    """8.0% fixed for 5 years, then floating from 8.5% (+0.5% every 24 months)."""
    params = dict(
        principal=PRINCIPAL,
        annual_rate=8.0,
        tenure_months=TENURE,
        floating_rate=RATE,
        fixed_period_months=60,
        rate_increase_percent=0.5,
        rate_change_frequency_months=24,
    )
    params.update(overrides)
    return HybridLoan(**params)
