import argparse
import logging
import sys
from dataclasses import replace

from emi_engine.config import configure_logging, get_settings
from emi_engine.errors import LoanEngineError
from emi_engine.models import FixedLoan, FloatingLoan, HybridLoan, Prepayment
from emi_engine.scenarios import compare_rate_scenarios
from emi_engine.schedule import build_schedule
from emi_engine.summary import (
    chart_markers,
    export_csv,
    schedule_to_frame,
    yearly_summary,
)

logger = logging.getLogger("emi_engine.cli")


def _parse_prepayment(val: str) -> Prepayment:
    try:
        month, amount = val.split(":", 1)
        return Prepayment(int(month), float(amount))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid prepayment {val!r} (expected MONTH:AMOUNT)") from exc


def _build_terms(args):
    common = dict(principal=args.principal, annual_rate=args.rate, tenure_months=args.tenure_months)

    if args.type == "fixed":
        return FixedLoan(**common)

    rate_rule = dict(
        rate_increase_percent=args.increase,
        rate_change_frequency_months=args.frequency,
    )
    if args.type == "floating":
        return FloatingLoan(**common, **rate_rule)

    return HybridLoan(
        **common,
        floating_rate=args.floating_rate,
        fixed_period_months=args.fixed_months,
        **rate_rule,
    )


def _print_summary(schedule):
    print(f"EMI: {schedule.installment:,.2f}")
    print(f"Payoff month: {schedule.payoff_month}")
    print(f"Total principal: {schedule.total_principal_paid:,.2f}")
    print(f"Total interest: {schedule.total_interest_paid:,.2f}")
    print(f"Total paid: {schedule.total_paid:,.2f}")
    for month, label in chart_markers(schedule):
        print(f"  month {month}: {label}")


def main(argv=None) -> int:
    p = argparse.ArgumentParser(description="Loan amortization schedule")
    p.add_argument("--principal", type=float, required=True)
    p.add_argument("--rate", type=float, required=True, help="Annual rate in percent (fixed-period rate for hybrid)")
    p.add_argument("--tenure-months", type=int, required=True)
    p.add_argument("--type", choices=("fixed", "floating", "hybrid"), default="fixed")
    p.add_argument("--increase", type=float, default=0.0, help="Rate change per step, percent")
    p.add_argument("--frequency", type=int, default=0, help="Months between rate changes")
    p.add_argument("--floating-rate", type=float, default=None)
    p.add_argument("--fixed-months", type=int, default=None)
    p.add_argument("--prepay", type=_parse_prepayment, action="append", default=[], help="MONTH:AMOUNT, repeatable")
    p.add_argument("--yearly", action="store_true", help="Print the yearly summary instead of every month")
    p.add_argument("--scenarios", action="store_true", help="Compare optimistic/realistic/pessimistic rate paths")
    p.add_argument("--csv", type=str, default=None, help="Export the printed table to this CSV path")
    p.add_argument("--places", type=int, default=None, help="Currency decimal places")
    p.add_argument("--log-level", type=str, default=None)

    args = p.parse_args(argv)
    if args.type == "hybrid" and (args.floating_rate is None or args.fixed_months is None):
        p.error("hybrid loans need --floating-rate and --fixed-months")
    if args.places is not None and args.places < 0:
        p.error("--places must be >= 0")

    try:
        configure_logging(args.log_level)
        settings = get_settings()
        if args.places is not None:
            settings = replace(settings, currency_places=args.places)

        terms = _build_terms(args)
        schedule = build_schedule(terms, args.prepay, settings=settings)
    except LoanEngineError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    _print_summary(schedule)

    table = yearly_summary(schedule) if args.yearly else schedule_to_frame(schedule)
    print(table.to_string(index=False))

    if args.scenarios:
        try:
            results = compare_rate_scenarios(terms, settings=settings)
        except LoanEngineError as exc:
            print(f"error: {exc}", file=sys.stderr)
            return 2
        for name, result in results.items():
            print(
                f"{name}: interest {result.total_interest:,.2f}, "
                f"average rate {result.average_rate:.2f}%"
            )

    if args.csv:
        out = export_csv(schedule, args.csv, yearly=args.yearly)
        logger.info("wrote %s", out)
        print(f"csv: {out}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
