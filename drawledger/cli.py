"""Command line entry point for DrawLedger.

Examples:
    drawledger payoff --terms loan.json --draws draws.csv --date 2024-06-30
    drawledger ledger --terms loan.json --draws draws.csv --as-of 2024-06-30
    drawledger schedule --terms loan.json --draws draws.csv --months 18
    drawledger export --terms loan.json --draws draws.csv --output payoff.xlsx
"""
import argparse
import json
import logging
import sys

import pandas as pd

from drawledger.config import DEFAULT_SCHEDULE_HORIZON_MONTHS, LOG_LEVELS
from drawledger.engine import DrawLedgerEngine
from drawledger.exceptions import DrawLedgerError
from drawledger.logging_config import configure_logging
from drawledger.reports import PayoffReportGenerator, ledger_to_dataframe
from drawledger.util import format_money, parse_date

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INVALID_INPUT = 2


def load_terms(path):
    with open(path, encoding="utf-8") as fh:
        data = json.load(fh)
    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object of loan terms")
    return data


def load_draw_records(path):
    df = pd.read_csv(path)
    if 'amount' not in df.columns:
        raise ValueError(f"{path}: missing 'amount' column")
    return df.to_dict('records')


def build_engine(args):
    terms = load_terms(args.terms)
    records = load_draw_records(args.draws)
    return DrawLedgerEngine.from_records(terms, records, fee_start_override=args.fee_start)


def _optional_date(value):
    return parse_date(value) if value else None


def cmd_ledger(engine, args, out):
    rows = engine.get_ledger(_optional_date(args.as_of), _optional_date(args.payoff_date))
    df = ledger_to_dataframe(rows)
    out.write(df.to_string(index=False) + "\n")
    summary = engine.summary_aggregator.summarize(rows)
    out.write(
        f"\nPrincipal {format_money(summary.principal)}  "
        f"Interest {format_money(summary.total_interest)}  "
        f"Balance {format_money(summary.total_balance)}  "
        f"Days {summary.total_days}  Draws {summary.total_draws}\n"
    )
    return EXIT_OK


def _write_breakdown(breakdown, out):
    out.write(f"Payoff good through {breakdown.good_through_date.isoformat()}\n")
    out.write(f"  Principal          {format_money(breakdown.principal):>16}\n")
    out.write(f"  Accrued interest   {format_money(breakdown.accrued_interest):>16}\n")
    out.write(f"  Finance fee        {format_money(breakdown.origination_fee):>16}"
              f"  ({breakdown.fee_rate_display}, month {breakdown.month_number}"
              f"{', extension' if breakdown.is_extension else ''})\n")
    out.write(f"  Document fee       {format_money(breakdown.document_fee):>16}\n")
    out.write(f"  Total payoff       {format_money(breakdown.total_payoff):>16}\n")
    out.write(f"  Per diem           {format_money(breakdown.per_diem):>16}\n")
    if breakdown.days_to_maturity is not None:
        out.write(f"  Days to maturity   {breakdown.days_to_maturity:>16}  [{breakdown.urgency}]\n")


def cmd_payoff(engine, args, out):
    breakdown = engine.get_payoff(_optional_date(args.date))
    _write_breakdown(breakdown, out)

    if args.project_days:
        projected = engine.project_payoff_days(args.project_days, breakdown.good_through_date)
        out.write("\n")
        _write_breakdown(projected, out)

    if args.what_if:
        out.write("\nWhat-if comparison\n")
        for row in engine.compare_payoffs(args.what_if, breakdown.good_through_date):
            out.write(f"  {row.target_date.isoformat()}  {format_money(row.total_payoff):>16}"
                      f"  {format_money(row.additional_cost):>14}  ({row.days_from_base:+d} days)\n")
    return EXIT_OK


def cmd_schedule(engine, args, out):
    schedule = engine.get_fee_schedule(args.months)
    if not schedule:
        out.write("Fee clock has not started: no funded draws.\n")
        return EXIT_OK
    for entry in schedule:
        flag = " *" if entry.is_extension_month else ""
        out.write(f"{entry.month:>4}  {entry.date.isoformat()}  {entry.fee_rate_display:>7}"
                  f"  {entry.escalation_type}{flag}\n")
    return EXIT_OK


def cmd_export(engine, args, out):
    result = PayoffReportGenerator(engine).generate_payoff_report(args.output, _optional_date(args.date))
    if not result:
        logger.error("%s", result.error)
        return EXIT_FAILURE
    out.write(f"Report written to {result.value}\n")
    return EXIT_OK


COMMANDS = {
    'ledger': cmd_ledger,
    'payoff': cmd_payoff,
    'schedule': cmd_schedule,
    'export': cmd_export,
}


def build_parser():
    parser = argparse.ArgumentParser(prog="drawledger",
                                     description="Construction loan accrual and payoff calculator")
    parser.add_argument("--log-level", default="WARNING", type=str.upper, choices=LOG_LEVELS,
                        help="Logging level (default WARNING)")
    parser.add_argument("--log-file", default=None, help="Optional log file path")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--terms", required=True, help="JSON file with loan terms")
    common.add_argument("--draws", required=True, help="CSV file with draws")
    common.add_argument("--fee-start", default=None,
                        help="Fee clock start date (default: first funded draw)")

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("ledger", parents=[common], help="Print the accrual ledger")
    p.add_argument("--as-of", default=None)
    p.add_argument("--payoff-date", default=None)

    p = sub.add_parser("payoff", parents=[common], help="Print the payoff breakdown")
    p.add_argument("--date", default=None)
    p.add_argument("--project-days", type=int, default=0)
    p.add_argument("--what-if", nargs="*", default=[])

    p = sub.add_parser("schedule", parents=[common], help="Print the fee schedule")
    p.add_argument("--months", type=int, default=DEFAULT_SCHEDULE_HORIZON_MONTHS)

    p = sub.add_parser("export", parents=[common], help="Export the payoff report")
    p.add_argument("--output", required=True, help="Output path (.xlsx or .csv)")
    p.add_argument("--date", default=None)

    return parser


def main(argv=None, out=None):
    out = out or sys.stdout
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level, args.log_file)

    try:
        engine = build_engine(args)
        return COMMANDS[args.command](engine, args, out)
    except (DrawLedgerError, ValueError, OSError) as e:
        logger.error("%s", e)
        sys.stderr.write(f"error: {e}\n")
        return EXIT_INVALID_INPUT


if __name__ == "__main__":
    sys.exit(main())
