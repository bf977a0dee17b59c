"""
Report generation module for DrawLedger.
Converts ledgers, fee schedules and payoff breakdowns to DataFrames and
exports the payoff report to Excel or CSV.
"""
import logging
import os

import pandas as pd

from drawledger.config import (
    DATE_FORMAT_STORAGE,
    SHEET_FEE_SCHEDULE,
    SHEET_LEDGER,
    SHEET_PAYOFF,
    SHEET_PROJECTION,
)
from drawledger.data_structures import ReportConfig
from drawledger.result import ErrorType, ExportResult

logger = logging.getLogger(__name__)


def _ledger_values(row, date_format):
    return {
        "Date": row.date.strftime(date_format),
        "Type": row.kind.value,
        "Description": row.description,
        "Draw": float(row.draw_amount),
        "Days": row.days_since_previous,
        "Interest": round(float(row.interest_accrued), 2),
        "Cumulative Interest": round(float(row.cumulative_interest), 2),
        "Principal": float(row.principal),
        "Balance": round(float(row.total_balance), 2),
        "Fee Rate": float(row.fee_rate) if row.fee_rate is not None else None,
        "Month": row.month_number,
    }


def ledger_to_dataframe(rows, config: ReportConfig = None):
    """Ledger rows as a DataFrame with the configured columns."""
    config = config or ReportConfig()
    columns = config.ledger_columns
    data = [_ledger_values(row, config.date_format) for row in rows]
    if not data:
        return pd.DataFrame(columns=columns)
    return pd.DataFrame(data)[columns]


def fee_schedule_to_dataframe(schedule, date_format=DATE_FORMAT_STORAGE):
    columns = ["Month", "Date", "Fee Rate", "Fee Rate %", "Regime", "Extension"]
    data = [{
        "Month": entry.month,
        "Date": entry.date.strftime(date_format),
        "Fee Rate": float(entry.fee_rate),
        "Fee Rate %": entry.fee_rate_display,
        "Regime": entry.escalation_type,
        "Extension": entry.is_extension_month,
    } for entry in schedule]
    return pd.DataFrame(data, columns=columns)


def payoff_to_dataframe(breakdown, date_format=DATE_FORMAT_STORAGE):
    """Payoff breakdown as a two-column Component/Amount table."""
    data = [
        ("Good Through", breakdown.good_through_date.strftime(date_format)),
        ("Principal", float(breakdown.principal)),
        ("Accrued Interest", float(breakdown.accrued_interest)),
        (f"Finance Fee ({breakdown.fee_rate_display}, month {breakdown.month_number})",
         float(breakdown.origination_fee)),
        ("Document Fee", float(breakdown.document_fee)),
        ("Total Payoff", float(breakdown.total_payoff)),
        ("Per Diem", float(breakdown.per_diem)),
        ("Days of Interest", breakdown.days_of_interest),
        ("Days to Maturity", breakdown.days_to_maturity),
        ("Urgency", breakdown.urgency),
        ("Extension Period", breakdown.is_extension),
    ]
    return pd.DataFrame(data, columns=["Component", "Amount"])


def projection_to_dataframe(points):
    columns = ["Month", "Label", "Fee Rate", "Principal", "Cumulative Interest",
               "Total Fees", "Total Payoff", "Actual", "Current", "Extension"]
    data = [{
        "Month": p.month,
        "Label": p.label,
        "Fee Rate": float(p.fee_rate),
        "Principal": float(p.principal),
        "Cumulative Interest": float(p.cumulative_interest),
        "Total Fees": float(p.total_fees),
        "Total Payoff": float(p.total_payoff),
        "Actual": p.is_actual,
        "Current": p.is_current_month,
        "Extension": p.is_extension_month,
    } for p in points]
    return pd.DataFrame(data, columns=columns)


class PayoffReportGenerator:
    """Builds and exports the payoff report for one loan.

    Args:
        engine: DrawLedgerEngine for the loan.
        config: Optional ReportConfig controlling sheets and columns.
    """

    def __init__(self, engine, config: ReportConfig = None):
        self.engine = engine
        self.config = config or ReportConfig()

    def build_tables(self, evaluation_date=None):
        """Collect the report tables, keyed by sheet name (payoff first)."""
        breakdown = self.engine.get_payoff(evaluation_date)
        as_of = breakdown.good_through_date
        fmt = self.config.date_format

        tables = {SHEET_PAYOFF: payoff_to_dataframe(breakdown, fmt)}
        if self.config.include_ledger:
            tables[SHEET_LEDGER] = ledger_to_dataframe(self.engine.get_ledger(as_of), self.config)
        if self.config.include_fee_schedule:
            tables[SHEET_FEE_SCHEDULE] = fee_schedule_to_dataframe(
                self.engine.get_fee_schedule(self.config.schedule_months), fmt)
        if self.config.include_projection:
            tables[SHEET_PROJECTION] = projection_to_dataframe(
                self.engine.get_projection(as_of, self.config.schedule_months))
        return tables

    def generate_payoff_report(self, output_path, evaluation_date=None) -> ExportResult:
        """
        Generate the payoff report.

        Args:
            output_path (str): Destination; ``.xlsx`` writes every table to
                its own sheet, ``.csv`` writes the ledger only.
            evaluation_date: Payoff good-through date (default today).

        Returns:
            ExportResult: ok with the output path, or fail with an error category.
        """
        ext = os.path.splitext(output_path)[1].lower()
        if ext not in ('.xlsx', '.csv'):
            return ExportResult.fail(f"Unsupported report format '{ext or output_path}'",
                               ErrorType.UNSUPPORTED_FORMAT)

        try:
            tables = self.build_tables(evaluation_date)
        except ValueError as e:
            return ExportResult.fail(str(e), ErrorType.VALIDATION)

        if ext == '.csv':
            df = tables.get(SHEET_LEDGER)
            if df is None:
                df = ledger_to_dataframe(self.engine.get_ledger(evaluation_date), self.config)
            return self._export_to_csv(df, output_path)
        return self._export_to_excel(tables, output_path)

    def _export_to_excel(self, tables, output_path):
        """Export DataFrames to Excel, one sheet each, with formatting."""
        try:
            with pd.ExcelWriter(output_path, engine='xlsxwriter') as writer:
                workbook = writer.book
                header_fmt = workbook.add_format({'bold': True, 'border': 1, 'bg_color': '#D7E4BC'})
                money_fmt = workbook.add_format({'num_format': '#,##0.00'})

                for sheet_name, df in tables.items():
                    df.to_excel(writer, index=False, sheet_name=sheet_name)
                    worksheet = writer.sheets[sheet_name]
                    for col_num, value in enumerate(df.columns.values):
                        worksheet.write(0, col_num, value, header_fmt)
                    worksheet.set_column(0, 0, 22)
                    worksheet.set_column(1, max(1, len(df.columns) - 1), 16, money_fmt)
        except Exception as e:
            logger.error("Excel export to %s failed: %s", output_path, e)
            return ExportResult.fail(f"Excel Export Failed: {e}", ErrorType.EXPORT)

        logger.info("Payoff report written to %s", output_path)
        return ExportResult.ok(output_path)

    def _export_to_csv(self, df, output_path):
        try:
            df.to_csv(output_path, index=False)
        except Exception as e:
            logger.error("CSV export to %s failed: %s", output_path, e)
            return ExportResult.fail(f"CSV Export Failed: {e}", ErrorType.EXPORT)

        logger.info("Ledger written to %s", output_path)
        return ExportResult.ok(output_path)
