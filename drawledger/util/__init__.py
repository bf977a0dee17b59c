from .dates import days_between, parse_date
from .money import format_money, round_money, to_decimal

__all__ = ["days_between", "parse_date", "format_money", "round_money", "to_decimal"]
