import calendar
from datetime import date

from dateutil.relativedelta import relativedelta


def get_due_date(start_date: date, period: int, repayment_day: int) -> date:
    """Due date of the given period, clamped to the month's last day"""
    target = start_date + relativedelta(months=period)
    max_day = calendar.monthrange(target.year, target.month)[1]
    day = min(repayment_day, max_day)
    return target.replace(day=day)


def days_between(d1: date, d2: date) -> int:
    """Signed number of days from d1 to d2"""
    return (d2 - d1).days
