"""Payroll viewing over a fixed sample data set.

Figures are not computed from shifts; they are the reference numbers shown
in the payroll screens.
"""
from datetime import date
from decimal import Decimal

from src.auth.context import AuthContext
from src.errors import NotFoundError, as_result
from src.payroll.schemas import PayPeriod, PayPeriodStatus, PayrollRecord, PayrollStatus

PAY_PERIODS = [
    PayPeriod(id="1", start_date=date(2023, 6, 1), end_date=date(2023, 6, 15), status=PayPeriodStatus.completed),
    PayPeriod(id="2", start_date=date(2023, 6, 16), end_date=date(2023, 6, 30), status=PayPeriodStatus.completed),
    PayPeriod(id="3", start_date=date(2023, 7, 1), end_date=date(2023, 7, 15), status=PayPeriodStatus.processing),
    PayPeriod(id="4", start_date=date(2023, 7, 16), end_date=date(2023, 7, 31), status=PayPeriodStatus.pending),
]


def _record(id, employee_id, period_id, regular, overtime, gross, deductions, net, status):
    return PayrollRecord(
        id=id,
        employee_id=employee_id,
        pay_period_id=period_id,
        regular_hours=Decimal(regular),
        overtime_hours=Decimal(overtime),
        gross_pay=Decimal(gross),
        deductions=Decimal(deductions),
        net_pay=Decimal(net),
        status=status,
    )


PAYROLL_RECORDS = [
    _record("1", "2", "1", "75", "5", "1243.75", "311.25", "932.50", PayrollStatus.paid),
    _record("2", "3", "1", "80", "0", "1240.00", "310.00", "930.00", PayrollStatus.paid),
    _record("3", "4", "1", "72", "8", "1224.00", "306.00", "918.00", PayrollStatus.paid),
    _record("4", "5", "1", "78", "2", "1305.00", "326.25", "978.75", PayrollStatus.paid),
    _record("5", "2", "2", "80", "3", "1292.50", "323.13", "969.37", PayrollStatus.paid),
    _record("6", "3", "2", "76", "0", "1178.00", "294.50", "883.50", PayrollStatus.paid),
    _record("7", "2", "3", "64", "0", "960.00", "240.00", "720.00", PayrollStatus.approved),
    _record("8", "3", "3", "70", "4", "1178.00", "294.50", "883.50", PayrollStatus.pending),
]


@as_result
async def get_pay_periods(ctx: AuthContext):
    ctx.require_authenticated()
    return list(PAY_PERIODS)


@as_result
async def get_payroll_by_period(ctx: AuthContext, period_id: str):
    user = ctx.require_authenticated()
    if not any(period.id == period_id for period in PAY_PERIODS):
        raise NotFoundError(f"Pay period {period_id} not found")
    records = [r for r in PAYROLL_RECORDS if r.pay_period_id == period_id]
    if not ctx.is_admin:
        records = [r for r in records if r.employee_id == user.id]
    return records


@as_result
async def get_employee_payroll(ctx: AuthContext, employee_id: str):
    ctx.require_self_or_admin(employee_id)
    return [r for r in PAYROLL_RECORDS if r.employee_id == employee_id]
