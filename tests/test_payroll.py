from decimal import Decimal

from src.auth.context import ANONYMOUS
from src.errors import AuthorizationError, NotFoundError
from src.payroll import service
from src.payroll.schemas import PayPeriodStatus

from tests.conftest import make_ctx


async def test_pay_periods():
    result = await service.get_pay_periods(make_ctx("2"))

    assert [p.id for p in result.value] == ["1", "2", "3", "4"]
    assert result.value[2].status == PayPeriodStatus.processing


async def test_pay_periods_need_a_user():
    result = await service.get_pay_periods(ANONYMOUS)

    assert isinstance(result.error, AuthorizationError)


async def test_admin_sees_whole_period(admin_ctx):
    result = await service.get_payroll_by_period(admin_ctx, "1")

    assert [r.employee_id for r in result.value] == ["2", "3", "4", "5"]


async def test_employee_sees_own_records_only():
    result = await service.get_payroll_by_period(make_ctx("3"), "2")

    assert [r.id for r in result.value] == ["6"]
    assert result.value[0].net_pay == Decimal("883.50")


async def test_unknown_period(admin_ctx):
    result = await service.get_payroll_by_period(admin_ctx, "99")

    assert isinstance(result.error, NotFoundError)


async def test_employee_payroll(admin_ctx):
    own = await service.get_employee_payroll(make_ctx("2"), "2")
    other = await service.get_employee_payroll(make_ctx("2"), "3")

    assert [r.id for r in own.value] == ["1", "5", "7"]
    assert isinstance(other.error, AuthorizationError)
