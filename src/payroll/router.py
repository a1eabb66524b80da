from fastapi import APIRouter, Depends

from src.auth.context import AuthContext
from src.auth.dependencies import get_auth_context
from src.payroll import service
from src.utils.responses import unwrap

router = APIRouter(tags=["Payroll"])


@router.get("/periods")
async def pay_periods(ctx: AuthContext = Depends(get_auth_context)):
    return unwrap(await service.get_pay_periods(ctx))


@router.get("/periods/{period_id}")
async def payroll_by_period(period_id: str, ctx: AuthContext = Depends(get_auth_context)):
    return unwrap(await service.get_payroll_by_period(ctx, period_id))


@router.get("/employee/{employee_id}")
async def employee_payroll(employee_id: str, ctx: AuthContext = Depends(get_auth_context)):
    return unwrap(await service.get_employee_payroll(ctx, employee_id))
