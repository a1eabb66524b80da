import pytest

from src.auth.context import ANONYMOUS
from src.errors import AuthorizationError
from src.users.schemas import UserRole

from tests.conftest import make_ctx


def test_anonymous_context():
    assert ANONYMOUS.current_user() is None
    assert not ANONYMOUS.has_role(UserRole.EMPLOYEE)
    with pytest.raises(AuthorizationError):
        ANONYMOUS.require_authenticated()


def test_roles(admin_ctx, employee_ctx):
    assert admin_ctx.is_admin
    assert not employee_ctx.is_admin
    assert employee_ctx.has_role(UserRole.EMPLOYEE)
    assert employee_ctx.current_user().id == "e1"


def test_self_or_admin(admin_ctx, employee_ctx):
    assert employee_ctx.require_self_or_admin("e1").id == "e1"
    assert admin_ctx.require_self_or_admin("e1").id == "admin-1"
    with pytest.raises(AuthorizationError):
        employee_ctx.require_self_or_admin("e2")
    with pytest.raises(AuthorizationError):
        employee_ctx.require_admin()
