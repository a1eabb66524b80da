from fastapi import Depends, HTTPException, status, Request
from fastapi.security import HTTPBearer
from fastapi.security.utils import get_authorization_scheme_param
from jose import JWTError

from src.auth.context import AuthContext, Identity
from src.auth.tokens import decode_token
from src.errors import NotFoundError
from src.storage.base import RecordStore
from src.storage.dependencies import get_record_store
from src.users.mapper import to_model


class OAuth2PasswordBearerWithCookie(HTTPBearer):
    async def __call__(self, request: Request) -> str:
        auth_header = request.headers.get("Authorization")
        cookie_auth = request.cookies.get("Authorization")
        scheme, param = get_authorization_scheme_param(auth_header or cookie_auth)
        if scheme.lower() != "bearer":
            raise HTTPException(status_code=401, detail="Not authenticated")
        return param

oauth2_scheme = OAuth2PasswordBearerWithCookie()


async def get_auth_context(
    token: str = Depends(oauth2_scheme), store: RecordStore = Depends(get_record_store)
) -> AuthContext:
    try:
        user_id = decode_token(token)
    except JWTError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    try:
        row = await store.read_one("users", user_id)
    except NotFoundError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unknown user")
    if row.get("is_active") is False:
        raise HTTPException(status_code=403, detail="Inactive user")

    employee = to_model(row)
    return AuthContext(Identity(id=employee.id, email=employee.email, role=employee.role))
