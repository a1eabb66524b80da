import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.security import OAuth2PasswordRequestForm
from fastapi.responses import JSONResponse
from jose import JWTError
import redis.asyncio as redis

from src.auth.context import AuthContext
from src.auth.dependencies import get_auth_context, oauth2_scheme
from src.auth.tokens import (
    ACCESS_TOKEN_EXPIRE_MINUTES,
    REFRESH_TOKEN_EXPIRE_DAYS,
    create_access_token,
    create_refresh_token,
    decode_token,
)
from src.storage.base import Cache, RecordStore, eq
from src.storage.dependencies import get_cache, get_record_store, get_redis
from src.users.mapper import to_model
from src.users.schemas import RegisterIn
from src.users.service import get_employee, pwd_context, register_employee
from src.utils.ip import get_real_ip
from src.utils.ratelimit import delete_attempt, is_blocked, register_failed_attempt
from src.utils.responses import unwrap

logger = logging.getLogger(__name__)

router = APIRouter()

ACCESS_MAX_AGE = ACCESS_TOKEN_EXPIRE_MINUTES * 60
REFRESH_MAX_AGE = REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60


def _token_response(user_id: str, access_token: str, refresh_token: str, extra: dict = None) -> JSONResponse:
    response = JSONResponse(content={
        "accessToken": access_token,
        "tokenType": "bearer",
        "userId": user_id,
        **(extra or {}),
    })
    response.set_cookie(
        key="Authorization",
        value=f"Bearer {access_token}",
        httponly=True,
        secure=True,
        samesite="Lax",
        max_age=ACCESS_MAX_AGE,
        path="/",
    )
    response.set_cookie(
        key="refresh_token",
        value=refresh_token,
        httponly=True,
        secure=True,
        samesite="Lax",
        max_age=REFRESH_MAX_AGE,
        path="/",
    )
    return response


@router.post("/login")
async def login(
    request: Request,
    form_data: OAuth2PasswordRequestForm = Depends(),
    store: RecordStore = Depends(get_record_store),
    client: redis.Redis = Depends(get_redis),
):
    ip = await get_real_ip(request)
    if await is_blocked(client, ip):
        raise HTTPException(status_code=429, detail="Too many failed login attempts, try again later")

    rows = await store.read_many("users", [eq("email", form_data.username)])
    row = rows[0] if rows else None
    if (
        not row
        or not row.get("hashed_password")
        or not pwd_context.verify(form_data.password, row["hashed_password"])
    ):
        await register_failed_attempt(client, ip)
        logger.warning("Failed login for %s from %s", form_data.username, ip)
        raise HTTPException(status_code=401, detail="Invalid credentials")
    if row.get("is_active") is False:
        raise HTTPException(status_code=403, detail="Inactive user")

    await delete_attempt(client, ip)
    user = to_model(row)
    access_token = create_access_token(user.id)
    refresh_token = create_refresh_token(user.id)
    await client.set(f"refresh_token:{user.id}", refresh_token, ex=REFRESH_MAX_AGE)
    return _token_response(user.id, access_token, refresh_token, {"role": user.role.value})


@router.post("/register", status_code=201)
async def register(
    data: RegisterIn,
    store: RecordStore = Depends(get_record_store),
    cache: Cache = Depends(get_cache),
):
    result = await register_employee(store, cache, data)
    return {"data": unwrap(result), "message": result.message}


@router.post("/refresh")
async def refresh_token(request: Request, client: redis.Redis = Depends(get_redis)):
    token = request.cookies.get("refresh_token")
    if not token:
        raise HTTPException(status_code=401, detail="Missing refresh token")

    try:
        user_id = decode_token(token, token_type="refresh")
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid refresh token")

    saved_token = await client.get(f"refresh_token:{user_id}")
    if saved_token != token:
        raise HTTPException(status_code=401, detail="Token mismatch")

    new_access = create_access_token(user_id)
    new_refresh = create_refresh_token(user_id)
    await client.set(f"refresh_token:{user_id}", new_refresh, ex=REFRESH_MAX_AGE)
    return _token_response(user_id, new_access, new_refresh, {"message": "Token refreshed"})


@router.get("/me")
async def get_me(
    ctx: AuthContext = Depends(get_auth_context),
    store: RecordStore = Depends(get_record_store),
    cache: Cache = Depends(get_cache),
):
    return unwrap(await get_employee(ctx, store, cache, ctx.user.id))


@router.post("/logout")
async def logout(token: str = Depends(oauth2_scheme), client: redis.Redis = Depends(get_redis)):
    try:
        user_id = decode_token(token)
    except JWTError:
        user_id = None
    if user_id:
        await client.delete(f"refresh_token:{user_id}")

    response = JSONResponse(content={"message": "Logged out"})
    response.delete_cookie("Authorization")
    response.delete_cookie("refresh_token")
    return response
