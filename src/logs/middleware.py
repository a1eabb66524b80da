from datetime import datetime
import logging
import os
import re

from jose import JWTError
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from src.auth.tokens import decode_token
from src.config import ACTIVITY_LOG_PATH
from src.utils.ip import get_real_ip

logger = logging.getLogger("user_logger")
logger.setLevel(logging.INFO)

if ACTIVITY_LOG_PATH:
    os.makedirs(os.path.dirname(ACTIVITY_LOG_PATH) or ".", exist_ok=True)
    logger.addHandler(logging.FileHandler(ACTIVITY_LOG_PATH))

SKIP_PATHS = re.compile(r"/(media|favicon|auth/refresh|docs|openapi\.json)")


def _user_id(request: Request):
    token = request.cookies.get("Authorization", "").replace("Bearer ", "")
    if not token:
        auth = request.headers.get("authorization", "")
        if auth.lower().startswith("bearer "):
            token = auth[7:]
    if not token:
        return None
    try:
        return decode_token(token)
    except (JWTError, ValueError):
        return None


class LogUserActionMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        if SKIP_PATHS.match(path):
            return await call_next(request)

        user_id = _user_id(request)
        method = request.method
        query = str(request.url.query)
        ip = await get_real_ip(request)
        ua = request.headers.get("user-agent", "unknown")

        response = await call_next(request)

        logger.info(f"[{datetime.now()}] {ip} {user_id} {method} {path}?{query} UA={ua[:250]} {response.status_code}")
        return response
