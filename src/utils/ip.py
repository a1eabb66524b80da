from starlette.requests import Request

from src.config import TRUSTED_PROXIES


async def get_real_ip(request: Request) -> str:
    host = request.client.host if request.client else "unknown"
    if "x-forwarded-for" in request.headers and host in TRUSTED_PROXIES:
        return request.headers["x-forwarded-for"].split(",")[0].strip()
    return host
