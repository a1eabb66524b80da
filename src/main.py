import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from src.auth.router import router as auth_router
from src.config import MEDIA_ROOT, MEDIA_URL
from src.errors import DomainError
from src.logs.middleware import LogUserActionMiddleware
from src.payroll.router import router as payroll_router
from src.shifts.router import router as shifts_router
from src.users.router import profile_router, router as employees_router
from src.utils.create_admin import create_super_admin

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    os.makedirs(MEDIA_ROOT, exist_ok=True)
    await create_super_admin()
    yield


app = FastAPI(lifespan=lifespan, title="Workforce App", description="Employee directory and shift scheduling", version="0.1.0")

app.mount(MEDIA_URL, StaticFiles(directory=MEDIA_ROOT, check_dir=False), name="media")

app.add_middleware(LogUserActionMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=['*'],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"]
)


@app.exception_handler(DomainError)
async def domain_error_handler(request: Request, exc: DomainError):
    logger.warning("%s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


app.include_router(
    router=auth_router,
    prefix="/auth",
    tags=["Auth"],
)

app.include_router(
    router=employees_router,
    prefix="/employees",
)

app.include_router(
    router=profile_router,
    prefix="/profile",
)

app.include_router(
    router=shifts_router,
    prefix="/shifts",
)

app.include_router(
    router=payroll_router,
    prefix="/payroll",
)
