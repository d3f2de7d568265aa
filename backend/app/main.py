import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api.health import router as health_router
from app.api.routes_account import router as account_router
from app.api.routes_cart import router as cart_router
from app.api.routes_items import router as items_router
from app.api.routes_login import router as login_router
from app.api.routes_order import router as order_router
from app.config import settings
from app.db import init_db
from app.services.exceptions import StorageError

log = logging.getLogger("app")


def configure_logging():
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    # startup
    init_db(reset=settings.RESET_DB)
    yield


configure_logging()

app = FastAPI(title="Marketplace - Backend", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.FRONTEND_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"errors": jsonable_encoder(exc.errors())})


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    log.error("storage failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"message": "Oops, an error occured"})


app.include_router(health_router, tags=["health"])

app.include_router(account_router, tags=["account"])

app.include_router(login_router, tags=["login"])

app.include_router(items_router, tags=["items"])

app.include_router(cart_router, tags=["cart"])

app.include_router(order_router, tags=["orders"])
