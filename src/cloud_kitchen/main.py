import logging
import traceback
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from cloud_kitchen.api import health
from cloud_kitchen.api.routes.categories import router as categories_router
from cloud_kitchen.api.routes.checkout import router as checkout_router
from cloud_kitchen.api.routes.dashboard import router as dashboard_router
from cloud_kitchen.api.routes.dishes import router as dishes_router
from cloud_kitchen.api.routes.errors import router as errors_router
from cloud_kitchen.api.routes.imports import router as imports_router
from cloud_kitchen.api.routes.menu import router as menu_router
from cloud_kitchen.api.routes.notifications import router as notifications_router
from cloud_kitchen.api.routes.orders import router as orders_router
from cloud_kitchen.api.routes.payment import router as payment_router
from cloud_kitchen.api.routes.restaurant import router as restaurant_router
from cloud_kitchen.api.routes.section_items import router as section_items_router
from cloud_kitchen.config import settings
from cloud_kitchen.crud.error_log import create_error_log
from cloud_kitchen.db.session import AsyncSessionLocal, engine
from cloud_kitchen.exceptions import CartError, CheckoutError, NotificationError, PaymentGatewayError
from cloud_kitchen.logging import setup_json_logging
from cloud_kitchen.request_id import RequestIDMiddleware, get_request_id
from cloud_kitchen.schemas.error_log import ErrorLogCreate

setup_json_logging(settings.LOG_LEVEL)
logger = logging.getLogger("cloud_kitchen")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application started")
    yield
    await engine.dispose()
    logger.info("Application stopped")


app = FastAPI(title="Cloud Kitchen", lifespan=lifespan)
app.add_middleware(RequestIDMiddleware)

# Подключаем роуты
app.include_router(health.router)
app.include_router(restaurant_router)
app.include_router(categories_router)
app.include_router(dishes_router)
app.include_router(section_items_router)
app.include_router(menu_router)
app.include_router(orders_router)
app.include_router(checkout_router)
app.include_router(payment_router)
app.include_router(notifications_router)
app.include_router(errors_router)
app.include_router(imports_router)
app.include_router(dashboard_router)


@app.exception_handler(CartError)
@app.exception_handler(CheckoutError)
async def bad_request_handler(request: Request, exc: Exception):
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(PaymentGatewayError)
async def payment_gateway_handler(request: Request, exc: PaymentGatewayError):
    logger.warning("Payment gateway error on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=502, content={"detail": str(exc)})


@app.exception_handler(NotificationError)
async def notification_handler(request: Request, exc: NotificationError):
    return JSONResponse(status_code=503, content={"detail": str(exc)})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    """
    Любая необработанная ошибка: 500 с общим сообщением, стек в лог и в error_logs.
    """
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    log_in = ErrorLogCreate(
        message=str(exc) or exc.__class__.__name__,
        stack="".join(traceback.format_exception(type(exc), exc, exc.__traceback__)),
        url=str(request.url),
        user_agent=request.headers.get("user-agent"),
        additional_info={"source": "server", "method": request.method, "request_id": get_request_id() or None},
    )
    try:
        async with AsyncSessionLocal() as db:
            await create_error_log(db, log_in)
    except SQLAlchemyError:
        logger.exception("Failed to persist error log")
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})
