from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import structlog
import logging

from api.gateway import GatewayError
from core.config import settings
from core.redis import close_redis
from utils.payment import PaymentError

from routes.routes import router as rest_router


logging.basicConfig(level=logging.INFO, format="%(message)s")

structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(),
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=True,
)
log = structlog.get_logger(__name__)

app = FastAPI(title="Campus Events & Notes")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.CORS_ORIGINS.split(",")],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(rest_router)


@app.exception_handler(GatewayError)
async def gateway_error_handler(request: Request, exc: GatewayError):
    # upstream client errors are passed through, anything else is a bad gateway
    if exc.status_code and 400 <= exc.status_code < 500:
        status_code = exc.status_code
    else:
        status_code = 502
    log.warning("request.gateway_error", path=request.url.path,
                upstream_status=exc.status_code, message=exc.message)
    return JSONResponse(status_code=status_code,
                        content={"message": exc.message, "errors": exc.errors})


@app.exception_handler(PaymentError)
async def payment_error_handler(request: Request, exc: PaymentError):
    log.warning("request.payment_error", path=request.url.path, kind=exc.kind,
                order_id=exc.order_id, message=exc.message)
    return JSONResponse(status_code=402,
                        content={"kind": exc.kind, "message": exc.message,
                                 "orderId": exc.order_id})


@app.on_event("shutdown")
async def shutdown():
    log.info("app.shutdown")
    await close_redis()
