# order_engine/api/errors.py
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from order_engine.domain.errors import ErrorKind, OrderError
from order_engine.utils.logging import get_logger

logger = get_logger(__name__)

STATUS_CODES = {
    ErrorKind.EMPTY_CART: 400,
    ErrorKind.ADDRESS_NOT_FOUND: 404,
    ErrorKind.INSUFFICIENT_STOCK: 400,
    ErrorKind.INVALID_COUPON: 400,
    ErrorKind.ORDER_NOT_FOUND: 404,
    ErrorKind.ORDER_NOT_CANCELLABLE: 400,
    ErrorKind.INVALID_TRANSITION: 400,
    ErrorKind.GENERATION: 500,
    ErrorKind.VALIDATION: 400,
}


async def order_error_handler(request: Request, exc: OrderError) -> JSONResponse:
    status_code = STATUS_CODES.get(exc.kind, 500)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(
        status_code=status_code,
        content={"error": exc.kind.value, "detail": str(exc)},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(OrderError, order_error_handler)
