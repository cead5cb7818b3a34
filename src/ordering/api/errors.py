"""Map Ordering failure kinds to HTTP responses.

Protean's own ``ValidationError`` is handled by
``protean.integrations.fastapi.register_exception_handlers``.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ordering.errors import InvalidOperationError, NotAuthorizedError, NotFoundError

_STATUS_CODES = {
    NotFoundError: 404,
    NotAuthorizedError: 403,
    InvalidOperationError: 400,
}


def register_ordering_exception_handlers(app: FastAPI) -> None:
    for error_cls, status_code in _STATUS_CODES.items():
        app.add_exception_handler(error_cls, _handler_for(status_code))


def _handler_for(status_code):
    async def handler(request: Request, exc):
        return JSONResponse(status_code=status_code, content={"error": exc.message})

    return handler
