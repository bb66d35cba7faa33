# jobbee/api/errors.py
import logging
import traceback

from bson.errors import InvalidId
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from jose import ExpiredSignatureError, JWTError
from pymongo.errors import ConnectionFailure, DuplicateKeyError, OperationFailure, PyMongoError
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from jobbee.config import Config
from jobbee.database.query import QueryCastError
from jobbee.errors import ErrorHandler, GeocodingError

logger = logging.getLogger(__name__)


def error_response(exc: Exception, status_code: int, message) -> JSONResponse:
    body = {"success": False, "message": message}
    if Config.is_development():
        body["errMessage"] = str(exc)
        body["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return JSONResponse(status_code=status_code, content=body)


def _duplicate_fields(exc: DuplicateKeyError) -> str:
    key_value = (exc.details or {}).get("keyValue") or {}
    return ", ".join(key_value) or "key"


def register_exception_handlers(app: FastAPI):

    @app.exception_handler(ErrorHandler)
    async def app_error_handler(request: Request, exc: ErrorHandler):
        return error_response(exc, exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        message = exc.detail
        if exc.status_code == 404 and exc.detail == "Not Found":
            message = f"{request.url.path} route not found"
        return error_response(exc, exc.status_code, message)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        messages = []
        for err in exc.errors():
            field = ".".join(str(p) for p in err.get("loc", ()) if p not in ("body", "query", "path"))
            messages.append(f"{field}: {err.get('msg')}" if field else err.get("msg"))
        return error_response(exc, 400, messages)

    @app.exception_handler(InvalidId)
    async def invalid_id_handler(request: Request, exc: InvalidId):
        return error_response(exc, 404, "Resource not found. Invalid: _id")

    @app.exception_handler(QueryCastError)
    async def query_cast_handler(request: Request, exc: QueryCastError):
        return error_response(exc, 400, f"Resource not found. Invalid: {exc.field}")

    @app.exception_handler(DuplicateKeyError)
    async def duplicate_key_handler(request: Request, exc: DuplicateKeyError):
        return error_response(exc, 400, f"Duplicate {_duplicate_fields(exc)} entered.")

    @app.exception_handler(ExpiredSignatureError)
    async def expired_token_handler(request: Request, exc: ExpiredSignatureError):
        return error_response(exc, 401, "JSON Web token is expired. Try Again!")

    @app.exception_handler(JWTError)
    async def invalid_token_handler(request: Request, exc: JWTError):
        return error_response(exc, 401, "JSON Web token is invalid. Try Again!")

    @app.exception_handler(OperationFailure)
    async def operation_failure_handler(request: Request, exc: OperationFailure):
        # Rejected predicates, unknown operators, missing text index
        logger.warning(f"Query rejected on {request.url.path}: {exc}")
        return error_response(exc, 400, f"Invalid query: {exc.details.get('errmsg') if exc.details else exc}")

    @app.exception_handler(ConnectionFailure)
    async def connection_failure_handler(request: Request, exc: ConnectionFailure):
        logger.error(f"Database unavailable: {exc}")
        return error_response(exc, 503, "Database unavailable. Try again later.")

    @app.exception_handler(PyMongoError)
    async def database_error_handler(request: Request, exc: PyMongoError):
        logger.error(f"Database error on {request.url.path}: {exc}")
        return error_response(exc, 500, "Internal Server Error.")

    @app.exception_handler(GeocodingError)
    async def geocoding_error_handler(request: Request, exc: GeocodingError):
        return error_response(exc, 502, str(exc))

    @app.exception_handler(RateLimitExceeded)
    async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
        return error_response(exc, 429, f"Rate limit exceeded: {exc.detail}")

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.url.path}")
        return error_response(exc, 500, "Internal Server Error.")
