# jobbee/api/responses.py
from typing import Any, Dict, Optional

from bson import ObjectId
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from jobbee.config import Config
from jobbee.services.security import create_access_token

TOKEN_COOKIE = "token"


def to_json(data: Any) -> Any:
    """Make Mongo documents JSON-safe (ObjectId -> str, datetime -> ISO)."""
    return jsonable_encoder(data, custom_encoder={ObjectId: str})


def success(data: Any = None, message: Optional[str] = None, results: Optional[int] = None) -> Dict:
    body: Dict[str, Any] = {"success": True}
    if message is not None:
        body["message"] = message
    if results is not None:
        body["results"] = results
    if data is not None:
        body["data"] = to_json(data)
    return body


def listing(records) -> Dict:
    return success(data=records, results=len(records))


def send_token(user: Dict, status_code: int = 200) -> JSONResponse:
    """Issue a JWT for ``user`` in the body and as an http-only cookie."""
    token = create_access_token(str(user["_id"]))
    response = JSONResponse(status_code=status_code, content={"success": True, "token": token})
    response.set_cookie(
        TOKEN_COOKIE,
        token,
        max_age=Config.COOKIE_EXPIRES_TIME * 24 * 60 * 60,
        httponly=True,
    )
    return response


def clear_token(content: Dict) -> JSONResponse:
    response = JSONResponse(status_code=200, content=content)
    response.set_cookie(TOKEN_COOKIE, "none", max_age=0, httponly=True)
    return response
