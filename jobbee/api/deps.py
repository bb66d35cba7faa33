"""FastAPI dependencies: storage, collaborators, services, authentication."""

from typing import Optional

from bson import ObjectId
from bson.errors import InvalidId
from fastapi import Depends, Header, Request

from jobbee.errors import ErrorHandler
from jobbee.models.user import USER_HIDDEN_FIELDS
from jobbee.services.auth_service import AuthService
from jobbee.services.job_service import JobService
from jobbee.services.security import decode_access_token
from jobbee.services.user_service import UserService

LOGIN_FIRST = 'Login first to access this resource.'


def get_db(request: Request):
    return request.app.state.mongodb


def get_geocoder(request: Request):
    return request.app.state.geocoder


def get_mailer(request: Request):
    return request.app.state.mailer


def get_job_service(db=Depends(get_db), geocoder=Depends(get_geocoder)) -> JobService:
    return JobService(db, geocoder)


def get_user_service(db=Depends(get_db)) -> UserService:
    return UserService(db)


def get_auth_service(db=Depends(get_db), mailer=Depends(get_mailer)) -> AuthService:
    return AuthService(db, mailer)


def get_current_user(authorization: Optional[str] = Header(None), db=Depends(get_db)) -> dict:
    """Resolve the caller from an ``Authorization: Bearer <token>`` header."""
    token = None
    if authorization and authorization.startswith('Bearer'):
        parts = authorization.split(' ')
        token = parts[1] if len(parts) > 1 else None

    if not token:
        raise ErrorHandler(LOGIN_FIRST, 401)

    # JWTError / ExpiredSignatureError are rendered by the app's handlers
    payload = decode_access_token(token)
    if not payload.get('id'):
        raise ErrorHandler(LOGIN_FIRST, 401)
    try:
        user_id = ObjectId(payload['id'])
    except (InvalidId, TypeError):
        raise ErrorHandler(LOGIN_FIRST, 401)

    user = db.users.find_one({"_id": user_id}, {f: 0 for f in USER_HIDDEN_FIELDS})
    if not user:
        raise ErrorHandler(LOGIN_FIRST, 401)
    return user


def authorize_roles(*roles: str):
    """Dependency factory restricting a route to the given roles."""

    def checker(user: dict = Depends(get_current_user)) -> dict:
        if user.get('role') not in roles:
            raise ErrorHandler(f"Role({user.get('role')}) is not allowed to access this resource.", 403)
        return user

    return checker
