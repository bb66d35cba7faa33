# jobbee/api/routes/users.py
from fastapi import APIRouter, Depends, Request

from jobbee.api.deps import authorize_roles, get_current_user, get_user_service
from jobbee.api.responses import clear_token, listing, send_token, success
from jobbee.models.user import PasswordUpdate, UserUpdate
from jobbee.services.api_filters import parse_query_params
from jobbee.services.user_service import UserService

router = APIRouter()


@router.get("/me")
def get_user_profile(user: dict = Depends(get_current_user), user_service: UserService = Depends(get_user_service)):
    return success(data=user_service.get_profile(user["_id"]))


@router.get("/jobs/applied")
def get_applied_jobs(
    user: dict = Depends(authorize_roles("user")),
    user_service: UserService = Depends(get_user_service),
):
    return listing(user_service.applied_jobs(user["_id"]))


@router.get("/jobs/published")
def get_published_jobs(
    user: dict = Depends(authorize_roles("employeer", "admin")),
    user_service: UserService = Depends(get_user_service),
):
    return listing(user_service.published_jobs(user["_id"]))


@router.put("/password/update")
def update_password(
    data: PasswordUpdate,
    user: dict = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
):
    return send_token(user_service.update_password(user["_id"], data))


@router.put("/me/update")
def update_user(
    data: UserUpdate,
    user: dict = Depends(get_current_user),
    user_service: UserService = Depends(get_user_service),
):
    return success(data=user_service.update_user(user["_id"], data))


@router.delete("/me/delete")
def delete_user(user: dict = Depends(get_current_user), user_service: UserService = Depends(get_user_service)):
    user_service.delete_user(user)
    return clear_token({"success": True, "message": "Your account has been deleted."})


# Admin only

@router.get("/users")
def get_users(
    request: Request,
    user: dict = Depends(authorize_roles("admin")),
    user_service: UserService = Depends(get_user_service),
):
    params = parse_query_params(request.query_params.multi_items())
    return listing(user_service.list_users(params))


@router.delete("/user/{user_id}")
def delete_user_admin(
    user_id: str,
    user: dict = Depends(authorize_roles("admin")),
    user_service: UserService = Depends(get_user_service),
):
    user_service.delete_user_admin(user_id)
    return success(message="User is deleted by Admin.")
