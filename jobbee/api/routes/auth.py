# jobbee/api/routes/auth.py
from fastapi import APIRouter, Depends, Request

from jobbee.api.deps import get_auth_service, get_current_user
from jobbee.api.responses import clear_token, send_token, success
from jobbee.models.user import ForgotPassword, ResetPassword, UserLogin, UserRegister
from jobbee.services.auth_service import AuthService

router = APIRouter()


@router.post("/register")
def register_user(data: UserRegister, auth_service: AuthService = Depends(get_auth_service)):
    return send_token(auth_service.register(data))


@router.post("/login")
def login_user(data: UserLogin, auth_service: AuthService = Depends(get_auth_service)):
    return send_token(auth_service.login(data))


@router.post("/password/forgot")
async def forgot_password(
    data: ForgotPassword,
    request: Request,
    auth_service: AuthService = Depends(get_auth_service),
):
    email = await auth_service.forgot_password(data.email, str(request.base_url))
    return success(message=f"Email sent successfully to: {email}")


@router.put("/password/reset/{token}")
def reset_password(token: str, data: ResetPassword, auth_service: AuthService = Depends(get_auth_service)):
    return send_token(auth_service.reset_password(token, data.password))


@router.get("/logout")
def logout(user: dict = Depends(get_current_user)):
    return clear_token({"success": True, "message": "Logged out successfully."})
