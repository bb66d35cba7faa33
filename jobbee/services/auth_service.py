# jobbee/services/auth_service.py
import logging
from datetime import datetime, timezone
from typing import Dict

from fastapi.concurrency import run_in_threadpool

from jobbee.errors import ErrorHandler, MailerError
from jobbee.models.user import UserLogin, UserRegister
from jobbee.services.pipeline import apply_user_defaults, hash_password, run_pipeline
from jobbee.services.security import generate_reset_token, hash_reset_token, verify_password

logger = logging.getLogger(__name__)

RESET_SUBJECT = 'Jobbee-API Password Recovery'


class AuthService:
    def __init__(self, db, mailer):
        self.db = db
        self.mailer = mailer

    def register(self, data: UserRegister) -> Dict:
        doc = run_pipeline(data.model_dump(), apply_user_defaults, hash_password)
        doc["email"] = doc["email"].lower()
        result = self.db.users.insert_one(doc)
        doc["_id"] = result.inserted_id
        logger.info(f"Registered user {doc['_id']} ({doc['role']})")
        return doc

    def login(self, data: UserLogin) -> Dict:
        if not data.email or not data.password:
            raise ErrorHandler('Please enter email & Password', 400)

        user = self.db.users.find_one({"email": data.email.lower()})
        if not user or not verify_password(data.password, user.get("password")):
            raise ErrorHandler('Invalid Email or Password.', 401)
        return user

    async def forgot_password(self, email: str, base_url: str) -> str:
        # pymongo is synchronous, keep it off the event loop
        user = await run_in_threadpool(self.db.users.find_one, {"email": email.lower()})
        if not user:
            raise ErrorHandler('No user found with this email.', 404)

        raw_token, hashed, expire = generate_reset_token()
        await run_in_threadpool(
            self.db.users.update_one,
            {"_id": user["_id"]},
            {"$set": {"resetPasswordToken": hashed, "resetPasswordExpire": expire}},
        )

        reset_url = f"{base_url.rstrip('/')}/api/v1/password/reset/{raw_token}"
        message = (f"Your password reset link is as follow:\n\n{reset_url}\n\n"
                   "If you have not request this, then please ignore that.")

        try:
            await self.mailer.send_email(user["email"], RESET_SUBJECT, message)
        except MailerError:
            await run_in_threadpool(
                self.db.users.update_one,
                {"_id": user["_id"]},
                {"$unset": {"resetPasswordToken": "", "resetPasswordExpire": ""}},
            )
            raise ErrorHandler('Email is not sent.', 500)

        return user["email"]

    def reset_password(self, token: str, password: str) -> Dict:
        user = self.db.users.find_one({
            "resetPasswordToken": hash_reset_token(token),
            "resetPasswordExpire": {"$gt": datetime.now(timezone.utc)},
        })
        if not user:
            raise ErrorHandler('Password Reset token is invalid or has been expired.', 400)

        changes = run_pipeline({"password": password}, hash_password)
        self.db.users.update_one(
            {"_id": user["_id"]},
            {
                "$set": changes,
                "$unset": {"resetPasswordToken": "", "resetPasswordExpire": ""},
                "$inc": {"__v": 1},
            },
        )
        return user
