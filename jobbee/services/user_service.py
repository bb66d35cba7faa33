# jobbee/services/user_service.py
import logging
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo import ReturnDocument

from jobbee.database.query import MongoQuery
from jobbee.errors import ErrorHandler
from jobbee.models.user import USER_FIELD_TYPES, USER_HIDDEN_FIELDS, PasswordUpdate, UserUpdate
from jobbee.services.api_filters import APIFilters
from jobbee.services.pipeline import hash_password, run_pipeline
from jobbee.services.security import verify_password
from jobbee.services.uploads import ResumeStorage

logger = logging.getLogger(__name__)

PUBLIC_USER_PROJECTION = {f: 0 for f in USER_HIDDEN_FIELDS}


class UserService:
    def __init__(self, db, storage: Optional[ResumeStorage] = None):
        self.db = db
        self.storage = storage or ResumeStorage()

    def query(self) -> MongoQuery:
        return MongoQuery(self.db.users, field_types=USER_FIELD_TYPES, hidden_fields=USER_HIDDEN_FIELDS)

    def get_profile(self, user_id) -> Dict:
        user = self.db.users.find_one({"_id": user_id}, PUBLIC_USER_PROJECTION)
        if not user:
            raise ErrorHandler('User not found', 404)

        user["jobsPublished"] = list(self.db.jobs.find({"user": user_id}, {"title": 1, "postingDate": 1}))
        return user

    def update_password(self, user_id, data: PasswordUpdate) -> Dict:
        user = self.db.users.find_one({"_id": user_id})
        if not user or not verify_password(data.currentPassword, user.get("password")):
            raise ErrorHandler('Old Password is incorrect.', 401)

        changes = run_pipeline({"password": data.newPassword}, hash_password)
        self.db.users.update_one({"_id": user_id}, {"$set": changes, "$inc": {"__v": 1}})
        return user

    def update_user(self, user_id, data: UserUpdate) -> Dict:
        changes = data.model_dump(exclude_none=True)
        update = {"$inc": {"__v": 1}}
        if changes:
            update["$set"] = changes

        return self.db.users.find_one_and_update(
            {"_id": user_id},
            update,
            projection=PUBLIC_USER_PROJECTION,
            return_document=ReturnDocument.AFTER,
        )

    def applied_jobs(self, user_id) -> List[Dict]:
        return list(self.db.jobs.find({"applicantsApplied.id": str(user_id)}))

    def published_jobs(self, user_id) -> List[Dict]:
        return list(self.db.jobs.find({"user": user_id}, {"applicantsApplied": 0}))

    def list_users(self, params: Dict[str, Any]) -> List[Dict]:
        api_filters = (
            APIFilters(self.query(), params)
            .filter()
            .sort()
            .limit_fields()
            .pagination()
        )
        return api_filters.query.execute()

    def delete_user(self, user: Dict):
        self.delete_user_data(user["_id"], user.get("role"))
        self.db.users.delete_one({"_id": user["_id"]})
        logger.info(f"User {user['_id']} deleted")

    def delete_user_admin(self, user_id: str):
        user = self.db.users.find_one({"_id": ObjectId(user_id)}, {"role": 1})
        if not user:
            raise ErrorHandler(f'User not found with id: {user_id}', 404)
        self.delete_user(user)

    def delete_user_data(self, user_id, role: Optional[str]):
        """Remove what the account owns: an employer's jobs, a candidate's resumes and applications."""
        if role == 'employeer':
            result = self.db.jobs.delete_many({"user": user_id})
            logger.info(f"Deleted {result.deleted_count} jobs of employer {user_id}")

        if role == 'user':
            uid = str(user_id)
            resumes = []
            for job in self.db.jobs.find({"applicantsApplied.id": uid}, {"applicantsApplied": 1}):
                resumes.extend(a.get("resume") for a in job.get("applicantsApplied", []) if a.get("id") == uid)

            self.storage.delete(resumes)
            self.db.jobs.update_many(
                {"applicantsApplied.id": uid},
                {"$pull": {"applicantsApplied": {"id": uid}}},
            )
