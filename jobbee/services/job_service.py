# jobbee/services/job_service.py
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo import ReturnDocument

from jobbee.database.query import MongoQuery
from jobbee.errors import ErrorHandler
from jobbee.models.job import JOB_FIELD_TYPES, JOB_HIDDEN_FIELDS, JobCreate, JobUpdate
from jobbee.services.api_filters import APIFilters
from jobbee.services.pipeline import (
    apply_job_defaults,
    geocode_address,
    normalize_dates,
    run_pipeline,
    slugify_title,
)
from jobbee.services.uploads import ResumeStorage

logger = logging.getLogger(__name__)

EARTH_RADIUS_MILES = 3963


class JobService:
    def __init__(self, db, geocoder, storage: Optional[ResumeStorage] = None):
        self.db = db
        self.geocoder = geocoder
        self.storage = storage or ResumeStorage()

    @property
    def jobs(self):
        return self.db.jobs

    def query(self) -> MongoQuery:
        return MongoQuery(self.jobs, field_types=JOB_FIELD_TYPES, hidden_fields=JOB_HIDDEN_FIELDS)

    def _get_or_404(self, job_id: str, with_applicants: bool = False, message: str = 'Job not found') -> Dict:
        projection = None if with_applicants else {"applicantsApplied": 0}
        job = self.jobs.find_one({"_id": ObjectId(job_id)}, projection)
        if not job:
            raise ErrorHandler(message, 404)
        return job

    @staticmethod
    def _check_owner(job: Dict, user: Dict, action: str):
        if str(job.get("user")) != str(user["_id"]) and user.get("role") != "admin":
            raise ErrorHandler(f"User({user['_id']}) is not allowed to {action} this job.", 403)

    def list_jobs(self, params: Dict[str, Any]) -> List[Dict]:
        api_filters = (
            APIFilters(self.query(), params)
            .filter()
            .sort()
            .limit_fields()
            .search_by_query()
            .pagination()
        )
        return api_filters.query.execute()

    def create_job(self, data: JobCreate, user: Dict) -> Dict:
        doc = data.model_dump()
        doc["user"] = user["_id"]
        doc = run_pipeline(
            doc,
            apply_job_defaults,
            normalize_dates,
            slugify_title,
            geocode_address(self.geocoder),
        )
        result = self.jobs.insert_one(doc)
        doc["_id"] = result.inserted_id
        logger.info(f"Job {result.inserted_id} created by user {user['_id']}")
        return doc

    def get_job(self, job_id: str, slug: str) -> Dict:
        job = self.jobs.find_one({"_id": ObjectId(job_id), "slug": slug}, {"applicantsApplied": 0})
        if not job:
            raise ErrorHandler('Job not found', 404)

        owner = self.db.users.find_one({"_id": job.get("user")}, {"name": 1})
        if owner:
            job["user"] = owner
        return job

    def update_job(self, job_id: str, data: JobUpdate, user: Dict) -> Dict:
        job = self._get_or_404(job_id)
        self._check_owner(job, user, "update")

        changes = data.model_dump(exclude_unset=True)
        changes = run_pipeline(changes, normalize_dates, slugify_title, geocode_address(self.geocoder))
        update = {"$inc": {"__v": 1}}
        if changes:
            update["$set"] = changes

        return self.jobs.find_one_and_update(
            {"_id": job["_id"]},
            update,
            projection={"applicantsApplied": 0},
            return_document=ReturnDocument.AFTER,
        )

    def delete_job(self, job_id: str, user: Dict):
        job = self._get_or_404(job_id, with_applicants=True)
        self._check_owner(job, user, "delete")

        self.storage.delete(a.get("resume") for a in job.get("applicantsApplied") or [])
        self.jobs.delete_one({"_id": job["_id"]})
        logger.info(f"Job {job_id} deleted by user {user['_id']}")

    def jobs_in_radius(self, zipcode: str, distance: float) -> List[Dict]:
        loc = self.geocoder.geocode(zipcode)
        radius = distance / EARTH_RADIUS_MILES

        return list(self.jobs.find(
            {"location.coordinates": {"$geoWithin": {"$centerSphere": [[loc.longitude, loc.latitude], radius]}}},
            {"applicantsApplied": 0},
        ))

    def job_stats(self, topic: str) -> List[Dict]:
        return list(self.jobs.aggregate([
            {"$match": {"$text": {"$search": f'"{topic}"'}}},
            {"$group": {
                "_id": {"$toUpper": "$experience"},
                "totalJobs": {"$sum": 1},
                "avgPosition": {"$avg": "$positions"},
                "avgSalary": {"$avg": "$salary"},
                "minSalary": {"$min": "$salary"},
                "maxSalary": {"$max": "$salary"},
            }},
        ]))

    def apply_job(self, job_id: str, user: Dict, filename: Optional[str], content: Optional[bytes]) -> str:
        job = self._get_or_404(job_id, with_applicants=True, message='Job not found.')

        last_date = job.get("lastDate")
        if isinstance(last_date, datetime):
            if last_date.tzinfo is None:
                last_date = last_date.replace(tzinfo=timezone.utc)
            if last_date < datetime.now(timezone.utc):
                raise ErrorHandler('You can not apply to this job. Date is over.', 400)

        user_id = str(user["_id"])
        if any(a.get("id") == user_id for a in job.get("applicantsApplied") or []):
            raise ErrorHandler('You have already applied for this job.', 400)

        if not filename or content is None:
            raise ErrorHandler('Please upload file.', 400)

        self.storage.validate(filename, len(content))
        resume = self.storage.resume_name(user.get("name", "user"), str(job["_id"]), filename)
        self.storage.save(resume, content)

        self.jobs.update_one(
            {"_id": job["_id"]},
            {"$push": {"applicantsApplied": {"id": user_id, "resume": resume}}},
        )
        logger.info(f"User {user_id} applied to job {job_id} with {resume}")
        return resume
