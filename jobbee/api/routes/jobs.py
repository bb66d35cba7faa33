# jobbee/api/routes/jobs.py
from fastapi import APIRouter, Depends, File, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from typing import Optional

from jobbee.api.deps import authorize_roles, get_job_service
from jobbee.api.responses import listing, success
from jobbee.errors import ErrorHandler
from jobbee.models.job import JobCreate, JobUpdate
from jobbee.services.api_filters import parse_query_params
from jobbee.services.job_service import JobService

router = APIRouter()


@router.get("/jobs")
def get_jobs(request: Request, job_service: JobService = Depends(get_job_service)):
    params = parse_query_params(request.query_params.multi_items())
    return listing(job_service.list_jobs(params))


@router.get("/job/{job_id}/{slug}")
def get_job(job_id: str, slug: str, job_service: JobService = Depends(get_job_service)):
    return success(data=job_service.get_job(job_id, slug))


@router.get("/jobs/{zipcode}/{distance}")
def get_jobs_in_radius(zipcode: str, distance: float, job_service: JobService = Depends(get_job_service)):
    return listing(job_service.jobs_in_radius(zipcode, distance))


@router.get("/stats/{topic}")
def job_stats(topic: str, job_service: JobService = Depends(get_job_service)):
    stats = job_service.job_stats(topic)
    if not stats:
        raise ErrorHandler(f"No stats found for - {topic}", 200)
    return success(data=stats)


@router.post("/job/new")
def new_job(
    job: JobCreate,
    user: dict = Depends(authorize_roles("employeer", "admin")),
    job_service: JobService = Depends(get_job_service),
):
    return success(data=job_service.create_job(job, user), message="Job Created.")


@router.put("/job/{job_id}/apply")
async def apply_job(
    job_id: str,
    file: Optional[UploadFile] = File(None),
    user: dict = Depends(authorize_roles("user")),
    job_service: JobService = Depends(get_job_service),
):
    content = await file.read() if file else None
    filename = file.filename if file else None
    resume = await run_in_threadpool(job_service.apply_job, job_id, user, filename, content)
    return success(data=resume, message="Applied to Job successfully.")


@router.put("/job/{job_id}")
def update_job(
    job_id: str,
    job: JobUpdate,
    user: dict = Depends(authorize_roles("employeer", "admin")),
    job_service: JobService = Depends(get_job_service),
):
    return success(data=job_service.update_job(job_id, job, user), message="Job is updated.")


@router.delete("/job/{job_id}")
def delete_job(
    job_id: str,
    user: dict = Depends(authorize_roles("employeer", "admin")),
    job_service: JobService = Depends(get_job_service),
):
    job_service.delete_job(job_id, user)
    return success(message="Job is deleted.")
