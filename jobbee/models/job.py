# jobbee/models/job.py
from pydantic import BaseModel, EmailStr, Field
from typing import List, Literal, Optional
from datetime import datetime

from jobbee.database.query import to_datetime, to_number, to_object_id

Industry = Literal[
    "Business",
    "Information Technology",
    "Banking",
    "Education/Training",
    "Telecommunication",
    "Others",
]
JobType = Literal["Permanent", "Temporary", "Internship"]
Education = Literal["Bachelors", "Masters", "Phd"]
Experience = Literal["No Experience", "1 Year - 2 Years", "2 Year - 5 Years", "5 Years+"]

# Casters for query-string filters on the jobs collection
JOB_FIELD_TYPES = {
    "_id": to_object_id,
    "user": to_object_id,
    "salary": to_number,
    "positions": to_number,
    "postingDate": to_datetime,
    "lastDate": to_datetime,
    "location.coordinates": to_number,
}

# Only returned by the endpoints that ask for it explicitly
JOB_HIDDEN_FIELDS = ("applicantsApplied",)


class JobCreate(BaseModel):
    title: str = Field(min_length=1, max_length=100)
    description: str = Field(min_length=1, max_length=1000)
    email: Optional[EmailStr] = None
    address: str = Field(min_length=1)
    company: str = Field(min_length=1)
    industry: List[Industry] = Field(min_length=1)
    jobType: JobType
    minEducation: Education
    positions: int = 1
    experience: Experience
    salary: int
    lastDate: Optional[datetime] = None


class JobUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, min_length=1, max_length=1000)
    email: Optional[EmailStr] = None
    address: Optional[str] = Field(default=None, min_length=1)
    company: Optional[str] = None
    industry: Optional[List[Industry]] = None
    jobType: Optional[JobType] = None
    minEducation: Optional[Education] = None
    positions: Optional[int] = None
    experience: Optional[Experience] = None
    salary: Optional[int] = None
    lastDate: Optional[datetime] = None
