# jobbee/services/pipeline.py
"""
Derived fields computed before a record is written.

Each step takes a document and returns a new one, touching only the keys it
owns and only when their source key is present, so the same pipeline serves
inserts and partial updates.
"""
import re
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict

from jobbee.services.security import hash_password as _hash

Document = Dict[str, Any]
Step = Callable[[Document], Document]

LAST_DATE_DAYS = 7


def run_pipeline(doc: Document, *steps: Step) -> Document:
    for step in steps:
        doc = step(doc)
    return doc


def slugify(text: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", text.lower())
    return slug.strip("-")


def apply_job_defaults(doc: Document) -> Document:
    now = datetime.now(timezone.utc)
    out = dict(doc)
    out.setdefault("positions", 1)
    out.setdefault("postingDate", now)
    if out.get("lastDate") is None:
        out["lastDate"] = now + timedelta(days=LAST_DATE_DAYS)
    out.setdefault("__v", 0)
    return out


def normalize_dates(doc: Document) -> Document:
    out = dict(doc)
    for key in ("postingDate", "lastDate"):
        value = out.get(key)
        if isinstance(value, datetime) and value.tzinfo is None:
            out[key] = value.replace(tzinfo=timezone.utc)
    return out


def slugify_title(doc: Document) -> Document:
    if not doc.get("title"):
        return doc
    out = dict(doc)
    out["slug"] = slugify(out["title"])
    return out


def geocode_address(geocoder) -> Step:
    """Build a step that resolves ``address`` into a GeoJSON ``location``."""

    def step(doc: Document) -> Document:
        if not doc.get("address"):
            return doc
        loc = geocoder.geocode(doc["address"])
        out = dict(doc)
        out["location"] = {
            "type": "Point",
            "coordinates": [loc.longitude, loc.latitude],
            "formattedAddress": loc.formattedAddress,
            "city": loc.city,
            "state": loc.stateCode,
            "zipcode": loc.zipcode,
            "country": loc.countryCode,
        }
        return out

    return step


def hash_password(doc: Document) -> Document:
    if not doc.get("password"):
        return doc
    out = dict(doc)
    out["password"] = _hash(out["password"])
    return out


def apply_user_defaults(doc: Document) -> Document:
    out = dict(doc)
    out.setdefault("role", "user")
    out.setdefault("createdAt", datetime.now(timezone.utc))
    out.setdefault("__v", 0)
    return out
