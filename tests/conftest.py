"""Shared test configuration.

Environment defaults are set before any ``jobbee`` module reads ``Config``.
"""

import os

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("GEOCODER_API_KEY", "test-key")

import pytest  # noqa: E402
from bson import ObjectId  # noqa: E402


class RecordingQuery:
    """Queryable handle that records the last call of each stage."""

    def __init__(self):
        self.calls = []
        self.filter = None
        self.text = None
        self.sort = None
        self.projection = None
        self.skip = None
        self.limit = None

    def with_filter(self, predicate):
        self.calls.append("filter")
        self.filter = predicate
        return self

    def with_text_search(self, phrase):
        self.calls.append("text")
        self.text = phrase
        return self

    def with_sort(self, specs):
        self.calls.append("sort")
        self.sort = specs
        return self

    def with_projection(self, include=None, exclude=None):
        self.calls.append("projection")
        self.projection = {"include": include, "exclude": exclude}
        return self

    def with_skip(self, n):
        self.calls.append("skip")
        self.skip = n
        return self

    def with_limit(self, n):
        self.calls.append("limit")
        self.limit = n
        return self

    def execute(self):
        return []


@pytest.fixture
def recording_query():
    return RecordingQuery()


@pytest.fixture
def employer():
    return {"_id": ObjectId(), "name": "Jane Employer", "email": "jane@acme.com", "role": "employeer"}


@pytest.fixture
def candidate():
    return {"_id": ObjectId(), "name": "John Smith", "email": "john@example.com", "role": "user"}


@pytest.fixture
def admin():
    return {"_id": ObjectId(), "name": "Root", "email": "root@jobbee.com", "role": "admin"}


@pytest.fixture
def make_query():
    return RecordingQuery
