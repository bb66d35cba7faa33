# jobbee/database/query.py
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Optional, Protocol, Tuple

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING, DESCENDING

__all__ = ["ASCENDING", "DESCENDING", "QueryableHandle", "MongoQuery", "QueryCastError"]

SortSpec = List[Tuple[str, int]]


class QueryCastError(ValueError):
    """A query-string value could not be converted to the field's type."""

    def __init__(self, field: str, value: Any):
        self.field = field
        self.value = value
        super().__init__(f"Invalid value for {field}: {value!r}")


class QueryableHandle(Protocol):
    def with_filter(self, predicate: Dict[str, Any]) -> "QueryableHandle": ...
    def with_text_search(self, phrase: str) -> "QueryableHandle": ...
    def with_sort(self, specs: SortSpec) -> "QueryableHandle": ...
    def with_projection(self, include: Optional[Iterable[str]] = None,
                        exclude: Optional[Iterable[str]] = None) -> "QueryableHandle": ...
    def with_skip(self, n: int) -> "QueryableHandle": ...
    def with_limit(self, n: int) -> "QueryableHandle": ...
    def execute(self) -> List[Dict[str, Any]]: ...


def to_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value).replace('Z', '+00:00'))


def to_number(value: Any):
    if isinstance(value, (int, float)):
        return value
    text = str(value).strip()
    try:
        return int(text)
    except ValueError:
        return float(text)


def to_object_id(value: Any) -> ObjectId:
    if isinstance(value, ObjectId):
        return value
    return ObjectId(str(value).strip())


class MongoQuery:
    """
    Deferred read against a pymongo collection.

    Every ``with_*`` call overwrites its own stage, so stages never leak into
    each other and repeating one is harmless. ``field_types`` maps field paths
    to casters applied to filter values at execution; ``hidden_fields`` are
    never returned.
    """

    def __init__(self, collection, field_types: Optional[Dict[str, Callable]] = None,
                 hidden_fields: Iterable[str] = ()):
        self.collection = collection
        self.field_types = field_types or {}
        self.hidden_fields = tuple(hidden_fields)

        self._filter: Dict[str, Any] = {}
        self._text: Optional[str] = None
        self._sort: SortSpec = []
        self._include: List[str] = []
        self._exclude: List[str] = []
        self._skip = 0
        self._limit = 0

    def with_filter(self, predicate):
        self._filter = dict(predicate)
        return self

    def with_text_search(self, phrase):
        self._text = phrase
        return self

    def with_sort(self, specs):
        self._sort = list(specs)
        return self

    def with_projection(self, include=None, exclude=None):
        self._include = list(include or [])
        self._exclude = list(exclude or [])
        return self

    def with_skip(self, n):
        self._skip = n
        return self

    def with_limit(self, n):
        self._limit = n
        return self

    # ---- building ----

    def _cast(self, field: str, value: Any):
        caster = self.field_types.get(field)
        if caster is None:
            return value
        if isinstance(value, list):
            return [self._cast(field, v) for v in value]
        if isinstance(value, dict):
            return {op: self._cast(field, v) for op, v in value.items()}
        try:
            return caster(value)
        except (TypeError, ValueError, InvalidId):
            raise QueryCastError(field, value)

    def build_filter(self) -> Dict[str, Any]:
        conditions = {field: self._cast(field, value) for field, value in self._filter.items()}
        if self._text:
            conditions["$text"] = {"$search": self._text}
        return conditions

    def build_projection(self) -> Optional[Dict[str, int]]:
        if self._include:
            include = [f for f in self._include if f not in self.hidden_fields]
            # An inclusion naming only hidden fields still returns just the identifier
            return {f: 1 for f in include} or {"_id": 1}

        exclude = list(dict.fromkeys(self._exclude + list(self.hidden_fields)))
        if exclude:
            return {f: 0 for f in exclude}
        return None

    def execute(self) -> List[Dict[str, Any]]:
        cursor = self.collection.find(self.build_filter(), self.build_projection())
        if self._sort:
            cursor = cursor.sort(self._sort)
        if self._skip:
            cursor = cursor.skip(self._skip)
        if self._limit:
            cursor = cursor.limit(self._limit)
        return list(cursor)
