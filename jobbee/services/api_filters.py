# jobbee/services/api_filters.py
import re
from typing import Any, Dict, Iterable, List, Tuple

from jobbee.config import Config
from jobbee.database.query import ASCENDING, DESCENDING, QueryableHandle

# Keys consumed by the other stages, never treated as field filters
RESERVED_KEYS = ('sort', 'fields', 'q', 'limit', 'page')

# Comparison keywords accepted one level below a field name: ?salary[gte]=50
OPERATORS = ('gt', 'gte', 'lt', 'lte', 'in')
OPERATOR_SIGIL = '$'

DEFAULT_SORT = '-postingDate'
VERSION_FIELD = '__v'

_BRACKETS = re.compile(r'\[([^\[\]]*)\]')
_LEADING_INT = re.compile(r'^\s*([+-]?\d+)')


def parse_query_params(items: Iterable[Tuple[str, str]]) -> Dict[str, Any]:
    """
    Turn flat query-string pairs into nested raw parameters.

    ``price[gte]=50`` becomes ``{"price": {"gte": "50"}}`` and repeated keys
    collect into lists. Key segments starting with ``$`` are dropped so a
    caller cannot smuggle engine operators in directly.
    """
    params: Dict[str, Any] = {}
    for key, value in items:
        if key.endswith('[]'):
            key = key[:-2]
        head = key.split('[', 1)[0]
        path = [head] + _BRACKETS.findall(key[len(head):])
        if any(not part or part.startswith(OPERATOR_SIGIL) for part in path):
            continue

        node = params
        for part in path[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child

        leaf = path[-1]
        if leaf in node and not isinstance(node[leaf], dict):
            existing = node[leaf]
            node[leaf] = existing + [value] if isinstance(existing, list) else [existing, value]
        else:
            node[leaf] = value
    return params


def _parse_int(value: Any):
    """Lenient base-10 parse: leading digits win, anything else is None."""
    if isinstance(value, list):
        value = value[-1] if value else None
    if value is None:
        return None
    match = _LEADING_INT.match(str(value))
    return int(match.group(1)) if match else None


def _split_csv(value: Any) -> List[str]:
    if isinstance(value, list):
        value = ','.join(str(v) for v in value)
    return [part.strip() for part in str(value).split(',') if part.strip()]


class APIFilters:
    """
    Narrows a queryable handle from raw request parameters.

    Each stage replaces the stored handle and returns ``self`` so routes can
    chain only the stages they need:

        APIFilters(query, params).filter().sort().limit_fields().pagination()

    Nothing is executed here; the caller runs ``apifilters.query.execute()``.
    """

    def __init__(self, query: QueryableHandle, query_str: Dict[str, Any]):
        self.query = query
        self.query_str = dict(query_str or {})

    def filter(self):
        query_copy = {k: v for k, v in self.query_str.items() if k not in RESERVED_KEYS}

        predicate: Dict[str, Any] = {}
        for field, value in query_copy.items():
            self._add_clause(predicate, field, value)

        if predicate:
            self.query = self.query.with_filter(predicate)
        return self

    def _add_clause(self, predicate: Dict[str, Any], path: str, value: Any):
        if not isinstance(value, dict):
            if isinstance(value, list):
                predicate[path] = {OPERATOR_SIGIL + 'in': list(value)}
            else:
                predicate[path] = value
            return

        comparisons = {}
        for key, sub_value in value.items():
            if key in OPERATORS:
                if key == 'in':
                    sub_value = _split_csv(sub_value)
                elif isinstance(sub_value, list):
                    sub_value = sub_value[-1]
                comparisons[OPERATOR_SIGIL + key] = sub_value
            else:
                # Non-operator nesting addresses a sub-document field
                self._add_clause(predicate, f"{path}.{key}", sub_value)

        if comparisons:
            predicate[path] = comparisons

    @staticmethod
    def _sort_specs(sort_by: Any) -> List[Tuple[str, int]]:
        specs = []
        for field in _split_csv(sort_by):
            if field.startswith('-'):
                name, direction = field[1:].strip(), DESCENDING
            else:
                name, direction = field.lstrip('+').strip(), ASCENDING
            if name:
                specs.append((name, direction))
        return specs

    def sort(self):
        specs = self._sort_specs(self.query_str.get('sort') or DEFAULT_SORT)
        if not specs:
            specs = self._sort_specs(DEFAULT_SORT)

        self.query = self.query.with_sort(specs)
        return self

    def limit_fields(self):
        fields = _split_csv(self.query_str['fields']) if self.query_str.get('fields') else []

        if fields:
            self.query = self.query.with_projection(include=fields)
        else:
            self.query = self.query.with_projection(exclude=[VERSION_FIELD])
        return self

    def search_by_query(self):
        q = self.query_str.get('q')
        if isinstance(q, list):
            q = q[-1] if q else None

        if q:
            phrase = ' '.join(str(q).split('-'))
            self.query = self.query.with_text_search(f'"{phrase}"')
        return self

    def pagination(self):
        page = _parse_int(self.query_str.get('page')) or 1
        limit = _parse_int(self.query_str.get('limit')) or Config.DEFAULT_PAGE_LIMIT

        # Always produce a usable page
        if page < 1:
            page = 1
        if limit < 1:
            limit = Config.DEFAULT_PAGE_LIMIT
        limit = min(limit, Config.MAX_PAGE_LIMIT)

        skip_results = (page - 1) * limit
        self.query = self.query.with_skip(skip_results).with_limit(limit)
        return self
