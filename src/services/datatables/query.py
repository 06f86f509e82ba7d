import logging
from dataclasses import dataclass, replace
from typing import Any, List, Optional, Sequence, Tuple

from .columns import ColumnSpec
from .params import RequestParams

Conditions = Tuple[str, List[Any]]


@dataclass(frozen=True)
class QueryOptions:
    select: str
    order: Optional[str] = None
    offset: int = 0
    limit: Optional[int] = None
    conditions: Optional[Conditions] = None

    def for_count(self) -> "QueryOptions":
        """Same filter, no paging or ordering: counts the whole result set."""
        return replace(self, order=None, offset=0, limit=None)


def build_select(columns: Sequence[ColumnSpec], base_select_fields: Sequence[str] = ()) -> str:
    select_fields = list(base_select_fields) + [col.select_entry for col in columns]
    # dict.fromkeys keeps first-seen order
    return ", ".join(dict.fromkeys(select_fields))


def build_order(columns: Sequence[ColumnSpec], params: RequestParams) -> Optional[str]:
    order = []
    for sort in params.sorting:
        if not 0 <= sort.column < len(columns):
            continue
        if params.is_sortable(sort.column):
            order.append(f"{columns[sort.column].name} {sort.direction}")
    return ", ".join(order) or None


def build_conditions(columns: Sequence[ColumnSpec], params: RequestParams) -> Optional[Conditions]:
    """LIKE '%term%' over every declared column backed by a real field."""
    if params.search == "":
        return None

    clauses = []
    values = []
    for col in columns[:params.column_count]:
        if not col.searchable_in_query:
            continue
        clauses.append(f"{col.field} LIKE ?")
        values.append(f"%{params.search}%")

    if not clauses:
        return None
    return " OR ".join(clauses), values


def build_query_options(
    columns: Sequence[ColumnSpec],
    params: RequestParams,
    base_select_fields: Sequence[str] = (),
    filter_in_query: bool = False,
) -> QueryOptions:
    options = QueryOptions(
        select=build_select(columns, base_select_fields),
        order=build_order(columns, params),
        offset=params.display_start,
        limit=params.limit,
        conditions=build_conditions(columns, params) if filter_in_query else None,
    )
    logging.debug(f"Built query options: {options}")
    return options
