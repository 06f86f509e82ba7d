import logging
from typing import Any, Dict, List, Optional, Protocol, Sequence, runtime_checkable

from sqlalchemy import func, select, text
from sqlmodel import Session, SQLModel

from src.common.db import Person


@runtime_checkable
class Queryable(Protocol):
    """Anything the processor can read rows and counts from."""

    def all(self, options) -> Sequence[Any]: ...

    def count(self, options) -> int: ...


MODEL_REGISTRY: Dict[str, type] = {}


def register_model(model_cls: type, name: Optional[str] = None) -> type:
    """Make a model resolvable by class name (and table name, if it has one)."""
    MODEL_REGISTRY[name or model_cls.__name__] = model_cls
    table_name = getattr(model_cls, "__tablename__", None)
    if isinstance(table_name, str):
        MODEL_REGISTRY.setdefault(table_name, model_cls)
    return model_cls


def _positional_to_named(clause: str, params: List[Any]):
    """Rewrite `?` placeholders to `:p0`, `:p1`, ... bind names."""
    pieces = clause.split("?")
    if len(pieces) - 1 != len(params):
        raise ValueError(
            f"Condition has {len(pieces) - 1} placeholders but {len(params)} parameters"
        )
    named = pieces[0]
    binds = {}
    for i, piece in enumerate(pieces[1:]):
        named += f":p{i}{piece}"
        binds[f"p{i}"] = params[i]
    return named, binds


class SQLModelQueryable:
    """Runs QueryOptions against an SQLModel table through a session."""

    def __init__(self, model_cls: type, session: Session):
        self.model_cls = model_cls
        self.session = session

    @property
    def table(self):
        return self.model_cls.__table__

    def _where(self, stmt, options):
        conditions = getattr(options, "conditions", None)
        if conditions:
            clause, params = conditions
            named, binds = _positional_to_named(clause, list(params))
            stmt = stmt.where(text(named).bindparams(**binds))
        return stmt

    def all(self, options) -> List[Any]:
        select_clause = getattr(options, "select", None) or "*"
        stmt = select(text(select_clause)).select_from(self.table)
        stmt = self._where(stmt, options)

        if getattr(options, "order", None):
            stmt = stmt.order_by(text(options.order))
        if getattr(options, "offset", None):
            stmt = stmt.offset(options.offset)
        if getattr(options, "limit", None) is not None:
            stmt = stmt.limit(options.limit)

        logging.debug(f"Fetching rows from '{self.table.name}': {stmt}")
        return list(self.session.exec(stmt).all())

    def count(self, options) -> int:
        stmt = select(func.count()).select_from(self.table)
        stmt = self._where(stmt, options)
        return int(self.session.exec(stmt).scalar_one())


def resolve_model(model_reference: Any, session: Optional[Session] = None) -> Optional[Queryable]:
    """
    Resolve a model reference to something exposing `all` and `count`.

    Accepts a registered name, a class that already implements the
    ActiveRecord-style `all`/`count` pair, or an SQLModel table class (which
    needs a session). Returns None when nothing usable is found, and raises
    ValueError for an SQLModel table given without a session.
    """
    model_cls = model_reference
    if isinstance(model_reference, str):
        model_cls = MODEL_REGISTRY.get(model_reference)
    if model_cls is None:
        return None

    if callable(getattr(model_cls, "all", None)) and callable(getattr(model_cls, "count", None)):
        return model_cls

    if isinstance(model_cls, type) and issubclass(model_cls, SQLModel) and hasattr(model_cls, "__table__"):
        if session is None:
            raise ValueError(f"Model '{model_cls.__name__}' needs a session to be queried")
        return SQLModelQueryable(model_cls, session)

    return None


register_model(Person)
