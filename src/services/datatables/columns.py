import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, Literal, Mapping, Optional, Sequence, Tuple, Union

from markupsafe import Markup, escape

from .exceptions import ConfigurationError

DisplayFn = Callable[[Any], str]
LinkOption = Union[str, Callable[[Any], str]]
Shorthand = Literal["field", "name"]

COLUMN_OPTIONS = ("name", "field", "expression", "display", "link")

# Placeholder columns select a constant so every column has a select entry
EMPTY_EXPRESSION = "''"

_MISSING = object()


@dataclass(frozen=True)
class ColumnSpec:
    name: Optional[str] = None
    field: Optional[str] = None
    expression: Optional[str] = None
    display: Optional[DisplayFn] = None
    link: Optional[LinkOption] = None

    @property
    def select_entry(self) -> str:
        if isinstance(self.field, str):
            if self.name in (None, self.field):
                return self.field
            return f"{self.field} AS {self.name}"
        if isinstance(self.expression, str):
            return f"{self.expression} AS {self.name}"
        return f"{EMPTY_EXPRESSION} AS {self.name}"

    @property
    def searchable_in_query(self) -> bool:
        # A WHERE clause can't reference a custom expression's alias
        return isinstance(self.field, str)


def placeholder_name(index: int) -> str:
    return f"__col{index}"


def read_field(record: Any, name: Optional[str], strict: bool = False) -> Any:
    """
    Read a named value off a record: mappings by key, everything else
    (model instances, SQLAlchemy rows) by attribute.

    Missing values come back as None unless `strict`, in which case the
    KeyError/AttributeError is left to propagate.
    """
    if not isinstance(name, str):
        return None

    if isinstance(record, Mapping):
        if strict:
            return record[name]
        return record.get(name)

    value = getattr(record, name, _MISSING)
    if value is _MISSING:
        if strict:
            raise AttributeError(f"{type(record).__name__!r} record has no attribute {name!r}")
        return None
    return value


def default_display(column: ColumnSpec, strict: bool = False) -> DisplayFn:
    """Escape the column's value and optionally wrap it in a link."""

    def display(record: Any) -> str:
        value = read_field(record, column.name, strict=strict)
        output = escape("" if value is None else str(value))

        if column.link is not None:
            url = column.link(record) if callable(column.link) else column.link
            output = Markup('<a href="{}">{}</a>').format(url, output)

        return str(output)

    return display


def normalize_column(
    key: int,
    column_in: Union[None, str, Mapping[str, Any], ColumnSpec],
    shorthand: Shorthand = "field",
    strict: bool = False,
) -> ColumnSpec:
    """Turn one column option into a complete ColumnSpec."""
    if not column_in:
        column = ColumnSpec(name=placeholder_name(key), expression=EMPTY_EXPRESSION)
    elif isinstance(column_in, str):
        column = ColumnSpec(**{shorthand: column_in})
    elif isinstance(column_in, ColumnSpec):
        column = column_in
    elif isinstance(column_in, Mapping):
        unknown = set(column_in) - set(COLUMN_OPTIONS)
        if unknown:
            raise ConfigurationError(
                f"Invalid options for column {key}: unknown keys {sorted(unknown)}"
            )
        column = ColumnSpec(**column_in)
    else:
        raise ConfigurationError(
            f"Invalid options for column {key}: expected a string or mapping, "
            f"got {type(column_in).__name__}"
        )

    if not isinstance(column.name, str):
        name = column.field if isinstance(column.field, str) else placeholder_name(key)
        column = replace(column, name=name)

    if column.link is not None and not (isinstance(column.link, str) or callable(column.link)):
        raise ConfigurationError(f"Invalid options for column {key}: link must be a URL or callable")

    if not callable(column.display):
        column = replace(column, display=default_display(column, strict=strict))

    return column


def _is_index(key: Any) -> bool:
    return isinstance(key, int) and not isinstance(key, bool) and key >= 0


def normalize_columns(
    columns_in: Union[Sequence[Any], Mapping[Any, Any], None],
    column_count: int = 0,
    shorthand: Shorthand = "field",
    strict: bool = False,
) -> Tuple[ColumnSpec, ...]:
    """
    Normalize all columns, padding with placeholders up to `column_count`
    (and over any gaps in an index-keyed mapping).
    """
    if columns_in is None:
        columns_in = {}
    if isinstance(columns_in, Mapping):
        by_index: Dict[Any, Any] = dict(columns_in)
    elif isinstance(columns_in, (list, tuple)):
        by_index = dict(enumerate(columns_in))
    else:
        raise ConfigurationError("Invalid options: columns must be a list or an index-keyed mapping")

    for key in by_index:
        if not _is_index(key):
            logging.error(f"Rejecting column key {key!r}")
            raise ConfigurationError("Invalid options: column keys need to be numeric")

    size = max([column_count] + [key + 1 for key in by_index])
    return tuple(
        normalize_column(i, by_index.get(i), shorthand=shorthand, strict=strict)
        for i in range(size)
    )
