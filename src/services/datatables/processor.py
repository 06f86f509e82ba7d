import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Literal, Mapping, Optional, Tuple, Union

from sqlmodel import Session

from src.common.model_registry import Queryable, resolve_model

from .columns import ColumnSpec, normalize_columns
from .exceptions import ConfigurationError, RenderError, SerializationError
from .params import RequestParams
from .query import QueryOptions, build_query_options
from .schema import DataTablesResponse

SearchMode = Literal["rendered", "query"]

SEARCH_MODES = ("rendered", "query")
SHORTHANDS = ("field", "name")
OPTION_KEYS = ("model", "select", "columns", "search_mode", "shorthand", "strict_fields")


@dataclass(frozen=True)
class TableConfig:
    model_reference: Any
    model: Queryable
    base_select_fields: Tuple[str, ...]
    columns: Tuple[ColumnSpec, ...]
    search_mode: SearchMode = "rendered"
    strict_fields: bool = False


class TableQueryProcessor:
    """
    Server-side processing for a DataTables.js table backed by a model.

    Options:
        - model: registered model name, SQLModel table class, or any class
          with ActiveRecord-style `all(options)` / `count(options)`.
        - select: extra select expressions, selected before the columns.
        - columns: list (or index-keyed mapping) of column specs. Each is
          empty, a bare string (see `shorthand`), a ColumnSpec, or a mapping
          with any of:
            - name: alias used for ordering and for the default display
            - field: real model column
            - expression: raw SQL expression selected AS name
            - display: callable(record) -> str, overrides `link`
            - link: URL string or callable(record) -> URL
        - search_mode: "rendered" (filter on the rendered cells of the
          fetched page) or "query" (LIKE conditions on field columns).
        - shorthand: whether a bare string column means `field` or `name`.
        - strict_fields: raise RenderError when a default display can't find
          its attribute, instead of rendering an empty cell.

    Usage:
        dt = TableQueryProcessor(request_params, {"model": Person, "columns": ["name"]}, session=session)
        return dt.output()
    """

    def __init__(
        self,
        params: Union[Mapping[str, Any], RequestParams],
        options: Optional[Mapping[str, Any]] = None,
        session: Optional[Session] = None,
    ):
        if isinstance(params, RequestParams):
            self._params = params
        else:
            self._params = RequestParams.from_query_params(params)
        self._config = self._parse_options(dict(options or {}), session)
        self._output: Optional[Dict[str, Any]] = None

        logging.info(
            f"DataTables processor ready for model '{self._config.model_reference}' "
            f"with {len(self._config.columns)} columns"
        )

    @classmethod
    def standard(
        cls,
        request,
        options: Optional[Mapping[str, Any]] = None,
        session: Optional[Session] = None,
    ) -> "TableQueryProcessor":
        """Build a processor from a FastAPI/Starlette request's query string."""
        return cls(dict(request.query_params), options, session=session)

    @property
    def params(self) -> RequestParams:
        return self._params

    @property
    def config(self) -> TableConfig:
        return self._config

    def _parse_options(self, options: Dict[str, Any], session: Optional[Session]) -> TableConfig:
        unknown = set(options) - set(OPTION_KEYS)
        if unknown:
            raise ConfigurationError(f"Invalid options: unknown keys {sorted(unknown)}")

        model_reference = options.get("model")
        try:
            model = resolve_model(model_reference, session=session)
        except ValueError as e:
            logging.error(str(e))
            raise ConfigurationError(str(e)) from e
        if model is None:
            logging.error(f"No such model class '{model_reference}'")
            raise ConfigurationError(f"No such model class '{model_reference}'.")

        search_mode = options.get("search_mode", "rendered")
        if search_mode not in SEARCH_MODES:
            raise ConfigurationError(f"Invalid options: search_mode must be one of {SEARCH_MODES}")

        shorthand = options.get("shorthand", "field")
        if shorthand not in SHORTHANDS:
            raise ConfigurationError(f"Invalid options: shorthand must be one of {SHORTHANDS}")

        select = options.get("select") or ()
        if isinstance(select, str):
            select = [select]

        strict_fields = bool(options.get("strict_fields", False))
        columns = normalize_columns(
            options.get("columns"),
            column_count=self._params.column_count,
            shorthand=shorthand,
            strict=strict_fields,
        )

        return TableConfig(
            model_reference=getattr(model_reference, "__name__", model_reference),
            model=model,
            base_select_fields=tuple(select),
            columns=columns,
            search_mode=search_mode,
            strict_fields=strict_fields,
        )

    def query_options(self) -> QueryOptions:
        return build_query_options(
            self._config.columns,
            self._params,
            base_select_fields=self._config.base_select_fields,
            filter_in_query=self._config.search_mode == "query",
        )

    def _get_cell(self, record: Any, index: int) -> Any:
        """Rendered value of column `index` for `record`; "" past the last column."""
        columns = self._config.columns
        if not 0 <= index < len(columns):
            return ""

        column = columns[index]
        try:
            return column.display(record)
        except (AttributeError, KeyError) as e:
            logging.error(f"Failed to render column '{column.name}': {e}")
            raise RenderError(column.name) from e

    def _render(self, records) -> List[List[Any]]:
        column_count = self._params.column_count
        return [
            [self._get_cell(record, i) for i in range(column_count)]
            for record in records
        ]

    def _filter_rendered(self, data: List[List[Any]]) -> List[List[Any]]:
        search = self._params.search
        # Case-sensitive substring match on what the user actually sees
        filtered = [row for row in data if any(search in str(cell) for cell in row)]
        logging.info(f"Rendered-value search '{search}' kept {len(filtered)} of {len(data)} rows")
        return filtered

    def _process(self):
        model = self._config.model
        query_options = self.query_options()

        records = list(model.all(query_options))
        records_total = int(model.count(query_options.for_count()))
        logging.info(f"Fetched {len(records)} rows ({records_total} total)")

        data = self._render(records)

        if self._params.search and query_options.conditions is None:
            data = self._filter_rendered(data)

        self._output = {
            "sEcho": self._params.echo,
            "iTotalRecords": records_total,
            # Not recomputed after the rendered-value filter
            "iTotalDisplayRecords": records_total,
            "aaData": data,
        }

    def output(self) -> Dict[str, Any]:
        """Return the output values to be submitted to DataTables on the client."""
        if self._output is None:
            self._process()
        return dict(self._output)

    def output_json(self) -> str:
        output = self.output()
        try:
            return json.dumps(output, allow_nan=False)
        except (TypeError, ValueError) as e:
            logging.error(f"Could not serialize DataTables output: {e}")
            raise SerializationError(str(e)) from e

    def output_response(self) -> DataTablesResponse:
        return DataTablesResponse(**self.output())
