import re
from typing import Any, Dict, List, Literal, Mapping, Optional

from pydantic import BaseModel, ConfigDict

SORTABLE_KEY = re.compile(r"^bSortable_(\d+)$")

DEFAULT_DISPLAY_LENGTH = 10


def _to_int(value: Any, default: int) -> int:
    """DataTables sends every value as text; fall back to the default on junk."""
    if value is None:
        return default
    try:
        return int(str(value).strip())
    except ValueError:
        return default


def normalize_direction(direction: Any) -> Literal["ASC", "DESC"]:
    if isinstance(direction, str) and direction.strip().upper() == "ASC":
        return "ASC"
    return "DESC"


class SortInstruction(BaseModel):
    model_config = ConfigDict(frozen=True)

    column: int
    direction: Literal["ASC", "DESC"] = "DESC"


class RequestParams(BaseModel):
    """
    Typed view of the legacy DataTables.js server-side parameters.

    See: https://legacy.datatables.net/usage/server-side
    """

    model_config = ConfigDict(frozen=True)

    echo: str = ""
    display_start: int = 0
    display_length: int = DEFAULT_DISPLAY_LENGTH
    column_count: int = 0
    sorting: List[SortInstruction] = []
    sortable: Dict[int, bool] = {}
    search: str = ""

    @property
    def limit(self) -> Optional[int]:
        # iDisplayLength=-1 is "show all rows"
        if self.display_length < 0:
            return None
        return self.display_length

    def is_sortable(self, index: int) -> bool:
        return self.sortable.get(index, False)

    @classmethod
    def from_query_params(cls, params: Mapping[str, Any]) -> "RequestParams":
        """Parse the raw (all-text) request mapping once."""
        sorting = []
        for i in range(max(_to_int(params.get("iSortingCols"), 0), 0)):
            sorting.append(
                SortInstruction(
                    column=_to_int(params.get(f"iSortCol_{i}"), 0),
                    direction=normalize_direction(params.get(f"sSortDir_{i}")),
                )
            )

        # Only the literal string "true" marks a column as sortable
        sortable = {}
        for key, value in params.items():
            match = SORTABLE_KEY.match(str(key))
            if match:
                sortable[int(match.group(1))] = value == "true"

        echo = params.get("sEcho")
        search = params.get("sSearch")

        return cls(
            echo="" if echo is None else str(echo),
            display_start=max(_to_int(params.get("iDisplayStart"), 0), 0),
            display_length=_to_int(params.get("iDisplayLength"), DEFAULT_DISPLAY_LENGTH),
            column_count=max(_to_int(params.get("iColumns"), 0), 0),
            sorting=sorting,
            sortable=sortable,
            search="" if search is None else str(search),
        )
