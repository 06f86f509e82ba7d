from typing import Any, List

from pydantic import BaseModel


class DataTablesResponse(BaseModel):
    sEcho: str
    iTotalRecords: int
    iTotalDisplayRecords: int
    aaData: List[List[Any]]
