import logging
import os
from typing import List, Optional

from dotenv import load_dotenv
from fastapi import APIRouter, Depends, HTTPException, Request
from pydantic import BaseModel
from sqlmodel import select

from src.common.db import Person, SessionDepType, get_session
from src.services.datatables import DataTablesError, DataTablesResponse, TableQueryProcessor

load_dotenv()

SEARCH_MODE = os.getenv("DATATABLES_SEARCH_MODE", "rendered")

router = APIRouter(prefix="/v1/api/people", tags=["people"])


class PersonCreate(BaseModel):
    name: str
    age: Optional[int] = None
    email: Optional[str] = None
    homepage: Optional[str] = None


def people_table_options() -> dict:
    """Column layout of the people table on the front-end."""
    return {
        "model": Person,
        "select": ["person_id"],
        "search_mode": SEARCH_MODE,
        "columns": [
            {"field": "name", "link": lambda person: f"/people/{person.person_id}"},
            "age",
            {"field": "email"},
            {"expression": "age + 1", "name": "age_next_year"},
            {"field": "homepage", "link": lambda person: person.homepage or "#"},
        ],
    }


@router.get("", response_model=List[Person])
def get_people(session: SessionDepType = Depends(get_session)):
    """Get all people"""
    people = session.exec(select(Person).order_by(Person.name)).all()
    return people


@router.post("", response_model=Person)
def create_person(person: PersonCreate, session: SessionDepType = Depends(get_session)):
    """Create a new person"""
    new_person = Person(
        name=person.name,
        age=person.age,
        email=person.email,
        homepage=person.homepage,
    )
    session.add(new_person)
    session.commit()
    session.refresh(new_person)
    return new_person


@router.post("/{person_id}/delete")
def delete_person(person_id: str, session: SessionDepType = Depends(get_session)):
    """Delete a person"""
    person = session.exec(select(Person).where(Person.person_id == person_id)).first()
    if not person:
        raise HTTPException(status_code=404, detail="Person not found")

    session.delete(person)
    session.commit()
    return {"status": "success", "message": f"Person {person_id} deleted"}


@router.get("/datatables", response_model=DataTablesResponse)
def get_people_datatable(request: Request, session: SessionDepType = Depends(get_session)):
    """Server-side processing endpoint for the people DataTable"""
    try:
        datatable = TableQueryProcessor.standard(request, people_table_options(), session=session)
        return datatable.output_response()
    except DataTablesError as e:
        logging.error(f"Error processing people datatable: {e}")
        raise HTTPException(status_code=500, detail=f"Error processing datatables: {str(e)}")
