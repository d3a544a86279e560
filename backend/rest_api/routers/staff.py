"""
Staff router.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from shared.infrastructure.db import get_db
from shared.utils.schemas import EmployeeCreate, EmployeeOutput
from rest_api.services.domain import CatalogService


router = APIRouter(prefix="/api/employees", tags=["staff"])


@router.get("", response_model=list[EmployeeOutput])
def list_employees(db: Session = Depends(get_db)) -> list[EmployeeOutput]:
    return CatalogService(db).list_employees()


@router.post("", response_model=EmployeeOutput, status_code=status.HTTP_201_CREATED)
def create_employee(body: EmployeeCreate, db: Session = Depends(get_db)) -> EmployeeOutput:
    return CatalogService(db).create_employee(body)
