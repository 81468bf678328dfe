"""
Student Registry — Student Route Handlers
==========================================

What:  The eight /students endpoints.
How:   Each handler receives a pooled session through Depends(get_db_session),
       makes one StudentService call, and returns the result. NotFoundError and
       DatabaseError raised by the service are turned into 404/500 responses by
       the global handlers in main.py.

Route Inventory:
    POST   /students                  create        201, 500
    GET    /students                  list          200, 500
    GET    /students/gender/{gender}  list by gender 200, 500
    GET    /students/course/{course}  list by course 200, 500
    GET    /students/name/{name}      get by name   200, 404, 500
    GET    /students/{student_id}     get by id     200, 404, 500
    PUT    /students/{student_id}     update        200, 404, 500
    DELETE /students/{student_id}     delete        200, 404, 500
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from student_registry.database import get_db_session
from student_registry.schemas.student import (
    ErrorResponse,
    MessageResponse,
    StudentCreate,
    StudentResponse,
    StudentUpdate,
)
from student_registry.services.student_service import student_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/students", tags=["Students"])

# The human-readable text ("Database error", "Student not found") is in `message`;
# `error` holds a machine code.
_DATABASE_ERROR = {
    500: {
        "description": 'Database error. Body: {"error": "database_error", "message": "Database error"}',
        "model": ErrorResponse,
    }
}
_NOT_FOUND = {
    404: {
        "description": 'Student not found. Body: {"error": "not_found", "message": "Student not found"}',
        "model": ErrorResponse,
    }
}


@router.post(
    "",
    response_model=StudentResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_DATABASE_ERROR,
    summary="Create a new student",
)
async def create_student(
    payload: StudentCreate,
    db: AsyncSession = Depends(get_db_session),
) -> StudentResponse:
    """Insert a student; the response includes the id assigned by storage."""
    return await student_service.create_student(db, payload)


@router.get(
    "",
    response_model=List[StudentResponse],
    responses=_DATABASE_ERROR,
    summary="Retrieve a list of students",
)
async def list_students(db: AsyncSession = Depends(get_db_session)) -> List[StudentResponse]:
    return await student_service.list_students(db)


# Filter routes are declared before /{student_id} so their literal prefixes
# are matched first.

@router.get(
    "/gender/{gender}",
    response_model=List[StudentResponse],
    responses=_DATABASE_ERROR,
    summary="Retrieve a list of students by gender",
)
async def list_students_by_gender(
    gender: str,
    db: AsyncSession = Depends(get_db_session),
) -> List[StudentResponse]:
    """Exact, case-sensitive match on gender (e.g. 'male', 'female'). No match gives []."""
    return await student_service.list_by_gender(db, gender)


@router.get(
    "/course/{course}",
    response_model=List[StudentResponse],
    responses=_DATABASE_ERROR,
    summary="Retrieve a list of students by course",
)
async def list_students_by_course(
    course: str,
    db: AsyncSession = Depends(get_db_session),
) -> List[StudentResponse]:
    """Exact, case-sensitive match on course. No match gives []."""
    return await student_service.list_by_course(db, course)


@router.get(
    "/name/{name}",
    response_model=StudentResponse,
    responses={**_NOT_FOUND, **_DATABASE_ERROR},
    summary="Find a student by name",
)
async def get_student_by_name(
    name: str,
    db: AsyncSession = Depends(get_db_session),
) -> StudentResponse:
    """
    Return one student with exactly this name.

    Names are not unique; when several students share it, any one of them
    is returned.
    """
    return await student_service.get_by_name(db, name)


@router.get(
    "/{student_id}",
    response_model=StudentResponse,
    responses={**_NOT_FOUND, **_DATABASE_ERROR},
    summary="Retrieve a single student by ID",
)
async def get_student(
    student_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> StudentResponse:
    return await student_service.get_student(db, student_id)


@router.put(
    "/{student_id}",
    response_model=StudentResponse,
    responses={**_NOT_FOUND, **_DATABASE_ERROR},
    summary="Update a student by ID",
)
async def update_student(
    student_id: int,
    payload: StudentUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> StudentResponse:
    """Replace name, age, course and gender. An unknown id is a 404; no row is created."""
    return await student_service.update_student(db, student_id, payload)


@router.delete(
    "/{student_id}",
    response_model=MessageResponse,
    responses={**_NOT_FOUND, **_DATABASE_ERROR},
    summary="Delete a student by ID",
)
async def delete_student(
    student_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    await student_service.delete_student(db, student_id)
    return MessageResponse(message="Student deleted successfully")
