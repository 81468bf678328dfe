"""
Student Registry — Student Service
===================================

What:  One method per record operation, each issuing exactly one statement.
Why:   Keeps SQL and storage-error translation out of the route handlers.
How:   Receives the request's AsyncSession, executes a single SELECT, INSERT,
       UPDATE or DELETE (writes use RETURNING so no follow-up read is needed),
       and converts the outcome into a response model or an application error.
Who:   Called by the /students route handlers.

Error Handling Strategy:
    - Zero matching rows where a row is required → NotFoundError (404)
    - Any SQLAlchemy or connection failure → DatabaseError (500); the underlying
      error is logged here with its traceback and never leaves the server
    - Nothing is retried

Design Decision:
    StudentService is stateless. The session arrives with each call, so
    concurrent requests share nothing but the pool behind the session.
"""

import asyncio
import logging
from typing import Any, List, NoReturn

from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from student_registry.exceptions import DatabaseError, NotFoundError
from student_registry.models.student import Student
from student_registry.schemas.student import (
    StudentCreate,
    StudentResponse,
    StudentUpdate,
)

logger = logging.getLogger(__name__)

# Driver-level connect failures (refused, unreachable, timed out) reach us
# unwrapped; everything else the database rejects is a SQLAlchemyError.
STORAGE_ERRORS = (SQLAlchemyError, OSError, asyncio.TimeoutError)


class StudentService:
    """
    Statement layer for the students table.

    Responsibilities:
        - create_student / update_student / delete_student: single-statement writes
        - get_student / get_by_name: single-row lookups (404 when absent)
        - list_students / list_by_gender / list_by_course: multi-row reads
          (empty list when nothing matches, never 404)
    """

    @staticmethod
    def _storage_failure(operation: str, exc: Exception, **context: Any) -> NoReturn:
        logger.error("Database error during %s: %s", operation, exc, exc_info=True)
        raise DatabaseError(
            context={"operation": operation, "error_type": type(exc).__name__, **context},
        ) from exc

    async def _fetch_all(self, db: AsyncSession, operation: str, statement) -> List[StudentResponse]:
        try:
            result = await db.execute(statement)
            students = result.scalars().all()
        except STORAGE_ERRORS as e:
            self._storage_failure(operation, e)
        return [StudentResponse.model_validate(student) for student in students]

    # ── Writes ────────────────────────────────────────────────────────────

    async def create_student(self, db: AsyncSession, data: StudentCreate) -> StudentResponse:
        """
        Insert one row and return it with the id storage assigned.

        Statement:
            INSERT INTO students (name, age, course, gender)
            VALUES (:name, :age, :course, :gender) RETURNING *
        """
        try:
            result = await db.execute(
                insert(Student).values(**data.model_dump()).returning(Student)
            )
            student = result.scalar_one()
            response = StudentResponse.model_validate(student)
            await db.commit()
        except STORAGE_ERRORS as e:
            self._storage_failure("create_student", e)

        logger.info("Student %d created", response.id)
        return response

    async def update_student(
        self, db: AsyncSession, student_id: int, data: StudentUpdate
    ) -> StudentResponse:
        """
        Replace all four fields of the row with the given id.

        Statement:
            UPDATE students SET name = :name, age = :age, course = :course,
            gender = :gender WHERE id = :id RETURNING *

        Raises:
            NotFoundError: zero rows affected (nothing is created)
            DatabaseError: statement or commit failed
        """
        try:
            result = await db.execute(
                update(Student)
                .where(Student.id == student_id)
                .values(**data.model_dump())
                .returning(Student)
                .execution_options(synchronize_session=False)
            )
            student = result.scalar_one_or_none()
            if student is None:
                raise NotFoundError(lookup={"id": student_id})
            response = StudentResponse.model_validate(student)
            await db.commit()
        except STORAGE_ERRORS as e:
            self._storage_failure("update_student", e, student_id=student_id)

        logger.info("Student %d updated", student_id)
        return response

    async def delete_student(self, db: AsyncSession, student_id: int) -> None:
        """
        Remove the row with the given id.

        Statement:
            DELETE FROM students WHERE id = :id RETURNING id

        Raises:
            NotFoundError: zero rows affected
            DatabaseError: statement or commit failed
        """
        try:
            result = await db.execute(
                delete(Student)
                .where(Student.id == student_id)
                .returning(Student.id)
                .execution_options(synchronize_session=False)
            )
            deleted_id = result.scalar_one_or_none()
            if deleted_id is None:
                raise NotFoundError(lookup={"id": student_id})
            await db.commit()
        except STORAGE_ERRORS as e:
            self._storage_failure("delete_student", e, student_id=student_id)

        logger.info("Student %d deleted", student_id)

    # ── Single-row reads ──────────────────────────────────────────────────

    async def get_student(self, db: AsyncSession, student_id: int) -> StudentResponse:
        """
        Statement: SELECT * FROM students WHERE id = :id

        Raises:
            NotFoundError: no row has this id
            DatabaseError: query execution failed
        """
        try:
            result = await db.execute(select(Student).where(Student.id == student_id))
            student = result.scalar_one_or_none()
        except STORAGE_ERRORS as e:
            self._storage_failure("get_student", e, student_id=student_id)

        if student is None:
            raise NotFoundError(lookup={"id": student_id})
        return StudentResponse.model_validate(student)

    async def get_by_name(self, db: AsyncSession, name: str) -> StudentResponse:
        """
        Return one student whose name matches exactly.

        Names are not unique. When several rows share the name, whichever row
        storage returns first is used; no ordering is imposed.

        Statement: SELECT * FROM students WHERE name = :name LIMIT 1
        """
        try:
            result = await db.execute(
                select(Student).where(Student.name == name).limit(1)
            )
            student = result.scalars().first()
        except STORAGE_ERRORS as e:
            self._storage_failure("get_by_name", e, name=name)

        if student is None:
            raise NotFoundError(lookup={"name": name})
        return StudentResponse.model_validate(student)

    # ── Multi-row reads ───────────────────────────────────────────────────

    async def list_students(self, db: AsyncSession) -> List[StudentResponse]:
        """Statement: SELECT * FROM students"""
        return await self._fetch_all(db, "list_students", select(Student))

    async def list_by_gender(self, db: AsyncSession, gender: str) -> List[StudentResponse]:
        """Statement: SELECT * FROM students WHERE gender = :gender (exact, case-sensitive)"""
        return await self._fetch_all(
            db, "list_by_gender", select(Student).where(Student.gender == gender)
        )

    async def list_by_course(self, db: AsyncSession, course: str) -> List[StudentResponse]:
        """Statement: SELECT * FROM students WHERE course = :course (exact, case-sensitive)"""
        return await self._fetch_all(
            db, "list_by_course", select(Student).where(Student.course == course)
        )


# ── Singleton Instance ────────────────────────────────────────────────────
student_service = StudentService()
