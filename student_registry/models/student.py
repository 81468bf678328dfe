"""
Student Registry — Student SQLAlchemy Model
============================================

What:  ORM model representing the `students` table.
Why:   Maps rows to Python objects and gives the schema initializer a single
       table definition to create.
Who:   Used by StudentService for every statement and by the schema initializer.

Table Design:
    - id: auto-incrementing integer primary key (SERIAL on PostgreSQL),
      assigned by storage and never reused
    - name, course: VARCHAR(100) NOT NULL
    - age: INTEGER NOT NULL
    - gender: VARCHAR(10) NOT NULL
    No other constraints; all field rules are delegated to storage.
"""

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from student_registry.database import Base


class Student(Base):
    """
    One student record.

    Lifecycle:
        1. Created by POST /students (storage assigns id)
        2. Replaced in full by PUT /students/{id}
        3. Removed by DELETE /students/{id} (hard delete)
    """

    __tablename__ = "students"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    name: Mapped[str] = mapped_column(String(100), nullable=False)

    age: Mapped[int] = mapped_column(Integer, nullable=False)

    course: Mapped[str] = mapped_column(String(100), nullable=False)

    gender: Mapped[str] = mapped_column(String(10), nullable=False)

    def __repr__(self) -> str:
        return f"<Student(id={self.id}, name='{self.name}', course='{self.course}')>"
