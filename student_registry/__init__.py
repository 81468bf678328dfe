"""
Student Registry — Application Package Initializer
===================================================

What: Marks the `student_registry` directory as a Python package.
Why:  Enables module imports like `from student_registry.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by pytest and uvicorn.

Architecture Note:
    The service is a thin layered stack over one table:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │      StudentService (Statements)    │  ← One SQL statement per operation
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │   Database (Pool + Schema Init)     │  ← Async engine owned by the lifespan
    └─────────────────────────────────────┘

    Routes never touch SQL, the service never touches HTTP status codes,
    and the database layer owns the pool lifecycle.
"""

__version__ = "1.0.0"
