"""
Student Registry — Schema Initializer
======================================

What:  Ensures the `students` table exists before the service takes traffic.
How:   `metadata.create_all(checkfirst=True)` inside one transaction, i.e.
       CREATE TABLE only for tables that are absent. Running it on every
       process start is a no-op once the table exists.
When:  Once, during lifespan startup, after the pool is created.

Failure policy:
    By default a failure is logged and startup continues; every data
    operation will then answer 500 until storage recovers. Setting
    SCHEMA_INIT_FAIL_FAST=true re-raises instead, which aborts startup.
"""

import logging

from student_registry.database import Base, Database
from student_registry.models.student import Student  # noqa: F401

logger = logging.getLogger(__name__)


async def init_schema(database: Database, fail_fast: bool = False) -> bool:
    """
    Create the students table if it does not exist.

    Returns:
        True when the table is known to exist, False when creation failed and
        the failure was swallowed.

    Raises:
        Exception: the original storage error, only when fail_fast is True.
    """
    try:
        async with database.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all, checkfirst=True)
    except Exception:
        logger.error("Error creating students table", exc_info=True)
        if fail_fast:
            raise
        return False

    logger.info("Students table created successfully or already exists")
    return True
