"""
Student Registry — Pydantic Request/Response Schemas
=====================================================

What:  Pydantic models defining the JSON contract of the /students API.
Why:   Type coercion of request bodies, response serialization, and OpenAPI docs.
How:   FastAPI validates request bodies against StudentCreate/StudentUpdate and
       serializes ORM rows through StudentResponse (from_attributes).

Validation scope:
    Only type coercion happens here (e.g. "20" → 20 for age, 123 → "123" for
    the text fields). Lengths and emptiness are left to storage, and a body
    that cannot be coerced is answered with the same 500 "Database error" a
    rejected write produces.
"""

from typing import Optional

from pydantic import BaseModel, Field


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class StudentBase(BaseModel):
    """The four client-supplied fields; all required for create and update."""
    name: str = Field(description="Student name", examples=["Ann"])
    age: int = Field(description="Age in years", examples=[20])
    course: str = Field(description="Enrolled course", examples=["CS"])
    gender: str = Field(description="Gender, matched exactly by /students/gender/{gender}", examples=["female"])

    # VARCHAR columns store a JSON number as its text, so accept 123 as "123"
    model_config = {"coerce_numbers_to_str": True}


class StudentCreate(StudentBase):
    """Body of POST /students."""
    pass


class StudentUpdate(StudentBase):
    """Body of PUT /students/{id}; replaces every field, no partial updates."""
    pass


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class StudentResponse(StudentBase):
    """A stored student record including its storage-assigned id."""
    id: int = Field(description="Server-generated identifier")

    model_config = {"from_attributes": True}


class MessageResponse(BaseModel):
    """Confirmation body, returned by DELETE /students/{id}."""
    message: str = Field(description="Human-readable confirmation")


class ErrorResponse(BaseModel):
    """
    Standardized error body for every non-2xx response.

    Example:
        {
            "error": "not_found",
            "message": "Student not found",
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """Returned by GET /health for monitoring and load balancer probes."""
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    database: str = Field(description="Database connectivity: connected, disconnected")
    uptime_seconds: float = Field(description="Seconds since service started")
