"""
Transport-facing shapes (DTOs) returned by, and accepted from, the HTTP API.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field


class PublicationBaseDTO(BaseModel):
    """Fields common to every publication subtype."""
    id: int
    title: str
    year: int | None = None
    publication_type: str
    model_config = ConfigDict(from_attributes=True)


class EmployeeBase(BaseModel):
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    academic_title: str | None = Field(default=None, max_length=50)
    email: EmailStr | None = None


class EmployeeCreate(EmployeeBase):
    pass


class EmployeeUpdate(BaseModel):
    first_name: str | None = Field(default=None, max_length=100)
    last_name: str | None = Field(default=None, max_length=100)
    academic_title: str | None = Field(default=None, max_length=50)
    email: EmailStr | None = None


class EmployeeDTO(BaseModel):
    id: int
    first_name: str
    last_name: str
    academic_title: str | None = None
    email: str | None = None
    model_config = ConfigDict(from_attributes=True)
