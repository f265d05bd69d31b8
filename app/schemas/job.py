from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional
from datetime import datetime


class JobCreateRequest(BaseModel):
    """Schema for creating a new job. createdAt is always server-assigned."""
    title: str = Field(..., min_length=1, max_length=200)
    company: str = Field(..., min_length=1, max_length=200)
    location: Optional[str] = Field(None, max_length=200)
    salary: Optional[float] = Field(None, ge=0)

    @field_validator("title", "company")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v


class JobUpdateRequest(BaseModel):
    """
    Schema for a partial job update.

    Only fields present in the body are applied. title may be changed but
    never cleared.
    """
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    company: Optional[str] = Field(None, max_length=200)
    location: Optional[str] = Field(None, max_length=200)
    salary: Optional[float] = Field(None, ge=0)

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: Optional[str]) -> str:
        if v is None or not v.strip():
            raise ValueError("title cannot be empty")
        return v


class JobResponse(BaseModel):
    """Schema for job response"""
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    title: str
    company: Optional[str] = None
    location: Optional[str] = None
    salary: Optional[float] = None
    created_at: datetime = Field(
        validation_alias=AliasChoices("created_at", "createdAt"),
        serialization_alias="createdAt"
    )


class JobListResponse(BaseModel):
    """Paginated envelope returned by GET /jobs"""
    success: bool = True
    total: int
    page: int
    limit: int
    skip: int
    data: List[JobResponse]


class MessageResponse(BaseModel):
    message: str
