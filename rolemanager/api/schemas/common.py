"""Common schemas for the role manager API."""

from typing import Dict, List, Optional
from pydantic import BaseModel, Field


class Notice(BaseModel):
    """Dismissible admin notice."""
    message: str
    type: str = "success"


class ViewResponse(BaseModel):
    """Fields shared by every rendered view."""
    notices: List[Notice] = Field(default_factory=list)
    tokens: Dict[str, str] = Field(default_factory=dict, description="Anti-forgery token per action")


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    detail: Optional[str] = None


class MutationResponse(BaseModel):
    """Outcome of a mutation request."""
    success: bool
    message: str
    notice_type: str = "success"
    redirect_to: str
    counts: Dict[str, int] = Field(default_factory=dict)
    details: Dict[str, List[str]] = Field(default_factory=dict)
