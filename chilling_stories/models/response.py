"""
Unified response models
"""

from typing import Generic, TypeVar, Optional
from pydantic import BaseModel, ConfigDict, Field


T = TypeVar('T')


class ApiResponse(BaseModel, Generic[T]):
    """Unified API response envelope"""
    success: bool = Field(True, description="Whether the request succeeded")
    data: Optional[T] = Field(None, description="Payload")
    message: Optional[str] = Field(None, description="Human readable message")
    code: Optional[int] = Field(None, description="Business error code")
    error: Optional[dict] = Field(None, description="Error details")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "success": True,
                "data": {"key": "value"},
                "message": "OK"
            }
        }
    )


class ErrorResponse(BaseModel):
    """Error response"""
    success: bool = Field(False, description="Request failed")
    code: int = Field(..., description="Error code")
    message: str = Field(..., description="Error message")
    error: Optional[dict] = Field(None, description="Error details")
