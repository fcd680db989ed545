"""
API Request/Response Models

Pydantic models for API endpoints
"""

from typing import Any, Dict, List, Optional
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from customs_review.models.declaration import ExportDeclaration, SubmissionHistoryRecord


# ============================================================================
# Enums
# ============================================================================

class DeclarationStatusAPI(str, Enum):
    """Declaration status values for API requests and responses"""
    DRAFT = "draft"
    BOOKING_PUSHED = "booking_pushed"
    DECLARATION_PUSHED = "declaration_pushed"
    UNDER_REVIEW = "under_review"
    APPROVED = "approved"
    REJECTED = "rejected"


# ============================================================================
# Response Models
# ============================================================================

class DeclarationResponse(BaseModel):
    """A single export declaration"""
    id: str
    user_id: str
    title: str
    status: DeclarationStatusAPI
    generated_data: Dict[str, Any] = Field(default_factory=dict)
    ready_at: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "0b7c5f0e-5f7e-4d0a-9c57-3f7f1b0e2a11",
                "user_id": "student_001",
                "title": "出口申报单 - 蓝牙耳机",
                "status": "under_review",
                "generated_data": {
                    "customsNumber": "CN2024030100012",
                    "submittedAt": "2024-03-01T08:00:00.000Z"
                },
                "ready_at": "2024-03-01T08:00:00.000Z",
                "created_at": "2024-03-01T07:30:00.000Z",
                "updated_at": "2024-03-01T08:00:00.000Z"
            }
        }
    )

    @classmethod
    def from_model(cls, declaration: ExportDeclaration) -> "DeclarationResponse":
        return cls(**declaration.to_dict())


class DeclarationListResponse(BaseModel):
    """Paginated list of declarations"""
    declarations: List[DeclarationResponse]
    total: int
    limit: int
    offset: int


class SubmissionHistoryResponse(BaseModel):
    """One audit trail entry"""
    id: str
    declaration_id: str
    user_id: Optional[str] = None
    submission_type: str
    platform: str
    status: str
    request_data: Dict[str, Any] = Field(default_factory=dict)
    response_data: Dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None
    submitted_at: str
    processed_at: Optional[str] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "5d0e3b5a-3c55-4f61-8d0a-5a3f0f8f7d21",
                "declaration_id": "0b7c5f0e-5f7e-4d0a-9c57-3f7f1b0e2a11",
                "user_id": "student_001",
                "submission_type": "customs_audit",
                "platform": "single_window",
                "status": "success",
                "request_data": {
                    "declarationId": "0b7c5f0e-5f7e-4d0a-9c57-3f7f1b0e2a11",
                    "auditType": "automated_background_review"
                },
                "response_data": {
                    "result": "approved",
                    "auditTime": "2024-03-01T08:06:00.000Z",
                    "auditScore": 91,
                    "feedback": "申报数据完整，符合海关要求，准予放行",
                    "auditOfficer": "审核员128",
                    "riskLevel": "低风险",
                    "processedBy": "background_scheduler"
                },
                "error_message": None,
                "submitted_at": "2024-03-01T08:06:00.000Z",
                "processed_at": "2024-03-01T08:06:00.000Z"
            }
        }
    )

    @classmethod
    def from_model(cls, record: SubmissionHistoryRecord) -> "SubmissionHistoryResponse":
        return cls(**record.to_dict())


class SchedulerStatusResponse(BaseModel):
    """Review scheduler state"""
    running: bool
    interval_seconds: float
    review_delay_minutes: float
    approval_probability: float
    pass_in_flight: bool = False
    last_pass: Optional[Dict[str, Any]] = None


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    version: str
    database: str
    scheduler: str
    timestamp: int

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "status": "healthy",
                "version": "1.0.0",
                "database": "connected",
                "scheduler": "running",
                "timestamp": 1709942400
            }
        }
    )


class ErrorResponse(BaseModel):
    """Error response model"""
    error: str
    detail: Optional[str] = None
    declaration_id: Optional[str] = None
    timestamp: int

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "Declaration abc cannot move from approved to under_review",
                "detail": None,
                "declaration_id": "abc",
                "timestamp": 1709942400
            }
        }
    )
