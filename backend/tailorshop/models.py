"""Pydantic models for API requests and responses."""
from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator

# Canonical production pipeline; order matters.
STAGES: Tuple[str, ...] = ("cutting", "stitching", "finishing", "packaging", "delivered")
BILL_STATUSES: Tuple[str, ...] = ("pending", "in-progress", "completed", "delivered")
CLOSED_STATUSES: Tuple[str, ...] = ("completed", "delivered")
JOB_COMPLETED_MARKER = "Completed"

Stage = Literal["cutting", "stitching", "finishing", "packaging", "delivered"]
BillStatus = Literal["pending", "in-progress", "completed", "delivered"]


def _number_to_text(value: Any) -> Any:
    # phone numbers often arrive as JSON numbers
    if isinstance(value, bool):
        return value
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (int, float)):
        return str(value)
    return value


class Measurements(BaseModel):
    """Body measurements taken for a garment; every field is optional."""

    length: Optional[float] = None
    shoulder: Optional[float] = None
    sleeve: Optional[float] = None
    chest: Optional[float] = None
    waist: Optional[float] = None
    hips: Optional[float] = None
    frontNeck: Optional[float] = None
    backNeck: Optional[float] = None


class BillCreate(BaseModel):
    """Payload accepted when a new bill is written."""

    model_config = ConfigDict(str_strip_whitespace=True)

    customerName: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    garmentType: str = Field(..., min_length=1, description="Free-form garment category")
    quantity: int = Field(..., ge=1)
    rate: float = Field(..., ge=0, description="Price per piece")
    advance: float = Field(default=0, ge=0, description="Amount paid up front")
    dueDate: Optional[date] = None
    tailorNotes: Optional[str] = None
    measurements: Measurements = Field(default_factory=Measurements)
    images: List[str] = Field(default_factory=list)
    drawings: List[str] = Field(default_factory=list)

    _phone_as_text = field_validator("phone", mode="before")(_number_to_text)

    @field_validator("advance", mode="before")
    @classmethod
    def _advance_defaults_to_zero(cls, value: Any) -> Any:
        return 0 if value is None or value == "" else value


class BillUpdate(BaseModel):
    """Partial bill update; only fields that were sent are applied."""

    model_config = ConfigDict(str_strip_whitespace=True)

    customerName: Optional[str] = Field(default=None, min_length=1)
    phone: Optional[str] = Field(default=None, min_length=1)
    garmentType: Optional[str] = Field(default=None, min_length=1)
    quantity: Optional[int] = Field(default=None, ge=1)
    rate: Optional[float] = Field(default=None, ge=0)
    advance: Optional[float] = Field(default=None, ge=0)
    status: Optional[BillStatus] = None
    dueDate: Optional[date] = None
    tailorNotes: Optional[str] = None
    measurements: Optional[Measurements] = None
    images: Optional[List[str]] = None
    drawings: Optional[List[str]] = None

    _phone_as_text = field_validator("phone", mode="before")(_number_to_text)


class WorkflowJobCreate(BaseModel):
    """Payload for creating a production job by hand."""

    model_config = ConfigDict(str_strip_whitespace=True)

    billId: str = Field(..., min_length=1)
    customerName: str = Field(..., min_length=1)
    stage: Stage = "cutting"
    assignedTo: Optional[str] = None
    notes: Optional[str] = None
    images: List[str] = Field(default_factory=list)

    @field_validator("stage", mode="before")
    @classmethod
    def _stage_defaults_to_cutting(cls, value: Any) -> Any:
        return "cutting" if value is None or value == "" else value


class WorkflowJobUpdate(BaseModel):
    """Checked job update. A stage change must be a single step."""

    assignedTo: Optional[str] = None
    notes: Optional[str] = None
    images: Optional[List[str]] = None
    stage: Optional[Stage] = None


class WorkflowJobOverride(BaseModel):
    """Unchecked administrative overwrite of a job; stage order is not enforced."""

    model_config = ConfigDict(extra="forbid")

    billId: Optional[str] = None
    customerName: Optional[str] = None
    stage: Optional[Stage] = None
    assignedTo: Optional[str] = None
    notes: Optional[str] = None
    images: Optional[List[str]] = None
    status: Optional[str] = None


class UpiSetting(BaseModel):
    """Payment address shown on printed bills."""

    upi: StrictStr = Field(..., min_length=1)


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class BillPage(BaseModel):
    """One page of bills plus paging metadata."""

    bills: List[Dict[str, Any]]
    pagination: Pagination


class DashboardStats(BaseModel):
    """Summary numbers shown on the admin dashboard."""

    totalCustomers: int
    activeOrders: int
    completedOrders: int
    revenue: float
    recentBills: List[Dict[str, Any]]
    workflowStages: Dict[str, int] = Field(
        default_factory=dict,
        description="Job count per stage; stages without jobs are absent",
    )
