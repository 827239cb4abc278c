"""
Request bodies for the JSON API.

Field aliases accept the camelCase names the browser client sends
(companyName, reportingYear, ...) alongside snake_case.
"""

from datetime import date
from typing import Any, Dict, Literal, Optional

from flask import request
from pydantic import BaseModel, ConfigDict, Field, field_validator

from esg_portal.emissions import MAX_SCOPE1


class RequestModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)


class RegisterRequest(RequestModel):
    username: str = Field(..., min_length=3, max_length=64)
    email: str = Field(..., min_length=3, max_length=120)
    password: str
    full_name: str = Field(..., min_length=1, max_length=128, alias="fullName")


class LoginRequest(RequestModel):
    username: str
    password: str


class CompanyCreate(RequestModel):
    name: str = Field(..., min_length=1, max_length=256)
    sector: str = ""
    region: str = "Global"


class ESGSubmission(RequestModel):
    company_name: str = Field(..., min_length=1, max_length=256, alias="companyName")
    sector: str = ""
    region: str = "Global"
    reporting_year: int = Field(..., ge=1990, le=2100, alias="reportingYear")
    environmental: Dict[str, Any] = Field(default_factory=dict)
    social: Dict[str, Any] = Field(default_factory=dict)
    governance: Dict[str, Any] = Field(default_factory=dict)
    units: Dict[str, str] = Field(default_factory=dict)
    targets: Dict[str, float] = Field(default_factory=dict)

    def metrics_by_category(self):
        return {
            "environmental": self.environmental,
            "social": self.social,
            "governance": self.governance,
        }


class MetricValidationRequest(RequestModel):
    category: str
    metric: str
    value: Any = None
    unit: Optional[str] = None


class EmissionsRequest(RequestModel):
    activity: Dict[str, Any] = Field(default_factory=dict)
    region: Optional[str] = None


class EmissionRecordCreate(RequestModel):
    company_id: int = Field(..., alias="companyId")
    reporting_year: int = Field(..., ge=1990, le=2100, alias="reportingYear")
    scope: Literal[1, 2, 3]
    emission_source: str = Field("", alias="emissionSource")
    co2_equivalent: float = Field(..., alias="co2Equivalent")
    calculation_method: str = Field("", alias="calculationMethod")

    @field_validator("co2_equivalent")
    @classmethod
    def plausible_amount(cls, value: float) -> float:
        if value < 0:
            raise ValueError("CO2 equivalent must be a positive number")
        if value > MAX_SCOPE1:
            raise ValueError("CO2 equivalent seems unusually high")
        return value


class DocumentCreate(RequestModel):
    company_id: int = Field(..., alias="companyId")
    title: str = Field(..., min_length=1, max_length=256)
    category: str = ""
    framework: str = ""
    due_date: Optional[date] = Field(None, alias="dueDate")


class DocumentStatusUpdate(RequestModel):
    status: Literal["Pending Review", "Approved", "Rejected"]


class ComplianceValidateRequest(RequestModel):
    framework: Optional[str] = None
    data: Dict[str, Any] = Field(default_factory=dict)


class SyncRequest(RequestModel):
    company_id: int = Field(..., alias="companyId")
    reporting_year: int = Field(..., ge=1990, le=2100, alias="reportingYear")


class TargetTrackRequest(RequestModel):
    current_value: float = Field(..., alias="currentValue")
    target_value: float = Field(..., alias="targetValue")
    target_year: int = Field(..., ge=1990, le=2100, alias="targetYear")
    metric: str = ""


class BenchmarkRequest(RequestModel):
    sector: str = "technology"
    metrics: Dict[str, float] = Field(default_factory=dict)


def parse_body(model):
    """Validate the JSON request body against `model`; pydantic errors become HTTP 400."""
    return model.model_validate(request.get_json(silent=True) or {})
