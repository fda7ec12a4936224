"""
Pydantic Schemas for API
========================
Request and response models for FastAPI endpoints.
"""

from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, Field


# =============================================================================
# Base Models
# =============================================================================

class HealthResponse(BaseModel):
    status: str = "ok"
    timestamp: datetime
    version: str = "1.0.0"


# =============================================================================
# Processing Models
# =============================================================================

class ProcessingParametersModel(BaseModel):
    """Pipeline parameters; omitted fields use the configured defaults."""
    window_size: Optional[int] = Field(default=None, ge=1)
    lowess_fraction: Optional[float] = Field(default=None, gt=0, le=1)
    outlier_threshold: Optional[float] = Field(default=None, gt=0)
    outlier_method: Optional[str] = None
    filter_type: Optional[str] = None
    calib_method: Optional[str] = None


class ProcessRequest(BaseModel):
    """Time vector and points x channels matrix. NaN readings are sent as null."""
    time: List[float]
    samples: List[List[Optional[float]]]
    parameters: ProcessingParametersModel = Field(default_factory=ProcessingParametersModel)


class ChannelStatsModel(BaseModel):
    channel: int
    mean: float
    median: float
    std_dev: float
    min: float
    max: float


class ProcessResponse(BaseModel):
    time_clean: List[float]
    samples_clean: List[List[float]]
    coeffs_median: List[float]
    coeffs_lsq: List[float]
    outlier_counts: List[int]
    calib_method: str
    selected_coefficients: List[float]
    statistics: List[ChannelStatsModel]
    processing_time_ms: float


# =============================================================================
# Method Catalogue
# =============================================================================

class FilterInfo(BaseModel):
    name: str
    implementation: str
    is_placeholder: bool


class MethodsResponse(BaseModel):
    outlier_methods: List[str]
    filter_types: List[FilterInfo]
    calib_methods: List[str]
