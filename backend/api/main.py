"""
FastAPI backend for Glider Profiles.

This provides REST API endpoints for profile identification on glider depth
series, enabling framework-agnostic clients and pipelines.
"""

from fastapi import FastAPI, UploadFile, File, HTTPException
from pydantic import BaseModel, Field
from typing import Dict, List, Optional, Any
import numpy as np
import logging
import io
import sys
import os

# Add parent directory to path to import our modules
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config.settings import (
    APP_NAME, APP_VERSION, APP_DESCRIPTION, LOGGING_CONFIG, RANGE_LIMITS,
    DEFAULT_MAX_UPLOAD_MB, ProfileConfig
)

# Initialize logging
logging.basicConfig(level=LOGGING_CONFIG["level"], format=LOGGING_CONFIG["format"])
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title=f"{APP_NAME} API",
    description=APP_DESCRIPTION,
    version=APP_VERSION
)

# Import our services
from core.models.cast import casts_to_dataframe
from core.navigation import load_navigation_csv
from core.profiles import segment_profiles
from core.validation import ValidationError, parse_profile_options, validate_depth_sequence
from services.profile_service import analyze_profile_data


# Pydantic models for API requests/responses
class ProfileRequest(BaseModel):
    depth: List[Optional[float]]
    range: float = Field(default_factory=lambda: ProfileConfig.RANGE)
    join: bool = Field(default_factory=lambda: ProfileConfig.JOIN)


class ProfileResponse(BaseModel):
    profile_index: List[Optional[float]]
    profile_direction: List[Optional[float]]
    profile_count: int
    casts: List[Dict[str, Any]]


class ProfileAnalysisResponse(BaseModel):
    casts: List[Dict[str, Any]]
    summary: Dict[str, Any]


def _to_json_list(values: np.ndarray) -> List[Optional[float]]:
    """NaN is not valid JSON; render it as null."""
    return [None if np.isnan(v) else float(v) for v in values]


def _casts_to_records(casts_df) -> List[Dict[str, Any]]:
    if casts_df.empty:
        return []
    records = casts_df.astype(object).where(casts_df.notna(), None).to_dict(orient='records')
    for record in records:
        for key, value in record.items():
            if hasattr(value, 'isoformat'):
                record[key] = value.isoformat()
    return records


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "message": f"{APP_NAME} API",
        "version": APP_VERSION,
        "endpoints": {
            "POST /api/find-profiles": "Identify profiles in a depth series",
            "POST /api/analyze-profiles": "Identify profiles in a navigation CSV file",
            "GET /api/health": "Health check endpoint"
        }
    }


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "glider-profiles-api"}


@app.get("/api/config")
async def get_config():
    """Get default configuration values."""
    return {
        "defaults": ProfileConfig.as_dict(),
        "ranges": {
            "range": RANGE_LIMITS
        }
    }


@app.post("/api/find-profiles", response_model=ProfileResponse)
async def find_profiles_endpoint(request: ProfileRequest):
    """
    Identify profiles in a depth or pressure series.

    Missing samples are given as null. Labels of a series with fewer than two
    valid samples are returned as null.
    """
    try:
        options = parse_profile_options(range=request.range, join=request.join)
        depth = validate_depth_sequence(request.depth)
    except ValidationError as e:
        logger.warning(f"Rejected profile request: {e}")
        raise HTTPException(status_code=400, detail=str(e))

    profile_index, profile_direction, casts = segment_profiles(depth, options)

    return ProfileResponse(
        profile_index=_to_json_list(profile_index),
        profile_direction=_to_json_list(profile_direction),
        profile_count=len(casts),
        casts=_casts_to_records(casts_to_dataframe(casts))
    )


@app.post("/api/analyze-profiles", response_model=ProfileAnalysisResponse)
async def analyze_profiles(
    file: UploadFile = File(...),
    range: Optional[float] = None,
    join: Optional[bool] = None,
    depth_source: Optional[str] = None
):
    """
    Identify profiles in a navigation CSV file.

    Args:
        file: CSV file with a time column and a depth, depth_ctd or pressure column
        range: Minimum cast depth excursion
        join: Join same-direction casts across shorter inversions
        depth_source: Column to segment, instead of the configured preference

    Returns:
        Identified casts and summary metrics
    """
    if not file.filename or not file.filename.lower().endswith('.csv'):
        raise HTTPException(status_code=400, detail="Only CSV files are allowed")

    content = await file.read()

    max_size = DEFAULT_MAX_UPLOAD_MB * 1024 * 1024
    if len(content) > max_size:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size is {DEFAULT_MAX_UPLOAD_MB}MB, "
                   f"received {len(content) / 1024 / 1024:.1f}MB"
        )

    depth_sources = [depth_source] if depth_source else None

    try:
        logger.info(f"Processing file: {file.filename}")
        data, metadata = load_navigation_csv(io.BytesIO(content), depth_sources=depth_sources)
        result = analyze_profile_data(
            data,
            profile_range=range,
            join=join,
            depth_sources=depth_sources,
            name=os.path.splitext(file.filename)[0]
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error analyzing profiles: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Error analyzing profiles: {str(e)}")

    return ProfileAnalysisResponse(
        casts=_casts_to_records(result.casts),
        summary=result.summary()
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
