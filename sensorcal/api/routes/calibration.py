"""
Calibration Router
==================
Endpoints for running the calibration pipeline.
"""

import logging

import numpy as np
from fastapi import APIRouter, HTTPException
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import PlainTextResponse

from sensorcal.api.schemas import (
    ProcessRequest, ProcessResponse, ChannelStatsModel,
    MethodsResponse, FilterInfo
)
from sensorcal.config import get_config
from sensorcal.dataio.exporter import format_results
from sensorcal.errors import SensorCalError
from sensorcal.processing import (
    CalibrationPipeline, CalibrationResult, ProcessingParameters,
    OutlierMethod, FilterType, CalibMethod, channel_statistics
)


logger = logging.getLogger(__name__)

router = APIRouter()


def _run_pipeline(request: ProcessRequest) -> CalibrationResult:
    """Blocking pipeline call; executed on the threadpool."""
    params = ProcessingParameters.from_config(request.parameters.model_dump())
    samples = np.array(
        [[np.nan if v is None else v for v in row] for row in request.samples],
        dtype=float
    )
    pipeline = CalibrationPipeline(params=params, max_workers=get_config().processing.max_workers)
    return pipeline.process(request.time, samples)


async def _process(request: ProcessRequest) -> CalibrationResult:
    try:
        return await run_in_threadpool(_run_pipeline, request)
    except (SensorCalError, ValueError) as e:
        logger.warning("Processing rejected: %s", e)
        raise HTTPException(status_code=422, detail=str(e))


@router.post("/process", response_model=ProcessResponse)
async def process(request: ProcessRequest):
    """Clean the samples and compute calibration coefficients."""
    result = await _process(request)

    selected = result.coefficients()
    stats = channel_statistics(
        result.samples_clean,
        coefficients=selected,
        max_channels=get_config().processing.stats_channels
    )

    return ProcessResponse(
        **result.to_dict(),
        calib_method=result.parameters.calib_method.value,
        selected_coefficients=selected.tolist(),
        statistics=[ChannelStatsModel(**s.to_dict()) for s in stats]
    )


@router.post("/export", response_class=PlainTextResponse)
async def export(request: ProcessRequest):
    """Process and return the results as CSV."""
    result = await _process(request)
    return PlainTextResponse(
        format_results(result, result.parameters.calib_method),
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="calibration_results.csv"'}
    )


@router.get("/methods", response_model=MethodsResponse)
async def list_methods():
    """List accepted outlier methods, filters and calibration methods."""
    return MethodsResponse(
        outlier_methods=[m.value for m in OutlierMethod if m != OutlierMethod.UNKNOWN],
        filter_types=[
            FilterInfo(
                name=f.value,
                implementation=f.implementation.value,
                is_placeholder=f.is_placeholder
            )
            for f in FilterType if f != FilterType.UNKNOWN
        ],
        calib_methods=[m.value for m in CalibMethod]
    )
