"""
Processing Module
=================
Calibration of multi-channel sensor time series.

Modules:
- parameters: Method enumerations and the parameter bundle
- outliers: Flag and replace outliers per channel (Z-score, IQR, MAD)
- smoother: Windowed filters per channel
- coefficients: Median-ratio and least-squares calibration coefficients
- statistics: Per-channel summary statistics
- pipeline: Pipeline orchestration
"""

from sensorcal.processing.parameters import (
    OutlierMethod,
    FilterType,
    CalibMethod,
    ProcessingParameters
)

from sensorcal.processing.outliers import (
    OutlierRejector,
    RejectionResult,
    reject_outliers
)

from sensorcal.processing.smoother import (
    Smoother,
    moving_average,
    median_filter,
    smooth_channel
)

from sensorcal.processing.coefficients import (
    CoefficientEstimator,
    CalibrationCoefficients,
    calculate_coefficients
)

from sensorcal.processing.statistics import (
    ChannelStats,
    channel_statistics
)

from sensorcal.processing.pipeline import (
    CalibrationPipeline,
    CalibrationResult,
    validate_input,
    process_data
)

__all__ = [
    # Parameters
    'OutlierMethod',
    'FilterType',
    'CalibMethod',
    'ProcessingParameters',

    # Outliers
    'OutlierRejector',
    'RejectionResult',
    'reject_outliers',

    # Smoother
    'Smoother',
    'moving_average',
    'median_filter',
    'smooth_channel',

    # Coefficients
    'CoefficientEstimator',
    'CalibrationCoefficients',
    'calculate_coefficients',

    # Statistics
    'ChannelStats',
    'channel_statistics',

    # Pipeline
    'CalibrationPipeline',
    'CalibrationResult',
    'validate_input',
    'process_data',
]
