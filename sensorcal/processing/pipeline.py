"""
Calibration Pipeline Orchestrator
=================================
Orchestrates all processing steps: outlier rejection → smoothing → coefficients.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Sequence, Tuple, Union

import numpy as np

from sensorcal.errors import InputValidationError, ProcessingCancelled
from sensorcal.processing.coefficients import CoefficientEstimator
from sensorcal.processing.outliers import OutlierRejector
from sensorcal.processing.parameters import CalibMethod, ProcessingParameters
from sensorcal.processing.smoother import Smoother

logger = logging.getLogger(__name__)


@dataclass
class CalibrationResult:
    """Complete processing results for one invocation."""
    time_clean: np.ndarray = field(repr=False)
    samples_clean: np.ndarray = field(repr=False)
    coeffs_median: np.ndarray = field(repr=False)
    coeffs_lsq: np.ndarray = field(repr=False)

    # Samples replaced by outlier rejection, per channel
    outlier_counts: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=int), repr=False)

    # Processing metadata
    parameters: Optional[ProcessingParameters] = None
    processing_time_ms: float = 0.0

    @property
    def n_points(self) -> int:
        return self.samples_clean.shape[0]

    @property
    def n_channels(self) -> int:
        return self.samples_clean.shape[1]

    @property
    def total_outliers(self) -> int:
        return int(self.outlier_counts.sum())

    def coefficients(self, method: Union[str, CalibMethod, None] = None) -> np.ndarray:
        """
        Coefficient vector for a calibration method.

        Args:
            method: Calibration method; defaults to the one in the parameters

        Returns:
            Coefficient array of length n_channels
        """
        if method is None:
            method = self.parameters.calib_method if self.parameters else CalibMethod.MEDIAN
        method = CalibMethod.parse(method)
        if method == CalibMethod.LEAST_SQUARES:
            return self.coeffs_lsq
        return self.coeffs_median

    def calibrated(self, method: Union[str, CalibMethod, None] = None) -> np.ndarray:
        """Cleaned samples multiplied by the selected coefficients (new array)."""
        return self.samples_clean * self.coefficients(method)[np.newaxis, :]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to plain lists for JSON responses."""
        return {
            'time_clean': self.time_clean.tolist(),
            'samples_clean': self.samples_clean.tolist(),
            'coeffs_median': self.coeffs_median.tolist(),
            'coeffs_lsq': self.coeffs_lsq.tolist(),
            'outlier_counts': self.outlier_counts.tolist(),
            'processing_time_ms': self.processing_time_ms,
        }

    def __repr__(self):
        return (
            f"CalibrationResult(points={self.n_points}, channels={self.n_channels}, "
            f"outliers={self.total_outliers}, time={self.processing_time_ms:.1f}ms)"
        )


def validate_input(
    time: Sequence[float],
    samples: Any
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Check the time vector and sample matrix before any numeric work.

    Args:
        time: Time vector of length N
        samples: N x C sample matrix

    Returns:
        Tuple of (time_array, sample_matrix) as float copies

    Raises:
        InputValidationError: Shapes are empty, mismatched or of the wrong rank
    """
    try:
        time_arr = np.array(time, dtype=float)
        matrix = np.array(samples, dtype=float)
    except (TypeError, ValueError) as e:
        raise InputValidationError(f"Input is not numeric: {e}") from e

    if matrix.size == 0 and matrix.ndim < 2:
        raise InputValidationError("samples has zero rows; load data before processing")
    if matrix.ndim != 2:
        raise InputValidationError(
            f"samples must be a 2-D matrix (points x channels), got shape {matrix.shape}"
        )
    if matrix.shape[0] == 0:
        raise InputValidationError("samples has zero rows; load data before processing")
    if matrix.shape[1] == 0:
        raise InputValidationError("samples has zero columns; at least one channel is required")
    if time_arr.ndim != 1:
        raise InputValidationError(f"time must be 1-D, got shape {time_arr.shape}")
    if time_arr.size != matrix.shape[0]:
        raise InputValidationError(
            f"time has {time_arr.size} points but samples has {matrix.shape[0]} rows"
        )

    return time_arr, matrix


class CalibrationPipeline:
    """
    Orchestrates the complete calibration pipeline.

    Pipeline:
    1. Reject → Replace outliers in each channel
    2. Smooth → Filter each channel
    3. Coefficients → Median-ratio and least-squares vectors over all channels

    Steps 1-2 are independent per channel and run on a thread pool when
    max_workers > 1. Step 3 waits for every channel. The pipeline keeps no
    state between calls, so one instance can serve concurrent callers.
    """

    def __init__(
        self,
        params: Optional[ProcessingParameters] = None,
        max_workers: int = 1
    ):
        """
        Initialize the pipeline.

        Args:
            params: Default processing parameters (configured defaults if None)
            max_workers: Threads used for per-channel processing
        """
        self.params = params if params is not None else ProcessingParameters.from_config()
        self.max_workers = max(1, int(max_workers))
        self.estimator = CoefficientEstimator()

    def _process_channel(
        self,
        column: np.ndarray,
        rejector: OutlierRejector,
        smoother: Smoother,
        cancel_event: Optional[threading.Event]
    ) -> Tuple[np.ndarray, int]:
        if cancel_event is not None and cancel_event.is_set():
            raise ProcessingCancelled("Processing cancelled")

        rejection = rejector.reject(column)
        return smoother.smooth(rejection.cleaned), rejection.outlier_count

    def process(
        self,
        time: Sequence[float],
        samples: Any,
        params: Optional[ProcessingParameters] = None,
        cancel_event: Optional[threading.Event] = None
    ) -> CalibrationResult:
        """
        Run the complete pipeline.

        Args:
            time: Time vector of length N
            samples: N x C sample matrix
            params: Parameters for this call (pipeline defaults if None)
            cancel_event: Optional event checked before each channel

        Returns:
            CalibrationResult with cleaned data and both coefficient vectors

        Raises:
            InputValidationError: Malformed input
            ProcessingCancelled: cancel_event was set before completion
        """
        start_time = datetime.now()
        params = params if params is not None else self.params

        time_arr, matrix = validate_input(time, samples)
        n_points, n_channels = matrix.shape

        logger.info(
            "Processing %d points x %d channels (outliers=%s, filter=%s, window=%d)",
            n_points, n_channels, params.outlier_method.value,
            params.filter_type.value, params.window_size
        )

        rejector = OutlierRejector(method=params.outlier_method, threshold=params.outlier_threshold)
        smoother = Smoother(filter_type=params.filter_type, window_size=params.window_size)

        # Each task gets its own contiguous column copy
        columns = [np.ascontiguousarray(matrix[:, k]) for k in range(n_channels)]

        samples_clean = np.empty((n_points, n_channels), dtype=float)
        outlier_counts = np.zeros(n_channels, dtype=int)

        if self.max_workers > 1 and n_channels > 1:
            with ThreadPoolExecutor(max_workers=min(self.max_workers, n_channels)) as executor:
                futures = [
                    executor.submit(self._process_channel, column, rejector, smoother, cancel_event)
                    for column in columns
                ]
                try:
                    for k, future in enumerate(futures):
                        samples_clean[:, k], outlier_counts[k] = future.result()
                except ProcessingCancelled:
                    for future in futures:
                        future.cancel()
                    raise
        else:
            for k, column in enumerate(columns):
                samples_clean[:, k], outlier_counts[k] = self._process_channel(
                    column, rejector, smoother, cancel_event
                )

        coeffs = self.estimator.estimate(samples_clean)

        processing_time = (datetime.now() - start_time).total_seconds() * 1000
        logger.info("Processed in %.1fms, %d outliers replaced",
                    processing_time, int(outlier_counts.sum()))

        return CalibrationResult(
            time_clean=time_arr,
            samples_clean=samples_clean,
            coeffs_median=coeffs.median,
            coeffs_lsq=coeffs.lsq,
            outlier_counts=outlier_counts,
            parameters=params,
            processing_time_ms=processing_time
        )


def process_data(
    time: Sequence[float],
    samples: Any,
    params: Optional[ProcessingParameters] = None,
    max_workers: int = 1,
    **overrides
) -> CalibrationResult:
    """
    Convenience function to run the pipeline once.

    Args:
        time: Time vector
        samples: N x C sample matrix
        params: Processing parameters (configured defaults if None)
        max_workers: Threads for per-channel processing
        **overrides: Parameter fields overriding the configured defaults

    Returns:
        CalibrationResult
    """
    if params is None:
        params = ProcessingParameters.from_config(overrides)
    pipeline = CalibrationPipeline(params=params, max_workers=max_workers)
    return pipeline.process(time, samples)


if __name__ == "__main__":
    # Test the pipeline on a simulated run
    from sensorcal.simulator import CalibrationSimulator, SimulationConfig

    print("Testing Calibration Pipeline")
    print("=" * 60)

    sim = CalibrationSimulator(SimulationConfig(n_points=2000, n_channels=4, seed=42))
    data = sim.generate()
    print(f"Created {data.n_points:,} points across {data.n_channels} channels")

    params = ProcessingParameters(outlier_method="mad", outlier_threshold=3.5, window_size=5)
    result = CalibrationPipeline(params=params).process(data.time, data.samples)

    print(f"\nResults: {result}")
    print(f"  True gains:     {np.round(sim.gains, 4).tolist()}")
    print(f"  Median coeffs:  {np.round(result.coeffs_median, 4).tolist()}")
    print(f"  LSQ coeffs:     {np.round(result.coeffs_lsq, 4).tolist()}")
