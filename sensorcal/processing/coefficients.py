"""
Calibration Coefficients Module
===============================
Estimates per-channel calibration multipliers from the cleaned sample matrix.

Two independent estimators are always computed:
    median-ratio:   c_k = median(x_k)
    least-squares:  c_k = sum(x_k * ref) / sum(x_k ** 2)
where ref is the per-row mean across all channels.

Any estimate that comes out zero or non-finite is replaced by 1.0.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List

import numpy as np

logger = logging.getLogger(__name__)


@dataclass
class CalibrationCoefficients:
    """Both coefficient vectors for a sample matrix."""
    median: np.ndarray = field(repr=False)
    lsq: np.ndarray = field(repr=False)
    reference: np.ndarray = field(repr=False)
    fallback_channels: List[int] = field(default_factory=list)

    def __repr__(self):
        return (
            f"CalibrationCoefficients(channels={self.median.size}, "
            f"fallbacks={self.fallback_channels})"
        )


class CoefficientEstimator:
    """
    Computes median-ratio and least-squares coefficients over an N x C matrix.
    """

    # Substituted when an estimate is zero or undefined
    FALLBACK = 1.0

    @staticmethod
    def _as_matrix(samples: np.ndarray) -> np.ndarray:
        matrix = np.asarray(samples, dtype=float)
        if matrix.ndim != 2:
            raise ValueError(f"samples must be 2-D (points x channels), got shape {matrix.shape}")
        return matrix

    def reference_signal(self, samples: np.ndarray) -> np.ndarray:
        """
        Per-row mean across all channels.

        Args:
            samples: N x C matrix

        Returns:
            Reference array of length N
        """
        return self._as_matrix(samples).mean(axis=1)

    def median_coefficients(self, samples: np.ndarray) -> np.ndarray:
        """
        Median of each channel (mean of the two middle values for even counts).

        Args:
            samples: N x C matrix

        Returns:
            Coefficient array of length C
        """
        matrix = self._as_matrix(samples)
        medians = np.median(matrix, axis=0)
        return self._apply_fallback(medians)

    def lsq_coefficients(self, samples: np.ndarray) -> np.ndarray:
        """
        Least-squares scale of each channel onto the reference signal.

        Args:
            samples: N x C matrix

        Returns:
            Coefficient array of length C
        """
        matrix = self._as_matrix(samples)
        reference = matrix.mean(axis=1)

        numerator = (matrix * reference[:, np.newaxis]).sum(axis=0)
        denominator = (matrix * matrix).sum(axis=0)

        coeffs = np.full(matrix.shape[1], self.FALLBACK)
        nonzero = denominator != 0
        coeffs[nonzero] = numerator[nonzero] / denominator[nonzero]
        return self._apply_fallback(coeffs)

    def _apply_fallback(self, coeffs: np.ndarray) -> np.ndarray:
        bad = (coeffs == 0) | ~np.isfinite(coeffs)
        if np.any(bad):
            coeffs = coeffs.copy()
            coeffs[bad] = self.FALLBACK
        return coeffs

    def estimate(self, samples: np.ndarray) -> CalibrationCoefficients:
        """
        Compute both coefficient vectors.

        Args:
            samples: N x C cleaned matrix

        Returns:
            CalibrationCoefficients
        """
        matrix = self._as_matrix(samples)
        raw_median = np.median(matrix, axis=0)
        median = self._apply_fallback(raw_median)
        lsq = self.lsq_coefficients(matrix)

        fallback_channels = [
            int(i) for i in np.flatnonzero((raw_median == 0) | ~np.isfinite(raw_median))
        ]
        if fallback_channels:
            logger.info("Median coefficient fell back to %.1f for channels %s",
                        self.FALLBACK, fallback_channels)

        return CalibrationCoefficients(
            median=median,
            lsq=lsq,
            reference=matrix.mean(axis=1),
            fallback_channels=fallback_channels
        )


def calculate_coefficients(samples: np.ndarray) -> Dict[str, np.ndarray]:
    """
    Convenience function returning both coefficient vectors.

    Args:
        samples: N x C matrix

    Returns:
        Dict with 'median' and 'lsq' arrays
    """
    coeffs = CoefficientEstimator().estimate(samples)
    return {'median': coeffs.median, 'lsq': coeffs.lsq}
