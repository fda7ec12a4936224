"""
Processing Parameters
=====================
Method enumerations and the parameter bundle passed to the pipeline.

Method names arrive as free text from the API, CLI or environment. They are
matched case-insensitively and anything unrecognised maps to an UNKNOWN
member whose behaviour is the documented fallback: no outlier rejection,
identity filter.
"""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Dict, Optional, Union


def _normalize_name(name: str) -> str:
    return str(name).lower()


class OutlierMethod(Enum):
    """Outlier classification methods."""
    ZSCORE = "zscore"
    IQR = "iqr"
    MAD = "mad"
    UNKNOWN = "unknown"  # No rejection

    @classmethod
    def parse(cls, value: Union[str, "OutlierMethod"]) -> "OutlierMethod":
        if isinstance(value, cls):
            return value
        return _OUTLIER_ALIASES.get(_normalize_name(value), cls.UNKNOWN)


class FilterType(Enum):
    """Smoothing filters."""
    MOVING_AVERAGE = "moving_average"
    SAVITZKY_GOLAY = "savgol"
    MEDIAN = "median"
    BUTTERWORTH = "butterworth"
    UNKNOWN = "unknown"  # Identity

    @classmethod
    def parse(cls, value: Union[str, "FilterType"]) -> "FilterType":
        if isinstance(value, cls):
            return value
        return _FILTER_ALIASES.get(_normalize_name(value), cls.UNKNOWN)

    @property
    def implementation(self) -> "FilterType":
        """The filter actually applied for this type."""
        return _FILTER_IMPLEMENTATION.get(self, self)

    @property
    def is_placeholder(self) -> bool:
        """True when this type is not yet implemented and falls back to another filter."""
        return self.implementation is not self


class CalibMethod(Enum):
    """Preferred coefficient vector for presenting calibrated data."""
    MEDIAN = "median"
    LEAST_SQUARES = "lsq"

    @classmethod
    def parse(cls, value: Union[str, "CalibMethod"]) -> "CalibMethod":
        if isinstance(value, cls):
            return value
        return _CALIB_ALIASES.get(_normalize_name(value), cls.MEDIAN)


_OUTLIER_ALIASES: Dict[str, OutlierMethod] = {
    "zscore": OutlierMethod.ZSCORE,
    "iqr": OutlierMethod.IQR,
    "mad": OutlierMethod.MAD,
}

_FILTER_ALIASES: Dict[str, FilterType] = {
    "moving_average": FilterType.MOVING_AVERAGE,
    "movingaverage": FilterType.MOVING_AVERAGE,
    "savgol": FilterType.SAVITZKY_GOLAY,
    "savitzkygolay": FilterType.SAVITZKY_GOLAY,
    "median": FilterType.MEDIAN,
    "butterworth": FilterType.BUTTERWORTH,
}

# Savitzky-Golay and Butterworth are not implemented yet; both fall back to
# the moving average.
_FILTER_IMPLEMENTATION: Dict[FilterType, FilterType] = {
    FilterType.SAVITZKY_GOLAY: FilterType.MOVING_AVERAGE,
    FilterType.BUTTERWORTH: FilterType.MOVING_AVERAGE,
}

_CALIB_ALIASES: Dict[str, CalibMethod] = {
    "median": CalibMethod.MEDIAN,
    "lsq": CalibMethod.LEAST_SQUARES,
    "leastsquares": CalibMethod.LEAST_SQUARES,
    "least_squares": CalibMethod.LEAST_SQUARES,
}


@dataclass(frozen=True)
class ProcessingParameters:
    """
    Parameters for one pipeline invocation.

    lowess_fraction is accepted and validated but not used by any of the
    current filters.
    """
    window_size: int = 5
    lowess_fraction: float = 0.06
    outlier_threshold: float = 3.0
    outlier_method: OutlierMethod = OutlierMethod.ZSCORE
    filter_type: FilterType = FilterType.MOVING_AVERAGE
    calib_method: CalibMethod = CalibMethod.MEDIAN

    def __post_init__(self):
        # Accept plain strings for the method fields
        object.__setattr__(self, 'outlier_method', OutlierMethod.parse(self.outlier_method))
        object.__setattr__(self, 'filter_type', FilterType.parse(self.filter_type))
        object.__setattr__(self, 'calib_method', CalibMethod.parse(self.calib_method))

        if int(self.window_size) != self.window_size or self.window_size < 1:
            raise ValueError(f"window_size must be an integer >= 1, got {self.window_size}")
        object.__setattr__(self, 'window_size', int(self.window_size))
        if not self.outlier_threshold > 0:
            raise ValueError(f"outlier_threshold must be > 0, got {self.outlier_threshold}")
        if not 0 < self.lowess_fraction <= 1:
            raise ValueError(f"lowess_fraction must be in (0, 1], got {self.lowess_fraction}")

    @classmethod
    def from_config(cls, overrides: Optional[Dict] = None) -> "ProcessingParameters":
        """
        Build parameters from the configured defaults.

        Args:
            overrides: Optional dict of field overrides; None values are ignored

        Returns:
            ProcessingParameters
        """
        from sensorcal.config import get_config

        defaults = get_config().processing
        values = {
            'window_size': defaults.window_size,
            'lowess_fraction': defaults.lowess_fraction,
            'outlier_threshold': defaults.outlier_threshold,
            'outlier_method': defaults.outlier_method,
            'filter_type': defaults.filter_type,
            'calib_method': defaults.calib_method,
        }
        if overrides:
            values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def to_dict(self) -> Dict:
        """Plain-value dictionary (enum members replaced by their names)."""
        data = asdict(self)
        data['outlier_method'] = self.outlier_method.value
        data['filter_type'] = self.filter_type.value
        data['calib_method'] = self.calib_method.value
        return data
