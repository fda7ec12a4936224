import pytest

from sensorcal import config as config_module
from sensorcal.processing.parameters import (
    CalibMethod, FilterType, OutlierMethod, ProcessingParameters
)


@pytest.mark.parametrize("name, expected", [
    ("zscore", OutlierMethod.ZSCORE),
    ("ZScore", OutlierMethod.ZSCORE),
    ("IQR", OutlierMethod.IQR),
    ("Mad", OutlierMethod.MAD),
    ("grubbs", OutlierMethod.UNKNOWN),
    ("z-score", OutlierMethod.UNKNOWN),
    ("z_score", OutlierMethod.UNKNOWN),
])
def test_outlier_method_parsing(name, expected):
    assert OutlierMethod.parse(name) is expected


@pytest.mark.parametrize("name, expected", [
    ("moving_average", FilterType.MOVING_AVERAGE),
    ("MovingAverage", FilterType.MOVING_AVERAGE),
    ("Moving_Average", FilterType.MOVING_AVERAGE),
    ("moving-average", FilterType.UNKNOWN),
    ("moving average", FilterType.UNKNOWN),
    ("savitzky-golay", FilterType.UNKNOWN),
    ("savgol", FilterType.SAVITZKY_GOLAY),
    ("SavitzkyGolay", FilterType.SAVITZKY_GOLAY),
    ("MEDIAN", FilterType.MEDIAN),
    ("Butterworth", FilterType.BUTTERWORTH),
    ("lowess", FilterType.UNKNOWN),
])
def test_filter_type_parsing(name, expected):
    assert FilterType.parse(name) is expected


def test_calib_method_parsing_defaults_to_median():
    assert CalibMethod.parse("LSQ") is CalibMethod.LEAST_SQUARES
    assert CalibMethod.parse("LeastSquares") is CalibMethod.LEAST_SQUARES
    assert CalibMethod.parse("least-squares") is CalibMethod.MEDIAN
    assert CalibMethod.parse("whatever") is CalibMethod.MEDIAN


def test_parameters_accept_strings():
    params = ProcessingParameters(outlier_method="mad", filter_type="savgol", calib_method="lsq")
    assert params.outlier_method is OutlierMethod.MAD
    assert params.filter_type is FilterType.SAVITZKY_GOLAY
    assert params.calib_method is CalibMethod.LEAST_SQUARES
    assert params.to_dict()['filter_type'] == "savgol"


@pytest.mark.parametrize("kwargs", [
    {"window_size": 0},
    {"window_size": 2.5},
    {"outlier_threshold": 0.0},
    {"outlier_threshold": -1.0},
    {"lowess_fraction": 0.0},
    {"lowess_fraction": 1.5},
])
def test_invalid_parameters_raise(kwargs):
    with pytest.raises(ValueError):
        ProcessingParameters(**kwargs)


def test_from_config_reads_environment(monkeypatch):
    monkeypatch.setenv("SENSORCAL_WINDOW_SIZE", "7")
    monkeypatch.setenv("SENSORCAL_OUTLIER_METHOD", "iqr")
    config_module.reset_config()
    try:
        params = ProcessingParameters.from_config({"filter_type": "median", "calib_method": None})
    finally:
        config_module.reset_config()

    assert params.window_size == 7
    assert params.outlier_method is OutlierMethod.IQR
    assert params.filter_type is FilterType.MEDIAN
    assert params.calib_method is CalibMethod.MEDIAN
