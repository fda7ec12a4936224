"""
SensorCal
=========
Outlier rejection, smoothing and calibration coefficients for
multi-channel sensor time series.
"""

__version__ = "1.0.0"
