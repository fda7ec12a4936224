"""
Results Exporter
================
Writes cleaned series and calibration coefficients as CSV.

Layout:
    time,sensor_1_raw,sensor_1_calib,...,coeff_median,coeff_lsq
    <one row per time point>
    coefficients,,
    sensor_1,<median>,<lsq>
    ...
"""

import csv
import io
import logging
from pathlib import Path
from typing import List, Union

from sensorcal.processing.parameters import CalibMethod
from sensorcal.processing.pipeline import CalibrationResult

logger = logging.getLogger(__name__)


def _write_results(
    writer,
    result: CalibrationResult,
    method: Union[str, CalibMethod]
) -> None:
    coeffs = result.coefficients(method)
    calibrated = result.calibrated(method)
    n_channels = result.n_channels

    header: List[str] = ['time']
    for i in range(n_channels):
        header.extend([f'sensor_{i + 1}_raw', f'sensor_{i + 1}_calib'])
    header.extend(['coeff_median', 'coeff_lsq'])
    writer.writerow(header)

    for row in range(result.n_points):
        line = [repr(float(result.time_clean[row]))]
        for ch in range(n_channels):
            line.append(repr(float(result.samples_clean[row, ch])))
            line.append(repr(float(calibrated[row, ch])))
        writer.writerow(line)

    writer.writerow(['coefficients', '', ''])
    for ch in range(min(result.coeffs_median.size, result.coeffs_lsq.size)):
        writer.writerow([
            f'sensor_{ch + 1}',
            repr(float(result.coeffs_median[ch])),
            repr(float(result.coeffs_lsq[ch]))
        ])

    logger.debug("Wrote %d rows using %s coefficients (%s)",
                 result.n_points, CalibMethod.parse(method).value, coeffs.tolist())


def format_results(
    result: CalibrationResult,
    method: Union[str, CalibMethod] = CalibMethod.MEDIAN
) -> str:
    """
    Render results as CSV text.

    Args:
        result: Pipeline result
        method: Coefficient vector used for the calibrated columns

    Returns:
        CSV text
    """
    buffer = io.StringIO()
    _write_results(csv.writer(buffer, lineterminator='\n'), result, method)
    return buffer.getvalue()


def export_results(
    path: Union[str, Path],
    result: CalibrationResult,
    method: Union[str, CalibMethod] = CalibMethod.MEDIAN
) -> Path:
    """
    Write results to a CSV file. Directories are created as needed.

    Args:
        path: Output file path
        result: Pipeline result
        method: Coefficient vector used for the calibrated columns

    Returns:
        The written path
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open('w', newline='', encoding='utf-8') as csvfile:
        _write_results(csv.writer(csvfile, lineterminator='\n'), result, method)

    logger.info("Exported %d points x %d channels to %s",
                result.n_points, result.n_channels, path)
    return path
