"""
Sensor Data Loader
==================
Reads delimited text files into a time vector and a points x channels matrix.

Expected layout: one header line, then one row per time point with the time
in the first column and one column per sensor. Fields may be separated by
commas, semicolons, tabs or spaces.
"""

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Union

import numpy as np

from sensorcal.errors import DataFormatError

logger = logging.getLogger(__name__)

_FIELD_SEPARATORS = re.compile(r'[,;\t ]+')

SUPPORTED_EXTENSIONS = ('.txt', '.csv', '.dat')


@dataclass
class SensorData:
    """Raw readings: time vector and points x channels sample matrix."""
    time: np.ndarray = field(repr=False)
    samples: np.ndarray = field(repr=False)

    @property
    def n_points(self) -> int:
        return self.samples.shape[0]

    @property
    def n_channels(self) -> int:
        return self.samples.shape[1]

    def __repr__(self):
        return f"SensorData(points={self.n_points}, channels={self.n_channels})"


def split_fields(line: str) -> List[str]:
    """Split a data line on any supported separator, dropping empty tokens."""
    return [token for token in _FIELD_SEPARATORS.split(line.strip()) if token]


def parse_sensor_lines(lines: List[str]) -> SensorData:
    """
    Parse file lines (header included) into SensorData.

    The channel count comes from the first data row. Shorter rows leave the
    missing sensors at 0.0, longer rows are truncated, and rows with fewer
    than two fields are kept as all-zero points.

    Args:
        lines: Lines of the file, header first

    Returns:
        SensorData

    Raises:
        DataFormatError: Empty file, too few columns or a non-numeric field
    """
    data_lines = [(n, line) for n, line in enumerate(lines[1:], start=2) if line.strip()]
    if not data_lines:
        raise DataFormatError("File is empty or contains only a header")

    n_cols = len(split_fields(data_lines[0][1]))
    if n_cols < 2:
        raise DataFormatError("File must contain at least 2 columns (time and one sensor)")

    n_rows = len(data_lines)
    time = np.zeros(n_rows, dtype=float)
    samples = np.zeros((n_rows, n_cols - 1), dtype=float)

    for row, (line_no, line) in enumerate(data_lines):
        parts = split_fields(line)
        if len(parts) < 2:
            continue
        try:
            time[row] = float(parts[0])
            values = [float(p) for p in parts[1:n_cols]]
        except ValueError as e:
            raise DataFormatError(f"Line {line_no}: non-numeric value ({e})") from e
        samples[row, :len(values)] = values

    return SensorData(time=time, samples=samples)


def load_sensor_file(path: Union[str, Path]) -> SensorData:
    """
    Load a sensor data file.

    Args:
        path: Path to a .txt/.csv/.dat file

    Returns:
        SensorData

    Raises:
        FileNotFoundError: The file does not exist
        DataFormatError: The file cannot be parsed
    """
    path = Path(path)
    if not path.is_file():
        raise FileNotFoundError(f"Data file not found: {path}")
    if path.suffix.lower() not in SUPPORTED_EXTENSIONS:
        logger.warning("Unexpected data file extension '%s'; parsing anyway", path.suffix)

    with path.open('r', encoding='utf-8') as f:
        lines = f.read().splitlines()

    data = parse_sensor_lines(lines)
    logger.info("Loaded %d points, %d sensors from %s", data.n_points, data.n_channels, path)
    return data
