# Data I/O Module

from sensorcal.dataio.loader import (
    SensorData,
    load_sensor_file,
    parse_sensor_lines,
    split_fields
)
from sensorcal.dataio.exporter import (
    export_results,
    format_results
)

__all__ = [
    # Loader
    'SensorData',
    'load_sensor_file',
    'parse_sensor_lines',
    'split_fields',

    # Exporter
    'export_results',
    'format_results',
]
