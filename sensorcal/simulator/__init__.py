# Simulator Module

from sensorcal.simulator.sensor_simulator import (
    SimulationConfig,
    CalibrationSimulator,
    generate_run
)

__all__ = [
    'SimulationConfig',
    'CalibrationSimulator',
    'generate_run',
]
