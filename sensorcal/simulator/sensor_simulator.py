"""
Multi-Channel Sensor Simulator
==============================
Synthetic data generation for calibration runs.
Generates channels that share one underlying signal, each seen through its
own gain, with noise, occasional spikes and NaN dropouts.
"""

import numpy as np
from dataclasses import dataclass
from typing import Optional

from sensorcal.dataio.loader import SensorData


@dataclass
class SimulationConfig:
    """Configuration for a synthetic calibration run."""
    n_points: int = 1000
    n_channels: int = 8
    sample_rate_hz: float = 100.0

    # Common signal
    base_level: float = 10.0        # Mean reading of a unit-gain channel
    drift_amp: float = 0.5          # Slow drift amplitude
    oscillation_amp: float = 1.0    # Periodic component amplitude
    oscillation_hz: float = 0.5

    # Per-channel distortion
    gain_spread: float = 0.2        # Gains drawn from 1 ± gain_spread
    noise_amp: float = 0.05         # Gaussian noise (fraction of base level)

    # Anomalies
    spike_rate: float = 0.002       # Fraction of samples turned into spikes
    spike_scale: float = 5.0        # Spike multiplier
    dropout_rate: float = 0.0005    # Fraction of samples turned into NaN

    seed: Optional[int] = None


class CalibrationSimulator:
    """
    Generates a time vector and a points x channels matrix with known gains.
    Output is reproducible for a given seed.
    """

    def __init__(self, config: Optional[SimulationConfig] = None):
        self.config = config or SimulationConfig()
        self.rng = np.random.default_rng(self.config.seed)

        spread = self.config.gain_spread
        self.gains = self.rng.uniform(1 - spread, 1 + spread, self.config.n_channels)
        self.phases = self.rng.uniform(0, 2 * np.pi, self.config.n_channels)

    def time_vector(self) -> np.ndarray:
        """Sample times in seconds from run start."""
        return np.arange(self.config.n_points) / self.config.sample_rate_hz

    def reference_signal(self, t: np.ndarray) -> np.ndarray:
        """Underlying signal seen by every channel before its gain."""
        cfg = self.config
        duration = max(t[-1], 1.0) if t.size else 1.0

        # Slow drift (settling) over the whole run
        drift = cfg.drift_amp * np.sin(np.pi * t / duration)

        # Periodic process variation
        oscillation = cfg.oscillation_amp * np.sin(2 * np.pi * cfg.oscillation_hz * t)

        return cfg.base_level + drift + oscillation

    def _inject_anomalies(self, values: np.ndarray) -> np.ndarray:
        """Turn a random subset of samples into spikes and dropouts."""
        cfg = self.config
        r = self.rng.random(values.shape)

        spikes = r < cfg.spike_rate
        values[spikes] *= cfg.spike_scale

        dropouts = (r >= cfg.spike_rate) & (r < cfg.spike_rate + cfg.dropout_rate)
        values[dropouts] = np.nan

        return values

    def generate(self) -> SensorData:
        """
        Generate a complete run.

        Returns:
            SensorData with time and samples
        """
        cfg = self.config
        t = self.time_vector()
        reference = self.reference_signal(t)

        samples = np.empty((cfg.n_points, cfg.n_channels), dtype=float)
        for k in range(cfg.n_channels):
            # Small per-channel phase lag on the periodic part
            lag = 0.05 * cfg.oscillation_amp * np.sin(2 * np.pi * cfg.oscillation_hz * t + self.phases[k])
            noise = cfg.noise_amp * cfg.base_level * self.rng.standard_normal(cfg.n_points)
            samples[:, k] = self.gains[k] * (reference + lag) + noise

        samples = self._inject_anomalies(samples)
        return SensorData(time=t, samples=samples)


def generate_run(
    n_points: int = 1000,
    n_channels: int = 8,
    seed: Optional[int] = None
) -> SensorData:
    """Convenience function to generate a synthetic run."""
    config = SimulationConfig(n_points=n_points, n_channels=n_channels, seed=seed)
    return CalibrationSimulator(config).generate()


def main():
    """Test the simulator."""
    print("Calibration Sensor Simulator")
    print("=" * 60)

    sim = CalibrationSimulator(SimulationConfig(n_points=500, n_channels=4, seed=42))
    data = sim.generate()

    print(f"\nGenerated {data.n_points} points x {data.n_channels} channels")
    print(f"  Gains: {np.round(sim.gains, 3).tolist()}")
    print(f"  NaN dropouts: {int(np.isnan(data.samples).sum())}")
    print(f"  Time range: {data.time[0]:.2f}s to {data.time[-1]:.2f}s")


if __name__ == "__main__":
    main()
