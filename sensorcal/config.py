"""
SensorCal Configuration Module
==============================
Handles environment variables for processing defaults and the API server.
Supports .env files via python-dotenv.
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional
from dotenv import load_dotenv

# Load .env file if present
load_dotenv()


@dataclass
class ProcessingDefaults:
    """Default parameters for the calibration pipeline."""
    window_size: int = 5
    lowess_fraction: float = 0.06
    outlier_threshold: float = 3.0
    outlier_method: str = "zscore"
    filter_type: str = "moving_average"
    calib_method: str = "median"
    max_workers: int = 1
    stats_channels: int = 8  # Channels shown in summary tables


@dataclass
class Config:
    """Main application configuration."""
    processing: ProcessingDefaults = field(default_factory=ProcessingDefaults)
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    cors_origins: List[str] = field(default_factory=lambda: ["*"])
    log_level: str = "INFO"


def load_config() -> Config:
    """
    Load configuration from environment variables (.env in development).
    Unset variables fall back to the dataclass defaults.
    """
    defaults = ProcessingDefaults()

    processing = ProcessingDefaults(
        window_size=int(os.getenv("SENSORCAL_WINDOW_SIZE", str(defaults.window_size))),
        lowess_fraction=float(os.getenv("SENSORCAL_LOWESS_FRACTION", str(defaults.lowess_fraction))),
        outlier_threshold=float(os.getenv("SENSORCAL_OUTLIER_THRESHOLD", str(defaults.outlier_threshold))),
        outlier_method=os.getenv("SENSORCAL_OUTLIER_METHOD", defaults.outlier_method),
        filter_type=os.getenv("SENSORCAL_FILTER_TYPE", defaults.filter_type),
        calib_method=os.getenv("SENSORCAL_CALIB_METHOD", defaults.calib_method),
        max_workers=int(os.getenv("SENSORCAL_MAX_WORKERS", str(defaults.max_workers))),
        stats_channels=int(os.getenv("SENSORCAL_STATS_CHANNELS", str(defaults.stats_channels))),
    )

    return Config(
        processing=processing,
        api_host=os.getenv("API_HOST", "0.0.0.0"),
        api_port=int(os.getenv("API_PORT", "8000")),
        cors_origins=[o.strip() for o in os.getenv("API_CORS_ORIGINS", "*").split(",") if o.strip()],
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


# Singleton config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the application configuration (singleton)."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Drop the cached configuration so the next get_config() reloads it."""
    global _config
    _config = None


if __name__ == "__main__":
    # Test configuration loading
    config = get_config()
    print("Configuration loaded successfully!")
    print(f"  Window size: {config.processing.window_size}")
    print(f"  Outlier: {config.processing.outlier_method} @ {config.processing.outlier_threshold}")
    print(f"  Filter: {config.processing.filter_type}")
    print(f"  Workers: {config.processing.max_workers}")
    print(f"  API: {config.api_host}:{config.api_port}")
    print(f"  CORS origins: {config.cors_origins}")
