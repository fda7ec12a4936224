"""
Channel Statistics
==================
Summary statistics per channel for presentation (mean, median, spread, range).
"""

from dataclasses import dataclass, asdict
from typing import Dict, List, Optional

import numpy as np


@dataclass
class ChannelStats:
    """Summary of one channel. Channel numbers are 1-based."""
    channel: int
    mean: float
    median: float
    std_dev: float
    min: float
    max: float

    def to_dict(self) -> Dict:
        return asdict(self)


def channel_statistics(
    samples: np.ndarray,
    coefficients: Optional[np.ndarray] = None,
    max_channels: Optional[int] = None
) -> List[ChannelStats]:
    """
    Summarize each channel of a sample matrix.

    Args:
        samples: N x C matrix
        coefficients: Optional per-channel multipliers applied before summarizing
        max_channels: Optional limit on the number of leading channels reported

    Returns:
        List of ChannelStats, one per reported channel
    """
    matrix = np.asarray(samples, dtype=float)
    if matrix.ndim != 2 or matrix.shape[0] == 0:
        return []

    n_channels = matrix.shape[1]
    if max_channels is not None:
        n_channels = min(n_channels, max_channels)

    stats = []
    for i in range(n_channels):
        column = matrix[:, i]
        if coefficients is not None:
            column = column * coefficients[i]

        # Sample standard deviation; a single point has no spread
        std_dev = float(np.std(column, ddof=1)) if column.size > 1 else 0.0

        stats.append(ChannelStats(
            channel=i + 1,
            mean=float(np.mean(column)),
            median=float(np.median(column)),
            std_dev=std_dev,
            min=float(np.min(column)),
            max=float(np.max(column))
        ))

    return stats
