#!/usr/bin/env python3
"""
Clean a sensor data file and compute calibration coefficients.

Typical usage:
  python scripts/process_file.py --input readings.csv --output results.csv
  python scripts/process_file.py --demo --outlier-method mad --filter-type median

Steps:
- Loads the time column and sensor columns (or simulates a run with --demo)
- Runs the pipeline (outlier rejection -> smoothing -> coefficients)
- Prints per-channel statistics and both coefficient vectors
- Optionally exports the cleaned series and coefficients to CSV
"""

import sys
import os

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sensorcal.config import get_config  # noqa: E402
from sensorcal.dataio.exporter import export_results  # noqa: E402
from sensorcal.dataio.loader import load_sensor_file  # noqa: E402
from sensorcal.errors import SensorCalError  # noqa: E402
from sensorcal.logging_setup import setup_logging  # noqa: E402
from sensorcal.processing import CalibrationPipeline, ProcessingParameters, channel_statistics  # noqa: E402
from sensorcal.simulator import SimulationConfig, CalibrationSimulator  # noqa: E402


def build_parser():
    import argparse

    defaults = get_config().processing

    parser = argparse.ArgumentParser(description="Outlier rejection, smoothing and calibration of sensor data")
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--input", help="Data file (header line, then time and sensor columns)")
    source.add_argument("--demo", action="store_true", help="Process a simulated run instead of a file")
    parser.add_argument("--output", help="Write results CSV to this path")
    parser.add_argument("--window-size", type=int, default=defaults.window_size, help="Filter window size")
    parser.add_argument("--lowess-fraction", type=float, default=defaults.lowess_fraction,
                        help="LOWESS fraction (reserved)")
    parser.add_argument("--outlier-threshold", type=float, default=defaults.outlier_threshold,
                        help="Z-score / modified Z-score threshold")
    parser.add_argument("--outlier-method", default=defaults.outlier_method, help="zscore, iqr or mad")
    parser.add_argument("--filter-type", default=defaults.filter_type,
                        help="moving_average, savgol, median or butterworth")
    parser.add_argument("--calib-method", default=defaults.calib_method, help="median or lsq")
    parser.add_argument("--workers", type=int, default=defaults.max_workers, help="Threads for per-channel work")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for --demo")
    parser.add_argument("--log-level", default=None, help="Logging level (default from LOG_LEVEL)")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        setup_logging(args.log_level)
        params = ProcessingParameters(
            window_size=args.window_size,
            lowess_fraction=args.lowess_fraction,
            outlier_threshold=args.outlier_threshold,
            outlier_method=args.outlier_method,
            filter_type=args.filter_type,
            calib_method=args.calib_method,
        )

        if args.demo:
            data = CalibrationSimulator(SimulationConfig(seed=args.seed)).generate()
        else:
            data = load_sensor_file(args.input)
        print(f"Loaded: {data.n_points:,} points, {data.n_channels} sensors")

        pipeline = CalibrationPipeline(params=params, max_workers=args.workers)
        result = pipeline.process(data.time, data.samples)

        if args.output:
            export_results(args.output, result, params.calib_method)
    except (SensorCalError, ValueError, OSError) as e:
        print(f"Error: {e}")
        return 1

    if params.filter_type.is_placeholder:
        print(f"Note: '{params.filter_type.value}' is not implemented yet; "
              f"{params.filter_type.implementation.value} was applied")

    coeffs = result.coefficients()
    stats = channel_statistics(
        result.samples_clean,
        coefficients=coeffs,
        max_channels=get_config().processing.stats_channels
    )

    print("")
    print("Processing complete")
    print(f"  Outliers replaced: {result.total_outliers:,}")
    print(f"  Processing time: {result.processing_time_ms:.1f}ms")
    print("")
    print(f"  {'Sensor':>6}  {'Mean':>12}  {'Median':>12}  {'StdDev':>10}  {'Min':>12}  {'Max':>12}")
    for s in stats:
        print(f"  {s.channel:>6}  {s.mean:>12.4f}  {s.median:>12.4f}  {s.std_dev:>10.4f}  "
              f"{s.min:>12.4f}  {s.max:>12.4f}")
    print("")
    print(f"  {'Sensor':>6}  {'Median coeff':>14}  {'LSQ coeff':>14}")
    for i in range(result.n_channels):
        print(f"  {i + 1:>6}  {result.coeffs_median[i]:>14.6f}  {result.coeffs_lsq[i]:>14.6f}")
    if args.output:
        print(f"\n  Results exported to {args.output}")

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
