import numpy as np

from sensorcal.processing.coefficients import CoefficientEstimator, calculate_coefficients


def test_median_of_constant_channel():
    estimator = CoefficientEstimator()
    coeffs = estimator.median_coefficients(np.array([[5.0], [5.0], [5.0], [5.0]]))
    np.testing.assert_array_equal(coeffs, [5.0])


def test_median_averages_middle_pair_for_even_count():
    matrix = np.array([[4.0], [1.0], [3.0], [2.0]])
    np.testing.assert_array_equal(CoefficientEstimator().median_coefficients(matrix), [2.5])


def test_zero_median_falls_back_to_one():
    matrix = np.array([[0.0, 2.0], [0.0, 2.0], [1.0, 2.0]])
    coeffs = CoefficientEstimator().estimate(matrix)
    np.testing.assert_array_equal(coeffs.median, [1.0, 2.0])
    assert coeffs.fallback_channels == [0]


def test_lsq_of_channel_equal_to_reference_is_one():
    x = np.array([1.0, 3.0, 2.0, 5.0, 4.0])
    matrix = np.column_stack([x, x, x])
    np.testing.assert_allclose(CoefficientEstimator().lsq_coefficients(matrix), [1.0, 1.0, 1.0])


def test_lsq_scales_channels_onto_reference():
    x = np.array([1.0, 2.0, 3.0, 4.0])
    matrix = np.column_stack([x, 2 * x])
    # reference = 1.5 x
    np.testing.assert_allclose(CoefficientEstimator().lsq_coefficients(matrix), [1.5, 0.75])


def test_lsq_zero_denominator_falls_back_to_one():
    matrix = np.array([[0.0, 1.0], [0.0, 2.0]])
    coeffs = CoefficientEstimator().lsq_coefficients(matrix)
    assert coeffs[0] == 1.0


def test_reference_signal_is_row_mean():
    matrix = np.array([[1.0, 3.0], [2.0, 6.0]])
    np.testing.assert_array_equal(CoefficientEstimator().reference_signal(matrix), [2.0, 4.0])


def test_both_vectors_have_one_entry_per_channel():
    matrix = np.random.default_rng(0).normal(10.0, 1.0, size=(50, 6))
    coeffs = calculate_coefficients(matrix)
    assert coeffs['median'].shape == (6,)
    assert coeffs['lsq'].shape == (6,)
    assert np.all(np.isfinite(coeffs['median'])) and np.all(coeffs['median'] != 0)
    assert np.all(np.isfinite(coeffs['lsq'])) and np.all(coeffs['lsq'] != 0)
