import numpy as np
import pytest

from sensorcal.processing.outliers import OutlierRejector, reject_outliers
from sensorcal.processing.parameters import OutlierMethod


def test_iqr_flags_trailing_spike_and_copies_backward():
    rejector = OutlierRejector(method=OutlierMethod.IQR, threshold=3.0)
    result = rejector.reject(np.array([1.0, 2.0, 3.0, 4.0, 100.0]))

    np.testing.assert_array_equal(result.valid_mask, [True, True, True, True, False])
    np.testing.assert_array_equal(result.cleaned, [1.0, 2.0, 3.0, 4.0, 4.0])
    assert result.outlier_count == 1
    assert result.outlier_pct == pytest.approx(20.0)
    np.testing.assert_array_equal(result.outlier_indices, [4])


def test_zscore_uses_population_std():
    # mean 19, population std 27 -> z(100) = 3.0
    data = np.array([10.0] * 9 + [100.0])

    loose = reject_outliers(data, OutlierMethod.ZSCORE, threshold=3.0)
    np.testing.assert_array_equal(loose, data)

    strict = reject_outliers(data, OutlierMethod.ZSCORE, threshold=2.0)
    np.testing.assert_array_equal(strict, [10.0] * 10)


def test_mad_uses_upper_middle_element():
    data = np.array([1.0, 2.0, 3.0, 4.0, 5.0, 6.0, 50.0])
    mask = OutlierRejector(method="mad", threshold=3.5).detect(data)
    np.testing.assert_array_equal(mask, [True] * 6 + [False])


def test_mad_even_count_takes_element_at_half_length():
    # sorted[2] = 3 is the median, sorted deviations [0, 1, 2, 7] give MAD = 2.
    # z(1) = 0.6745, z(10) = 2.36; an averaged median of 2.5 would give 1.01 and 5.06.
    data = np.array([10.0, 1.0, 3.0, 2.0])

    loose = OutlierRejector(method="mad", threshold=3.0).detect(data)
    np.testing.assert_array_equal(loose, [True, True, True, True])

    tight = OutlierRejector(method="mad", threshold=0.8).detect(data)
    np.testing.assert_array_equal(tight, [False, True, True, True])


def test_iqr_even_count_uses_truncated_quartile_index():
    # n = 8: q1 = sorted[2] = 0, q3 = sorted[6] = 10, upper fence 25.
    # Interpolated or midpoint quartiles would put the fence at 6.25 or 12.5.
    kept = np.array([0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 10.0, 20.0])
    mask = OutlierRejector(method="iqr", threshold=3.0).detect(kept)
    np.testing.assert_array_equal(mask, [True] * 8)

    flagged = np.array([0.0, 0.0, 0.0, 0.0, 0.0, 0.0, 10.0, 26.0])
    mask = OutlierRejector(method="iqr", threshold=3.0).detect(flagged)
    np.testing.assert_array_equal(mask, [True] * 7 + [False])


def test_iqr_quartile_index_ignores_nan_entries():
    # Four finite values: q3 = sorted[3] = 10 is the maximum, so nothing is flagged
    data = np.array([1.0, np.nan, 2.0, 3.0, np.nan, 10.0])
    mask = OutlierRejector(method="iqr", threshold=3.0).detect(data)
    np.testing.assert_array_equal(mask, [True, False, True, True, False, True])


def test_replacement_prefers_forward_neighbor():
    values = np.array([1.0, 100.0, 2.0])
    mask = np.array([True, False, True])
    np.testing.assert_array_equal(OutlierRejector.replace(values, mask), [1.0, 2.0, 2.0])


def test_replacement_falls_back_to_backward_neighbor():
    values = np.array([5.0, 7.0, 9.0])
    mask = np.array([True, False, False])
    np.testing.assert_array_equal(OutlierRejector.replace(values, mask), [5.0, 5.0, 5.0])


def test_replacement_chains_do_not_use_other_outliers():
    values = np.array([100.0, 200.0, 3.0, 300.0])
    mask = np.array([False, False, True, False])
    np.testing.assert_array_equal(OutlierRejector.replace(values, mask), [3.0, 3.0, 3.0, 3.0])


@pytest.mark.parametrize("method", list(OutlierMethod))
def test_nan_is_always_replaced(method):
    data = np.array([1.0, np.nan, 1.0, 1.0, np.nan])
    cleaned = reject_outliers(data, method, threshold=3.0)

    assert cleaned.shape == data.shape
    assert not np.any(np.isnan(cleaned))
    np.testing.assert_array_equal(cleaned, [1.0, 1.0, 1.0, 1.0, 1.0])


@pytest.mark.parametrize("method", list(OutlierMethod))
def test_all_nan_channel_becomes_zeros(method):
    cleaned = reject_outliers(np.full(4, np.nan), method, threshold=3.0)
    np.testing.assert_array_equal(cleaned, np.zeros(4))


def test_unknown_method_keeps_every_finite_sample():
    rejector = OutlierRejector(method="no-such-method", threshold=0.1)
    assert rejector.method is OutlierMethod.UNKNOWN

    data = np.array([1.0, 2.0, 1000.0])
    np.testing.assert_array_equal(rejector.reject(data).cleaned, data)


def test_constant_channel_has_no_outliers():
    data = np.full(6, 3.3)
    for method in (OutlierMethod.ZSCORE, OutlierMethod.IQR, OutlierMethod.MAD):
        result = OutlierRejector(method=method, threshold=3.0).reject(data)
        assert result.outlier_count == 0


def test_input_is_not_modified():
    data = np.array([1.0, 2.0, 3.0, 4.0, 100.0])
    reject_outliers(data, "iqr")
    np.testing.assert_array_equal(data, [1.0, 2.0, 3.0, 4.0, 100.0])
