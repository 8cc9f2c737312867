"""
Tests for viterbihmm.core.emission.
"""
import pytest
import numpy as np
from scipy import stats

from viterbihmm.core.emission import (
    CategoricalEmission,
    PoissonEmission,
    EmissionModel,
    as_observations,
)
from viterbihmm.core.errors import (
    EmptySequenceError,
    InvalidObservationError,
    ModelParameterError,
    ViterbiError,
)


class TestAsObservations:
    def test_list(self):
        obs = as_observations([1, 2, 3])
        assert obs.dtype == np.int64
        np.testing.assert_array_equal(obs, [1, 2, 3])

    def test_column_array_flattened(self):
        obs = as_observations(np.array([[1], [2], [3]]))
        assert obs.shape == (3,)

    def test_integral_floats_accepted(self):
        np.testing.assert_array_equal(as_observations([1.0, 4.0]), [1, 4])

    def test_non_integral_float_rejected(self):
        with pytest.raises(InvalidObservationError, match="position 1"):
            as_observations([1.0, 1.5])

    def test_nan_rejected(self):
        with pytest.raises(InvalidObservationError):
            as_observations([np.nan])

    def test_uint64_beyond_int64_rejected(self):
        obs = np.array([3, 2 ** 63], dtype=np.uint64)
        with pytest.raises(InvalidObservationError, match="9223372036854775808 at position 1"):
            as_observations(obs)

    def test_uint64_in_range_accepted(self):
        obs = as_observations(np.array([0, 2 ** 63 - 1], dtype=np.uint64))
        assert obs.dtype == np.int64
        assert obs[1] == np.iinfo(np.int64).max

    @pytest.mark.parametrize("value", [1e300, -1e300, 2.0 ** 63])
    def test_huge_float_rejected(self, value):
        with pytest.raises(InvalidObservationError, match="position 1 is outside the int64 range"):
            as_observations([1.0, value])

    def test_strings_rejected(self):
        with pytest.raises(InvalidObservationError):
            as_observations(['a', 'b'])

    def test_empty(self):
        with pytest.raises(EmptySequenceError):
            as_observations([])


class TestCategoricalEmission:
    def test_lookup(self, casino_emission):
        np.testing.assert_allclose(casino_emission.log_emission(5, 1), np.log(0.5))
        np.testing.assert_allclose(casino_emission.log_emission(0, 0), np.log(1 / 6))
        np.testing.assert_allclose(casino_emission.log_emission(2, 1), np.log(0.1))

    def test_log_emissions_shape(self, casino_emission):
        log_emit = casino_emission.log_emissions([0, 5, 3])
        assert log_emit.shape == (3, 2)
        np.testing.assert_allclose(log_emit[1], [np.log(1 / 6), np.log(0.5)])

    def test_vectorised_matches_scalar(self, casino_emission):
        rolls = [0, 1, 2, 3, 4, 5]
        log_emit = casino_emission.log_emissions(rolls)
        for t, roll in enumerate(rolls):
            for state in (0, 1):
                assert log_emit[t, state] == casino_emission.log_emission(roll, state)

    @pytest.mark.parametrize("symbol", [-1, 6, 100])
    def test_symbol_out_of_range(self, casino_emission, symbol):
        with pytest.raises(InvalidObservationError):
            casino_emission.log_emission(symbol, 0)

    def test_bad_state(self, casino_emission):
        with pytest.raises(ViterbiError):
            casino_emission.log_emission(0, 2)

    def test_zero_probability_is_minus_inf(self):
        emission = CategoricalEmission([[1.0, 0.0], [0.5, 0.5]])
        assert emission.log_emission(1, 0) == -np.inf

    def test_n_symbols(self, casino_emission):
        assert casino_emission.n_symbols == 6

    def test_wrong_orientation_rejected(self):
        with pytest.raises(ModelParameterError):
            CategoricalEmission(np.full((6, 2), 0.5))

    def test_negative_probability_rejected(self):
        with pytest.raises(ModelParameterError):
            CategoricalEmission([[1.5, -0.5], [0.5, 0.5]])

    def test_unnormalised_rows_warn(self):
        with pytest.warns(RuntimeWarning):
            CategoricalEmission([[0.5, 0.6], [0.5, 0.5]])


class TestPoissonEmission:
    def test_matches_scipy(self, poisson_emission):
        for k in [0, 1, 2, 5, 12]:
            for state, rate in enumerate([1.8234, 5.7812]):
                np.testing.assert_allclose(poisson_emission.log_emission(k, state),
                                           stats.poisson.logpmf(k, rate))

    def test_zero_count(self, poisson_emission):
        np.testing.assert_allclose(poisson_emission.log_emission(0, 0), -1.8234)

    @pytest.mark.parametrize("k", [170, 171, 1000, 100000])
    def test_large_counts_stay_finite(self, poisson_emission, k):
        """170! overflows a double; gammaln keeps the log-probability exact."""
        for state, rate in enumerate([1.8234, 5.7812]):
            value = poisson_emission.log_emission(k, state)
            assert np.isfinite(value)
            np.testing.assert_allclose(value, stats.poisson.logpmf(k, rate), rtol=1e-10)

    def test_large_count_in_sequence(self, poisson_emission):
        log_emit = poisson_emission.log_emissions([1, 170, 2])
        assert np.all(np.isfinite(log_emit))
        # an extreme count is far likelier under the high-rate state
        assert log_emit[1, 1] > log_emit[1, 0]

    def test_negative_count(self, poisson_emission):
        with pytest.raises(InvalidObservationError):
            poisson_emission.log_emissions([1, 2, -3])

    @pytest.mark.parametrize("rates", [[1.0], [1.0, 2.0, 3.0], [0.0, 1.0], [-1.0, 1.0], [np.inf, 1.0]])
    def test_bad_rates(self, rates):
        with pytest.raises(ModelParameterError):
            PoissonEmission(rates)


class TestEmissionModelBase:
    def test_base_is_abstract(self):
        with pytest.raises(NotImplementedError):
            EmissionModel().log_emissions([0])
