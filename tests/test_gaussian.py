"""Gaussian transform tests."""
import pytest

from conftest import ScriptedRNG
from kdroll.logic.gaussian import gaussian, skew_exponent
from kdroll.logic.rng import SystemRNG
from kdroll.logic.stats import mean
from kdroll.logic.uniform import MersenneTwister


# u=0.5, v=0.25 puts cos(2*pi*v) at ~0, so the draw lands on 0.5
CENTER_DRAW = [0.5, 0.25]


class TestSkewExponent:
    """Mapping of skew to the exponent applied to a draw."""

    @pytest.mark.parametrize(
        "skew, expected",
        [
            (0, 1),
            (-0.25, 0.75),
            (-0.5, 0.5),
            (-1, 0),
            (0.25, 1),
            (0.5, 2),
            (1, 4),
            (2, 4),
            (-3, 0),
        ],
    )
    def test_exponent(self, skew, expected):
        assert skew_exponent(skew) == expected


class TestGaussianScripted:
    """Box-Muller behavior on scripted uniform input."""

    def test_center_draw(self):
        assert gaussian(ScriptedRNG(CENTER_DRAW)) == 0.5

    def test_zero_draws_are_redrawn(self):
        source = ScriptedRNG([0.0, 0.5, 0.0, 0.25])
        assert gaussian(source) == 0.5
        assert source.draws == 4

    @pytest.mark.parametrize("skew, expected", [(1, 0.0625), (0.5, 0.25), (-0.5, 0.7071067811865476)])
    def test_skew_applied(self, skew, expected):
        assert gaussian(ScriptedRNG(CENTER_DRAW), skew) == pytest.approx(expected)

    def test_full_right_skew_is_one(self):
        assert gaussian(ScriptedRNG(CENTER_DRAW), -1) == 1

    def test_out_of_range_resamples_from_fresh_source(self):
        """u near zero pushes the draw far above 1."""
        fresh_sources = []

        def factory():
            source = ScriptedRNG(CENTER_DRAW)
            fresh_sources.append(source)
            return source

        original = ScriptedRNG([1e-300, 1e-12])
        assert gaussian(original, resample_source=factory) == 0.5
        assert original.draws == 2
        assert len(fresh_sources) == 1
        assert fresh_sources[0].draws == 2

    def test_resample_keeps_original_skew(self):
        result = gaussian(
            ScriptedRNG([1e-300, 1e-12]),
            skew=1,
            resample_source=lambda: ScriptedRNG(CENTER_DRAW),
        )
        assert result == 0.0625

    def test_repeated_resampling(self):
        scripts = [[1e-300, 1e-12], CENTER_DRAW]

        def factory():
            return ScriptedRNG(scripts.pop(0))

        assert gaussian(ScriptedRNG([1e-300, 1e-12]), resample_source=factory) == 0.5
        assert scripts == []


class TestGaussianSeeded:
    """Gaussian draws from real generators."""

    @pytest.mark.parametrize("skew", [-1, -0.5, -0.1, 0, 0.1, 0.5, 1])
    def test_range(self, diagnostics, skew):
        source = MersenneTwister(2024, diagnostics=diagnostics)
        for _ in range(500):
            value = gaussian(source, skew)
            assert 0 <= value <= 1

    def test_deterministic_for_seed(self, diagnostics):
        a = MersenneTwister([3, 1, 4], diagnostics=diagnostics)
        b = MersenneTwister([3, 1, 4], diagnostics=diagnostics)
        assert [gaussian(a) for _ in range(50)] == [gaussian(b) for _ in range(50)]

    def test_centered_without_skew(self, diagnostics):
        source = MersenneTwister(99, diagnostics=diagnostics)
        draws = [gaussian(source) for _ in range(1000)]
        assert 0.475 <= mean(draws) <= 0.525

    def test_skew_shifts_mass(self, diagnostics):
        left = MersenneTwister(5, diagnostics=diagnostics)
        right = MersenneTwister(5, diagnostics=diagnostics)
        left_mean = mean([gaussian(left, 0.5) for _ in range(500)])
        right_mean = mean([gaussian(right, -0.5) for _ in range(500)])
        assert left_mean < 0.5 < right_mean

    def test_system_source(self):
        source = SystemRNG()
        for _ in range(100):
            assert 0 <= gaussian(source) <= 1
