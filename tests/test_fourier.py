"""Tests for the FFT visitor and its kernels."""
import numpy as np
import pytest

from colvis.exceptions import LengthMismatchError
from colvis.protocol import visit
from colvis.visitors import FFTVisitor
from colvis.visitors.fourier import (
    _bit_reversal_permutation,
    fft_bluestein,
    fft_radix2,
    inverse_transform,
    transform,
)


class TestKernels:
    def test_bit_reversal(self):
        np.testing.assert_array_equal(_bit_reversal_permutation(8), [0, 4, 2, 6, 1, 5, 3, 7])
        np.testing.assert_array_equal(_bit_reversal_permutation(1), [0])

    @pytest.mark.parametrize("n", [1, 2, 4, 16, 256])
    def test_radix2_matches_numpy(self, rng, n):
        x = rng.normal(size=n) + 1j * rng.normal(size=n)
        np.testing.assert_allclose(fft_radix2(x), np.fft.fft(x), atol=1e-9)

    def test_radix2_reverse_is_unscaled_inverse(self, rng):
        x = rng.normal(size=32).astype("complex128")
        np.testing.assert_allclose(fft_radix2(x, reverse=True), np.fft.ifft(x) * 32, atol=1e-9)

    @pytest.mark.parametrize("n", [3, 5, 12, 13, 100])
    def test_bluestein_matches_numpy(self, rng, n):
        x = rng.normal(size=n) + 1j * rng.normal(size=n)
        np.testing.assert_allclose(fft_bluestein(x), np.fft.fft(x), atol=1e-8)

    def test_bluestein_handles_power_of_two_too(self, rng):
        x = rng.normal(size=16).astype("complex128")
        np.testing.assert_allclose(fft_bluestein(x), np.fft.fft(x), atol=1e-9)

    @pytest.mark.parametrize("n", [16, 13])
    def test_round_trip(self, rng, n):
        x = rng.normal(size=n).astype("complex128")
        np.testing.assert_allclose(inverse_transform(transform(x)), x, atol=1e-9)

    def test_empty(self):
        assert len(transform(np.array([], dtype="complex128"))) == 0
        assert len(inverse_transform(np.array([], dtype="complex128"))) == 0


class TestFFTVisitor:
    def test_result_shape_and_dtype(self, tone):
        v = visit(FFTVisitor(), tone.index, tone)
        res = v.get_result()
        assert res.dtype == np.complex128
        assert len(res) == len(tone)

    def test_tone_peaks_at_its_bin(self, tone):
        v = visit(FFTVisitor(), tone.index, tone)
        mag = v.get_magnitude()
        assert np.argmax(mag[: len(mag) // 2 + 1]) == 5
        # real input: X[k] = conj(X[n - k])
        np.testing.assert_allclose(v.get_result()[1:], np.conj(v.get_result()[1:][::-1]), atol=1e-9)

    @pytest.mark.parametrize("n", [16, 13])
    def test_matches_numpy(self, rng, positions, n):
        x = rng.normal(size=n)
        v = visit(FFTVisitor(), positions(n), x)
        np.testing.assert_allclose(v.get_result(), np.fft.fft(x), atol=1e-8)

    def test_constant_column_energy_at_dc(self, positions):
        v = visit(FFTVisitor(), positions(12), np.full(12, 3.0))
        res = v.get_result()
        assert abs(res[0] - 36.0) < 1e-9
        np.testing.assert_allclose(res[1:], 0.0, atol=1e-9)

    def test_zeros_and_length_one(self, positions):
        np.testing.assert_allclose(visit(FFTVisitor(), positions(8), np.zeros(8)).get_result(), 0.0)
        np.testing.assert_allclose(visit(FFTVisitor(), positions(1), [4.5]).get_result(), [4.5 + 0j])

    def test_inverse_visitor(self, rng, positions):
        x = rng.normal(size=20)
        spectrum = np.fft.fft(x)
        v = visit(FFTVisitor(inverse=True), positions(20), spectrum)
        np.testing.assert_allclose(v.get_result(), x, atol=1e-9)

    def test_empty_column_is_noop(self, positions):
        v = visit(FFTVisitor(), positions(0), np.array([]))
        assert len(v.get_result()) == 0
        assert len(v.get_magnitude()) == 0

    def test_magnitude_and_phase_cleared_on_pre(self, positions):
        v = visit(FFTVisitor(), positions(4), [1.0, 0.0, 0.0, 0.0])
        np.testing.assert_allclose(v.get_magnitude(), 1.0)
        np.testing.assert_allclose(v.get_phase(), 0.0, atol=1e-12)
        v.pre()
        assert len(v.get_magnitude()) == 0
        assert len(v.get_phase()) == 0

    def test_magnitude_refreshed_after_new_call(self, positions):
        v = visit(FFTVisitor(), positions(2), [1.0, 1.0])
        np.testing.assert_allclose(v.get_magnitude(), [2.0, 0.0], atol=1e-12)
        visit(v, positions(2), [1.0, -1.0])
        np.testing.assert_allclose(v.get_magnitude(), [0.0, 2.0], atol=1e-12)

    def test_length_mismatch(self, positions):
        with pytest.raises(LengthMismatchError):
            visit(FFTVisitor(), positions(4), [1.0, 2.0])
