# src/colvis/visitors/fourier.py
"""
Discrete Fourier transform of a column, for any column length.

Power-of-two lengths go through an iterative radix-2 Cooley-Tukey kernel;
every other length is rewritten as a power-of-two convolution (Bluestein's
chirp-z algorithm), so the whole visitor stays O(N log N).
"""
import logging
import numpy as np

from colvis.utils import as_column, validate_same_length


# ---------------- Kernels ----------------

def _is_power_of_two(n: int) -> bool:
    return n > 0 and (n & (n - 1)) == 0

def _bit_reversal_permutation(n: int) -> np.ndarray:
    """Index array that reorders 0..n-1 by reversing log2(n) bits."""
    width = n.bit_length() - 1
    idx = np.arange(n, dtype=np.int64)
    rev = np.zeros(n, dtype=np.int64)
    for _ in range(width):
        rev = (rev << 1) | (idx & 1)
        idx >>= 1
    return rev

def fft_radix2(column: np.ndarray, reverse: bool = False) -> np.ndarray:
    """
    Decimation-in-time radix-2 transform of a power-of-two length complex array.

    `reverse` flips the sign of the twiddle angles (an unscaled inverse).
    """
    n = len(column)
    out = np.asarray(column, dtype="complex128")[_bit_reversal_permutation(n)]

    # n/2 roots of unity, shared by every stage
    two_pi = (2.0 if reverse else -2.0) * np.pi
    exp_table = np.exp(1j * two_pi * np.arange(n // 2) / n)

    size = 2
    while size <= n:
        half = size // 2
        blocks = out.reshape(-1, size)
        even = blocks[:, :half]
        temp = blocks[:, half:] * exp_table[::n // size]
        out = np.concatenate((even + temp, even - temp), axis=1).reshape(n)
        size *= 2
    return out

def _convolve(xvec: np.ndarray, yvec: np.ndarray) -> np.ndarray:
    """Circular convolution of two power-of-two length arrays via three transforms."""
    prod = fft_radix2(xvec) * fft_radix2(yvec)
    return fft_radix2(prod, reverse=True) / len(prod)

def fft_bluestein(column: np.ndarray, reverse: bool = False) -> np.ndarray:
    """Chirp-z transform for arbitrary lengths."""
    n = len(column)

    # chirp factors exp(-+ i*pi*k^2/n); k^2 is reduced mod 2n to keep the angle small
    k = np.arange(n, dtype=np.int64)
    sq = (k * k) % (2 * n)
    pi = np.pi if reverse else -np.pi
    exp_table = np.exp(1j * pi * sq / n)

    # power of two convolution length m > 2n
    m = 1
    while m // 2 <= n:
        m *= 2

    xvec = np.zeros(m, dtype="complex128")
    xvec[:n] = column * exp_table

    yvec = np.zeros(m, dtype="complex128")
    yvec[0] = exp_table[0]
    if n > 1:
        conj = np.conj(exp_table[1:])
        yvec[1:n] = conj
        yvec[m - n + 1:] = conj[::-1]

    conv = _convolve(xvec, yvec)
    return exp_table * conv[:n]

def transform(column: np.ndarray, reverse: bool = False) -> np.ndarray:
    """Unscaled DFT, choosing the kernel by length."""
    n = len(column)
    if n == 0:
        return np.asarray(column, dtype="complex128")
    if _is_power_of_two(n):
        logging.debug(f"FFT radix-2 path, length {n}")
        return fft_radix2(column, reverse)
    logging.debug(f"FFT Bluestein path, length {n}")
    return fft_bluestein(column, reverse)

def inverse_transform(column: np.ndarray) -> np.ndarray:
    """Inverse DFT as conjugate -> forward -> conjugate -> scale by 1/n."""
    n = len(column)
    if n == 0:
        return np.asarray(column, dtype="complex128")
    out = transform(np.conj(column), reverse=False)
    return np.conj(out) / n


# ---------------- Visitor ----------------

class FFTVisitor:
    """
    Forward (or inverse) Fourier transform of a column.

    The result is a complex array of the column's length; magnitude and phase are
    derived on first access and cached until the next `pre`.

    Parameters
    ----------
    inverse : bool, default False
        Compute the inverse transform instead of the forward one.
    """

    def __init__(self, inverse: bool = False):
        self.inverse = inverse
        self._result = np.array([], dtype="complex128")
        self._magnitude: np.ndarray | None = None
        self._phase: np.ndarray | None = None

    def pre(self) -> None:
        self._result = np.array([], dtype="complex128")
        self._magnitude = None
        self._phase = None

    def __call__(self, index, values) -> None:
        col = as_column(values)
        validate_same_length(index, col, names=("index", "values"))
        if len(col) == 0:
            return

        # real columns are lifted to complex with zero imaginary part
        work = col.astype("complex128") if np.iscomplexobj(col) else col.astype("float64").astype("complex128")

        if self.inverse:
            self._result = inverse_transform(work)
        else:
            self._result = transform(work)
        self._magnitude = None
        self._phase = None

    def post(self) -> None:
        pass

    def get_result(self) -> np.ndarray:
        return self._result

    def get_magnitude(self) -> np.ndarray:
        if self._magnitude is None:
            self._magnitude = np.abs(self._result)
        return self._magnitude

    def get_phase(self) -> np.ndarray:
        """Argument of each coefficient, in radians."""
        if self._phase is None:
            self._phase = np.angle(self._result)
        return self._phase
