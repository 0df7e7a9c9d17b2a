"""
Noise Field Module
==================

Deterministic fractal gradient noise sampled at world coordinates.

The permutation table starts from the classic 256-entry Perlin table and
is reshuffled by a seeded linear-congruential sequence, then doubled so
lattice lookups never wrap. All functions accept scalars or numpy arrays
and give bit-identical results for identical inputs regardless of call
order.
"""

from functools import lru_cache
from typing import Union

import numpy as np

ArrayLike = Union[float, np.ndarray]

LCG_MULTIPLIER = 1103515245
LCG_INCREMENT = 12345
LCG_MODULUS = 2 ** 31

OCTAVE_OFFSET = 100.0

BASE_PERMUTATION = (
    151, 160, 137, 91, 90, 15, 131, 13, 201, 95, 96, 53, 194, 233, 7, 225, 140,
    36, 103, 30, 69, 142, 8, 99, 37, 240, 21, 10, 23, 190, 6, 148, 247, 120, 234,
    75, 0, 26, 197, 62, 94, 252, 219, 203, 117, 35, 11, 32, 57, 177, 33, 88, 237,
    149, 56, 87, 174, 20, 125, 136, 171, 168, 68, 175, 74, 165, 71, 134, 139, 48,
    27, 166, 77, 146, 158, 231, 83, 111, 229, 122, 60, 211, 133, 230, 220, 105,
    92, 41, 55, 46, 245, 40, 244, 102, 143, 54, 65, 25, 63, 161, 1, 216, 80, 73,
    209, 76, 132, 187, 208, 89, 18, 169, 200, 196, 135, 130, 116, 188, 159, 86,
    164, 100, 109, 198, 173, 186, 3, 64, 52, 217, 226, 250, 124, 123, 5, 202, 38,
    147, 118, 126, 255, 82, 85, 212, 207, 206, 59, 227, 47, 16, 58, 17, 182, 189,
    28, 42, 223, 183, 170, 213, 119, 248, 152, 2, 44, 154, 163, 70, 221, 153, 101,
    155, 167, 43, 172, 9, 129, 22, 39, 253, 19, 98, 108, 110, 79, 113, 224, 232,
    178, 185, 112, 104, 218, 246, 97, 228, 251, 34, 242, 193, 238, 210, 144, 12,
    191, 179, 162, 241, 81, 51, 145, 235, 249, 14, 239, 107, 49, 192, 214, 31,
    181, 199, 106, 157, 184, 84, 204, 176, 115, 121, 50, 45, 127, 4, 150, 254,
    138, 236, 205, 93, 222, 114, 67, 29, 24, 72, 243, 141, 128, 195, 78, 66, 215,
    61, 156, 180,
)


class SeededRandom:
    """
    Linear-congruential uniform source.

    Injectable wherever generation needs randomness; any object with a
    ``random() -> float in [0, 1)`` method can stand in for it (for
    example ``numpy.random.Generator``).
    """

    def __init__(self, seed: int):
        self.state = int(seed) % LCG_MODULUS

    def next_int(self) -> int:
        self.state = (self.state * LCG_MULTIPLIER + LCG_INCREMENT) % LCG_MODULUS
        return self.state

    def random(self) -> float:
        return self.next_int() / LCG_MODULUS

    def uniform(self, low: float, high: float) -> float:
        return low + self.random() * (high - low)


@lru_cache(maxsize=16)
def permutation_table(seed: int) -> np.ndarray:
    """Seeded 512-entry permutation table (read-only, cached per seed)"""
    p = list(BASE_PERMUTATION)
    lcg = SeededRandom(seed)
    for i in range(len(p) - 1, 0, -1):
        j = lcg.next_int() % (i + 1)
        p[i], p[j] = p[j], p[i]
    table = np.array(p + p, dtype=np.int64)
    table.flags.writeable = False
    return table


def _fade(t: np.ndarray) -> np.ndarray:
    return t * t * t * (t * (t * 6.0 - 15.0) + 10.0)


def _grad(h: np.ndarray, x: np.ndarray, y: np.ndarray) -> np.ndarray:
    h = h & 3
    u = np.where(h < 2, x, y)
    v = np.where(h < 2, y, x)
    return np.where((h & 1) == 0, u, -u) + np.where((h & 2) == 0, v, -v)


def _perlin(perm: np.ndarray, x: np.ndarray, y: np.ndarray) -> np.ndarray:
    x0 = np.floor(x)
    y0 = np.floor(y)
    xi = x0.astype(np.int64) & 255
    yi = y0.astype(np.int64) & 255
    xf = x - x0
    yf = y - y0

    u = _fade(xf)
    v = _fade(yf)

    a = perm[xi]
    b = perm[xi + 1]
    aa = perm[a + yi]
    ab = perm[a + yi + 1]
    ba = perm[b + yi]
    bb = perm[b + yi + 1]

    x1 = _lerp(_grad(aa, xf, yf), _grad(ba, xf - 1.0, yf), u)
    x2 = _lerp(_grad(ab, xf, yf - 1.0), _grad(bb, xf - 1.0, yf - 1.0), u)
    return _lerp(x1, x2, v)


def _lerp(a, b, t):
    return a + t * (b - a)


def _output(value: np.ndarray, scalar: bool) -> ArrayLike:
    return float(value) if scalar else value


class NoiseField:
    """
    Seeded gradient noise.

    Holds the permutation table for one seed so repeated sampling does not
    rebuild it. Instances are immutable and safe to share.
    """

    def __init__(self, seed: int):
        self.seed = int(seed)
        self._perm = permutation_table(self.seed)

    def sample(self, x: ArrayLike, y: ArrayLike) -> ArrayLike:
        """Single-octave noise in [-1, 1]"""
        scalar = np.isscalar(x) and np.isscalar(y)
        xa = np.asarray(x, dtype=np.float64)
        ya = np.asarray(y, dtype=np.float64)
        value = np.clip(_perlin(self._perm, xa, ya), -1.0, 1.0)
        return _output(value, scalar)

    def fractal(self, x: ArrayLike, y: ArrayLike, octaves: int,
                persistence: float, base_frequency: float) -> ArrayLike:
        """
        Fractal (fBm) noise in [-1, 1].

        Each octave doubles the frequency, scales the amplitude by
        ``persistence`` and is shifted by the seed and octave index so
        layers do not line up. The sum is normalized by the total
        amplitude actually applied.
        """
        scalar = np.isscalar(x) and np.isscalar(y)
        xa = np.asarray(x, dtype=np.float64)
        ya = np.asarray(y, dtype=np.float64)

        total = np.zeros(np.broadcast(xa, ya).shape, dtype=np.float64)
        amplitude = 1.0
        frequency = float(base_frequency)
        amplitude_sum = 0.0

        for octave in range(int(octaves)):
            offset = self.seed + octave * OCTAVE_OFFSET
            total += _perlin(self._perm, xa * frequency + offset, ya * frequency + offset) * amplitude
            amplitude_sum += amplitude
            amplitude *= persistence
            frequency *= 2.0

        if amplitude_sum > 0:
            total /= amplitude_sum
        return _output(np.clip(total, -1.0, 1.0), scalar)


def sample(seed: int, x: ArrayLike, y: ArrayLike) -> ArrayLike:
    """Deterministic gradient noise for ``seed`` at (x, y), in [-1, 1]"""
    return NoiseField(seed).sample(x, y)


def fractal_sample(seed: int, x: ArrayLike, y: ArrayLike, octaves: int,
                   persistence: float, base_frequency: float) -> ArrayLike:
    """Deterministic fractal noise for ``seed`` at (x, y), in [-1, 1]"""
    return NoiseField(seed).fractal(x, y, octaves, persistence, base_frequency)
