"""
Seedable random number generation for wall shuffling and dealer selection.

A game seed (any string, by default 48 random bytes as hex) is expanded with
SHA-512 under a versioned domain prefix into the state of a PCG64DXSM
generator. Shuffles are Fisher-Yates with rejection-sampled bounds, so every
permutation is equally likely and a seed always reproduces the same game.
"""

from __future__ import annotations

import hashlib
import secrets
from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from collections.abc import Sequence

T = TypeVar("T")

SEED_BYTES = 48
RNG_VERSION = "pcg64dxsm-v1"
WALL_DOMAIN = b"pinoy-mahjong-wall-v1:"
DEALER_DOMAIN = b"pinoy-mahjong-dealer-v1:"
AI_DOMAIN = b"pinoy-mahjong-ai-v1:"

_PCG_MULTIPLIER = 0x2360ED051FC65DA44385DF649FCCF645
_PCG_DXSM_MUL = 0xDA942042E4DD58B5
_UINT128_MASK = (1 << 128) - 1
_UINT64_MASK = (1 << 64) - 1


def generate_seed() -> str:
    """Generate a fresh cryptographic seed as a hex string."""
    return secrets.token_bytes(SEED_BYTES).hex()


class TileRng:
    """
    PCG64DXSM stream: 128-bit LCG state with the double-xorshift-multiply output.

    Use from_seed() to build a stream for a named purpose (wall, dealer) so the
    streams of one game never overlap.
    """

    def __init__(self, state: int, increment: int) -> None:
        self._inc = ((increment << 1) | 1) & _UINT128_MASK
        self._state = (state + self._inc) & _UINT128_MASK
        # two warm-up steps so low-entropy states do not leak into the first outputs
        for _ in range(2):
            self._step()

    @classmethod
    def from_seed(cls, seed: str, domain: bytes = WALL_DOMAIN) -> TileRng:
        """Derive a stream from SHA-512(domain + seed)."""
        if not isinstance(seed, str) or not seed:
            raise ValueError("seed must be a non-empty string")
        digest = hashlib.sha512(domain + seed.encode("utf-8")).digest()
        state = int.from_bytes(digest[:16], byteorder="little")
        increment = int.from_bytes(digest[16:32], byteorder="little")
        return cls(state, increment)

    def _step(self) -> None:
        self._state = (self._state * _PCG_MULTIPLIER + self._inc) & _UINT128_MASK

    def next_uint64(self) -> int:
        """Return the next 64-bit output and advance the state."""
        hi = (self._state >> 64) & _UINT64_MASK
        lo = (self._state & _UINT64_MASK) | 1
        hi ^= hi >> 32
        hi = (hi * _PCG_DXSM_MUL) & _UINT64_MASK
        hi ^= hi >> 48
        hi = (hi * lo) & _UINT64_MASK
        self._step()
        return hi

    def below(self, bound: int) -> int:
        """
        Return an unbiased integer in [0, bound).

        Outputs from the partial final bucket are rejected, which removes modulo
        bias entirely.
        """
        if bound <= 0 or bound > (1 << 64):
            raise ValueError("bound must be in (0, 2^64]")
        limit = (1 << 64) - ((1 << 64) % bound)
        while True:
            r = self.next_uint64()
            if r < limit:
                return r % bound

    def shuffle(self, items: Sequence[T]) -> list[T]:
        """Return a Fisher-Yates permutation of items; the input is untouched."""
        result = list(items)
        for i in range(len(result) - 1, 0, -1):
            j = self.below(i + 1)
            result[i], result[j] = result[j], result[i]
        return result


def choose_dealer(seed: str, num_players: int = 4) -> int:
    """Pick the first dealer seat from a stream independent of the wall."""
    return TileRng.from_seed(seed, DEALER_DOMAIN).below(num_players)
