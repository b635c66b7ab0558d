# sim/rng.py
from __future__ import annotations

from dataclasses import dataclass
from zlib import crc32

import numpy as np


def _u32(x: int) -> int:
    return int(x & 0xFFFFFFFF)


def _crc32_u32(s: str) -> int:
    return _u32(crc32(s.encode("utf-8")))


@dataclass(frozen=True)
class RNGKey:
    """Stream name plus optional sub-keys (ints or strings), normalized to u32."""

    stream: str
    parts: tuple[int, ...]

    @classmethod
    def from_parts(cls, stream: str, *parts: object) -> RNGKey:
        norm: list[int] = [_crc32_u32(stream)]
        for p in parts:
            if isinstance(p, (int, np.integer)):
                norm.append(_u32(int(p)))
            elif isinstance(p, str):
                norm.append(_crc32_u32(p))
            else:
                norm.append(_crc32_u32(repr(p)))
        return cls(stream=stream, parts=tuple(norm))


class RNGRegistry:
    """
    Deterministic registry of numpy Generators, one per named stream.
    Each stream is seeded from [master_seed, scenario, *key.parts], so the
    draws of one stream do not depend on which other streams were used.
    """

    def __init__(self, master_seed: int, *, scenario: str | int = 0):
        self.master_seed = _u32(master_seed)
        self.scenario_tag = _crc32_u32(str(scenario))
        self._gens: dict[RNGKey, np.random.Generator] = {}

    def generator(self, key: RNGKey) -> np.random.Generator:
        """Get (and cache on this registry) the generator for a key."""
        gen = self._gens.get(key)
        if gen is None:
            ss = np.random.SeedSequence(entropy=[self.master_seed, self.scenario_tag, *key.parts])
            gen = self._gens[key] = np.random.Generator(np.random.PCG64(ss))
        return gen

    def stream(self, name: str) -> np.random.Generator:
        return self.generator(RNGKey.from_parts(name))

    def substream(self, name: str, *parts: object) -> np.random.Generator:
        return self.generator(RNGKey.from_parts(name, *parts))
