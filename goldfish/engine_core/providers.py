"""
Providers - Injected sources of randomness, identity and time.

The engine never reaches for module-level random, uuid or the wall clock.
Everything nondeterministic comes through a Providers instance so tests
can pin shuffles, card ids and timestamps.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable
import random
import time
import uuid


@dataclass
class Providers:
    """
    Bundle of nondeterministic sources.

    Usage:
        providers = Providers()             # real randomness, uuid4 ids
        providers = Providers.seeded(42)    # reproducible everything
    """
    rng: random.Random = field(default_factory=random.Random)
    id_factory: Callable[[], str] | None = None
    clock: Callable[[], float] = time.time

    def new_id(self) -> str:
        """Return a fresh 128-bit identifier as 32 hex chars."""
        if self.id_factory is not None:
            return self.id_factory()
        return uuid.uuid4().hex

    def now(self) -> float:
        return self.clock()

    @classmethod
    def seeded(cls, seed: int, start_time: float = 0.0) -> Providers:
        """
        Deterministic providers.

        Ids are 128-bit values drawn from the same seeded generator,
        and the clock ticks one second per call from start_time.
        """
        rng = random.Random(seed)
        ticks = {"now": start_time}

        def next_id() -> str:
            return uuid.UUID(int=rng.getrandbits(128), version=4).hex

        def next_time() -> float:
            ticks["now"] += 1.0
            return ticks["now"]

        return cls(rng=rng, id_factory=next_id, clock=next_time)
