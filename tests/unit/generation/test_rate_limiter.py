"""Tests for the minimum-interval RateLimiter."""

from __future__ import annotations

import asyncio
import time

import pytest

from nanobanana.core.generation import RateLimiter


class FakeClock:
    """Manual clock whose sleep advances time instantly."""

    def __init__(self) -> None:
        self.now = 100.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


async def test_first_turn_is_immediate(clock: FakeClock) -> None:
    limiter = RateLimiter(1.0, clock=clock, sleep=clock.sleep)

    await limiter.acquire()

    assert clock.sleeps == []
    assert limiter.last_granted == 100.0


async def test_back_to_back_turns_wait_full_interval(clock: FakeClock) -> None:
    limiter = RateLimiter(1.0, clock=clock, sleep=clock.sleep)

    await limiter.acquire()
    await limiter.acquire()

    assert clock.sleeps == [pytest.approx(1.0)]
    assert limiter.last_granted == pytest.approx(101.0)


async def test_waits_only_remaining_interval(clock: FakeClock) -> None:
    limiter = RateLimiter(1.0, clock=clock, sleep=clock.sleep)

    await limiter.acquire()
    clock.now += 0.75
    await limiter.acquire()

    assert clock.sleeps == [pytest.approx(0.25)]


async def test_no_wait_after_interval_elapsed(clock: FakeClock) -> None:
    limiter = RateLimiter(1.0, clock=clock, sleep=clock.sleep)

    await limiter.acquire()
    clock.now += 5.0
    await limiter.acquire()

    assert clock.sleeps == []


async def test_concurrent_waiters_are_spaced(clock: FakeClock) -> None:
    """Test N concurrent acquires are granted at least one interval apart."""
    limiter = RateLimiter(0.5, clock=clock, sleep=clock.sleep)
    granted: list[float] = []

    async def worker() -> None:
        await limiter.acquire()
        granted.append(clock())

    await asyncio.gather(*(worker() for _ in range(4)))

    gaps = [b - a for a, b in zip(granted, granted[1:])]
    assert len(granted) == 4
    assert all(gap >= 0.5 - 1e-9 for gap in gaps)


async def test_real_clock_n_turns_take_n_minus_one_intervals() -> None:
    limiter = RateLimiter(0.05)

    start = time.monotonic()
    for _ in range(3):
        await limiter.acquire()
    elapsed = time.monotonic() - start

    assert elapsed >= 2 * 0.05 - 0.005


def test_negative_interval_rejected() -> None:
    with pytest.raises(ValueError):
        RateLimiter(-1.0)
