"""Settle-all fan-out: run a batch of fetches and keep every outcome."""
from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Generic, Iterable, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Settled(Generic[T]):
    """Outcome of one task in a batch: a value or the exception it raised."""

    key: str
    value: T | None = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def settle_all(
    jobs: Iterable[tuple[str, Awaitable[T]]],
    max_concurrency: int | None = None,
) -> list[Settled[T]]:
    """Await every job concurrently, never failing fast.

    Results come back in submission order regardless of completion order.
    """
    semaphore = asyncio.Semaphore(max_concurrency) if max_concurrency else None

    async def _run(job: Awaitable[T]) -> T:
        if semaphore is None:
            return await job
        async with semaphore:
            return await job

    keyed = list(jobs)
    results = await asyncio.gather(
        *(_run(job) for _, job in keyed), return_exceptions=True
    )

    settled: list[Settled[T]] = []
    for (key, _), result in zip(keyed, results):
        if isinstance(result, BaseException):
            settled.append(Settled(key=key, error=result))
        else:
            settled.append(Settled(key=key, value=result))
    return settled
