"""Ordered, bounded-concurrency map over a thread pool.

``p_map`` keeps at most ``concurrency`` calls in flight, tops the window up as
calls finish, and returns results in input order. The first error cancels any
work not yet started and propagates.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import TypeVar

InT = TypeVar("InT")
OutT = TypeVar("OutT")


def p_map(
    iterable: Iterable[InT],
    mapper: Callable[[InT], OutT],
    *,
    concurrency: int,
) -> list[OutT]:
    """Map ``iterable`` through ``mapper`` with at most ``concurrency`` workers."""

    if not isinstance(concurrency, int) or concurrency < 1:
        raise ValueError("concurrency must be a positive integer")

    items = list(iterable)
    if concurrency == 1:
        return [mapper(item) for item in items]

    pending = iter(enumerate(items))
    results: dict[int, OutT] = {}
    future_to_idx: dict[Future[OutT], int] = {}

    with ThreadPoolExecutor(max_workers=concurrency) as pool:

        def _submit() -> Future[OutT] | None:
            nxt = next(pending, None)
            if nxt is None:
                return None
            idx, item = nxt
            fut = pool.submit(mapper, item)
            future_to_idx[fut] = idx
            return fut

        # Prime the window.
        active: set[Future[OutT]] = set()
        for _ in range(concurrency):
            fut = _submit()
            if fut is None:
                break
            active.add(fut)

        while active:
            done, active = wait(active, return_when=FIRST_COMPLETED)
            for fut in done:
                idx = future_to_idx.pop(fut)
                try:
                    results[idx] = fut.result()
                except Exception:
                    pool.shutdown(wait=False, cancel_futures=True)
                    raise
                nxt_fut = _submit()
                if nxt_fut is not None:
                    active.add(nxt_fut)

    return [results[i] for i in range(len(items))]


__all__ = ["p_map"]
