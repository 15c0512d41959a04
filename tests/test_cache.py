import asyncio

import pytest

from lazycrate import canonicalize
from lazycrate.cache import ABANDONED, CallSignatureCache


def test_lookup_distinguishes_cached_none_from_miss():
    cache = CallSignatureCache()
    sig = canonicalize("value")

    assert cache.lookup(sig) == (False, None)
    cache.put(sig, None)
    assert cache.lookup(sig) == (True, None)
    assert sig in cache
    assert len(cache) == 1
    assert list(cache) == [sig]


def test_clear():
    cache = CallSignatureCache()
    cache.put(canonicalize("a"), 1)

    cache.clear()

    assert len(cache) == 0
    assert cache.get(canonicalize("a"), "missing") == "missing"


@pytest.mark.asyncio
async def test_complete_releases_waiters():
    cache = CallSignatureCache()
    sig = canonicalize("pool", (1,))
    future = cache.begin(sig)

    assert cache.pending(sig) is future
    cache.complete(sig, "ready")

    assert await future == "ready"
    assert cache.pending(sig) is None
    assert cache.lookup(sig) == (True, "ready")


@pytest.mark.asyncio
async def test_fail_releases_waiters_and_stores_nothing():
    cache = CallSignatureCache()
    sig = canonicalize("pool")
    future = cache.begin(sig)

    cache.fail(sig, ValueError("nope"))

    with pytest.raises(ValueError):
        await future
    assert cache.pending(sig) is None
    assert sig not in cache


@pytest.mark.asyncio
async def test_cancelled_construction_tells_waiters_to_retry():
    cache = CallSignatureCache()
    sig = canonicalize("pool")
    future = cache.begin(sig)

    cache.fail(sig, asyncio.CancelledError())

    assert not future.cancelled()
    assert await future is ABANDONED
    assert cache.pending(sig) is None
    assert sig not in cache
