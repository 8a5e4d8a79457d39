import asyncio

from droidcommand.utils.helpers import cancellable_sleep, parse_duration_ms


def test_parse_duration_ms():
    assert parse_duration_ms("2000", 1000) == 2000
    assert parse_duration_ms(" 15 ", 1000) == 15
    assert parse_duration_ms("two seconds", 1000) == 1000
    assert parse_duration_ms("-5", 1000) == 1000
    assert parse_duration_ms("", 750) == 750


def test_cancellable_sleep_completes():
    assert asyncio.run(cancellable_sleep(0.01)) is False
    assert asyncio.run(cancellable_sleep(0.01, asyncio.Event())) is False


def test_cancellable_sleep_returns_early_on_cancel():
    async def scenario():
        cancel = asyncio.Event()
        asyncio.get_running_loop().call_later(0.01, cancel.set)
        return await asyncio.wait_for(cancellable_sleep(60, cancel), timeout=5)

    assert asyncio.run(scenario()) is True


def test_cancellable_sleep_already_cancelled():
    async def scenario():
        cancel = asyncio.Event()
        cancel.set()
        return await cancellable_sleep(60, cancel)

    assert asyncio.run(scenario()) is True
