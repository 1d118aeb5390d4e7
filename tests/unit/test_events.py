from types import SimpleNamespace

import pytest

from script.errors import EventTimeoutError
from script.events import (
    EventSubscription,
    active_subscriptions,
    event_args,
    event_name,
    find_events,
    once,
)

RAFFLE_ADDRESS = "0x00000000000000000000000000000000000000Aa"
OTHER_ADDRESS = "0x00000000000000000000000000000000000000bb"


def make_log(name, address=None, **args):
    log = SimpleNamespace(event_type=SimpleNamespace(name=name), args_map=args)
    if address is not None:
        log.address = address
    return log


class FakeEnv:
    def execute_code(self, logs=(), is_error=False):
        return SimpleNamespace(logs=list(logs), is_error=is_error)


class FakeSource:
    """A contract handle whose get_logs() reads one call, the last by default"""

    address = RAFFLE_ADDRESS

    def __init__(self, env=None):
        self.env = env or FakeEnv()
        self._computation = None

    def transact(self, *logs, is_error=False):
        self._computation = self.env.execute_code(logs, is_error=is_error)

    def get_logs(self, computation=None):
        if computation is None:
            computation = self._computation
        return [] if computation is None else list(computation.logs)


def test_event_name_and_args():
    log = make_log("WinnerPicked", winner="0xabc")
    assert event_name(log) == "WinnerPicked"
    assert event_args(log) == {"winner": "0xabc"}


def test_event_helpers_accept_named_tuples():
    from collections import namedtuple

    RaffleEnter = namedtuple("RaffleEnter", ["player"])
    log = RaffleEnter(player="0xabc")
    assert event_name(log) == "RaffleEnter"
    assert event_args(log) == {"player": "0xabc"}


def test_find_events_filters_by_name():
    source = FakeSource()
    source.transact(make_log("RaffleEnter"), make_log("WinnerPicked"), make_log("RaffleEnter"))
    assert len(find_events(source, "RaffleEnter")) == 2


def test_wait_returns_first_matching_event_and_unsubscribes():
    source = FakeSource()
    winner = make_log("WinnerPicked", winner="0xabc")
    with once(source, "WinnerPicked", timeout=5, poll_interval=0) as subscription:
        assert subscription in active_subscriptions()
        source.transact(make_log("RaffleEnter"), winner)
        assert subscription.wait() is winner
        assert not subscription.active
    assert subscription.event is winner
    assert active_subscriptions() == []


def test_later_calls_do_not_hide_the_event():
    source = FakeSource()
    winner = make_log("WinnerPicked")
    with once(source, "WinnerPicked", timeout=5, poll_interval=0) as subscription:
        source.transact(winner)
        source.transact()
        source.transact(make_log("RaffleEnter"))
        assert subscription.wait() is winner


def test_events_from_before_subscribing_are_ignored():
    source = FakeSource()
    source.transact(make_log("WinnerPicked"))
    with once(source, "WinnerPicked", timeout=0.05, poll_interval=0.01) as subscription:
        with pytest.raises(EventTimeoutError, match="WinnerPicked"):
            subscription.wait()


def test_reverted_calls_are_ignored():
    source = FakeSource()
    with once(source, "WinnerPicked", timeout=0.05, poll_interval=0.01) as subscription:
        source.transact(make_log("WinnerPicked"), is_error=True)
        with pytest.raises(EventTimeoutError):
            subscription.wait()


def test_only_events_from_the_source_contract_match():
    source = FakeSource()
    ours = make_log("WinnerPicked", address=RAFFLE_ADDRESS.lower())
    with once(source, "WinnerPicked", timeout=5, poll_interval=0) as subscription:
        source.transact(make_log("WinnerPicked", address=OTHER_ADDRESS), ours)
        assert subscription.wait() is ours


def test_wait_times_out_instead_of_hanging():
    source = FakeSource()
    with once(source, "WinnerPicked", timeout=0.05, poll_interval=0.01) as subscription:
        source.transact(make_log("RaffleEnter"))
        with pytest.raises(EventTimeoutError, match="WinnerPicked"):
            subscription.wait()
    assert active_subscriptions() == []


def test_env_is_restored_once_the_last_listener_closes():
    env = FakeEnv()
    first = once(FakeSource(env), "WinnerPicked").subscribe()
    second = once(FakeSource(env), "RaffleEnter").subscribe()
    assert "execute_code" in vars(env)
    first.cancel()
    assert "execute_code" in vars(env)
    second.cancel()
    assert "execute_code" not in vars(env)


def test_every_open_listener_sees_the_call():
    env = FakeEnv()
    source = FakeSource(env)
    with once(source, "RaffleEnter", poll_interval=0) as entered:
        with once(source, "WinnerPicked", poll_interval=0) as winner_picked:
            source.transact(make_log("RaffleEnter"), make_log("WinnerPicked"))
            assert event_name(winner_picked.wait()) == "WinnerPicked"
        assert event_name(entered.wait()) == "RaffleEnter"


def test_event_timeout_is_a_timeout_error():
    assert issubclass(EventTimeoutError, TimeoutError)


def test_listener_is_removed_when_the_block_raises():
    source = FakeSource()
    with pytest.raises(ValueError):
        with once(source, "WinnerPicked") as subscription:
            raise ValueError("boom")
    assert not subscription.active
    assert active_subscriptions() == []
    assert "execute_code" not in vars(source.env)


def test_cancelled_subscription_cannot_wait():
    subscription = EventSubscription(FakeSource(), "WinnerPicked").subscribe()
    subscription.cancel()
    with pytest.raises(RuntimeError, match="Not listening"):
        subscription.wait()


def test_cannot_subscribe_twice():
    subscription = EventSubscription(FakeSource(), "WinnerPicked").subscribe()
    try:
        with pytest.raises(RuntimeError, match="Already listening"):
            subscription.subscribe()
    finally:
        subscription.cancel()
