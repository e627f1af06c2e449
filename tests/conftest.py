"""Shared fixtures for game tests."""

import asyncio
import random

import pytest
import pytest_asyncio

from game.messenger import Member, Messenger
from game.notices import GameResults
from game.polls import Poll
from game.session_manager import GameTimings, SessionManager
from utils.name_resolver import NameResolver

BOT_ID = "bot"

NAMES = {
    "addr-p1": "alice",
    "addr-p2": "bob",
    "addr-p3": "carol",
    "addr-p4": "dave",
}


class FakeMessenger(Messenger):
    """Records everything the session manager sends."""

    def __init__(self, members=None, failing_dms=()):
        self.members = list(members or [])
        self.failing_dms = set(failing_dms)
        self.members_error = None
        self.members_delay = 0
        self.group_messages = []
        self.private_messages = []

    @property
    def self_id(self):
        return BOT_ID

    async def get_members(self, group_id):
        if self.members_delay:
            await asyncio.sleep(self.members_delay)
        if self.members_error:
            raise self.members_error
        return list(self.members)

    async def send_group(self, group_id, payload):
        self.group_messages.append((group_id, payload))
        return True

    async def send_private(self, member_id, payload):
        if member_id in self.failing_dms:
            return False
        self.private_messages.append((member_id, payload))
        return True

    def texts(self, group_id):
        return [p for g, p in self.group_messages if g == group_id and isinstance(p, str)]

    def polls(self, group_id):
        return [p for g, p in self.group_messages if g == group_id and isinstance(p, Poll)]

    def results(self, group_id):
        return [p for g, p in self.group_messages if g == group_id and isinstance(p, GameResults)]


class FixedChoice:
    """Random source that always picks the same index."""

    def __init__(self, index):
        self.index = index

    def choice(self, seq):
        return seq[min(self.index, len(seq) - 1)]


def make_members(count, with_bot=True):
    members = [Member(id=f"P{i}", handle=f"addr-p{i}") for i in range(1, count + 1)]
    if with_bot:
        members.append(Member(id=BOT_ID, handle="addr-bot"))
    return members


async def _lookup(handle):
    return NAMES.get(handle)


@pytest.fixture
def messenger():
    return FakeMessenger(members=make_members(3))


@pytest.fixture
def resolver():
    return NameResolver(_lookup)


@pytest.fixture
def timings():
    # 5 minute discussion lasts 50ms
    return GameTimings(
        duration_vote=0.1,
        player_vote=5,
        reset_grace=0.1,
        speaker_reveal=0,
        seconds_per_minute=0.01,
    )


@pytest_asyncio.fixture
async def manager(messenger, resolver, timings):
    manager = SessionManager(messenger, resolver, rng=random.Random(7), timings=timings)
    yield manager
    manager.shutdown()


@pytest.fixture
def wait_for_phase():
    async def wait(manager, group_id, phase, timeout=2.0):
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while manager.get_status(group_id).phase != phase:
            if loop.time() > deadline:
                current = manager.get_status(group_id).phase
                raise AssertionError(f"expected {phase}, still {current}")
            await asyncio.sleep(0.01)
    return wait


@pytest.fixture
def members():
    return make_members


@pytest_asyncio.fixture
async def build_manager(resolver, timings):
    """Factory for managers with their own messenger, random source or timings."""
    built = []

    def build(messenger, rng=None, **overrides):
        custom = GameTimings(**{**timings.__dict__, **overrides})
        manager = SessionManager(messenger, resolver, rng=rng or random.Random(7), timings=custom)
        built.append(manager)
        return manager

    yield build
    for manager in built:
        manager.shutdown()


@pytest.fixture
def make_messenger():
    return FakeMessenger


@pytest.fixture
def fixed_choice():
    return FixedChoice
