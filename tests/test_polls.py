"""Tests for poll payloads."""

from datetime import datetime, timezone

import pytest

from game.polls import (
    ACCUSATION_POLL,
    DURATION_POLL,
    Poll,
    PollOption,
    build_accusation_poll,
    build_duration_poll,
    fallback_text,
    poll_kind,
)
from game.session import Player

NOW = datetime(2024, 5, 1, 20, 0, tzinfo=timezone.utc)


def test_duration_poll():
    poll = build_duration_poll(NOW)
    assert poll.id == f"duration-{int(NOW.timestamp() * 1000)}"
    assert poll.kind == DURATION_POLL
    assert [o.id for o in poll.options] == ["5", "7", "10"]
    poll.validate()


def test_accusation_poll_uses_resolved_names():
    players = [Player(id="P1", handle="h1"), Player(id="P2", handle="h2")]
    poll = build_accusation_poll(players, {"h1": "alice"}, NOW)

    assert poll.kind == ACCUSATION_POLL
    assert poll.options == (PollOption("P1", "alice"), PollOption("P2", "h2"))


@pytest.mark.parametrize("poll_id,kind", [
    ("duration-123", DURATION_POLL),
    ("voting-123", ACCUSATION_POLL),
    ("other-123", None),
    ("duration", None),
])
def test_poll_kind(poll_id, kind):
    assert poll_kind(poll_id) == kind


def test_validate_rejects_duplicate_options():
    poll = Poll(id="voting-1", question="Who?", options=(PollOption("a", "A"), PollOption("a", "B")))
    with pytest.raises(ValueError, match="unique"):
        poll.validate()


def test_validate_rejects_empty_poll():
    with pytest.raises(ValueError):
        Poll(id="voting-1", question="Who?", options=()).validate()


def test_validate_rejects_too_many_options():
    options = tuple(PollOption(str(i), f"Player {i}") for i in range(26))
    with pytest.raises(ValueError, match="exceed"):
        Poll(id="voting-1", question="Who?", options=options).validate()


def test_fallback_text_numbers_options():
    text = fallback_text(build_duration_poll(NOW))
    assert "1. 5 minutes" in text
    assert "3. 10 minutes" in text
    assert text.endswith("Reply with the number to vote")
