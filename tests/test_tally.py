"""Unit tests for session state and vote tallying."""

import random
from datetime import datetime, timedelta, timezone

from data.words import WORDS, get_random_words, is_valid_word
from game.session import Phase, Winner
from game.tally import (
    add_player,
    calculate_vote_results,
    calculate_winning_duration,
    choose_impostor,
    choose_speaker,
    create_session,
    describe_status,
    determine_winner,
    is_active,
    plurality,
    record_duration_vote,
    record_vote,
    reset_session,
    set_impostor,
)


def _session_with_players(*ids):
    session = create_session("g1")
    for player_id in ids:
        add_player(session, player_id, f"addr-{player_id}")
    return session


def test_create_session_is_idle():
    session = create_session("g1")
    assert session.group_id == "g1"
    assert session.phase == Phase.IDLE
    assert not is_active(session)


def test_is_active_by_phase():
    session = create_session("g1")
    for phase in (Phase.VOTING_DURATION, Phase.ASSIGNING_ROLES, Phase.DISCUSSION, Phase.VOTING):
        session.phase = phase
        assert is_active(session)
    session.phase = Phase.ENDED
    assert not is_active(session)


def test_duration_vote_overwrites_previous_vote():
    session = create_session("g1")
    record_duration_vote(session, "A", 5)
    record_duration_vote(session, "B", 7)
    record_duration_vote(session, "A", 10)

    assert [(v.voter_id, v.duration) for v in session.duration_votes] == [("B", 7), ("A", 10)]


def test_duration_votes_hold_one_entry_per_voter():
    rng = random.Random(3)
    session = create_session("g1")
    latest = {}
    for _ in range(200):
        voter = rng.choice(["A", "B", "C", "D"])
        duration = rng.choice([5, 7, 10])
        record_duration_vote(session, voter, duration)
        latest[voter] = duration

    voters = [v.voter_id for v in session.duration_votes]
    assert len(voters) == len(set(voters))
    assert {v.voter_id: v.duration for v in session.duration_votes} == latest


def test_invalid_duration_is_ignored():
    session = create_session("g1")
    assert not record_duration_vote(session, "A", 6)
    assert session.duration_votes == []


def test_winning_duration_plurality():
    session = create_session("g1")
    for voter, duration in [("A", 5), ("B", 7), ("C", 5)]:
        record_duration_vote(session, voter, duration)
    assert calculate_winning_duration(session) == 5


def test_winning_duration_tie_goes_to_earliest():
    session = create_session("g1")
    record_duration_vote(session, "A", 7)
    record_duration_vote(session, "B", 5)
    assert calculate_winning_duration(session) == 7


def test_winning_duration_is_deterministic():
    votes = [("A", 10), ("B", 7), ("C", 10), ("D", 7), ("E", 5)]
    winners = set()
    for _ in range(20):
        session = create_session("g1")
        for voter, duration in votes:
            record_duration_vote(session, voter, duration)
        winners.add(calculate_winning_duration(session))
    assert winners == {10}


def test_winning_duration_without_votes():
    assert calculate_winning_duration(create_session("g1")) is None


def test_plurality_first_appearance_wins_tie():
    assert plurality(["x", "y", "y", "x"]) == ("x", 2)
    assert plurality(["y", "x", "x", "y", "z"]) == ("y", 2)
    assert plurality([]) is None


def test_record_vote_last_write_wins():
    session = _session_with_players("P1", "P2", "P3")
    record_vote(session, "P1", "P2")
    record_vote(session, "P1", "P3")

    assert session.votes == {"P1": "P3"}
    assert session.players["P1"].has_voted
    assert session.players["P1"].voted_for == "P3"


def test_record_vote_accepts_unknown_ids():
    session = _session_with_players("P1", "P2", "P3")
    record_vote(session, "stranger", "P2")
    assert session.votes == {"stranger": "P2"}


def test_vote_results():
    session = _session_with_players("P1", "P2", "P3")
    record_vote(session, "P1", "P2")
    record_vote(session, "P2", "P2")
    record_vote(session, "P3", "P1")

    result = calculate_vote_results(session)
    assert result.voted_out_id == "P2"
    assert result.vote_count == 2


def test_vote_results_without_votes():
    assert calculate_vote_results(_session_with_players("P1", "P2", "P3")) is None


def test_determine_winner():
    session = _session_with_players("P1", "P2", "P3")
    set_impostor(session, "P2")
    assert determine_winner(session, "P2") == Winner.GROUP
    assert determine_winner(session, "P1") == Winner.IMPOSTOR
    assert determine_winner(session, "nobody") == Winner.IMPOSTOR


def test_set_impostor_flags_exactly_one_player():
    session = _session_with_players("P1", "P2", "P3")
    set_impostor(session, "P1")
    set_impostor(session, "P3")

    assert session.impostor_id == "P3"
    assert [p.id for p in session.players.values() if p.is_impostor] == ["P3"]


def test_set_impostor_rejects_unknown_player():
    session = _session_with_players("P1", "P2", "P3")
    assert not set_impostor(session, "P9")
    assert session.impostor_id is None


class _SecondChoice:
    def choice(self, seq):
        return seq[1]


def test_choose_impostor_uses_random_source():
    session = _session_with_players("P1", "P2", "P3")
    assert choose_impostor(session, _SecondChoice()) == "P2"
    assert session.players["P2"].is_impostor


def test_choose_speaker_uses_random_source():
    session = _session_with_players("P1", "P2", "P3")
    speaker = choose_speaker(session, _SecondChoice())
    assert speaker.id == "P2"
    assert session.current_speaker_id == "P2"


def test_add_player_is_idempotent():
    session = create_session("g1")
    add_player(session, "P1", "first")
    add_player(session, "P1", "second")
    assert len(session.players) == 1
    assert session.players["P1"].handle == "first"


def test_reset_clears_everything():
    session = _session_with_players("P1", "P2", "P3")
    session.phase = Phase.ENDED
    record_duration_vote(session, "P1", 5)
    session.selected_duration = 5
    set_impostor(session, "P1")
    session.secret_word = "Pizza"
    record_vote(session, "P2", "P1")
    session.voted_out_id = "P1"
    session.winner = Winner.GROUP
    session.discussion_deadline = datetime.now(timezone.utc)

    reset_session(session)

    assert session.phase == Phase.IDLE
    assert session.selected_duration is None
    assert session.impostor_id is None
    assert session.secret_word is None
    assert session.voted_out_id is None
    assert session.winner is None
    assert session.discussion_deadline is None
    assert session.players == {}
    assert session.votes == {}
    assert session.duration_votes == []


def test_describe_status_during_discussion():
    now = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
    session = _session_with_players("P1", "P2", "P3")
    session.phase = Phase.DISCUSSION
    session.selected_duration = 5
    session.discussion_deadline = now + timedelta(seconds=95)

    status = describe_status(session, now)
    assert status.phase == Phase.DISCUSSION
    assert status.seconds_left == 95
    assert status.player_ids == ("P1", "P2", "P3")
    assert status.player_count == 3

    late = describe_status(session, now + timedelta(minutes=10))
    assert late.seconds_left == 0


def test_secret_word_pool_word_is_valid():
    assert is_valid_word("Pizza")
    assert not is_valid_word("Definitely Not A Word")


def test_random_words_are_distinct():
    words = get_random_words(5, random.Random(3))
    assert len(set(words)) == 5
    assert all(is_valid_word(word) for word in words)
    assert len(get_random_words(len(WORDS) + 10, random.Random(3))) == len(WORDS)
