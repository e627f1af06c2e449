"""Session state transitions and vote tallying.

Everything here is a plain function over a GameSession: no I/O, no clocks and
no module-level state, so each rule can be exercised on its own.
"""

import random
from datetime import datetime
from typing import Hashable, Iterable, Optional, Tuple, TypeVar

import config
from game.session import (
    DurationVote,
    GameSession,
    Phase,
    Player,
    SessionStatus,
    VoteResult,
    Winner,
)

T = TypeVar("T", bound=Hashable)


def create_session(group_id: str) -> GameSession:
    """Create a new idle session for a group."""
    return GameSession(group_id=group_id)


def reset_session(session: GameSession) -> None:
    """Return a session to IDLE, clearing every per-game field."""
    session.phase = Phase.IDLE
    session.duration_votes = []
    session.selected_duration = None
    session.players.clear()
    session.impostor_id = None
    session.secret_word = None
    session.current_speaker_id = None
    session.started_at = None
    session.discussion_deadline = None
    session.voting_started_at = None
    session.ended_at = None
    session.votes.clear()
    session.voted_out_id = None
    session.winner = None


def is_active(session: GameSession) -> bool:
    """Check whether a game is running (anything but IDLE or ENDED)."""
    return session.phase not in (Phase.IDLE, Phase.ENDED)


def add_player(session: GameSession, player_id: str, handle: str) -> Player:
    """Add a player, keeping the existing record if already present."""
    player = session.players.get(player_id)
    if player is None:
        player = Player(id=player_id, handle=handle)
        session.players[player_id] = player
    return player


def set_impostor(session: GameSession, player_id: str) -> bool:
    """Flag exactly one player as the impostor."""
    if player_id not in session.players:
        return False

    for player in session.players.values():
        player.is_impostor = player.id == player_id
    session.impostor_id = player_id
    return True


def choose_impostor(session: GameSession, rng: random.Random) -> str:
    """Pick the impostor uniformly among players and flag them."""
    impostor_id = rng.choice(list(session.players))
    set_impostor(session, impostor_id)
    return impostor_id


def choose_speaker(session: GameSession, rng: random.Random) -> Player:
    """Pick who opens the discussion."""
    speaker = rng.choice(list(session.players.values()))
    session.current_speaker_id = speaker.id
    return speaker


def record_duration_vote(session: GameSession, voter_id: str, duration: int) -> bool:
    """
    Record a discussion-length vote.

    A voter's earlier vote is dropped and the new one is appended, so the
    voter moves to the end of the arrival order. Durations outside
    DURATION_OPTIONS are ignored.
    """
    if duration not in config.DURATION_OPTIONS:
        return False

    session.duration_votes = [
        vote for vote in session.duration_votes if vote.voter_id != voter_id
    ]
    session.duration_votes.append(DurationVote(voter_id=voter_id, duration=duration))
    return True


def plurality(options: Iterable[T]) -> Optional[Tuple[T, int]]:
    """
    Find the option with the strictly highest count.

    Ties go to the option that appeared first in the input.
    """
    counts = {}
    for option in options:
        counts[option] = counts.get(option, 0) + 1

    best = None
    best_count = 0
    for option, count in counts.items():
        if count > best_count:
            best = option
            best_count = count

    if best_count == 0:
        return None
    return best, best_count


def calculate_winning_duration(session: GameSession) -> Optional[int]:
    """Winning discussion length in minutes, or None without votes."""
    result = plurality(vote.duration for vote in session.duration_votes)
    if result is None:
        return None
    return result[0]


def record_vote(session: GameSession, voter_id: str, votee_id: str) -> None:
    """Record an accusation; a later vote from the same voter replaces the earlier one."""
    session.votes[voter_id] = votee_id

    voter = session.players.get(voter_id)
    if voter:
        voter.has_voted = True
        voter.voted_for = votee_id


def calculate_vote_results(session: GameSession) -> Optional[VoteResult]:
    """Most-accused player, or None if nobody voted."""
    result = plurality(session.votes.values())
    if result is None:
        return None
    votee_id, count = result
    return VoteResult(voted_out_id=votee_id, vote_count=count)


def determine_winner(session: GameSession, voted_out_id: str) -> Winner:
    """The group wins only if it voted out the impostor."""
    if voted_out_id == session.impostor_id:
        return Winner.GROUP
    return Winner.IMPOSTOR


def describe_status(session: GameSession, now: datetime) -> SessionStatus:
    """Build a status snapshot without touching the session."""
    seconds_left = None
    if session.phase == Phase.DISCUSSION and session.discussion_deadline:
        remaining = (session.discussion_deadline - now).total_seconds()
        seconds_left = max(0, int(remaining))

    return SessionStatus(
        group_id=session.group_id,
        phase=session.phase,
        duration_vote_count=len(session.duration_votes),
        selected_duration=session.selected_duration,
        player_ids=tuple(session.players),
        vote_count=len(session.votes),
        seconds_left=seconds_left,
        winner=session.winner,
    )
