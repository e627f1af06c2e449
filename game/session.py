"""Game session data structures."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Tuple


class Phase(str, Enum):
    """Stage of a group's game."""

    IDLE = "idle"
    VOTING_DURATION = "voting_duration"
    ASSIGNING_ROLES = "assigning_roles"
    DISCUSSION = "discussion"
    VOTING = "voting"
    ENDED = "ended"


class Winner(str, Enum):
    """Side that won a finished game."""

    IMPOSTOR = "impostor"
    GROUP = "group"


class Outcome(str, Enum):
    """Result of a start or cancel request."""

    STARTED = "started"
    ALREADY_IN_PROGRESS = "already_in_progress"
    NOT_ENOUGH_PLAYERS = "not_enough_players"
    CANCELLED = "cancelled"
    NOTHING_TO_CANCEL = "nothing_to_cancel"


@dataclass
class Player:
    """A participant in one group's game."""
    id: str
    handle: str
    is_impostor: bool = False
    has_voted: bool = False
    voted_for: Optional[str] = None


@dataclass
class DurationVote:
    voter_id: str
    duration: int


@dataclass
class GameSession:
    """Represents the full state of one group's game."""
    group_id: str
    phase: Phase = Phase.IDLE

    # Duration voting
    duration_votes: List[DurationVote] = field(default_factory=list)
    selected_duration: Optional[int] = None  # minutes

    # Roles
    players: Dict[str, Player] = field(default_factory=dict)
    impostor_id: Optional[str] = None
    secret_word: Optional[str] = None
    current_speaker_id: Optional[str] = None

    # Timestamps
    started_at: Optional[datetime] = None
    discussion_deadline: Optional[datetime] = None
    voting_started_at: Optional[datetime] = None
    ended_at: Optional[datetime] = None

    # Accusation voting (voter_id -> votee_id)
    votes: Dict[str, str] = field(default_factory=dict)

    # Results
    voted_out_id: Optional[str] = None
    winner: Optional[Winner] = None


@dataclass(frozen=True)
class VoteResult:
    """Most-accused player and how many votes they got."""

    voted_out_id: str
    vote_count: int


@dataclass(frozen=True)
class SessionStatus:
    """Read-only snapshot of a session for status queries."""

    group_id: str
    phase: Phase
    duration_vote_count: int = 0
    selected_duration: Optional[int] = None
    player_ids: Tuple[str, ...] = ()
    vote_count: int = 0
    seconds_left: Optional[int] = None
    winner: Optional[Winner] = None

    @property
    def player_count(self) -> int:
        return len(self.player_ids)
