"""Poll payloads for duration and accusation votes."""

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, Optional, Tuple

import config
from game.session import Player

DURATION_POLL = "duration"
ACCUSATION_POLL = "voting"

DURATION_LABELS = {
    5: "5 minutes ⚡",
    7: "7 minutes ⏰",
    10: "10 minutes 🕐",
}


@dataclass(frozen=True)
class PollOption:
    id: str
    label: str


@dataclass(frozen=True)
class Poll:
    """A question with an ordered list of options."""

    id: str
    question: str
    options: Tuple[PollOption, ...]

    @property
    def kind(self) -> Optional[str]:
        return poll_kind(self.id)

    def validate(self) -> None:
        """Raise ValueError if the poll cannot be presented."""
        if not self.id:
            raise ValueError("Poll id is required")
        if not self.question:
            raise ValueError("Poll question is required")
        if not self.options:
            raise ValueError("Poll needs at least one option")
        if len(self.options) > config.MAX_POLL_OPTIONS:
            raise ValueError(
                f"Poll cannot exceed {config.MAX_POLL_OPTIONS} options"
            )

        for index, option in enumerate(self.options):
            if not option.id:
                raise ValueError(f"Option[{index}] id is required")
            if not option.label:
                raise ValueError(f"Option[{index}] label is required")

        ids = [option.id for option in self.options]
        if len(ids) != len(set(ids)):
            raise ValueError("Option ids must be unique within a poll")


def _poll_id(kind: str, now: datetime) -> str:
    return f"{kind}-{int(now.timestamp() * 1000)}"


def poll_kind(poll_id: str) -> Optional[str]:
    """Recover the poll kind ('duration' or 'voting') from a poll id."""
    kind, sep, _ = poll_id.partition("-")
    if sep and kind in (DURATION_POLL, ACCUSATION_POLL):
        return kind
    return None


def build_duration_poll(now: datetime) -> Poll:
    """Poll asking how long the discussion should be."""
    options = tuple(
        PollOption(id=str(minutes), label=DURATION_LABELS.get(minutes, f"{minutes} minutes"))
        for minutes in config.DURATION_OPTIONS
    )
    return Poll(
        id=_poll_id(DURATION_POLL, now),
        question="⏱️ How long should the discussion phase be?",
        options=options,
    )


def build_accusation_poll(
    players: Iterable[Player],
    names: Dict[str, str],
    now: datetime,
) -> Poll:
    """Poll naming every player; option ids are player ids."""
    options = tuple(
        PollOption(id=player.id, label=names.get(player.handle, player.handle))
        for player in players
    )
    return Poll(
        id=_poll_id(ACCUSATION_POLL, now),
        question="🗳️ Who is the IMPOSTOR?",
        options=options,
    )


def fallback_text(poll: Poll) -> str:
    """Numbered plain-text version of a poll for clients without buttons."""
    option_list = "\n".join(
        f"{index}. {option.label}" for index, option in enumerate(poll.options, start=1)
    )
    return f"📊 POLL: {poll.question}\n\n{option_list}\n\nReply with the number to vote"
