"""Messages the session manager sends to groups and players."""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import config
from game.session import Winner


@dataclass(frozen=True)
class RoleCard:
    """Private role notice; the impostor gets no word."""

    is_impostor: bool
    secret_word: Optional[str] = None


@dataclass(frozen=True)
class GameResults:
    """Summary posted to the group when voting closes."""

    voted_out_name: str
    vote_count: int
    correct_guess: bool
    impostor_name: str
    secret_word: str
    winner: Winner
    breakdown: List[Tuple[str, str]] = field(default_factory=list)  # (voter, votee)


GAME_STARTING = (
    "🎮 **IMPOSTER GAME STARTING!**\n\n"
    "Tap a button to vote for discussion time:"
)

ALREADY_IN_PROGRESS = (
    "❌ A game is already in progress! Wait for it to finish before starting a new one."
)

NO_DURATION_VOTES = (
    "❌ No votes received! Game cancelled. Use `/imposter_start` to try again."
)

NO_ACCUSATION_VOTES = "❌ No votes received! Game ends in a draw."

VOTE_PROCESSING_FAILED = "❌ Error processing votes. Game cancelled."

NO_ROLES_DELIVERED = (
    "❌ Failed to send DMs to players. Make sure everyone allows direct messages!"
)

TIME_UP = (
    "⏰ **TIME'S UP!**\n\n"
    "🗳️ **Voting begins now!**\n\n"
    "Vote for who you think is the imposter..."
)

NOTHING_TO_CANCEL = "❌ No active game to cancel."

GAME_CANCELLED = "🛑 Game cancelled."

GAME_ABORTED = "⚠️ Something went wrong. The game has been reset."


def not_enough_players(at_start: bool = True) -> str:
    if at_start:
        return (
            f"❌ You need at least {config.MIN_PLAYERS} players to start the game! "
            "Invite more friends to the group."
        )
    return f"❌ Not enough players! Need at least {config.MIN_PLAYERS} players."


def duration_selected(minutes: int) -> str:
    return f"✅ Duration selected: **{minutes} minutes**\n\n🎭 Assigning roles now..."


def roles_assigned(delivered: int, total: int) -> str:
    return (
        f"✅ Roles assigned! {delivered}/{total} players received their roles.\n\n"
        "🎲 Randomly selecting someone to start..."
    )


def speaker_selected(speaker_name: str, minutes: int) -> str:
    return (
        f"🎤 **{speaker_name}** will start the discussion!\n\n"
        f"⏱️ You have **{minutes} minutes** to discuss.\n\n"
        "💬 Talk about the word to find the imposter!\n\n"
        "GO! 🚀"
    )
