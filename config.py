"""Configuration constants for the Imposter Bot."""

import os
from dotenv import load_dotenv

load_dotenv()

# Players
MIN_PLAYERS = 3

# Discussion length options (minutes)
DURATION_OPTIONS = (5, 7, 10)

# Phase timers (seconds)
DURATION_VOTE_TIMEOUT = float(os.getenv("DURATION_VOTE_TIMEOUT", "60"))
PLAYER_VOTE_TIMEOUT = float(os.getenv("PLAYER_VOTE_TIMEOUT", "60"))
RESET_GRACE_PERIOD = float(os.getenv("RESET_GRACE_PERIOD", "5"))
ROLE_ASSIGN_DELAY = float(os.getenv("ROLE_ASSIGN_DELAY", "0"))
SPEAKER_REVEAL_DELAY = float(os.getenv("SPEAKER_REVEAL_DELAY", "2"))
SECONDS_PER_MINUTE = 60

# Discord allows 5 rows of 5 buttons per message
MAX_POLL_OPTIONS = 25
MAX_BUTTON_LABEL = 80

# Name resolution cache (seconds)
NAME_CACHE_TTL = 60 * 60
