"""Discord bot client setup."""

import discord
from discord.ext import commands


def create_bot() -> commands.Bot:
    """Create the imposter bot with the intents the game needs."""
    intents = discord.Intents.default()
    intents.message_content = True  # number replies to polls
    intents.guilds = True
    intents.members = True  # channel membership for role assignment

    return commands.Bot(
        command_prefix='!',  # unused; the game runs on slash commands
        intents=intents,
        activity=discord.Game(name="/imposter_help"),
        # Player names are echoed back in results; never ping anyone
        allowed_mentions=discord.AllowedMentions.none(),
    )
