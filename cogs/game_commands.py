"""Game commands for the imposter bot."""

import logging
import re
from typing import List, Optional

import discord
from discord import app_commands
from discord.ext import commands

import config
from game.messenger import Member, Messenger
from game.notices import GameResults, RoleCard
from game.polls import ACCUSATION_POLL, DURATION_POLL, Poll, PollOption
from game.session import Outcome, Phase
from game.session_manager import SessionManager
from utils.embeds import (
    create_help_embed,
    create_poll_embed,
    create_results_embed,
    create_role_embed,
    create_status_embed,
)
from utils.name_resolver import NameResolver
from utils.views import ChoiceHandler, PollView

logger = logging.getLogger(__name__)

# Plain number replies are a fallback for poll buttons
NUMBER_REPLY = re.compile(r"^\d{1,2}$")

OUTCOME_REPLIES = {
    Outcome.STARTED: "✅ Game started! Vote for the discussion length in the channel.",
    Outcome.ALREADY_IN_PROGRESS: "❌ A game is already in progress here.",
    Outcome.NOT_ENOUGH_PLAYERS: f"❌ You need at least {config.MIN_PLAYERS} players in this channel.",
    Outcome.CANCELLED: "🛑 Game cancelled.",
    Outcome.NOTHING_TO_CANCEL: "❌ No active game to cancel.",
}


class DiscordMessenger(Messenger):
    """Delivers game payloads to Discord text channels and DMs."""

    def __init__(self, bot: commands.Bot, on_choice: ChoiceHandler):
        self.bot = bot
        self._on_choice = on_choice

    @property
    def self_id(self) -> str:
        return str(self.bot.user.id) if self.bot.user else ""

    def _channel(self, group_id: str):
        return self.bot.get_channel(int(group_id))

    async def get_members(self, group_id: str) -> List[Member]:
        """Humans who can see the channel, plus the bot itself."""
        channel = self._channel(group_id)
        # Threads list ThreadMember objects, which carry no bot flag
        if not isinstance(channel, discord.TextChannel):
            return []

        self_id = self.self_id
        return [
            Member(id=str(member.id), handle=str(member.id))
            for member in channel.members
            if not member.bot or str(member.id) == self_id
        ]

    async def send_group(self, group_id: str, payload) -> bool:
        channel = self._channel(group_id)
        if channel is None:
            logger.warning("Channel %s not found", group_id)
            return False

        try:
            if isinstance(payload, Poll):
                await self._send_poll(channel, payload)
            elif isinstance(payload, GameResults):
                await channel.send(embed=create_results_embed(payload))
            else:
                await channel.send(str(payload))
        except discord.HTTPException as e:
            logger.warning("Failed to send to channel %s: %s", group_id, e)
            return False
        return True

    async def _send_poll(self, channel, poll: Poll) -> None:
        try:
            poll.validate()
        except ValueError as e:
            # Too many options for buttons; number replies still work
            logger.warning("Poll %s sent without buttons: %s", poll.id, e)
            await channel.send(embed=create_poll_embed(poll))
            return

        timeout = (
            config.DURATION_VOTE_TIMEOUT
            if poll.kind == DURATION_POLL
            else config.PLAYER_VOTE_TIMEOUT
        )
        view = PollView(poll, self._on_choice, timeout=timeout)
        await channel.send(embed=create_poll_embed(poll), view=view)

    async def send_private(self, member_id: str, payload: RoleCard) -> bool:
        try:
            user = self.bot.get_user(int(member_id))
            if user is None:
                user = await self.bot.fetch_user(int(member_id))
            await user.send(embed=create_role_embed(payload))
        except discord.HTTPException as e:
            logger.warning("Failed to DM player %s: %s", member_id, e)
            return False
        return True


class GameCommands(commands.Cog):
    """Imposter game commands."""

    def __init__(self, bot: commands.Bot):
        self.bot = bot
        self.messenger = DiscordMessenger(bot, self.on_poll_choice)
        self.resolver = NameResolver(self._lookup_display_name)
        self.manager = SessionManager(self.messenger, self.resolver)

    async def cog_unload(self):
        self.manager.shutdown()

    async def _lookup_display_name(self, handle: str) -> Optional[str]:
        user = self.bot.get_user(int(handle))
        if user is None:
            user = await self.bot.fetch_user(int(handle))
        return user.display_name

    async def _ensure_group(self, interaction: discord.Interaction) -> bool:
        if interaction.guild is None or not isinstance(interaction.channel, discord.TextChannel):
            await interaction.response.send_message("❌ This game only works in server text channels!", ephemeral=True)
            return False
        return True

    @app_commands.command(name="imposter_start", description="Start a new imposter game in this channel")
    async def start(self, interaction: discord.Interaction):
        """Start a new imposter game."""
        if not await self._ensure_group(interaction):
            return

        await interaction.response.defer(ephemeral=True)
        outcome = await self.manager.start_game(str(interaction.channel_id))
        await interaction.followup.send(OUTCOME_REPLIES[outcome], ephemeral=True)

    @app_commands.command(name="imposter_cancel", description="Cancel the current imposter game")
    async def cancel(self, interaction: discord.Interaction):
        """Cancel the current game."""
        if not await self._ensure_group(interaction):
            return

        await interaction.response.defer(ephemeral=True)
        outcome = await self.manager.cancel_game(str(interaction.channel_id))
        await interaction.followup.send(OUTCOME_REPLIES[outcome], ephemeral=True)

    @app_commands.command(name="imposter_status", description="Check the current game status")
    async def status(self, interaction: discord.Interaction):
        """Show the current game status."""
        if not await self._ensure_group(interaction):
            return

        status = self.manager.get_status(str(interaction.channel_id))
        if status.phase == Phase.IDLE:
            await interaction.response.send_message("ℹ️ No active game. Use `/imposter_start` to begin!")
            return

        await interaction.response.send_message(embed=create_status_embed(status))

    @app_commands.command(name="imposter_help", description="How to play the imposter game")
    async def help(self, interaction: discord.Interaction):
        """Show how to play."""
        await interaction.response.send_message(embed=create_help_embed(), ephemeral=True)

    async def on_poll_choice(
        self,
        interaction: discord.Interaction,
        poll: Poll,
        option: PollOption,
    ):
        """Handle a poll button click."""
        group_id = str(interaction.channel_id)
        voter_id = str(interaction.user.id)

        recorded = False
        if poll.kind == DURATION_POLL:
            recorded = await self.manager.record_duration_vote(group_id, voter_id, int(option.id))
        elif poll.kind == ACCUSATION_POLL:
            recorded = await self.manager.record_player_vote(group_id, voter_id, option.id)

        if recorded:
            await interaction.response.send_message(f"✅ Vote recorded: {option.label}", ephemeral=True)
        else:
            await interaction.response.send_message("❌ This vote is closed.", ephemeral=True)

    @commands.Cog.listener()
    async def on_message(self, message: discord.Message):
        """Accept number replies as votes."""
        if message.author.bot or message.guild is None:
            return

        text = message.content.strip()
        if not NUMBER_REPLY.match(text):
            return

        number = int(text)
        group_id = str(message.channel.id)
        voter_id = str(message.author.id)
        status = self.manager.get_status(group_id)

        recorded = False
        if status.phase == Phase.VOTING_DURATION:
            if 1 <= number <= len(config.DURATION_OPTIONS):
                duration = config.DURATION_OPTIONS[number - 1]
                recorded = await self.manager.record_duration_vote(group_id, voter_id, duration)
        elif status.phase == Phase.VOTING:
            if 1 <= number <= status.player_count:
                votee_id = status.player_ids[number - 1]
                recorded = await self.manager.record_player_vote(group_id, voter_id, votee_id)

        if recorded:
            try:
                await message.add_reaction("✅")
            except discord.HTTPException as e:
                logger.debug("Could not react to vote message: %s", e)


async def setup(bot: commands.Bot):
    """Load the cog."""
    await bot.add_cog(GameCommands(bot))
