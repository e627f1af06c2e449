"""Discord embed builders for bot responses."""

import discord

from game.notices import GameResults, RoleCard
from game.polls import Poll, fallback_text
from game.session import Phase, SessionStatus, Winner
from utils.formatters import format_countdown, format_minutes, truncate_text

# Discord field value limit
FIELD_LIMIT = 1024


def create_poll_embed(poll: Poll) -> discord.Embed:
    """Create embed for a duration or accusation poll."""
    embed = discord.Embed(
        title="📊 Poll",
        description=truncate_text(fallback_text(poll), 4096),
        color=discord.Color.blurple()
    )
    embed.set_footer(text="Tap a button or reply with the number to vote. Your last vote counts.")
    return embed


def create_role_embed(card: RoleCard) -> discord.Embed:
    """Create embed for a player's private role."""
    if card.is_impostor:
        embed = discord.Embed(
            title="🕵️ YOU ARE THE IMPOSTER!",
            description="You do NOT know the secret word.",
            color=discord.Color.red()
        )
        embed.add_field(
            name="Your goal",
            value=(
                "Blend in with the discussion without revealing that you don't know the word. "
                "If the group doesn't vote you out, you win!"
            ),
            inline=False
        )
    else:
        embed = discord.Embed(
            title="✨ Your secret word is:",
            description=f"🔒 **{card.secret_word}**",
            color=discord.Color.green()
        )
        embed.add_field(
            name="Your goal",
            value="Discuss this word carefully to identify the imposter, but don't be too obvious!",
            inline=False
        )
    return embed


def create_results_embed(results: GameResults) -> discord.Embed:
    """Create embed for the end-of-game summary."""
    group_won = results.winner == Winner.GROUP
    embed = discord.Embed(
        title="📊 VOTING RESULTS",
        color=discord.Color.green() if group_won else discord.Color.red()
    )

    embed.add_field(
        name="Most Voted",
        value=f"**{results.voted_out_name}** ({results.vote_count} votes)",
        inline=False
    )
    embed.add_field(
        name="Verdict",
        value="✅ Correct!" if results.correct_guess else "❌ Wrong!",
        inline=True
    )
    embed.add_field(
        name="🕵️ The IMPOSTER was",
        value=f"**{results.impostor_name}**",
        inline=True
    )
    embed.add_field(
        name="🔒 The secret word was",
        value=f"**{results.secret_word}**",
        inline=True
    )
    embed.add_field(
        name="🏆 Winner",
        value="**GROUP**" if group_won else "**IMPOSTER**",
        inline=False
    )

    if results.breakdown:
        breakdown = "\n".join(f"• {voter} → {votee}" for voter, votee in results.breakdown)
        embed.add_field(
            name="Vote Breakdown",
            value=truncate_text(breakdown, FIELD_LIMIT),
            inline=False
        )

    embed.set_footer(text="Thanks for playing! Use /imposter_start to play again! 🎮")
    return embed


def create_status_embed(status: SessionStatus) -> discord.Embed:
    """Create embed for the /imposter_status command."""
    embed = discord.Embed(
        title="📊 Game Status",
        color=discord.Color.blue()
    )

    if status.phase == Phase.VOTING_DURATION:
        embed.add_field(name="Phase", value="⏱️ Voting for duration", inline=True)
        embed.add_field(name="Votes", value=f"{status.duration_vote_count} received", inline=True)
    elif status.phase == Phase.ASSIGNING_ROLES:
        embed.add_field(name="Phase", value="🎭 Assigning roles", inline=True)
        embed.add_field(name="Players", value=str(status.player_count), inline=True)
    elif status.phase == Phase.DISCUSSION:
        embed.add_field(name="Phase", value="💬 Discussion", inline=True)
        embed.add_field(name="Time Left", value=format_countdown(status.seconds_left or 0), inline=True)
        embed.add_field(name="Players", value=str(status.player_count), inline=True)
        if status.selected_duration:
            embed.set_footer(text=f"Discussion length: {format_minutes(status.selected_duration)}")
    elif status.phase == Phase.VOTING:
        embed.add_field(name="Phase", value="🗳️ Voting", inline=True)
        embed.add_field(name="Votes", value=f"{status.vote_count}/{status.player_count}", inline=True)
    elif status.phase == Phase.ENDED:
        embed.add_field(name="Phase", value="✅ Ended", inline=True)
        winner = "🕵️ Imposter" if status.winner == Winner.IMPOSTOR else "👥 Group"
        embed.add_field(name="Winner", value=winner, inline=True)

    return embed


def create_help_embed() -> discord.Embed:
    """Create embed for the /imposter_help command."""
    embed = discord.Embed(
        title="🎮 IMPOSTER GAME - How to Play",
        color=discord.Color.blurple()
    )
    embed.add_field(
        name="🕵️ Objective",
        value=(
            "• Find the imposter among your group!\n"
            "• Normal players know a secret word\n"
            "• The imposter doesn't know the word\n"
            "• Discuss to find who doesn't know!"
        ),
        inline=False
    )
    embed.add_field(
        name="📝 Commands",
        value=(
            "• `/imposter_start` - Start a new game\n"
            "• `/imposter_cancel` - Cancel current game\n"
            "• `/imposter_status` - Check game status\n"
            "• `/imposter_help` - Show this help"
        ),
        inline=False
    )
    embed.add_field(
        name="🎯 Game Flow",
        value=(
            "1️⃣ Vote for discussion time (5/7/10 min)\n"
            "2️⃣ Receive your role via DM\n"
            "3️⃣ Discuss the secret word\n"
            "4️⃣ Vote for the imposter\n"
            "5️⃣ See results!"
        ),
        inline=False
    )
    embed.add_field(
        name="💡 Tips",
        value=(
            "• Need 3+ players in the channel\n"
            "• Normal players: Mention the word subtly\n"
            "• Imposter: Try to blend in!\n"
            "• Winner: Group if imposter caught, Imposter if not"
        ),
        inline=False
    )
    embed.set_footer(text="Ready? Use /imposter_start to begin! 🚀")
    return embed
