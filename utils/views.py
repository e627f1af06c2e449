"""Discord button views for game polls."""

from typing import Awaitable, Callable, Optional

import discord

import config
from game.polls import DURATION_POLL, Poll, PollOption
from utils.formatters import truncate_text

ChoiceHandler = Callable[[discord.Interaction, Poll, PollOption], Awaitable[None]]

BUTTONS_PER_ROW = 5


class PollView(discord.ui.View):
    """One button per poll option; clicks are forwarded to a handler."""

    def __init__(self, poll: Poll, on_choice: ChoiceHandler, timeout: Optional[float] = None):
        super().__init__(timeout=timeout)
        self.poll = poll
        self._on_choice = on_choice

        style = (
            discord.ButtonStyle.primary
            if poll.kind == DURATION_POLL
            else discord.ButtonStyle.secondary
        )
        for index, option in enumerate(poll.options):
            button = discord.ui.Button(
                label=truncate_text(option.label, config.MAX_BUTTON_LABEL),
                style=style,
                custom_id=f"{poll.id}:{option.id}",
                row=index // BUTTONS_PER_ROW,
            )
            button.callback = self._make_callback(option)
            self.add_item(button)

    def _make_callback(self, option: PollOption):
        async def callback(interaction: discord.Interaction):
            await self._on_choice(interaction, self.poll, option)
        return callback
