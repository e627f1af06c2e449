"""Main entry point for the Imposter Bot."""

import asyncio
import logging
import os
from dotenv import load_dotenv
from bot.client import create_bot
from bot.events import setup_events

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


async def main():
    """Main function to start the bot."""
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Get token
    token = os.getenv("DISCORD_TOKEN")
    if not token:
        logger.error("DISCORD_TOKEN not found in environment variables!")
        logger.error("Please create a .env file with your Discord bot token.")
        return

    # Create bot
    bot = create_bot()

    # Setup events
    setup_events(bot)

    async with bot:
        # Load cogs; unloading on close cancels every game timer
        await bot.load_extension('cogs.game_commands')

        logger.info("Starting bot...")
        await bot.start(token)


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        print("\nBot stopped by user.")
