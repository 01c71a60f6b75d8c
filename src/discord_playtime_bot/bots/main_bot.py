"""
Playtime Bot entry point.

Run with ``python -m discord_playtime_bot.bots.main_bot`` or the
``discord-playtime-bot`` console script.
"""

import asyncio

from discord_playtime_bot.bots.bot_core import main


def run():
    """Console script entry point."""
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    run()
