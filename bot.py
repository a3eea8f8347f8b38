import logging
import os

import discord
from discord.ext import commands

from core.hooks import HOOKS  # type: ignore

logging.basicConfig(level=logging.INFO, format='[%(levelname)s] %(name)s: %(message)s')
logger = logging.getLogger('ritsbot')

EXTENSIONS = ('cogs.errors', 'cogs.migration')


class RitsBot(commands.Bot):
    """Host bot for the RITS world.

    Loads the extensions, syncs slash commands, then emits 'bot.ready' so
    the migration cog can check the world version on startup.
    """
    def __init__(self):
        super().__init__(command_prefix='!', intents=discord.Intents.default())

    async def setup_hook(self):
        for name in EXTENSIONS:
            try:
                await self.load_extension(name)
                logger.info('Loaded extension %s', name)
            except commands.ExtensionError:
                logger.exception('Failed loading %s', name)
        await self._sync_commands()
        await HOOKS.emit('bot.ready')

    async def _sync_commands(self):
        # GUILD_ID makes commands show up immediately in one server
        guild_id = os.getenv('GUILD_ID')
        guild = discord.Object(id=int(guild_id)) if guild_id else None
        try:
            if guild is not None:
                self.tree.copy_global_to(guild=guild)
            synced = await self.tree.sync(guild=guild)
            logger.info('Synced %d app commands (%s)', len(synced), guild_id or 'global')
        except discord.HTTPException:
            logger.exception('Failed syncing app commands')


def main():
    # core.config loads token.env / .env on import
    import core.config  # noqa: F401  # type: ignore
    token = os.getenv('DISCORD_TOKEN') or os.getenv('BOT_TOKEN')
    if not token:
        raise SystemExit('DISCORD_TOKEN environment variable not set')
    RitsBot().run(token)


if __name__ == '__main__':
    main()
