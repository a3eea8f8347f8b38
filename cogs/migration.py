import asyncio
import logging
from typing import Optional

import discord
from discord import app_commands
from discord.ext import commands

from core import embeds  # type: ignore
from core.config import MIGRATE_ON_READY, MIGRATION_BACKUP_ENABLED, SETTINGS_FILE, SYSTEM_VERSION, WORLD_FOLDER  # type: ignore
from core.hooks import HOOKS  # type: ignore
from core.notify import LoggingNotifier  # type: ignore
from core.settings import MIGRATION_SETTING, SettingsStore, register_system_settings  # type: ignore
from modules.data_constants import SYSTEM_ID  # type: ignore
from modules.migration import migrate_world, needs_migration  # type: ignore
from storage.backup import create_backup  # type: ignore
from storage.engine import get_engine  # type: ignore

logger = logging.getLogger('migration')


class ChannelNotifier:
    """Posts notifications as embeds in a channel.

    Non-permanent messages clean themselves up after `transient_seconds`.
    """
    def __init__(self, channel: discord.abc.Messageable, transient_seconds: float = 30.0):
        self.channel = channel
        self.transient_seconds = transient_seconds

    async def info(self, message: str, permanent: bool = False) -> None:
        delete_after = None if permanent else self.transient_seconds
        await self.channel.send(embed=embeds.info(message, title='RITS'), delete_after=delete_after)


class MigrationCog(commands.Cog):
    """World data migration (admin only)."""

    def __init__(self, bot: commands.Bot, settings: Optional[SettingsStore] = None):
        self.bot = bot
        self.settings = settings or SettingsStore()
        self._lock = asyncio.Lock()
        HOOKS.once('bot.ready', self._on_ready)

    async def cog_load(self):
        register_system_settings(self.settings)
        await self.settings.load()

    async def _run(self, notifier, version: str):
        if self._lock.locked():
            return None
        async with self._lock:
            if MIGRATION_BACKUP_ENABLED:
                try:
                    path, count = await asyncio.to_thread(create_backup, WORLD_FOLDER, version)
                    logger.info('Pre-migration backup: %s (%d files)', path, count)
                except Exception:
                    logger.exception('Pre-migration backup failed; migrating anyway')
            store = await get_engine()
            return await migrate_world(store, self.settings, notifier, version)

    async def _on_ready(self):
        if not MIGRATE_ON_READY or not needs_migration(self.settings, SYSTEM_VERSION):
            return
        logger.info('World needs migration to %s; running on startup', SYSTEM_VERSION)
        await self._run(LoggingNotifier('migration'), SYSTEM_VERSION)

    migrate = app_commands.Group(name="migrate", description="World data migration")

    @migrate.command(name="status", description="Show the last applied migration version")
    async def migrate_status(self, interaction: discord.Interaction):
        current = self.settings.get(SYSTEM_ID, MIGRATION_SETTING)
        pending = needs_migration(self.settings, SYSTEM_VERSION)
        text = f"Last migrated: `{current!r}`, target `{SYSTEM_VERSION}`"
        text += " (migration pending)" if pending else " (up to date)"
        await interaction.response.send_message(text, ephemeral=True)

    @migrate.command(name="run", description="Migrate all actors and scenes (admin)")
    @app_commands.describe(version="Target version (defaults to the installed system version)")
    @app_commands.checks.has_permissions(administrator=True)
    async def migrate_run(self, interaction: discord.Interaction, version: Optional[str] = None):
        if self._lock.locked():
            await interaction.response.send_message("A migration is already running.", ephemeral=True)
            return
        await interaction.response.defer(thinking=True)
        report = await self._run(ChannelNotifier(interaction.channel), version or SYSTEM_VERSION)
        if report is None:
            await interaction.followup.send("A migration is already running.", ephemeral=True)
            return
        await interaction.followup.send(embed=embeds.migration_report(report))


async def setup(bot: commands.Bot):
    await bot.add_cog(MigrationCog(bot, SettingsStore(SETTINGS_FILE)))
