import logging
import discord
from discord.ext import commands
from discord import app_commands

from core import embeds  # type: ignore

logger = logging.getLogger('errors')

TRANSIENT = (
    app_commands.MissingPermissions,
    app_commands.CheckFailure,
    app_commands.TransformerError,
)

class ErrorHandlerCog(commands.Cog):
    def __init__(self, bot: commands.Bot):
        self.bot = bot
        bot.tree.on_error = self.on_app_command_error

    @commands.Cog.listener()
    async def on_app_command_completion(self, interaction: discord.Interaction, command: app_commands.Command):
        logger.info('Slash command completed: /%s by %s', command.qualified_name, interaction.user)

    async def on_app_command_error(self, interaction: discord.Interaction, error: app_commands.AppCommandError):
        orig = getattr(error, 'original', error)
        if isinstance(error, TRANSIENT):
            message = str(error) or 'Not allowed.'
        else:
            logger.exception('App command error: %s', orig, exc_info=orig)
            message = 'An unexpected error occurred. Check the bot log for details.'
        # Reply or followup gracefully
        try:
            if interaction.response.is_done():
                await interaction.followup.send(embed=embeds.error(message), ephemeral=True)
            else:
                await interaction.response.send_message(embed=embeds.error(message), ephemeral=True)
        except discord.HTTPException:
            logger.warning('Could not deliver error reply for interaction %s', interaction.id)

async def setup(bot: commands.Bot):
    await bot.add_cog(ErrorHandlerCog(bot))
