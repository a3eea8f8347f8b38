from __future__ import annotations
import discord
from typing import Optional

PALETTE = {
    'info': 0x3498db,
    'success': 0x2ecc71,
    'error': 0xe74c3c,
    'warn': 0xf1c40f,
    'neutral': 0x95a5a6,
}

def _base(title: Optional[str]=None, description: Optional[str]=None, color: int | None=None) -> discord.Embed:
    return discord.Embed(title=title, description=description, color=color or PALETTE['neutral'])

def info(desc: str, title: str='Info') -> discord.Embed:
    return _base(title, desc, PALETTE['info'])

def success(desc: str, title: str='Success') -> discord.Embed:
    return _base(title, desc, PALETTE['success'])

def error(desc: str, title: str='Error') -> discord.Embed:
    return _base(title, desc, PALETTE['error'])

def warn(desc: str, title: str='Warning') -> discord.Embed:
    return _base(title, desc, PALETTE['warn'])

def migration_report(report, limit: int = 15) -> discord.Embed:
    """Summary of a MigrationReport, listing failed records first."""
    emb = (warn if report.failed else success)(report.summary(), title=f'Migration to {report.version}')
    if report.failed:
        lines = [f'{o.kind} **{o.name}** ({o.step}): {o.error}' for o in report.failed[:limit]]
        extra = len(report.failed) - limit
        if extra > 0:
            lines.append(f'… {extra} more')
        emb.add_field(name='Failures', value='\n'.join(lines)[:1024], inline=False)
    if not report.version_saved:
        emb.add_field(name='Version', value='Migration version could not be stored.', inline=False)
    return emb
