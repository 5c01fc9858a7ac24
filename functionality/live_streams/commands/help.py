from __future__ import annotations

import hikari
import lightbulb

from ..embeds import LIVE_COLOR
from .common import SharedContext


def register(client: lightbulb.Client, shared: SharedContext) -> str:
    @client.register
    class Help(
        lightbulb.SlashCommand,
        name="help",
        description="Show what this bot does and available commands",
    ):
        @lightbulb.invoke
        async def invoke(self, ctx: lightbulb.Context) -> None:
            desc = (
                "LiveScout watches Twitch channels and posts here when they go live, "
                "switch games, or end their stream."
            )
            embed = hikari.Embed(title="LiveScout Help", description=desc, color=LIVE_COLOR)
            channels = ", ".join(f"`{c}`" for c in shared.config.channels)
            embed.add_field(name="Watching", value=channels or "Nobody yet", inline=False)
            embed.add_field(
                name="Notifications",
                value=f"Posted to <#{shared.config.notify_channel_id}> every {shared.config.poll_seconds}s check.",
                inline=False,
            )
            commands = ["`/streams` show who is live right now"]
            if shared.config.ranks:
                commands.append("`/rank <name>` join or leave a rank")
            embed.add_field(name="Commands", value="\n".join(commands), inline=False)
            if shared.config.ranks:
                embed.add_field(
                    name="Ranks",
                    value=", ".join(f"`{r}`" for r in shared.config.ranks),
                    inline=False,
                )
            await ctx.respond(embed=embed, ephemeral=True)

    return "help"
