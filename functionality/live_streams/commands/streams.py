from __future__ import annotations

import hikari
import lightbulb

from ..embeds import LIVE_COLOR
from .common import SharedContext


def register(client: lightbulb.Client, shared: SharedContext) -> str:
    @client.register
    class Streams(
        lightbulb.SlashCommand,
        name="streams",
        description="Show which watched channels are live",
    ):
        @lightbulb.invoke
        async def invoke(self, ctx: lightbulb.Context) -> None:
            lines = shared.describe_streams()
            embed = hikari.Embed(title="Watched channels", description="\n".join(lines)[:4096], color=LIVE_COLOR)
            await ctx.respond(embed=embed)

    return "streams"
