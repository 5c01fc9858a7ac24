from __future__ import annotations

import lightbulb
from lightbulb.commands import options as opt

from .common import SharedContext, toggle_rank


def register(client: lightbulb.Client, shared: SharedContext) -> str:
    @client.register
    class Rank(
        lightbulb.SlashCommand,
        name="rank",
        description="Join or leave one of the server's ranks",
    ):
        rank: str = opt.string("name", "Rank to join or leave")

        @lightbulb.invoke
        async def invoke(self, ctx: lightbulb.Context) -> None:
            if not ctx.guild_id or ctx.member is None:
                await ctx.respond("This command must be used in a server.", ephemeral=True)
                return
            reply = await toggle_rank(
                ctx.client.app.rest,
                guild_id=int(ctx.guild_id),
                user_id=int(ctx.user.id),
                role_ids=[int(r) for r in ctx.member.role_ids],
                rank=self.rank,
                ranks=shared.config.ranks,
            )
            await ctx.respond(f"{ctx.user.mention}, {reply}")

    return "rank"
