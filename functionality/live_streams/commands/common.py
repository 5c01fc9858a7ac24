from __future__ import annotations

"""Shared helpers and context for LiveScout slash commands."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

import hikari

from ..config import StreamConfig
from ..embeds import format_duration
from ..monitor import StreamMonitor
from ..watcher import StreamPhase


@dataclass
class SharedContext:
    """Holds configuration and the running monitor for commands."""

    config: StreamConfig
    monitor: Optional[StreamMonitor] = None

    def describe_streams(self, now: Optional[datetime] = None) -> list[str]:
        """One status line per watched channel."""
        if self.monitor is None:
            return [f"`{login}` (monitor not started)" for login in self.config.channels]
        now = now or datetime.now(timezone.utc)
        lines: list[str] = []
        for login, state in self.monitor.snapshot():
            if state.phase is StreamPhase.LIVE and state.stream and state.started_at:
                uptime = format_duration(now - state.started_at)
                lines.append(f"🔴 **{login}** live for {uptime}: {state.stream.title}")
            else:
                lines.append(f"⚫ {login} offline")
        return lines


async def toggle_rank(
    rest: hikari.api.RESTClient,
    *,
    guild_id: int,
    user_id: int,
    role_ids: list[int],
    rank: str,
    ranks: tuple[str, ...],
) -> str:
    """Add or remove an allow-listed rank role and return the reply text."""
    name = rank.strip().lower()
    if name not in ranks:
        return "That rank does not exist!"

    roles = await rest.fetch_roles(guild_id)
    role = next((r for r in roles if r.name.lower() == name), None)
    if role is None:
        return "I don't know that role!"

    try:
        if int(role.id) in role_ids:
            await rest.remove_role_from_member(guild_id, user_id, role.id)
            return f"you left **{role.name}**."
        await rest.add_role_to_member(guild_id, user_id, role.id)
        return f"you joined **{role.name}**."
    except hikari.ForbiddenError:
        return (
            f"I can't change **{role.name}** for you. I'm either missing the "
            "Manage Roles permission or the role is above mine."
        )
