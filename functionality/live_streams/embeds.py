from __future__ import annotations

"""Notification builders and Discord embed rendering for stream events."""

from datetime import timedelta
from typing import Optional, Sequence

import hikari

from .models import Game, GameSegment, Notification, NotificationKind, Stream

UNKNOWN_GAME = "Unknown game"

LIVE_COLOR = 0x6441A5
ENDED_COLOR = 0x808080
GAME_CHANGE_COLOR = 0x235876


def channel_url(login: str) -> str:
	return f"https://www.twitch.tv/{login}"


def game_name(game: Optional[Game]) -> str:
	return game.name if game and game.name else UNKNOWN_GAME


def format_duration(duration: timedelta) -> str:
	"""Format a duration as H:MM:SS, clamping negatives to zero."""
	total = max(int(duration.total_seconds()), 0)
	hours, rest = divmod(total, 3600)
	minutes, seconds = divmod(rest, 60)
	return f"{hours}:{minutes:02d}:{seconds:02d}"


def build_live_notification(
	login: str,
	stream: Stream,
	game: Optional[Game],
	thumbnail: Optional[bytes],
) -> Notification:
	"""Notification for a channel that just went live."""
	name = game_name(game)
	return Notification(
		kind=NotificationKind.LIVE,
		login=login,
		title=stream.title or f"{login} is live",
		description=f"{stream.user_name or login} is live playing **{name}**",
		color=LIVE_COLOR,
		url=channel_url(login),
		fields=(("Game", name),),
		image=thumbnail,
		image_filename=f"{login}_thumbnail.jpg" if thumbnail else None,
		timestamp=stream.started_at,
	)


def build_ended_notification(
	login: str,
	stream: Stream,
	game: Optional[Game],
	duration: timedelta,
	segments: Sequence[GameSegment] = (),
) -> Notification:
	"""Notification summarizing a finished session.

	The timeline field lists every game played with its offset from the
	session start, in the order they were observed.
	"""
	fields = [("Game", game_name(game)), ("Duration", format_duration(duration))]
	if segments:
		timeline = "\n".join(f"`{format_duration(s.offset)}` {s.game_name}" for s in segments)
		fields.append(("Timeline", timeline[:1024]))
	return Notification(
		kind=NotificationKind.ENDED,
		login=login,
		title=stream.title or f"{login} stream ended",
		description=f"{stream.user_name or login} was live for {format_duration(duration)}",
		color=ENDED_COLOR,
		url=channel_url(login),
		fields=tuple(fields),
	)


def build_game_change_notification(
	login: str,
	stream: Stream,
	old_game: Optional[Game],
	new_game: Optional[Game],
) -> Notification:
	"""Notification for a category switch during a running session."""
	return Notification(
		kind=NotificationKind.GAME_CHANGE,
		login=login,
		title=stream.title or f"{login} switched games",
		description=f"{stream.user_name or login} switched from **{game_name(old_game)}** to **{game_name(new_game)}**",
		color=GAME_CHANGE_COLOR,
		url=channel_url(login),
		fields=(("Previous", game_name(old_game)), ("Now", game_name(new_game))),
	)


def build_notification_embed(n: Notification) -> hikari.Embed:
	"""Render a notification as an embed. Attachments are added by the notifier."""
	e = hikari.Embed(title=n.title[:256], description=n.description, color=n.color, url=n.url)
	e.set_author(name=n.login, url=n.url)
	for name, value in n.fields:
		e.add_field(name=name, value=value or "N/A", inline=name != "Timeline")
	if n.timestamp is not None:
		e.timestamp = n.timestamp
	return e
