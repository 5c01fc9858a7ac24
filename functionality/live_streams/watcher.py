from __future__ import annotations

"""Per-channel stream lifecycle state machine.

Each StreamWatcher owns the WatchState of one channel and reconciles it with
the latest poll result once per tick:

- offline -> live: "went live" with game name and preview image
- live -> offline: "ended" with duration and the session's game timeline
- live with a different start timestamp: the previous session ended and a new
  one began between two polls, so both notifications are emitted in order
- live with a different game id: "game changed"

A failed poll never changes state; the next tick simply tries again.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable, Optional, Protocol

from .embeds import (
	build_ended_notification,
	build_game_change_notification,
	build_live_notification,
	game_name,
)
from .models import Game, GameSegment, Notification, Stream
from .notifier import NotificationDeliveryError
from .twitch_api import ApiError, TransportError, TwitchApi

log = logging.getLogger(__name__)


class StreamPhase(Enum):
	OFFLINE = "offline"
	LIVE = "live"


class NotificationSink(Protocol):
	async def post(self, notification: Notification) -> None: ...


@dataclass
class WatchState:
	"""Remembered lifecycle data for one channel."""
	phase: StreamPhase = StreamPhase.OFFLINE
	stream: Optional[Stream] = None
	started_at: Optional[datetime] = None
	game_id: Optional[str] = None
	segments: list[GameSegment] = field(default_factory=list)

	def clear(self) -> None:
		self.phase = StreamPhase.OFFLINE
		self.stream = None
		self.started_at = None
		self.game_id = None
		self.segments = []


def utcnow() -> datetime:
	return datetime.now(timezone.utc)


class StreamWatcher:
	"""Polls one channel and emits lifecycle notifications."""

	def __init__(
		self,
		login: str,
		api: TwitchApi,
		notifier: NotificationSink,
		*,
		clock: Callable[[], datetime] = utcnow,
		thumbnail_size: tuple[int, int] = (1920, 1080),
	) -> None:
		self.login = login
		self.api = api
		self.notifier = notifier
		self.clock = clock
		self.thumbnail_size = thumbnail_size
		self.state = WatchState()

	async def tick(self) -> list[Notification]:
		"""Run one poll and transition; returns the notifications emitted."""
		try:
			stream = await self.api.get_stream_by_login(self.login)
		except ApiError as exc:
			if exc.is_auth_failure:
				log.error("Twitch rejected credentials while polling %s: %s", self.login, exc)
			else:
				log.warning("Poll for %s failed: %s", self.login, exc)
			return []
		except TransportError as exc:
			log.warning("Poll for %s failed: %s", self.login, exc)
			return []

		state = self.state
		emitted: list[Notification] = []
		if stream is None:
			if state.phase is StreamPhase.LIVE:
				emitted.append(await self._end_session())
			return emitted

		if state.phase is StreamPhase.OFFLINE:
			emitted.append(await self._start_session(stream))
		elif state.started_at != stream.started_at:
			log.info(
				"%s started a new session (%s -> %s) between polls",
				self.login, state.started_at, stream.started_at,
			)
			emitted.append(await self._end_session())
			emitted.append(await self._start_session(stream))
		elif state.game_id != stream.game_id:
			emitted.append(await self._change_game(stream))
		else:
			state.stream = stream
		return emitted

	async def _start_session(self, stream: Stream) -> Notification:
		game, thumbnail = await asyncio.gather(
			self._resolve_game(stream.game_id),
			self._fetch_thumbnail(stream),
		)
		state = self.state
		state.phase = StreamPhase.LIVE
		state.stream = stream
		state.started_at = stream.started_at
		state.game_id = stream.game_id
		state.segments = [GameSegment(stream.game_id, game_name(game), timedelta(0))]
		log.info("%s went live: %s", self.login, stream.title)
		n = build_live_notification(self.login, stream, game, thumbnail)
		await self._dispatch(n)
		return n

	async def _end_session(self) -> Notification:
		state = self.state
		stream = state.stream
		started_at = state.started_at
		game_id = state.game_id
		segments = list(state.segments)
		game = await self._resolve_game(game_id or "")
		state.clear()

		duration = self.clock() - started_at
		log.info("%s went offline after %s", self.login, duration)
		n = build_ended_notification(self.login, stream, game, duration, segments)
		await self._dispatch(n)
		return n

	async def _change_game(self, stream: Stream) -> Notification:
		state = self.state
		old_game, new_game = await asyncio.gather(
			self._resolve_game(state.game_id or ""),
			self._resolve_game(stream.game_id),
		)
		state.stream = stream
		state.game_id = stream.game_id
		state.segments.append(GameSegment(stream.game_id, game_name(new_game), self.clock() - stream.started_at))
		log.info("%s switched game %s -> %s", self.login, game_name(old_game), game_name(new_game))
		n = build_game_change_notification(self.login, stream, old_game, new_game)
		await self._dispatch(n)
		return n

	async def _resolve_game(self, game_id: str) -> Optional[Game]:
		if not game_id:
			return None
		try:
			game = await self.api.get_game(game_id)
		except (ApiError, TransportError) as exc:
			log.warning("Game lookup %s for %s failed: %s", game_id, self.login, exc)
			return None
		if game is None:
			log.info("Twitch has no game with id %s", game_id)
		return game

	async def _fetch_thumbnail(self, stream: Stream) -> Optional[bytes]:
		if not stream.thumbnail_url:
			return None
		width, height = self.thumbnail_size
		try:
			return await self.api.get_thumbnail(stream, width, height)
		except (ApiError, TransportError) as exc:
			log.warning("Thumbnail download for %s failed: %s", self.login, exc)
			return None

	async def _dispatch(self, notification: Notification) -> None:
		try:
			await self.notifier.post(notification)
		except NotificationDeliveryError as exc:
			log.error("%s", exc)
