from __future__ import annotations

"""Data models used by the live stream watcher.

Streams and games are immutable values produced fresh from every API call;
notifications are the structured messages handed to the notifier.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any, Optional


def parse_timestamp(value: str) -> datetime:
	"""Parse an ISO 8601 timestamp into an aware datetime (UTC when naive)."""
	dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
	if dt.tzinfo is None:
		dt = dt.replace(tzinfo=timezone.utc)
	return dt


@dataclass(frozen=True)
class Stream:
	"""One poll result for a live channel."""
	game_id: str
	title: str
	type: str
	thumbnail_url: str
	started_at: datetime
	user_login: str = ""
	user_name: str = ""

	@classmethod
	def from_helix(cls, data: dict[str, Any]) -> "Stream":
		"""Build a Stream from one entry of the Helix `streams` payload."""
		return cls(
			game_id=str(data.get("game_id") or ""),
			title=str(data.get("title") or ""),
			type=str(data.get("type") or ""),
			thumbnail_url=str(data.get("thumbnail_url") or ""),
			started_at=parse_timestamp(str(data["started_at"])),
			user_login=str(data.get("user_login") or ""),
			user_name=str(data.get("user_name") or ""),
		)

	def thumbnail(self, width: int = 1920, height: int = 1080) -> str:
		"""Return the thumbnail URL for the requested size."""
		return self.thumbnail_url.replace("{width}", str(width)).replace("{height}", str(height))


@dataclass(frozen=True)
class Game:
	id: str
	name: str


@dataclass(frozen=True)
class GameSegment:
	"""A game played during a session, starting `offset` after the session start."""
	game_id: str
	game_name: str
	offset: timedelta


class NotificationKind(Enum):
	LIVE = "live"
	ENDED = "ended"
	GAME_CHANGE = "game_change"


@dataclass(frozen=True)
class Notification:
	"""Structured message posted to the messaging destination."""
	kind: NotificationKind
	login: str
	title: str
	description: str
	color: int
	url: Optional[str] = None
	fields: tuple[tuple[str, str], ...] = ()
	image: Optional[bytes] = None
	image_filename: Optional[str] = None
	timestamp: Optional[datetime] = None
