from __future__ import annotations

"""Async Twitch Helix client for LiveScout.

Translates the three queries the watcher needs (stream by login, game by id,
thumbnail image) into HTTP calls. The client keeps no state besides its
aiohttp session and never retries; retrying is the next poll's job.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

import aiohttp

from .models import Game, Stream

log = logging.getLogger(__name__)

HELIX_URL = "https://api.twitch.tv/helix"


class TransportError(Exception):
	"""Connection-level failure (DNS, reset, timeout)."""

	def __init__(self, route: str, cause: BaseException) -> None:
		super().__init__(f"{route} > {type(cause).__name__}: {cause}")
		self.route = route
		self.cause = cause


class ApiError(Exception):
	"""Non-success HTTP status returned by the remote API."""

	def __init__(self, route: str, status: int, text: str) -> None:
		super().__init__(f"{route} > {status}: {text}")
		self.route = route
		self.status = status
		self.text = text

	@property
	def is_auth_failure(self) -> bool:
		return self.status in (401, 403)


class TwitchApi:
	"""Helix facade returning typed results or raising ApiError/TransportError."""

	def __init__(
		self,
		client_id: str,
		access_token: str,
		*,
		timeout_seconds: float = 10.0,
		metadata_concurrency: int = 4,
		thumbnail_concurrency: int = 2,
		session: Optional[aiohttp.ClientSession] = None,
		base_url: str = HELIX_URL,
	) -> None:
		self.client_id = client_id
		self.access_token = access_token
		self.base_url = base_url.rstrip("/")
		self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)
		# Thumbnails are larger and slower; keep them off the metadata pool
		self._metadata_pool = asyncio.Semaphore(max(1, metadata_concurrency))
		self._thumbnail_pool = asyncio.Semaphore(max(1, thumbnail_concurrency))
		self._session = session
		self._owns_session = session is None

	async def __aenter__(self) -> "TwitchApi":
		return self

	async def __aexit__(self, *exc: Any) -> None:
		await self.close()

	def _ensure_session(self) -> aiohttp.ClientSession:
		if self._session is None or self._session.closed:
			self._session = aiohttp.ClientSession(timeout=self.timeout)
			self._owns_session = True
		return self._session

	async def close(self) -> None:
		"""Close the underlying session if this client created it."""
		if self._session is not None and self._owns_session and not self._session.closed:
			await self._session.close()
		self._session = None

	def _headers(self) -> Dict[str, str]:
		return {
			"Client-Id": self.client_id,
			"Authorization": f"Bearer {self.access_token}",
			"Accept": "application/json",
		}

	async def _request(
		self,
		url: str,
		*,
		pool: asyncio.Semaphore,
		params: Dict[str, str] | None = None,
		headers: Dict[str, str] | None = None,
		as_json: bool = True,
	) -> Any:
		session = self._ensure_session()
		async with pool:
			log.debug("GET %s %s", url, params or "")
			try:
				async with session.get(url, params=params, headers=headers, timeout=self.timeout) as resp:
					if resp.status < 200 or resp.status >= 300:
						text = await resp.text()
						raise ApiError(url, resp.status, text or str(resp.reason or ""))
					if as_json:
						try:
							return await resp.json(content_type=None)
						except ValueError as exc:
							raise ApiError(url, resp.status, "invalid JSON body") from exc
					return await resp.read()
			except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
				raise TransportError(url, exc) from exc

	async def _helix_first(self, path: str, params: Dict[str, str]) -> Optional[Dict[str, Any]]:
		"""Return the first entry of a Helix `data` array or None when empty."""
		payload = await self._request(
			f"{self.base_url}/{path}",
			pool=self._metadata_pool,
			params=params,
			headers=self._headers(),
		)
		data = payload.get("data") if isinstance(payload, dict) else None
		if not data or not isinstance(data[0], dict):
			return None
		return data[0]

	async def get_stream_by_login(self, login: str) -> Optional[Stream]:
		"""Return the current stream for a channel, or None when it is offline."""
		if not login:
			raise ValueError("login must not be empty")
		entry = await self._helix_first("streams", {"user_login": login})
		if entry is None:
			return None
		try:
			return Stream.from_helix(entry)
		except (KeyError, ValueError) as exc:
			raise ApiError(f"{self.base_url}/streams", 200, f"malformed stream entry: {exc}") from exc

	async def get_game(self, game_id: str) -> Optional[Game]:
		"""Return the game/category for an id, or None when Twitch doesn't know it."""
		if not game_id:
			raise ValueError("game_id must not be empty")
		entry = await self._helix_first("games", {"id": game_id})
		if entry is None:
			return None
		return Game(id=str(entry.get("id") or game_id), name=str(entry.get("name") or ""))

	async def get_thumbnail(self, stream: Stream, width: int = 1920, height: int = 1080) -> bytes:
		"""Download the stream preview image completely and return its bytes."""
		return await self._request(
			stream.thumbnail(width, height),
			pool=self._thumbnail_pool,
			as_json=False,
		)
