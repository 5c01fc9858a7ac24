from __future__ import annotations

"""Environment-based configuration for LiveScout.

Values come from the process environment (the entrypoint loads `.env` first).
Everything is validated up front so a bad setup fails before the bot connects.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

MIN_POLL_SECONDS = 10


class ConfigError(RuntimeError):
	"""Raised when the configuration is missing or invalid."""


@dataclass(frozen=True)
class StreamConfig:
	discord_token: str
	twitch_client_id: str
	twitch_access_token: str
	channels: tuple[str, ...]
	notify_channel_id: int
	poll_seconds: int = 60
	max_concurrency: int = 4
	http_timeout_seconds: float = 10.0
	live_role_id: Optional[int] = None
	ranks: tuple[str, ...] = ()
	guild_ids: tuple[int, ...] = ()
	log_level: str = "INFO"


def _split(raw: str) -> list[str]:
	return [part.strip() for part in raw.split(",") if part.strip()]


def _required(env: Mapping[str, str], key: str) -> str:
	value = (env.get(key) or "").strip()
	if not value:
		raise ConfigError(f"{key} is not set in the environment or .env file")
	return value


def _int(env: Mapping[str, str], key: str, default: Optional[int] = None) -> Optional[int]:
	raw = (env.get(key) or "").strip()
	if not raw:
		return default
	try:
		return int(raw)
	except ValueError:
		raise ConfigError(f"Invalid integer for {key}: {raw!r}")


def load_config(env: Optional[Mapping[str, str]] = None) -> StreamConfig:
	"""Read and validate the configuration from `env` (defaults to os.environ)."""
	env = os.environ if env is None else env
	discord_token = _required(env, "DISCORD_TOKEN")
	client_id = _required(env, "TWITCH_CLIENT_ID")
	access_token = _required(env, "TWITCH_ACCESS_TOKEN")

	notify_channel_id = _int(env, "NOTIFY_CHANNEL_ID")
	if notify_channel_id is None:
		raise ConfigError("NOTIFY_CHANNEL_ID is not set in the environment or .env file")

	channels: list[str] = []
	for login in _split(env.get("TWITCH_CHANNELS", "")):
		login = login.lower()
		if login not in channels:
			channels.append(login)
	if not channels:
		raise ConfigError("TWITCH_CHANNELS must list at least one channel login")

	guild_ids: list[int] = []
	for part in _split(env.get("GUILD_IDS", "")):
		try:
			guild_ids.append(int(part))
		except ValueError:
			raise ConfigError(f"Invalid guild id in GUILD_IDS: {part!r}")

	poll_seconds = _int(env, "POLL_SECONDS", 60)
	if poll_seconds < MIN_POLL_SECONDS:
		raise ConfigError(f"POLL_SECONDS must be at least {MIN_POLL_SECONDS}")
	max_concurrency = _int(env, "MAX_CONCURRENCY", 4)
	if max_concurrency < 1:
		raise ConfigError("MAX_CONCURRENCY must be positive")

	raw_timeout = (env.get("HTTP_TIMEOUT_SECONDS") or "").strip()
	try:
		timeout = float(raw_timeout) if raw_timeout else 10.0
	except ValueError:
		raise ConfigError(f"Invalid number for HTTP_TIMEOUT_SECONDS: {raw_timeout!r}")
	if timeout <= 0:
		raise ConfigError("HTTP_TIMEOUT_SECONDS must be positive")

	return StreamConfig(
		discord_token=discord_token,
		twitch_client_id=client_id,
		twitch_access_token=access_token,
		channels=tuple(channels),
		notify_channel_id=notify_channel_id,
		poll_seconds=poll_seconds,
		max_concurrency=max_concurrency,
		http_timeout_seconds=timeout,
		live_role_id=_int(env, "LIVE_ROLE_ID"),
		ranks=tuple(r.lower() for r in _split(env.get("RANKS", ""))),
		guild_ids=tuple(guild_ids),
		log_level=(env.get("LOG_LEVEL") or "INFO").strip().upper(),
	)
