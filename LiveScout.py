"""LiveScout: Discord bot entrypoint.

Sets up the Hikari + Lightbulb client, registers commands, and starts the
background Twitch stream monitor. Configuration is provided via environment
variables loaded from .env when present.
"""

import os
import asyncio
import logging
import hikari
import lightbulb
from dotenv import load_dotenv

# Optional: use uvloop on UNIX-like systems for better event loop performance
if os.name != "nt":
	try:
		import uvloop  # type: ignore

		asyncio.set_event_loop_policy(uvloop.EventLoopPolicy())
	except ImportError:
		# If uvloop isn't available, continue with default asyncio loop
		pass

from functionality.live_streams import (
	ApiError,
	StreamConfig,
	StreamMonitor,
	StreamNotifier,
	TwitchApi,
	load_config,
)
from functionality.live_streams.commands import SharedContext, register_commands

log = logging.getLogger("livescout")

# Load .env file and validate configuration before anything connects
load_dotenv()
config = load_config()

# Create the Hikari gateway bot; `logs` also configures the root logger
bot = hikari.GatewayBot(
	token=config.discord_token,
	intents=hikari.Intents.GUILDS,
	logs=config.log_level,
)

# Create the Lightbulb client from the Hikari app (Lightbulb v3 style)
client = lightbulb.client_from_app(bot, default_enabled_guilds=config.guild_ids)

# Start/stop Lightbulb with the Hikari app lifecycle
bot.subscribe(hikari.StartedEvent, client.start)
bot.subscribe(hikari.StoppingEvent, client.stop)

_shared = SharedContext(config=config)
_api: TwitchApi | None = None

# Register commands (kept separate for maintainability)
register_commands(client, _shared)


def make_api(cfg: StreamConfig) -> TwitchApi:
	return TwitchApi(
		cfg.twitch_client_id,
		cfg.twitch_access_token,
		timeout_seconds=cfg.http_timeout_seconds,
		metadata_concurrency=cfg.max_concurrency,
	)


async def verify_twitch_credentials(cfg: StreamConfig) -> None:
	"""Fail fast when Twitch is unreachable or rejects the credentials."""
	async with make_api(cfg) as api:
		try:
			await api.get_stream_by_login(cfg.channels[0])
		except ApiError as exc:
			if exc.is_auth_failure:
				raise RuntimeError(f"Twitch rejected TWITCH_CLIENT_ID/TWITCH_ACCESS_TOKEN: {exc}") from exc
			raise


@bot.listen(hikari.StartedEvent)
async def _start_monitor(_: hikari.StartedEvent) -> None:
	"""Start the background monitor after the app has started."""
	global _api
	_api = make_api(config)
	monitor = StreamMonitor(
		_api,
		StreamNotifier(bot, config.notify_channel_id, live_role_id=config.live_role_id),
		config.channels,
		interval_seconds=config.poll_seconds,
		max_concurrency=config.max_concurrency,
	)
	_shared.monitor = monitor
	monitor.start()
	log.info("LiveScout ready. Watching %s", ", ".join(config.channels))


@bot.listen(hikari.StoppingEvent)
async def _stop_monitor(_: hikari.StoppingEvent) -> None:
	"""Stop the background monitor when the app is shutting down."""
	global _api
	if _shared.monitor:
		await _shared.monitor.stop()
		_shared.monitor = None
	if _api:
		await _api.close()
		_api = None


# Run the bot
if __name__ == "__main__":
	asyncio.run(verify_twitch_credentials(config))
	bot.run()
