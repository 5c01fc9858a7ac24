import pytest

from functionality.live_streams.config import ConfigError, load_config


BASE_ENV = {
	"DISCORD_TOKEN": "discord",
	"TWITCH_CLIENT_ID": "cid",
	"TWITCH_ACCESS_TOKEN": "tok",
	"TWITCH_CHANNELS": "Strumbot, other ,strumbot",
	"NOTIFY_CHANNEL_ID": "1234",
}


def test_load_config_defaults_and_normalization():
	cfg = load_config(dict(BASE_ENV))
	assert cfg.channels == ("strumbot", "other")
	assert cfg.notify_channel_id == 1234
	assert cfg.poll_seconds == 60
	assert cfg.max_concurrency == 4
	assert cfg.http_timeout_seconds == 10.0
	assert cfg.live_role_id is None
	assert cfg.ranks == ()
	assert cfg.guild_ids == ()
	assert cfg.log_level == "INFO"


def test_load_config_optional_values():
	env = dict(
		BASE_ENV,
		POLL_SECONDS="30",
		MAX_CONCURRENCY="2",
		HTTP_TIMEOUT_SECONDS="5.5",
		LIVE_ROLE_ID="77",
		RANKS="Speedrun, Chill",
		GUILD_IDS="1,2",
		LOG_LEVEL="debug",
	)
	cfg = load_config(env)
	assert cfg.poll_seconds == 30
	assert cfg.max_concurrency == 2
	assert cfg.http_timeout_seconds == 5.5
	assert cfg.live_role_id == 77
	assert cfg.ranks == ("speedrun", "chill")
	assert cfg.guild_ids == (1, 2)
	assert cfg.log_level == "DEBUG"


@pytest.mark.parametrize(
	"key", ["DISCORD_TOKEN", "TWITCH_CLIENT_ID", "TWITCH_ACCESS_TOKEN", "TWITCH_CHANNELS", "NOTIFY_CHANNEL_ID"]
)
def test_load_config_requires_core_values(key):
	env = dict(BASE_ENV)
	env.pop(key)
	with pytest.raises(ConfigError, match=key):
		load_config(env)


@pytest.mark.parametrize(
	"override",
	[
		{"NOTIFY_CHANNEL_ID": "general"},
		{"GUILD_IDS": "1,abc"},
		{"POLL_SECONDS": "5"},
		{"MAX_CONCURRENCY": "0"},
		{"HTTP_TIMEOUT_SECONDS": "-1"},
		{"HTTP_TIMEOUT_SECONDS": "soon"},
	],
)
def test_load_config_rejects_invalid_values(override):
	with pytest.raises(ConfigError):
		load_config(dict(BASE_ENV, **override))
