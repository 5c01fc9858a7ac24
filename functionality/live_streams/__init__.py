from .models import Game, GameSegment, Notification, NotificationKind, Stream
from .config import ConfigError, StreamConfig, load_config
from .twitch_api import ApiError, TransportError, TwitchApi
from .embeds import build_notification_embed
from .notifier import NotificationDeliveryError, StreamNotifier
from .watcher import StreamPhase, StreamWatcher, WatchState
from .monitor import StreamMonitor

__all__ = [
	"Game",
	"GameSegment",
	"Notification",
	"NotificationKind",
	"Stream",
	"ConfigError",
	"StreamConfig",
	"load_config",
	"ApiError",
	"TransportError",
	"TwitchApi",
	"build_notification_embed",
	"NotificationDeliveryError",
	"StreamNotifier",
	"StreamPhase",
	"StreamWatcher",
	"WatchState",
	"StreamMonitor",
]
