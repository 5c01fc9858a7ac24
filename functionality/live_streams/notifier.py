from __future__ import annotations

"""Notification delivery for stream lifecycle events.

Posts one Discord message per notification to the configured channel. The
preview image, when present, is uploaded as an attachment and used as the
embed image. Delivery is attempted once; failures surface as
NotificationDeliveryError for the caller to log.
"""

import asyncio
import logging
from typing import Optional

import hikari
from hikari.files import Bytes

from .embeds import build_notification_embed
from .models import Notification, NotificationKind

log = logging.getLogger(__name__)


class NotificationDeliveryError(Exception):
	"""Posting a notification to Discord failed."""


class StreamNotifier:
	"""Sends stream notifications to a single Discord channel."""

	def __init__(
		self,
		app: hikari.RESTAware,
		channel_id: int,
		*,
		live_role_id: Optional[int] = None,
	) -> None:
		"""Create a notifier bound to a Hikari app with REST access.

		Accepts any object implementing RESTAware (e.g., GatewayBot or RESTBot).
		"""
		self.app = app
		self.channel_id = int(channel_id)
		self.live_role_id = live_role_id

	async def post(self, notification: Notification) -> None:
		"""Post a notification; raises NotificationDeliveryError on failure."""
		embed = build_notification_embed(notification)
		if notification.image and notification.image_filename:
			embed.set_image(Bytes(notification.image, notification.image_filename))

		content = None
		role_mentions: list[int] | hikari.UndefinedType = hikari.UNDEFINED
		if notification.kind is NotificationKind.LIVE and self.live_role_id:
			content = f"<@&{self.live_role_id}>"
			role_mentions = [self.live_role_id]

		try:
			await self.app.rest.create_message(
				self.channel_id,
				content=content,
				embeds=[embed],
				role_mentions=role_mentions,
			)
		except (hikari.HikariError, asyncio.TimeoutError) as exc:
			raise NotificationDeliveryError(
				f"Failed to post {notification.kind.value} notification for {notification.login}: {exc}"
			) from exc
		log.info("Posted %s notification for %s", notification.kind.value, notification.login)
