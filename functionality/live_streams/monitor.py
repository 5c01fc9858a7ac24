from __future__ import annotations

"""Background scheduling for stream watchers."""

import asyncio
import logging
from datetime import datetime
from typing import Callable, Iterable, Optional

from .twitch_api import TwitchApi
from .watcher import NotificationSink, StreamWatcher, WatchState, utcnow

log = logging.getLogger(__name__)


class StreamMonitor:
	"""Ticks every watched channel on a fixed interval.

	Each channel has its own single-slot queue consumed by one worker task, so
	a channel's ticks run strictly one after another. Ticks of different
	channels run concurrently, bounded by a shared semaphore.
	"""

	def __init__(
		self,
		api: TwitchApi,
		notifier: NotificationSink,
		logins: Iterable[str],
		*,
		interval_seconds: int = 60,
		max_concurrency: int = 4,
		clock: Callable[[], datetime] = utcnow,
	) -> None:
		"""Create one watcher per unique login.

		interval_seconds controls the polling cadence; max_concurrency caps how
		many channels are polled at the same time.
		"""
		self.interval_seconds = max(1, int(interval_seconds))
		self.watchers: dict[str, StreamWatcher] = {}
		for login in logins:
			key = login.strip().lower()
			if key and key not in self.watchers:
				self.watchers[key] = StreamWatcher(key, api, notifier, clock=clock)
		self._pool = asyncio.Semaphore(max(1, int(max_concurrency)))
		self._queues: dict[str, asyncio.Queue[None]] = {}
		self._workers: dict[str, asyncio.Task] = {}
		self._task: Optional[asyncio.Task] = None

	def start(self) -> None:
		"""Start the channel workers and the ticker if not already running."""
		if self._task is not None and not self._task.done():
			return
		for login, watcher in self.watchers.items():
			queue: asyncio.Queue[None] = asyncio.Queue(maxsize=1)
			self._queues[login] = queue
			self._workers[login] = asyncio.create_task(
				self._channel_worker(watcher, queue), name=f"stream-watcher-{login}"
			)
		self._task = asyncio.create_task(self._run_loop(), name="stream-monitor")
		log.info("Watching %d channel(s) every %ss", len(self.watchers), self.interval_seconds)

	async def stop(self) -> None:
		"""Cancel the ticker and the channel workers, then wait for them."""
		tasks = [t for t in (self._task, *self._workers.values()) if t is not None and not t.done()]
		for task in tasks:
			task.cancel()
		await asyncio.gather(*tasks, return_exceptions=True)
		self._task = None
		self._workers.clear()
		self._queues.clear()

	def schedule_tick(self, login: str) -> bool:
		"""Queue a tick for a channel; False when one is already waiting."""
		queue = self._queues[login]
		try:
			queue.put_nowait(None)
		except asyncio.QueueFull:
			log.debug("Tick for %s still pending, skipping", login)
			return False
		return True

	def snapshot(self) -> list[tuple[str, WatchState]]:
		return [(login, w.state) for login, w in self.watchers.items()]

	async def _run_loop(self) -> None:
		"""Main loop: queue one tick per channel, then sleep."""
		while True:
			for login in self.watchers:
				self.schedule_tick(login)
			await asyncio.sleep(self.interval_seconds)

	async def _channel_worker(self, watcher: StreamWatcher, queue: asyncio.Queue[None]) -> None:
		while True:
			await queue.get()
			try:
				async with self._pool:
					await watcher.tick()
			except Exception:
				# One channel must never take down the others
				log.exception("Tick for %s crashed", watcher.login)
			finally:
				queue.task_done()
