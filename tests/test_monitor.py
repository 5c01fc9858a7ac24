import asyncio

import pytest

from functionality.live_streams.monitor import StreamMonitor


class StubWatcher:
	def __init__(self, login, tracker, *, delay=0.0, fail=False):
		self.login = login
		self.tracker = tracker
		self.delay = delay
		self.fail = fail
		self.ticks = 0
		self.state = None

	async def tick(self):
		self.tracker["running"][self.login] = self.tracker["running"].get(self.login, 0) + 1
		self.tracker["max_same"] = max(self.tracker["max_same"], self.tracker["running"][self.login])
		total = sum(self.tracker["running"].values())
		self.tracker["max_total"] = max(self.tracker["max_total"], total)
		try:
			await asyncio.sleep(self.delay)
			self.ticks += 1
			if self.fail:
				raise RuntimeError("boom")
			return []
		finally:
			self.tracker["running"][self.login] -= 1


def make_monitor(logins, *, max_concurrency=4, **watcher_kwargs):
	tracker = {"running": {}, "max_same": 0, "max_total": 0}
	monitor = StreamMonitor(object(), object(), logins, interval_seconds=60, max_concurrency=max_concurrency)
	for login in list(monitor.watchers):
		monitor.watchers[login] = StubWatcher(login, tracker, **watcher_kwargs.get(login, {}))
	return monitor, tracker


async def drain(monitor):
	await asyncio.gather(*(q.join() for q in monitor._queues.values()))


def test_monitor_deduplicates_and_normalizes_logins():
	monitor = StreamMonitor(object(), object(), ["Foo", "foo", " bar ", ""])
	assert list(monitor.watchers) == ["foo", "bar"]


@pytest.mark.asyncio
async def test_ticks_for_one_channel_never_overlap():
	monitor, tracker = make_monitor(["a"], a={"delay": 0.01})
	monitor.start()
	try:
		for _ in range(5):
			monitor.schedule_tick("a")
			await asyncio.sleep(0.002)
		await drain(monitor)
	finally:
		await monitor.stop()
	assert tracker["max_same"] == 1
	assert monitor.watchers["a"].ticks >= 2


@pytest.mark.asyncio
async def test_surplus_ticks_coalesce_while_one_is_pending():
	monitor, _ = make_monitor(["a"])
	monitor._queues["a"] = asyncio.Queue(maxsize=1)
	assert monitor.schedule_tick("a") is True
	assert monitor.schedule_tick("a") is False


@pytest.mark.asyncio
async def test_channels_run_concurrently_within_pool_bound():
	logins = ["a", "b", "c", "d"]
	monitor, tracker = make_monitor(logins, max_concurrency=2, **{l: {"delay": 0.02} for l in logins})
	monitor.start()
	try:
		await asyncio.sleep(0)
		await drain(monitor)
	finally:
		await monitor.stop()
	assert tracker["max_total"] == 2
	assert all(monitor.watchers[l].ticks == 1 for l in logins)


@pytest.mark.asyncio
async def test_failing_channel_does_not_stop_others():
	monitor, _ = make_monitor(["bad", "good"], bad={"fail": True})
	monitor.start()
	try:
		await asyncio.sleep(0)
		await drain(monitor)
		monitor.schedule_tick("bad")
		monitor.schedule_tick("good")
		await drain(monitor)
	finally:
		await monitor.stop()
	assert monitor.watchers["good"].ticks == 2
	assert monitor.watchers["bad"].ticks == 2


@pytest.mark.asyncio
async def test_run_loop_schedules_every_channel(monkeypatch):
	monitor, _ = make_monitor(["a", "b"])
	monitor._queues = {"a": asyncio.Queue(maxsize=1), "b": asyncio.Queue(maxsize=1)}

	async def stop_sleep(*args, **kwargs):
		raise StopAsyncIteration

	monkeypatch.setattr("functionality.live_streams.monitor.asyncio.sleep", stop_sleep)

	with pytest.raises(StopAsyncIteration):
		await monitor._run_loop()

	assert monitor._queues["a"].qsize() == 1
	assert monitor._queues["b"].qsize() == 1


@pytest.mark.asyncio
async def test_stop_is_safe_when_not_started():
	monitor, _ = make_monitor(["a"])
	await monitor.stop()
	monitor.start()
	await monitor.stop()
	assert monitor._workers == {}
