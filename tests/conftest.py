import os
import sys


# Ensure project root is on sys.path so `functionality.*` imports work
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
	sys.path.insert(0, ROOT)

import pytest


@pytest.fixture
def helix_stream_entry() -> dict:
	"""One entry of a Helix `GET /streams` response."""
	return {
		"id": "40952121085",
		"user_login": "strumbot",
		"user_name": "Strumbot",
		"game_id": "33214",
		"type": "live",
		"title": "Ranked",
		"thumbnail_url": "https://static-cdn.jtvnw.net/previews-ttv/live_user_strumbot-{width}x{height}.jpg",
		"started_at": "2024-05-01T18:00:00Z",
	}
