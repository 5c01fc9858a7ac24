from datetime import datetime, timedelta, timezone

import pytest

from functionality.live_streams.models import Stream, parse_timestamp


def test_stream_from_helix_parses_fields(helix_stream_entry):
	s = Stream.from_helix(helix_stream_entry)
	assert s.game_id == "33214"
	assert s.type == "live"
	assert s.user_login == "strumbot"
	assert s.started_at == datetime(2024, 5, 1, 18, tzinfo=timezone.utc)
	assert s.user_name == "Strumbot"


def test_stream_from_helix_tolerates_missing_optional_fields():
	s = Stream.from_helix({"started_at": "2024-04-01T12:00:00+02:00", "game_id": None})
	assert s.game_id == ""
	assert s.title == ""
	assert s.started_at.utcoffset() == timedelta(hours=2)


def test_stream_from_helix_requires_start_time():
	with pytest.raises(KeyError):
		Stream.from_helix({"game_id": "1"})


def test_thumbnail_substitutes_dimensions():
	s = Stream("1", "t", "live", "https://img/{width}x{height}.jpg", datetime.now(timezone.utc))
	assert s.thumbnail() == "https://img/1920x1080.jpg"
	assert s.thumbnail(320, 180) == "https://img/320x180.jpg"


def test_parse_timestamp_assumes_utc_when_naive():
	assert parse_timestamp("2024-01-01T00:00:00").tzinfo == timezone.utc
