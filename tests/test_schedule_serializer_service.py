import json
from datetime import datetime, timedelta, timezone

from xmltv_converter.models import Channel, Episode
from xmltv_converter.services.schedule_serializer_service import (
    build_schedule,
    render_schedule_json,
    schedule_to_payload,
)
from xmltv_converter.utils.timezone import ConversionWindow


NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)
WINDOW = ConversionWindow.starting_at(NOW, 8)


def serialize(*channels):
    return schedule_to_payload(build_schedule(channels, WINDOW))


def news_channel(*episodes):
    channel = Channel.from_identifier("1 News")
    for item in episodes:
        channel.add_episode(item)
    return channel


def test_minimal_entry_has_empty_info_and_episode_number():
    payload = serialize(news_channel(Episode("News", NOW)))

    assert payload == [{
        "name": "News",
        "media": [{
            "name": "News",
            "startDate": "2024-03-01T12:00:00.000Z",
            "info": {},
            "episodeNumber": "",
        }],
    }]


def test_info_fields_present_only_when_known():
    item = Episode("News", NOW - timedelta(hours=1), title="Evening", plot="Top stories", episode_number="12")

    entry = serialize(news_channel(item))[0]["media"][0]

    assert entry["info"] == {"episode": "Evening", "plot": "Top stories"}
    assert entry["episodeNumber"] == "12"
    assert entry["startDate"] == "2024-03-01T11:00:00.000Z"


def test_image_reference_uses_slot():
    item = Episode("News", NOW, preview_url="http://img/news.jpg", thumbnail=b"x", slot_index=5)

    assert serialize(news_channel(item))[0]["media"][0]["info"] == {"image": 5}


def test_image_reference_without_slot_is_zero():
    item = Episode("News", NOW, preview_url="http://img/news.jpg")

    assert serialize(news_channel(item))[0]["media"][0]["info"] == {"image": 0}


def test_replacement_slot_without_url_is_emitted():
    item = Episode("Weather", NOW, plot="Daily forecast", thumbnail=b"poster", slot_index=2)

    assert serialize(news_channel(item))[0]["media"][0]["info"] == {"plot": "Daily forecast", "image": 2}


def test_start_dates_are_converted_to_utc():
    start = datetime(2024, 3, 1, 14, 30, tzinfo=timezone(timedelta(hours=2)))

    entry = serialize(news_channel(Episode("News", start)))[0]["media"][0]

    assert entry["startDate"] == "2024-03-01T12:30:00.000Z"


def test_channel_stops_at_first_episode_at_window_end():
    channel = news_channel(
        Episode("Late", NOW + timedelta(hours=8)),
        Episode("Early", NOW),
        Episode("Later", NOW + timedelta(hours=9)),
    )

    media = serialize(channel)[0]["media"]

    assert [entry["name"] for entry in media] == ["Early"]


def test_channels_keep_order_and_empty_channels_are_emitted():
    movies = Channel.from_identifier("2 Movies")

    payload = serialize(news_channel(Episode("News", NOW)), movies)

    assert [channel["name"] for channel in payload] == ["News", "Movies"]
    assert payload[1]["media"] == []


def test_render_schedule_json_round_trips_text():
    item = Episode("Nachrichten", NOW, plot="Überblick")

    text = render_schedule_json(build_schedule([news_channel(item)], WINDOW))

    assert "Überblick" in text
    assert json.loads(text)[0]["media"][0]["info"]["plot"] == "Überblick"
