"""Builders for XMLTV documents, images and fake HTTP responses used in tests."""
import io
from datetime import datetime, timezone

import httpx
from lxml import etree
from PIL import Image


NOW = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_image_bytes(color="red", size=(32, 20), fmt="PNG") -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format=fmt)
    return buffer.getvalue()


def xmltv_time(value: datetime) -> str:
    return value.strftime("%Y%m%d%H%M%S %z")


def programme_xml(
    title,
    start,
    stop,
    channel="1.example.com",
    desc=None,
    icon=None,
    sub_title=None,
    episode_num=None,
) -> str:
    children = [f"<title>{title}</title>"]
    if sub_title is not None:
        children.append(f"<sub-title>{sub_title}</sub-title>")
    if desc is not None:
        children.append(f"<desc>{desc}</desc>")
    if icon is not None:
        children.append(f'<icon src="{icon}"/>')
    if episode_num is not None:
        children.append(f"<episode-num>{episode_num}</episode-num>")
    stop_attr = f' stop="{xmltv_time(stop)}"' if stop is not None else ""
    return (
        f'<programme channel="{channel}" start="{xmltv_time(start)}"{stop_attr}>'
        + "".join(children)
        + "</programme>"
    )


def guide_xml(channels=("1 News", "2 Movies"), programmes=()) -> bytes:
    channel_xml = "".join(
        f'<channel id="{name.split()[0]}.example.com"><display-name>{name}</display-name></channel>'
        for name in channels
    )
    return f"<tv>{channel_xml}{''.join(programmes)}</tv>".encode("utf-8")


def build_guide(channels=("1 News", "2 Movies"), programmes=()) -> etree._Element:
    return etree.fromstring(guide_xml(channels, programmes))


class RecordingTransport:
    """Serves registered URLs and records every request."""

    def __init__(self, responses=None):
        self.responses = dict(responses or {})
        self.requests: list[str] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        url = str(request.url)
        self.requests.append(url)
        if url not in self.responses:
            return httpx.Response(404)
        payload = self.responses[url]
        if isinstance(payload, Exception):
            raise payload
        return httpx.Response(200, content=payload)
