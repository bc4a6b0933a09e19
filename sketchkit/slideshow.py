"""A cross-fading, slowly zooming slideshow of images listed in a feed."""

from __future__ import annotations

import urllib.request
import xml.etree.ElementTree as ET
from typing import Any, List, Optional, Sequence, Tuple, Union

from .texture_store import TextureStore

Rect = Tuple[float, float, float, float]
SizeF = Tuple[float, float]

REFERENCE_WIDTH = 600.0
ZOOM_RATE = 0.025


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def parse_feed(xml_text: Union[str, bytes]) -> List[str]:
    """Urls of the JPEG links found at feed/entry/link, in document order."""
    root = ET.fromstring(xml_text)
    if _local_name(root.tag) != "feed":
        return []
    return [
        link.attrib["href"]
        for entry in root
        if _local_name(entry.tag) == "entry"
        for link in entry
        if _local_name(link.tag) == "link"
        and link.get("type") == "image/jpeg"
        and "href" in link.attrib
    ]


def cover_rect(image_size: SizeF, window_size: SizeF, zoom: float) -> Rect:
    """Rectangle that covers the window with the image, centred, scaled up by ``zoom``."""
    image_w, image_h = image_size
    window_w, window_h = window_size
    scale = max(window_w / image_w, window_h / image_h) + zoom
    width, height = image_w * scale, image_h * scale
    ox = -0.5 * (width - window_w)
    oy = -0.5 * (height - window_h)
    return (ox, oy, ox + width, oy + height)


class Slideshow:
    """Shows each image for a while, cross-fading into the next one."""

    def __init__(
        self,
        urls: Sequence[str] = (),
        store: Optional[Any] = None,
        *,
        feed_url: Optional[str] = None,
        view_time: float = 5.0,
        fade_time: float = 1.5,
        asynchronous: bool = True,
    ) -> None:
        self.urls: List[str] = list(urls)
        self.store = store if store is not None else TextureStore()
        self.feed_url = feed_url
        self.view_time = view_time
        self.fade_time = fade_time
        self.asynchronous = asynchronous
        self.index = 0
        self.time_swapped = 0.0
        self.duration = 0.0
        self.front: Any = None
        self.back: Any = None

    def _obtain(self, url: str) -> Any:
        if self.asynchronous:
            return self.store.fetch(url)
        return self.store.load(url)

    def _advance(self, now: float) -> None:
        self.time_swapped = now
        self.index = (self.index + 1) % len(self.urls)

    def update(self, now: float) -> None:
        """Load images and swap them when the current one has been shown long enough."""
        if not self.urls and self.feed_url is not None:
            with urllib.request.urlopen(self.feed_url) as response:
                self.urls = parse_feed(response.read())
        if not self.urls:
            return

        elapsed = now - self.time_swapped
        if not self.front:
            self.front = self._obtain(self.urls[self.index])
            if self.front:
                self._advance(now)
        elif elapsed > self.fade_time:
            self.back = self._obtain(self.urls[self.index])
            if self.back and elapsed > self.fade_time + self.view_time:
                self.front, self.back = self.back, self.front
                self.duration = elapsed
                self._advance(now)

    def fade(self, now: float) -> float:
        """Opacity of the front image, from 0 to 1 over the fade time."""
        return min(1.0, max(0.0, (now - self.time_swapped) / self.fade_time))

    def _zoom(self, window_size: SizeF) -> float:
        return window_size[0] / REFERENCE_WIDTH * ZOOM_RATE

    def front_rect(self, image_size: SizeF, window_size: SizeF, now: float) -> Rect:
        """Where to draw the front image at time ``now``."""
        elapsed = now - self.time_swapped
        return cover_rect(image_size, window_size, self._zoom(window_size) * elapsed)

    def back_rect(self, image_size: SizeF, window_size: SizeF, now: float) -> Rect:
        """Where to draw the back image, continuing the zoom it had as front image."""
        elapsed = now - self.time_swapped
        return cover_rect(
            image_size, window_size, self._zoom(window_size) * (elapsed + self.duration)
        )

    def toggle_asynchronous(self) -> bool:
        """Switch between background and blocking loading; return the new setting."""
        self.asynchronous = not self.asynchronous
        return self.asynchronous