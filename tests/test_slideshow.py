import pytest

from sketchkit.slideshow import Slideshow, cover_rect, parse_feed


class FakeStore:
    def __init__(self, ready=None):
        self.ready = ready
        self.fetched = []
        self.loaded = []

    def fetch(self, url):
        self.fetched.append(url)
        if self.ready is not None and url not in self.ready:
            return None
        return f"tex:{url}"

    def load(self, url):
        self.loaded.append(url)
        return f"tex:{url}"


FEED = (
    '<feed xmlns="urn:example:feed">'
    '<link type="image/jpeg" href="http://example.com/top.jpg"/>'
    "<entry>"
    '<link rel="alternate" type="text/html" href="http://example.com/page"/>'
    '<link rel="enclosure" type="image/jpeg" href="http://example.com/1.jpg"/>'
    "</entry>"
    "<entry>"
    '<link type="image/jpeg"/>'
    '<link type="image/jpeg" href="http://example.com/2.jpg"/>'
    "</entry>"
    "</feed>"
)


def test_parse_feed_selects_jpeg_links():
    assert parse_feed(FEED) == ["http://example.com/1.jpg", "http://example.com/2.jpg"]


def test_parse_feed_other_root_is_empty():
    assert parse_feed("<rss><entry/></rss>") == []


def test_cover_rect_covers_and_centres():
    x1, y1, x2, y2 = cover_rect((300.0, 150.0), (600.0, 600.0), 0.0)
    assert (x1 + x2) / 2 == pytest.approx(300.0)
    assert (y1 + y2) / 2 == pytest.approx(300.0)
    assert x1 <= 0.0 and y1 <= 0.0 and x2 >= 600.0 and y2 >= 600.0
    assert (x2 - x1) / (y2 - y1) == pytest.approx(2.0)
    assert min(x2 - x1, y2 - y1) == pytest.approx(600.0)


def test_cover_rect_grows_with_zoom():
    plain = cover_rect((400.0, 300.0), (600.0, 600.0), 0.0)
    zoomed = cover_rect((400.0, 300.0), (600.0, 600.0), 0.5)
    assert zoomed[2] - zoomed[0] > plain[2] - plain[0]


def test_update_swaps_after_view_time():
    show = Slideshow(["a", "b", "c"], FakeStore())
    show.update(0.0)
    assert show.front == "tex:a"
    assert show.index == 1
    show.update(1.0)
    assert show.back is None
    show.update(2.0)
    assert show.back == "tex:b"
    assert show.front == "tex:a"
    show.update(7.0)
    assert show.front == "tex:b"
    assert show.back == "tex:a"
    assert show.index == 2
    assert show.duration == 7.0
    assert show.time_swapped == 7.0


def test_update_waits_for_asynchronous_texture():
    store = FakeStore(ready=set())
    show = Slideshow(["a"], store)
    show.update(0.0)
    assert show.front is None
    assert show.index == 0
    store.ready.add("a")
    show.update(1.0)
    assert show.front == "tex:a"
    assert show.time_swapped == 1.0


def test_toggle_asynchronous_switches_loading():
    store = FakeStore()
    show = Slideshow(["a", "b"], store)
    assert show.toggle_asynchronous() is False
    show.update(0.0)
    assert store.loaded == ["a"]
    assert store.fetched == []
    assert show.toggle_asynchronous() is True


def test_update_without_urls_does_nothing():
    store = FakeStore()
    show = Slideshow([], store)
    show.update(3.0)
    assert show.front is None
    assert store.fetched == []


def test_update_reads_feed(tmp_path):
    path = tmp_path / "feed.xml"
    path.write_text(FEED)
    show = Slideshow(store=FakeStore(), feed_url=path.as_uri())
    show.update(0.0)
    assert show.urls == ["http://example.com/1.jpg", "http://example.com/2.jpg"]
    assert show.front == "tex:http://example.com/1.jpg"


def test_fade_clamps():
    show = Slideshow(["a"], FakeStore(), fade_time=2.0)
    show.update(0.0)
    assert show.fade(1.0) == pytest.approx(0.5)
    assert show.fade(10.0) == 1.0
    assert show.fade(-1.0) == 0.0


def test_rects_follow_zoom_over_time():
    show = Slideshow(["a", "b"], FakeStore())
    show.update(0.0)
    show.update(7.0)
    image, window = (400.0, 300.0), (600.0, 600.0)
    assert show.front_rect(image, window, 7.0) == pytest.approx(cover_rect(image, window, 0.0))
    front = show.front_rect(image, window, 8.0)
    back = show.back_rect(image, window, 8.0)
    assert back[2] - back[0] > front[2] - front[0]