"""A cache of textures that loads images synchronously or on worker threads."""

from __future__ import annotations

import os
import struct
import threading
import urllib.request
import weakref
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

import numpy as np

from .concurrency import ConcurrentDeque, ConcurrentMap

MAX_TEXTURE_SIZE = 4096
LOAD_EXTENSIONS = (".jpg", ".png")

Size = Tuple[int, int]


@dataclass
class Surface:
    """An image in memory: its size, and its pixels or encoded bytes."""

    width: int
    height: int
    pixels: Optional[np.ndarray] = None
    encoded: bytes = b""

    @property
    def size(self) -> Size:
        return (self.width, self.height)

    def resized(self, size: Size) -> "Surface":
        """Return a copy scaled to ``size`` with nearest-neighbour sampling."""
        width, height = size
        pixels = self.pixels
        if pixels is not None:
            rows = np.arange(height) * pixels.shape[0] // height
            cols = np.arange(width) * pixels.shape[1] // width
            pixels = pixels[rows][:, cols]
        return Surface(width, height, pixels, self.encoded)


@dataclass(eq=False)
class Texture:
    """An image that has been turned into a texture, keyed by its url."""

    url: str
    surface: Surface

    @property
    def width(self) -> int:
        return self.surface.width

    @property
    def height(self) -> int:
        return self.surface.height

    @property
    def size(self) -> Size:
        return self.surface.size


Loader = Callable[[str], Surface]


def fit_within(width: int, height: int, max_size: int = MAX_TEXTURE_SIZE) -> Size:
    """Largest size with the same aspect ratio that fits in a square of ``max_size``.

    Images that already fit are never enlarged.
    """
    if width <= max_size and height <= max_size:
        return (width, height)
    scale = min(max_size / width, max_size / height)
    return (max(1, int(round(width * scale))), max(1, int(round(height * scale))))


def _image_size(data: bytes) -> Size:
    if data.startswith(b"\x89PNG\r\n\x1a\n") and len(data) >= 24:
        width, height = struct.unpack(">II", data[16:24])
        return (width, height)
    if data[:2] == b"\xff\xd8":
        i = 2
        while i + 4 <= len(data):
            if data[i] != 0xFF:
                break
            marker = data[i + 1]
            if marker == 0xFF:
                i += 1
                continue
            if marker in (0xD8, 0x01) or 0xD0 <= marker <= 0xD7:
                i += 2
                continue
            (length,) = struct.unpack(">H", data[i + 2 : i + 4])
            if 0xC0 <= marker <= 0xCF and marker not in (0xC4, 0xC8, 0xCC):
                if i + 9 > len(data):
                    break
                height, width = struct.unpack(">HH", data[i + 5 : i + 9])
                return (width, height)
            i += 2 + length
    raise ValueError("unrecognised image data")


def _decode(data: bytes) -> Surface:
    width, height = _image_size(data)
    return Surface(width, height, encoded=data)


class TextureStore:
    """Loads images into textures and keeps them while they are in use.

    ``load`` blocks until the image is available; ``fetch`` hands the url to
    worker threads and returns None until the image has arrived.
    """

    def __init__(
        self,
        loader: Optional[Loader] = None,
        workers: Optional[int] = None,
        asset_root: Optional[Path] = None,
        max_size: int = MAX_TEXTURE_SIZE,
    ) -> None:
        self._loader = loader if loader is not None else self._read_surface
        self._asset_root = Path(asset_root) if asset_root is not None else None
        self._max_size = max_size
        self._textures: Dict[str, Texture] = {}
        self._queue: ConcurrentDeque[Optional[str]] = ConcurrentDeque()
        self._loading: ConcurrentDeque[str] = ConcurrentDeque()
        self._surfaces: ConcurrentMap[str, Surface] = ConcurrentMap()
        self._stop = threading.Event()
        count = (os.cpu_count() or 1) if workers is None else workers
        self._threads: List[threading.Thread] = [
            threading.Thread(target=self._worker, name=f"texture-loader-{n}", daemon=True)
            for n in range(count)
        ]
        for thread in self._threads:
            thread.start()

    def __enter__(self) -> "TextureStore":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def load(self, url: str) -> Optional[Texture]:
        """Return the texture for ``url``, loading it now if needed; None on failure."""
        texture = self._from_cache(url)
        if texture is not None:
            return texture
        self.garbage_collect()
        try:
            surface = self._loader(url)
        except Exception:
            return None
        texture = Texture(url, surface)
        self._textures[url] = texture
        return texture

    def fetch(self, url: str) -> Optional[Texture]:
        """Return the texture for ``url`` if ready, otherwise queue it and return None."""
        texture = self._from_cache(url)
        if texture is not None:
            return texture
        if self._loading.push_back(url, unique=True):
            self._queue.push_back(url, unique=True)
        return None

    def abort(self, url: str) -> bool:
        """Remove ``url`` from the queue; no effect once the image has loaded."""
        self._loading.erase_all(url)
        return self._queue.erase_all(url)

    def load_extensions(self) -> List[str]:
        """File extensions of the image formats that can be loaded."""
        return list(LOAD_EXTENSIONS)

    def is_loading(self, url: str) -> bool:
        """True if ``url`` is scheduled but has not been turned into a texture yet."""
        return self._loading.contains(url)

    def is_loaded(self, url: str) -> bool:
        """True if ``url`` has been turned into a texture."""
        return url in self._textures

    def garbage_collect(self) -> None:
        """Drop textures that nobody but the store refers to any more."""
        for url in list(self._textures):
            ref = weakref.ref(self._textures.pop(url))
            survivor = ref()
            if survivor is not None:
                self._textures[url] = survivor
            del survivor

    def close(self) -> None:
        """Stop the worker threads and wait for them to finish."""
        if self._stop.is_set():
            return
        self._stop.set()
        for _ in self._threads:
            self._queue.push_back(None)
        for thread in self._threads:
            thread.join()
        self._threads.clear()
        self._surfaces.clear()
        self._textures.clear()

    def _from_cache(self, url: str) -> Optional[Texture]:
        if url in self._textures:
            return self._textures[url]
        try:
            surface = self._surfaces.try_pop(url)
        except KeyError:
            return None
        self._loading.erase(url)
        self.garbage_collect()
        texture = Texture(url, surface)
        self._textures[url] = texture
        return texture

    def _read_surface(self, url: str) -> Surface:
        path = Path(url)
        if path.is_file():
            return _decode(path.read_bytes())
        if self._asset_root is not None:
            asset = self._asset_root / url
            if asset.is_file():
                return _decode(asset.read_bytes())
        with urllib.request.urlopen(url) as response:
            return _decode(response.read())

    def _worker(self) -> None:
        while True:
            url = self._queue.wait_and_pop_front()
            if url is None or self._stop.is_set():
                break
            try:
                surface = self._loader(url)
            except Exception:
                continue
            if self._stop.is_set():
                break
            fit = fit_within(surface.width, surface.height, self._max_size)
            if fit != surface.size:
                surface = surface.resized(fit)
            if self._stop.is_set():
                break
            self._surfaces.push(url, surface)