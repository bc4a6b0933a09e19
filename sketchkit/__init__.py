"""Logic for small graphics sketches: clock, balls, trails, slideshow, texture loading,
thread-safe containers, frustum culling, polylines, hexagon grids, perspective warp and colour picking."""

__version__ = "0.1.0"