# sketchkit

This package holds the logic behind a set of small interactive graphics sketches. It does no drawing of its own. It covers geometry, simulation, colour picking and image loading. Each module returns the numbers a renderer needs: angles, rectangles, matrices, vertices, indices and visibility flags. You draw them with whatever library you prefer.

## Installation

```
pip install .
```

To run the tests as well:

```
pip install .[test]
pytest
```

## Modules

- `sketchkit.clock`: the geometry of an analog clock.
  - `seconds_since_midnight(now)` returns whole seconds since midnight.
  - `hand_angles(seconds)` returns a `HandAngles` with `hour`, `minute` and `second`, in degrees clockwise from twelve.
  - `hour_marker_angles()` returns the twelve hour-marker angles.
  - `rotate_point(point, degrees, center)` rotates a point.
  - `clock_face(now, center)` returns the coloured polygons of the face in drawing order.
- `sketchkit.balls`: balls bouncing under gravity inside a window, with elastic collisions between balls and friction at the edges.
  - `Ball` has `reset`, `update`, `trail`, `is_colliding_with`, `collide_with`, `is_colliding_with_window` and `collide_with_window`. `trail` gives the colour and positions for motion blur.
  - `Simulation` steps a set of balls at a fixed rate, 60 steps per second by default. It has `add_ball`, `remove_oldest`, `reset_all`, `toggle_pause`, `update` and `perform_collisions`.
  - `ball_mesh(slices, radius)` returns a triangle fan for one ball.
- `sketchkit.trails`: a ribbon trail swirling around a sphere.
  - `Trail.update(now)` adds segments at 2000 per second.
  - `Trail.vertices()` returns the vertices, newest first.
  - `trail_indices(length)` and `trail_tex_coords(length)` build the fixed strip buffers.
- `sketchkit.slideshow`: a cross-fading, slowly zooming slideshow.
  - `parse_feed(xml_text)` extracts the `image/jpeg` link urls found at `feed/entry/link`.
  - `cover_rect(image_size, window_size, zoom)` fits an image so it covers the window.
  - `Slideshow` has `update(now)`, `fade(now)`, `front_rect`, `back_rect` and `toggle_asynchronous`. Each image stays for `view_time`, 5 s by default, and fades over `fade_time`, 1.5 s by default.
- `sketchkit.texture_store`: a cache of textures keyed by url.
  - `TextureStore.load(url)` blocks until the image is loaded. It returns `None` on failure.
  - `TextureStore.fetch(url)` queues the url for worker threads and returns `None` until the image has arrived.
  - The store also has `abort`, `is_loading`, `is_loaded`, `load_extensions`, `garbage_collect` and `close`. It works as a context manager.
  - `fit_within(width, height, max_size)` limits an image to a square, 4096 px by default.
- `sketchkit.concurrency`: thread-safe containers.
  - `ConcurrentDeque`, `ConcurrentMap` and `ConcurrentQueue` all use blocking waits with an optional timeout. A wait that runs out raises `TimeoutError`.
- `sketchkit.culling`: view-frustum culling.
  - `BoundingBox` has `transformed`, `from_points`, `corners` and `contains`.
  - `Frustum.from_camera(...)` builds a frustum from a camera, and `Frustum.intersects(box)` tests a box against it.
  - `CullableObject` holds one object's transform and culled flag.
  - `CullingScene` scatters 1500 objects by default. `update` culls them against the camera, `visible_count` counts the visible ones and `help_lines` gives the help text.
  - `compose_transform(position, rotation, scale)` and `grid_lines(size, step)` are helpers.
- `sketchkit.lines`: an editor for polylines.
  - `LineEditor` handles mouse placement and dragging of points. It also adjusts thickness and miter limit and keeps the points centred on resize.
  - `adjacency_mesh(points)` builds the lines-with-adjacency vertices and indices.
  - `is_nvidia(vendor)` checks a vendor string.
- `sketchkit.hexagons`: placement for a staggered grid of hexagon instances.
  - `instance_offset(index, per_row)`, `instance_matrices(count, per_row)` and `texture_scale(per_row)`.
- `sketchkit.warp`: a four-corner perspective warp.
  - `perspective_transform(source, destination)` computes the 3x3 homography.
  - `to_gl_matrix(warp)` turns it into a column-major 4x4.
  - `PerspectiveWarp` drags corners with `mouse_down`, `mouse_drag` and `mouse_up`. It also has `set_content_size`, `resize`, `nearest_index`, `update` and `apply`.
- `sketchkit.picking`: picking objects by colour.
  - `char_to_color`, `char_to_int`, `int_to_color` and `color_to_int` convert between colours and 24-bit ids.
  - `pick_region(position, window_size, buffer_size)` gives the framebuffer area to sample.
  - `Picker.classify(pixels)` names the object that covers at least half of the sampled pixels, or returns `"Uncertain"`.
  - `grid_lines(size, step)` builds a floor grid.

## Example

```python
from datetime import datetime
from sketchkit.clock import hand_angles, seconds_since_midnight

angles = hand_angles(seconds_since_midnight(datetime.now()))
print(angles.hour, angles.minute, angles.second)
```

```python
from sketchkit.warp import PerspectiveWarp

warp = PerspectiveWarp()
warp.set_content_size(1440, 1080)
warp.resize(800, 600)
warp.update()
print(warp.apply((720, 540)))  # centre of the content maps to (400.0, 300.0)
```

## What it does not do

- The package opens no windows and renders nothing.
- It has no command-line program, no event loop, no shaders and no GPU buffers. You feed events and times into the classes yourself, then draw what they return.
- `TextureStore` does not decode pixels when it reads images itself. It reads only the width and height of PNG and JPEG data and keeps the encoded bytes. If you need the pixels, pass a `loader` that decodes images.