"""
Camera description for the grid.

The grid only needs to know where the camera looks (x, y), how far it is
zoomed in, how it is rotated and which part of the screen it renders into.
Anything that has the attributes x, y, zoom and angle and a get_window()
method returning (sx, sy, sw, sh) will do; Camera is the plain version,
WindowedCamera wraps camera objects from other libraries.
"""
import copy
import logging
from .utils import as_number
log = logging.getLogger(__name__)

DEFAULT_SCREEN_SIZE = (800, 600)

class Camera:
    """
    Position, zoom, rotation and viewport of a 2D camera.

    Attributes:
        x, y (float): camera position in world units
        zoom (float): screen pixels per world unit, must be positive
            (ValueError otherwise)
        angle (float): rotation in radians
        viewport (tuple): (sx, sy, sw, sh) in screen units, or None for
            the whole screen
        screen (tuple): (width, height) of the screen, used when no
            viewport is given
    """

    def __init__(self, x = 0, y = 0, zoom = 1, angle = 0,
                 viewport = None, screen = None):
        zoom = as_number("zoom", zoom)
        if not zoom > 0:
            raise ValueError(f"zoom must be positive, not {zoom}")

        if viewport is not None:
            if not isinstance(viewport, (list, tuple)):
                raise ValueError(f"viewport must be a sequence, not {viewport!r}")
            viewport = tuple(as_number("viewport", v) for v in viewport)
            if len(viewport) != 4:
                raise ValueError(f"viewport needs 4 values (sx, sy, sw, sh), not {len(viewport)}")

        self.x        = as_number("x", x)
        self.y        = as_number("y", y)
        self.zoom     = zoom
        self.angle    = as_number("angle", angle)
        self.viewport = viewport
        self.screen   = tuple(screen) if screen is not None else DEFAULT_SCREEN_SIZE

    def get_window(self):
        """Return the viewport as (sx, sy, sw, sh)."""
        if self.viewport is not None:
            return self.viewport
        return (0, 0, self.screen[0], self.screen[1])

    def replace(self, **kwargs):
        """Return a copy with some of the attributes replaced."""
        ret = copy.copy(self)
        for key, value in kwargs.items():
            if not hasattr(ret, key):
                raise AttributeError(f"Camera has no attribute {key}")
            setattr(ret, key, value)
        return ret

    def to_dict(self):
        """Convert the camera to a dictionary."""
        return {
                "x": self.x,
                "y": self.y,
                "zoom": self.zoom,
                "angle": self.angle,
                "viewport": list(self.viewport) if self.viewport else None,
                }

    def __eq__(self, other):
        if not isinstance(other, Camera):
            return NotImplemented
        return (self.x, self.y, self.zoom, self.angle, self.get_window()) == \
               (other.x, other.y, other.zoom, other.angle, other.get_window())

    def __str__(self):
        return f"Camera(x={self.x}, y={self.y}, zoom={self.zoom}, angle={self.angle}, window={self.get_window()})"

    def __repr__(self):
        return self.__str__()


class WindowedCamera:
    """
    Adapter for camera objects that manage their own window.

    Such cameras (gamera style) report the viewport through a
    get_window() or getWindow() method and call the zoom "scale" and the
    rotation "angle" or "rot". The adapter reads the wrapped object on
    every access, so changes to the wrapped camera show up immediately.
    """

    def __init__(self, camera):
        self.__camera = camera
        self.__get_window = getattr(camera, "get_window", None) or \
                            getattr(camera, "getWindow")

    def __attr(self, *names, default = 0):
        for name in names:
            value = getattr(self.__camera, name, None)
            if value is not None:
                return value
        return default

    @property
    def x(self):
        """Camera x position."""
        return self.__attr("x")

    @property
    def y(self):
        """Camera y position."""
        return self.__attr("y")

    @property
    def zoom(self):
        """Camera zoom."""
        return self.__attr("scale", "zoom", default = 1)

    @property
    def angle(self):
        """Camera rotation in radians."""
        return self.__attr("angle", "rot")

    def get_window(self):
        """Return the viewport of the wrapped camera."""
        return tuple(self.__get_window())

    def __str__(self):
        return f"WindowedCamera({self.__camera!r})"


def camera_from_dict(d, screen = None):
    """
    Create a Camera from a loosely specified dictionary.

    Understands the keys x, y, scale (or zoom), angle (or rot) and either
    viewport (a 4-sequence) or the separate keys sx, sy, sw and sh. Width
    and height that are not given default to the screen size.
    """
    d = d or { }
    screen = tuple(screen) if screen is not None else DEFAULT_SCREEN_SIZE

    known = { "x", "y", "zoom", "scale", "angle", "rot", "viewport",
              "sx", "sy", "sw", "sh" }
    unknown = set(d) - known
    if unknown:
        log.debug("ignoring unknown camera keys: %s", sorted(unknown))

    zoom  = d.get("scale") if d.get("scale") is not None else d.get("zoom", 1)
    angle = d.get("angle") if d.get("angle") is not None else d.get("rot", 0)

    viewport = d.get("viewport")
    if viewport is None and any(k in d for k in ("sx", "sy", "sw", "sh")):
        viewport = (d.get("sx", 0), d.get("sy", 0),
                    d.get("sw", screen[0]), d.get("sh", screen[1]))

    return Camera(x = d.get("x", 0), y = d.get("y", 0),
                  zoom = zoom, angle = angle,
                  viewport = viewport, screen = screen)

def as_camera(obj, screen = None):
    """
    Turn whatever the caller passed as a camera into something usable.

    None and dictionaries become a Camera, foreign camera objects with a
    window accessor are wrapped in WindowedCamera, and objects that
    already look like a Camera are returned as they are.
    """
    if obj is None or isinstance(obj, dict):
        return camera_from_dict(obj, screen = screen)
    if all(hasattr(obj, a) for a in ("x", "y", "zoom", "angle", "get_window")):
        return obj
    if hasattr(obj, "get_window") or hasattr(obj, "getWindow"):
        return WindowedCamera(obj)
    raise TypeError(f"cannot use {obj!r} as a camera")

def unpack_camera(camera):
    """Return x, y, zoom, angle, sx, sy, sw, sh of a camera."""
    sx, sy, sw, sh = camera.get_window()
    return camera.x, camera.y, camera.zoom, camera.angle, sx, sy, sw, sh
