"""
Visual configuration of the grid and the grid config file.

Colors are RGB triples with components between 0 and 255.
"""
import os
import math
import logging
import yaml
import appdirs
from .camera import camera_from_dict, Camera
from .utils  import as_number
log = logging.getLogger(__name__)

APP_NAME   = "editgrid"
APP_AUTHOR = "editgrid"
CONFIG_FILE_NAME = "grid.yaml"

DEFAULTS = {
        "size": 256,                 # world length of the coarsest cell
        "subdivisions": 4,           # branching factor between LOD levels
        "interval": None,            # fixed minor interval, disables LOD
        "color": (220, 220, 220),    # major lines
        "x_color": (255, 0, 0),      # the x axis (y = 0)
        "y_color": (0, 255, 0),      # the y axis (x = 0)
        "draw_scale": True,          # coordinate labels
        "fade_factor": 0.5,          # minor line dimming
        }

# names used by the Lua-era config files
ALIASES = {
        "xColor": "x_color",
        "yColor": "y_color",
        "drawScale": "draw_scale",
        "fadeFactor": "fade_factor",
        }

def _color(name, value):
    """Validate an RGB triple."""
    if not isinstance(value, (list, tuple)) or len(value) != 3:
        raise ValueError(f"{name} must be an RGB triple, not {value!r}")
    return tuple(as_number(name, c) for c in value)

class Visuals:
    """
    How the grid looks: cell size, subdivisions, colors and labels.

    Any option that is not given takes the value from DEFAULTS. Unknown
    options raise TypeError, values out of range ValueError.
    """

    def __init__(self, **kwargs):
        unknown = set(kwargs) - set(DEFAULTS)
        if unknown:
            raise TypeError(f"unknown visual options: {', '.join(sorted(unknown))}")

        opts = dict(DEFAULTS)
        opts.update({ k: v for k, v in kwargs.items() if v is not None })

        subdivisions = as_number("subdivisions", opts["subdivisions"])
        if not math.isfinite(subdivisions) or subdivisions != int(subdivisions) \
                or subdivisions < 2:
            raise ValueError(f"subdivisions must be an integer of at least 2, not {subdivisions:g}")

        size = as_number("size", opts["size"])
        if not size > 0:
            raise ValueError(f"size must be positive, not {size:g}")

        interval = opts["interval"]
        if interval is not None:
            interval = as_number("interval", interval)
            if not interval > 0:
                raise ValueError(f"interval must be positive, not {interval:g}")

        self.size         = size
        self.subdivisions = int(subdivisions)
        self.interval     = interval
        self.color        = _color("color", opts["color"])
        self.x_color      = _color("x_color", opts["x_color"])
        self.y_color      = _color("y_color", opts["y_color"])
        self.draw_scale   = bool(opts["draw_scale"])
        self.fade_factor  = as_number("fade_factor", opts["fade_factor"])

    def to_dict(self):
        """Convert the visuals to a dictionary."""
        return { key: getattr(self, key) for key in DEFAULTS }

    def __str__(self):
        return f"Visuals({self.to_dict()})"

    def __repr__(self):
        return self.__str__()


def visuals_from_dict(d):
    """Create Visuals from a dictionary, accepting the old camelCase keys."""
    d = d or { }
    opts = { }
    for key, value in d.items():
        key = ALIASES.get(key, key)
        if key not in DEFAULTS:
            log.debug("ignoring unknown visual option %s", key)
            continue
        opts[key] = value
    return Visuals(**opts)

def as_visuals(obj):
    """Visuals from None, a dictionary or a Visuals object."""
    if obj is None or isinstance(obj, dict):
        return visuals_from_dict(obj)
    return obj

def default_config_file():
    """Return the path of the per-user grid config file."""
    user_config_dir = appdirs.user_config_dir(APP_NAME, APP_AUTHOR)
    log.debug("User config directory: %s", user_config_dir)
    return os.path.join(user_config_dir, CONFIG_FILE_NAME)

def load_config(config_file, screen = None):
    """
    Read camera and visuals from a YAML file.

    The file may contain a "camera" and a "visuals" mapping, both
    optional. Returns a (Camera, Visuals) tuple.

    :param config_file: The name of the file to read from.
    :param screen: The screen size used when the camera has no viewport.

    File errors and YAML syntax errors are passed on to the caller,
    a file with the wrong structure or with bad values raises ValueError.
    """

    with open(config_file, "r", encoding = "utf-8") as f:
        cfg = yaml.safe_load(f)

    log.debug("read grid config from %s", config_file)

    if cfg is None:
        cfg = { }

    if not isinstance(cfg, dict):
        raise ValueError(f"{config_file}: expected a mapping at the top level")

    for section in [ "camera", "visuals" ]:
        if cfg.get(section) is not None and not isinstance(cfg[section], dict):
            raise ValueError(f"{config_file}: section {section} must be a mapping")

    camera  = camera_from_dict(cfg.get("camera"), screen = screen)
    visuals = visuals_from_dict(cfg.get("visuals"))
    return camera, visuals

def load_default_config(screen = None):
    """Read the per-user config file if there is one, else use defaults."""
    config_file = default_config_file()
    if not os.path.exists(config_file):
        log.debug("no config file at %s, using defaults", config_file)
        return Camera(screen = screen), Visuals()
    return load_config(config_file, screen = screen)
