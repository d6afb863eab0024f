"""Infinite reference grid for 2D scene viewers, drawn with cairo."""
from .camera import Camera, WindowedCamera, camera_from_dict
from .config import Visuals, visuals_from_dict, load_config
from .trafo  import to_world, to_screen, visible, corners
from .grid   import draw, minor_interval, major_interval, Grid
from .utils  import intersect
