"""
Conversion between screen and world coordinates.

The camera looks at (x, y) in world coordinates, which ends up in the
center of its viewport. World coordinates are scaled by zoom and rotated
by -angle on the way to the screen.
"""
import math
from .camera import unpack_camera

def to_world(camera, screen_x, screen_y):
    """Convert a point from screen to world coordinates."""
    camx, camy, zoom, angle, sx, sy, sw, sh = unpack_camera(camera)
    sin, cos = math.sin(angle), math.cos(angle)
    x, y = (screen_x - sw / 2 - sx) / zoom, (screen_y - sh / 2 - sy) / zoom
    x, y = cos * x - sin * y, sin * x + cos * y
    return x + camx, y + camy

def to_screen(camera, world_x, world_y):
    """Convert a point from world to screen coordinates."""
    camx, camy, zoom, angle, sx, sy, sw, sh = unpack_camera(camera)
    sin, cos = math.sin(angle), math.cos(angle)
    x, y = world_x - camx, world_y - camy
    x, y = cos * x + sin * y, -sin * x + cos * y
    return zoom * x + sw / 2 + sx, zoom * y + sh / 2 + sy

def visible(camera):
    """
    Return the world rectangle (left, top, width, height) the camera sees.

    For a rotated camera this is the bounding box of the rotated
    viewport, so it covers more than what is actually on screen.
    """
    camx, camy, zoom, angle, _, _, sw, sh = unpack_camera(camera)
    w, h = sw / zoom, sh / zoom
    if angle != 0:
        sin, cos = abs(math.sin(angle)), abs(math.cos(angle))
        w, h = cos * w + sin * h, sin * w + cos * h
    return camx - w / 2, camy - h / 2, w, h

def corners(camera):
    """
    World coordinates of the viewport corners.

    Order: top left, top right, bottom right, bottom left (as seen on
    screen).
    """
    sx, sy, sw, sh = camera.get_window()
    return [ to_world(camera, sx, sy),
             to_world(camera, sx + sw, sy),
             to_world(camera, sx + sw, sy + sh),
             to_world(camera, sx, sy + sh) ]

def camera_on_cairo(cr, camera):
    """Transform the cairo context so that world coordinates can be used."""
    camx, camy, zoom, angle, sx, sy, sw, sh = unpack_camera(camera)
    cr.scale(zoom, zoom)
    cr.translate((sw / 2 + sx) / zoom, (sh / 2 + sy) / zoom)
    cr.rotate(-angle)
    cr.translate(-camx, -camy)
