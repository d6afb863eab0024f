"""Infinite grid drawn under an arbitrary camera"""
import math
import logging
import numpy as np
import cairo
from .camera import Camera, as_camera, unpack_camera
from .config import as_visuals
from .trafo  import to_world, to_screen, visible, corners, camera_on_cairo
from .utils  import floor_to, mod, fmt_number, cairo_color, intersect
from .utils  import saved, surface_size
log = logging.getLogger(__name__)

LABEL_FONT      = "Sans"
LABEL_FONT_SIZE = 10
LABEL_OFFSET    = 2
ORIGIN_RADIUS   = 8

# ---------- intervals -------------------

def grid_interval(visuals, zoom):
    """
    World distance between two neighbouring grid lines at given zoom.

    Every time the zoom grows by a factor of subdivisions, the interval
    shrinks by the same factor, so the line density on screen stays
    roughly constant.
    """
    if visuals.interval is not None:
        return visuals.interval

    sds = visuals.subdivisions
    # round first: log(16, 4) must give level 2, not 3
    level = math.ceil(round(math.log(zoom, sds), 9))
    return visuals.size * float(sds) ** -level

def minor_interval(camera, visuals):
    """Distance between the finest grid lines."""
    return grid_interval(visuals, camera.zoom)

def major_interval(camera, visuals):
    """Distance between the emphasized grid lines."""
    return visuals.subdivisions * minor_interval(camera, visuals)

def grid_lines(start, stop, step):
    """
    Positions of grid lines from start up to stop (inclusive).

    All positions are integer multiples of step, start should be one as
    well.
    """
    first = round(start / step)
    last  = math.floor(stop / step)
    return np.arange(first, last + 1) * float(step)

# ---------- drawing ---------------------

def _line_color(pos, count, delta, visuals, axis_color):
    """Return the color of a line and the new emphasis counter."""
    if abs(pos) < delta:
        return cairo_color(axis_color), 1
    if count >= visuals.subdivisions:
        return cairo_color(visuals.color), 1
    return cairo_color(visuals.color, visuals.fade_factor), count + 1

def _fit_camera(cr, camera, screen = None):
    """
    Size the screen of cameras without a viewport.

    An explicit screen size wins, otherwise the surface size is used.
    """
    if isinstance(camera, Camera) and camera.viewport is None:
        size = tuple(screen) if screen is not None else surface_size(cr)
        if size != camera.screen:
            log.debug("using %s as screen", size)
        return camera.replace(screen = size)
    return camera

def draw_label(cr, screen, camera, pos, label):
    """
    Draw a label at a world position, but in screen space.

    :param screen: the cairo matrix of the screen space
    """
    x, y = to_screen(camera, *pos)
    with saved(cr):
        cr.set_matrix(screen)
        ascent = cr.font_extents()[0]
        cr.move_to(x + LABEL_OFFSET, y + LABEL_OFFSET + ascent)
        cr.show_text(label)

def draw_origin(cr, camera):
    """Mark the world origin with a dot and a circle of fixed size."""
    ox, oy = to_screen(camera, 0, 0)
    cr.set_line_width(1)
    cr.set_source_rgba(1, 1, 1, 1)
    cr.rectangle(ox - 1, oy - 1, 2, 2)
    cr.fill()
    cr.arc(ox, oy, ORIGIN_RADIUS, 0, 2 * math.pi)
    cr.stroke()

def draw(cr, camera, visuals, screen = None):
    """
    Draw the grid on a cairo context.

    Drawing is clipped to the camera viewport. The cairo state of the
    caller (clip, matrix, color, line width, font) is restored before
    returning.

    :param screen: (width, height) in the user space of cr, used as the
        viewport of a camera without one. Defaults to the surface size.
    """
    camera = _fit_camera(cr, camera, screen)
    _, _, zoom, angle, sx, sy, sw, sh = unpack_camera(camera)

    c_tl, c_tr, _, c_bl = corners(camera)
    swap_labels = mod(angle + math.pi / 4, math.pi) > math.pi / 2

    vx, vy, vw, vh = visible(camera)
    minor = grid_interval(visuals, zoom)
    major = minor * visuals.subdivisions
    delta = minor / 2

    with saved(cr):
        matrix = cr.get_matrix()
        cr.rectangle(sx, sy, sw, sh)
        cr.clip()

        cr.select_font_face(LABEL_FONT, cairo.FONT_SLANT_NORMAL, cairo.FONT_WEIGHT_NORMAL)
        cr.set_font_size(LABEL_FONT_SIZE)

        with saved(cr):
            camera_on_cairo(cr, camera)
            cr.set_line_width(1 / zoom)

            # lines parallel to the y axis
            edge  = c_bl if swap_labels else c_tr
            count = visuals.subdivisions
            for x in grid_lines(floor_to(vx, major), vx + vw, minor):
                color, count = _line_color(x, count, delta, visuals, visuals.y_color)
                cr.set_source_rgba(*color, 1)
                cr.move_to(x, vy)
                cr.line_to(x, vy + vh)
                cr.stroke()
                if visuals.draw_scale:
                    p = intersect(c_tl, edge, (x, vy), (x, vy + vh))
                    if p is not None:
                        draw_label(cr, matrix, camera, p, "x=" + fmt_number(x))

            # lines parallel to the x axis
            edge  = c_tr if swap_labels else c_bl
            count = visuals.subdivisions
            for y in grid_lines(floor_to(vy, major), vy + vh, minor):
                color, count = _line_color(y, count, delta, visuals, visuals.x_color)
                cr.set_source_rgba(*color, 1)
                cr.move_to(vx, y)
                cr.line_to(vx + vw, y)
                cr.stroke()
                if visuals.draw_scale:
                    p = intersect(c_tl, edge, (vx, y), (vx + vw, y))
                    if p is not None:
                        draw_label(cr, matrix, camera, p, "y=" + fmt_number(y))

        draw_origin(cr, camera)


class Grid:
    """
    A camera and grid visuals bundled together.

    Both can be given as objects or as dictionaries (see camera_from_dict
    and visuals_from_dict). The grid keeps references only; it never
    modifies them.
    """

    def __init__(self, camera = None, visuals = None):
        self.__camera  = as_camera(camera)
        self.__visuals = as_visuals(visuals)

    def camera(self, camera = None):
        """Get or set the camera."""
        if camera is not None:
            self.__camera = as_camera(camera)
        return self.__camera

    def visuals(self, visuals = None):
        """Get or set the visuals."""
        if visuals is not None:
            self.__visuals = as_visuals(visuals)
        return self.__visuals

    def to_world(self, x, y):
        """Convert screen to world coordinates."""
        return to_world(self.__camera, x, y)

    def to_screen(self, x, y):
        """Convert world to screen coordinates."""
        return to_screen(self.__camera, x, y)

    def visible(self):
        """World rectangle covered by the viewport."""
        return visible(self.__camera)

    def corners(self):
        """World coordinates of the viewport corners."""
        return corners(self.__camera)

    def minor_interval(self):
        """Distance between the finest grid lines."""
        return minor_interval(self.__camera, self.__visuals)

    def major_interval(self):
        """Distance between the emphasized grid lines."""
        return major_interval(self.__camera, self.__visuals)

    def draw(self, cr, screen = None):
        """Draw the grid on the screen"""
        draw(cr, self.__camera, self.__visuals, screen)

    def __str__(self):
        return f"Grid({self.__camera}, {self.__visuals})"
