"""
General utility functions for the editgrid package.
"""
import math
import logging
from contextlib import contextmanager
import cairo
log = logging.getLogger(__name__)

def floor_to(x, step):
    """Round x down to a multiple of step."""
    return math.floor(x / step) * step

def mod(x, step):
    """Floored modulo, the result has the sign of step."""
    return x - floor_to(x, step)

def fmt_number(x):
    """Format a coordinate for a label, dropping a trailing .0"""
    return f"{x:.14g}"

def as_number(name, value):
    """Convert a config value to float, ValueError if it is not a number."""
    try:
        return float(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"{name} must be a number, not {value!r}") from e

def cairo_color(color, factor = 1.0):
    """Convert a 0-255 RGB triple to 0-1 components, scaled by factor."""
    return tuple(c * factor / 255 for c in color[:3])

def intersect(p1, p2, p3, p4):
    """
    Calculate the intersection of two infinite lines.

    The first line goes through p1 and p2, the second through p3 and p4.
    Unlike a segment intersection, the point does not need to lie between
    the endpoints.

    Returns:
    - (x, y) of the intersection point
    - None if the lines are parallel (the determinant is exactly zero)
    """

    x1, y1 = p1
    x2, y2 = p2
    x3, y3 = p3
    x4, y4 = p4

    x21, x43 = x2 - x1, x4 - x3
    y21, y43 = y2 - y1, y4 - y3

    denom = x21 * y43 - y21 * x43
    if denom == 0:
        return None

    xy34 = x3 * y4 - y3 * x4
    xy12 = x1 * y2 - y1 * x2

    return ((xy34 * x21 - xy12 * x43) / denom,
            (xy34 * y21 - xy12 * y43) / denom)

@contextmanager
def saved(cr):
    """
    Save the cairo state and restore it when the block is left.

    Clip, transformation matrix, source color and line width all belong
    to the saved state, so everything set inside the block is undone,
    also when drawing raises.
    """
    cr.save()
    try:
        yield cr
    finally:
        cr.restore()

def surface_size(cr):
    """
    Return the size of the surface the context draws on.

    The size is measured in the user space of the caller, so a context
    scaled by 2 on a 200x100 surface reports 100x50.
    """

    target = cr.get_target()

    if isinstance(target, cairo.ImageSurface):
        w, h = cr.device_to_user_distance(target.get_width(), target.get_height())
        return (abs(w), abs(h))

    # vector and window surfaces: use the clip extents
    x0, y0, x1, y1 = cr.clip_extents()

    log.debug("surface size from clip extents: %s %s", x1 - x0, y1 - y0)
    return (x1 - x0, y1 - y0)
