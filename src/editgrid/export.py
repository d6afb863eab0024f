"""
This module renders the grid to image files (png, svg, pdf).
"""

import logging
from os import path
import cairo
from .grid import draw
log = logging.getLogger(__name__)

FORMATS = [ "png", "svg", "pdf" ]

def guess_file_format(filename):
    """Guess the file format from the file extension."""

    _, file_format = path.splitext(filename)
    file_format = file_format[1:].lower()

    if file_format not in FORMATS:
        raise ValueError(f"Unrecognized file extension: {filename}")

    return file_format

def __create_surface(output_file, file_format, width, height):
    """Create a cairo surface for the given format."""

    if file_format == "png":
        return cairo.ImageSurface(cairo.Format.ARGB32, width, height)
    if file_format == "svg":
        return cairo.SVGSurface(output_file, width, height)
    if file_format == "pdf":
        return cairo.PDFSurface(output_file, width, height)
    raise NotImplementedError("Export to " + file_format + " is not implemented")

def export_grid(camera, visuals, output_file, file_format = "any",
                size = (800, 600), bg = (0, 0, 0)):
    """
    Draw the grid on an offscreen surface and save it to a file.

    :param camera: The camera (see camera.Camera).
    :param visuals: The grid visuals (see config.Visuals).
    :param output_file: The name of the file to save to.
    :param file_format: png, svg or pdf. If "any", the format is guessed
    from the file extension.
    :param size: Width and height of the image in pixels (points for pdf).
    :param bg: Background color, RGB with components between 0 and 1.
    """
    if file_format == "any":
        file_format = guess_file_format(output_file)

    if file_format not in FORMATS:
        raise ValueError(f"Unsupported format: {file_format}")

    width, height = int(size[0]), int(size[1])
    log.debug("Exporting grid to %s as %s (%d x %d)",
              output_file, file_format, width, height)

    surface = __create_surface(output_file, file_format, width, height)
    cr = cairo.Context(surface)

    cr.set_source_rgb(*bg)
    cr.paint()

    draw(cr, camera, visuals)

    if file_format == "png":
        surface.write_to_png(output_file)

    surface.finish()
    log.debug("Saved grid to %s", output_file)
