"""
editgrid - an infinite, zoomable, rotatable reference grid

Usage:
  python -m editgrid [options] [output.[png, svg, pdf]]

Renders the grid for the given camera to an image file, shows it in a
window (--show) or prints the grid geometry (--info).
"""

import sys
import math
import logging
import argparse

import yaml

from editgrid.config import Visuals, load_config, load_default_config
from editgrid.grid   import Grid
from editgrid.export import export_grid, FORMATS

logging.basicConfig(level=logging.INFO,
                    format='%(levelname)s %(filename)s:%(lineno)d %(funcName)s: %(message)s',
                    datefmt='%Y-%m-%d %H:%M:%S')
log = logging.getLogger(__name__)

DEFAULT_OUTPUT = "grid.png"

def parse_arguments(argv = None):
    """Handle command line arguments."""
    parser = argparse.ArgumentParser(
            prog="editgrid",
            description="Draw an infinite reference grid for a 2D camera")

    cam = parser.add_argument_group("camera")
    cam.add_argument("-x", type=float, help="Camera x position (world units)")
    cam.add_argument("-y", type=float, help="Camera y position (world units)")
    cam.add_argument("-z", "--zoom", type=float, help="Zoom (screen pixels per world unit)")
    cam.add_argument("-a", "--angle", type=float, help="Camera rotation in degrees")
    cam.add_argument("--viewport", type=float, nargs=4,
                     metavar=("SX", "SY", "SW", "SH"),
                     help="Viewport on the screen (default: whole screen)")
    cam.add_argument("-W", "--width", type=int, default=800, help="Screen width (default: 800)")
    cam.add_argument("-H", "--height", type=int, default=600, help="Screen height (default: 600)")

    vis = parser.add_argument_group("visuals")
    vis.add_argument("--size", type=float, help="Size of the coarsest grid cell")
    vis.add_argument("--subdivisions", type=int, help="Subdivisions between grid levels")
    vis.add_argument("--interval", type=float, help="Fixed grid interval (disables level of detail)")
    vis.add_argument("--fade", type=float, help="Brightness of the minor lines (0-1)")
    vis.add_argument("--no-labels", action="store_true", help="Do not draw coordinate labels")

    parser.add_argument("--config", help="Read camera and visuals from a YAML file")
    parser.add_argument("-c", "--convert",
                        help="Output format (png, svg, pdf), default: from the file name",
                        choices = FORMATS, metavar = "FORMAT")
    parser.add_argument("-o", "--output", help="Output file")
    parser.add_argument("-s", "--show", help="Show the grid in a window", action="store_true")
    parser.add_argument("-i", "--info", help="Print intervals and visible area", action="store_true")
    parser.add_argument("-d", "--debug", help="Debug mode", action="store_true")
    parser.add_argument("files", nargs="*")
    return parser.parse_args(argv)

def make_camera(args, camera):
    """Apply the command line camera options."""
    changes = { "screen": (args.width, args.height) }
    if args.x is not None:
        changes["x"] = args.x
    if args.y is not None:
        changes["y"] = args.y
    if args.zoom is not None:
        if args.zoom <= 0:
            raise ValueError("zoom must be positive")
        changes["zoom"] = args.zoom
    if args.angle is not None:
        changes["angle"] = math.radians(args.angle)
    if args.viewport is not None:
        changes["viewport"] = tuple(args.viewport)
    return camera.replace(**changes)

def make_visuals(args, visuals):
    """Apply the command line visual options."""
    opts = visuals.to_dict()
    if args.size is not None:
        opts["size"] = args.size
    if args.subdivisions is not None:
        if args.subdivisions < 2:
            raise ValueError("subdivisions must be at least 2")
        opts["subdivisions"] = args.subdivisions
    if args.interval is not None:
        opts["interval"] = args.interval
    if args.fade is not None:
        opts["fade_factor"] = args.fade
    if args.no_labels:
        opts["draw_scale"] = False
    return Visuals(**opts)

def print_info(grid):
    """Print the grid geometry."""
    left, top, width, height = grid.visible()
    print(f"minor interval: {grid.minor_interval():g}")
    print(f"major interval: {grid.major_interval():g}")
    print(f"visible: left={left:g} top={top:g} width={width:g} height={height:g}")
    for name, (x, y) in zip(["top left", "top right", "bottom right", "bottom left"],
                            grid.corners()):
        print(f"{name}: {x:g} {y:g}")
    ox, oy = grid.to_screen(0, 0)
    print(f"origin on screen: {ox:g} {oy:g}")

def output_file(args):
    """Figure out the output file name and format."""
    if len(args.files) > 1:
        raise ValueError("Too many files provided")
    output = args.output or (args.files[0] if args.files else None)
    file_format = args.convert or "any"
    if output is None:
        if file_format == "any":
            output = DEFAULT_OUTPUT
        else:
            output = "grid." + file_format
    return output, file_format

def main(argv = None):
    """Main function for the application."""

    args = parse_arguments(argv)
    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)
        log.info("Setting logging level to DEBUG")

    screen = (args.width, args.height)

    try:
        if args.config:
            camera, visuals = load_config(args.config, screen = screen)
        else:
            camera, visuals = load_default_config(screen = screen)
        camera  = make_camera(args, camera)
        visuals = make_visuals(args, visuals)
    except (OSError, yaml.YAMLError, ValueError) as e:
        log.error("Invalid configuration: %s", e)
        sys.exit(1)

    log.debug("camera: %s", camera)
    log.debug("visuals: %s", visuals)

    if args.info:
        print_info(Grid(camera, visuals))
        return

    if args.show:
        # GTK is only needed for the window
        from editgrid.viewer import show # pylint: disable=import-outside-toplevel
        show(camera, visuals, size = screen)
        return

    try:
        output, file_format = output_file(args)
        export_grid(camera, visuals, output, file_format, size = screen)
    except (OSError, ValueError) as e:
        log.error("Export failed: %s", e)
        sys.exit(1)
    log.info("Grid written to %s", output)

if __name__ == "__main__":
    main()
