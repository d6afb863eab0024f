import math
import pytest
from pytest import approx
from unittest import mock
from unittest.mock import MagicMock
import cairo

from editgrid.camera import Camera, WindowedCamera
from editgrid.config import Visuals
from editgrid.grid import grid_interval, minor_interval, major_interval, grid_lines
from editgrid.grid import draw, Grid
from editgrid.trafo import to_world

def _mock_cr():
    cr = MagicMock()
    cr.font_extents.return_value = (8, 2, 10, 20, 0)
    cr.clip_extents.return_value = (0, 0, 800, 600)
    return cr

def _pixel(surface, x, y):
    """Return (b, g, r, a) of an ARGB32 surface pixel."""
    surface.flush()
    data = surface.get_data()
    offset = y * surface.get_stride() + x * 4
    return tuple(data[offset:offset + 4])

@pytest.mark.parametrize("zoom,expected", [
    (1, 256), (4, 64), (16, 16), (64, 4),
    (2, 64), (3.9, 64), (4.1, 16),
    (0.5, 256), (0.25, 1024), (0.2, 1024),
])
def test_minor_interval(zoom, expected):
    """Interval shrinks by the subdivision factor with each LOD level"""
    assert minor_interval(Camera(zoom = zoom), Visuals()) == expected

@pytest.mark.parametrize("zoom", [ 0.01, 0.3, 1, 2.5, 7, 1000, 1e6 ])
@pytest.mark.parametrize("sds", [ 2, 4, 10 ])
def test_lod_band(zoom, sds):
    """On screen, the minor interval stays within one subdivision band"""
    visuals = Visuals(size = 100, subdivisions = sds)
    minor = minor_interval(Camera(zoom = zoom), visuals)
    assert 100 / sds <= minor * zoom * (1 + 1e-9)
    assert minor * zoom <= 100 * (1 + 1e-9)
    assert major_interval(Camera(zoom = zoom), visuals) == approx(sds * minor)

def test_explicit_interval():
    """An explicit interval switches off the level of detail"""
    visuals = Visuals(interval = 37)
    for zoom in [ 0.1, 1, 4, 100 ]:
        assert minor_interval(Camera(zoom = zoom), visuals) == 37
        assert major_interval(Camera(zoom = zoom), visuals) == 4 * 37
    assert grid_interval(visuals, 5) == 37

def test_grid_lines():
    lines = grid_lines(-1024, 400, 256)
    assert list(lines) == [ -1024, -768, -512, -256, 0, 256 ]

    lines = grid_lines(-0.4, 0.35, 0.1)
    assert len(lines) == 8
    assert 0.0 in list(lines)
    assert lines[-1] == approx(0.3)

    assert len(grid_lines(10, 5, 1)) == 0

def test_draw_calls():
    """Line colors, line count and labels for a plain camera"""
    cr = _mock_cr()
    camera  = Camera(viewport = (0, 0, 800, 600))
    visuals = Visuals()

    draw(cr, camera, visuals)

    # minor 256, major 1024: six vertical and six horizontal lines
    # plus the circle around the origin
    assert cr.stroke.call_count == 13
    assert cr.fill.call_count == 1
    assert cr.save.call_count == cr.restore.call_count
    cr.clip.assert_called_once()
    cr.rectangle.assert_any_call(0, 0, 800, 600)
    cr.set_line_width.assert_any_call(1)

    major = (220 / 255, 220 / 255, 220 / 255, 1)
    minor = (110 / 255, 110 / 255, 110 / 255, 1)
    colors = [ c.args for c in cr.set_source_rgba.call_args_list ]

    assert colors[:6] == [ approx(major), approx(minor), approx(minor),
                           approx(minor), (0, 1, 0, 1), approx(minor) ]
    assert colors[6:12] == [ approx(major), approx(minor), approx(minor),
                             approx(minor), (1, 0, 0, 1), approx(minor) ]
    assert colors[-1] == (1, 1, 1, 1)

    labels = [ c.args[0] for c in cr.show_text.call_args_list ]
    assert labels == [ "x=-1024", "x=-768", "x=-512", "x=-256", "x=0", "x=256",
                       "y=-1024", "y=-768", "y=-512", "y=-256", "y=0", "y=256" ]

    # label of x=0 sits at the top edge, offset by 2 pixels and the ascent
    assert mock.call(402, 10) in cr.move_to.call_args_list

    # origin marker in screen space
    cr.rectangle.assert_any_call(399, 299, 2, 2)
    cr.arc.assert_called_once_with(400, 300, 8, 0, 2 * math.pi)

def test_draw_without_labels():
    cr = _mock_cr()
    draw(cr, Camera(viewport = (0, 0, 800, 600)), Visuals(draw_scale = False))
    assert cr.show_text.call_count == 0
    assert cr.stroke.call_count == 13

def test_draw_camera_transform():
    """Line width compensates the zoom"""
    cr = _mock_cr()
    draw(cr, Camera(zoom = 4, angle = 0.5, viewport = (10, 20, 400, 300)), Visuals())
    cr.scale.assert_called_once_with(4, 4)
    cr.rotate.assert_called_once_with(-0.5)
    cr.set_line_width.assert_any_call(0.25)
    cr.rectangle.assert_any_call(10, 20, 400, 300)

def test_draw_restores_state_on_error():
    """A failing backend does not leave the clip or transform behind"""
    cr = _mock_cr()
    cr.stroke.side_effect = RuntimeError("backend failure")

    with pytest.raises(RuntimeError):
        draw(cr, Camera(viewport = (0, 0, 800, 600)), Visuals())

    assert cr.save.call_count == 2
    assert cr.restore.call_count == 2

def test_draw_on_surface():
    """Drawing on a real surface keeps the caller's cairo state"""
    surface = cairo.ImageSurface(cairo.Format.ARGB32, 200, 100)
    cr = cairo.Context(surface)
    cr.set_line_width(3)
    cr.set_source_rgba(0.1, 0.2, 0.3, 0.4)
    matrix = cr.get_matrix()

    # no viewport: the grid uses the whole surface
    draw(cr, Camera(angle = 0.3, zoom = 1.5), Visuals())

    assert cr.get_line_width() == 3
    assert cr.get_matrix() == matrix
    assert cr.get_source().get_rgba() == approx((0.1, 0.2, 0.3, 0.4))
    assert cr.clip_extents() == (0, 0, 200, 100)

    # the origin marker is white and sits in the center
    assert _pixel(surface, 100, 50) == (255, 255, 255, 255)

def test_draw_on_scaled_surface():
    """A context scaled by the host (HiDPI) still gets a centered grid"""
    surface = cairo.ImageSurface(cairo.Format.ARGB32, 200, 100)
    cr = cairo.Context(surface)
    cr.scale(2, 2)

    draw(cr, Camera(angle = 0.3, zoom = 1.5), Visuals())

    assert cr.get_matrix() == cairo.Matrix(2, 0, 0, 2, 0, 0)
    assert cr.clip_extents() == (0, 0, 100, 50)

    # the origin marker is in the center of the surface, not in a corner
    assert _pixel(surface, 100, 50) == (255, 255, 255, 255)

def test_draw_explicit_screen():
    """An explicit screen size wins over a partial clip"""
    cr = _mock_cr()
    cr.clip_extents.return_value = (100, 100, 150, 120)

    draw(cr, Camera(), Visuals(), screen = (640, 480))
    cr.rectangle.assert_any_call(0, 0, 640, 480)
    cr.arc.assert_called_once_with(320, 240, 8, 0, 2 * math.pi)

    cr = _mock_cr()
    cr.clip_extents.return_value = (100, 100, 150, 120)
    Grid().draw(cr, (640, 480))
    cr.arc.assert_called_once_with(320, 240, 8, 0, 2 * math.pi)

    # a camera with its own viewport ignores the screen size
    cr = _mock_cr()
    draw(cr, Camera(viewport = (10, 10, 100, 100)), Visuals(), screen = (640, 480))
    cr.rectangle.assert_any_call(10, 10, 100, 100)

def test_draw_clipped_to_viewport():
    surface = cairo.ImageSurface(cairo.Format.ARGB32, 200, 200)
    cr = cairo.Context(surface)

    draw(cr, Camera(zoom = 8, viewport = (0, 0, 100, 100)), Visuals())

    assert _pixel(surface, 50, 50) == (255, 255, 255, 255)
    for x, y in [ (150, 150), (150, 20), (20, 150), (199, 199) ]:
        assert _pixel(surface, x, y) == (0, 0, 0, 0)

def test_swapped_labels():
    """Near a quarter turn the label edges are swapped"""
    plain   = _mock_cr()
    swapped = _mock_cr()
    draw(plain,   Camera(viewport = (0, 0, 800, 600)), Visuals())
    draw(swapped, Camera(angle = math.pi / 2, viewport = (0, 0, 800, 600)), Visuals())

    assert plain.show_text.call_count > 0
    assert swapped.show_text.call_count > 0

    # rotated by 90 degrees the x labels run along the left screen edge
    x_moves = [ c.args for c in swapped.move_to.call_args_list ]
    label_x = [ x for x, _ in x_moves if x == approx(2) ]
    assert label_x

def test_labels_in_screen_space():
    """Labels are neither scaled nor rotated with the grid"""
    cr = _mock_cr()
    camera = Camera(zoom = 3, angle = 0.7, viewport = (0, 0, 800, 600))
    ascent = cr.font_extents.return_value[0]

    draw(cr, camera, Visuals())

    labels = [ ]
    last_move, last_matrix = None, None
    for name, args, _ in cr.mock_calls:
        if name == "move_to":
            last_move = args
        elif name == "set_matrix":
            last_matrix = args[0]
        elif name == "show_text":
            labels.append((args[0], last_move, last_matrix))

    assert any(text.startswith("x=") for text, _, _ in labels)
    assert any(text.startswith("y=") for text, _, _ in labels)

    for text, (mx, my), matrix in labels:
        # drawn with the matrix the caller had
        assert matrix is cr.get_matrix.return_value
        sx, sy = mx - 2, my - 2 - ascent
        value = float(text[2:])
        wx, wy = to_world(camera, sx, sy)
        if text.startswith("x="):
            # x labels sit on the top edge of the viewport
            assert sy == approx(0, abs = 1e-6)
            assert wx == approx(value, abs = 1e-6)
        else:
            # y labels sit on the left edge
            assert sx == approx(0, abs = 1e-6)
            assert wy == approx(value, abs = 1e-6)

def test_grid_handle():
    camera  = Camera(x = 10, y = 20, zoom = 2)
    visuals = Visuals(size = 100, subdivisions = 10)
    grid = Grid(camera, visuals)

    assert grid.camera() is camera
    assert grid.visuals() is visuals
    assert grid.to_screen(10, 20) == (400, 300)
    assert grid.to_world(400, 300) == (10, 20)
    assert grid.minor_interval() == 10
    assert grid.major_interval() == 100
    assert grid.visible() == (-190, -130, 400, 300)
    assert len(grid.corners()) == 4

    cr = _mock_cr()
    grid.draw(cr)
    assert cr.save.call_count == cr.restore.call_count

    grid.camera({ "zoom": 20 })
    assert grid.minor_interval() == 1

def test_grid_handle_defaults():
    grid = Grid()
    assert grid.minor_interval() == 256
    assert grid.major_interval() == 1024
    assert grid.to_screen(0, 0) == (400, 300)

    grid = Grid({ "scale": 4, "rot": 0.2 }, { "size": 64, "drawScale": False })
    assert grid.camera().zoom == 4
    assert grid.camera().angle == 0.2
    assert grid.visuals().draw_scale is False
    assert grid.minor_interval() == 16

def test_grid_windowed_camera():
    """Cameras that manage their own window are adapted"""

    class ForeignCamera:
        x, y, scale, angle = 5, 6, 2, 0.5

        def getWindow(self):
            return 10, 20, 300, 200

    grid = Grid(ForeignCamera())
    assert isinstance(grid.camera(), WindowedCamera)
    assert grid.to_screen(5, 6) == approx((160, 120))
    assert grid.to_world(*grid.to_screen(3, 4)) == approx((3, 4))

    cr = _mock_cr()
    grid.draw(cr)
    cr.rectangle.assert_any_call(10, 20, 300, 200)
    cr.scale.assert_called_once_with(2, 2)
