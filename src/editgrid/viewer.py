"""Preview window showing the grid for a fixed camera."""
import logging
import gi
gi.require_version('Gtk', '3.0') # pylint: disable=wrong-import-position
from gi.repository import Gtk
from .grid import Grid
log = logging.getLogger(__name__)

class GridWindow(Gtk.Window):
    """
    Window with a drawing area that shows the grid.

    The camera has no viewport of its own unless the caller gave one, so
    the grid follows the window size.
    """

    def __init__(self, camera = None, visuals = None, size = (800, 600),
                 bg = (0, 0, 0)):
        super().__init__()

        self.set_title("editgrid")
        self.set_default_size(*size)
        self.connect("destroy", self.exit)

        self.__grid = Grid(camera, visuals)
        self.__bg   = bg

        self.area = Gtk.DrawingArea()
        self.area.connect("draw", self.on_draw)
        self.add(self.area)

    def grid(self):
        """Return the grid shown in the window."""
        return self.__grid

    def on_draw(self, _, cr):
        """Paint the background and the grid."""
        cr.set_source_rgb(*self.__bg)
        cr.paint()
        # cr may only cover the damaged part of the window
        screen = (self.area.get_allocated_width(), self.area.get_allocated_height())
        self.__grid.draw(cr, screen)
        return False

    def exit(self, event = None): # pylint: disable=unused-argument
        """Close the window and leave the main loop."""
        log.info("Exiting")
        Gtk.main_quit()

def show(camera = None, visuals = None, size = (800, 600)):
    """Open the preview window and run the GTK main loop."""
    win = GridWindow(camera, visuals, size = size)
    win.show_all()
    win.present()
    Gtk.main()
