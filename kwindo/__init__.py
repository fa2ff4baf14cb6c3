"""kwindo - xdotool-style window control for KDE Plasma.

Compiles a sequence of window commands into one KWin script, runs it
over D-Bus and prints what the script reported:

- search / getactivewindow fill a window stack
- actions apply to stack entries (%N, %@) or to a window id
- output is read back from the journal by a per-run marker
"""

__version__ = "0.2.0"
__license__ = "MIT"

__all__ = ["__version__", "__license__"]
