"""Drag Timer - countdown timers started by dragging.

This package turns a drag gesture into a timer duration and keeps track of
the resulting timers across restarts, using the MVP (Model-View-Presenter)
architecture pattern. The Qt entry point lives in ``drag_timer.main``.
"""

__version__ = "0.1.0"
__author__ = "Drag Timer Team"
__description__ = "Menu bar countdown timers started by dragging"
