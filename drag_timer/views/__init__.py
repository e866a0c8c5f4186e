"""Views package for Drag Timer.

This package contains the Qt widgets: tray icon, drag handle, preview panel
and preferences dialog.
"""
