"""Presenters package for Drag Timer.

This package contains the presenter that coordinates between models and
views following the MVP (Model-View-Presenter) architecture pattern.
"""
