"""
Plugin contracts — abstract base classes for layout and action plugins.
"""
from .base import LayoutPlugin, ActionPlugin

__all__ = ['LayoutPlugin', 'ActionPlugin']
