"""
    Entry-point discovery for layout and action plugins.

    Design Pattern: Service Locator
    ───────────────────────────────
    Installed distributions advertise plugins under an entry-point group;
    ``PluginLoader[TPlugin]`` scans one group, checks every advertised
    class against the expected ABC and keeps one instance per name.
    Discovery is lazy: nothing is imported until a plugin is asked for.
"""
import importlib.metadata
import logging
from typing import Dict, Generic, Iterable, List, Optional, Type, TypeVar

from .base import ActionPlugin, LayoutPlugin

logger = logging.getLogger(__name__)

TPlugin = TypeVar('TPlugin')

# Groups a plugin distribution registers under in its setup.py
LAYOUT_EP_GROUP = 'graph_api.layouts'
ACTION_EP_GROUP = 'graph_undo_redo.actions'


def _entry_points_in(group: str) -> Iterable[importlib.metadata.EntryPoint]:
    entry_points = importlib.metadata.entry_points()
    if hasattr(entry_points, 'select'):
        return entry_points.select(group=group)
    # 3.8 / 3.9 return a dict keyed by group
    return entry_points.get(group, [])


class PluginLoader(Generic[TPlugin]):
    """
    Lazily discovered plugins of one entry-point group.

    Usage:
        layouts = PluginLoader(LayoutPlugin, LAYOUT_EP_GROUP)
        spring = layouts.get('spring')       # Optional[LayoutPlugin]
        layouts.get_names()                  # ['spring', ...]

    A plugin that fails to import, or whose class is not a subclass of
    ``plugin_base_class``, is logged and left out.
    """

    def __init__(self, plugin_base_class: Type[TPlugin], group: str):
        self._base_class = plugin_base_class
        self._group = group
        self._plugins: Dict[str, TPlugin] = {}
        self._loaded = False

    @property
    def group(self) -> str:
        return self._group

    def load_all(self) -> Dict[str, TPlugin]:
        """Discover the group once and return ``name -> plugin instance``."""
        if self._loaded:
            return self._plugins

        try:
            discovered = list(_entry_points_in(self._group))
        except Exception as exc:
            logger.error("Entry-point discovery for '%s' failed: %s", self._group, exc)
            discovered = []

        for ep in discovered:
            plugin = self._instantiate(ep)
            if plugin is not None:
                self._plugins[ep.name] = plugin

        self._loaded = True
        logger.debug("Group '%s': %d plugin(s) available", self._group, len(self._plugins))
        return self._plugins

    def _instantiate(self, ep) -> Optional[TPlugin]:
        try:
            plugin_cls = ep.load()
        except Exception as exc:
            logger.error("Failed to load plugin '%s': %s", ep.name, exc)
            return None

        if not (isinstance(plugin_cls, type) and issubclass(plugin_cls, self._base_class)):
            logger.warning("Plugin '%s' does not subclass %s, skipped.",
                           ep.name, self._base_class.__name__)
            return None

        logger.info("Loaded plugin: %s (%s)", ep.name, plugin_cls.__name__)
        return plugin_cls()

    def get(self, name: str) -> Optional[TPlugin]:
        return self.load_all().get(name)

    def get_names(self) -> List[str]:
        return sorted(self.load_all())

    def reload(self) -> Dict[str, TPlugin]:
        """Forget everything found so far and scan the group again."""
        self._plugins = {}
        self._loaded = False
        return self.load_all()

    def __len__(self) -> int:
        return len(self.load_all())

    def __contains__(self, name: str) -> bool:
        return name in self.load_all()

    def __repr__(self) -> str:
        return (
            f"PluginLoader(base={self._base_class.__name__}, "
            f"group='{self._group}', loaded={len(self._plugins)})"
        )


def create_layout_loader() -> PluginLoader[LayoutPlugin]:
    return PluginLoader(LayoutPlugin, LAYOUT_EP_GROUP)


def create_action_loader() -> PluginLoader[ActionPlugin]:
    return PluginLoader(ActionPlugin, ACTION_EP_GROUP)
