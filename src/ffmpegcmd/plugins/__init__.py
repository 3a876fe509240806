"""ffmpegcmd plugin manager

Plugins implement the hooks declared in :py:mod:`ffmpegcmd.plugins.hookspecs`.
Builtin plugins are registered by :py:func:`initialize`, which also loads the
third-party plugins advertised under the ``ffmpegcmd`` entry-point group.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

from typing import Any

from importlib import import_module
import pluggy

from . import hookspecs

__all__ = ["initialize", "get_hook", "register", "unregister", "list_plugins"]

BUILTIN_PLUGINS = ("finder_envvar", "finder_syspath")

pm = pluggy.PluginManager("ffmpegcmd")
pm.add_hookspecs(hookspecs)


def _register_builtin(module_name: str) -> str | None:
    try:
        module = import_module(f".{module_name}", __name__)
    except ModuleNotFoundError:
        logger.info("skipped builtin plugin %s: missing dependency", module_name)
        return None

    if pm.is_registered(module):
        return pm.get_name(module)

    name = pm.register(module)
    logger.info("registered builtin plugin %s", name)
    return name


def register(plugin: object, name: str | None = None) -> str | None:
    """add a plugin (e.g., a module with ``finder()`` hook implementation)

    :param plugin: plugin object
    :param name: plugin name, defaults to None to use its canonical name
    :returns: the plugin name or None if the name is blocked

    Raises ValueError if the plugin is already registered.
    """
    return pm.register(plugin, name)


def unregister(name: str) -> Any | None:
    """remove a plugin

    :param name: plugin name
    :returns: the removed plugin or None if not registered
    """
    return pm.unregister(name=name)


def list_plugins() -> list[str]:
    """names of the registered plugins"""
    return [pm.get_name(p) for p in pm.get_plugins()]


def initialize():
    """register the builtin plugins and the installed third-party plugins"""

    for name in BUILTIN_PLUGINS:
        _register_builtin(name)

    pm.load_setuptools_entrypoints("ffmpegcmd")


def get_hook():
    return pm.hook
