"""Framework bootstrap for mnemoflow.

Registers every service plugin with scitrera-app-framework and drives their lifecycle.
Services resolve lazily through ``get_extension()``; storage connects in the async-ready phase.
"""
import logging
from logging import Logger
from typing import Callable

from scitrera_app_framework import (
    Variables, get_variables, get_logger, init_framework_desktop,
    async_plugins_ready, async_plugins_stopping
)
from .config import MNEMOFLOW_DATA_DIR

# third-party loggers that are noisy at INFO
_QUIET_LOGGERS = ('aiosqlite', 'httpx', 'httpcore.connection', 'httpcore.http11', 'openai._base_client')

# process-wide, applied to each Variables instance once
_preconfigure_hooks: list[Callable[[Variables], None]] = []


def add_preconfigure_hook(hook: Callable[[Variables], None]) -> None:
    """Register a hook that runs once per Variables instance, before plugin initialization.

    Hooks may register extra plugins, e.g. a custom storage backend.
    """
    _preconfigure_hooks.append(hook)


def _run_preconfigure_hooks(v: Variables, logger: Logger) -> None:
    installed = v.get('__preconfigure_hooks_installed__', default=0)
    if installed == len(_preconfigure_hooks):
        return
    for hook in _preconfigure_hooks[installed:]:
        hook(v)
    v.set('__preconfigure_hooks_installed__', len(_preconfigure_hooks))
    logger.debug('Ran %d preconfigure hook(s)', len(_preconfigure_hooks) - installed)


# noinspection PyTypeHints
def preconfigure(v: Variables = None, test_mode: bool = False, test_logger: Logger = None) -> (Variables, dict):
    """Initialize the framework and register service plugins. Safe to call repeatedly."""
    from scitrera_app_framework import register_package_plugins
    from . import services  # noqa: F401

    framework_kwargs = {}
    if test_mode:
        framework_kwargs.update(fault_handler=False, fixed_logger=test_logger, pyroscope=False, shutdown_hooks=False)

    v: Variables = init_framework_desktop(
        'mnemoflow',
        base_plugins=False,
        stateful_chdir=True,  # relative sqlite paths resolve inside the data dir
        stateful_root_env_key=MNEMOFLOW_DATA_DIR,
        async_auto_enabled=False,  # storage connect/disconnect run through initialize/shutdown below
        v=v,
        **framework_kwargs
    )

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    if v.get('__preconfigure_complete__', default=False):
        return v, services

    logger = get_logger(v)
    logger.debug('Registering mnemoflow services')
    register_package_plugins(services.__package__, v, recursive=True)

    _run_preconfigure_hooks(v, logger)

    v.set('__preconfigure_complete__', True)
    return v, services


async def initialize_services(v: Variables = None) -> Variables:
    """Initialize all services; storage backends connect here."""
    v, _ = preconfigure(v)
    get_logger(v).debug("Initializing services")

    from scitrera_app_framework.core.plugins import init_all_plugins
    init_all_plugins(v, async_enabled=False)
    await async_plugins_ready(v)
    return v


async def shutdown_services(v: Variables = None) -> None:
    """Disconnect storage and shut down every plugin."""
    v = get_variables(v)
    get_logger(v).debug("Shutting down services")

    await async_plugins_stopping(v)

    from scitrera_app_framework.core.plugins import shutdown_all_plugins
    shutdown_all_plugins(v)
