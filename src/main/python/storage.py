# SPDX-License-Identifier: GPL-2.0-or-later
"""Settings persistence backed by QSettings."""
from qtpy.QtCore import QSettings

DEFAULTS = {
    "transport/timeout_ms": 1000,
    "transport/retries": 1,
    "log/level": "INFO",
}

_settings = QSettings("VialKit", "VialKit")


def get(key, default=None):
    if default is None:
        default = DEFAULTS.get(key)
    return _settings.value(key, default)


def get_int(key, default=None):
    value = get(key, default)
    try:
        return int(value)
    except (TypeError, ValueError):
        fallback = DEFAULTS.get(key) if default is None else default
        return int(fallback)


def set(key, value):
    _settings.setValue(key, value)


def reset(key):
    _settings.remove(key)
