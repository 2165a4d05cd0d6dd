# SPDX-License-Identifier: GPL-2.0-or-later
"""Pytest configuration - runs before any tests."""

import atexit
import os
import shutil
import sys
import tempfile
from types import ModuleType


class MockHidDevice:
    """HID device that never answers."""

    def open_path(self, path):
        self.path = path

    def close(self):
        pass

    def write(self, data):
        return len(data)

    def read(self, size, timeout_ms=0):
        return []


class MockHidModule(ModuleType):
    """Stands in for hidapi so no test can reach a real keyboard.

    This is a real module object so that tests can set the devices
    `enumerate` reports and the class `device` opens.
    """

    def __init__(self, name='hid'):
        super().__init__(name)
        self.devices = []
        self.device_class = MockHidDevice

    def enumerate(self, vendor_id=0, product_id=0):
        return list(self.devices)

    def device(self):
        return self.device_class()


# hidproxy imports hidraw on Linux and hid elsewhere; both names map to the
# same mock so a test configuring one configures whichever hidproxy picked
mock_hid = MockHidModule('hid')

for module_name in ('hid', 'hidraw'):
    if module_name not in sys.modules:
        sys.modules[module_name] = mock_hid


# keep tests away from the user's real settings
_settings_dir = tempfile.mkdtemp(prefix="vialkit-test-")
atexit.register(shutil.rmtree, _settings_dir, True)


def _isolate_settings():
    from qtpy.QtCore import QSettings
    import storage

    storage._settings = QSettings(os.path.join(_settings_dir, "settings.ini"), QSettings.IniFormat)


def _patch_hidproxy():
    if 'hidproxy' in sys.modules:
        import hidproxy
        hidproxy.hid = mock_hid


_isolate_settings()
_patch_hidproxy()


def pytest_configure(config):
    _patch_hidproxy()


def pytest_sessionstart(session):
    _patch_hidproxy()
