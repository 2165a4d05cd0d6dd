# SPDX-License-Identifier: GPL-2.0-or-later
import logging
import os
import pathlib
from logging.handlers import RotatingFileHandler

from qtpy.QtCore import QStandardPaths

import storage

MSG_LEN = 32

# Vial (0xFF60/0x61) raw HID interface
VIA_USAGE_PAGE = 0xFF60
VIA_USAGE = 0x61


def chunks(data, sz):
    for i in range(0, len(data), sz):
        yield data[i:i+sz]


def hexdump(data, limit=8):
    return bytes(data[:limit]).hex()


def init_logger():
    level = getattr(logging, str(storage.get("log/level", "INFO")).upper(), logging.INFO)
    logging.basicConfig(level=level)
    directory = QStandardPaths.writableLocation(QStandardPaths.AppLocalDataLocation)
    pathlib.Path(directory).mkdir(parents=True, exist_ok=True)
    path = os.path.join(directory, "vialkit.log")
    handler = RotatingFileHandler(path, maxBytes=5 * 1024 * 1024, backupCount=5)
    handler.setFormatter(logging.Formatter("%(asctime)s - %(levelname)s - %(module)s:%(lineno)d - %(message)s"))
    logging.getLogger().addHandler(handler)
    return path
