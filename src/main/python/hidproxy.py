# SPDX-License-Identifier: GPL-2.0-or-later
import sys

if sys.platform == "linux":
    # On Linux, prefer hidraw for proper usage_page/serial_number support
    try:
        import hidraw as hid
    except ImportError:
        import hid
else:
    # Use hidapi on macOS and Windows
    try:
        import hid
    except ImportError:
        import hidraw as hid

# Enable non-exclusive mode on macOS so other tools can keep the keyboard open
if sys.platform == "darwin" and hasattr(hid, "darwin_set_open_exclusive"):
    hid.darwin_set_open_exclusive(0)


def device_matches(desc, filt):
    """ Every key of filt must match desc; serial_number matches as a substring """

    for key, expected in filt.items():
        if key == "serial_number":
            if expected not in (desc.get("serial_number") or ""):
                return False
        elif desc.get(key) != expected:
            return False
    return True


def find_devices(filters):
    """ Enumerates HID interfaces matching any of the filters, one entry per path """

    found = []
    seen_paths = set()
    for desc in hid.enumerate():
        if desc["path"] in seen_paths:
            continue
        if any(device_matches(desc, filt) for filt in filters):
            seen_paths.add(desc["path"])
            found.append(desc)
    return found
