# SPDX-License-Identifier: GPL-2.0-or-later
import argparse
import json
import logging
import sys

from qtpy.QtCore import QCoreApplication

from util import VIA_USAGE_PAGE, VIA_USAGE, init_logger


def parse_args(argv=None):
    p = argparse.ArgumentParser(description="Read the keymap of a Vial keyboard")
    p.add_argument("--vid", type=lambda x: int(x, 0), required=True, help="USB vendor id, e.g. 0xFEED")
    p.add_argument("--pid", type=lambda x: int(x, 0), required=True, help="USB product id, e.g. 0x0000")
    p.add_argument("--serial", help="only consider devices whose serial number contains this")
    p.add_argument("--timeout", type=int, help="response timeout in milliseconds")
    p.add_argument("--dump", action="store_true", help="also print macros and dynamic entries")
    p.add_argument("--debug", action="store_true", help="log every report sent and received")
    return p.parse_args(argv)


def build_filters(args):
    filt = {"vendor_id": args.vid, "product_id": args.pid, "usage_page": VIA_USAGE_PAGE, "usage": VIA_USAGE}
    if args.serial:
        filt["serial_number"] = args.serial
    return [filt]


def dump_keyboard(keyboard, full=False):
    out = {
        "name": keyboard.definition.get("name") if keyboard.definition else None,
        "via_protocol": keyboard.via_protocol,
        "vial_protocol": keyboard.vial_protocol,
        "uid": keyboard.keyboard_id,
        "rows": keyboard.rows,
        "cols": keyboard.cols,
        "layout": keyboard.keymap_strings(),
    }
    if full:
        stringify = keyboard.codec.stringify
        out["layout_options"] = keyboard.layout_options
        out["macro"] = keyboard.macro.hex()
        out["tap_dance"] = [[stringify(e.on_tap), stringify(e.on_hold), stringify(e.on_double_tap),
                             stringify(e.on_tap_hold), e.tapping_term] for e in keyboard.tap_dance_entries]
        out["combo"] = [[stringify(k) for k in e.keys] + [stringify(e.output)] for e in keyboard.combo_entries]
        out["key_override"] = [{"trigger": stringify(e.trigger), "replacement": stringify(e.replacement),
                                "layers": e.layers, "enabled": e.enabled} for e in keyboard.key_override_entries]
    return out


def main(argv=None):
    args = parse_args(argv)

    # QSettings and QStandardPaths need the application identity
    QCoreApplication.setOrganizationName("VialKit")
    QCoreApplication.setApplicationName("VialKit")
    init_logger()
    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    from protocol.dispatcher import ProtocolError
    from protocol.keyboard_comm import Keyboard
    from protocol.transport import TransportChannel, TransportError

    channel = TransportChannel(timeout_ms=args.timeout)
    try:
        channel.open(build_filters(args))
        keyboard = Keyboard(channel)
        keyboard.reload()
        print(json.dumps(dump_keyboard(keyboard, args.dump), indent=2))
    except (TransportError, ProtocolError) as e:
        logging.error("%s: %s", type(e).__name__, e)
        return 1
    finally:
        channel.close()
    return 0


if __name__ == '__main__':
    sys.exit(main())
