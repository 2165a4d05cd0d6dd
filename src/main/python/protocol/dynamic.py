# SPDX-License-Identifier: GPL-2.0-or-later
"""
Vial dynamic entries: tap dances, combos and key overrides.

Every entry is fetched with its own DYNAMIC_ENTRY_OP round trip:

    request:  [0xFE] [0x0E] [subcmd] [index]
    response: [status] [entry data...]

Entry formats (little-endian):
    tap dance (10 bytes):    on_tap, on_hold, on_double_tap, on_tap_hold, tapping_term (uint16)
    combo (10 bytes):        4 trigger keycodes, output keycode (uint16)
    key override (10 bytes): trigger, replacement, layers (uint16),
                             trigger_mods, negative_mod_mask, suppressed_mods, options (uint8)
"""
import logging
import struct

from protocol.constants import (
    CMD_VIAL_DYNAMIC_ENTRY_OP, DYNAMIC_VIAL_GET_NUMBER_OF_ENTRIES,
    DYNAMIC_VIAL_TAP_DANCE_GET, DYNAMIC_VIAL_TAP_DANCE_SET,
    DYNAMIC_VIAL_COMBO_GET, DYNAMIC_VIAL_COMBO_SET,
    DYNAMIC_VIAL_KEY_OVERRIDE_GET, DYNAMIC_VIAL_KEY_OVERRIDE_SET,
)
from protocol.decoder import DecodeSpec
from protocol.dispatcher import ProtocolError


class TapDanceEntry:

    fmt = "<HHHHH"

    def __init__(self, args=None):
        if args is None:
            args = [0] * 5
        self.on_tap, self.on_hold, self.on_double_tap, self.on_tap_hold, self.tapping_term = args

    def serialize(self):
        return struct.pack(self.fmt, self.on_tap, self.on_hold, self.on_double_tap,
                           self.on_tap_hold, self.tapping_term)

    def __eq__(self, other):
        return isinstance(other, TapDanceEntry) and self.serialize() == other.serialize()

    def __repr__(self):
        return "TapDanceEntry<{}>".format(self.serialize().hex())


class ComboEntry:

    fmt = "<HHHHH"

    def __init__(self, args=None):
        if args is None:
            args = [0] * 5
        self.keys = list(args[:4])
        self.output = args[4]

    def serialize(self):
        return struct.pack(self.fmt, *self.keys, self.output)

    def __eq__(self, other):
        return isinstance(other, ComboEntry) and self.serialize() == other.serialize()

    def __repr__(self):
        return "ComboEntry<{}>".format(self.serialize().hex())


class KeyOverrideEntry:

    fmt = "<HHHBBBB"

    def __init__(self, args=None):
        if args is None:
            args = [0] * 7
        self.trigger, self.replacement, self.layers, self.trigger_mods, \
            self.negative_mod_mask, self.suppressed_mods, self.options = args

    @property
    def enabled(self):
        return bool(self.options & (1 << 7))

    def serialize(self):
        return struct.pack(self.fmt, self.trigger, self.replacement, self.layers, self.trigger_mods,
                           self.negative_mod_mask, self.suppressed_mods, self.options)

    def __eq__(self, other):
        return isinstance(other, KeyOverrideEntry) and self.serialize() == other.serialize()

    def __repr__(self):
        return "KeyOverrideEntry<{}>".format(self.serialize().hex())


# subcmd to read an entry, subcmd to write it, entry class
DYNAMIC_KINDS = {
    "tap_dance": (DYNAMIC_VIAL_TAP_DANCE_GET, DYNAMIC_VIAL_TAP_DANCE_SET, TapDanceEntry),
    "combo": (DYNAMIC_VIAL_COMBO_GET, DYNAMIC_VIAL_COMBO_SET, ComboEntry),
    "key_override": (DYNAMIC_VIAL_KEY_OVERRIDE_GET, DYNAMIC_VIAL_KEY_OVERRIDE_SET, KeyOverrideEntry),
}


class DynamicEntryFetcher:

    def __init__(self, dispatcher):
        self.dispatcher = dispatcher

    def fetch_all(self, subcmd, count, decode=None):
        """ Fetches entries 0..count-1 one request at a time, in order """

        out = []
        for idx in range(count):
            out.append(self.dispatcher.send_vial(CMD_VIAL_DYNAMIC_ENTRY_OP, bytes([subcmd, idx]), decode))
        return out

    def entry_counts(self):
        """ Returns (tap_dance_count, combo_count, key_override_count) """

        return self.dispatcher.send_vial(CMD_VIAL_DYNAMIC_ENTRY_OP, bytes([DYNAMIC_VIAL_GET_NUMBER_OF_ENTRIES]),
                                         DecodeSpec.unpack("<BBB"))

    def fetch_entries(self, kind, count):
        get_cmd, _, entry_cls = DYNAMIC_KINDS[kind]
        entries = []
        for idx, data in enumerate(self.fetch_all(get_cmd, count, DecodeSpec.unpack("<B" + entry_cls.fmt[1:]))):
            status, fields = data[0], data[1:]
            if status != 0:
                raise ProtocolError("{} {} retrieval failed with status {}".format(kind, idx, status))
            entries.append(entry_cls(fields))
        logging.debug("fetched %d %s entries", len(entries), kind)
        return entries

    def set_entry(self, kind, idx, entry):
        _, set_cmd, _ = DYNAMIC_KINDS[kind]
        self.dispatcher.send_vial(CMD_VIAL_DYNAMIC_ENTRY_OP, bytes([set_cmd, idx]) + entry.serialize())
