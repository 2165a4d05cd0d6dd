# SPDX-License-Identifier: GPL-2.0-or-later
import json
import logging
import lzma
import struct

from keycodes.keycodes import KeycodeCodec, generate_all_keycodes
from keycodes.keymap import stringify_keymap
from protocol.buffer import BufferTransfer
from protocol.constants import CMD_VIA_GET_PROTOCOL_VERSION, CMD_VIA_GET_KEYBOARD_VALUE, CMD_VIA_SET_KEYBOARD_VALUE, \
    CMD_VIA_GET_KEYCODE, CMD_VIA_SET_KEYCODE, CMD_VIA_LIGHTING_SET_VALUE, CMD_VIA_LIGHTING_GET_VALUE, \
    CMD_VIA_LIGHTING_SAVE, CMD_VIA_MACRO_GET_COUNT, CMD_VIA_MACRO_GET_BUFFER_SIZE, CMD_VIA_MACRO_GET_BUFFER, \
    CMD_VIA_MACRO_SET_BUFFER, CMD_VIA_GET_LAYER_COUNT, CMD_VIA_KEYMAP_GET_BUFFER, VIA_LAYOUT_OPTIONS, \
    VIA_BUFFER_HEADER_SIZE, CMD_VIAL_GET_KEYBOARD_ID, CMD_VIAL_GET_SIZE, CMD_VIAL_GET_DEFINITION, \
    CMD_VIAL_GET_ENCODER, CMD_VIAL_SET_ENCODER, CMD_VIAL_GET_UNLOCK_STATUS, CMD_VIAL_UNLOCK_START, \
    CMD_VIAL_UNLOCK_POLL, CMD_VIAL_LOCK
from protocol.decoder import DecodeSpec
from protocol.dispatcher import CommandDispatcher, ProtocolError
from protocol.dynamic import DynamicEntryFetcher

# dynamic entries were added in vial protocol 4
VIAL_PROTOCOL_DYNAMIC = 4

# unlock status carries up to 15 row, col pairs after the two status bytes
UNLOCK_KEYS_MAX = 15

__all__ = ["Keyboard", "ProtocolError"]


class Keyboard:
    """ Low-level communication with a vial-enabled keyboard """

    def __init__(self, dev):
        self.dispatcher = CommandDispatcher(dev)
        self.buffers = BufferTransfer(self.dispatcher)
        self.dynamic = DynamicEntryFetcher(self.dispatcher)
        self.codec = KeycodeCodec()

        self.definition = None
        self.rows = self.cols = self.layers = 0
        self.custom_keycodes = None
        self.layout_labels = None
        self.layout_options = -1

        # (layer, row, col) -> keycode
        self.layout = dict()
        # (layer, index) -> (cw keycode, ccw keycode)
        self.encoder_layout = dict()

        self.macro_count = self.macro_memory = 0
        self.macro = b""

        self.tap_dance_count = self.combo_count = self.key_override_count = 0
        self.tap_dance_entries = []
        self.combo_entries = []
        self.key_override_entries = []

        self.via_protocol = self.vial_protocol = self.keyboard_id = -1

    @property
    def channel(self):
        return self.dispatcher.channel

    def reload(self):
        """ Load everything the keyboard knows: definition, keymap, macros, dynamic entries """

        self.reload_via_protocol()
        self.reload_vial_id()
        self.reload_definition()
        self.reload_layers()
        self.reload_macro_info()

        # custom keycodes come from the definition, so the codec is built after it
        self.codec = generate_all_keycodes(self)

        self.reload_keymap()
        self.reload_layout_options()
        self.reload_macros()
        self.reload_dynamic()

    def reload_via_protocol(self):
        self.via_protocol = self.dispatcher.send(CMD_VIA_GET_PROTOCOL_VERSION, decode=DecodeSpec.uint16(1, True))
        logging.debug("VIA protocol %d", self.via_protocol)

    def reload_vial_id(self):
        self.vial_protocol, self.keyboard_id = self.dispatcher.send_vial(CMD_VIAL_GET_KEYBOARD_ID,
                                                                         decode=DecodeSpec.unpack("<IQ"))
        logging.debug("Vial protocol %d, keyboard id 0x%016X", self.vial_protocol, self.keyboard_id)

    def reload_definition(self):
        """ Fetches and decompresses the keyboard definition (lzma-compressed JSON) """

        sz = self.dispatcher.send_vial(CMD_VIAL_GET_SIZE, decode=DecodeSpec.unpack("<I"))[0]

        payload = b""
        block = 0
        msg_len = self.dispatcher.msg_len
        while len(payload) < sz:
            data = self.dispatcher.send_vial(CMD_VIAL_GET_DEFINITION, struct.pack("<I", block))
            payload += data[:min(msg_len, sz - len(payload))]
            block += 1

        try:
            definition = json.loads(lzma.decompress(payload))
        except (lzma.LZMAError, ValueError) as e:
            raise ProtocolError("cannot decode keyboard definition: {}".format(e))
        self.load_definition(definition)

    def load_definition(self, definition):
        try:
            self.rows = definition["matrix"]["rows"]
            self.cols = definition["matrix"]["cols"]
        except (KeyError, TypeError):
            raise ProtocolError("keyboard definition has no matrix size")
        self.definition = definition
        self.custom_keycodes = definition.get("customKeycodes", None)
        self.layout_labels = definition.get("layouts", {}).get("labels")
        logging.info("Keyboard %s: %d rows, %d cols", definition.get("name", "?"), self.rows, self.cols)

    def reload_layers(self):
        """ Get how many layers the keyboard has """

        self.layers = self.dispatcher.send(CMD_VIA_GET_LAYER_COUNT, decode=DecodeSpec.byte(1))

    def reload_macro_info(self):
        self.macro_count = self.dispatcher.send(CMD_VIA_MACRO_GET_COUNT, decode=DecodeSpec.byte(1))
        self.macro_memory = self.dispatcher.send(CMD_VIA_MACRO_GET_BUFFER_SIZE, decode=DecodeSpec.uint16(1, True))

    def reload_keymap(self):
        """ Load current key mapping from the keyboard """

        size = self.layers * self.rows * self.cols * 2
        keymap = self.buffers.read(CMD_VIA_KEYMAP_GET_BUFFER, size, slice_offset=VIA_BUFFER_HEADER_SIZE,
                                   byteorder="big", size_prefix=True)

        self.layout = dict()
        for layer in range(self.layers):
            for row in range(self.rows):
                for col in range(self.cols):
                    # determine where this (layer, row, col) will be located in keymap array
                    offset = layer * self.rows * self.cols * 2 + row * self.cols * 2 + col * 2
                    self.layout[(layer, row, col)] = struct.unpack(">H", keymap[offset:offset + 2])[0]

    def reload_layout_options(self):
        if self.layout_labels:
            self.layout_options = self.dispatcher.send(CMD_VIA_GET_KEYBOARD_VALUE, bytes([VIA_LAYOUT_OPTIONS]),
                                                       DecodeSpec.uint32(2, True))

    def reload_macros(self):
        self.macro = b""
        if self.macro_count == 0 or self.macro_memory == 0:
            return

        def all_macros_read(buffer):
            return buffer.count(0) >= self.macro_count

        self.macro = self.buffers.read(CMD_VIA_MACRO_GET_BUFFER, self.macro_memory,
                                       slice_offset=VIA_BUFFER_HEADER_SIZE, early_stop=all_macros_read,
                                       byteorder="big", size_prefix=True)

    def reload_dynamic(self):
        if self.vial_protocol < VIAL_PROTOCOL_DYNAMIC:
            self.tap_dance_count = self.combo_count = self.key_override_count = 0
            self.tap_dance_entries, self.combo_entries, self.key_override_entries = [], [], []
            return

        self.tap_dance_count, self.combo_count, self.key_override_count = self.dynamic.entry_counts()
        self.tap_dance_entries = self.dynamic.fetch_entries("tap_dance", self.tap_dance_count)
        self.combo_entries = self.dynamic.fetch_entries("combo", self.combo_count)
        self.key_override_entries = self.dynamic.fetch_entries("key_override", self.key_override_count)

    def keymap(self):
        """ Keymap as one flat list of keycodes per layer """

        return [[self.layout[(layer, row, col)] for row in range(self.rows) for col in range(self.cols)]
                for layer in range(self.layers)]

    def keymap_strings(self):
        return stringify_keymap(self.codec, self.keymap())

    def get_key(self, layer, row, col):
        return self.dispatcher.send(CMD_VIA_GET_KEYCODE, bytes([layer, row, col]), DecodeSpec.uint16(4, True))

    def set_key(self, layer, row, col, code):
        code = self.codec.parse(code)
        key = (layer, row, col)
        if self.layout.get(key) != code:
            self.dispatcher.send(CMD_VIA_SET_KEYCODE, struct.pack(">BBBH", layer, row, col, code))
            self.layout[key] = code

    def set_macro_buffer(self, data):
        if len(data) > self.macro_memory:
            raise ValueError("macro buffer of {} bytes exceeds the keyboard's {} bytes".format(
                len(data), self.macro_memory))
        self.buffers.write(CMD_VIA_MACRO_SET_BUFFER, self.macro_memory, data, byteorder="big", size_prefix=True)
        self.macro = bytes(data) + b"\x00" * (self.macro_memory - len(data))

    def _set_dynamic(self, kind, entries, idx, entry):
        if entries[idx] == entry:
            return
        self.dynamic.set_entry(kind, idx, entry)
        entries[idx] = entry

    def set_tap_dance(self, idx, entry):
        self._set_dynamic("tap_dance", self.tap_dance_entries, idx, entry)

    def set_combo(self, idx, entry):
        self._set_dynamic("combo", self.combo_entries, idx, entry)

    def set_key_override(self, idx, entry):
        self._set_dynamic("key_override", self.key_override_entries, idx, entry)

    def get_encoder(self, layer, index):
        """ Returns (clockwise, counter-clockwise) keycodes """

        codes = self.dispatcher.send_vial(CMD_VIAL_GET_ENCODER, bytes([layer, index]), DecodeSpec.unpack(">HH"))
        self.encoder_layout[(layer, index)] = codes
        return codes

    def set_encoder(self, layer, index, direction, code):
        code = self.codec.parse(code)
        self.dispatcher.send_vial(CMD_VIAL_SET_ENCODER, struct.pack(">BBBH", layer, index, direction, code))
        if (layer, index) in self.encoder_layout:
            codes = list(self.encoder_layout[(layer, index)])
            codes[direction] = code
            self.encoder_layout[(layer, index)] = tuple(codes)

    def get_layout_options(self):
        return self.dispatcher.send(CMD_VIA_GET_KEYBOARD_VALUE, bytes([VIA_LAYOUT_OPTIONS]),
                                    DecodeSpec.uint32(2, True))

    def set_layout_options(self, options):
        if self.layout_options != options:
            self.dispatcher.send(CMD_VIA_SET_KEYBOARD_VALUE, struct.pack(">BI", VIA_LAYOUT_OPTIONS, options))
            self.layout_options = options

    def lighting_get(self, value_id, size=1):
        data = self.dispatcher.send(CMD_VIA_LIGHTING_GET_VALUE, bytes([value_id]))
        return data[2:2 + size]

    def lighting_set(self, value_id, *values):
        self.dispatcher.send(CMD_VIA_LIGHTING_SET_VALUE, bytes([value_id, *values]))

    def lighting_save(self):
        self.dispatcher.send(CMD_VIA_LIGHTING_SAVE)

    def get_unlock_status(self):
        """ Returns (unlocked, unlock_in_progress, [(row, col) keys to hold]) """

        data = self.dispatcher.send_vial(CMD_VIAL_GET_UNLOCK_STATUS)
        keys = []
        for x in range(UNLOCK_KEYS_MAX):
            row = data[2 + x * 2]
            col = data[3 + x * 2]
            if row != 255 and col != 255:
                keys.append((row, col))
        return data[0], data[1], keys

    def unlock_start(self):
        self.dispatcher.send_vial(CMD_VIAL_UNLOCK_START)

    def unlock_poll(self):
        """ Returns (unlocked, unlock_in_progress, counter) """

        data = self.dispatcher.send_vial(CMD_VIAL_UNLOCK_POLL)
        return data[0], data[1], data[2]

    def lock(self):
        self.dispatcher.send_vial(CMD_VIAL_LOCK)
