# SPDX-License-Identifier: GPL-2.0-or-later
from keycodes.keycodes import TRANSPARENT, is_transparent


def stringify_keymap(codec, layers):
    """ [[keycode, ...], ...] per layer -> same shape of keycode strings, transparent as "-1" """

    out = []
    for layer in layers:
        out.append(["-1" if key == TRANSPARENT else codec.stringify(key) for key in layer])
    return out


def parse_keymap(codec, layers):
    """ layers of rows of keycode strings -> one flat list of keycodes per layer """

    out = []
    for layer in layers:
        flat = []
        for row in layer:
            for col in row:
                if not col or is_transparent(col):
                    flat.append(TRANSPARENT)
                else:
                    flat.append(codec.parse(col))
        out.append(flat)
    return out
