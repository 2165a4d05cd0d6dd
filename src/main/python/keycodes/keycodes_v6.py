# SPDX-License-Identifier: GPL-2.0-or-later
"""
QMK keycode values (VIA protocol 12+, "v6" layout).

Masked keycodes are the fn(kc) templates: their value occupies the upper
byte only and a basic keycode is added to fill the lower byte.
"""

MAX_LAYERS = 32
MAX_LAYER_TAP = 16
MAX_MACROS = 127
MAX_TAP_DANCES = 255
MAX_USER_KEYCODES = 64

QK_MODS = 0x0100
QK_MOD_TAP = 0x2000
QK_LAYER_TAP = 0x4000
QK_TO = 0x5200
QK_MOMENTARY = 0x5220
QK_DEF_LAYER = 0x5240
QK_TOGGLE_LAYER = 0x5260
QK_ONE_SHOT_LAYER = 0x5280
QK_ONE_SHOT_MOD = 0x52A0
QK_LAYER_TAP_TOGGLE = 0x52C0
QK_PERSISTENT_DEF_LAYER = 0x52E0
QK_SWAP_HANDS = 0x5600
QK_TAP_DANCE = 0x5700
QK_MAGIC = 0x7000
QK_AUDIO = 0x7480
QK_MACRO = 0x7700
QK_LIGHTING = 0x7800
QK_QUANTUM = 0x7C00
QK_KB = 0x7E00

LAYER_FUNCTIONS = {
    "TO": QK_TO,
    "MO": QK_MOMENTARY,
    "DF": QK_DEF_LAYER,
    "TG": QK_TOGGLE_LAYER,
    "OSL": QK_ONE_SHOT_LAYER,
    "TT": QK_LAYER_TAP_TOGGLE,
    "PDF": QK_PERSISTENT_DEF_LAYER,
}

MOD_LCTL = 0x01
MOD_LSFT = 0x02
MOD_LALT = 0x04
MOD_LGUI = 0x08
MOD_RIGHT = 0x10


def _basic():
    kc = {
        "KC_NO": 0x00,
        "KC_TRNS": 0x01,
    }
    for x in range(26):
        kc["KC_{}".format(chr(ord("A") + x))] = 0x04 + x
    for x in range(1, 10):
        kc["KC_{}".format(x)] = 0x1D + x
    kc["KC_0"] = 0x27
    kc.update({
        "KC_ENTER": 0x28,
        "KC_ESCAPE": 0x29,
        "KC_BSPACE": 0x2A,
        "KC_TAB": 0x2B,
        "KC_SPACE": 0x2C,
        "KC_MINUS": 0x2D,
        "KC_EQUAL": 0x2E,
        "KC_LBRACKET": 0x2F,
        "KC_RBRACKET": 0x30,
        "KC_BSLASH": 0x31,
        "KC_NONUS_HASH": 0x32,
        "KC_SCOLON": 0x33,
        "KC_QUOTE": 0x34,
        "KC_GRAVE": 0x35,
        "KC_COMMA": 0x36,
        "KC_DOT": 0x37,
        "KC_SLASH": 0x38,
        "KC_CAPSLOCK": 0x39,
    })
    for x in range(1, 13):
        kc["KC_F{}".format(x)] = 0x39 + x
    kc.update({
        "KC_PSCREEN": 0x46,
        "KC_SCROLLLOCK": 0x47,
        "KC_PAUSE": 0x48,
        "KC_INSERT": 0x49,
        "KC_HOME": 0x4A,
        "KC_PGUP": 0x4B,
        "KC_DELETE": 0x4C,
        "KC_END": 0x4D,
        "KC_PGDOWN": 0x4E,
        "KC_RIGHT": 0x4F,
        "KC_LEFT": 0x50,
        "KC_DOWN": 0x51,
        "KC_UP": 0x52,
        "KC_NUMLOCK": 0x53,
        "KC_KP_SLASH": 0x54,
        "KC_KP_ASTERISK": 0x55,
        "KC_KP_MINUS": 0x56,
        "KC_KP_PLUS": 0x57,
        "KC_KP_ENTER": 0x58,
    })
    for x in range(1, 10):
        kc["KC_KP_{}".format(x)] = 0x58 + x
    kc.update({
        "KC_KP_0": 0x62,
        "KC_KP_DOT": 0x63,
        "KC_NONUS_BSLASH": 0x64,
        "KC_APPLICATION": 0x65,
        "KC_KP_EQUAL": 0x67,
    })
    for x in range(13, 25):
        kc["KC_F{}".format(x)] = 0x5B + x
    kc.update({
        "KC_EXEC": 0x74,
        "KC_HELP": 0x75,
        "KC_SLCT": 0x77,
        "KC_STOP": 0x78,
        "KC_AGIN": 0x79,
        "KC_UNDO": 0x7A,
        "KC_CUT": 0x7B,
        "KC_COPY": 0x7C,
        "KC_PSTE": 0x7D,
        "KC_FIND": 0x7E,
        "KC__MUTE": 0x7F,
        "KC__VOLUP": 0x80,
        "KC__VOLDOWN": 0x81,
        "KC_LCAP": 0x82,
        "KC_LNUM": 0x83,
        "KC_LSCR": 0x84,
        "KC_KP_COMMA": 0x85,
        "KC_RO": 0x87,
        "KC_KANA": 0x88,
        "KC_JYEN": 0x89,
        "KC_HENK": 0x8A,
        "KC_MHEN": 0x8B,
        "KC_LANG1": 0x90,
        "KC_LANG2": 0x91,

        "KC_PWR": 0xA5,
        "KC_SLEP": 0xA6,
        "KC_WAKE": 0xA7,
        "KC_MUTE": 0xA8,
        "KC_VOLU": 0xA9,
        "KC_VOLD": 0xAA,
        "KC_MNXT": 0xAB,
        "KC_MPRV": 0xAC,
        "KC_MSTP": 0xAD,
        "KC_MPLY": 0xAE,
        "KC_MSEL": 0xAF,
        "KC_EJCT": 0xB0,
        "KC_MAIL": 0xB1,
        "KC_CALC": 0xB2,
        "KC_MYCM": 0xB3,
        "KC_WSCH": 0xB4,
        "KC_WHOM": 0xB5,
        "KC_WBAK": 0xB6,
        "KC_WFWD": 0xB7,
        "KC_WSTP": 0xB8,
        "KC_WREF": 0xB9,
        "KC_WFAV": 0xBA,
        "KC_MFFD": 0xBB,
        "KC_MRWD": 0xBC,
        "KC_BRIU": 0xBD,
        "KC_BRID": 0xBE,

        "KC_MS_U": 0xCD,
        "KC_MS_D": 0xCE,
        "KC_MS_L": 0xCF,
        "KC_MS_R": 0xD0,
    })
    for x in range(1, 9):
        kc["KC_BTN{}".format(x)] = 0xD0 + x
    kc.update({
        "KC_WH_U": 0xD9,
        "KC_WH_D": 0xDA,
        "KC_WH_L": 0xDB,
        "KC_WH_R": 0xDC,
        "KC_ACL0": 0xDD,
        "KC_ACL1": 0xDE,
        "KC_ACL2": 0xDF,

        "KC_LCTRL": 0xE0,
        "KC_LSHIFT": 0xE1,
        "KC_LALT": 0xE2,
        "KC_LGUI": 0xE3,
        "KC_RCTRL": 0xE4,
        "KC_RSHIFT": 0xE5,
        "KC_RALT": 0xE6,
        "KC_RGUI": 0xE7,
    })
    return kc


def _shifted(kc):
    shifted = {
        "KC_TILD": "KC_GRAVE",
        "KC_EXLM": "KC_1",
        "KC_AT": "KC_2",
        "KC_HASH": "KC_3",
        "KC_DLR": "KC_4",
        "KC_PERC": "KC_5",
        "KC_CIRC": "KC_6",
        "KC_AMPR": "KC_7",
        "KC_ASTR": "KC_8",
        "KC_LPRN": "KC_9",
        "KC_RPRN": "KC_0",
        "KC_UNDS": "KC_MINUS",
        "KC_PLUS": "KC_EQUAL",
        "KC_LCBR": "KC_LBRACKET",
        "KC_RCBR": "KC_RBRACKET",
        "KC_LT": "KC_COMMA",
        "KC_GT": "KC_DOT",
        "KC_COLN": "KC_SCOLON",
        "KC_PIPE": "KC_BSLASH",
        "KC_QUES": "KC_SLASH",
        "KC_DQUO": "KC_QUOTE",
    }
    return {name: QK_MODS * MOD_LSFT + kc[base] for name, base in shifted.items()}


# fn(kc) templates, value = modifier bits in the upper byte
MOD_MASKS = {
    "LCTRL(kc)": MOD_LCTL,
    "LSHIFT(kc)": MOD_LSFT,
    "LALT(kc)": MOD_LALT,
    "LGUI(kc)": MOD_LGUI,
    "RCTRL(kc)": MOD_RIGHT | MOD_LCTL,
    "RSHIFT(kc)": MOD_RIGHT | MOD_LSFT,
    "RALT(kc)": MOD_RIGHT | MOD_LALT,
    "RGUI(kc)": MOD_RIGHT | MOD_LGUI,
    "C_S(kc)": MOD_LCTL | MOD_LSFT,
    "LCA(kc)": MOD_LCTL | MOD_LALT,
    "LSA(kc)": MOD_LSFT | MOD_LALT,
    "MEH(kc)": MOD_LCTL | MOD_LSFT | MOD_LALT,
    "LCG(kc)": MOD_LCTL | MOD_LGUI,
    "SGUI(kc)": MOD_LSFT | MOD_LGUI,
    "LAG(kc)": MOD_LALT | MOD_LGUI,
    "LCAG(kc)": MOD_LCTL | MOD_LALT | MOD_LGUI,
    "HYPR(kc)": MOD_LCTL | MOD_LSFT | MOD_LALT | MOD_LGUI,
    "RCG(kc)": MOD_RIGHT | MOD_LCTL | MOD_LGUI,
}

MOD_TAP_MASKS = {
    "LCTL_T(kc)": MOD_LCTL,
    "LSFT_T(kc)": MOD_LSFT,
    "C_S_T(kc)": MOD_LCTL | MOD_LSFT,
    "LALT_T(kc)": MOD_LALT,
    "LCA_T(kc)": MOD_LCTL | MOD_LALT,
    "LSA_T(kc)": MOD_LSFT | MOD_LALT,
    "MEH_T(kc)": MOD_LCTL | MOD_LSFT | MOD_LALT,
    "LGUI_T(kc)": MOD_LGUI,
    "LCG_T(kc)": MOD_LCTL | MOD_LGUI,
    "SGUI_T(kc)": MOD_LSFT | MOD_LGUI,
    "LSCG_T(kc)": MOD_LCTL | MOD_LSFT | MOD_LGUI,
    "LAG_T(kc)": MOD_LALT | MOD_LGUI,
    "LCAG_T(kc)": MOD_LCTL | MOD_LALT | MOD_LGUI,
    "LSAG_T(kc)": MOD_LSFT | MOD_LALT | MOD_LGUI,
    "ALL_T(kc)": MOD_LCTL | MOD_LSFT | MOD_LALT | MOD_LGUI,
    "RCTL_T(kc)": MOD_RIGHT | MOD_LCTL,
    "RSFT_T(kc)": MOD_RIGHT | MOD_LSFT,
    "RSC_T(kc)": MOD_RIGHT | MOD_LCTL | MOD_LSFT,
    "RALT_T(kc)": MOD_RIGHT | MOD_LALT,
    "RCA_T(kc)": MOD_RIGHT | MOD_LCTL | MOD_LALT,
    "RSA_T(kc)": MOD_RIGHT | MOD_LSFT | MOD_LALT,
    "RSCA_T(kc)": MOD_RIGHT | MOD_LCTL | MOD_LSFT | MOD_LALT,
    "RGUI_T(kc)": MOD_RIGHT | MOD_LGUI,
    "RCG_T(kc)": MOD_RIGHT | MOD_LCTL | MOD_LGUI,
    "RSG_T(kc)": MOD_RIGHT | MOD_LSFT | MOD_LGUI,
    "RSCG_T(kc)": MOD_RIGHT | MOD_LCTL | MOD_LSFT | MOD_LGUI,
    "RAG_T(kc)": MOD_RIGHT | MOD_LALT | MOD_LGUI,
    "RCAG_T(kc)": MOD_RIGHT | MOD_LCTL | MOD_LALT | MOD_LGUI,
    "RSAG_T(kc)": MOD_RIGHT | MOD_LSFT | MOD_LALT | MOD_LGUI,
    "RSCAG_T(kc)": MOD_RIGHT | MOD_LCTL | MOD_LSFT | MOD_LALT | MOD_LGUI,
}

ONE_SHOT_MODS = {
    "OSM(MOD_LCTL)": MOD_LCTL,
    "OSM(MOD_LSFT)": MOD_LSFT,
    "OSM(MOD_LALT)": MOD_LALT,
    "OSM(MOD_LGUI)": MOD_LGUI,
    "OSM(MOD_RCTL)": MOD_RIGHT | MOD_LCTL,
    "OSM(MOD_RSFT)": MOD_RIGHT | MOD_LSFT,
    "OSM(MOD_RALT)": MOD_RIGHT | MOD_LALT,
    "OSM(MOD_RGUI)": MOD_RIGHT | MOD_LGUI,
    "OSM(MOD_LCTL|MOD_LSFT)": MOD_LCTL | MOD_LSFT,
    "OSM(MOD_LCTL|MOD_LALT)": MOD_LCTL | MOD_LALT,
    "OSM(MOD_LSFT|MOD_LALT)": MOD_LSFT | MOD_LALT,
    "OSM(MOD_MEH)": MOD_LCTL | MOD_LSFT | MOD_LALT,
    "OSM(MOD_HYPR)": MOD_LCTL | MOD_LSFT | MOD_LALT | MOD_LGUI,
}

QUANTUM = {
    "MAGIC_SWAP_CONTROL_CAPSLOCK": QK_MAGIC + 0x00,
    "MAGIC_UNSWAP_CONTROL_CAPSLOCK": QK_MAGIC + 0x01,
    "MAGIC_CAPSLOCK_TO_CONTROL": QK_MAGIC + 0x02,
    "MAGIC_UNCAPSLOCK_TO_CONTROL": QK_MAGIC + 0x03,
    "MAGIC_SWAP_LCTL_LGUI": QK_MAGIC + 0x04,
    "MAGIC_UNSWAP_LCTL_LGUI": QK_MAGIC + 0x05,
    "MAGIC_SWAP_RCTL_RGUI": QK_MAGIC + 0x06,
    "MAGIC_UNSWAP_RCTL_RGUI": QK_MAGIC + 0x07,
    "MAGIC_SWAP_CTL_GUI": QK_MAGIC + 0x08,
    "MAGIC_UNSWAP_CTL_GUI": QK_MAGIC + 0x09,
    "MAGIC_TOGGLE_CTL_GUI": QK_MAGIC + 0x0A,
    "MAGIC_SWAP_LALT_LGUI": QK_MAGIC + 0x0B,
    "MAGIC_UNSWAP_LALT_LGUI": QK_MAGIC + 0x0C,
    "MAGIC_SWAP_RALT_RGUI": QK_MAGIC + 0x0D,
    "MAGIC_UNSWAP_RALT_RGUI": QK_MAGIC + 0x0E,
    "MAGIC_SWAP_ALT_GUI": QK_MAGIC + 0x0F,
    "MAGIC_UNSWAP_ALT_GUI": QK_MAGIC + 0x10,
    "MAGIC_TOGGLE_ALT_GUI": QK_MAGIC + 0x11,
    "MAGIC_NO_GUI": QK_MAGIC + 0x12,
    "MAGIC_UNNO_GUI": QK_MAGIC + 0x13,
    "MAGIC_TOGGLE_GUI": QK_MAGIC + 0x14,
    "MAGIC_SWAP_GRAVE_ESC": QK_MAGIC + 0x15,
    "MAGIC_UNSWAP_GRAVE_ESC": QK_MAGIC + 0x16,
    "MAGIC_SWAP_BACKSLASH_BACKSPACE": QK_MAGIC + 0x17,
    "MAGIC_UNSWAP_BACKSLASH_BACKSPACE": QK_MAGIC + 0x18,
    "MAGIC_HOST_NKRO": QK_MAGIC + 0x1A,
    "MAGIC_UNHOST_NKRO": QK_MAGIC + 0x1B,
    "MAGIC_TOGGLE_NKRO": QK_MAGIC + 0x1C,
    "MAGIC_EE_HANDS_LEFT": QK_MAGIC + 0x1D,
    "MAGIC_EE_HANDS_RIGHT": QK_MAGIC + 0x1E,

    "AU_ON": QK_AUDIO + 0x00,
    "AU_OFF": QK_AUDIO + 0x01,
    "AU_TOG": QK_AUDIO + 0x02,
    "CLICKY_TOGGLE": QK_AUDIO + 0x0A,
    "CLICKY_UP": QK_AUDIO + 0x0D,
    "CLICKY_DOWN": QK_AUDIO + 0x0E,
    "CLICKY_RESET": QK_AUDIO + 0x0F,
    "MU_ON": QK_AUDIO + 0x10,
    "MU_OFF": QK_AUDIO + 0x11,
    "MU_TOG": QK_AUDIO + 0x12,
    "MU_MOD": QK_AUDIO + 0x13,

    "BL_ON": QK_LIGHTING + 0x00,
    "BL_OFF": QK_LIGHTING + 0x01,
    "BL_DEC": QK_LIGHTING + 0x02,
    "BL_INC": QK_LIGHTING + 0x03,
    "BL_STEP": QK_LIGHTING + 0x04,
    "BL_TOGG": QK_LIGHTING + 0x05,
    "BL_BRTG": QK_LIGHTING + 0x06,
    "RGB_TOG": QK_LIGHTING + 0x20,
    "RGB_MOD": QK_LIGHTING + 0x21,
    "RGB_RMOD": QK_LIGHTING + 0x22,
    "RGB_HUI": QK_LIGHTING + 0x23,
    "RGB_HUD": QK_LIGHTING + 0x24,
    "RGB_SAI": QK_LIGHTING + 0x25,
    "RGB_SAD": QK_LIGHTING + 0x26,
    "RGB_VAI": QK_LIGHTING + 0x27,
    "RGB_VAD": QK_LIGHTING + 0x28,
    "RGB_SPI": QK_LIGHTING + 0x29,
    "RGB_SPD": QK_LIGHTING + 0x2A,
    "RGB_M_P": QK_LIGHTING + 0x2B,
    "RGB_M_B": QK_LIGHTING + 0x2C,
    "RGB_M_R": QK_LIGHTING + 0x2D,
    "RGB_M_SW": QK_LIGHTING + 0x2E,
    "RGB_M_SN": QK_LIGHTING + 0x2F,
    "RGB_M_K": QK_LIGHTING + 0x30,
    "RGB_M_X": QK_LIGHTING + 0x31,
    "RGB_M_G": QK_LIGHTING + 0x32,
    "RGB_M_T": QK_LIGHTING + 0x33,

    "QK_BOOT": QK_QUANTUM + 0x00,
    "QK_REBOOT": QK_QUANTUM + 0x01,
    "QK_DEBUG_TOGGLE": QK_QUANTUM + 0x02,
    "QK_CLEAR_EEPROM": QK_QUANTUM + 0x03,
    "KC_ASDN": QK_QUANTUM + 0x10,
    "KC_ASUP": QK_QUANTUM + 0x11,
    "KC_ASRP": QK_QUANTUM + 0x12,
    "KC_ASON": QK_QUANTUM + 0x13,
    "KC_ASOFF": QK_QUANTUM + 0x14,
    "KC_ASTG": QK_QUANTUM + 0x15,
    "KC_GESC": QK_QUANTUM + 0x16,
    "KC_LCPO": QK_QUANTUM + 0x18,
    "KC_RCPC": QK_QUANTUM + 0x19,
    "KC_LSPO": QK_QUANTUM + 0x1A,
    "KC_RSPC": QK_QUANTUM + 0x1B,
    "KC_LAPO": QK_QUANTUM + 0x1C,
    "KC_RAPC": QK_QUANTUM + 0x1D,
    "KC_SFTENT": QK_QUANTUM + 0x1E,
    "CMB_ON": QK_QUANTUM + 0x50,
    "CMB_OFF": QK_QUANTUM + 0x51,
    "CMB_TOG": QK_QUANTUM + 0x52,
    "QK_LOCK": QK_QUANTUM + 0x57,
    "QK_LEADER": QK_QUANTUM + 0x58,
    "QK_CAPS_WORD_TOGGLE": QK_QUANTUM + 0x73,
    "QK_REPEAT_KEY": QK_QUANTUM + 0x79,
    "QK_ALT_REPEAT_KEY": QK_QUANTUM + 0x7A,
    "QK_LAYER_LOCK": QK_QUANTUM + 0x7B,

    "SH_TOGG": QK_SWAP_HANDS + 0xF0,
    "SH_TT": QK_SWAP_HANDS + 0xF1,
    "SH_MON": QK_SWAP_HANDS + 0xF2,
    "SH_MOFF": QK_SWAP_HANDS + 0xF3,
    "SH_OFF": QK_SWAP_HANDS + 0xF4,
    "SH_ON": QK_SWAP_HANDS + 0xF5,
    "SH_OS": QK_SWAP_HANDS + 0xF6,
}


class keycodes_v6:

    kc = _basic()
    kc.update(_shifted(kc))

    for _name, _mods in MOD_MASKS.items():
        kc[_name] = QK_MODS * _mods
    for _name, _mods in MOD_TAP_MASKS.items():
        kc[_name] = QK_MOD_TAP + QK_MODS * _mods
    for _layer in range(MAX_LAYER_TAP):
        kc["LT{}(kc)".format(_layer)] = QK_LAYER_TAP + QK_MODS * _layer
    kc["SH_T(kc)"] = QK_SWAP_HANDS

    for _name, _mods in ONE_SHOT_MODS.items():
        kc[_name] = QK_ONE_SHOT_MOD + _mods
    for _fn, _base in LAYER_FUNCTIONS.items():
        for _layer in range(MAX_LAYERS):
            kc["{}({})".format(_fn, _layer)] = _base + _layer
    for _x in range(MAX_TAP_DANCES):
        kc["TD({})".format(_x)] = QK_TAP_DANCE + _x
    for _x in range(MAX_MACROS):
        kc["M{}".format(_x)] = QK_MACRO + _x
    for _x in range(MAX_USER_KEYCODES):
        kc["USER{:02}".format(_x)] = QK_KB + _x

    kc.update(QUANTUM)

    del _name, _mods, _layer, _fn, _base, _x
