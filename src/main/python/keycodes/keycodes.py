# coding: utf-8

# SPDX-License-Identifier: GPL-2.0-or-later

import logging
import re
from collections import namedtuple

from keycodes.grammar import DECIMAL_RE, Composite, DecimalLiteral, HexLiteral, MalformedCompositePattern, Sentinel, \
    parse_expression
from keycodes.keycodes_v6 import keycodes_v6, LAYER_FUNCTIONS, MAX_LAYERS, MAX_LAYER_TAP, MAX_MACROS, \
    MAX_TAP_DANCES, MAX_USER_KEYCODES

TRANSPARENT = 0xFF
BROKEN_LABEL = "?? BROKEN ??"

TEMPLATE_RE = re.compile(r"^(\w+)\(kc\)")
HEX_RE = re.compile(r"^0[xX][0-9a-fA-F]+$")
LAYER_DESC_RE = re.compile(r"^(MO|DF|TG|TT|OSL|TO|PDF)\((\d+)\)$")
MACRO_DESC_RE = re.compile(r"^M(\d+)$")
TAP_DANCE_DESC_RE = re.compile(r"^TD\((\d+)\)$")

KeyDesc = namedtuple("KeyDesc", ["kind", "subkind", "idx", "label", "title"])
KeyDesc.__new__.__defaults__ = (None,) * len(KeyDesc._fields)


class UnparseableKeycode(ValueError):
    pass


class Keycode:

    def __init__(self, qmk_id, label, tooltip=None, masked=False, alias=None, kind=None, subkind=None, idx=None,
                 code=None):
        self.qmk_id = qmk_id
        self.code = self.resolve(qmk_id) if code is None else code
        self.label = label
        self.tooltip = tooltip
        # whether this keycode requires another sub-keycode
        self.masked = masked
        self.alias = list(alias or [])

        # layer, macro, tapdance or custom; subkind is the layer function
        self.kind = kind
        self.subkind = subkind
        self.idx = idx

        if masked:
            assert qmk_id.endswith("(kc)")

    @property
    def title(self):
        if self.tooltip:
            return self.tooltip
        return self.qmk_id

    @classmethod
    def resolve(cls, qmk_constant):
        """ Translates a qmk_constant into its integer keycode """
        if qmk_constant not in keycodes_v6.kc:
            raise RuntimeError("unable to resolve qmk_id={}".format(qmk_constant))
        return keycodes_v6.kc[qmk_constant]

    def __repr__(self):
        return "Keycode<{} 0x{:04X}>".format(self.qmk_id, self.code)


class KeyTable:
    """
    Canonical id -> keycode, alias -> canonical id and code -> keycode lookups.

    A table may sit on top of a parent table: lookups try this table first,
    then fall back to the parent. The parent is never modified.
    """

    def __init__(self, keycodes=(), parent=None):
        self.parent = parent
        self.by_id = dict()
        self.aliases = dict()
        self.by_code = dict()
        for keycode in keycodes:
            self.add(keycode)

    def add(self, keycode):
        if keycode.masked and keycode.code & 0xFF:
            raise RuntimeError("Misconfigured: mask {} has bits set in its low byte".format(keycode.qmk_id))
        if keycode.qmk_id in self.by_id or keycode.qmk_id in self.aliases:
            raise RuntimeError("Misconfigured: {} is defined twice".format(keycode.qmk_id))
        if keycode.code in self.by_code:
            raise RuntimeError("Misconfigured: {} and {} share code 0x{:04X}".format(
                self.by_code[keycode.code].qmk_id, keycode.qmk_id, keycode.code))
        for alias in keycode.alias:
            if alias in self.aliases or alias in self.by_id:
                raise RuntimeError("Misconfigured: two keycodes claim the same alias {}".format(alias))

        self.by_id[keycode.qmk_id] = keycode
        self.by_code[keycode.code] = keycode
        for alias in keycode.alias:
            self.aliases[alias] = keycode.qmk_id

    def canonical_id(self, qmk_id):
        table = self
        while table is not None:
            if qmk_id in table.aliases:
                return table.aliases[qmk_id]
            table = table.parent
        return qmk_id

    def find(self, qmk_id):
        # kc stands in for "no key" inside a composite
        if qmk_id == "kc":
            qmk_id = "KC_NO"
        qmk_id = self.canonical_id(qmk_id)
        table = self
        while table is not None:
            if qmk_id in table.by_id:
                return table.by_id[qmk_id]
            table = table.parent
        return None

    def find_code(self, code):
        table = self
        while table is not None:
            if code in table.by_code:
                return table.by_code[code]
            table = table.parent
        return None

    def known(self, qmk_id):
        """ Whether qmk_id is a canonical id or an alias anywhere in the chain """
        table = self
        while table is not None:
            if qmk_id in table.by_id or qmk_id in table.aliases:
                return True
            table = table.parent
        return False

    def __iter__(self):
        seen = set()
        table = self
        while table is not None:
            for qmk_id, keycode in table.by_id.items():
                if qmk_id not in seen:
                    seen.add(qmk_id)
                    yield keycode
            table = table.parent


class KeycodeCodec:
    """ Converts between 16-bit keycodes and their textual form """

    def __init__(self, table=None):
        self.table = BASE_TABLE if table is None else table

    def stringify(self, keynum):
        """ Converts integer keycode to string """

        modmask = keynum & 0xFF00
        keyid = keynum & 0x00FF
        table = self.table

        if modmask != 0 and table.find_code(keyid) is not None:
            outer = table.find_code(modmask)
            if outer is None:
                return "0x{:04x}".format(keynum)
            if TEMPLATE_RE.match(outer.qmk_id):
                return outer.qmk_id.replace("(kc)", "({})".format(table.find_code(keyid).qmk_id), 1)
            if keyid == 0:
                return outer.qmk_id
            keycode = table.find_code(keynum)
            if keycode is not None:
                return keycode.qmk_id
            return "0x{:04x}".format(keynum)

        keycode = table.find_code(keynum)
        if keycode is not None:
            return keycode.qmk_id
        return hex(keynum)

    def parse(self, value):
        """ Converts string keycode to integer """

        if is_transparent(value):
            return TRANSPARENT
        if isinstance(value, int):
            return value
        if not isinstance(value, str):
            raise UnparseableKeycode("cannot parse keycode {!r}".format(value))

        keycode = self.table.find(value)
        if keycode is not None:
            return keycode.code

        try:
            node = parse_expression(value)
        except MalformedCompositePattern as e:
            logging.debug("parse: %s", e)
            node = None

        if isinstance(node, Composite):
            code = self._parse_composite(node)
            if code is not None:
                return code
        elif isinstance(node, (HexLiteral, DecimalLiteral)):
            if node.value > 0xFFFF:
                raise UnparseableKeycode("keycode {!r} does not fit in 16 bits".format(value))
            return node.value
        elif isinstance(node, Sentinel):
            return TRANSPARENT

        raise UnparseableKeycode("cannot parse keycode {!r}".format(value))

    def _parse_composite(self, node):
        mask = self.table.find("{}(kc)".format(node.fn))
        if mask is None or not mask.masked:
            return None
        keycode = self.table.find(node.arg)
        if keycode is None:
            return None
        if keycode.code > 0xFF:
            logging.warning("%s(%s): inner keycode 0x%04X overlaps the mask byte", node.fn, node.arg, keycode.code)
        code = mask.code + keycode.code
        if code > 0xFFFF:
            raise UnparseableKeycode("{}({}) does not fit in 16 bits".format(node.fn, node.arg))
        return code

    def canonical(self, value):
        if not isinstance(value, str) or value.startswith("0x"):
            return value
        return self.table.canonical_id(value)

    def define(self, value):
        """ Returns the table entry for a keycode given in any form, or None """

        if isinstance(value, str):
            if HEX_RE.match(value):
                value = int(value, 16)
            elif DECIMAL_RE.match(value):
                value = int(value)

        if isinstance(value, int):
            keycode = self.table.find_code(value)
            if keycode is None:
                logging.debug("define: unknown keycode 0x%04X", value)
            return keycode

        keycode = self.table.find(self.canonical(value))
        if keycode is None:
            logging.debug("define: unknown keycode %s", value)
        return keycode

    def parse_desc(self, value):
        """ Describes a keycode string for display; unknown input gives a broken descriptor """

        value = self.canonical(value)
        if not isinstance(value, str):
            return KeyDesc("broken", label=BROKEN_LABEL, title=str(value))

        m = LAYER_DESC_RE.match(value)
        if m:
            return KeyDesc("layer", m.group(1), int(m.group(2)))

        m = MACRO_DESC_RE.match(value)
        if m:
            return KeyDesc("macro", "M", int(m.group(1)))

        m = TAP_DANCE_DESC_RE.match(value)
        if m:
            return KeyDesc("tapdance", "TD", int(m.group(1)))

        try:
            node = parse_expression(value)
        except MalformedCompositePattern:
            node = None
        if isinstance(node, Composite):
            mask = self.table.find("{}(kc)".format(node.fn))
            if mask is None:
                mask = self.table.find(node.fn)
            keycode = self.table.find(node.arg) if mask is not None else None
            if keycode is not None:
                return KeyDesc("key", label=mask.label.replace("(kc)", "") + keycode.label, title=keycode.title)

        keycode = self.table.find(value)
        if keycode is not None:
            return KeyDesc("key", label=keycode.label, title=keycode.title)

        if value.startswith("0x"):
            return KeyDesc("key", label=value)

        logging.debug("parse_desc: unknown keycode %s", value)
        return KeyDesc("broken", label=BROKEN_LABEL, title=value)


def is_transparent(value):
    if value is None or value == "" or value == -1 or value == "-1":
        return True
    if isinstance(value, int):
        return value == TRANSPARENT
    return isinstance(value, str) and value.lower() == "0xff"


K = Keycode

KEYCODES_SPECIAL = [
    K("KC_NO", "", alias=["XXXXXXX"]),
    K("KC_TRNS", "▽", alias=["KC_TRANSPARENT", "_______"]),
]

KEYCODES_BASIC = [K("KC_{}".format(c), c) for c in "ABCDEFGHIJKLMNOPQRSTUVWXYZ"]
KEYCODES_BASIC += [K("KC_{}".format(n), "{}\n{}".format(s, n)) for n, s in zip("1234567890", "!@#$%^&*()")]
KEYCODES_BASIC += [
    K("KC_ENTER", "Enter", alias=["KC_ENT"]),
    K("KC_ESCAPE", "Esc", alias=["KC_ESC"]),
    K("KC_BSPACE", "Bksp", alias=["KC_BSPC"]),
    K("KC_TAB", "Tab"),
    K("KC_SPACE", "Space", alias=["KC_SPC"]),
    K("KC_MINUS", "_\n-", alias=["KC_MINS"]),
    K("KC_EQUAL", "+\n=", alias=["KC_EQL"]),
    K("KC_LBRACKET", "{\n[", alias=["KC_LBRC"]),
    K("KC_RBRACKET", "}\n]", alias=["KC_RBRC"]),
    K("KC_BSLASH", "|\n\\", alias=["KC_BSLS"]),
    K("KC_SCOLON", ":\n;", alias=["KC_SCLN"]),
    K("KC_QUOTE", "\"\n'", alias=["KC_QUOT"]),
    K("KC_GRAVE", "~\n`", alias=["KC_GRV", "KC_ZKHK"]),
    K("KC_COMMA", "<\n,", alias=["KC_COMM"]),
    K("KC_DOT", ">\n."),
    K("KC_SLASH", "?\n/", alias=["KC_SLSH"]),
    K("KC_CAPSLOCK", "Caps\nLock", alias=["KC_CLCK", "KC_CAPS"]),
    K("KC_APPLICATION", "Menu", alias=["KC_APP"]),
    K("KC_LCTRL", "LCtrl", alias=["KC_LCTL"]),
    K("KC_LSHIFT", "LShift", alias=["KC_LSFT"]),
    K("KC_LALT", "LAlt", alias=["KC_LOPT"]),
    K("KC_LGUI", "LGui", alias=["KC_LCMD", "KC_LWIN"]),
    K("KC_RCTRL", "RCtrl", alias=["KC_RCTL"]),
    K("KC_RSHIFT", "RShift", alias=["KC_RSFT"]),
    K("KC_RALT", "RAlt", alias=["KC_ALGR", "KC_ROPT"]),
    K("KC_RGUI", "RGui", alias=["KC_RCMD", "KC_RWIN"]),
]
KEYCODES_BASIC += [K("KC_F{}".format(x), "F{}".format(x)) for x in range(1, 25)]

KEYCODES_BASIC_NUMPAD = [
    K("KC_NUMLOCK", "Num\nLock", alias=["KC_NLCK", "KC_NUM"]),
    K("KC_KP_SLASH", "/", alias=["KC_PSLS"]),
    K("KC_KP_ASTERISK", "*", alias=["KC_PAST"]),
    K("KC_KP_MINUS", "-", alias=["KC_PMNS"]),
    K("KC_KP_PLUS", "+", alias=["KC_PPLS"]),
    K("KC_KP_ENTER", "Num\nEnter", alias=["KC_PENT"]),
    K("KC_KP_DOT", ".", alias=["KC_PDOT"]),
    K("KC_KP_EQUAL", "=", alias=["KC_PEQL"]),
    K("KC_KP_COMMA", ",", alias=["KC_PCMM"]),
]
KEYCODES_BASIC_NUMPAD += [K("KC_KP_{}".format(x), str(x), alias=["KC_P{}".format(x)]) for x in range(10)]

KEYCODES_BASIC_NAV = [
    K("KC_PSCREEN", "Print\nScreen", alias=["KC_PSCR"]),
    K("KC_SCROLLLOCK", "Scroll\nLock", alias=["KC_SLCK", "KC_SCRL", "KC_BRMD"]),
    K("KC_PAUSE", "Pause", alias=["KC_PAUS", "KC_BRK", "KC_BRMU"]),
    K("KC_INSERT", "Insert", alias=["KC_INS"]),
    K("KC_HOME", "Home"),
    K("KC_PGUP", "Page\nUp"),
    K("KC_DELETE", "Del", alias=["KC_DEL"]),
    K("KC_END", "End"),
    K("KC_PGDOWN", "Page\nDown", alias=["KC_PGDN"]),
    K("KC_RIGHT", "Right", alias=["KC_RGHT"]),
    K("KC_LEFT", "Left"),
    K("KC_DOWN", "Down"),
    K("KC_UP", "Up"),
]

KEYCODES_SHIFTED = [
    K("KC_TILD", "~"),
    K("KC_EXLM", "!"),
    K("KC_AT", "@"),
    K("KC_HASH", "#"),
    K("KC_DLR", "$"),
    K("KC_PERC", "%"),
    K("KC_CIRC", "^"),
    K("KC_AMPR", "&"),
    K("KC_ASTR", "*"),
    K("KC_LPRN", "("),
    K("KC_RPRN", ")"),
    K("KC_UNDS", "_"),
    K("KC_PLUS", "+"),
    K("KC_LCBR", "{"),
    K("KC_RCBR", "}"),
    K("KC_LT", "<"),
    K("KC_GT", ">"),
    K("KC_COLN", ":"),
    K("KC_PIPE", "|"),
    K("KC_QUES", "?"),
    K("KC_DQUO", '"'),
]

KEYCODES_ISO = [
    K("KC_NONUS_HASH", "~\n#", "Non-US # and ~", alias=["KC_NUHS"]),
    K("KC_NONUS_BSLASH", "|\n\\", "Non-US \\ and |", alias=["KC_NUBS"]),
    K("KC_RO", "_\n\\", "JIS \\ and _", alias=["KC_INT1"]),
    K("KC_KANA", "カタカナ\nひらがな", "JIS Katakana/Hiragana", alias=["KC_INT2"]),
    K("KC_JYEN", "|\n¥", alias=["KC_INT3"]),
    K("KC_HENK", "変換", "JIS Henkan", alias=["KC_INT4"]),
    K("KC_MHEN", "無変換", "JIS Muhenkan", alias=["KC_INT5"]),
    K("KC_LANG1", "한영\nかな", "Korean Han/Yeong / JP Mac Kana", alias=["KC_HAEN"]),
    K("KC_LANG2", "漢字\n英数", "Korean Hanja / JP Mac Eisu", alias=["KC_HANJ"]),
]

KEYCODES_BOOT = [
    K("QK_BOOT", "Boot-\nloader", "Put the keyboard into bootloader mode for flashing", alias=["RESET"]),
    K("QK_REBOOT", "Reboot", "Reboots the keyboard. Does not load the bootloader"),
    K("QK_DEBUG_TOGGLE", "Debug\nToggle", "Toggle debug mode", alias=["DB_TOGG"]),
    K("QK_CLEAR_EEPROM", "Clear\nEEPROM", "Reinitializes the keyboard's EEPROM (persistent memory)", alias=["EE_CLR"]),
]

# label, tooltip and aliases per template; codes come from keycodes_v6
MOD_TEMPLATES = [
    ("LCTRL", "LCtl", None, ["LCTL", "C"]),
    ("LSHIFT", "LSft", None, ["LSFT", "S"]),
    ("LALT", "LAlt", None, ["A", "LOPT"]),
    ("LGUI", "LGui", None, ["G", "LCMD", "LWIN"]),
    ("RCTRL", "RCtl", None, ["RCTL"]),
    ("RSHIFT", "RSft", None, ["RSFT"]),
    ("RALT", "RAlt", None, ["ALGR", "ROPT"]),
    ("RGUI", "RGui", None, ["RCMD", "RWIN"]),
    ("C_S", "LCS", "LCTL + LSFT", ["LCS"]),
    ("LCA", "LCA", "LCTL + LALT", None),
    ("LSA", "LSA", "LSFT + LALT", None),
    ("MEH", "Meh", "LCTL + LSFT + LALT", None),
    ("LCG", "LCG", "LCTL + LGUI", None),
    ("SGUI", "LSG", "LGUI + LSFT", ["LSG", "SCMD", "SWIN"]),
    ("LAG", "LAG", "LALT + LGUI", None),
    ("LCAG", "LCAG", "LCTL + LALT + LGUI", None),
    ("HYPR", "Hyper", "LCTL + LSFT + LALT + LGUI", None),
    ("RCG", "RCG", "RCTL + RGUI", None),
]

MOD_TAP_TEMPLATES = [
    ("LCTL_T", "LCtl_T", "Left Control", ["CTL_T"]),
    ("LSFT_T", "LSft_T", "Left Shift", ["SFT_T"]),
    ("LALT_T", "LAlt_T", "Left Alt", ["ALT_T", "LOPT_T"]),
    ("LGUI_T", "LGui_T", "Left GUI", ["GUI_T", "LCMD_T", "LWIN_T"]),
    ("RCTL_T", "RCtl_T", "Right Control", None),
    ("RSFT_T", "RSft_T", "Right Shift", None),
    ("RALT_T", "RAlt_T", "Right Alt", ["ALGR_T", "ROPT_T"]),
    ("RGUI_T", "RGui_T", "Right GUI", ["RCMD_T", "RWIN_T"]),
    ("C_S_T", "LCS_T", "Left Control + Left Shift", ["LCS_T"]),
    ("LCA_T", "LCA_T", "LCTL + LALT", None),
    ("LSA_T", "LSA_T", "LSFT + LALT", None),
    ("MEH_T", "Meh_T", "LCTL + LSFT + LALT", None),
    ("LCG_T", "LCG_T", "LCTL + LGUI", None),
    ("SGUI_T", "LSG_T", "LGUI + LSFT", ["LSG_T"]),
    ("LSCG_T", "LSCG_T", "LSFT + LCTL + LGUI", None),
    ("LAG_T", "LAG_T", "LALT + LGUI", None),
    ("LCAG_T", "LCAG_T", "LCTL + LALT + LGUI", None),
    ("LSAG_T", "LSAG_T", "LSFT + LALT + LGUI", None),
    ("ALL_T", "ALL_T", "LCTL + LSFT + LALT + LGUI", ["HYPR_T"]),
    ("RSC_T", "RSC_T", "RSFT + RCTL", None),
    ("RCA_T", "RCA_T", "RCTL + RALT", None),
    ("RSA_T", "RSA_T", "RSFT + RALT", None),
    ("RSCA_T", "RSCA_T", "RSFT + RCTL + RALT", None),
    ("RCG_T", "RCG_T", "RCTL + RGUI", None),
    ("RSG_T", "RSG_T", "RSFT + RGUI", None),
    ("RSCG_T", "RSCG_T", "RSFT + RCTL + RGUI", None),
    ("RAG_T", "RAG_T", "RALT + RGUI", None),
    ("RCAG_T", "RCAG_T", "RCTL + RALT + RGUI", None),
    ("RSAG_T", "RSAG_T", "RSFT + RALT + RGUI", None),
    ("RSCAG_T", "RSCAG_T", "RSFT + RCTL + RALT + RGUI", None),
]


def _template(name, label, tooltip, alias):
    return K("{}(kc)".format(name), "{}\n(kc)".format(label), tooltip, masked=True,
             alias=["{}(kc)".format(a) for a in alias or []])


KEYCODES_MODIFIERS = [_template(*t) for t in MOD_TEMPLATES]
KEYCODES_MODIFIERS += [_template(name, label, "{} when held, kc when tapped".format(held), alias)
                       for name, label, held, alias in MOD_TAP_TEMPLATES]
KEYCODES_MODIFIERS += [
    K("OSM(MOD_LCTL)", "OSM\nLCtl", "Enable Left Control for one keypress"),
    K("OSM(MOD_LSFT)", "OSM\nLSft", "Enable Left Shift for one keypress"),
    K("OSM(MOD_LALT)", "OSM\nLAlt", "Enable Left Alt for one keypress"),
    K("OSM(MOD_LGUI)", "OSM\nLGUI", "Enable Left GUI for one keypress"),
    K("OSM(MOD_RCTL)", "OSM\nRCtl", "Enable Right Control for one keypress"),
    K("OSM(MOD_RSFT)", "OSM\nRSft", "Enable Right Shift for one keypress"),
    K("OSM(MOD_RALT)", "OSM\nRAlt", "Enable Right Alt for one keypress"),
    K("OSM(MOD_RGUI)", "OSM\nRGUI", "Enable Right GUI for one keypress"),
    K("OSM(MOD_LCTL|MOD_LSFT)", "OSM\nCS", "Enable Left Control and Shift for one keypress"),
    K("OSM(MOD_LCTL|MOD_LALT)", "OSM\nCA", "Enable Left Control and Alt for one keypress"),
    K("OSM(MOD_LSFT|MOD_LALT)", "OSM\nSA", "Enable Left Shift and Alt for one keypress"),
    K("OSM(MOD_MEH)", "OSM\nMeh", "Enable Left Control, Shift, and Alt for one keypress"),
    K("OSM(MOD_HYPR)", "OSM\nHyper", "Enable Left Control, Shift, Alt, and GUI for one keypress"),

    K("KC_GESC", "~\nEsc", "Esc normally, but ~ when Shift or GUI is pressed", alias=["QK_GESC"]),
    K("KC_LSPO", "LS\n(", "Left Shift when held, ( when tapped", alias=["SC_LSPO"]),
    K("KC_RSPC", "RS\n)", "Right Shift when held, ) when tapped", alias=["SC_RSPC"]),
    K("KC_LCPO", "LC\n(", "Left Control when held, ( when tapped", alias=["SC_LCPO"]),
    K("KC_RCPC", "RC\n)", "Right Control when held, ) when tapped", alias=["SC_RCPC"]),
    K("KC_LAPO", "LA\n(", "Left Alt when held, ( when tapped", alias=["SC_LAPO"]),
    K("KC_RAPC", "RA\n)", "Right Alt when held, ) when tapped", alias=["SC_RAPC"]),
    K("KC_SFTENT", "RS\nEnter", "Right Shift when held, Enter when tapped", alias=["SC_SENT"]),
]

KEYCODES_QUANTUM = [
    K("MAGIC_SWAP_CONTROL_CAPSLOCK", "Swap\nCtrl\nCaps", "Swap Caps Lock and Left Control", alias=["CL_SWAP"]),
    K("MAGIC_UNSWAP_CONTROL_CAPSLOCK", "Unswap\nCtrl\nCaps", "Unswap Caps Lock and Left Control", alias=["CL_NORM"]),
    K("MAGIC_CAPSLOCK_TO_CONTROL", "Caps\nto\nCtrl", "Treat Caps Lock as Control", alias=["CL_CTRL"]),
    K("MAGIC_UNCAPSLOCK_TO_CONTROL", "Caps\nnot to\nCtrl", "Stop treating Caps Lock as Control", alias=["CL_CAPS"]),
    K("MAGIC_SWAP_LCTL_LGUI", "Swap\nLCtl\nLGui", "Swap Left Control and GUI", alias=["LCG_SWP"]),
    K("MAGIC_UNSWAP_LCTL_LGUI", "Unswap\nLCtl\nLGui", "Unswap Left Control and GUI", alias=["LCG_NRM"]),
    K("MAGIC_SWAP_RCTL_RGUI", "Swap\nRCtl\nRGui", "Swap Right Control and GUI", alias=["RCG_SWP"]),
    K("MAGIC_UNSWAP_RCTL_RGUI", "Unswap\nRCtl\nRGui", "Unswap Right Control and GUI", alias=["RCG_NRM"]),
    K("MAGIC_SWAP_CTL_GUI", "Swap\nCtl\nGui", "Swap Control and GUI on both sides", alias=["CG_SWAP"]),
    K("MAGIC_UNSWAP_CTL_GUI", "Unswap\nCtl\nGui", "Unswap Control and GUI on both sides", alias=["CG_NORM"]),
    K("MAGIC_TOGGLE_CTL_GUI", "Toggle\nCtl\nGui", "Toggle Control and GUI swap on both sides", alias=["CG_TOGG"]),
    K("MAGIC_SWAP_LALT_LGUI", "Swap\nLAlt\nLGui", "Swap Left Alt and GUI", alias=["LAG_SWP"]),
    K("MAGIC_UNSWAP_LALT_LGUI", "Unswap\nLAlt\nLGui", "Unswap Left Alt and GUI", alias=["LAG_NRM"]),
    K("MAGIC_SWAP_RALT_RGUI", "Swap\nRAlt\nRGui", "Swap Right Alt and GUI", alias=["RAG_SWP"]),
    K("MAGIC_UNSWAP_RALT_RGUI", "Unswap\nRAlt\nRGui", "Unswap Right Alt and GUI", alias=["RAG_NRM"]),
    K("MAGIC_SWAP_ALT_GUI", "Swap\nAlt\nGui", "Swap Alt and GUI on both sides", alias=["AG_SWAP"]),
    K("MAGIC_UNSWAP_ALT_GUI", "Unswap\nAlt\nGui", "Unswap Alt and GUI on both sides", alias=["AG_NORM"]),
    K("MAGIC_TOGGLE_ALT_GUI", "Toggle\nAlt\nGui", "Toggle Alt and GUI swap on both sides", alias=["AG_TOGG"]),
    K("MAGIC_NO_GUI", "GUI\nOff", "Disable the GUI keys", alias=["GUI_OFF"]),
    K("MAGIC_UNNO_GUI", "GUI\nOn", "Enable the GUI keys", alias=["GUI_ON"]),
    K("MAGIC_TOGGLE_GUI", "GUI\nToggle", "Toggle the GUI keys on and off", alias=["GUI_TOGG"]),
    K("MAGIC_SWAP_GRAVE_ESC", "Swap\n`\nEsc", "Swap ` and Escape", alias=["GE_SWAP"]),
    K("MAGIC_UNSWAP_GRAVE_ESC", "Unswap\n`\nEsc", "Unswap ` and Escape", alias=["GE_NORM"]),
    K("MAGIC_SWAP_BACKSLASH_BACKSPACE", "Swap\n\\\nBS", "Swap \\ and Backspace", alias=["BS_SWAP"]),
    K("MAGIC_UNSWAP_BACKSLASH_BACKSPACE", "Unswap\n\\\nBS", "Unswap \\ and Backspace", alias=["BS_NORM"]),
    K("MAGIC_HOST_NKRO", "NKRO\nOn", "Enable N-key rollover", alias=["NK_ON"]),
    K("MAGIC_UNHOST_NKRO", "NKRO\nOff", "Disable N-key rollover", alias=["NK_OFF"]),
    K("MAGIC_TOGGLE_NKRO", "NKRO\nToggle", "Toggle N-key rollover", alias=["NK_TOGG"]),
    K("MAGIC_EE_HANDS_LEFT", "EEH\nLeft", "Set the master half of a split keyboard as the left hand",
      alias=["EH_LEFT"]),
    K("MAGIC_EE_HANDS_RIGHT", "EEH\nRight", "Set the master half of a split keyboard as the right hand",
      alias=["EH_RGHT"]),

    K("AU_ON", "Audio\nON", "Audio mode on"),
    K("AU_OFF", "Audio\nOFF", "Audio mode off"),
    K("AU_TOG", "Audio\nToggle", "Toggles Audio mode"),
    K("CLICKY_TOGGLE", "Clicky\nToggle", "Toggles Audio clicky mode", alias=["CK_TOGG"]),
    K("CLICKY_UP", "Clicky\nUp", "Increases frequency of the clicks", alias=["CK_UP"]),
    K("CLICKY_DOWN", "Clicky\nDown", "Decreases frequency of the clicks", alias=["CK_DOWN"]),
    K("CLICKY_RESET", "Clicky\nReset", "Resets frequency to default", alias=["CK_RST"]),
    K("MU_ON", "Music\nOn", "Turns on Music Mode"),
    K("MU_OFF", "Music\nOff", "Turns off Music Mode"),
    K("MU_TOG", "Music\nToggle", "Toggles Music Mode"),
    K("MU_MOD", "Music\nCycle", "Cycles through the music modes"),

    K("KC_ASDN", "Auto-\nshift\nDown", "Lower the Auto Shift timeout variable (down)", alias=["AS_DOWN"]),
    K("KC_ASUP", "Auto-\nshift\nUp", "Raise the Auto Shift timeout variable (up)", alias=["AS_UP"]),
    K("KC_ASRP", "Auto-\nshift\nReport", "Report your current Auto Shift timeout value", alias=["AS_RPT"]),
    K("KC_ASON", "Auto-\nshift\nOn", "Turns on the Auto Shift Function", alias=["AS_ON"]),
    K("KC_ASOFF", "Auto-\nshift\nOff", "Turns off the Auto Shift Function", alias=["AS_OFF"]),
    K("KC_ASTG", "Auto-\nshift\nToggle", "Toggles the state of the Auto Shift feature", alias=["AS_TOGG"]),

    K("CMB_ON", "Combo\nOn", "Turns on Combo feature", alias=["CM_ON"]),
    K("CMB_OFF", "Combo\nOff", "Turns off Combo feature", alias=["CM_OFF"]),
    K("CMB_TOG", "Combo\nToggle", "Toggles Combo feature on and off", alias=["CM_TOGG"]),

    K("QK_LOCK", "Key\nLock", "Hold down the next key pressed until pressed again"),
    K("QK_LEADER", "Leader", "Start a leader key sequence", alias=["QK_LEAD"]),
    K("QK_CAPS_WORD_TOGGLE", "Caps\nWord", "Capitalizes until end of current word", alias=["CW_TOGG"]),
    K("QK_REPEAT_KEY", "Repeat", "Repeats the last pressed key", alias=["QK_REP"]),
    K("QK_ALT_REPEAT_KEY", "Alt\nRepeat", "Alt repeats the last pressed key", alias=["QK_AREP"]),
    K("QK_LAYER_LOCK", "Layer\nLock", "Locks the current layer", alias=["QK_LLCK"]),

    K("SH_T(kc)", "SH_T\n(kc)", "Tap for keycode, hold for swap hands", masked=True),
    K("SH_TOGG", "Swap\nToggle", "Toggle swap hands on/off"),
    K("SH_TT", "Swap\nTT", "Tap-toggle swap hands"),
    K("SH_MON", "Swap\nMom On", "Momentary swap on"),
    K("SH_MOFF", "Swap\nMom Off", "Momentary swap off"),
    K("SH_OFF", "Swap\nOff", "Turn swap hands off"),
    K("SH_ON", "Swap\nOn", "Turn swap hands on"),
    K("SH_OS", "Swap\nOS", "One-shot swap hands"),
]

KEYCODES_BACKLIGHT = [
    K("BL_TOGG", "BL\nToggle", "Turn the backlight on or off"),
    K("BL_STEP", "BL\nCycle", "Cycle through backlight levels"),
    K("BL_BRTG", "BL\nBreath", "Toggle backlight breathing"),
    K("BL_ON", "BL On", "Set the backlight to max brightness"),
    K("BL_OFF", "BL Off", "Turn the backlight off"),
    K("BL_INC", "BL +", "Increase the backlight level", alias=["BL_UP"]),
    K("BL_DEC", "BL - ", "Decrease the backlight level", alias=["BL_DOWN"]),

    K("RGB_TOG", "RGB\nToggle", "Toggle RGB lighting on or off", alias=["UG_TOGG"]),
    K("RGB_MOD", "RGB\nMode +", "Next RGB mode", alias=["UG_NEXT"]),
    K("RGB_RMOD", "RGB\nMode -", "Previous RGB mode", alias=["UG_PREV"]),
    K("RGB_HUI", "Hue +", "Increase hue", alias=["UG_HUEU"]),
    K("RGB_HUD", "Hue -", "Decrease hue", alias=["UG_HUED"]),
    K("RGB_SAI", "Sat +", "Increase saturation", alias=["UG_SATU"]),
    K("RGB_SAD", "Sat -", "Decrease saturation", alias=["UG_SATD"]),
    K("RGB_VAI", "Bright +", "Increase value", alias=["UG_VALU"]),
    K("RGB_VAD", "Bright -", "Decrease value", alias=["UG_VALD"]),
    K("RGB_SPI", "Effect +", "Increase RGB effect speed", alias=["UG_SPDU"]),
    K("RGB_SPD", "Effect -", "Decrease RGB effect speed", alias=["UG_SPDD"]),
    K("RGB_M_P", "RGB\nMode P", "RGB Mode: Plain"),
    K("RGB_M_B", "RGB\nMode B", "RGB Mode: Breathe"),
    K("RGB_M_R", "RGB\nMode R", "RGB Mode: Rainbow"),
    K("RGB_M_SW", "RGB\nMode SW", "RGB Mode: Swirl"),
    K("RGB_M_SN", "RGB\nMode SN", "RGB Mode: Snake"),
    K("RGB_M_K", "RGB\nMode K", "RGB Mode: Knight Rider"),
    K("RGB_M_X", "RGB\nMode X", "RGB Mode: Christmas"),
    K("RGB_M_G", "RGB\nMode G", "RGB Mode: Gradient"),
    K("RGB_M_T", "RGB\nMode T", "RGB Mode: Test"),
]

KEYCODES_MEDIA = [
    K("KC_PWR", "Power", "System Power Down", alias=["KC_SYSTEM_POWER"]),
    K("KC_SLEP", "Sleep", "System Sleep", alias=["KC_SYSTEM_SLEEP"]),
    K("KC_WAKE", "Wake", "System Wake", alias=["KC_SYSTEM_WAKE"]),
    K("KC_EXEC", "Exec", "Execute", alias=["KC_EXECUTE"]),
    K("KC_HELP", "Help"),
    K("KC_SLCT", "Select", alias=["KC_SELECT"]),
    K("KC_STOP", "Stop"),
    K("KC_AGIN", "Again", alias=["KC_AGAIN"]),
    K("KC_UNDO", "Undo"),
    K("KC_CUT", "Cut"),
    K("KC_COPY", "Copy"),
    K("KC_PSTE", "Paste", alias=["KC_PASTE"]),
    K("KC_FIND", "Find"),

    K("KC_CALC", "Calc", "Launch Calculator (Windows)", alias=["KC_CALCULATOR"]),
    K("KC_MAIL", "Mail", "Launch Mail (Windows)"),
    K("KC_MSEL", "Media\nPlayer", "Launch Media Player (Windows)", alias=["KC_MEDIA_SELECT"]),
    K("KC_MYCM", "My\nPC", "Launch My Computer (Windows)", alias=["KC_MY_COMPUTER"]),
    K("KC_WSCH", "Browser\nSearch", "Browser Search (Windows)", alias=["KC_WWW_SEARCH"]),
    K("KC_WHOM", "Browser\nHome", "Browser Home (Windows)", alias=["KC_WWW_HOME"]),
    K("KC_WBAK", "Browser\nBack", "Browser Back (Windows)", alias=["KC_WWW_BACK"]),
    K("KC_WFWD", "Browser\nForward", "Browser Forward (Windows)", alias=["KC_WWW_FORWARD"]),
    K("KC_WSTP", "Browser\nStop", "Browser Stop (Windows)", alias=["KC_WWW_STOP"]),
    K("KC_WREF", "Browser\nRefresh", "Browser Refresh (Windows)", alias=["KC_WWW_REFRESH"]),
    K("KC_WFAV", "Browser\nFav.", "Browser Favorites (Windows)", alias=["KC_WWW_FAVORITES"]),
    K("KC_BRIU", "Bright.\nUp", "Increase the brightness of screen (Laptop)", alias=["KC_BRIGHTNESS_UP"]),
    K("KC_BRID", "Bright.\nDown", "Decrease the brightness of screen (Laptop)", alias=["KC_BRIGHTNESS_DOWN"]),

    K("KC_MPRV", "Media\nPrev", "Previous Track", alias=["KC_MEDIA_PREV_TRACK"]),
    K("KC_MNXT", "Media\nNext", "Next Track", alias=["KC_MEDIA_NEXT_TRACK"]),
    K("KC_MUTE", "Mute", "Mute Audio", alias=["KC_AUDIO_MUTE"]),
    K("KC_VOLD", "Vol -", "Volume Down", alias=["KC_AUDIO_VOL_DOWN"]),
    K("KC_VOLU", "Vol +", "Volume Up", alias=["KC_AUDIO_VOL_UP"]),
    K("KC__MUTE", "Mute\nAlt", "Mute Alternate"),
    K("KC__VOLDOWN", "Vol -\nAlt", "Volume Down Alternate"),
    K("KC__VOLUP", "Vol +\nAlt", "Volume Up Alternate"),
    K("KC_MSTP", "Media\nStop", alias=["KC_MEDIA_STOP"]),
    K("KC_MPLY", "Media\nPlay", "Play/Pause", alias=["KC_MEDIA_PLAY_PAUSE"]),
    K("KC_MRWD", "Prev\nTrack\n(macOS)", "Previous Track / Rewind (macOS)", alias=["KC_MEDIA_REWIND"]),
    K("KC_MFFD", "Next\nTrack\n(macOS)", "Next Track / Fast Forward (macOS)", alias=["KC_MEDIA_FAST_FORWARD"]),
    K("KC_EJCT", "Eject", "Eject (macOS)", alias=["KC_MEDIA_EJECT"]),

    K("KC_MS_U", "Mouse\nUp", "Mouse Cursor Up", alias=["KC_MS_UP"]),
    K("KC_MS_D", "Mouse\nDown", "Mouse Cursor Down", alias=["KC_MS_DOWN"]),
    K("KC_MS_L", "Mouse\nLeft", "Mouse Cursor Left", alias=["KC_MS_LEFT"]),
    K("KC_MS_R", "Mouse\nRight", "Mouse Cursor Right", alias=["KC_MS_RIGHT"]),
    K("KC_WH_U", "Mouse\nWheel\nUp", alias=["KC_MS_WH_UP"]),
    K("KC_WH_D", "Mouse\nWheel\nDown", alias=["KC_MS_WH_DOWN"]),
    K("KC_WH_L", "Mouse\nWheel\nLeft", alias=["KC_MS_WH_LEFT"]),
    K("KC_WH_R", "Mouse\nWheel\nRight", alias=["KC_MS_WH_RIGHT"]),

    K("KC_LCAP", "Locking\nCaps", "Locking Caps Lock", alias=["KC_LOCKING_CAPS"]),
    K("KC_LNUM", "Locking\nNum", "Locking Num Lock", alias=["KC_LOCKING_NUM"]),
    K("KC_LSCR", "Locking\nScroll", "Locking Scroll Lock", alias=["KC_LOCKING_SCROLL"]),
]
KEYCODES_MEDIA += [K("KC_BTN{}".format(x), "Mouse\n{}".format(x), "Mouse Button {}".format(x),
                     alias=["KC_MS_BTN{}".format(x)]) for x in range(1, 9)]
KEYCODES_MEDIA += [K("KC_ACL{}".format(x), "Mouse\nAccel\n{}".format(x), "Set mouse acceleration to {}".format(x),
                     alias=["KC_MS_ACCEL{}".format(x)]) for x in range(3)]

LAYER_DESCRIPTIONS = {
    "TO": "Turns on layer and turns off all other layers, except the default layer",
    "MO": "Momentarily turn on layer when pressed (requires KC_TRNS on destination layer)",
    "DF": "Set the base (default) layer",
    "TG": "Toggle layer on or off",
    "OSL": "Momentarily activates layer until a key is pressed",
    "TT": "Normally acts like MO unless it's tapped multiple times, which toggles layer on",
    "PDF": "Persistently set the base (default) layer",
}

KEYCODES_LAYERS = []
for fn in LAYER_FUNCTIONS:
    for layer in range(MAX_LAYERS):
        lbl = "{}({})".format(fn, layer)
        KEYCODES_LAYERS.append(K(lbl, lbl, LAYER_DESCRIPTIONS[fn], kind="layer", subkind=fn, idx=layer))
for layer in range(MAX_LAYER_TAP):
    KEYCODES_LAYERS.append(K("LT{}(kc)".format(layer), "LT {}\n(kc)".format(layer),
                             "kc on tap, switch to layer {} while held".format(layer), masked=True))

KEYCODES_MACRO = [K("M{}".format(x), "M{}".format(x), kind="macro", subkind="M", idx=x) for x in range(MAX_MACROS)]

KEYCODES_TAP_DANCE = [K("TD({})".format(x), "TD({})".format(x), "Tap dance keycode", kind="tapdance", subkind="TD",
                        idx=x) for x in range(MAX_TAP_DANCES)]

KEYCODES_USER = [K("USER{:02}".format(x), "USER{:02}".format(x), "User keycode {}".format(x), kind="custom", idx=x)
                 for x in range(MAX_USER_KEYCODES)]

KEYCODES = (KEYCODES_SPECIAL + KEYCODES_BASIC + KEYCODES_BASIC_NUMPAD + KEYCODES_BASIC_NAV + KEYCODES_SHIFTED +
            KEYCODES_ISO + KEYCODES_BOOT + KEYCODES_MODIFIERS + KEYCODES_QUANTUM + KEYCODES_BACKLIGHT +
            KEYCODES_MEDIA + KEYCODES_LAYERS + KEYCODES_MACRO + KEYCODES_TAP_DANCE + KEYCODES_USER)

K = None

BASE_TABLE = KeyTable(KEYCODES)


def create_custom_user_keycodes(custom_keycodes, base=BASE_TABLE):
    """ Returns an overlay on base holding the device's custom keycodes """

    overlay = KeyTable(parent=base)
    for x, c_keycode in enumerate(custom_keycodes or []):
        if x >= MAX_USER_KEYCODES:
            logging.warning("ignoring %d custom keycodes past USER%02d", len(custom_keycodes) - x,
                            MAX_USER_KEYCODES - 1)
            break
        if not c_keycode:
            continue

        default_name = "USER{:02}".format(x)
        name = c_keycode.get("name") or default_name
        if name != default_name and (base.known(name) or overlay.known(name)):
            logging.warning("custom keycode %s at %s collides with an existing keycode, keeping %s",
                            name, default_name, default_name)
            name = default_name

        short_name = c_keycode.get("shortName") or name
        kc = Keycode(name, short_name, c_keycode.get("title") or name, code=base.find(default_name).code,
                     alias=[default_name] if name != default_name else None, kind="custom", idx=x)
        overlay.add(kc)
    return overlay


def generate_all_keycodes(keyboard):
    """ Builds the keycode codec for one connected keyboard """

    custom_keycodes = getattr(keyboard, "custom_keycodes", None)
    codec = KeycodeCodec(create_custom_user_keycodes(custom_keycodes))
    logging.debug("keycodes: %d custom keycodes loaded", len(codec.table.by_id))
    return codec
