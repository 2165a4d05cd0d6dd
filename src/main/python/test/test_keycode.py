import unittest

from keycodes.keycodes import BASE_TABLE, BROKEN_LABEL, KeyDesc, Keycode, KeycodeCodec, KeyTable, \
    UnparseableKeycode, create_custom_user_keycodes, generate_all_keycodes, is_transparent
from keycodes.keycodes_v6 import keycodes_v6


class FakeKeyboard:

    layers = 4
    macro_count = 16

    def __init__(self, custom_keycodes=None):
        self.custom_keycodes = custom_keycodes


class TestKeycode(unittest.TestCase):

    def setUp(self):
        self.codec = KeycodeCodec()

    def test_serialize(self):
        covered = 0

        # at a minimum, we should be able to deserialize/serialize everything
        for x in range(2 ** 16):
            s = self.codec.stringify(x)
            d = self.codec.parse(s)
            self.assertEqual(d, x, "{} serialized into {} deserialized into {}".format(x, s, d))
            if not s.startswith("0x"):
                covered += 1
        print("{}/{} covered keycodes, which is {:.4f}%".format(covered, 2 ** 16, 100 * covered / 2 ** 16))

    def test_basic(self):
        self.assertEqual(self.codec.stringify(4), "KC_A")
        self.assertEqual(self.codec.parse("KC_A"), 4)
        self.assertEqual(self.codec.parse("KC_NO"), 0)
        self.assertEqual(self.codec.parse("XXXXXXX"), 0)
        self.assertEqual(self.codec.parse("KC_TRNS"), 1)
        self.assertEqual(self.codec.parse(0x1234), 0x1234)

    def test_composite(self):
        self.assertEqual(self.codec.stringify(0x0104), "LCTRL(KC_A)")
        self.assertEqual(self.codec.parse("LCTRL(KC_A)"), 0x0104)
        self.assertEqual(self.codec.parse("LCTL(KC_A)"), 0x0104)
        self.assertEqual(self.codec.parse("C(KC_A)"), 0x0104)
        self.assertEqual(self.codec.parse("LCTRL(KC_ESC)"), 0x0129)
        self.assertEqual(self.codec.parse("LT2(KC_SPC)"), 0x422C)
        self.assertEqual(self.codec.parse("LSFT_T(KC_ENTER)"), 0x2228)
        self.assertEqual(self.codec.stringify(0x2228), "LSFT_T(KC_ENTER)")
        self.assertEqual(self.codec.parse("LCTRL(kc)"), 0x0100)
        self.assertEqual(self.codec.stringify(0x0100), "LCTRL(KC_NO)")

    def test_composite_overlap_warns(self):
        with self.assertLogs(level="WARNING"):
            self.assertEqual(self.codec.parse("LCTRL(KC_EXLM)"), 0x0100 + 0x021E)

    def test_layers_macros_tap_dances(self):
        self.assertEqual(self.codec.parse("TO(0)"), 0x5200)
        self.assertEqual(self.codec.parse("MO(31)"), 0x523F)
        self.assertEqual(self.codec.parse("PDF(1)"), 0x52E1)
        self.assertEqual(self.codec.stringify(0x5221), "MO(1)")
        self.assertEqual(self.codec.parse("M126"), 0x777E)
        self.assertEqual(self.codec.parse("TD(254)"), 0x57FE)
        self.assertEqual(self.codec.parse("USER63"), 0x7E3F)
        for bad in ["MO(32)", "M127", "USER64"]:
            with self.assertRaises(UnparseableKeycode):
                self.codec.parse(bad)

    def test_sentinels(self):
        for value in ["", "-1", None, -1, 0xFF, "0xFF", "0xff"]:
            self.assertEqual(self.codec.parse(value), 0xFF, value)
            self.assertTrue(is_transparent(value), value)
        self.assertFalse(is_transparent("KC_A"))
        self.assertFalse(is_transparent(0))

    def test_literals(self):
        self.assertEqual(self.codec.parse("0x7404"), 0x7404)
        self.assertEqual(self.codec.parse("0X7404"), 0x7404)
        self.assertEqual(self.codec.parse("260"), 260)
        self.assertEqual(self.codec.stringify(0x7404), "0x7404")

    def test_unnamed_mask_byte(self):
        # 0x7400 names nothing, so AU_ON renders as its padded literal
        self.assertEqual(self.codec.parse("AU_ON"), 0x7480)
        self.assertEqual(self.codec.stringify(0x7480), "0x7480")
        self.assertEqual(self.codec.parse(self.codec.stringify(0x7480)), 0x7480)

    def test_unparseable(self):
        for bad in ["FOO", "LCTRL(KC_A", "LCTRL(FOO)", "FOO(KC_A)", "KC_A KC_B", "0x10000", "65536", 3.5, b"KC_A"]:
            with self.assertRaises(UnparseableKeycode, msg=repr(bad)):
                self.codec.parse(bad)
        self.assertTrue(issubclass(UnparseableKeycode, ValueError))

    def test_canonical(self):
        self.assertEqual(self.codec.canonical("KC_ESC"), "KC_ESCAPE")
        self.assertEqual(self.codec.canonical("KC_ESCAPE"), "KC_ESCAPE")
        self.assertEqual(self.codec.canonical("LCTL(kc)"), "LCTRL(kc)")
        self.assertEqual(self.codec.canonical("0x1234"), "0x1234")
        self.assertEqual(self.codec.canonical("NOT_A_KEY"), "NOT_A_KEY")
        for keycode in BASE_TABLE:
            for alias in keycode.alias:
                once = self.codec.canonical(alias)
                self.assertEqual(once, keycode.qmk_id)
                self.assertEqual(self.codec.canonical(once), once)

    def test_define(self):
        self.assertEqual(self.codec.define("KC_A").code, 4)
        self.assertEqual(self.codec.define("KC_ESC").qmk_id, "KC_ESCAPE")
        self.assertEqual(self.codec.define(4).qmk_id, "KC_A")
        self.assertEqual(self.codec.define("0x0004").qmk_id, "KC_A")
        self.assertEqual(self.codec.define("QK_BOOT").title, "Put the keyboard into bootloader mode for flashing")
        self.assertIsNone(self.codec.define("NOT_A_KEY"))
        self.assertIsNone(self.codec.define(0x7404))
        self.assertEqual(self.codec.define("4").qmk_id, "KC_A")
        for value in ["\u00b2", "\u0663", "4\u00b2"]:
            self.assertIsNone(self.codec.define(value), value)

    def test_parse_desc(self):
        self.assertEqual(self.codec.parse_desc("MO(3)"), KeyDesc("layer", "MO", 3))
        self.assertEqual(self.codec.parse_desc("PDF(2)"), KeyDesc("layer", "PDF", 2))
        self.assertEqual(self.codec.parse_desc("M5"), KeyDesc("macro", "M", 5))
        self.assertEqual(self.codec.parse_desc("TD(7)"), KeyDesc("tapdance", "TD", 7))

        desc = self.codec.parse_desc("KC_ESC")
        self.assertEqual(desc.kind, "key")
        self.assertEqual(desc.label, "Esc")
        self.assertEqual(desc.title, "KC_ESCAPE")

        desc = self.codec.parse_desc("LCTL(KC_A)")
        self.assertEqual(desc.kind, "key")
        self.assertEqual(desc.label, "LCtl\nA")

        self.assertEqual(self.codec.parse_desc("0x7404"), KeyDesc("key", label="0x7404"))

        desc = self.codec.parse_desc("TOTALLY_UNKNOWN")
        self.assertEqual(desc.kind, "broken")
        self.assertEqual(desc.label, BROKEN_LABEL)
        self.assertEqual(desc.title, "TOTALLY_UNKNOWN")


class TestCustomKeycodes(unittest.TestCase):

    def test_overlay(self):
        codec = KeycodeCodec(create_custom_user_keycodes([
            {"name": "MY_MACRO", "title": "Types my macro", "shortName": "Mine"},
            None,
            {"name": "KC_A"},
        ]))

        self.assertEqual(codec.parse("MY_MACRO"), 0x7E00)
        self.assertEqual(codec.stringify(0x7E00), "MY_MACRO")
        self.assertEqual(codec.canonical("USER00"), "MY_MACRO")
        self.assertEqual(codec.parse("USER00"), 0x7E00)
        self.assertEqual(codec.define("MY_MACRO").label, "Mine")
        self.assertEqual(codec.stringify(0x7E01), "USER01")

        # the colliding name is not installed, the slot keeps its default
        self.assertEqual(codec.stringify(0x7E02), "USER02")
        self.assertEqual(codec.parse("KC_A"), 4)

    def test_overlay_later_slot(self):
        codec = KeycodeCodec(create_custom_user_keycodes([None] * 5 + [{"name": "MY_MACRO"}]))

        self.assertEqual(codec.canonical("USER05"), "MY_MACRO")
        self.assertEqual(codec.parse("USER05"), 0x7E05)
        self.assertEqual(codec.parse("MY_MACRO"), codec.parse("USER05"))
        self.assertEqual(codec.stringify(0x7E05), "MY_MACRO")
        self.assertEqual(codec.stringify(0x7E00), "USER00")

    def test_base_table_untouched(self):
        create_custom_user_keycodes([{"name": "MY_MACRO"}])
        self.assertIsNone(BASE_TABLE.find("MY_MACRO"))
        self.assertEqual(KeycodeCodec().stringify(0x7E00), "USER00")
        with self.assertRaises(UnparseableKeycode):
            KeycodeCodec().parse("MY_MACRO")

    def test_collision_warns(self):
        with self.assertLogs(level="WARNING"):
            create_custom_user_keycodes([{"name": "KC_ESC"}])

    def test_too_many(self):
        names = [{"name": "CUSTOM_{}".format(x)} for x in range(70)]
        with self.assertLogs(level="WARNING"):
            codec = KeycodeCodec(create_custom_user_keycodes(names))
        self.assertEqual(codec.parse("CUSTOM_63"), 0x7E3F)
        with self.assertRaises(UnparseableKeycode):
            codec.parse("CUSTOM_64")

    def test_generate_all_keycodes(self):
        codec = generate_all_keycodes(FakeKeyboard([{"name": "MY_MACRO"}]))
        self.assertEqual(codec.stringify(0x7E00), "MY_MACRO")

        codec = generate_all_keycodes(FakeKeyboard())
        self.assertEqual(codec.stringify(0x7E00), "USER00")


class TestKeyTable(unittest.TestCase):

    def test_duplicate_id(self):
        with self.assertRaises(RuntimeError):
            KeyTable([Keycode("X_ONE", "1", code=0x1234), Keycode("X_ONE", "1", code=0x1235)])

    def test_shared_code(self):
        with self.assertRaises(RuntimeError):
            KeyTable([Keycode("X_ONE", "1", code=0x1234), Keycode("X_TWO", "2", code=0x1234)])

    def test_shared_alias(self):
        with self.assertRaises(RuntimeError):
            KeyTable([Keycode("X_ONE", "1", alias=["X"], code=0x1234),
                      Keycode("X_TWO", "2", alias=["X"], code=0x1235)])

    def test_mask_low_byte(self):
        with self.assertRaises(RuntimeError):
            KeyTable([Keycode("X_MASK(kc)", "X", masked=True, code=0x1201)])

    def test_masked_entries_are_templates(self):
        masked = [keycode for keycode in BASE_TABLE if keycode.masked]
        self.assertTrue(masked)
        for keycode in masked:
            self.assertTrue(keycode.qmk_id.endswith("(kc)"), keycode.qmk_id)
            self.assertEqual(keycode.code & 0xFF, 0, keycode.qmk_id)
        self.assertFalse(hasattr(keycodes_v6, "masked"))

    def test_unknown_constant(self):
        with self.assertRaises(RuntimeError):
            Keycode("NOT_A_QMK_CONSTANT", "?")

    def test_parent_lookup(self):
        child = KeyTable([Keycode("X_ONE", "1", alias=["X1"], code=0x1234)], parent=BASE_TABLE)
        self.assertEqual(child.find("X1").code, 0x1234)
        self.assertEqual(child.find("KC_ESC").code, 0x29)
        self.assertEqual(child.find_code(0x29).qmk_id, "KC_ESCAPE")
        self.assertTrue(child.known("X1"))
        self.assertFalse(BASE_TABLE.known("X1"))
