import struct
import threading
import time
import unittest
from unittest import mock

import hidproxy
import storage
from protocol.buffer import BufferTransfer
from protocol.decoder import DecodeSpec, decode_response
from protocol.dispatcher import ArgsTooLarge, CommandDispatcher, ProtocolError, build_frame
from protocol.dynamic import DynamicEntryFetcher, KeyOverrideEntry, TapDanceEntry
from protocol.transport import (DRAIN_TIMEOUT_MS, DeviceNotOpen, NoDeviceSelected, ResponseTimeout, TransportChannel,
                                TransportError)
from util import MSG_LEN


class ScriptedDevice:
    """ Answers every write with the next scripted reply; None means stay silent """

    def __init__(self, replies=None):
        self.replies = list(replies or [])
        self.inbox = []
        self.written = []
        self.path = None

    def open_path(self, path):
        self.path = path

    def close(self):
        pass

    def write(self, data):
        self.written.append(bytes(data[1:]))
        reply = self.replies.pop(0) if self.replies else None
        if reply is not None:
            reply = bytes.fromhex(reply) if isinstance(reply, str) else bytes(reply)
            self.inbox.append(reply + b"\x00" * (MSG_LEN - len(reply)))
        return len(data)

    def read(self, size, timeout_ms=0):
        if not self.inbox:
            # hidapi blocks forever on an empty queue when timeout_ms is 0
            if timeout_ms <= 0:
                raise AssertionError("read without a timeout would block forever")
            return []
        return list(self.inbox.pop(0)[:size])


class EchoDevice(ScriptedDevice):
    """ Echoes each frame back, and fails if a second request arrives before the first was answered """

    def __init__(self):
        super().__init__()
        self.outstanding = False
        self.overlapped = False

    def write(self, data):
        if self.outstanding:
            self.overlapped = True
        self.outstanding = True
        self.written.append(bytes(data[1:]))
        self.inbox.append(bytes(data[1:]))
        return len(data)

    def read(self, size, timeout_ms=0):
        # widen the window for a competing writer
        time.sleep(0.001)
        self.outstanding = False
        return super().read(size, timeout_ms)


class BufferDevice(ScriptedDevice):
    """ Serves slices of a memory buffer for requests [cmd] [offset:2 LE], payload after a 2-byte header """

    def __init__(self, memory):
        super().__init__()
        self.memory = memory

    def write(self, data):
        frame = bytes(data[1:])
        self.written.append(frame)
        offset = struct.unpack("<H", frame[1:3])[0]
        self.inbox.append(frame[:2] + self.memory[offset:offset + MSG_LEN - 2])
        return len(data)


def frame(hexstr):
    data = bytes.fromhex(hexstr)
    return data + b"\x00" * (MSG_LEN - len(data))


class TestDecoder(unittest.TestCase):

    def setUp(self):
        self.data = bytes.fromhex("0102030405060708090A") + b"\x00" * 22

    def test_raw(self):
        self.assertEqual(decode_response(self.data), self.data)
        self.assertEqual(decode_response(self.data, DecodeSpec.raw()), self.data)

    def test_byte(self):
        self.assertEqual(decode_response(self.data, DecodeSpec.byte(1)), 0x02)

    def test_uint16(self):
        self.assertEqual(decode_response(self.data, DecodeSpec.uint16(1)), 0x0302)
        self.assertEqual(decode_response(self.data, DecodeSpec.uint16(1, bigendian=True)), 0x0203)

    def test_uint32(self):
        self.assertEqual(decode_response(self.data, DecodeSpec.uint32(2)), 0x06050403)
        self.assertEqual(decode_response(self.data, DecodeSpec.uint32(2, bigendian=True)), 0x03040506)

    def test_unpack(self):
        self.assertEqual(decode_response(self.data, DecodeSpec.unpack("<BH")), (0x01, 0x0302))
        self.assertEqual(decode_response(self.data, DecodeSpec.unpack(">HH")), (0x0102, 0x0304))
        self.assertEqual(decode_response(self.data, DecodeSpec.unpack("IQ")), (0x04030201, 0x00000A0908070605))

    def test_unsupported_width(self):
        for fmt in ["<f", "<BHx", "", "<"]:
            with self.assertRaises(ValueError, msg=fmt):
                DecodeSpec.unpack(fmt)

    def test_too_short(self):
        with self.assertRaises(ValueError):
            decode_response(b"\x01\x02", DecodeSpec.uint32(0))
        with self.assertRaises(ValueError):
            decode_response(b"\x01\x02", DecodeSpec.unpack("<IQ"))


class TestDispatcher(unittest.TestCase):

    def test_build_frame(self):
        self.assertEqual(build_frame(0x05, b"\x01\x02"), frame("050102"))
        self.assertEqual(len(build_frame(0x01)), MSG_LEN)
        self.assertEqual(build_frame(0x01, b"\xAA" * (MSG_LEN - 1))[-1], 0xAA)
        with self.assertRaises(ArgsTooLarge):
            build_frame(0x01, b"\xAA" * MSG_LEN)

    def test_send(self):
        dev = ScriptedDevice(["010000000C"])
        dispatcher = CommandDispatcher(TransportChannel(dev, timeout_ms=10))
        self.assertEqual(dispatcher.send(0x01, decode=DecodeSpec.uint16(3, bigendian=True)), 12)
        self.assertEqual(dev.written, [frame("01")])

    def test_send_vial(self):
        dev = ScriptedDevice(["07000000"])
        dispatcher = CommandDispatcher(TransportChannel(dev, timeout_ms=10))
        self.assertEqual(dispatcher.send_vial(0x01, decode=DecodeSpec.unpack("<I")), (7,))
        self.assertEqual(dev.written, [frame("FE01")])

    def test_send_too_large(self):
        dev = ScriptedDevice()
        dispatcher = CommandDispatcher(TransportChannel(dev, timeout_ms=10))
        with self.assertRaises(ArgsTooLarge):
            dispatcher.send_vial(0x02, b"\x00" * (MSG_LEN - 1))
        self.assertEqual(dev.written, [])


class TestTransport(unittest.TestCase):

    def setUp(self):
        self.saved_devices = hidproxy.hid.devices
        self.saved_class = hidproxy.hid.device_class

    def tearDown(self):
        hidproxy.hid.devices = self.saved_devices
        hidproxy.hid.device_class = self.saved_class
        storage.reset("transport/timeout_ms")

    @staticmethod
    def desc(path, usage_page=0xFF60, serial="ABC123"):
        return {"path": path, "vendor_id": 0xFEED, "product_id": 0x1234, "usage_page": usage_page,
                "usage": 0x61, "serial_number": serial}

    @staticmethod
    def filters(**extra):
        filt = {"vendor_id": 0xFEED, "product_id": 0x1234, "usage_page": 0xFF60, "usage": 0x61}
        filt.update(extra)
        return [filt]

    def test_open(self):
        hidproxy.hid.device_class = ScriptedDevice
        hidproxy.hid.devices = [self.desc(b"/dev/a"), self.desc(b"/dev/a"), self.desc(b"/dev/b", usage_page=0x01)]
        channel = TransportChannel()
        desc = channel.open(self.filters())
        self.assertEqual(desc["path"], b"/dev/a")
        self.assertTrue(channel.is_open)
        self.assertEqual(channel.dev.path, b"/dev/a")
        channel.close()
        self.assertFalse(channel.is_open)

    def test_open_no_device(self):
        hidproxy.hid.devices = []
        with self.assertRaises(NoDeviceSelected):
            TransportChannel().open(self.filters())

    def test_open_ambiguous(self):
        hidproxy.hid.devices = [self.desc(b"/dev/a"), self.desc(b"/dev/b", serial="XYZ789")]
        with self.assertRaises(NoDeviceSelected):
            TransportChannel().open(self.filters())

        hidproxy.hid.device_class = ScriptedDevice
        channel = TransportChannel()
        self.assertEqual(channel.open(self.filters(serial_number="XYZ"))["path"], b"/dev/b")

    def test_not_open(self):
        with self.assertRaises(DeviceNotOpen):
            TransportChannel(timeout_ms=10).transact(frame("01"))

        channel = TransportChannel(ScriptedDevice(), timeout_ms=10)
        channel.close()
        with self.assertRaises(DeviceNotOpen):
            channel.transact(frame("01"))

    def test_frame_size(self):
        with self.assertRaises(ValueError):
            TransportChannel(ScriptedDevice(), timeout_ms=10).transact(b"\x01")

    def test_timeout(self):
        channel = TransportChannel(ScriptedDevice([None]), timeout_ms=10)
        with self.assertRaises(ResponseTimeout):
            channel.transact(frame("01"))
        self.assertTrue(issubclass(ResponseTimeout, TransportError))

    def test_late_response_discarded(self):
        dev = ScriptedDevice([None, "0202"])
        channel = TransportChannel(dev, timeout_ms=10)
        with self.assertRaises(ResponseTimeout):
            channel.transact(frame("01"))

        # the answer to the first request shows up after we gave up on it
        dev.inbox.append(frame("0101"))
        self.assertEqual(channel.transact(frame("02")), frame("0202"))

    def test_drain_polls_with_timeout(self):
        dev = ScriptedDevice([None, "0202"])
        channel = TransportChannel(dev, timeout_ms=10)
        with self.assertRaises(ResponseTimeout):
            channel.transact(frame("01"))

        timeouts = []
        read = dev.read

        def recording_read(size, timeout_ms=0):
            timeouts.append(timeout_ms)
            return read(size, timeout_ms)

        dev.read = recording_read
        # nothing late arrived, so the drain read finds an empty queue
        self.assertEqual(channel.transact(frame("02")), frame("0202"))
        self.assertEqual(timeouts, [DRAIN_TIMEOUT_MS, 10])
        self.assertGreater(DRAIN_TIMEOUT_MS, 0)

    def test_close_during_request(self):
        dev = ScriptedDevice(["0101"])
        channel = TransportChannel(dev, timeout_ms=10)
        write = dev.write

        def closing_write(data):
            written = write(data)
            channel.close()
            return written

        dev.write = closing_write
        with self.assertRaises(DeviceNotOpen):
            channel.transact(frame("01"))
        self.assertFalse(channel.is_open)

    def test_close_waits_for_request(self):
        dev = EchoDevice()
        channel = TransportChannel(dev, timeout_ms=10)
        entered = threading.Event()
        release = threading.Event()
        write = dev.write

        def slow_write(data):
            entered.set()
            release.wait(5)
            return write(data)

        dev.write = slow_write
        results = []
        worker = threading.Thread(target=lambda: results.append(channel.transact(frame("0101"))))
        worker.start()
        entered.wait(5)

        closer = threading.Thread(target=channel.close)
        closer.start()
        closer.join(0.05)
        # close is blocked behind the request holding the lock
        self.assertTrue(closer.is_alive())
        self.assertTrue(channel.is_open)

        release.set()
        worker.join(5)
        closer.join(5)
        self.assertEqual(results, [frame("0101")])
        self.assertFalse(channel.is_open)

    @mock.patch("protocol.transport.time.sleep")
    def test_retry(self, sleep):
        dev = ScriptedDevice([None, "0101"])
        channel = TransportChannel(dev, timeout_ms=10, retries=2)
        self.assertEqual(channel.transact(frame("01")), frame("0101"))
        self.assertEqual(dev.written, [frame("01"), frame("01")])
        sleep.assert_called_once()

    def test_short_write(self):
        dev = ScriptedDevice(["0101"])
        dev.write = lambda data: 3
        with self.assertRaises(TransportError):
            TransportChannel(dev, timeout_ms=10).transact(frame("01"))

    def test_timeout_from_settings(self):
        storage.set("transport/timeout_ms", 250)
        self.assertEqual(TransportChannel(ScriptedDevice())._timeout_ms(None), 250)
        self.assertEqual(TransportChannel(ScriptedDevice(), timeout_ms=5)._timeout_ms(None), 5)
        storage.reset("transport/timeout_ms")
        self.assertEqual(TransportChannel(ScriptedDevice())._timeout_ms(None), 1000)

    def test_serialized(self):
        """ Tests that concurrent callers never interleave request and response """

        dev = EchoDevice()
        channel = TransportChannel(dev, timeout_ms=100)
        results = {}

        def worker(tag):
            out = []
            for x in range(20):
                out.append(channel.transact(bytes([tag, x]) + b"\x00" * (MSG_LEN - 2)))
            results[tag] = out

        threads = [threading.Thread(target=worker, args=(tag,)) for tag in (1, 2, 3)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        self.assertFalse(dev.overlapped)
        for tag in (1, 2, 3):
            self.assertEqual([r[:2] for r in results[tag]], [bytes([tag, x]) for x in range(20)])


class TestBufferTransfer(unittest.TestCase):

    def test_read(self):
        memory = bytes(range(40))
        dev = BufferDevice(memory)
        buffers = BufferTransfer(CommandDispatcher(TransportChannel(dev, timeout_ms=10)))
        self.assertEqual(buffers.read(0x30, 40, slice_offset=2), memory)
        # 30 payload bytes per response
        self.assertEqual([f[:3] for f in dev.written], [b"\x30\x00\x00", b"\x30\x1e\x00"])

    def test_read_early_stop(self):
        memory = b"\x01\x00" + b"\x02" * 60
        dev = BufferDevice(memory)
        buffers = BufferTransfer(CommandDispatcher(TransportChannel(dev, timeout_ms=10)))
        data = buffers.read(0x30, 60, slice_offset=2, early_stop=lambda buf: buf.count(0) >= 1)
        self.assertEqual(len(dev.written), 1)
        self.assertEqual(data[:30], memory[:30])
        self.assertEqual(data[30:], b"\x00" * 30)

    def test_read_without_header(self):
        dev = ScriptedDevice(["0A0B0C"])
        buffers = BufferTransfer(CommandDispatcher(TransportChannel(dev, timeout_ms=10)))
        self.assertEqual(buffers.read(0x31, 3), b"\x0A\x0B\x0C")
        self.assertEqual(dev.written, [frame("31")])

    def test_read_needs_raw(self):
        dev = ScriptedDevice(["01"])
        buffers = BufferTransfer(CommandDispatcher(TransportChannel(dev, timeout_ms=10)))
        with self.assertRaises(TypeError):
            buffers.read(0x31, 3, decode=DecodeSpec.byte(0))

    def test_write(self):
        dev = ScriptedDevice(["", "", ""])
        buffers = BufferTransfer(CommandDispatcher(TransportChannel(dev, timeout_ms=10)))
        source = bytes(range(1, 51))
        buffers.write(0x0F, 60, source)

        self.assertEqual(len(dev.written), 3)
        self.assertEqual(dev.written[0][:3], b"\x0F\x00\x00")
        self.assertEqual(dev.written[0][3:31], source[:28])
        self.assertEqual(dev.written[1][:3], b"\x0F\x1C\x00")
        self.assertEqual(dev.written[1][3:25], source[28:50])
        self.assertEqual(dev.written[1][25:31], b"\x00" * 6)
        self.assertEqual(dev.written[2][:3], b"\x0F\x38\x00")
        self.assertEqual(dev.written[2][3:7], b"\x00" * 4)

    def test_write_size_prefix(self):
        dev = ScriptedDevice(["", ""])
        buffers = BufferTransfer(CommandDispatcher(TransportChannel(dev, timeout_ms=10)))
        buffers.write(0x0F, 30, b"\x01" * 30, byteorder="big", size_prefix=True)
        self.assertEqual(dev.written[0][:4], b"\x0F\x00\x00\x1C")
        self.assertEqual(dev.written[1][:4], b"\x0F\x00\x1C\x02")


class TestDynamicEntries(unittest.TestCase):

    def test_fetch_all_in_order(self):
        dev = ScriptedDevice(["00", "00", "00"])
        fetcher = DynamicEntryFetcher(CommandDispatcher(TransportChannel(dev, timeout_ms=10)))
        fetcher.fetch_all(0x01, 3)
        self.assertEqual(dev.written, [frame("FE0E0100"), frame("FE0E0101"), frame("FE0E0102")])

    def test_entry_counts(self):
        dev = ScriptedDevice(["080402"])
        fetcher = DynamicEntryFetcher(CommandDispatcher(TransportChannel(dev, timeout_ms=10)))
        self.assertEqual(fetcher.entry_counts(), (8, 4, 2))
        self.assertEqual(dev.written, [frame("FE0E00")])

    def test_fetch_entries(self):
        entry = KeyOverrideEntry([4, 5, 0xFFFF, 1, 0, 2, 0x80])
        dev = ScriptedDevice([b"\x00" + entry.serialize()])
        fetcher = DynamicEntryFetcher(CommandDispatcher(TransportChannel(dev, timeout_ms=10)))
        entries = fetcher.fetch_entries("key_override", 1)
        self.assertEqual(entries, [entry])
        self.assertTrue(entries[0].enabled)
        self.assertEqual(entries[0].layers, 0xFFFF)

    def test_fetch_entries_failure(self):
        dev = ScriptedDevice(["00", "01"])
        fetcher = DynamicEntryFetcher(CommandDispatcher(TransportChannel(dev, timeout_ms=10)))
        with self.assertRaises(ProtocolError):
            fetcher.fetch_entries("tap_dance", 2)

    def test_set_entry(self):
        dev = ScriptedDevice(["00"])
        fetcher = DynamicEntryFetcher(CommandDispatcher(TransportChannel(dev, timeout_ms=10)))
        fetcher.set_entry("tap_dance", 3, TapDanceEntry([4, 0, 0, 0, 200]))
        self.assertEqual(dev.written, [frame("FE0E0203" + "0400" + "0000" * 3 + "C800")])
