# SPDX-License-Identifier: GPL-2.0-or-later
"""
Raw HID transport.

A TransportChannel owns one open HID device and at most one outstanding
request. Requests are strictly serialized: transact() holds the channel
lock from the moment the frame is written until its single response report
has been read (or the read timed out), so a second caller can never
consume the first caller's response. Callers that issue commands from
several threads simply queue up on the lock.

Firmware responses carry no request id. When a read times out the late
response may still arrive afterwards, so the channel drains any buffered
input before the next request goes out.
"""
import logging
import threading
import time

import hidproxy
import storage
from util import MSG_LEN, hexdump

# poll interval when discarding late responses
DRAIN_TIMEOUT_MS = 1


class TransportError(Exception):
    pass


class NoDeviceSelected(TransportError):
    pass


class DeviceNotOpen(TransportError):
    pass


class ResponseTimeout(TransportError):
    pass


class TransportChannel:

    def __init__(self, dev=None, msg_len=MSG_LEN, timeout_ms=None, retries=None):
        self.dev = dev
        self.desc = None
        self.msg_len = msg_len
        self.timeout_ms = timeout_ms
        self.retries = retries
        # close() takes the lock too, so it waits for the request in flight
        self._lock = threading.RLock()
        self._stale = False
        self.listening = dev is not None

    @property
    def is_open(self):
        return self.dev is not None

    def open(self, filters):
        """ Opens the single HID device matching any of the filters """

        found = hidproxy.find_devices(filters)
        if len(found) != 1:
            logging.warning("open: %d devices match %s, expected exactly one", len(found), filters)
            raise NoDeviceSelected("{} devices match, expected exactly one".format(len(found)))

        desc = found[0]
        with self._lock:
            if self.dev is None or self.desc is None or self.desc["path"] != desc["path"]:
                self.close()
                dev = hidproxy.hid.device()
                dev.open_path(desc["path"])
                self.dev = dev
                logging.info("Opened VID={:04X}, PID={:04X}, serial={}, path={}".format(
                    desc["vendor_id"], desc["product_id"], desc.get("serial_number"), desc["path"]))
            self.desc = desc
            self._stale = False
            self.listening = True
        return desc

    def close(self):
        with self._lock:
            self.listening = False
            if self.dev is None:
                return
            try:
                self.dev.close()
            finally:
                self.dev = None
                self.desc = None

    def _timeout_ms(self, timeout_ms):
        if timeout_ms is not None:
            return timeout_ms
        if self.timeout_ms is not None:
            return self.timeout_ms
        return storage.get_int("transport/timeout_ms")

    def _retries(self):
        if self.retries is not None:
            return self.retries
        return max(1, storage.get_int("transport/retries"))

    def _drain(self, dev):
        # hidapi treats timeout_ms=0 as "wait forever"
        while dev.read(self.msg_len, timeout_ms=DRAIN_TIMEOUT_MS):
            logging.debug("transact: discarding late response")
        self._stale = False

    def transact(self, frame, timeout_ms=None):
        """ Writes one frame and returns the single response report """

        if len(frame) != self.msg_len:
            raise ValueError("frame must be exactly {} bytes, got {}".format(self.msg_len, len(frame)))
        timeout_ms = self._timeout_ms(timeout_ms)

        with self._lock:
            dev = self.dev
            if dev is None or not self.listening:
                raise DeviceNotOpen("device is not open")
            if self._stale:
                self._drain(dev)
            return self._roundtrip(dev, bytes(frame), timeout_ms, self._retries())

    def _roundtrip(self, dev, frame, timeout_ms, retries):
        attempt = 0
        while attempt < retries:
            attempt += 1
            if attempt > 1:
                time.sleep(0.5)
            try:
                # add 00 at start for hidapi report id
                logging.debug("transact attempt %d: writing %s", attempt, hexdump(frame))
                written = dev.write(b"\x00" + frame)
                if self.dev is not dev:
                    raise DeviceNotOpen("device was closed during the request")
                if written != self.msg_len + 1:
                    logging.warning("transact: write returned %d, expected %d", written, self.msg_len + 1)
                    continue

                data = bytes(dev.read(self.msg_len, timeout_ms=timeout_ms))
            except OSError as e:
                logging.warning("transact: OSError: %s", e)
                continue

            if not data:
                logging.warning("transact: no response within %d ms", timeout_ms)
                self._stale = True
                continue
            logging.debug("transact: received %s", hexdump(data))
            return data

        logging.error("transact: failed to communicate after %d attempts", attempt)
        if self._stale:
            raise ResponseTimeout("no response after {} attempts of {} ms".format(attempt, timeout_ms))
        raise TransportError("failed to communicate with the device")
