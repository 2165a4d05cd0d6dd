# SPDX-License-Identifier: GPL-2.0-or-later
import logging

from protocol.constants import CMD_VIA_VIAL_PREFIX
from protocol.decoder import decode_response
from protocol.transport import TransportChannel
from util import MSG_LEN


class ArgsTooLarge(ValueError):
    pass


class ProtocolError(Exception):
    """ The device answered, but not in a way the protocol allows """
    pass


def build_frame(cmd, args=b"", msg_len=MSG_LEN):
    """ Zero-filled frame with the command id at byte 0 and args from byte 1 """

    args = bytes(args)
    if len(args) > msg_len - 1:
        raise ArgsTooLarge("{} argument bytes do not fit in a {}-byte frame".format(len(args), msg_len))
    frame = bytearray(msg_len)
    frame[0] = cmd
    frame[1:1 + len(args)] = args
    return bytes(frame)


class CommandDispatcher:

    def __init__(self, channel):
        if not isinstance(channel, TransportChannel):
            channel = TransportChannel(channel)
        self.channel = channel

    @property
    def msg_len(self):
        return self.channel.msg_len

    def send(self, cmd, args=b"", decode=None, timeout_ms=None):
        frame = build_frame(cmd, args, self.msg_len)
        data = self.channel.transact(frame, timeout_ms=timeout_ms)
        return decode_response(data, decode)

    def send_vial(self, subcmd, args=b"", decode=None, timeout_ms=None):
        logging.debug("send_vial: subcmd 0x%02X", subcmd)
        return self.send(CMD_VIA_VIAL_PREFIX, bytes([subcmd]) + bytes(args), decode, timeout_ms)
