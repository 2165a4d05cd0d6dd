# SPDX-License-Identifier: GPL-2.0-or-later
"""
Chunked transfers of buffers larger than one report.

read() pulls a device buffer with as many round trips as needed: every
request carries the 16-bit chunk offset, every response carries payload
starting at slice_offset. write() pushes a buffer in MSG_LEN - 4 byte
chunks, each prefixed by its byte offset. Both run strictly one request at
a time on the dispatcher's channel.
"""
import logging

from util import chunks

# offset (2) + optional size (1) + one spare byte after the command id
WRITE_OVERHEAD = 4


class BufferTransfer:

    def __init__(self, dispatcher):
        self.dispatcher = dispatcher

    @property
    def msg_len(self):
        return self.dispatcher.msg_len

    def read(self, cmd, total_size, decode=None, slice_offset=None, early_stop=None,
             byteorder="little", size_prefix=False):
        """ Reads total_size bytes, stopping early once early_stop(buffer_so_far) is true """

        start = slice_offset or 0
        step = self.msg_len - start
        buffer = bytearray(total_size)
        offset = 0
        chunk_offset = 0
        rounds = 0

        while offset < total_size:
            args = b""
            if slice_offset:
                args = chunk_offset.to_bytes(2, byteorder)
                if size_prefix:
                    args += bytes([min(step, total_size - offset)])

            data = self.dispatcher.send(cmd, args, decode)
            if not isinstance(data, (bytes, bytearray)):
                raise TypeError("buffer reads need raw responses, got {!r}".format(type(data)))
            rounds += 1

            count = min(len(data) - start, total_size - offset)
            if count <= 0:
                raise ValueError("response of {} bytes carries no payload after offset {}".format(len(data), start))
            buffer[offset:offset + count] = data[start:start + count]
            offset += count

            if early_stop is not None and early_stop(bytes(buffer[:offset])):
                logging.debug("read: cmd 0x%02X stopped early at %d/%d bytes", cmd, offset, total_size)
                break

            chunk_offset += step

        logging.debug("read: cmd 0x%02X fetched %d bytes in %d rounds", cmd, offset, rounds)
        return bytes(buffer)

    def write(self, cmd, total_size, source, byteorder="little", size_prefix=False):
        """ Writes total_size bytes of source, zero padded if source is shorter """

        source = bytes(source[:total_size])
        source += b"\x00" * (total_size - len(source))
        step = self.msg_len - WRITE_OVERHEAD

        for x, chunk in enumerate(chunks(source, step)):
            args = (x * step).to_bytes(2, byteorder)
            if size_prefix:
                args += bytes([len(chunk)])
            self.dispatcher.send(cmd, args + chunk)

        logging.debug("write: cmd 0x%02X pushed %d bytes", cmd, total_size)
