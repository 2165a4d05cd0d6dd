# SPDX-License-Identifier: GPL-2.0-or-later
"""
Response frame decoding.

A DecodeSpec says how to read one response report:

    DecodeSpec.raw()                  -> the whole frame as bytes (default)
    DecodeSpec.byte(1)                -> frame[1]
    DecodeSpec.uint16(1, bigendian=True)
    DecodeSpec.uint32(2)
    DecodeSpec.unpack("<BHH")         -> tuple read from offset 0

Unpack formats use the struct width codes B (1 byte), H (2), I (4) and
Q (8), optionally preceded by "<" (little-endian, the default) or ">".
"""
import struct

RAW = "raw"
BYTE = "byte"
UINT16 = "uint16"
UINT32 = "uint32"
UNPACK = "unpack"

UNPACK_WIDTHS = {"B": 1, "H": 2, "I": 4, "Q": 8}


class DecodeSpec:

    def __init__(self, mode=RAW, index=0, bigendian=False, fmt=None):
        self.mode = mode
        self.index = index
        self.bigendian = bigendian
        self.fmt = fmt
        if mode == UNPACK:
            self.fmt = normalize_format(fmt)

    @classmethod
    def raw(cls):
        return cls(RAW)

    @classmethod
    def byte(cls, index):
        return cls(BYTE, index=index)

    @classmethod
    def uint16(cls, index=0, bigendian=False):
        return cls(UINT16, index=index, bigendian=bigendian)

    @classmethod
    def uint32(cls, index=0, bigendian=False):
        return cls(UINT32, index=index, bigendian=bigendian)

    @classmethod
    def unpack(cls, fmt):
        return cls(UNPACK, fmt=fmt)

    def size(self):
        """ Number of bytes of the frame this spec reads """
        if self.mode == BYTE:
            return self.index + 1
        if self.mode == UINT16:
            return self.index + 2
        if self.mode == UINT32:
            return self.index + 4
        if self.mode == UNPACK:
            return struct.calcsize(self.fmt)
        return 0

    def __repr__(self):
        if self.mode == UNPACK:
            return "DecodeSpec<unpack {}>".format(self.fmt)
        if self.mode == RAW:
            return "DecodeSpec<raw>"
        return "DecodeSpec<{} @{}{}>".format(self.mode, self.index, " BE" if self.bigendian else "")


def normalize_format(fmt):
    """ Validates an unpack format and pins its endianness for struct """

    if not fmt:
        raise ValueError("empty unpack format")
    order = "<"
    body = fmt
    if body[0] in "<>":
        order, body = body[0], body[1:]
    if not body:
        raise ValueError("unpack format {!r} reads nothing".format(fmt))
    for char in body:
        if char not in UNPACK_WIDTHS:
            raise ValueError("unsupported width code {!r} in unpack format {!r}".format(char, fmt))
    return order + body


def decode_response(data, spec=None):
    """ Interprets a raw response frame according to spec """

    data = bytes(data)
    if spec is None or spec.mode == RAW:
        return data

    if len(data) < spec.size():
        raise ValueError("response of {} bytes is too short for {}".format(len(data), spec))

    if spec.mode == BYTE:
        return data[spec.index]
    if spec.mode in (UINT16, UINT32):
        width = 2 if spec.mode == UINT16 else 4
        return int.from_bytes(data[spec.index:spec.index + width],
                              byteorder="big" if spec.bigendian else "little")
    if spec.mode == UNPACK:
        return struct.unpack_from(spec.fmt, data, 0)

    raise ValueError("unknown decode mode {!r}".format(spec.mode))
