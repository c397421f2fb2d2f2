# Copyright (c) 2015 The Regents of the University of Michigan.
# All Rights Reserved. Licensed according to the terms of the Revised
# BSD License. See LICENSE.txt for details.
import numpy

from ..exceptions   import  OutOfBounds
from .byte_handlers import  ByteOrder, int_to_bytes, bytes_to_int,   \
                            sint_to_bytes, bytes_to_sint
from .rational      import  Rational

class ByteCursor:
    """Byte Cursor

    This wraps a byte buffer along with a byte order and a position.
    Every read and write is checked against the buffer's length first,
    so that nothing is ever silently truncated.

        >>> cursor = ByteCursor(b"\\x00\\x2a\\x00\\x00\\x00\\x08", "big")
        >>> cursor.read_u16(0)
        42
        >>> cursor.read_u32(2)
        8
        >>> cursor.read_u32(4)
        Traceback (most recent call last):
          File "<stdin>", line 1, in <module>
        OutOfBounds: Access of 4 byte(s) overruns a 6-byte buffer. (0x00000004)

    Leave the offset off and the cursor reads at its position instead,
    moving forward as it goes.

        >>> cursor.position = 2
        >>> cursor.read_u32()
        8
        >>> cursor.position
        6

    Writes need a bytearray. The buffer never changes size; whoever
    needs more room makes a new buffer.
    """

    default_byte_order  = ByteOrder.BIG

    # numpy dtype prefixes for each byte order.
    dtype_prefixes      = {
        ByteOrder.BIG:      ">",
        ByteOrder.LITTLE:   "<",
    }

    def __init__ (self, buffer, byte_order = None, position = 0):
        if byte_order is None:
            byte_order  = self.default_byte_order

        if byte_order not in self.dtype_prefixes:
            raise ValueError("Unknown byte order: {!r}".format(byte_order))

        self.buffer     = buffer
        self.byte_order = byte_order
        self.position   = position

    def __len__ (self):
        return len(self.buffer)

    def __repr__ (self):
        return "<{} {}-endian at 0x{:x} of 0x{:x}>".format(
                self.__class__.__name__,
                self.byte_order,
                self.position,
                len(self.buffer))

    def check (self, offset, width):
        """Raise OutOfBounds unless [offset, offset+width) is inside."""
        if offset < 0 or width < 0 or offset + width > len(self.buffer):
            raise OutOfBounds(offset, width, len(self.buffer))

    def slice (self, offset, length):
        """Return a copy of length bytes starting at offset."""
        self.check(offset, length)
        return bytes(self.buffer[offset:offset + length])

    def read (self, length, offset = None):
        """Read bytes, either at an offset or at the position."""
        if offset is None:
            # Sequential reads pick up where we left off. We only move
            # once we know the read is good.
            result          = self.slice(self.position, length)
            self.position  += length
            return result

        return self.slice(offset, length)

    def read_uint (self, width, offset = None):
        return bytes_to_int(self.read(width, offset), self.byte_order)

    def read_sint (self, width, offset = None):
        return bytes_to_sint(self.read(width, offset), self.byte_order)

    def read_u8 (self, offset = None):
        return self.read_uint(1, offset)

    def read_u16 (self, offset = None):
        return self.read_uint(2, offset)

    def read_u32 (self, offset = None):
        return self.read_uint(4, offset)

    def read_s8 (self, offset = None):
        return self.read_sint(1, offset)

    def read_s16 (self, offset = None):
        return self.read_sint(2, offset)

    def read_s32 (self, offset = None):
        return self.read_sint(4, offset)

    def read_rational (self, offset = None):
        """Read two unsigned longs as numerator and denominator."""
        return Rational(*self.__read_pair(self.read_u32, offset))

    def read_srational (self, offset = None):
        """Read two signed longs as numerator and denominator."""
        return Rational(*self.__read_pair(self.read_s32, offset))

    def read_float (self, offset = None):
        return self.__read_ieee(4, offset)

    def read_double (self, offset = None):
        return self.__read_ieee(8, offset)

    def write (self, offset, data):
        """Overwrite len(data) bytes at offset."""
        if not isinstance(self.buffer, bytearray):
            raise TypeError("Expected a bytearray to write into")

        self.check(offset, len(data))
        self.buffer[offset:offset + len(data)] = data

    def write_uint (self, width, offset, value):
        self.write(offset, int_to_bytes(value, width, self.byte_order))

    def write_sint (self, width, offset, value):
        self.write(offset, sint_to_bytes(value, width, self.byte_order))

    def write_u8 (self, offset, value):
        self.write_uint(1, offset, value)

    def write_u16 (self, offset, value):
        self.write_uint(2, offset, value)

    def write_u32 (self, offset, value):
        self.write_uint(4, offset, value)

    def write_s8 (self, offset, value):
        self.write_sint(1, offset, value)

    def write_s16 (self, offset, value):
        self.write_sint(2, offset, value)

    def write_s32 (self, offset, value):
        self.write_sint(4, offset, value)

    def write_rational (self, offset, value):
        # Check the whole eight bytes up front so that a bad offset
        # can't leave half a rational behind.
        self.check(offset, 8)
        self.write_u32(offset, value.numerator)
        self.write_u32(offset + 4, value.denominator)

    def write_srational (self, offset, value):
        self.check(offset, 8)
        self.write_s32(offset, value.numerator)
        self.write_s32(offset + 4, value.denominator)

    def write_float (self, offset, value):
        self.__write_ieee(4, offset, value)

    def write_double (self, offset, value):
        self.__write_ieee(8, offset, value)

    def __read_pair (self, read_one, offset):
        if offset is None:
            return read_one(), read_one()

        self.check(offset, 8)
        return read_one(offset), read_one(offset + 4)

    def __dtype (self, width):
        return numpy.dtype("{}f{:d}".format(
                self.dtype_prefixes[self.byte_order], width))

    def __read_ieee (self, width, offset):
        data = self.read(width, offset)
        return float(numpy.frombuffer(data, dtype = self.__dtype(width))[0])

    def __write_ieee (self, width, offset, value):
        self.write(offset, numpy.array([value],
                                       dtype = self.__dtype(width)).tobytes())
