# Copyright (c) 2015 The Regents of the University of Michigan.
# All Rights Reserved. Licensed according to the terms of the Revised
# BSD License. See LICENSE.txt for details.
from collections    import  namedtuple
from collections.abc import Iterable
from fractions      import  Fraction

from ..exceptions   import  UnencodableValue
from ..internal     import  ByteCursor, Rational, make_backways_map

# This is kinda an enumeration of TIFF data types.
class TiffType:
    """IFD value types by name"""
    # Everything really should be one of these five types.
    BYTE        = 1
    ASCII       = 2
    SHORT       = 3
    LONG        = 4
    RATIONAL    = 5

    # But each of these is also possible.
    SBYTE       = 6
    UNDEFINED   = 7
    SSHORT      = 8
    SLONG       = 9
    SRATIONAL   = 10
    FLOAT       = 11
    DOUBLE      = 12

TiffTypeNameDict    = make_backways_map(TiffType)

# TIFF data types will be stored in a dictionary of named tuples. The
# reader and writer are the names of ByteCursor methods that handle a
# single value of the type.
TiffTypeDict        = { }
TiffTypeTuple       = namedtuple("TiffTypeTuple", ("tifftype",
                                                   "pytype",
                                                   "bytecount",
                                                   "signed",
                                                   "reader",
                                                   "writer"))

# Here's all the information specific to each type.
for pytype, bytecount, signed, method, tifftype in (
        (int,       1,  False,  "u8",           TiffType.BYTE),
        (bytes,     1,  False,  None,           TiffType.ASCII),
        (int,       2,  False,  "u16",          TiffType.SHORT),
        (int,       4,  False,  "u32",          TiffType.LONG),
        (Rational,  8,  False,  "rational",     TiffType.RATIONAL),
        (int,       1,  True,   "s8",           TiffType.SBYTE),
        (bytes,     1,  False,  None,           TiffType.UNDEFINED),
        (int,       2,  True,   "s16",          TiffType.SSHORT),
        (int,       4,  True,   "s32",          TiffType.SLONG),
        (Rational,  8,  True,   "srational",    TiffType.SRATIONAL),
        (float,     4,  True,   "float",        TiffType.FLOAT),
        (float,     8,  True,   "double",       TiffType.DOUBLE)):
    # Put this info into the dictionary.
    TiffTypeDict[tifftype] = TiffTypeTuple(
            tifftype, pytype, bytecount, signed,
            None if method is None else "read_" + method,
            None if method is None else "write_" + method)

# Values this size or smaller live right in the entry.
INLINE_LIMIT        = 4

# The largest magnitude a 4-byte float can hold.
FLOAT_MAX           = 3.4028234663852886e+38

def byte_size (tifftype, count):
    """Bytes needed for count values of a type."""
    return TiffTypeDict[tifftype].bytecount * count

def fits_inline (tifftype, count):
    """Whether count values of a type fit in an entry's value slot.

    This is the one rule both decoding and encoding use.

        >>> fits_inline(TiffType.SHORT, 2)
        True
        >>> fits_inline(TiffType.SHORT, 3)
        False
    """
    return byte_size(tifftype, count) <= INLINE_LIMIT

def int_range (info):
    bits = 8 * info.bytecount

    if info.signed:
        return -(1 << (bits - 1)), (1 << (bits - 1)) - 1

    return 0, (1 << bits) - 1

class TagValue (namedtuple("TagValue", ("tifftype", "value"))):
    """A typed tag value.

    The value depends on the type:

    -   ASCII and UNDEFINED values are bytes. ASCII values lose the one
        trailing NUL they're stored with, and get it back on encoding.

    -   Integer types are tuples of ints.

    -   RATIONAL and SRATIONAL are tuples of Rationals.

    -   FLOAT and DOUBLE are tuples of floats.

        >>> TagValue(TiffType.SHORT, (1,)).count
        1
        >>> TagValue(TiffType.ASCII, b"Canon").count
        6
        >>> TagValue(TiffType.SHORT, (8, 8, 8)).is_inline
        False
    """

    __slots__ = ()

    @property
    def type_name (self):
        return TiffTypeNameDict[self.tifftype]

    @property
    def count (self):
        if self.tifftype == TiffType.ASCII:
            # Don't forget the NUL.
            return len(self.value) + 1

        return len(self.value)

    @property
    def byte_size (self):
        return byte_size(self.tifftype, self.count)

    @property
    def is_inline (self):
        return fits_inline(self.tifftype, self.count)

    def __str__ (self):
        if self.tifftype == TiffType.ASCII:
            return self.value.decode("latin-1")

        if self.tifftype == TiffType.UNDEFINED:
            if len(self.value) > 16:
                return "<{:d} bytes>".format(len(self.value))

            return self.value.hex()

        if len(self.value) == 1:
            return str(self.value[0])

        return ", ".join(str(x) for x in self.value)

    @classmethod
    def from_bytes (cls, tifftype, data, byte_order):
        """Decode raw value bytes (exactly count * bytecount of them)."""
        info = TiffTypeDict[tifftype]

        if info.pytype is bytes:
            if tifftype == TiffType.ASCII and data[-1:] == b"\0":
                # Strip the NUL from valid strings.
                data = data[:-1]

            return cls(tifftype, bytes(data))

        # Everything else is an array of fixed-width values, which the
        # cursor reads one after another.
        cursor  = ByteCursor(data, byte_order)
        read    = getattr(cursor, info.reader)

        return cls(tifftype, tuple(read()
                for i in range(len(data) // info.bytecount)))

    def to_bytes (self, byte_order):
        """Encode the value as it would be stored."""
        info = TiffTypeDict[self.tifftype]

        if info.pytype is bytes:
            if self.tifftype == TiffType.ASCII:
                return self.value + b"\0"

            return self.value

        cursor  = ByteCursor(bytearray(self.byte_size), byte_order)
        write   = getattr(cursor, info.writer)

        for i, item in enumerate(self.value):
            write(i * info.bytecount, item)

        return bytes(cursor.buffer)

    @classmethod
    def coerce (cls, value, tifftypes = None):
        """Make a TagValue out of a plain python value.

        Each of the given types is tried in order, and the first that
        can hold the value wins. Without any types, I'll guess one.

            >>> TagValue.coerce(300, (TiffType.SHORT, TiffType.LONG))
            TagValue(tifftype=3, value=(300,))
            >>> TagValue.coerce(70000, (TiffType.SHORT, TiffType.LONG))
            TagValue(tifftype=4, value=(70000,))
            >>> TagValue.coerce("Canon")
            TagValue(tifftype=2, value=b'Canon')
        """
        if isinstance(value, cls):
            return value

        if not tifftypes:
            tifftypes = (guess_tifftype(value),)

        for tifftype in tifftypes:
            result = cls.__try_to_make(tifftype, value)

            if result is not None:
                return result

        raise UnencodableValue(value, (TiffTypeNameDict[t]
                                       for t in tifftypes))

    @classmethod
    def __try_to_make (cls, tifftype, value):
        info = TiffTypeDict[tifftype]

        if info.pytype is bytes:
            if isinstance(value, str):
                if not value.isascii():
                    return None

                value = value.encode("ascii")

            if isinstance(value, (bytes, bytearray)):
                return cls(tifftype, bytes(value))

            return None

        if isinstance(value, (str, bytes, bytearray)):
            # Strings only go into strings.
            return None

        if isinstance(value, Iterable):
            items = tuple(value)
        else:
            items = (value,)

        if info.pytype is int:
            low, high = int_range(info)

            if all(isinstance(x, int) and low <= x <= high
                    for x in items):
                return cls(tifftype, tuple(int(x) for x in items))

            return None

        if info.pytype is Rational:
            return cls.__try_to_make_rationals(tifftype, info, items)

        # It's a float type, then.
        if not all(isinstance(x, (int, float, Fraction)) for x in items):
            return None

        items = tuple(float(x) for x in items)

        if tifftype == TiffType.FLOAT and any(
                abs(x) > FLOAT_MAX and abs(x) != float("inf")
                for x in items):
            return None

        return cls(tifftype, items)

    @classmethod
    def __try_to_make_rationals (cls, tifftype, info, items):
        rationals = [ ]

        for item in items:
            if not isinstance(item, (int, float, Fraction, Rational)):
                return None

            if isinstance(item, float) and item != item:
                # NaN has no fraction.
                return None

            if isinstance(item, float) and abs(item) == float("inf"):
                return None

            rationals.append(Rational.from_number(item, info.signed))

        low, high = int_range(TiffTypeDict[TiffType.SLONG
                                           if info.signed
                                           else TiffType.LONG])

        for rational in rationals:
            if not (low <= rational.numerator <= high
                    and low <= rational.denominator <= high):
                return None

        return cls(tifftype, tuple(rationals))

def guess_tifftype (value):
    """Pick a TIFF type for a value nobody's told me about."""
    if isinstance(value, str):
        return TiffType.ASCII

    if isinstance(value, (bytes, bytearray)):
        return TiffType.UNDEFINED

    if isinstance(value, Iterable):
        items = tuple(value)
    else:
        items = (value,)

    if any(isinstance(x, float) for x in items):
        return TiffType.DOUBLE

    if any(isinstance(x, (Fraction, Rational)) for x in items):
        if any((x.numerator < 0) != (x.denominator < 0)
                if isinstance(x, Rational)
                else isinstance(x, (int, Fraction)) and x < 0
                for x in items):
            return TiffType.SRATIONAL

        return TiffType.RATIONAL

    if any(isinstance(x, int) and x < 0 for x in items):
        return TiffType.SLONG

    return TiffType.LONG
