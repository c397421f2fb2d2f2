# Copyright (c) 2017 The Regents of the University of Michigan.
# All Rights Reserved. Licensed according to the terms of the Revised
# BSD License. See LICENSE.txt for details.
from collections    import  namedtuple

from ..exceptions   import  MalformedContainer
from ..internal     import  ByteCursor, ByteOrder, make_backways_map
from .scanner       import  JFIF_IDENTIFIER

class DensityUnit:
    """JFIF density units by name"""
    NoUnit          = 0
    PixelsPerInch   = 1
    PixelsPerCm     = 2

DensityUnitNameDict = make_backways_map(DensityUnit)

class Jfif (namedtuple("Jfif", ("major",
                                "minor",
                                "density_unit",
                                "x_density",
                                "y_density",
                                "x_thumbnail",
                                "y_thumbnail",
                                "thumbnail"))):
    """A parsed JFIF APP0 payload."""

    __slots__ = ()

    @property
    def version (self):
        return "{:d}.{:02d}".format(self.major, self.minor)

    @property
    def density_unit_name (self):
        # Writers do put other numbers here. I keep the byte as it was.
        return DensityUnitNameDict.get(self.density_unit, "Unknown")

def parse_jfif (payload):
    """Parse an APP0 payload (identifier included) into a Jfif.

    The layout is fixed: "JFIF\\0", major and minor version bytes, a
    density unit byte, 16-bit X and Y densities, and one byte each for
    the thumbnail's width and height, followed by that many 24-bit RGB
    thumbnail pixels.

    A density unit outside the three JFIF defines is kept as is; its
    name is "Unknown".

    Error positions are relative to the start of the payload.
    """
    cursor      = ByteCursor(payload, ByteOrder.BIG)

    if cursor.read(len(JFIF_IDENTIFIER)) != JFIF_IDENTIFIER:
        raise MalformedContainer(0, "missing JFIF identifier")

    major       = cursor.read_u8()
    minor       = cursor.read_u8()
    unit        = cursor.read_u8()
    x_density   = cursor.read_u16()
    y_density   = cursor.read_u16()
    x_thumbnail = cursor.read_u8()
    y_thumbnail = cursor.read_u8()

    # Three bytes per pixel. If it's not all there, the cursor will let
    # us know.
    thumbnail   = cursor.read(3 * x_thumbnail * y_thumbnail)

    return Jfif(major, minor, unit, x_density, y_density,
                x_thumbnail, y_thumbnail, thumbnail)
