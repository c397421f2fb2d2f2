# Copyright (c) 2017 The Regents of the University of Michigan.
# All Rights Reserved. Licensed according to the terms of the Revised
# BSD License. See LICENSE.txt for details.
from ..internal.backways_map import make_backways_map

class Marker:
    """JPEG markers by name"""
    TEM     = 0xff01

    SOF0    = 0xffc0
    SOF1    = 0xffc1
    SOF2    = 0xffc2
    SOF3    = 0xffc3
    DHT     = 0xffc4
    SOF5    = 0xffc5
    SOF6    = 0xffc6
    SOF7    = 0xffc7

    JPG     = 0xffc8
    SOF9    = 0xffc9
    SOF10   = 0xffca
    SOF11   = 0xffcb
    DAC     = 0xffcc
    SOF13   = 0xffcd
    SOF14   = 0xffce
    SOF15   = 0xffcf

    RST0    = 0xffd0
    RST1    = 0xffd1
    RST2    = 0xffd2
    RST3    = 0xffd3
    RST4    = 0xffd4
    RST5    = 0xffd5
    RST6    = 0xffd6
    RST7    = 0xffd7

    SOI     = 0xffd8
    EOI     = 0xffd9
    SOS     = 0xffda
    DQT     = 0xffdb
    DNL     = 0xffdc
    DRI     = 0xffdd
    DHP     = 0xffde
    EXP     = 0xffdf

    APP0    = 0xffe0
    APP1    = 0xffe1
    APP2    = 0xffe2
    APP3    = 0xffe3
    APP4    = 0xffe4
    APP5    = 0xffe5
    APP6    = 0xffe6
    APP7    = 0xffe7
    APP8    = 0xffe8
    APP9    = 0xffe9
    APP10   = 0xffea
    APP11   = 0xffeb
    APP12   = 0xffec
    APP13   = 0xffed
    APP14   = 0xffee
    APP15   = 0xffef

    COM     = 0xfffe

MarkerNameDict      = make_backways_map(Marker)

# These stand alone, without any length or payload.
STANDALONE_MARKERS  = frozenset((
    Marker.TEM,
    Marker.RST0, Marker.RST1, Marker.RST2, Marker.RST3,
    Marker.RST4, Marker.RST5, Marker.RST6, Marker.RST7,
    Marker.SOI,
    Marker.EOI,
))

# The first marker with a length field.
FIRST_LENGTH_MARKER = Marker.SOF0

def marker_name (marker):
    """Name a marker, falling back to its hex code.

        >>> marker_name(0xffe1)
        'APP1'
        >>> marker_name(0xfff0)
        '0xfff0'
    """
    return MarkerNameDict.get(marker, "0x{:04x}".format(marker))
