# Copyright (c) 2017 The Regents of the University of Michigan.
# All Rights Reserved. Licensed according to the terms of the Revised
# BSD License. See LICENSE.txt for details.
from .jfif      import  DensityUnit, Jfif, parse_jfif
from .markers   import  Marker, marker_name
from .scanner   import  EXIF_IDENTIFIER, JFIF_IDENTIFIER, Segment, \
                        SegmentScanner

__all__ = [
    "DensityUnit",
    "EXIF_IDENTIFIER",
    "JFIF_IDENTIFIER",
    "Jfif",
    "Marker",
    "Segment",
    "SegmentScanner",
    "marker_name",
    "parse_jfif",
]
