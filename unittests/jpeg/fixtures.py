# Copyright (c) 2017 The Regents of the University of Michigan.
# All Rights Reserved. Licensed according to the terms of the Revised
# BSD License. See LICENSE.txt for details.
from lamina.internal import hex_to_bytes

# The smallest TIFF there is: a header and one empty IFD.
MINIMAL_TIFF = hex_to_bytes("4d 4d 00 2a 00 00 00 08  00 00  00 00 00 00")

SOI     = hex_to_bytes("ff d8")

# JFIF 1.02, 72 pixels per inch, no thumbnail.
APP0    = hex_to_bytes("ff e0 00 10 4a 46 49 46 00 01 02 01 00 48 00 48 \
                        00 00")

# "Exif\0\0" followed by the minimal TIFF.
APP1    = hex_to_bytes("ff e1 00 16 45 78 69 66 00 00") + MINIMAL_TIFF

DQT     = hex_to_bytes("ff db 00 04 00 01")
SOS     = hex_to_bytes("ff da 00 08 01 01 00 00 3f 00")
SCAN    = hex_to_bytes("12 34 ff 00 56")
EOI     = hex_to_bytes("ff d9")

# Everything after the metadata segments.
TAIL    = DQT + SOS + SCAN + EOI

JPEG_WITH_EXIF      = SOI + APP0 + APP1 + TAIL
JPEG_WITHOUT_EXIF   = SOI + APP0 + TAIL
BARE_JPEG           = SOI + TAIL
