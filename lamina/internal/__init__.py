# Copyright (c) 2015 The Regents of the University of Michigan.
# All Rights Reserved. Licensed according to the terms of the Revised
# BSD License. See LICENSE.txt for details.
from .backways_map  import make_backways_map
from .byte_cursor   import ByteCursor
from .byte_handlers import ByteOrder, int_to_bytes, bytes_to_int, \
                           sint_to_bytes, bytes_to_sint, hex_to_bytes
from .rational      import Rational

__all__ = [
    "ByteCursor",
    "ByteOrder",
    "Rational",
    "bytes_to_int",
    "bytes_to_sint",
    "hex_to_bytes",
    "int_to_bytes",
    "make_backways_map",
    "sint_to_bytes",
]
