# Copyright (c) 2015 The Regents of the University of Michigan.
# All Rights Reserved. Licensed according to the terms of the Revised
# BSD License. See LICENSE.txt for details.

class ByteOrder:
    """Byte orders by name, as int.from_bytes wants them."""
    BIG     = "big"
    LITTLE  = "little"

def int_to_bytes (integer, length, byte_order):
    return integer.to_bytes(length, byte_order)

def bytes_to_int (bytestring, byte_order):
    return int.from_bytes(bytestring, byte_order)

def sint_to_bytes (integer, length, byte_order):
    return integer.to_bytes(length, byte_order, signed=True)

def bytes_to_sint (bytestring, byte_order):
    return int.from_bytes(bytestring, byte_order, signed=True)

def hex_to_bytes (hexstring):
    # Whitespace (including newlines) is ignored, so long dumps can be
    # laid out however reads best.
    return bytes.fromhex("".join(hexstring.split()))
