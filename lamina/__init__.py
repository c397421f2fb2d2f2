# Copyright (c) 2015 The Regents of the University of Michigan.
# All Rights Reserved. Licensed according to the terms of the Revised
# BSD License. See LICENSE.txt for details.
import logging

from .exceptions    import  LaminaError, StructuralError, BoundsError, \
                            IntegrityError, CapacityError, \
                            UnencodableValue
from .filetype      import  FileKind, detect
from .metadata      import  decode, get_tag, set_tag, remove_tag, \
                            strip_all, encode, rewrite_container
from .tiff          import  IfdCodec, MetadataDocument, TagValue, \
                            TiffType

__version__ = "1.0.0.dev0"

# Nobody hears from us unless they ask.
logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "decode",
    "get_tag",
    "set_tag",
    "remove_tag",
    "strip_all",
    "encode",
    "rewrite_container",

    "FileKind",
    "IfdCodec",
    "MetadataDocument",
    "TagValue",
    "TiffType",
    "detect",

    # Exceptions
    "LaminaError",
    "StructuralError",
    "BoundsError",
    "IntegrityError",
    "CapacityError",
    "UnencodableValue",
]
