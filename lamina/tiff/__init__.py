# Copyright (c) 2015 The Regents of the University of Michigan.
# All Rights Reserved. Licensed according to the terms of the Revised
# BSD License. See LICENSE.txt for details.
from .codec     import  IfdCodec
from .document  import  MetadataDocument, SourceRange
from .ifd       import  ImageFileDirectory, TagEntry
from .tags      import  DEFAULT_REGISTRY, ExifTag, GpsTag, InteropTag, \
                        Namespace, TagDefinition, TagRegistry, TiffTag
from .types     import  TagValue, TiffType, fits_inline
from .values    import  value_name

__all__ = [
    "DEFAULT_REGISTRY",
    "ExifTag",
    "GpsTag",
    "IfdCodec",
    "ImageFileDirectory",
    "InteropTag",
    "MetadataDocument",
    "Namespace",
    "SourceRange",
    "TagDefinition",
    "TagEntry",
    "TagRegistry",
    "TagValue",
    "TiffTag",
    "TiffType",
    "fits_inline",
    "value_name",
]
