# Copyright (c) 2015 The Regents of the University of Michigan.
# All Rights Reserved. Licensed according to the terms of the Revised
# BSD License. See LICENSE.txt for details.
from types          import  MappingProxyType

from ..internal     import  make_backways_map
from .tags          import  ExifTag, TagGroup, TiffTag, tag_groups

class Orientation:
    """Which corner row zero and column zero start in"""
    TopLeft     = 1
    TopRight    = 2
    BottomRight = 3
    BottomLeft  = 4
    LeftTop     = 5
    RightTop    = 6
    RightBottom = 7
    LeftBottom  = 8

class ResolutionUnit:
    NoUnit      = 1
    Inch        = 2
    Centimeter  = 3

class Compression:
    Uncompressed    = 1
    CCITT1D         = 2
    T4              = 3
    T6              = 4
    LZW             = 5
    OldJPEG         = 6
    JPEG            = 7
    Deflate         = 8
    PackBits        = 32773

class YCbCrPositioning:
    Centered    = 1
    CoSited     = 2

class ExposureProgram:
    NotDefined          = 0
    Manual              = 1
    NormalProgram       = 2
    AperturePriority    = 3
    ShutterPriority     = 4
    CreativeProgram     = 5
    ActionProgram       = 6
    PortraitMode        = 7
    LandscapeMode       = 8

class Contrast:
    Normal  = 0
    Soft    = 1
    Hard    = 2

class Saturation:
    Normal  = 0
    Low     = 1
    High    = 2

class Sharpness:
    Normal  = 0
    Soft    = 1
    Hard    = 2

class SceneCaptureType:
    Standard    = 0
    Landscape   = 1
    Portrait    = 2
    NightScene  = 3

class GainControl:
    NoGain      = 0
    LowGainUp   = 1
    HighGainUp  = 2
    LowGainDown = 3
    HighGainDown = 4

# Each named tag maps its values to their names.
ValueNameDict = MappingProxyType({
    (TagGroup.TIFF, TiffTag.Orientation):
            make_backways_map(Orientation),
    (TagGroup.TIFF, TiffTag.ResolutionUnit):
            make_backways_map(ResolutionUnit),
    (TagGroup.TIFF, TiffTag.Compression):
            make_backways_map(Compression),
    (TagGroup.TIFF, TiffTag.YCbCrPositioning):
            make_backways_map(YCbCrPositioning),
    (TagGroup.EXIF, ExifTag.FocalPlaneResolutionUnit):
            make_backways_map(ResolutionUnit),
    (TagGroup.EXIF, ExifTag.ExposureProgram):
            make_backways_map(ExposureProgram),
    (TagGroup.EXIF, ExifTag.Contrast):
            make_backways_map(Contrast),
    (TagGroup.EXIF, ExifTag.Saturation):
            make_backways_map(Saturation),
    (TagGroup.EXIF, ExifTag.Sharpness):
            make_backways_map(Sharpness),
    (TagGroup.EXIF, ExifTag.SceneCaptureType):
            make_backways_map(SceneCaptureType),
    (TagGroup.EXIF, ExifTag.GainControl):
            make_backways_map(GainControl),
})

def value_name (namespace, tag_id, tag_value):
    """Name a single-valued tag's value, if it has a name.

        >>> from .types import TagValue
        >>> value_name("ifd0", 0x0112, TagValue(3, (6,)))
        'RightTop'
        >>> value_name("gps", 0x0112, TagValue(3, (6,))) is None
        True
    """
    if len(tag_value.value) != 1 or isinstance(tag_value.value, bytes):
        return None

    for group in tag_groups(namespace):
        names = ValueNameDict.get((group, tag_id))

        if names is not None:
            return names.get(tag_value.value[0])

    return None
