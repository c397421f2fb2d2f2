# Copyright (c) 2015 The Regents of the University of Michigan.
# All Rights Reserved. Licensed according to the terms of the Revised
# BSD License. See LICENSE.txt for details.
from collections    import  namedtuple
from types          import  MappingProxyType

from ..internal     import  make_backways_map
from .types         import  TiffType

BYTE        = TiffType.BYTE
ASCII       = TiffType.ASCII
SHORT       = TiffType.SHORT
LONG        = TiffType.LONG
RATIONAL    = TiffType.RATIONAL
SRATIONAL   = TiffType.SRATIONAL
UNDEFINED   = TiffType.UNDEFINED

class Namespace:
    """Directory names in a document"""
    IFD0        = "ifd0"
    IFD1        = "ifd1"
    EXIF        = "exif"
    GPS         = "gps"
    INTEROP     = "interop"

def chain_namespace (index):
    """Name the IFD at a position in the main chain.

        >>> chain_namespace(1)
        'ifd1'
    """
    return "ifd{:d}".format(index)

def chain_index (namespace):
    """Return the chain position of a namespace, or None.

        >>> chain_index("ifd2")
        2
        >>> chain_index("exif") is None
        True
    """
    if namespace.startswith("ifd") and namespace[3:].isdigit():
        return int(namespace[3:])

    return None

class TagGroup:
    """Tag tables by name"""
    TIFF        = "tiff"
    EXIF        = "exif"
    GPS         = "gps"
    INTEROP     = "interop"

def tag_groups (namespace):
    """Return the tag tables that apply to a namespace, in order.

    Chain IFDs and the Exif IFD share a tag space (their ids never
    collide), so both look in both tables. Nested duplicates like
    "exif.gps" are named after their last part.
    """
    last = namespace.rsplit(".", 1)[-1]

    if last == Namespace.GPS:
        return (TagGroup.GPS,)

    if last == Namespace.INTEROP:
        return (TagGroup.INTEROP,)

    if last == Namespace.EXIF:
        return (TagGroup.EXIF, TagGroup.TIFF)

    return (TagGroup.TIFF, TagGroup.EXIF)

class TiffTag:
    """Tags found in the main chain of IFDs"""
    NewSubfileType              = 0x00fe
    SubfileType                 = 0x00ff
    ImageWidth                  = 0x0100
    ImageLength                 = 0x0101
    BitsPerSample               = 0x0102
    Compression                 = 0x0103
    PhotometricInterpretation   = 0x0106
    Thresholding                = 0x0107
    CellWidth                   = 0x0108
    CellLength                  = 0x0109
    FillOrder                   = 0x010a
    DocumentName                = 0x010d
    ImageDescription            = 0x010e
    Make                        = 0x010f
    Model                       = 0x0110
    StripOffsets                = 0x0111
    Orientation                 = 0x0112
    SamplesPerPixel             = 0x0115
    RowsPerStrip                = 0x0116
    StripByteCounts             = 0x0117
    MinSampleValue              = 0x0118
    MaxSampleValue              = 0x0119
    XResolution                 = 0x011a
    YResolution                 = 0x011b
    PlanarConfiguration         = 0x011c
    PageName                    = 0x011d
    XPosition                   = 0x011e
    YPosition                   = 0x011f
    GrayResponseUnit            = 0x0122
    ResolutionUnit              = 0x0128
    PageNumber                  = 0x0129
    TransferFunction            = 0x012d
    Software                    = 0x0131
    DateTime                    = 0x0132
    Artist                      = 0x013b
    HostComputer                = 0x013c
    Predictor                   = 0x013d
    WhitePoint                  = 0x013e
    PrimaryChromaticities       = 0x013f
    ColorMap                    = 0x0140
    TileWidth                   = 0x0142
    TileLength                  = 0x0143
    TileOffsets                 = 0x0144
    TileByteCounts              = 0x0145
    SubIFDs                     = 0x014a
    ExtraSamples                = 0x0152
    SampleFormat                = 0x0153
    JPEGTables                  = 0x015b
    JPEGInterchangeFormat       = 0x0201
    JPEGInterchangeFormatLength = 0x0202
    YCbCrCoefficients           = 0x0211
    YCbCrSubSampling            = 0x0212
    YCbCrPositioning            = 0x0213
    ReferenceBlackWhite         = 0x0214
    XMP                         = 0x02bc
    Rating                      = 0x4746
    Copyright                   = 0x8298
    ExifIFDPointer              = 0x8769
    GPSInfoIFDPointer           = 0x8825
    PrintIM                     = 0xc4a5

class ExifTag:
    """Tags found in the Exif IFD"""
    ExposureTime                = 0x829a
    FNumber                     = 0x829d
    ExposureProgram             = 0x8822
    SpectralSensitivity         = 0x8824
    ISOSpeedRatings             = 0x8827
    OECF                        = 0x8828
    SensitivityType             = 0x8830
    ExifVersion                 = 0x9000
    DateTimeOriginal            = 0x9003
    DateTimeDigitized           = 0x9004
    OffsetTime                  = 0x9010
    OffsetTimeOriginal          = 0x9011
    OffsetTimeDigitized         = 0x9012
    ComponentsConfiguration     = 0x9101
    CompressedBitsPerPixel      = 0x9102
    ShutterSpeedValue           = 0x9201
    ApertureValue               = 0x9202
    BrightnessValue             = 0x9203
    ExposureBiasValue           = 0x9204
    MaxApertureValue            = 0x9205
    SubjectDistance             = 0x9206
    MeteringMode                = 0x9207
    LightSource                 = 0x9208
    Flash                       = 0x9209
    FocalLength                 = 0x920a
    SubjectArea                 = 0x9214
    MakerNote                   = 0x927c
    UserComment                 = 0x9286
    SubSecTime                  = 0x9290
    SubSecTimeOriginal          = 0x9291
    SubSecTimeDigitized         = 0x9292
    FlashpixVersion             = 0xa000
    ColorSpace                  = 0xa001
    PixelXDimension             = 0xa002
    PixelYDimension             = 0xa003
    RelatedSoundFile            = 0xa004
    InteropIFDPointer           = 0xa005
    FlashEnergy                 = 0xa20b
    FocalPlaneXResolution       = 0xa20e
    FocalPlaneYResolution       = 0xa20f
    FocalPlaneResolutionUnit    = 0xa210
    SubjectLocation             = 0xa214
    ExposureIndex               = 0xa215
    SensingMethod               = 0xa217
    FileSource                  = 0xa300
    SceneType                   = 0xa301
    CFAPattern                  = 0xa302
    CustomRendered              = 0xa401
    ExposureMode                = 0xa402
    WhiteBalance                = 0xa403
    DigitalZoomRatio            = 0xa404
    FocalLengthIn35mmFilm       = 0xa405
    SceneCaptureType            = 0xa406
    GainControl                 = 0xa407
    Contrast                    = 0xa408
    Saturation                  = 0xa409
    Sharpness                   = 0xa40a
    DeviceSettingDescription    = 0xa40b
    SubjectDistanceRange        = 0xa40c
    ImageUniqueID               = 0xa420
    CameraOwnerName             = 0xa430
    BodySerialNumber            = 0xa431
    LensSpecification           = 0xa432
    LensMake                    = 0xa433
    LensModel                   = 0xa434
    LensSerialNumber            = 0xa435
    Gamma                       = 0xa500

class GpsTag:
    """Tags found in the GPS IFD"""
    GPSVersionID                = 0x0000
    GPSLatitudeRef              = 0x0001
    GPSLatitude                 = 0x0002
    GPSLongitudeRef             = 0x0003
    GPSLongitude                = 0x0004
    GPSAltitudeRef              = 0x0005
    GPSAltitude                 = 0x0006
    GPSTimeStamp                = 0x0007
    GPSSatellites               = 0x0008
    GPSStatus                   = 0x0009
    GPSMeasureMode              = 0x000a
    GPSDOP                      = 0x000b
    GPSSpeedRef                 = 0x000c
    GPSSpeed                    = 0x000d
    GPSTrackRef                 = 0x000e
    GPSTrack                    = 0x000f
    GPSImgDirectionRef          = 0x0010
    GPSImgDirection             = 0x0011
    GPSMapDatum                 = 0x0012
    GPSDestLatitudeRef          = 0x0013
    GPSDestLatitude             = 0x0014
    GPSDestLongitudeRef         = 0x0015
    GPSDestLongitude            = 0x0016
    GPSDestBearingRef           = 0x0017
    GPSDestBearing              = 0x0018
    GPSDestDistanceRef          = 0x0019
    GPSDestDistance             = 0x001a
    GPSProcessingMethod         = 0x001b
    GPSAreaInformation          = 0x001c
    GPSDateStamp                = 0x001d
    GPSDifferential             = 0x001e
    GPSHPositioningError        = 0x001f

class InteropTag:
    """Tags found in the Interoperability IFD"""
    InteropIndex                = 0x0001
    InteropVersion              = 0x0002
    RelatedImageFileFormat      = 0x1000
    RelatedImageWidth           = 0x1001
    RelatedImageLength          = 0x1002

TiffTagNameDict     = make_backways_map(TiffTag)
ExifTagNameDict     = make_backways_map(ExifTag)
GpsTagNameDict      = make_backways_map(GpsTag)
InteropTagNameDict  = make_backways_map(InteropTag)

# Pointer tags and the directories they point to.
SubdirectoryTagDict = MappingProxyType({
    TiffTag.ExifIFDPointer:         Namespace.EXIF,
    TiffTag.GPSInfoIFDPointer:      Namespace.GPS,
    ExifTag.InteropIFDPointer:      Namespace.INTEROP,
})

# Where each well-known sub-directory hangs when it has to be created.
SubdirectoryParentDict = MappingProxyType({
    Namespace.EXIF:     (Namespace.IFD0, TiffTag.ExifIFDPointer),
    Namespace.GPS:      (Namespace.IFD0, TiffTag.GPSInfoIFDPointer),
    Namespace.INTEROP:  (Namespace.EXIF, ExifTag.InteropIFDPointer),
})

# Each row is (tag, permitted types, count). A count of None means any
# count is fine. Types are listed in order of preference.
TiffTagDefinitions = (
    (TiffTag.NewSubfileType,            (LONG,),            1),
    (TiffTag.SubfileType,               (SHORT,),           1),
    (TiffTag.ImageWidth,                (SHORT, LONG),      1),
    (TiffTag.ImageLength,               (SHORT, LONG),      1),
    (TiffTag.BitsPerSample,             (SHORT,),           None),
    (TiffTag.Compression,               (SHORT,),           1),
    (TiffTag.PhotometricInterpretation, (SHORT,),           1),
    (TiffTag.Thresholding,              (SHORT,),           1),
    (TiffTag.CellWidth,                 (SHORT,),           1),
    (TiffTag.CellLength,                (SHORT,),           1),
    (TiffTag.FillOrder,                 (SHORT,),           1),
    (TiffTag.DocumentName,              (ASCII,),           None),
    (TiffTag.ImageDescription,          (ASCII,),           None),
    (TiffTag.Make,                      (ASCII,),           None),
    (TiffTag.Model,                     (ASCII,),           None),
    (TiffTag.StripOffsets,              (SHORT, LONG),      None),
    (TiffTag.Orientation,               (SHORT,),           1),
    (TiffTag.SamplesPerPixel,           (SHORT,),           1),
    (TiffTag.RowsPerStrip,              (SHORT, LONG),      1),
    (TiffTag.StripByteCounts,           (SHORT, LONG),      None),
    (TiffTag.MinSampleValue,            (SHORT,),           None),
    (TiffTag.MaxSampleValue,            (SHORT,),           None),
    (TiffTag.XResolution,               (RATIONAL,),        1),
    (TiffTag.YResolution,               (RATIONAL,),        1),
    (TiffTag.PlanarConfiguration,       (SHORT,),           1),
    (TiffTag.PageName,                  (ASCII,),           None),
    (TiffTag.XPosition,                 (RATIONAL,),        1),
    (TiffTag.YPosition,                 (RATIONAL,),        1),
    (TiffTag.GrayResponseUnit,          (SHORT,),           1),
    (TiffTag.ResolutionUnit,            (SHORT,),           1),
    (TiffTag.PageNumber,                (SHORT,),           2),
    (TiffTag.TransferFunction,          (SHORT,),           None),
    (TiffTag.Software,                  (ASCII,),           None),
    (TiffTag.DateTime,                  (ASCII,),           20),
    (TiffTag.Artist,                    (ASCII,),           None),
    (TiffTag.HostComputer,              (ASCII,),           None),
    (TiffTag.Predictor,                 (SHORT,),           1),
    (TiffTag.WhitePoint,                (RATIONAL,),        2),
    (TiffTag.PrimaryChromaticities,     (RATIONAL,),        6),
    (TiffTag.ColorMap,                  (SHORT,),           None),
    (TiffTag.TileWidth,                 (SHORT, LONG),      1),
    (TiffTag.TileLength,                (SHORT, LONG),      1),
    (TiffTag.TileOffsets,               (LONG,),            None),
    (TiffTag.TileByteCounts,            (SHORT, LONG),      None),
    (TiffTag.SubIFDs,                   (LONG,),            None),
    (TiffTag.ExtraSamples,              (SHORT,),           None),
    (TiffTag.SampleFormat,              (SHORT,),           None),
    (TiffTag.JPEGTables,                (UNDEFINED,),       None),
    (TiffTag.JPEGInterchangeFormat,     (LONG,),            1),
    (TiffTag.JPEGInterchangeFormatLength, (LONG,),          1),
    (TiffTag.YCbCrCoefficients,         (RATIONAL,),        3),
    (TiffTag.YCbCrSubSampling,          (SHORT,),           2),
    (TiffTag.YCbCrPositioning,          (SHORT,),           1),
    (TiffTag.ReferenceBlackWhite,       (RATIONAL,),        6),
    (TiffTag.XMP,                       (BYTE, UNDEFINED),  None),
    (TiffTag.Rating,                    (SHORT,),           1),
    (TiffTag.Copyright,                 (ASCII,),           None),
    (TiffTag.ExifIFDPointer,            (LONG,),            1),
    (TiffTag.GPSInfoIFDPointer,         (LONG,),            1),
    (TiffTag.PrintIM,                   (UNDEFINED,),       None),
)

ExifTagDefinitions = (
    (ExifTag.ExposureTime,              (RATIONAL,),        1),
    (ExifTag.FNumber,                   (RATIONAL,),        1),
    (ExifTag.ExposureProgram,           (SHORT,),           1),
    (ExifTag.SpectralSensitivity,       (ASCII,),           None),
    (ExifTag.ISOSpeedRatings,           (SHORT,),           None),
    (ExifTag.OECF,                      (UNDEFINED,),       None),
    (ExifTag.SensitivityType,           (SHORT,),           1),
    (ExifTag.ExifVersion,               (UNDEFINED,),       4),
    (ExifTag.DateTimeOriginal,          (ASCII,),           20),
    (ExifTag.DateTimeDigitized,         (ASCII,),           20),
    (ExifTag.OffsetTime,                (ASCII,),           7),
    (ExifTag.OffsetTimeOriginal,        (ASCII,),           7),
    (ExifTag.OffsetTimeDigitized,       (ASCII,),           7),
    (ExifTag.ComponentsConfiguration,   (UNDEFINED,),       4),
    (ExifTag.CompressedBitsPerPixel,    (RATIONAL,),        1),
    (ExifTag.ShutterSpeedValue,         (SRATIONAL,),       1),
    (ExifTag.ApertureValue,             (RATIONAL,),        1),
    (ExifTag.BrightnessValue,           (SRATIONAL,),       1),
    (ExifTag.ExposureBiasValue,         (SRATIONAL,),       1),
    (ExifTag.MaxApertureValue,          (RATIONAL,),        1),
    (ExifTag.SubjectDistance,           (RATIONAL,),        1),
    (ExifTag.MeteringMode,              (SHORT,),           1),
    (ExifTag.LightSource,               (SHORT,),           1),
    (ExifTag.Flash,                     (SHORT,),           1),
    (ExifTag.FocalLength,               (RATIONAL,),        1),
    (ExifTag.SubjectArea,               (SHORT,),           None),
    (ExifTag.MakerNote,                 (UNDEFINED,),       None),
    (ExifTag.UserComment,               (UNDEFINED,),       None),
    (ExifTag.SubSecTime,                (ASCII,),           None),
    (ExifTag.SubSecTimeOriginal,        (ASCII,),           None),
    (ExifTag.SubSecTimeDigitized,       (ASCII,),           None),
    (ExifTag.FlashpixVersion,           (UNDEFINED,),       4),
    (ExifTag.ColorSpace,                (SHORT,),           1),
    (ExifTag.PixelXDimension,           (SHORT, LONG),      1),
    (ExifTag.PixelYDimension,           (SHORT, LONG),      1),
    (ExifTag.RelatedSoundFile,          (ASCII,),           13),
    (ExifTag.InteropIFDPointer,         (LONG,),            1),
    (ExifTag.FlashEnergy,               (RATIONAL,),        1),
    (ExifTag.FocalPlaneXResolution,     (RATIONAL,),        1),
    (ExifTag.FocalPlaneYResolution,     (RATIONAL,),        1),
    (ExifTag.FocalPlaneResolutionUnit,  (SHORT,),           1),
    (ExifTag.SubjectLocation,           (SHORT,),           2),
    (ExifTag.ExposureIndex,             (RATIONAL,),        1),
    (ExifTag.SensingMethod,             (SHORT,),           1),
    (ExifTag.FileSource,                (UNDEFINED,),       1),
    (ExifTag.SceneType,                 (UNDEFINED,),       1),
    (ExifTag.CFAPattern,                (UNDEFINED,),       None),
    (ExifTag.CustomRendered,            (SHORT,),           1),
    (ExifTag.ExposureMode,              (SHORT,),           1),
    (ExifTag.WhiteBalance,              (SHORT,),           1),
    (ExifTag.DigitalZoomRatio,          (RATIONAL,),        1),
    (ExifTag.FocalLengthIn35mmFilm,     (SHORT,),           1),
    (ExifTag.SceneCaptureType,          (SHORT,),           1),
    (ExifTag.GainControl,               (SHORT,),           1),
    (ExifTag.Contrast,                  (SHORT,),           1),
    (ExifTag.Saturation,                (SHORT,),           1),
    (ExifTag.Sharpness,                 (SHORT,),           1),
    (ExifTag.DeviceSettingDescription,  (UNDEFINED,),       None),
    (ExifTag.SubjectDistanceRange,      (SHORT,),           1),
    (ExifTag.ImageUniqueID,             (ASCII,),           33),
    (ExifTag.CameraOwnerName,           (ASCII,),           None),
    (ExifTag.BodySerialNumber,          (ASCII,),           None),
    (ExifTag.LensSpecification,         (RATIONAL,),        4),
    (ExifTag.LensMake,                  (ASCII,),           None),
    (ExifTag.LensModel,                 (ASCII,),           None),
    (ExifTag.LensSerialNumber,          (ASCII,),           None),
    (ExifTag.Gamma,                     (RATIONAL,),        1),
)

GpsTagDefinitions = (
    (GpsTag.GPSVersionID,               (BYTE,),            4),
    (GpsTag.GPSLatitudeRef,             (ASCII,),           2),
    (GpsTag.GPSLatitude,                (RATIONAL,),        3),
    (GpsTag.GPSLongitudeRef,            (ASCII,),           2),
    (GpsTag.GPSLongitude,               (RATIONAL,),        3),
    (GpsTag.GPSAltitudeRef,             (BYTE,),            1),
    (GpsTag.GPSAltitude,                (RATIONAL,),        1),
    (GpsTag.GPSTimeStamp,               (RATIONAL,),        3),
    (GpsTag.GPSSatellites,              (ASCII,),           None),
    (GpsTag.GPSStatus,                  (ASCII,),           2),
    (GpsTag.GPSMeasureMode,             (ASCII,),           2),
    (GpsTag.GPSDOP,                     (RATIONAL,),        1),
    (GpsTag.GPSSpeedRef,                (ASCII,),           2),
    (GpsTag.GPSSpeed,                   (RATIONAL,),        1),
    (GpsTag.GPSTrackRef,                (ASCII,),           2),
    (GpsTag.GPSTrack,                   (RATIONAL,),        1),
    (GpsTag.GPSImgDirectionRef,         (ASCII,),           2),
    (GpsTag.GPSImgDirection,            (RATIONAL,),        1),
    (GpsTag.GPSMapDatum,                (ASCII,),           None),
    (GpsTag.GPSDestLatitudeRef,         (ASCII,),           2),
    (GpsTag.GPSDestLatitude,            (RATIONAL,),        3),
    (GpsTag.GPSDestLongitudeRef,        (ASCII,),           2),
    (GpsTag.GPSDestLongitude,           (RATIONAL,),        3),
    (GpsTag.GPSDestBearingRef,          (ASCII,),           2),
    (GpsTag.GPSDestBearing,             (RATIONAL,),        1),
    (GpsTag.GPSDestDistanceRef,         (ASCII,),           2),
    (GpsTag.GPSDestDistance,            (RATIONAL,),        1),
    (GpsTag.GPSProcessingMethod,        (UNDEFINED,),       None),
    (GpsTag.GPSAreaInformation,         (UNDEFINED,),       None),
    (GpsTag.GPSDateStamp,               (ASCII,),           11),
    (GpsTag.GPSDifferential,            (SHORT,),           1),
    (GpsTag.GPSHPositioningError,       (RATIONAL,),        1),
)

InteropTagDefinitions = (
    (InteropTag.InteropIndex,           (ASCII,),           4),
    (InteropTag.InteropVersion,         (UNDEFINED,),       4),
    (InteropTag.RelatedImageFileFormat, (ASCII,),           None),
    (InteropTag.RelatedImageWidth,      (SHORT, LONG),      1),
    (InteropTag.RelatedImageLength,     (SHORT, LONG),      1),
)

TagDefinition = namedtuple("TagDefinition", ("name", "types", "count"))

class TagRegistry:
    """Tag Registry

    A read-only table of tag definitions, grouped by the kind of
    directory they belong in. Codecs and documents only ever read it,
    so a single registry can be shared by everyone.

    Args:
        tables (dict):  Each group name maps to an iterable of
                        (tag, name, types, count) rows.

    Examples:
        >>> DEFAULT_REGISTRY.resolve("ifd0", 0x010f)
        TagDefinition(name='Make', types=(2,), count=None)
        >>> DEFAULT_REGISTRY.find("gps", "GPSLatitude")
        2
        >>> DEFAULT_REGISTRY.resolve("gps", 0x010f) is None
        True
    """

    def __init__ (self, tables):
        groups = { }

        for group, rows in tables.items():
            groups[group] = MappingProxyType(dict(
                    (tag, TagDefinition(name, tuple(types), count))
                    for tag, name, types, count in rows))

        self.__groups = MappingProxyType(groups)

    def __repr__ (self):
        return "<{} {}>".format(self.__class__.__name__,
                ", ".join("{}:{:d}".format(group, len(table))
                          for group, table in self.__groups.items()))

    @property
    def groups (self):
        return self.__groups

    def resolve (self, namespace, tag_id):
        """Return the TagDefinition for a tag in a namespace, or None."""
        for group in tag_groups(namespace):
            table = self.__groups.get(group)

            if table is not None and tag_id in table:
                return table[tag_id]

        return None

    def find (self, namespace, name):
        """Return the id of a named tag in a namespace, or None."""
        for group in tag_groups(namespace):
            for tag_id, definition in self.__groups.get(group, {}).items():
                if definition.name == name:
                    return tag_id

        return None

    def name (self, namespace, tag_id):
        """Return a tag's name, falling back on its hex id."""
        definition = self.resolve(namespace, tag_id)

        if definition is None:
            return "0x{:04x}".format(tag_id)

        return definition.name

def build_table (definitions, name_dict):
    return tuple((tag, name_dict[tag], types, count)
                 for tag, types, count in definitions)

DEFAULT_REGISTRY = TagRegistry({
    TagGroup.TIFF:      build_table(TiffTagDefinitions, TiffTagNameDict),
    TagGroup.EXIF:      build_table(ExifTagDefinitions, ExifTagNameDict),
    TagGroup.GPS:       build_table(GpsTagDefinitions, GpsTagNameDict),
    TagGroup.INTEROP:   build_table(InteropTagDefinitions,
                                    InteropTagNameDict),
})
