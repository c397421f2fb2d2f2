# Copyright (c) 2015 The Regents of the University of Michigan.
# All Rights Reserved. Licensed according to the terms of the Revised
# BSD License. See LICENSE.txt for details.
from random import Random
from hamcrest import *
import unittest

from lamina.exceptions import BoundsError, CyclicDirectory, \
        DuplicateTag, FirstIFDOffsetTooLow, OutOfBounds, TagCountMismatch, \
        TagTypeMismatch, TooDeep, UnknownByteOrder, UnsupportedDataType, \
        WrongMagicNumber
from lamina.internal import ByteOrder, Rational, hex_to_bytes, \
        int_to_bytes
from lamina.tiff import IfdCodec, ImageFileDirectory, MetadataDocument, \
        TagValue, TiffType
from ..matchers import has_tag_value, positioned_at

MINIMAL_TIFF = hex_to_bytes("4d 4d 00 2a 00 00 00 08  00 00  00 00 00 00")

# Orientation is a single short, so it's inline. BitsPerSample has three
# shorts, so it lives after the IFD.
SHORTS_TIFF = hex_to_bytes("""
        4d 4d 00 2a  00 00 00 08

        00 02
        01 02  00 03  00 00 00 03  00 00 00 26
        01 12  00 03  00 00 00 01  00 01 00 00
        00 00 00 00

        00 08 00 08 00 08""")

# IFD0 points at an Exif IFD, which points at an Interop IFD.
NESTED_TIFF = hex_to_bytes("""
        4d 4d 00 2a  00 00 00 08

        00 01
        87 69  00 04  00 00 00 01  00 00 00 1a
        00 00 00 00

        00 01
        a0 05  00 04  00 00 00 01  00 00 00 2c
        00 00 00 00

        00 00
        00 00 00 00""")

# IFD0 points at an Exif IFD way past the end of the buffer.
BROKEN_EXIF_TIFF = hex_to_bytes("""
        4d 4d 00 2a  00 00 00 08

        00 02
        01 12  00 03  00 00 00 01  00 06 00 00
        87 69  00 04  00 00 00 01  00 00 10 00
        00 00 00 00""")

# This is a valid tiff with CCITT Group4 compression.
TINY_TIFF = hex_to_bytes("""
        49 49  2a 00  08 00 00 00

        0c 00
        00 01  03 00  01 00 00 00  6c 00 00 00
        01 01  03 00  01 00 00 00  24 00 00 00
        02 01  03 00  01 00 00 00  01 00 00 00
        03 01  03 00  01 00 00 00  04 00 00 00
        06 01  03 00  01 00 00 00  00 00 00 00
        0a 01  03 00  01 00 00 00  01 00 00 00
        11 01  04 00  01 00 00 00  9e 00 00 00
        15 01  03 00  01 00 00 00  01 00 00 00
        17 01  04 00  01 00 00 00  50 00 00 00
        1c 01  03 00  01 00 00 00  01 00 00 00
        28 01  03 00  01 00 00 00  03 00 00 00
        3b 01  02 00  06 00 00 00  ee 00 00 00
                                   00 00 00 00

        f3 6c 90 cc c3 99 86 83
        61 a0 db ff ff ff ff ff
        91 6e 6d 92 19 21 91 0f
        ff ff ff ff ff fe 5d 97
        7f ff ff ff ff ff ff ff
        f1 e3 ff ff ff ff ff ff
        e5 91 ff ff ff ff ff ff
        ff ff 1f ff ff ff ff ff
        ff 24 3f ff ff ff ff ff
        c4 44 44 47 c0 04 00 40

        4d 61 74 74 21 00""")

def one_entry_tiff (entry):
    """Wrap a single 12-byte entry in a big-endian TIFF."""
    return hex_to_bytes("4d4d002a 00000008 0001" + entry + "00000000")

def empty_ifd_chain (length, back_to):
    """Link empty IFDs in a chain whose last points back at one."""
    result = hex_to_bytes("4d4d002a 00000008")

    for i in range(length):
        if i + 1 < length:
            next_offset = 8 + 6 * (i + 1)
        else:
            next_offset = 8 + 6 * back_to

        result += b"\0\0" + int_to_bytes(next_offset, 4, "big")

    return result

class GivenMinimalTiff (unittest.TestCase):

    def setUp (self):
        self.codec = IfdCodec()
        self.document = self.codec.decode_tiff(MINIMAL_TIFF)

    def test_root_has_no_entries (self):
        assert_that(self.document.root, has_length(0))

    def test_there_are_no_other_ifds (self):
        assert_that(self.document.namespaces(), is_(equal_to(["ifd0"])))

    def test_byte_order_is_big (self):
        assert_that(self.document.byte_order, is_(equal_to(ByteOrder.BIG)))

    def test_root_remembers_its_offset (self):
        assert_that(self.document.root.offset, is_(equal_to(8)))

    def test_encoding_is_byte_identical (self):
        assert_that(self.codec.encode(self.document),
                    is_(equal_to(MINIMAL_TIFF)))

class GivenBadHeaders (unittest.TestCase):

    def setUp (self):
        self.codec = IfdCodec()

    def test_short_header_is_out_of_bounds (self):
        for i in (0, 2, 4, 7):
            assert_that(calling(self.codec.decode_tiff).with_args(
                    MINIMAL_TIFF[:i]), raises(OutOfBounds))

    def test_unknown_byte_order (self):
        assert_that(calling(self.codec.decode_tiff).with_args(
                b"IM" + MINIMAL_TIFF[2:]), raises(UnknownByteOrder))

    def test_wrong_magic_number (self):
        assert_that(calling(self.codec.decode_tiff).with_args(
                b"MM\x2a\0" + MINIMAL_TIFF[4:]),
                raises(WrongMagicNumber, "expected 42; found 10752"))

    def test_first_ifd_offset_inside_header (self):
        for i in range(8):
            assert_that(calling(self.codec.decode_tiff).with_args(
                    MINIMAL_TIFF[:4] + int_to_bytes(i, 4, "big")
                    + MINIMAL_TIFF[8:]), raises(FirstIFDOffsetTooLow))

class GivenShortsInAndOutOfLine (unittest.TestCase):

    def setUp (self):
        self.codec = IfdCodec()
        self.document = self.codec.decode_tiff(SHORTS_TIFF)

    def test_single_short_is_read_inline (self):
        assert_that(self.document, has_tag_value("ifd0", 0x0112,
                TagValue(TiffType.SHORT, (1,))))

    def test_three_shorts_are_read_from_their_offset (self):
        assert_that(self.document, has_tag_value("ifd0", 0x0102,
                TagValue(TiffType.SHORT, (8, 8, 8))))

    def test_encoding_uses_the_same_rule (self):
        assert_that(self.codec.encode(self.document),
                    is_(equal_to(SHORTS_TIFF)))

    def test_growing_a_value_moves_it_out_of_line (self):
        self.document.root[0x0112] = TagValue(TiffType.SHORT, (1, 2, 3))
        encoded = self.codec.encode(self.document)

        # Both values now follow the IFD, each word-aligned.
        assert_that(encoded[0x1e:0x22],
                    is_(equal_to(hex_to_bytes("0000002c"))))
        assert_that(encoded[0x2c:], is_(equal_to(
                hex_to_bytes("0001 0002 0003"))))

    def test_shrinking_a_value_moves_it_inline (self):
        self.document.root[0x0102] = TagValue(TiffType.SHORT, (8, 8))
        encoded = self.codec.encode(self.document)

        assert_that(encoded[0x12:0x16],
                    is_(equal_to(hex_to_bytes("00080008"))))
        assert_that(encoded, has_length(38))

class GivenOddLengthValues (unittest.TestCase):

    def test_values_start_on_word_boundaries (self):
        document = MetadataDocument()
        document.root[0x010f] = TagValue(TiffType.ASCII, b"Cano")
        document.root[0x0110] = TagValue(TiffType.ASCII, b"EOS 5D")
        encoded = IfdCodec().encode(document)

        # The header and IFD take 8 + 2 + 24 + 4 = 38 bytes; "Cano\0"
        # takes five more, plus one to keep the next value even.
        assert_that(encoded[0x12:0x16],
                    is_(equal_to(hex_to_bytes("00000026"))))
        assert_that(encoded[0x1e:0x22],
                    is_(equal_to(hex_to_bytes("0000002c"))))
        assert_that(encoded[0x26:], is_(equal_to(b"Cano\0\0EOS 5D\0\0")))

class GivenLittleEndianTinyTiff (unittest.TestCase):

    def setUp (self):
        self.codec = IfdCodec()
        self.document = self.codec.decode_tiff(TINY_TIFF)

    def test_byte_order_is_little (self):
        assert_that(self.document.byte_order,
                    is_(equal_to(ByteOrder.LITTLE)))

    def test_has_twelve_entries (self):
        assert_that(self.document.root, has_length(12))

    def test_image_width (self):
        assert_that(self.document, has_tag_value("ifd0", 0x0100,
                TagValue(TiffType.SHORT, (108,))))

    def test_strip_offsets (self):
        assert_that(self.document, has_tag_value("ifd0", 0x0111,
                TagValue(TiffType.LONG, (0x9e,))))

    def test_artist_loses_its_nul (self):
        assert_that(self.document, has_tag_value("ifd0", 0x013b,
                TagValue(TiffType.ASCII, b"Matt!")))

    def test_reencoding_stays_little_endian (self):
        assert_that(self.codec.encode(self.document)[:4],
                    is_(equal_to(b"II*\0")))

    def test_round_trip_keeps_every_triple (self):
        again = self.codec.decode_tiff(self.codec.encode(self.document))
        assert_that(list(again.triples()),
                    is_(equal_to(list(self.document.triples()))))

class GivenDocumentWithEveryType (unittest.TestCase):

    def setUp (self):
        self.codec = IfdCodec()
        self.document = MetadataDocument(ByteOrder.LITTLE)

        values = (
            TagValue(TiffType.BYTE,         (1, 2, 3, 4, 5)),
            TagValue(TiffType.ASCII,        b"hello"),
            TagValue(TiffType.SHORT,        (65535,)),
            TagValue(TiffType.LONG,         (1, 0xffffffff)),
            TagValue(TiffType.RATIONAL,     (Rational(0, 0),)),
            TagValue(TiffType.SBYTE,        (-128,)),
            TagValue(TiffType.UNDEFINED,    b"\0\1\2"),
            TagValue(TiffType.SSHORT,       (-2, 2, -3)),
            TagValue(TiffType.SLONG,        (-70000,)),
            TagValue(TiffType.SRATIONAL,    (Rational(-1, 3),
                                             Rational(7, -2))),
            TagValue(TiffType.FLOAT,        (0.5,)),
            TagValue(TiffType.DOUBLE,       (3.14, -2.5)),
        )

        for namespace in ("ifd0", "exif", "gps", "interop", "ifd1"):
            ifd = self.document.directory(namespace, create = True)

            for i, value in enumerate(values):
                ifd[0xc000 + i] = value

        self.again = self.codec.decode_tiff(
                self.codec.encode(self.document))

    def test_round_trip_keeps_every_triple (self):
        assert_that(sorted(self.again.triples()),
                    is_(equal_to(sorted(self.document.triples()))))

    def test_round_trip_keeps_every_namespace (self):
        assert_that(sorted(self.again.namespaces()),
                    is_(equal_to(sorted(self.document.namespaces()))))

    def test_round_trip_keeps_the_links (self):
        assert_that(self.again["ifd0"].pointers, is_(equal_to(
                {0x8769: "exif", 0x8825: "gps"})))
        assert_that(self.again["exif"].pointers, is_(equal_to(
                {0xa005: "interop"})))

    def test_encoding_is_stable (self):
        assert_that(self.codec.encode(self.again),
                    is_(equal_to(self.codec.encode(self.document))))

class GivenNestedDirectories (unittest.TestCase):

    def test_decodes_all_three (self):
        document = IfdCodec().decode_tiff(NESTED_TIFF)
        assert_that(document.namespaces(), is_(equal_to(
                ["ifd0", "exif", "interop"])))

    def test_exif_hangs_from_ifd0 (self):
        document = IfdCodec().decode_tiff(NESTED_TIFF)
        assert_that(document["ifd0"].pointers,
                    is_(equal_to({0x8769: "exif"})))

    def test_pointer_tags_are_not_values (self):
        document = IfdCodec().decode_tiff(NESTED_TIFF)
        assert_that(document.get("ifd0", 0x8769), is_(none()))

    def test_three_levels_are_enough_for_interop (self):
        document = IfdCodec(max_depth = 3).decode_tiff(NESTED_TIFF)
        assert_that(document, has_length(3))

    def test_two_levels_are_too_few (self):
        assert_that(calling(IfdCodec(max_depth = 2).decode_tiff).with_args(
                NESTED_TIFF), raises(TooDeep, "IFD interop"))

    def test_max_depth_can_be_given_per_decode (self):
        assert_that(calling(IfdCodec().decode).with_args(
                NESTED_TIFF, 8, ByteOrder.BIG, 1), raises(TooDeep))

    def test_zero_depth_cant_even_read_ifd0 (self):
        assert_that(calling(IfdCodec(max_depth = 0).decode_tiff).with_args(
                NESTED_TIFF), raises(TooDeep))

    def test_reencoding_reproduces_the_bytes (self):
        codec = IfdCodec()
        assert_that(codec.encode(codec.decode_tiff(NESTED_TIFF)),
                    is_(equal_to(NESTED_TIFF)))

class GivenDuplicateNestedNamespaces (unittest.TestCase):

    def test_second_exif_is_named_after_its_parent (self):
        codec = IfdCodec()
        document = MetadataDocument()
        document.set("exif", 0x829d, 2.8)
        document.directory("ifd1", create = True)
        document.add_directory(ImageFileDirectory("ifd1.exif"),
                               "ifd1", 0x8769)
        document["ifd1.exif"][0x829d] = TagValue(TiffType.RATIONAL,
                                                 (Rational(4, 1),))

        again = codec.decode_tiff(codec.encode(document))
        assert_that(again.namespaces(), is_(equal_to(
                ["ifd0", "exif", "ifd1", "ifd1.exif"])))
        assert_that(again, has_tag_value("ifd1.exif", 0x829d,
                TagValue(TiffType.RATIONAL, (Rational(4, 1),))))

class GivenCyclicChains (unittest.TestCase):

    def test_every_cycle_length_is_rejected (self):
        for length in range(1, 9):
            for back_to in range(length):
                assert_that(calling(IfdCodec().decode_tiff).with_args(
                        empty_ifd_chain(length, back_to)),
                        raises(CyclicDirectory))

    def test_chain_without_cycle_is_fine (self):
        chain = empty_ifd_chain(3, 0)[:-4] + bytes(4)
        document = IfdCodec().decode_tiff(chain)
        assert_that(document.namespaces(), is_(equal_to(
                ["ifd0", "ifd1", "ifd2"])))

    def test_subdirectory_pointing_at_its_parent_is_rejected (self):
        assert_that(calling(IfdCodec().decode_tiff).with_args(
                one_entry_tiff("8769 0004 00000001 00000008")),
                raises(CyclicDirectory, "IFD exif"))

class GivenCorruptedOffsets (unittest.TestCase):

    # Byte offsets of every offset field in NESTED_TIFF and SHORTS_TIFF.
    nested_fields = (4, 0x12, 0x24)
    shorts_fields = (4, 0x12)

    def setUp (self):
        self.random = Random(8)

    def corrupt (self, buffer, field):
        low = len(buffer) - 1
        value = self.random.randrange(low, 0x100000000)
        return buffer[:field] + int_to_bytes(value, 4, "big") \
                + buffer[field + 4:]

    def test_always_bounds_errors (self):
        codec = IfdCodec()

        for buffer, fields in ((NESTED_TIFF, self.nested_fields),
                               (SHORTS_TIFF, self.shorts_fields)):
            for field in fields:
                for i in range(50):
                    assert_that(calling(codec.decode_tiff).with_args(
                            self.corrupt(buffer, field)),
                            raises(BoundsError))

    def test_huge_entry_count_is_out_of_bounds (self):
        assert_that(calling(IfdCodec().decode_tiff).with_args(
                MINIMAL_TIFF[:8] + b"\xff\xff" + MINIMAL_TIFF[10:]),
                raises(OutOfBounds))

    def test_huge_count_is_out_of_bounds_for_its_tag (self):
        buffer = one_entry_tiff("0102 0003 7fffffff 00000000")

        try:
            IfdCodec().decode_tiff(buffer)

        except OutOfBounds as error:
            assert_that(error, positioned_at(0, 0x0102))

        else:
            self.fail("Expected OutOfBounds")

class GivenBrokenSubdirectory (unittest.TestCase):

    def test_error_propagates_by_default (self):
        assert_that(calling(IfdCodec().decode_tiff).with_args(
                BROKEN_EXIF_TIFF), raises(OutOfBounds))

    def test_skipping_drops_the_subdirectory (self):
        codec = IfdCodec(skip_broken_subdirectories = True)
        document = codec.decode_tiff(BROKEN_EXIF_TIFF)
        assert_that(document.namespaces(), is_(equal_to(["ifd0"])))

    def test_skipping_drops_the_pointer (self):
        codec = IfdCodec(skip_broken_subdirectories = True)
        document = codec.decode_tiff(BROKEN_EXIF_TIFF)
        assert_that(document.root.pointers, is_(equal_to({})))

    def test_skipping_keeps_everything_else (self):
        codec = IfdCodec(skip_broken_subdirectories = True)
        document = codec.decode_tiff(BROKEN_EXIF_TIFF)
        assert_that(document, has_tag_value("ifd0", 0x0112,
                TagValue(TiffType.SHORT, (6,))))

    def test_skipping_never_hides_a_broken_ifd0 (self):
        codec = IfdCodec(skip_broken_subdirectories = True)
        assert_that(calling(codec.decode_tiff).with_args(
                MINIMAL_TIFF[:8] + b"\0\1"), raises(OutOfBounds))

class GivenUnexpectedEntries (unittest.TestCase):

    def test_unsupported_type_is_an_error (self):
        try:
            IfdCodec().decode_tiff(
                    one_entry_tiff("0112 000d 00000001 00060000"))

        except UnsupportedDataType as error:
            assert_that(error, positioned_at(12, 0x0112))

        else:
            self.fail("Expected UnsupportedDataType")

    def test_type_zero_is_unsupported_too (self):
        assert_that(calling(IfdCodec().decode_tiff).with_args(
                one_entry_tiff("c000 0000 00000001 00000000")),
                raises(UnsupportedDataType, "type 0"))

    def test_unknown_tags_are_kept (self):
        document = IfdCodec(strict = True).decode_tiff(
                one_entry_tiff("c000 0007 00000002 abcd0000"))
        assert_that(document, has_tag_value("ifd0", 0xc000,
                TagValue(TiffType.UNDEFINED, b"\xab\xcd")))

class ContextMismatchedEntries (unittest.TestCase):

    long_orientation = one_entry_tiff("0112 0004 00000001 00000006")
    two_orientations = one_entry_tiff("0112 0003 00000002 00060001")
    duplicate = hex_to_bytes("""
            4d4d002a 00000008
            0002
            0112 0003 00000001 00060000
            0112 0003 00000001 00030000
            00000000""")

class GivenPermissiveCodec (ContextMismatchedEntries):

    def setUp (self):
        self.codec = IfdCodec()

    def test_wrong_type_is_kept (self):
        assert_that(self.codec.decode_tiff(self.long_orientation),
                    has_tag_value("ifd0", 0x0112,
                                  TagValue(TiffType.LONG, (6,))))

    def test_wrong_count_is_kept (self):
        assert_that(self.codec.decode_tiff(self.two_orientations),
                    has_tag_value("ifd0", 0x0112,
                                  TagValue(TiffType.SHORT, (6, 1))))

    def test_duplicate_keeps_the_last_one (self):
        assert_that(self.codec.decode_tiff(self.duplicate),
                    has_tag_value("ifd0", 0x0112,
                                  TagValue(TiffType.SHORT, (3,))))

class GivenStrictCodec (ContextMismatchedEntries):

    def setUp (self):
        self.codec = IfdCodec(strict = True)

    def test_wrong_type_is_an_error (self):
        assert_that(calling(self.codec.decode_tiff).with_args(
                self.long_orientation),
                raises(TagTypeMismatch, "Orientation"))

    def test_wrong_count_is_an_error (self):
        assert_that(calling(self.codec.decode_tiff).with_args(
                self.two_orientations),
                raises(TagCountMismatch, "must have 1 value"))

    def test_duplicate_is_an_error (self):
        assert_that(calling(self.codec.decode_tiff).with_args(
                self.duplicate), raises(DuplicateTag))

# IFD1 points at a four-byte JPEG thumbnail right after itself.
THUMBNAIL_TIFF = hex_to_bytes("""
        4d 4d 00 2a  00 00 00 08

        00 00
        00 00 00 0e

        00 02
        02 01  00 04  00 00 00 01  00 00 00 2c
        02 02  00 04  00 00 00 01  00 00 00 04
        00 00 00 00

        ff d8 ff d9""")

THUMBNAIL = hex_to_bytes("ff d8 ff d9")

class GivenTiffWithThumbnail (unittest.TestCase):

    def setUp (self):
        self.codec = IfdCodec()
        self.document = self.codec.decode_tiff(THUMBNAIL_TIFF)

    def thumbnail_in (self, encoded):
        again = self.codec.decode_tiff(encoded)
        offset = again.get("ifd1", 0x0201).value[0]
        length = again.get("ifd1", 0x0202).value[0]

        return encoded[offset:offset + length]

    def test_thumbnail_is_kept (self):
        assert_that(self.document["ifd1"].thumbnail,
                    is_(equal_to(THUMBNAIL)))

    def test_reencoding_reproduces_the_bytes (self):
        assert_that(self.codec.encode(self.document),
                    is_(equal_to(THUMBNAIL_TIFF)))

    def test_thumbnail_survives_a_round_trip (self):
        encoded = self.codec.encode(self.document)
        assert_that(self.thumbnail_in(encoded), is_(equal_to(THUMBNAIL)))

    def test_thumbnail_moves_when_values_grow (self):
        self.document["ifd1"][0x013b] = TagValue(TiffType.ASCII, b"Robin")
        encoded = self.codec.encode(self.document)

        # The IFD now takes 42 bytes from 0x0e, and "Robin\0" takes six
        # more, so the thumbnail starts at 0x3e.
        assert_that(self.codec.decode_tiff(encoded),
                    has_tag_value("ifd1", 0x0201,
                                  TagValue(TiffType.LONG, (0x3e,))))
        assert_that(self.thumbnail_in(encoded), is_(equal_to(THUMBNAIL)))

    def test_removing_its_offset_drops_the_thumbnail (self):
        self.document.remove("ifd1", 0x0201)
        encoded = self.codec.encode(self.document)

        assert_that(self.document["ifd1"].thumbnail, is_(none()))
        assert_that(THUMBNAIL in encoded, is_(equal_to(False)))

class GivenThumbnailPastTheEnd (unittest.TestCase):

    def setUp (self):
        self.tiff = THUMBNAIL_TIFF[:0x24] + hex_to_bytes("00000008") \
                + THUMBNAIL_TIFF[0x28:]

    def test_permissive_codec_drops_both_tags (self):
        ifd1 = IfdCodec().decode_tiff(self.tiff)["ifd1"]

        assert_that(ifd1, has_length(0))
        assert_that(ifd1.thumbnail, is_(none()))

    def test_strict_codec_fails (self):
        try:
            IfdCodec(strict = True).decode_tiff(self.tiff)

        except OutOfBounds as error:
            assert_that(error, positioned_at(0x2c, 0x0201))

        else:
            self.fail("Expected OutOfBounds")
