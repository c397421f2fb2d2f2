# Copyright (c) 2017 The Regents of the University of Michigan.
# All Rights Reserved. Licensed according to the terms of the Revised
# BSD License. See LICENSE.txt for details.
from collections    import  namedtuple
import logging

from ..exceptions   import  NotAContainer, MalformedContainer, \
                            PayloadTooLarge
from ..internal     import  ByteCursor, ByteOrder
from .markers       import  Marker, STANDALONE_MARKERS, \
                            FIRST_LENGTH_MARKER, marker_name

log = logging.getLogger(__name__)

EXIF_IDENTIFIER = b"Exif\0\0"
JFIF_IDENTIFIER = b"JFIF\0"

class Segment (namedtuple("Segment", ("marker",
                                      "offset",
                                      "length",
                                      "payload",
                                      "identifier",
                                      "is_metadata_bearing"))):
    """One marker segment.

    The offset points at the marker itself. The length is the segment's
    own length field (which counts its two bytes), or None for markers
    that stand alone. The payload is a slice of the scanned buffer.
    """

    __slots__ = ()

    @property
    def name (self):
        return marker_name(self.marker)

    @property
    def end (self):
        """Offset of whatever comes after this segment."""
        return self.payload.stop

    @property
    def body (self):
        """The slice of the payload after any identifier prefix."""
        skip = len(self.identifier) if self.identifier else 0
        return slice(self.payload.start + skip, self.payload.stop)

class SegmentScanner:
    """Segment Scanner

    This walks a JPEG marker stream without looking inside anything it
    doesn't need to. Give it a buffer and scan it:

        >>> scanner = SegmentScanner(jpeg_bytes)
        >>> [s.name for s in scanner.scan()]
        ['SOI', 'APP0', 'APP1', 'DQT', 'SOF0', 'DHT', 'SOS']

    Once the start-of-scan segment is read, the rest (up to and
    including the end-of-image marker) is entropy-coded data, and I
    stop. Its range is kept in self.entropy.

    Segments carrying metadata I know how to read are flagged with
    is_metadata_bearing; their body is what the IFD codec wants.
    """

    # Segment lengths are 16-bit, and they count themselves.
    length_limit            = 0xffff

    # These identifier prefixes mark metadata segments.
    metadata_identifiers    = {
        Marker.APP0:    (JFIF_IDENTIFIER,),
        Marker.APP1:    (EXIF_IDENTIFIER,),
    }

    def __init__ (self, buffer):
        self.cursor     = ByteCursor(buffer, ByteOrder.BIG)
        self.entropy    = None

    @property
    def buffer (self):
        return self.cursor.buffer

    def scan (self):
        """Read every segment up to SOS (or EOI)."""
        if len(self.cursor) < 2 or self.cursor.read_u16(0) != Marker.SOI:
            # Report whatever we found, even if it's only a byte.
            found = int.from_bytes(bytes(self.buffer[:2]), "big")
            raise NotAContainer(0, found)

        segments    = [self.read_segment(0)]
        offset      = segments[0].end

        while True:
            offset  = self.skip_fill_bytes(offset)
            segment = self.read_segment(offset)
            segments.append(segment)

            if segment.marker == Marker.EOI:
                # That's everything.
                break

            if segment.marker == Marker.SOS:
                # From here on out, it's image data. I don't frame it.
                self.entropy = slice(segment.end, len(self.cursor))
                log.debug("Skipping %d bytes of scan data after 0x%08x",
                          len(self.cursor) - segment.end, segment.end)
                break

            offset  = segment.end

        return segments

    def read_segment (self, offset):
        """Read the single segment whose marker is at offset."""
        if offset + 2 > len(self.cursor):
            raise MalformedContainer(offset,
                    "ran out of bytes before the end-of-image marker")

        marker = self.cursor.read_u16(offset)

        if marker in STANDALONE_MARKERS:
            # No length, no payload.
            return Segment(marker, offset, None,
                           slice(offset + 2, offset + 2), None, False)

        if marker < FIRST_LENGTH_MARKER:
            raise MalformedContainer(offset,
                    "expected a marker; found 0x{:04x}".format(marker))

        if offset + 4 > len(self.cursor):
            raise MalformedContainer(offset,
                    "{} length is cut off".format(marker_name(marker)))

        length  = self.cursor.read_u16(offset + 2)
        end     = offset + 2 + length

        if length < 2:
            # The length has to at least count itself.
            raise MalformedContainer(offset + 2,
                    "{} length {:d} is less than 2".format(
                            marker_name(marker), length))

        if end > len(self.cursor):
            raise MalformedContainer(offset + 2,
                    "{} length {:d} runs past the end of the "
                    "buffer".format(marker_name(marker), length))

        payload     = slice(offset + 4, end)
        identifier  = self.identify(marker, payload)

        return Segment(marker, offset, length, payload, identifier,
                       identifier is not None)

    def identify (self, marker, payload):
        """Return the metadata identifier prefixing a payload, if any."""
        for identifier in self.metadata_identifiers.get(marker, ()):
            start = payload.start

            if self.buffer[start:start + len(identifier)] == identifier \
                    and start + len(identifier) <= payload.stop:
                return identifier

        return None

    def skip_fill_bytes (self, offset):
        # Any marker can be preceded by any number of 0xff fill bytes.
        while offset + 1 < len(self.cursor) \
                and self.buffer[offset] == 0xff \
                and self.buffer[offset + 1] == 0xff:
            offset += 1

        return offset

    def find (self, segments, marker, identifier):
        """Return the index of the first matching segment, or None."""
        for index, segment in enumerate(segments):
            if segment.marker == marker and segment.identifier == identifier:
                return index

        return None

    def replace_payload (self, segments, target_index, new_payload):
        """Return a new buffer with one segment's body replaced.

        The identifier prefix stays, the length field is recomputed,
        and every other byte is copied over as it was.
        """
        target = segments[target_index]

        if target.length is None:
            raise ValueError("{} at 0x{:08x} has no payload".format(
                    target.name, target.offset))

        packed = self.pack_segment(target.offset,
                                   target.marker,
                                   target.identifier or b"",
                                   new_payload)

        return bytes(self.buffer[:target.offset]) + packed \
                + bytes(self.buffer[target.end:])

    def insert_segment (self, segments, marker, identifier, payload):
        """Return a new buffer with a new segment near the start.

        It goes right after SOI, unless the file leads with a JFIF APP0
        segment, in which case it goes right after that.
        """
        after = segments[0]

        if len(segments) > 1 and segments[1].marker == Marker.APP0 \
                and segments[1].identifier == JFIF_IDENTIFIER:
            after = segments[1]

        packed = self.pack_segment(after.end, marker, identifier, payload)

        return bytes(self.buffer[:after.end]) + packed \
                + bytes(self.buffer[after.end:])

    def pack_segment (self, position, marker, identifier, payload):
        """Build marker, length, identifier, and payload bytes."""
        length = len(identifier) + len(payload) + 2

        if length > self.length_limit:
            raise PayloadTooLarge(position, length, self.length_limit)

        cursor = ByteCursor(bytearray(length + 2), ByteOrder.BIG)
        cursor.write_u16(0, marker)
        cursor.write_u16(2, length)
        cursor.write(4, identifier + payload)

        return bytes(cursor.buffer)
