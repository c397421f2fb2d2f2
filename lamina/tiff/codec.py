# Copyright (c) 2015 The Regents of the University of Michigan.
# All Rights Reserved. Licensed according to the terms of the Revised
# BSD License. See LICENSE.txt for details.
from collections    import  namedtuple
import logging

from ..exceptions   import  BoundsError, CyclicDirectory, DuplicateTag, \
                            FirstIFDOffsetTooLow, PayloadTooLarge, \
                            PositionedError, TagCountMismatch, \
                            TagTypeMismatch, TooDeep, UnknownByteOrder, \
                            UnsupportedDataType, WrongMagicNumber
from ..internal     import  ByteCursor, ByteOrder
from .document      import  MetadataDocument
from .ifd           import  ENTRY_SIZE, ImageFileDirectory, TagEntry
from .tags          import  DEFAULT_REGISTRY, SubdirectoryTagDict, TiffTag, \
                            chain_index, chain_namespace
from .types         import  TagValue, TiffType, TiffTypeDict, \
                            TiffTypeNameDict

log = logging.getLogger(__name__)

# One directory waiting to be read: where it is, what it'll be called,
# how much nesting it has left, and which entry pointed at it.
PendingIFD  = namedtuple("PendingIFD", ("offset",
                                        "name",
                                        "depth",
                                        "parent",
                                        "via_tag"))

# Where the layout pass put an IFD, its out-of-line values, and its
# thumbnail (None if it hasn't got one).
Placement   = namedtuple("Placement", ("namespace",
                                       "offset",
                                       "value_offsets",
                                       "thumbnail_offset",
                                       "next_namespace"))

class IfdCodec:
    """IFD Codec

    This turns TIFF bytes into a MetadataDocument and back again.

    Args:
        registry:       Tag definitions (the shared default if None).
        max_depth:      How many levels of nesting to allow, counting
                        the main chain as the first.
        strict:         Fail on tags whose type or count disagrees with
                        the registry, and on duplicate tags.
        skip_broken_subdirectories:
                        Drop a sub-IFD (and the pointer to it) that runs
                        out of bounds instead of failing the decode.

    Examples:
        >>> codec = IfdCodec()
        >>> minimal = hex_to_bytes("4d4d002a 00000008 0000 00000000")
        >>> document = codec.decode_tiff(minimal)
        >>> len(document.root)
        0
        >>> codec.encode(document) == minimal
        True
    """

    # Depth-bombs stop here unless told otherwise.
    default_max_depth       = 8

    # The first two bytes of the tiff must be in here.
    expected_byte_orders    = {
        b"II":  ByteOrder.LITTLE,
        b"MM":  ByteOrder.BIG,
    }

    # The second two bytes of the tiff must be this integer.
    magic_check_number      = 42

    # And the header is always this long.
    header_length           = 8

    # An IFD can only count this many entries.
    entry_limit             = 0xffff

    def __init__ (self, registry = None, max_depth = None, strict = False,
                  skip_broken_subdirectories = False):
        self.registry   = registry or DEFAULT_REGISTRY
        self.max_depth  = self.default_max_depth if max_depth is None \
                            else max_depth
        self.strict     = strict
        self.skip_broken_subdirectories = skip_broken_subdirectories

    def __repr__ (self):
        return "<{} max_depth={:d}{}>".format(self.__class__.__name__,
                self.max_depth, " strict" if self.strict else "")

    ####################################################################
    ############################# Decoding #############################
    ####################################################################

    def read_header (self, buffer):
        """Return the byte order and first IFD offset of TIFF bytes."""
        cursor  = ByteCursor(buffer, ByteOrder.BIG)
        cursor.check(0, self.header_length)

        mark    = cursor.slice(0, 2)

        if mark not in self.expected_byte_orders:
            raise UnknownByteOrder(0, mark)

        cursor.byte_order   = self.expected_byte_orders[mark]
        forty_two           = cursor.read_u16(2)

        if forty_two != self.magic_check_number:
            # Uh oh! It's something other than 42 oh no oh no!
            raise WrongMagicNumber(2, self.magic_check_number, forty_two)

        ifd_offset = cursor.read_u32(4)

        if ifd_offset < self.header_length:
            # Be sure the offset doesn't point anywhere in the header.
            raise FirstIFDOffsetTooLow(4, self.header_length, ifd_offset)

        return cursor.byte_order, ifd_offset

    def decode_tiff (self, buffer, source = None):
        """Decode TIFF bytes that start with their 8-byte header."""
        byte_order, ifd_offset = self.read_header(buffer)
        return self.decode(buffer, ifd_offset, byte_order, source = source)

    def decode (self, buffer, start_offset, byte_order, max_depth = None,
                source = None):
        """Decode the IFD graph starting at an offset.

        Directories are walked with an explicit stack. Each IFD's
        sub-IFDs (in tag order) come before the next IFD in the chain,
        and every offset can only be read once.
        """
        if max_depth is None:
            max_depth   = self.max_depth

        cursor      = ByteCursor(buffer, byte_order)
        document    = MetadataDocument(byte_order, source, self.registry)
        document.directories.clear()

        visited     = set()
        stack       = [PendingIFD(start_offset, chain_namespace(0),
                                  max_depth, None, None)]

        while stack:
            pending = stack.pop()

            if pending.parent is None:
                namespace = pending.name
            else:
                namespace = document.unique_namespace(pending.name,
                                                      pending.parent)

            if pending.depth <= 0:
                raise TooDeep(pending.offset, namespace, max_depth)

            if pending.offset in visited:
                raise CyclicDirectory(pending.offset, namespace)

            visited.add(pending.offset)

            try:
                ifd, next_offset, children = self.read_ifd(
                        cursor, pending.offset, namespace)

            except BoundsError as error:
                if pending.parent is None \
                        or not self.skip_broken_subdirectories:
                    raise

                log.warning("Dropping %s (pointed at by tag 0x%04x in "
                            "%s): %s", namespace, pending.via_tag,
                            pending.parent, error)
                continue

            document.add_directory(ifd, pending.parent, pending.via_tag)

            index = chain_index(namespace)

            if next_offset != 0:
                if pending.parent is None and index is not None:
                    # The next chain IFD goes on the bottom, so that all
                    # of this IFD's children are read first.
                    stack.append(PendingIFD(next_offset,
                                            chain_namespace(index + 1),
                                            pending.depth, None, None))

                else:
                    log.debug("Ignoring next IFD offset 0x%08x after %s",
                              next_offset, namespace)

            for tag, child_offset in sorted(children.items(),
                                            reverse = True):
                stack.append(PendingIFD(child_offset,
                                        SubdirectoryTagDict[tag],
                                        pending.depth - 1,
                                        namespace,
                                        tag))

        return document

    def read_ifd (self, cursor, offset, namespace):
        """Read one IFD.

        Returns the IFD, its next-IFD offset, and a dictionary of its
        pointer tags to the offsets they point at.
        """
        entry_count = cursor.read_u16(offset)
        start       = offset + 2

        # Make sure the whole table is here before reading any of it.
        cursor.check(start, ENTRY_SIZE * entry_count + 4)

        ifd         = ImageFileDirectory(namespace, offset)
        children    = { }

        for i in range(entry_count):
            position    = start + ENTRY_SIZE * i
            entry       = TagEntry(cursor.read_u16(position),
                                   cursor.read_u16(position + 2),
                                   cursor.read_u32(position + 4),
                                   cursor.slice(position + 8, 4),
                                   position)

            try:
                self.read_entry(cursor, ifd, entry, children)

            except PositionedError as error:
                # Whatever went wrong, say which tag it was.
                if error.tag_id is None:
                    error.tag_id = entry.tag

                raise

        next_offset = cursor.read_u32(start + ENTRY_SIZE * entry_count)
        self.read_thumbnail(cursor, ifd)

        return ifd, next_offset, children

    def read_thumbnail (self, cursor, ifd):
        """Keep a copy of the JPEG thumbnail an IFD points at.

        The thumbnail's bytes aren't the value of any tag, so they'd
        otherwise be left behind on encoding. If they're out of bounds,
        a strict codec fails; otherwise I drop both thumbnail tags.
        """
        offset  = self.single_integer(ifd.get(TiffTag.JPEGInterchangeFormat))
        length  = self.single_integer(ifd.get(
                TiffTag.JPEGInterchangeFormatLength))

        if offset is None or length is None:
            return

        try:
            ifd.thumbnail = cursor.slice(offset, length)

        except BoundsError as error:
            error.tag_id = TiffTag.JPEGInterchangeFormat

            if self.strict:
                raise

            log.warning("Dropping the thumbnail in %s: %s",
                        ifd.namespace, error)

            del ifd[TiffTag.JPEGInterchangeFormat]
            del ifd[TiffTag.JPEGInterchangeFormatLength]

    def single_integer (self, tag_value):
        if tag_value is None \
                or tag_value.tifftype not in (TiffType.SHORT, TiffType.LONG) \
                or len(tag_value.value) != 1:
            return None

        return tag_value.value[0]

    def read_entry (self, cursor, ifd, entry, children):
        if entry.tifftype not in TiffTypeDict:
            raise UnsupportedDataType(entry.position + 2,
                                      entry.tag, entry.tifftype)

        if entry.tag in ifd or entry.tag in children:
            if self.strict:
                raise DuplicateTag(entry.position, entry.tag, ifd.namespace)

            log.warning("Duplicate tag 0x%04x in %s at 0x%08x; keeping "
                        "the last one", entry.tag, ifd.namespace,
                        entry.position)

            ifd.pop(entry.tag, None)
            children.pop(entry.tag, None)

        self.check_entry(ifd.namespace, entry)

        if entry.tag in SubdirectoryTagDict \
                and entry.tifftype == TiffType.LONG and entry.count == 1:
            # This one points at another directory. I'll follow it
            # after the rest of this IFD is read.
            children[entry.tag] = cursor.read_u32(entry.position + 8)
            return

        if entry.is_inline:
            raw = entry.slot[:entry.byte_size]

        else:
            raw = cursor.slice(cursor.read_u32(entry.position + 8),
                               entry.byte_size)

        ifd[entry.tag] = TagValue.from_bytes(entry.tifftype, raw,
                                             cursor.byte_order)

    def check_entry (self, namespace, entry):
        """Compare an entry to its definition (if there is one)."""
        definition = self.registry.resolve(namespace, entry.tag)

        if definition is None:
            log.debug("Unknown tag 0x%04x in %s; keeping it as is",
                      entry.tag, namespace)
            return

        if entry.tifftype not in definition.types:
            if self.strict:
                raise TagTypeMismatch(entry.position + 2,
                        entry.tag, definition.name,
                        TiffTypeNameDict[entry.tifftype],
                        ", ".join(TiffTypeNameDict[t]
                                  for t in definition.types))

            log.debug("%s in %s has type %s; keeping it anyway",
                      definition.name, namespace,
                      TiffTypeNameDict[entry.tifftype])

        if definition.count is not None \
                and entry.count != definition.count:
            if self.strict:
                raise TagCountMismatch(entry.position + 4,
                        entry.tag, definition.name,
                        definition.count, entry.count)

            log.debug("%s in %s has %d value(s); keeping it anyway",
                      definition.name, namespace, entry.count)

    ####################################################################
    ############################# Encoding #############################
    ####################################################################

    def layout (self, document):
        """Assign an offset to every IFD and out-of-line value.

        The order is each chain IFD followed by its sub-IFDs (depth
        first, in pointer tag order), then the next chain IFD. Each
        IFD's values come right after it, each starting on a word
        boundary.

        Returns a list of Placements and the total size.
        """
        placements  = [ ]
        laid_out    = set()
        position    = self.header_length
        chain       = document.chain()

        for index, top in enumerate(chain):
            if index + 1 < len(chain):
                next_namespace = chain[index + 1].namespace
            else:
                next_namespace = None

            stack = [top.namespace]

            while stack:
                namespace = stack.pop()

                if namespace in laid_out:
                    raise CyclicDirectory(0, namespace)

                laid_out.add(namespace)
                ifd = document[namespace]

                if ifd.entry_count > self.entry_limit:
                    raise PayloadTooLarge(position, ifd.entry_count,
                                          self.entry_limit)

                offset          = position
                position       += ifd.table_size
                value_offsets   = { }

                for tag, value in ifd.items():
                    if not value.is_inline:
                        value_offsets[tag]  = position
                        position           += value.byte_size
                        position           += position % 2

                if ifd.has_thumbnail:
                    thumbnail_offset    = position
                    position           += len(ifd.thumbnail)
                    position           += position % 2

                else:
                    thumbnail_offset    = None

                placements.append(Placement(
                        namespace, offset, value_offsets, thumbnail_offset,
                        next_namespace if namespace == top.namespace
                                       else None))

                stack.extend(child for tag, child
                             in sorted(ifd.pointers.items(),
                                       reverse = True))

        return placements, position

    def encode (self, document):
        """Encode a document as TIFF bytes, header and all."""
        placements, size    = self.layout(document)
        offsets             = dict((p.namespace, p.offset)
                                   for p in placements)

        cursor = ByteCursor(bytearray(size), document.byte_order)

        for mark, byte_order in self.expected_byte_orders.items():
            if byte_order == document.byte_order:
                cursor.write(0, mark)

        cursor.write_u16(2, self.magic_check_number)
        cursor.write_u32(4, self.header_length)

        for placement in placements:
            self.write_ifd(cursor, document[placement.namespace],
                           placement, offsets)

        return bytes(cursor.buffer)

    def write_ifd (self, cursor, ifd, placement, offsets):
        cursor.write_u16(placement.offset, ifd.entry_count)
        position = placement.offset + 2

        for tag in sorted(set(ifd) | set(ifd.pointers)):
            if tag in ifd.pointers:
                # Pointers are always a single LONG offset.
                cursor.write_u16(position, tag)
                cursor.write_u16(position + 2, TiffType.LONG)
                cursor.write_u32(position + 4, 1)
                cursor.write_u32(position + 8, offsets[ifd.pointers[tag]])

            else:
                value   = self.relocated_value(ifd, tag, placement)
                raw     = value.to_bytes(cursor.byte_order)

                cursor.write_u16(position, tag)
                cursor.write_u16(position + 2, value.tifftype)
                cursor.write_u32(position + 4, value.count)

                if value.is_inline:
                    # Whatever's left of the slot stays zeroed.
                    cursor.write(position + 8, raw)

                else:
                    value_offset = placement.value_offsets[tag]
                    cursor.write_u32(position + 8, value_offset)
                    cursor.write(value_offset, raw)

            position += ENTRY_SIZE

        if placement.thumbnail_offset is not None:
            cursor.write(placement.thumbnail_offset, ifd.thumbnail)

        if placement.next_namespace is None:
            cursor.write_u32(position, 0)
        else:
            cursor.write_u32(position, offsets[placement.next_namespace])

    def relocated_value (self, ifd, tag, placement):
        """Return a tag's value as it should be written at its placement.

        That's the stored value, except for the thumbnail's offset and
        length, which have to describe where the thumbnail ends up.
        """
        if placement.thumbnail_offset is not None:
            if tag == TiffTag.JPEGInterchangeFormat:
                return TagValue(TiffType.LONG, (placement.thumbnail_offset,))

            if tag == TiffTag.JPEGInterchangeFormatLength:
                return TagValue(TiffType.LONG, (len(ifd.thumbnail),))

        return ifd[tag]
