# Copyright (c) 2015 The Regents of the University of Michigan.
# All Rights Reserved. Licensed according to the terms of the Revised
# BSD License. See LICENSE.txt for details.
from bisect             import  bisect_left, insort_left
from collections        import  namedtuple
from collections.abc    import  MutableMapping

from .tags              import  DEFAULT_REGISTRY, TiffTag
from .types             import  TagValue, byte_size, fits_inline
from .values            import  value_name

# Every entry is twelve bytes: tag, type, count, and the value slot.
ENTRY_SIZE      = 12

# These two locate a JPEG thumbnail that isn't itself a tag value.
THUMBNAIL_TAGS  = frozenset((
    TiffTag.JPEGInterchangeFormat,
    TiffTag.JPEGInterchangeFormatLength,
))

class TagEntry (namedtuple("TagEntry", ("tag",
                                        "tifftype",
                                        "count",
                                        "slot",
                                        "position"))):
    """One 12-byte IFD entry as it sits in the buffer.

    The slot is the raw 4-byte value field. Whether it holds the value
    itself or an offset depends on the type and count.
    """

    __slots__ = ()

    @property
    def byte_size (self):
        return byte_size(self.tifftype, self.count)

    @property
    def is_inline (self):
        return fits_inline(self.tifftype, self.count)

class ImageFileDirectory (MutableMapping):
    """Image File Directory.

    This is pretty much a dictionary of tag ids to TagValues. It's
    different in a few ways:

    1.  It's sorted. When iterating, the keys are already in ascending
        tag order, which is what a valid IFD needs on disk.

    2.  It knows its namespace and the offset it was read from (or None
        if it was never read from anything).

    3.  It keeps a separate mapping of pointer tags to the namespaces of
        the directories they point at. Pointer tags never hold values;
        their offsets are worked out on encoding.

    4.  It can hold the bytes of a JPEG thumbnail, which its
        JPEGInterchangeFormat tags point at. Deleting either of those
        tags lets go of the thumbnail.

        >>> ifd = ImageFileDirectory("ifd0")
        >>> ifd[0x0112] = TagValue(3, (1,))
        >>> ifd[0x010f] = TagValue(2, b"Canon")
        >>> list(ifd)
        [271, 274]
    """

    def __init__ (self, namespace, offset = None):
        self.namespace      = namespace
        self.offset         = offset
        self.pointers       = { }
        self.thumbnail      = None

        self.internal_dict  = { }
        self.ordered_tags   = [ ]

    def __getitem__ (self, key):
        return self.internal_dict[key]

    def __setitem__ (self, key, value):
        if not isinstance(value, TagValue):
            raise TypeError("Expected a TagValue; got {!r}".format(value))

        if key not in self.internal_dict:
            # We haven't seen this one before, so it needs a place in
            # line.
            insort_left(self.ordered_tags, key)

        self.internal_dict[key] = value

    def __delitem__ (self, key):
        del self.internal_dict[key]
        del self.ordered_tags[bisect_left(self.ordered_tags, key)]

        if key in THUMBNAIL_TAGS:
            self.thumbnail = None

    def __iter__ (self):
        return iter(self.ordered_tags)

    def __len__ (self):
        return len(self.ordered_tags)

    def __contains__ (self, key):
        return key in self.internal_dict

    def __repr__ (self):
        return "<{} {} {}>".format(self.__class__.__name__,
                self.namespace,
                ", ".join("0x{:04x}={!r}".format(tag, value)
                          for tag, value in self.items()))

    def __str__ (self):
        return self.dump()

    @property
    def entry_count (self):
        """Entries this IFD will have on disk, pointers included."""
        return len(self) + len(self.pointers)

    @property
    def has_thumbnail (self):
        return self.thumbnail is not None \
                and TiffTag.JPEGInterchangeFormat in self

    @property
    def table_size (self):
        """Bytes taken by the count, the entries, and the next offset."""
        return 2 + ENTRY_SIZE * self.entry_count + 4

    def dump (self, registry = DEFAULT_REGISTRY):
        """Dump an IFD all pretty"""
        result = "{}:".format(self.namespace)

        for tag, value in self.items():
            result += "\n  {:04x} {:>28s}: ".format(tag,
                        registry.name(self.namespace, tag))

            result += str(value)
            named = value_name(self.namespace, tag, value)

            if named is not None:
                result += " ({})".format(named)

        for tag, child in sorted(self.pointers.items()):
            result += "\n  {:04x} {:>28s}: -> {}".format(tag,
                        registry.name(self.namespace, tag), child)

        return result
