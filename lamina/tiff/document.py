# Copyright (c) 2015 The Regents of the University of Michigan.
# All Rights Reserved. Licensed according to the terms of the Revised
# BSD License. See LICENSE.txt for details.
from collections    import  OrderedDict, namedtuple
import logging

from ..internal     import  ByteOrder
from .ifd           import  ImageFileDirectory
from .tags          import  DEFAULT_REGISTRY, Namespace, \
                            SubdirectoryParentDict, SubdirectoryTagDict, \
                            chain_index, chain_namespace
from .types         import  TagValue

log = logging.getLogger(__name__)

# Where a document came from. The kind is a FileKind; the segment index
# is None for bare TIFF input; start and length locate the TIFF bytes.
SourceRange = namedtuple("SourceRange", ("kind",
                                         "segment_index",
                                         "start",
                                         "length"))

class MetadataDocument:
    """Metadata Document

    This is the decoded tree of IFDs, kept as a flat arena keyed by
    namespace ("ifd0", "ifd1", ..., "exif", "gps", "interop"). Parents
    refer to their children by namespace through their pointers, never
    by reference, so the whole thing mirrors what's on disk.

    Nothing here touches bytes; the codec encodes a document when asked.

        >>> document = MetadataDocument()
        >>> document.set("exif", 0x829a, Fraction(1, 250))
        TagValue(tifftype=5, value=(<Rational 1/250>,))
        >>> document.namespaces()
        ['ifd0', 'exif']
        >>> document["ifd0"].pointers
        {34665: 'exif'}

    There's always an ifd0, even if it's empty.
    """

    def __init__ (self, byte_order = ByteOrder.BIG, source = None,
                  registry = None):
        self.byte_order     = byte_order
        self.source         = source
        self.registry       = registry or DEFAULT_REGISTRY
        self.jfif           = None

        self.directories    = OrderedDict()
        self.reset()

    def __repr__ (self):
        return "<{} {}-endian {}>".format(self.__class__.__name__,
                self.byte_order,
                ", ".join("{}:{:d}".format(namespace, len(ifd))
                          for namespace, ifd in self.directories.items()))

    def __str__ (self):
        return "\n".join(ifd.dump(self.registry)
                         for ifd in self.directories.values())

    def __getitem__ (self, namespace):
        return self.directories[namespace]

    def __contains__ (self, namespace):
        return namespace in self.directories

    def __iter__ (self):
        return iter(self.directories)

    def __len__ (self):
        return len(self.directories)

    def __bool__ (self):
        """True if any directory holds any tag."""
        return any(len(ifd) > 0 for ifd in self.directories.values())

    @property
    def root (self):
        return self.directories[Namespace.IFD0]

    def reset (self):
        self.directories.clear()
        self.directories[Namespace.IFD0] = ImageFileDirectory(
                Namespace.IFD0)

    def namespaces (self):
        return list(self.directories)

    def chain (self):
        """Return the main chain of IFDs, in order."""
        result = [ ]

        while chain_namespace(len(result)) in self.directories:
            result.append(self.directories[chain_namespace(len(result))])

        return result

    def triples (self):
        """Yield every (namespace, tag, value) in the document."""
        for namespace, ifd in self.directories.items():
            for tag, value in ifd.items():
                yield namespace, tag, value

    def add_directory (self, ifd, parent = None, via_tag = None):
        """Put an IFD in the arena, linking it from its parent."""
        self.directories[ifd.namespace] = ifd

        if parent is not None:
            self.directories[parent].pointers[via_tag] = ifd.namespace

    def unique_namespace (self, name, parent):
        """Name a nested directory without clobbering another.

        The first Exif IFD is "exif". If ifd1 has one of its own, that
        one is "ifd1.exif".
        """
        if name not in self.directories:
            return name

        candidate   = "{}.{}".format(parent, name)
        number      = 2

        while candidate in self.directories:
            candidate = "{}.{}{:d}".format(parent, name, number)
            number += 1

        return candidate

    def directory (self, namespace, create = False):
        """Return the IFD for a namespace.

        With create set, I'll make a missing Exif, GPS, or Interop IFD
        (and whatever it hangs from), or the next IFD in the chain.
        Anything else I can't make raises a KeyError.
        """
        if namespace in self.directories:
            return self.directories[namespace]

        if not create:
            raise KeyError(namespace)

        if namespace in SubdirectoryParentDict:
            parent, tag = SubdirectoryParentDict[namespace]
            self.directory(parent, create = True)
            self.add_directory(ImageFileDirectory(namespace), parent, tag)

            log.debug("Created %s under %s", namespace, parent)
            return self.directories[namespace]

        index = chain_index(namespace)

        if index is not None and chain_namespace(index - 1) \
                in self.directories:
            # The chain can only grow at its end.
            self.add_directory(ImageFileDirectory(namespace))
            return self.directories[namespace]

        raise KeyError(namespace)

    def get (self, namespace, tag_id):
        """Return a TagValue, or None if it isn't there."""
        ifd = self.directories.get(namespace)

        if ifd is None:
            return None

        return ifd.get(tag_id)

    def set (self, namespace, tag_id, value):
        """Set a tag, converting plain values as needed.

        The registry's permitted types for the tag are tried in order;
        if it's an unknown tag, I'll guess. If nothing fits, this raises
        UnencodableValue.
        """
        if tag_id in SubdirectoryTagDict:
            raise ValueError("Tag 0x{:04x} points at a directory; set a "
                             "tag inside that directory instead".format(
                                     tag_id))

        definition  = self.registry.resolve(namespace, tag_id)
        types       = None if definition is None else definition.types
        tag_value   = TagValue.coerce(value, types)

        self.directory(namespace, create = True)[tag_id] = tag_value
        return tag_value

    def remove (self, namespace, tag_id):
        """Remove a tag, returning its old value (or None).

        Removing a pointer tag removes the directory it points at, along
        with anything nested inside that.
        """
        ifd = self.directories.get(namespace)

        if ifd is None:
            return None

        if tag_id in ifd.pointers:
            self.__drop_subtree(ifd.pointers.pop(tag_id))
            return None

        return ifd.pop(tag_id, None)

    def strip_all (self):
        """Empty the document down to a single empty ifd0."""
        self.reset()

    def __drop_subtree (self, namespace):
        doomed = [namespace]

        while doomed:
            ifd = self.directories.pop(doomed.pop(), None)

            if ifd is not None:
                doomed.extend(ifd.pointers.values())
