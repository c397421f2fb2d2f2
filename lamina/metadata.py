# Copyright (c) 2015 The Regents of the University of Michigan.
# All Rights Reserved. Licensed according to the terms of the Revised
# BSD License. See LICENSE.txt for details.
import logging

from .exceptions    import  BoundsError, MalformedContainer, \
                            NotAContainer, UnsupportedContainer
from .filetype      import  FileKind, detect
from .jpeg          import  EXIF_IDENTIFIER, JFIF_IDENTIFIER, Marker, \
                            SegmentScanner, parse_jfif
from .tiff          import  IfdCodec, MetadataDocument, SourceRange

log = logging.getLogger(__name__)

# Files of these kinds are recognized but have nothing for me to read.
unsupported_kinds = frozenset((
    FileKind.PNG,
    FileKind.GIF,
    FileKind.WEBP,
))

def check_kind (data):
    kind = detect(data)

    if kind in unsupported_kinds:
        raise UnsupportedContainer(0, kind)

    return kind

def decode (data, **options):
    """Decode the metadata in a JPEG or TIFF buffer.

    Any keyword options (registry, max_depth, strict,
    skip_broken_subdirectories) go to the IfdCodec.

    A JPEG with no Exif segment decodes to an empty document, which can
    be filled in and written back with rewrite_container.
    """
    kind    = check_kind(data)
    codec   = IfdCodec(**options)

    if kind == FileKind.TIFF:
        return codec.decode_tiff(data, source = SourceRange(
                kind, None, 0, len(data)))

    # Everything else had better be a JPEG. If it isn't, the scanner
    # will say so.
    scanner     = SegmentScanner(data)
    segments    = scanner.scan()
    jfif        = None

    index = scanner.find(segments, Marker.APP0, JFIF_IDENTIFIER)

    if index is not None:
        try:
            jfif = parse_jfif(bytes(data[segments[index].payload]))

        except (BoundsError, MalformedContainer) as error:
            # A broken JFIF header has nothing to do with the Exif.
            log.warning("Ignoring the JFIF header in segment %d: %s",
                        index, error)

    index = scanner.find(segments, Marker.APP1, EXIF_IDENTIFIER)

    if index is None:
        log.debug("No Exif segment among %d segments", len(segments))
        document = MetadataDocument(registry = codec.registry)

    else:
        body        = segments[index].body
        document    = codec.decode_tiff(bytes(data[body]),
                source = SourceRange(kind, index, body.start,
                                     body.stop - body.start))

    document.jfif = jfif
    return document

def get_tag (document, namespace, tag_id):
    """Return a tag's TagValue, or None if it's absent."""
    return document.get(namespace, tag_id)

def set_tag (document, namespace, tag_id, value):
    document.set(namespace, tag_id, value)
    return document

def remove_tag (document, namespace, tag_id):
    document.remove(namespace, tag_id)
    return document

def strip_all (document):
    document.strip_all()
    return document

def encode (document, **options):
    """Encode a document as TIFF bytes."""
    options.setdefault("registry", document.registry)
    return IfdCodec(**options).encode(document)

def rewrite_container (original, new_metadata):
    """Put new metadata into a JPEG, leaving everything else alone.

    The new metadata can be TIFF bytes or a MetadataDocument. If the
    JPEG already has an Exif segment, its body is replaced; otherwise a
    new one is added near the start of the file.
    """
    kind = check_kind(original)

    if kind != FileKind.JPEG:
        # Bare TIFFs included: the metadata is the whole file there.
        raise NotAContainer(0, int.from_bytes(bytes(original[:2]), "big"))

    if isinstance(new_metadata, MetadataDocument):
        new_metadata = encode(new_metadata)

    scanner     = SegmentScanner(original)
    segments    = scanner.scan()
    index       = scanner.find(segments, Marker.APP1, EXIF_IDENTIFIER)

    if index is None:
        return scanner.insert_segment(segments, Marker.APP1,
                                      EXIF_IDENTIFIER, new_metadata)

    return scanner.replace_payload(segments, index, new_metadata)
