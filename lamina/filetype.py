# Copyright (c) 2015 The Regents of the University of Michigan.
# All Rights Reserved. Licensed according to the terms of the Revised
# BSD License. See LICENSE.txt for details.

class FileKind:
    """Container formats I can recognize"""
    JPEG    = "JPEG"
    TIFF    = "TIFF"
    PNG     = "PNG"
    GIF     = "GIF"
    WEBP    = "WEBP"
    UNKNOWN = "unknown"

# Each kind is known by what its first bytes look like. WEBP is a RIFF
# file with "WEBP" at offset 8.
signatures = (
    (FileKind.JPEG,     0,  b"\xff\xd8"),
    (FileKind.TIFF,     0,  b"II*\0"),
    (FileKind.TIFF,     0,  b"MM\0*"),
    (FileKind.PNG,      0,  b"\x89PNG\r\n\x1a\n"),
    (FileKind.GIF,      0,  b"GIF87a"),
    (FileKind.GIF,      0,  b"GIF89a"),
    (FileKind.WEBP,     8,  b"WEBP"),
)

def detect (buffer):
    """Guess a buffer's file kind from its leading bytes.

        >>> detect(b"\\xff\\xd8\\xff\\xe0")
        'JPEG'
        >>> detect(b"MM\\x00*\\x00\\x00\\x00\\x08")
        'TIFF'
        >>> detect(b"hello")
        'unknown'
    """
    for kind, offset, signature in signatures:
        if bytes(buffer[offset:offset + len(signature)]) == signature:
            if kind == FileKind.WEBP and bytes(buffer[:4]) != b"RIFF":
                continue

            return kind

    return FileKind.UNKNOWN
