# Copyright (c) 2015 The Regents of the University of Michigan.
# All Rights Reserved. Licensed according to the terms of the Revised
# BSD License. See LICENSE.txt for details.

class LaminaError (Exception):
    """Root for all Lamina errors.

    Note:
        This is meant to never be raised directly. Only its descendents
        will be raised; this is meant only to be caught.

    Examples:
        For the sake of clarity, all child exceptions default to showing
        the docstring if ever converted to strings.

        >>> class MyLaminaError (LaminaError):
        ...     '''Quick description of this subclass.'''
        ...     pass
        ...
        >>> raise MyLaminaError
        Traceback (most recent call last):
          File "<stdin>", line 1, in <module>
        MyLaminaError: Quick description of this subclass.

    """

    def __repr__ (self):
        # Assume the child exception class has implemented its own
        # __str__ method. If not, this'll look much the same as any
        # other python exception.
        return "{}({})".format(self.__class__.__name__, repr(str(self)))

    def __str__ (self):
        # By default, let's just keep our docstrings short.
        return self.__doc__

class PositionedError (LaminaError):
    """Positioned Error

    Something unexpected was found at a particular byte of a buffer.

    Note:
        This is meant to never be raised directly. Only its descendents
        will be raised; this is meant only to be caught.

    Args:
        position (int):     The byte in the buffer.

    Examples:
        >>> error = OutOfBounds(256, 4, 258)
        >>> error
        OutOfBounds('Access of 4 byte(s) overruns a 258-byte buffer. (0x00000100)')
        >>> error.tag_id = 0x8769
        >>> str(error)
        'Access of 4 byte(s) overruns a 258-byte buffer. (0x00000100, tag 0x8769)'

        The message is already set by the subclass docstring, and the
        output contains an eight-digit hexadecimal pointing to the
        exact byte where the problem occurred. When the codec knows
        which tag it was working on, that's included too.

    """

    def __init__ (self, position, *args):
        # All I want to actually take in is a positional argument; the
        # message should be set by the child class.
        self.position   = position
        self.args       = args
        self.tag_id     = None

    def __str__ (self):
        message = self.__doc__.format(*(self.args))

        if self.tag_id is None:
            return "{} (0x{:08x})".format(message, self.position)

        return "{} (0x{:08x}, tag 0x{:04x})".format(message,
                                                    self.position,
                                                    self.tag_id)

########################################################################
########################### Structural errors ##########################
########################################################################

class StructuralError (PositionedError):
    """Catch-all for structural errors."""
    pass

class NotAContainer (StructuralError):
    """Expected start-of-image marker 0xffd8; found 0x{:04x}."""
    pass

class MalformedContainer (StructuralError):
    """Malformed container: {}"""
    pass

class UnsupportedContainer (StructuralError):
    """{} files have no metadata container I can read."""
    pass

class UnknownByteOrder (StructuralError):
    """Unknown byte order: {!r}"""
    pass

class WrongMagicNumber (StructuralError):
    """Wrong magic number: expected {:d}; found {:d}"""
    pass

class FirstIFDOffsetTooLow (StructuralError):
    """IFD offset must be at least {:d}; I was given {:d}"""
    pass

class UnsupportedDataType (StructuralError):
    """Tag 0x{:04x} has unsupported data type {:d}."""
    pass

class TagTypeMismatch (StructuralError):
    """Tag 0x{:04x} ({}) can't have type {}; expected one of {}."""
    pass

class TagCountMismatch (StructuralError):
    """Tag 0x{:04x} ({}) must have {:d} value(s); found {:d}."""
    pass

class DuplicateTag (StructuralError):
    """Tag 0x{:04x} is already in IFD {}; no duplicates allowed."""
    pass

########################################################################
############################# Bounds errors ############################
########################################################################

class BoundsError (PositionedError):
    """Catch-all for out-of-range offsets and lengths."""
    pass

class OutOfBounds (BoundsError):
    """Access of {:d} byte(s) overruns a {:d}-byte buffer."""
    pass

########################################################################
########################### Integrity errors ###########################
########################################################################

class IntegrityError (PositionedError):
    """Catch-all for directory graphs I refuse to walk."""
    pass

class CyclicDirectory (IntegrityError):
    """IFD {} points back at a directory that was already read."""
    pass

class TooDeep (IntegrityError):
    """IFD {} is nested more than {:d} levels deep."""
    pass

########################################################################
############################ Capacity errors ###########################
########################################################################

class CapacityError (PositionedError):
    """Catch-all for content that won't fit its container."""
    pass

class PayloadTooLarge (CapacityError):
    """Segment length would be {:d}; the limit is {:d}."""
    pass

########################################################################
############################# Value errors #############################
########################################################################

class UnencodableValue (LaminaError, ValueError):
    """Value can't be stored as any of the permitted TIFF types."""

    def __init__ (self, value, type_names):
        self.value      = value
        self.type_names = tuple(type_names)

    def __str__ (self):
        return "Can't store {!r} as {}.".format(self.value,
                                                " or ".join(self.type_names))
