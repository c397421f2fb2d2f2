# Copyright (c) 2015 The Regents of the University of Michigan.
# All Rights Reserved. Licensed according to the terms of the Revised
# BSD License. See LICENSE.txt for details.
from collections    import  namedtuple
from fractions      import  Fraction

from numpy          import  nan as NaN, inf as infinity

class Rational (namedtuple("Rational", ("numerator", "denominator"))):
    """Lossless rational storage.

    This exists to store TIFF rationals without losing any data
    whatsoever. A Fraction would do most of the job, but Exif writers
    are fond of 0/0 ("unknown"), and Fraction won't hold that. It also
    wouldn't remember that 2/4 was written as 2/4.

        >>> Rational(72, 1)
        <Rational 72/1>
        >>> float(Rational(1, 4))
        0.25
        >>> Rational(2, 4).fraction
        Fraction(1, 2)
        >>> Rational(0, 0).fraction is None
        True
    """

    __slots__ = ()

    def __float__ (self):
        """Convert to usable float."""
        if self.denominator != 0:
            return self.numerator / self.denominator

        if self.numerator == 0:
            # 0/0 means nothing at all.
            return NaN

        # Anything else over zero heads off to one infinity or the
        # other.
        return infinity if self.numerator > 0 else -infinity

    def __repr__ (self):
        """Represent an instance."""
        return "<{} {:d}/{:d}>".format(self.__class__.__name__,
                                       self.numerator,
                                       self.denominator)

    @property
    def fraction (self):
        """The value as a Fraction, or None with a zero denominator."""
        if self.denominator == 0:
            return None

        return Fraction(self.numerator, self.denominator)

    @classmethod
    def from_number (cls, number, signed = False):
        """Build a rational from an int, float, Fraction, or Rational.

        The result always fits in 32-bit halves; floats are approximated
        by the closest fraction that does.

            >>> Rational.from_number(0.5)
            <Rational 1/2>
            >>> Rational.from_number(Fraction(-3, 9), signed = True)
            <Rational -1/3>
        """
        if isinstance(number, cls):
            return number

        limit       = 0x7fffffff if signed else 0xffffffff
        fraction    = Fraction(number).limit_denominator(limit)

        return cls(fraction.numerator, fraction.denominator)
