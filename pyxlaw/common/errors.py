"""
Exception hierarchy for pyxlaw.
Every error is an input-validation failure raised before any output is produced.
"""


class XlawError(Exception):
    """Base class for all pyxlaw errors."""

    pass


class RangeError(XlawError, ValueError):
    """A sample lies outside the legal range for its declared bit depth."""

    pass


class InvalidBitDepthError(XlawError, ValueError):
    """A bit depth is outside the supported set."""

    pass


class EmptyInputError(XlawError, ValueError):
    """A zero-length sample sequence was given where one is required."""

    pass


class InvalidRateError(XlawError, ValueError):
    """A sample rate is zero or negative."""

    pass


class UnsupportedFeatureError(XlawError, NotImplementedError):
    """A recognised but unimplemented feature was requested (e.g. 48-bit samples)."""

    pass


class BufferLengthError(XlawError, ValueError):
    """A raw byte buffer does not hold a whole number of samples."""

    pass
