"""Exception types raised while generating typography tokens."""


class TypeTokensError(Exception):
    """Base class for all typetokens failures."""


class ConfigurationError(TypeTokensError, ValueError):
    """A scale, line-height or compiler configuration is unusable."""


class CSSParsingError(TypeTokensError):
    """The @font-face stylesheet could not be read."""


class FontExtractionError(TypeTokensError):
    """A font file could not be opened or lacks usable vertical metrics."""


class FontCollectionError(FontExtractionError):
    """The font file is a collection (TTC/OTC) rather than a single font."""


class OutputWriteError(TypeTokensError, OSError):
    """A generated file could not be written to its destination."""
