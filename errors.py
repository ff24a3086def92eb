class HuffmanError(Exception):
    """Base class for all codec errors.

    Every error is terminal for the encode/decode call that raised it.
    """


class InputNotFoundError(HuffmanError, FileNotFoundError):
    """The input path does not exist."""


class InputUnreadableError(HuffmanError, OSError):
    """The input path exists but cannot be read."""


class EmptyInputError(HuffmanError, ValueError):
    """Zero-length input was given to the encoder."""


class MalformedHeaderError(HuffmanError, ValueError):
    """The frequency header is truncated or inconsistent."""


class CorruptPayloadError(HuffmanError, ValueError):
    """The packed payload does not decode cleanly against the header."""


class OutputWriteError(HuffmanError, OSError):
    """The output path cannot be written."""
