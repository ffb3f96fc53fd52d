"""Error taxonomy shared by the partitioner, the LBG builder and the codec."""


class VQError(Exception):
    pass


class InvalidDimensions(VQError, ValueError):
    pass


class EmptyClusterError(VQError, ValueError):
    pass


class EncodingError(VQError):
    pass


class UnknownIndexError(VQError, LookupError):
    def __init__(self, code: str):
        super().__init__(f"index {code!r} is not in the codebook")
        self.code = code


class CodecError(VQError, OSError):
    """Truncated or malformed compressed stream."""
