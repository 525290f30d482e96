"""Error types raised by the codec and upload layers."""


class GearsigError(ValueError):
    """Base class for every codec/validation failure."""


class FormatError(GearsigError):
    """Input is not valid JSON, has the wrong shape, or is the wrong format."""


class VersionError(GearsigError):
    def __init__(self, version):
        super().__init__(f"unsupported config version: {version}")
        self.version = version


class IntegrityError(GearsigError):
    """CRC-16 or CRC-32 mismatch."""


class DecodeError(GearsigError):
    """Base64 or structural decode failure."""


class LimitExceeded(GearsigError):
    def __init__(self, measured, limit, subject="value"):
        over = measured - limit
        super().__init__(f"{subject} is {measured}, limit is {limit} ({over} over)")
        self.measured = measured
        self.limit = limit
        self.subject = subject


class SignalNotFound(GearsigError):
    pass
