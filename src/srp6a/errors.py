class SRPError(Exception):
    pass

class ConfigurationError(SRPError):
    """The group parameters could not be built. Never downgraded silently:
    fix the arguments and construct again."""
class UnsupportedGroupSize(ConfigurationError):
    """There is no RFC 5054 group of that size."""
class WeakGroupParameters(ConfigurationError):
    """A custom N or g is unusable (even, too small, composite, or g out of
    range)."""
class UnsupportedHashAlgorithm(ConfigurationError):
    pass

class ProtocolAbort(SRPError):
    """The peer sent something that SRP-6a requires us to reject. The session
    is over and none of its key material may be used."""
    kind = None

class ZeroPublicValue(ProtocolAbort):
    """The peer's public value (A or B) is zero modulo N."""
    kind = "ZeroPublicValue"
class PublicValueOutOfRange(ProtocolAbort):
    """The peer's public value is not reduced modulo N (it is >= N)."""
    kind = "PublicValueOutOfRange"
class ZeroScramblingParameter(ProtocolAbort):
    """u = H(PAD(A) | PAD(B)) came out as zero."""
    kind = "ZeroScramblingParameter"
class EvidenceMismatch(ProtocolAbort):
    """The peer's evidence message (M1 or M2) did not match ours. This is the
    only thing a failed authentication ever reports."""
    kind = "EvidenceMismatch"

class RandomSourceFailure(SRPError):
    """Secure randomness could not be obtained. This is an infrastructure
    problem, not an authentication failure: a new session may be tried."""

class InvalidSessionState(SRPError):
    """A session method was called out of order (or after the session
    ended)."""

class SerializedTooEarly(SRPError):
    pass
class WrongSideSerialized(SRPError):
    """You tried to unserialize data stored for the other side."""
class WrongGroupError(SRPError):
    pass
