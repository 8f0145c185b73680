
from .srp import SRPClient, SRPServer, ServerHello
from .params import GroupParams, DefaultParams
from .store import CredentialStore, MemoryCredentialStore
from .errors import (SRPError, ConfigurationError, UnsupportedGroupSize,
                     WeakGroupParameters, UnsupportedHashAlgorithm,
                     ProtocolAbort, ZeroPublicValue, PublicValueOutOfRange,
                     ZeroScramblingParameter, EvidenceMismatch,
                     RandomSourceFailure, InvalidSessionState)
SRPClient, SRPServer, ServerHello # hush pyflakes
GroupParams, DefaultParams, CredentialStore, MemoryCredentialStore
(SRPError, ConfigurationError, UnsupportedGroupSize, WeakGroupParameters,
 UnsupportedHashAlgorithm, ProtocolAbort, ZeroPublicValue,
 PublicValueOutOfRange, ZeroScramblingParameter, EvidenceMismatch,
 RandomSourceFailure, InvalidSessionState)

from ._version import __version__
