import logging, threading

logger = logging.getLogger(__name__)

class CredentialStore:
    """What SRPServer.from_store() needs from a credential database: the
    (salt, verifier) recorded for an identity at registration time.

    lookup() raises KeyError for an identity it has never seen. A real server
    should not let that difference show on the wire (RFC 5054 section
    2.5.1.3 suggests answering with a simulated salt and B)."""

    def lookup(self, identity):
        raise NotImplementedError

    def store(self, identity, salt, verifier):
        raise NotImplementedError

class MemoryCredentialStore(CredentialStore):
    "A dict-backed CredentialStore, safe to share between threads."

    def __init__(self):
        self._records = {}
        self._lock = threading.Lock()

    def lookup(self, identity):
        with self._lock:
            return self._records[identity]

    def store(self, identity, salt, verifier):
        assert isinstance(identity, bytes), repr(identity)
        assert isinstance(salt, bytes), repr(salt)
        assert isinstance(verifier, bytes), repr(verifier)
        with self._lock:
            self._records[identity] = (salt, verifier)
        logger.debug("stored verifier for %r", identity)

    def __contains__(self, identity):
        with self._lock:
            return identity in self._records

    def __len__(self):
        with self._lock:
            return len(self._records)
