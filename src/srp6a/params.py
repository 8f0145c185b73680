import hashlib, logging, os
from .errors import (UnsupportedGroupSize, WeakGroupParameters,
                     UnsupportedHashAlgorithm)
from .groups import SRPGroup, STANDARD_GROUPS
from .derive import compute_k
from .util import (number_to_bytes, number_to_minimal_bytes, xor_bytes,
                   is_probable_prime)

logger = logging.getLogger(__name__)

# Anything smaller than this is not worth protecting a password with.
MIN_MODULUS_BITS = 1024

def _resolve_hash(hash_algorithm):
    # accept a hashlib name ("sha256") or constructor (hashlib.sha256)
    if isinstance(hash_algorithm, str):
        name = hash_algorithm.lower()
        try:
            hashlib.new(name)
        except (ValueError, TypeError) as e:
            raise UnsupportedHashAlgorithm("unknown hash %r" % hash_algorithm) from e
        def hash_f(data=b""):
            return hashlib.new(name, data)
    elif callable(hash_algorithm):
        hash_f = hash_algorithm
        try:
            name = hash_f().name
        except (AttributeError, TypeError) as e:
            raise UnsupportedHashAlgorithm("%r does not build a hashlib-style "
                                           "digest" % (hash_algorithm,)) from e
    else:
        raise UnsupportedHashAlgorithm("hash must be a name or a constructor, "
                                       "not %r" % (hash_algorithm,))
    if not getattr(hash_f(), "digest_size", 0):
        # SHAKE and friends have no fixed output length
        raise UnsupportedHashAlgorithm("%s has no fixed digest size" % name)
    return name, hash_f


class GroupParams:
    """An SRP group (N, g) together with the hash function H.

    Build these with GroupParams.standard() or GroupParams.custom(). They
    never change after construction, so one instance can be shared by any
    number of sessions running in any number of threads.

        params = GroupParams.standard(2048, "sha256")
        params.pad(A)          # PAD(A): A as len(N) big-endian bytes
        params.H(a, b, c)      # H(a | b | c)
        params.k               # H(N | PAD(g)), as an int
    """

    __slots__ = ("group", "hash_name", "_hash_f", "k",
                 "hashed_N_xor_g", "fingerprint")

    def __init__(self, group, hash_algorithm):
        assert isinstance(group, SRPGroup), repr(group)
        hash_name, hash_f = _resolve_hash(hash_algorithm)
        object.__setattr__(self, "group", group)
        object.__setattr__(self, "hash_name", hash_name)
        object.__setattr__(self, "_hash_f", hash_f)

        # precompute everything that depends only on (N, g, H)
        object.__setattr__(self, "k", compute_k(self))
        hashed_N_xor_g = xor_bytes(self.H(number_to_minimal_bytes(self.N)),
                                   self.H(number_to_minimal_bytes(self.g)))
        object.__setattr__(self, "hashed_N_xor_g", hashed_N_xor_g)
        # enough to notice that a serialized session is being restored with
        # different parameters
        fingerprint = hashlib.sha256(b":".join([
            number_to_minimal_bytes(self.N),
            number_to_minimal_bytes(self.g),
            self.hash_name.encode("ascii")])).hexdigest()
        object.__setattr__(self, "fingerprint", fingerprint)
        logger.debug("built SRP params: %d-bit N, g=%d, H=%s",
                     group.element_size_bits, group.g, hash_name)

    def __setattr__(self, name, value):
        raise AttributeError("GroupParams are immutable")

    def __delattr__(self, name):
        raise AttributeError("GroupParams are immutable")

    def __repr__(self):
        return "<GroupParams %s H=%s>" % (self.group.name, self.hash_name)

    @property
    def N(self):
        return self.group.N

    @property
    def g(self):
        return self.group.g

    @property
    def pad_length(self):
        return self.group.element_size_bytes

    @property
    def digest_size(self):
        return self._hash_f().digest_size

    def hash_constructor(self):
        return self._hash_f

    def pad(self, x):
        """Return x as exactly len(N) big-endian bytes (RFC 5054 PAD)."""
        if not 0 <= x < self.N:
            raise ValueError("PAD() argument must be in [0, N)")
        return number_to_bytes(x, self.N)

    def H(self, *pieces):
        h = self._hash_f()
        for piece in pieces:
            assert isinstance(piece, (bytes, bytearray)), type(piece)
            h.update(piece)
        return h.digest()

    def same_group(self, N, g, hash_name):
        return (N, g, hash_name.lower()) == (self.N, self.g, self.hash_name)

    @classmethod
    def standard(klass, bits, hash_algorithm="sha1"):
        """Return the RFC 5054 Appendix A group of the given size (1024, 1536,
        2048, 3072, 4096, 6144 or 8192 bits) paired with hash_algorithm. RFC
        5054 itself uses SHA-1."""
        try:
            group = STANDARD_GROUPS[bits]
        except (KeyError, TypeError):
            raise UnsupportedGroupSize("no standard SRP group of size %r; "
                                       "choose one of %s"
                                       % (bits, sorted(STANDARD_GROUPS)))
        return klass(group, hash_algorithm)

    @classmethod
    def custom(klass, N_hex, g, hash_algorithm, require_safe_prime=False,
               entropy_f=os.urandom):
        """Build params from a caller-supplied modulus (hex string, spaces and
        newlines allowed) and generator.

        N must be an odd probable prime of at least MIN_MODULUS_BITS bits
        and 1 < g < N-1. Whether N is a *safe* prime is only checked when
        require_safe_prime=True; otherwise that remains the caller's job.
        """
        try:
            N = int("".join(N_hex.split()), 16)
        except (AttributeError, ValueError) as e:
            raise WeakGroupParameters("N must be a hex string") from e
        if N % 2 == 0:
            raise WeakGroupParameters("N is even")
        if N.bit_length() < MIN_MODULUS_BITS:
            raise WeakGroupParameters("N has %d bits, need at least %d"
                                      % (N.bit_length(), MIN_MODULUS_BITS))
        if not isinstance(g, int) or not 1 < g < N - 1:
            raise WeakGroupParameters("generator must satisfy 1 < g < N-1")
        if not is_probable_prime(N, entropy_f=entropy_f):
            raise WeakGroupParameters("N is not prime")
        if require_safe_prime and not is_probable_prime((N - 1) // 2,
                                                        entropy_f=entropy_f):
            raise WeakGroupParameters("N is not a safe prime")
        logger.debug("accepted custom %d-bit SRP group", N.bit_length())
        return klass(SRPGroup(N, g, name="custom-%d" % N.bit_length()),
                     hash_algorithm)

# There is no process-wide default that can be changed at runtime. Callers
# who don't care pass (or inherit) this constant.
DefaultParams = GroupParams.standard(2048, "sha3_256")
