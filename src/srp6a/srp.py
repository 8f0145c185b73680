import os, json, logging
from binascii import hexlify, unhexlify
from collections import namedtuple
from hkdf import Hkdf
from .errors import (ProtocolAbort, ZeroPublicValue, PublicValueOutOfRange,
                     EvidenceMismatch, RandomSourceFailure,
                     InvalidSessionState, SerializedTooEarly,
                     WrongSideSerialized, WrongGroupError)
from .params import GroupParams, DefaultParams
from .derive import (compute_x, compute_verifier, compute_u,
                     compute_client_premaster, compute_server_premaster,
                     compute_session_key, compute_M1, compute_M2)
from .util import (number_to_minimal_bytes, bytes_to_number,
                   constant_time_equals, get_random_bytes, unbiased_randrange)

logger = logging.getLogger(__name__)

SideClient = b"C"
SideServer = b"S"

# session states
NEW = "new"
CREDENTIALS_SET = "credentials-set"
REGISTRATION_DONE = "registration-done"
KEY_EXCHANGED = "key-exchanged"
SESSION_KEY_DERIVED = "session-key-derived"
EVIDENCE_SENT = "evidence-sent"
EVIDENCE_VERIFIED = "evidence-verified"
AUTHENTICATED = "authenticated"
ABORTED = "aborted"

TERMINAL_STATES = (REGISTRATION_DONE, AUTHENTICATED, ABORTED)

# 128 bits
MIN_SALT_BYTES = 16

ServerHello = namedtuple("ServerHello", ["N", "g", "hash_name", "salt", "B"])

#           Client                             Server
#  hello()            I         -------->
#                                              (look up s, v for I)
#                               <--------  s, B        hello()
#  key_exchange()     A         -------->
#  session_key(B, s)                           session_key(A)
#  evidence_message() M1        -------->      verify_evidence(M1)
#                               <--------  M2          evidence_message()
#  verify_evidence(M2)
#
# Registration is client-only: register() returns (s, v) for the server to
# store under I.

def _to_bytes(value, what):
    if isinstance(value, str):
        return value.encode("utf-8")
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    raise TypeError("%s must be bytes or str, not %s"
                    % (what, type(value).__name__))

def _check_bytes(value, what):
    if not isinstance(value, bytes):
        raise TypeError("%s must be bytes, not %s"
                        % (what, type(value).__name__))
    return value

def _check_public_value(params, value, what):
    if value % params.N == 0:
        raise ZeroPublicValue("SRP-6a safety check failed: %s %% N is zero"
                              % what)
    if value >= params.N:
        raise PublicValueOutOfRange("%s is not smaller than N" % what)

def random_exponent(params, entropy_f):
    # uniform over [1, N): every bit of N is random, which is well beyond
    # the 256 bits an SRP exponent needs
    return unbiased_randrange(1, params.N, entropy_f)


class _SRPSession:
    "This class manages one side of an SRP-6a authentication."

    side = None # set by the subclass
    side_name = None
    _secret_names = () # attributes dropped by _wipe_secrets()

    def __init__(self, params=DefaultParams, entropy_f=os.urandom):
        assert isinstance(params, GroupParams), repr(params)
        self.params = params
        self.entropy_f = entropy_f
        self.state = NEW
        self.identity = None
        self.salt = None
        self.A = None
        self.B = None
        self.K = None
        self.M1 = None
        self.M2 = None
        self._password = None
        for name in self._secret_names:
            setattr(self, name, None)

    def _require(self, operation, *states):
        if self.state not in states:
            raise InvalidSessionState("%s() is not allowed in state %r"
                                      % (operation, self.state))

    def _transition(self, state):
        logger.debug("%s %r: %s -> %s", self.side_name, self.identity,
                     self.state, state)
        self.state = state

    def _abort(self, operation, exc):
        logger.warning("%s %r: aborting in %s(): %s", self.side_name,
                       self.identity, operation, type(exc).__name__)
        self._transition(ABORTED)
        self._wipe_secrets()
        self.K = None

    def _peer_value(self, operation, data, what):
        # a malformed A or B ends the session like any other bad value
        data = _check_bytes(data, what)
        try:
            return bytes_to_number(data)
        except ValueError as e:
            self._abort(operation, e)
            raise

    def _wipe_secrets(self):
        # Python ints are immutable, so the best we can do for a, b and S is
        # to drop our references. The password is a bytearray and gets
        # overwritten in place.
        password = getattr(self, "_password", None)
        if password is not None:
            for i in range(len(password)):
                password[i] = 0
        self._password = None
        for name in self._secret_names:
            setattr(self, name, None)

    def close(self):
        """Forget every secret, including the session key. A session that had
        not finished is marked as aborted."""
        if self.state not in TERMINAL_STATES:
            self._transition(ABORTED)
        self._wipe_secrets()
        self.K = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, tb):
        self.close()
        return False

    def __del__(self):
        self._wipe_secrets()
        self.K = None

    def get_key(self):
        """Return the shared session key K. Only available once both sides
        have proven knowledge of it."""
        if self.state != AUTHENTICATED or self.K is None:
            raise InvalidSessionState("the session key is only available "
                                      "after successful authentication")
        return self.K

    def derive_key(self, info, length=32):
        """Return an HKDF subkey of K, separated by 'info'."""
        assert isinstance(info, bytes), repr(info)
        h = Hkdf(salt=b"", input_key_material=self.get_key(),
                 hash=self.params.hash_constructor())
        return h.expand(info, length)

    def serialize(self):
        """Return the session as JSON bytes, to be resumed later with
        from_serialized(). The blob holds the ephemeral exponent, and on the
        client the password too: it is as sensitive as the password itself
        and must not go anywhere the password could not."""
        if self.state in (NEW, CREDENTIALS_SET):
            raise SerializedTooEarly("call %s before .serialize()"
                                     % self._serialize_after)
        self._require("serialize", KEY_EXCHANGED)
        return json.dumps(self._serialize_to_dict()).encode("ascii")

    @classmethod
    def from_serialized(klass, data, params=DefaultParams,
                        entropy_f=os.urandom):
        d = json.loads(data.decode("ascii"))
        if d["side"].encode("ascii") != klass.side:
            raise WrongSideSerialized
        if d["hashed_params"] != params.fingerprint:
            err = ("from_serialized() must be called with the same params="
                   " that were used to create the serialized data. These"
                   " are different somehow.")
            raise WrongGroupError(err)
        return klass._deserialize_from_dict(d, params, entropy_f)


# applications should use SRPClient and SRPServer, not raw _SRPSession()

class SRPClient(_SRPSession):
    """The client (credential owner) side of SRP-6a.

    Registration:

        c = SRPClient(b"alice", b"password123", params=params)
        salt, verifier = c.register()     # send I, s, v to the server

    Authentication:

        c = SRPClient(b"alice", b"password123", params=params)
        I = c.hello()
        A = c.key_exchange()
        c.session_key(B, salt)            # with (s, B) from the server
        M1 = c.evidence_message()
        c.verify_evidence(M2)             # raises EvidenceMismatch
        key = c.get_key()
    """

    side = SideClient
    side_name = "client"
    _secret_names = ("a", "S", "_expected_M2")
    _serialize_after = ".key_exchange()"

    def __init__(self, identity=None, password=None, params=DefaultParams,
                 entropy_f=os.urandom, salt_size=MIN_SALT_BYTES):
        _SRPSession.__init__(self, params=params, entropy_f=entropy_f)
        if salt_size < MIN_SALT_BYTES:
            raise ValueError("salt_size must be at least %d bytes"
                             % MIN_SALT_BYTES)
        self.salt_size = salt_size
        if identity is not None or password is not None:
            self.set_credentials(identity, password)

    def set_credentials(self, identity, password):
        self._require("set_credentials", NEW)
        self.identity = _to_bytes(identity, "identity")
        self._password = bytearray(_to_bytes(password, "password"))
        self._transition(CREDENTIALS_SET)
        return self.identity

    def hello(self):
        """Client Hello: our identity I."""
        self._require("hello", CREDENTIALS_SET, KEY_EXCHANGED)
        return self.identity

    def register(self):
        """Create a fresh salt and the verifier for our password. Returns
        (s, v) with v as big-endian bytes. The session is finished
        afterwards."""
        self._require("register", CREDENTIALS_SET)
        try:
            salt = get_random_bytes(self.salt_size, self.entropy_f)
        except RandomSourceFailure as e:
            self._abort("register", e)
            raise
        x = compute_x(self.params, salt, self.identity, self._password)
        v = compute_verifier(self.params, x)
        del x
        self.salt = salt
        self._transition(REGISTRATION_DONE)
        self._wipe_secrets()
        return salt, number_to_minimal_bytes(v)

    def key_exchange(self):
        """Client Key Exchange: pick a new secret a and return A = g^a % N.
        Every call uses a fresh a."""
        self._require("key_exchange", CREDENTIALS_SET, KEY_EXCHANGED)
        try:
            a = random_exponent(self.params, self.entropy_f)
        except RandomSourceFailure as e:
            self._abort("key_exchange", e)
            raise
        self.a = a
        self.A = pow(self.params.g, a, self.params.N)
        self._transition(KEY_EXCHANGED)
        return number_to_minimal_bytes(self.A)

    def session_key(self, B_bytes, salt):
        """Derive S and K from the Server Hello values. Calling this again
        with the same B and salt recomputes the same key."""
        self._require("session_key", KEY_EXCHANGED, SESSION_KEY_DERIVED)
        salt = _check_bytes(salt, "salt")
        B = self._peer_value("session_key", B_bytes, "B")
        if self.state == SESSION_KEY_DERIVED and (B, salt) != (self.B,
                                                               self.salt):
            raise InvalidSessionState("session_key() was already called "
                                      "with a different B or salt")
        params = self.params
        try:
            _check_public_value(params, B, "B")
            u = compute_u(params, self.A, B)
        except ProtocolAbort as e:
            self._abort("session_key", e)
            raise
        x = compute_x(params, salt, self.identity, self._password)
        self.S = compute_client_premaster(params, B, x, self.a, u)
        del x
        self.B = B
        self.salt = salt
        self.K = compute_session_key(params, self.S)
        if self.state != SESSION_KEY_DERIVED:
            self._transition(SESSION_KEY_DERIVED)

    def process_server_hello(self, hello):
        """Like session_key(), but for the standard Server Hello
        (N, g, H, s, B), whose group must match our params."""
        self._require("process_server_hello", KEY_EXCHANGED)
        N, g, hash_name, salt, B_bytes = hello
        if not self.params.same_group(N, g, hash_name):
            e = WrongGroupError("server offered a different group or hash")
            self._abort("process_server_hello", e)
            raise e
        return self.session_key(B_bytes, salt)

    def evidence_message(self):
        """Client Evidence: M1."""
        self._require("evidence_message", SESSION_KEY_DERIVED)
        params = self.params
        self.M1 = compute_M1(params, self.identity, self.salt,
                             self.A, self.B, self.K)
        self._expected_M2 = compute_M2(params, self.A, self.M1, self.K)
        self._transition(EVIDENCE_SENT)
        return self.M1

    def verify_evidence(self, M2):
        """Check the Server Evidence M2. On success the server has proven that
        it holds our verifier, and get_key() becomes available."""
        self._require("verify_evidence", EVIDENCE_SENT)
        M2 = _check_bytes(M2, "M2")
        if not constant_time_equals(M2, self._expected_M2):
            e = EvidenceMismatch("SRP error: server evidence does not match")
            self._abort("verify_evidence", e)
            raise e
        self.M2 = M2
        self._transition(AUTHENTICATED)
        self._wipe_secrets()

    def _serialize_to_dict(self):
        d = {"hashed_params": self.params.fingerprint,
             "side": self.side.decode("ascii"),
             "identity": hexlify(self.identity).decode("ascii"),
             "password": hexlify(self._password).decode("ascii"),
             "a": "%x" % self.a,
             }
        return d

    @classmethod
    def _deserialize_from_dict(klass, d, params, entropy_f):
        self = klass(identity=unhexlify(d["identity"].encode("ascii")),
                     password=unhexlify(d["password"].encode("ascii")),
                     params=params, entropy_f=entropy_f)
        self.a = int(d["a"], 16)
        self.A = pow(params.g, self.a, params.N)
        self._transition(KEY_EXCHANGED)
        return self


class SRPServer(_SRPSession):
    """The server (verifier) side of SRP-6a. One instance per login
    attempt, built from the (I, s, v) stored at registration.

        s = SRPServer(b"alice", salt, verifier, params=params)
        salt, B = s.hello()
        s.session_key(A)
        s.verify_evidence(M1)             # raises EvidenceMismatch
        M2 = s.evidence_message()
        key = s.get_key()
    """

    side = SideServer
    side_name = "server"
    _secret_names = ("b", "S")
    _serialize_after = ".hello()"

    def __init__(self, identity=None, salt=None, verifier=None,
                 params=DefaultParams, entropy_f=os.urandom):
        _SRPSession.__init__(self, params=params, entropy_f=entropy_f)
        self.v = None
        if identity is not None:
            self.set_credentials(identity, salt, verifier)

    @classmethod
    def from_store(klass, store, identity, params=DefaultParams,
                   entropy_f=os.urandom):
        """Build a server session from a credential store's lookup(I)."""
        identity = _to_bytes(identity, "identity")
        salt, verifier = store.lookup(identity)
        return klass(identity, salt, verifier, params=params,
                     entropy_f=entropy_f)

    def set_credentials(self, identity, salt, verifier):
        self._require("set_credentials", NEW)
        v = bytes_to_number(_check_bytes(verifier, "verifier"))
        if not 0 < v < self.params.N:
            raise ValueError("verifier is not in [1, N)")
        self.identity = _to_bytes(identity, "identity")
        self.salt = _check_bytes(salt, "salt")
        self.v = v
        self._transition(CREDENTIALS_SET)

    def hello(self):
        """Simplified Server Hello: pick a secret b and return (s, B)."""
        self._require("hello", CREDENTIALS_SET)
        params = self.params
        try:
            b = random_exponent(params, self.entropy_f)
        except RandomSourceFailure as e:
            self._abort("hello", e)
            raise
        self.b = b
        self.B = (params.k * self.v + pow(params.g, b, params.N)) % params.N
        self._transition(KEY_EXCHANGED)
        return self.salt, number_to_minimal_bytes(self.B)

    def standard_hello(self):
        """Standard Server Hello: (N, g, H, s, B)."""
        salt, B_bytes = self.hello()
        return ServerHello(self.params.N, self.params.g,
                           self.params.hash_name, salt, B_bytes)

    def session_key(self, A_bytes):
        """Derive S and K from the Client Key Exchange value A."""
        self._require("session_key", KEY_EXCHANGED, SESSION_KEY_DERIVED)
        A = self._peer_value("session_key", A_bytes, "A")
        if self.state == SESSION_KEY_DERIVED and A != self.A:
            raise InvalidSessionState("session_key() was already called "
                                      "with a different A")
        params = self.params
        try:
            _check_public_value(params, A, "A")
            u = compute_u(params, A, self.B)
        except ProtocolAbort as e:
            self._abort("session_key", e)
            raise
        self.S = compute_server_premaster(params, A, self.v, u, self.b)
        self.A = A
        self.K = compute_session_key(params, self.S)
        if self.state != SESSION_KEY_DERIVED:
            self._transition(SESSION_KEY_DERIVED)

    def verify_evidence(self, M1):
        """Check the Client Evidence M1. A mismatch says nothing about whether
        the identity, salt or password was wrong."""
        self._require("verify_evidence", SESSION_KEY_DERIVED)
        M1 = _check_bytes(M1, "M1")
        expected = compute_M1(self.params, self.identity, self.salt,
                              self.A, self.B, self.K)
        if not constant_time_equals(M1, expected):
            e = EvidenceMismatch("SRP error: client evidence does not match")
            self._abort("verify_evidence", e)
            raise e
        self.M1 = M1
        self._transition(EVIDENCE_VERIFIED)

    def evidence_message(self):
        """Server Evidence: M2. Only after the client's M1 checked out."""
        self._require("evidence_message", EVIDENCE_VERIFIED)
        self.M2 = compute_M2(self.params, self.A, self.M1, self.K)
        self._transition(AUTHENTICATED)
        self._wipe_secrets()
        return self.M2

    def _serialize_to_dict(self):
        d = {"hashed_params": self.params.fingerprint,
             "side": self.side.decode("ascii"),
             "identity": hexlify(self.identity).decode("ascii"),
             "salt": hexlify(self.salt).decode("ascii"),
             "verifier": "%x" % self.v,
             "b": "%x" % self.b,
             }
        return d

    @classmethod
    def _deserialize_from_dict(klass, d, params, entropy_f):
        self = klass(identity=unhexlify(d["identity"].encode("ascii")),
                     salt=unhexlify(d["salt"].encode("ascii")),
                     verifier=number_to_minimal_bytes(int(d["verifier"], 16)),
                     params=params, entropy_f=entropy_f)
        self.b = int(d["b"], 16)
        self.B = (params.k * self.v
                  + pow(params.g, self.b, params.N)) % params.N
        self._transition(KEY_EXCHANGED)
        return self
