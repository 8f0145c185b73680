from .errors import ZeroScramblingParameter
from .util import number_to_minimal_bytes, bytes_to_number

# The SRP-6a formulas (RFC 5054 section 2.6, RFC 2945 section 3). Every
# function takes the GroupParams first; integers are ints, byte strings are
# bytes. Only the inputs the RFC marks as padded go through params.pad().
#
#   x  = H(s | H(I | ":" | P))
#   v  = g^x % N
#   k  = H(N | PAD(g))
#   u  = H(PAD(A) | PAD(B))
#   S  = (B - k*g^x) ^ (a + u*x) % N        (client)
#   S  = (A * v^u) ^ b % N                  (server)
#   K  = H(S)
#   M1 = H(H(N) XOR H(g) | H(I) | s | A | B | K)
#   M2 = H(A | M1 | K)

def compute_x(params, salt, identity, password):
    inner = params.H(identity, b":", password)
    return bytes_to_number(params.H(salt, inner))

def compute_verifier(params, x):
    return pow(params.g, x, params.N)

def compute_k(params):
    return bytes_to_number(params.H(number_to_minimal_bytes(params.N),
                                    params.pad(params.g)))

def compute_u(params, A, B):
    u = bytes_to_number(params.H(params.pad(A), params.pad(B)))
    if u == 0:
        raise ZeroScramblingParameter("SRP-6a safety check failed: u is zero")
    return u

def compute_client_premaster(params, B, x, a, u):
    N = params.N
    # Python's % already lands in [0, N), even when B < k*g^x
    base = (B - params.k * pow(params.g, x, N)) % N
    assert 0 <= base < N
    return pow(base, a + u * x, N)

def compute_server_premaster(params, A, v, u, b):
    N = params.N
    return pow((A * pow(v, u, N)) % N, b, N)

def compute_session_key(params, S):
    return params.H(number_to_minimal_bytes(S))

def compute_M1(params, identity, salt, A, B, K):
    n2b = number_to_minimal_bytes
    return params.H(params.hashed_N_xor_g, params.H(identity), salt,
                    n2b(A), n2b(B), K)

def compute_M2(params, A, M1, K):
    return params.H(number_to_minimal_bytes(A), M1, K)
