import logging
from .util import size_bits, size_bytes

"""The SRP groups of RFC 5054 Appendix A.

An SRP group is a large safe prime N (N = 2q+1 with q prime) and a generator
g. All of the protocol's arithmetic happens in the multiplicative group of
integers modulo N:

    v = g^x % N             (the verifier)
    A = g^a % N             (client public value)
    B = (k*v + g^b) % N     (server public value)

A group knows nothing about hash functions; GroupParams (params.py) pairs
one of these with a digest.

    G = I2048
    G.N, G.g
    G.element_size_bits   # bit length of N
    G.element_size_bytes  # byte length of N, the width of PAD()
"""

logger = logging.getLogger(__name__)

class SRPGroup:
    def __init__(self, N, g, name=None):
        if not 1 < g < N - 1:
            raise ValueError("generator must satisfy 1 < g < N-1")
        self.N = N
        self.g = g
        self.name = name or "%d-bit" % size_bits(N)
        self.element_size_bits = size_bits(N)
        self.element_size_bytes = size_bytes(N)

    def __repr__(self):
        return "<SRPGroup %s g=%d>" % (self.name, self.g)

    def __eq__(self, other):
        if not isinstance(other, SRPGroup):
            return NotImplemented
        return (self.N, self.g) == (other.N, other.g)

    def __ne__(self, other):
        r = self.__eq__(other)
        if r is NotImplemented:
            return r
        return not r

    def __hash__(self):
        return hash((self.N, self.g))


# The 3072-bit and larger groups of RFC 5054 are the MODP groups of RFC 3526,
# which are defined by a formula on the binary expansion of pi:
#
#   N = 2^n - 2^(n-64) - 1 + 2^64 * ( floor(2^(n-130) * pi) + c )
#
# We evaluate that formula rather than carry several kilobytes of hex. The
# result is checked against published literals in test_group.py.

_PI_GUARD_BITS = 64

def _arctan_inverse(x, one):
    # arctan(1/x) * one, by the Taylor series, in fixed point
    total = term = one // x
    x_squared = x * x
    divisor = 1
    sign = -1
    while term:
        term //= x_squared
        divisor += 2
        total += sign * (term // divisor)
        sign = -sign
    return total

def pi_fixed_point(bits):
    """Return floor(2^bits * pi)."""
    precision = bits + _PI_GUARD_BITS
    one = 1 << precision
    # Machin: pi/4 = 4*arctan(1/5) - arctan(1/239)
    pi = 4 * (4 * _arctan_inverse(5, one) - _arctan_inverse(239, one))
    return pi >> _PI_GUARD_BITS

def modp_prime(n, c):
    return (2**n - 2**(n - 64) - 1
            + 2**64 * (pi_fixed_point(n - 130) + c))

# RFC 5054 Appendix A. The 1024, 1536 and 2048 bit groups were generated for
# SRP; the rest are the RFC 3526 MODP groups (n, c) listed below.

I1024 = SRPGroup(
    N=0xEEAF0AB9ADB38DD69C33F80AFA8FC5E86072618775FF3C0B9EA2314C9C256576D674DF7496EA81D3383B4813D692C6E0E0D5D8E250B98BE48E495C1D6089DAD15DC7D7B46154D6B6CE8EF4AD69B15D4982559B297BCF1885C529F566660E57EC68EDBC3C05726CC02FD4CBF4976EAA9AFD5138FE8376435B9FC61D2FC0EB06E3,
    g=2, name="rfc5054-1024")

I1536 = SRPGroup(
    N=0x9DEF3CAFB939277AB1F12A8617A47BBBDBA51DF499AC4C80BEEEA9614B19CC4D5F4F5F556E27CBDE51C6A94BE4607A291558903BA0D0F84380B655BB9A22E8DCDF028A7CEC67F0D08134B1C8B97989149B609E0BE3BAB63D47548381DBC5B1FC764E3F4B53DD9DA1158BFD3E2B9C8CF56EDF019539349627DB2FD53D24B7C48665772E437D6C7F8CE442734AF7CCB7AE837C264AE3A9BEB87F8A2FE9B8B5292E5A021FFF5E91479E8CE7A28C2442C6F315180F93499A234DCF76E3FED135F9BB,
    g=2, name="rfc5054-1536")

I2048 = SRPGroup(
    N=0xAC6BDB41324A9A9BF166DE5E1389582FAF72B6651987EE07FC3192943DB56050A37329CBB4A099ED8193E0757767A13DD52312AB4B03310DCD7F48A9DA04FD50E8083969EDB767B0CF6095179A163AB3661A05FBD5FAAAE82918A9962F0B93B855F97993EC975EEAA80D740ADBF4FF747359D041D5C33EA71D281E446B14773BCA97B43A23FB801676BD207A436C6481F1D2B9078717461A5B9D32E688F87748544523B524B0D57D5EA77A2775D2ECFA032CFBDBF52FB3786160279004E57AE6AF874E7303CE53299CCC041C7BC308D82A5698F3A8D0C38271AE35F8E9DBFBB694B5C803D89F7AE435DE236D525F54759B65E372FCD68EF20FA7111F9E4AFF73,
    g=2, name="rfc5054-2048")

I3072 = SRPGroup(N=modp_prime(3072, 1690314), g=5, name="rfc5054-3072")
I4096 = SRPGroup(N=modp_prime(4096, 240904), g=5, name="rfc5054-4096")
I6144 = SRPGroup(N=modp_prime(6144, 929484), g=5, name="rfc5054-6144")
I8192 = SRPGroup(N=modp_prime(8192, 4743158), g=19, name="rfc5054-8192")

STANDARD_GROUPS = {
    1024: I1024,
    1536: I1536,
    2048: I2048,
    3072: I3072,
    4096: I4096,
    6144: I6144,
    8192: I8192,
    }

for _bits, _group in STANDARD_GROUPS.items():
    assert _group.element_size_bits == _bits, (_bits, _group)
del _bits, _group
logger.debug("loaded %d standard SRP groups", len(STANDARD_GROUPS))
