import os, binascii, math, hmac
from .errors import RandomSourceFailure

def size_bits(maxval):
    return maxval.bit_length() or 1

def size_bytes(maxval):
    return int(math.ceil(size_bits(maxval) / 8))

def number_to_bytes(num, maxval):
    # fixed width: as many bytes as maxval needs. This is PAD() when maxval
    # is the modulus.
    if num < 0 or num > maxval:
        raise ValueError
    num_bytes = size_bytes(maxval)
    fmt_str = "%0" + str(2*num_bytes) + "x"
    s_hex = fmt_str % num
    s = binascii.unhexlify(s_hex.encode("ascii"))
    assert len(s) == num_bytes
    return s

def number_to_minimal_bytes(num):
    # big-endian, no leading zeros (zero itself is one zero byte)
    if num < 0:
        raise ValueError
    return number_to_bytes(num, num)

def bytes_to_number(s):
    if not isinstance(s, bytes):
        raise TypeError
    if not s:
        raise ValueError("empty byte string")
    return int(binascii.hexlify(s), 16)

def xor_bytes(a, b):
    if len(a) != len(b):
        raise ValueError("xor operands differ in length (%d != %d)"
                         % (len(a), len(b)))
    return bytes([x ^ y for (x, y) in zip(a, b)])

def constant_time_equals(a, b):
    return hmac.compare_digest(a, b)

def get_random_bytes(count, entropy_f=os.urandom):
    """Read exactly 'count' bytes from entropy_f. Anything that goes wrong
    with the entropy source is reported as RandomSourceFailure, never
    papered over with a substitute value."""
    try:
        data = entropy_f(count)
    except Exception as e:
        raise RandomSourceFailure("secure random source unavailable: %s" % e) from e
    if not isinstance(data, bytes) or len(data) != count:
        raise RandomSourceFailure("random source returned %r bytes, wanted %d"
                                  % (None if data is None else len(data), count))
    return data

def generate_mask(maxval):
    num_bytes = size_bytes(maxval)
    num_bits = size_bits(maxval)
    leftover_bits = num_bits % 8
    if leftover_bits:
        top_byte_mask_int = (0x1 << leftover_bits) - 1
    else:
        top_byte_mask_int = 0xff
    assert 0 <= top_byte_mask_int <= 0xff
    return (top_byte_mask_int, num_bytes)

def random_list_of_ints(count, entropy_f=os.urandom):
    # return a list of ints, each 0<=x<=255, for masking
    return list(get_random_bytes(count, entropy_f))
def mask_list_of_ints(top_byte_mask_int, list_of_ints):
    return [top_byte_mask_int & list_of_ints[0]] + list_of_ints[1:]
def list_of_ints_to_number(l):
    s = "".join(["%02x" % b for b in l])
    return int(s, 16)

def unbiased_randrange(start, stop, entropy_f):
    """Return a random integer k such that start <= k < stop, uniformly
    distributed across that range, like random.randrange but
    cryptographically bound and unbiased.

    r(1,N) provides a random SRP exponent.
    """

    # we generate a random binary string up to 7 bits larger than we really
    # need, mask that down to be the right number of bits, then compare
    # against the range and try again if it's wrong. This will take a random
    # number of tries, but on average less than two

    # first we get 0<=number<(stop-start)
    maxval = stop - start

    top_byte_mask_int, num_bytes = generate_mask(maxval)
    while True:
        enough_bytes = random_list_of_ints(num_bytes, entropy_f)
        assert len(enough_bytes) == num_bytes
        candidate_bytes = mask_list_of_ints(top_byte_mask_int, enough_bytes)
        candidate_int = list_of_ints_to_number(candidate_bytes)
        if candidate_int < maxval:
            return start + candidate_int

# Miller-Rabin witnesses are only used to reject bad custom moduli, so they
# don't need to come from a secret source. We still take them from entropy_f
# so an adversary who picked N can't predict which bases we'll try.
_SMALL_PRIMES = [2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41, 43, 47, 53,
                 59, 61, 67, 71, 73, 79, 83, 89, 97]

def is_probable_prime(n, rounds=40, entropy_f=os.urandom):
    if n < 2:
        return False
    for p in _SMALL_PRIMES:
        if n % p == 0:
            return n == p
    d, r = n - 1, 0
    while d % 2 == 0:
        d //= 2
        r += 1
    for i in range(rounds):
        a = unbiased_randrange(2, n - 1, entropy_f)
        x = pow(a, d, n)
        if x == 1 or x == n - 1:
            continue
        for j in range(r - 1):
            x = pow(x, 2, n)
            if x == n - 1:
                break
        else:
            return False
    return True
