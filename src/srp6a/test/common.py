from hashlib import sha256
from itertools import count
from binascii import unhexlify

class PRG:
    # this returns a callable which, when invoked with an integer N, will
    # return N pseudorandom bytes derived from the seed
    def __init__(self, seed):
        self.generator = self.block_generator(seed)

    def __call__(self, numbytes):
        return b"".join([next(self.generator) for i in range(numbytes)])

    def block_generator(self, seed):
        assert isinstance(seed, bytes)
        for counter in count():
            cseed = b"".join([b"prng-",
                              str(counter).encode("ascii"),
                              b"-",
                              seed])
            block = sha256(cseed).digest()
            for i in range(len(block)):
                yield block[i:i+1]

class FixedEntropy:
    # hands out exactly these byte strings, in order, one per call
    def __init__(self, *chunks):
        self.chunks = list(chunks)

    def __call__(self, numbytes):
        chunk = self.chunks.pop(0)
        assert len(chunk) == numbytes, (len(chunk), numbytes)
        return chunk

def exponent_entropy(value, params):
    # the entropy that makes random_exponent() return 'value'
    return (value - 1).to_bytes(params.pad_length, "big")

def failing_entropy(numbytes):
    raise OSError("no entropy today")

def unhex(s):
    # RFC-style hex: whitespace between the words
    return unhexlify("".join(s.split()).encode("ascii"))

def hex_to_int(s):
    return int("".join(s.split()), 16)
