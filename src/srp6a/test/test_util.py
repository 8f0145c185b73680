import unittest
from srp6a import util
from srp6a.errors import RandomSourceFailure
from .common import PRG, failing_entropy

class Utils(unittest.TestCase):
    def test_binsize(self):
        def sizebb(maxval):
            num_bits = util.size_bits(maxval)
            num_bytes = util.size_bytes(maxval)
            return (num_bytes, num_bits)
        self.assertEqual(sizebb(0x00), (1, 1))
        self.assertEqual(sizebb(0x0f), (1, 4))
        self.assertEqual(sizebb(0x1f), (1, 5))
        self.assertEqual(sizebb(0x10), (1, 5))
        self.assertEqual(sizebb(0xff), (1, 8))
        self.assertEqual(sizebb(0x100), (2, 9))
        self.assertEqual(sizebb(0x101), (2, 9))
        self.assertEqual(sizebb(0x1fe), (2, 9))
        self.assertEqual(sizebb(0x1ff), (2, 9))
        self.assertEqual(sizebb(2**1024-1), (128, 1024))

    def test_number_to_bytes(self):
        n2b = util.number_to_bytes
        self.assertEqual(n2b(0x00, 0xff), b"\x00")
        self.assertEqual(n2b(0x01, 0xff), b"\x01")
        self.assertEqual(n2b(0xff, 0xff), b"\xff")
        self.assertEqual(n2b(0x100, 0xffff), b"\x01\x00")
        self.assertEqual(n2b(0x1ff, 0xffff), b"\x01\xff")
        self.assertEqual(n2b(0x200, 0xffff), b"\x02\x00")
        self.assertEqual(n2b(0xffff, 0xffff), b"\xff\xff")
        self.assertEqual(n2b(0x10000, 0xffffff), b"\x01\x00\x00")
        self.assertEqual(n2b(0x1, 0xffffffff), b"\x00\x00\x00\x01")
        self.assertRaises(ValueError, n2b, 0x10000, 0xff)
        self.assertRaises(ValueError, n2b, -1, 0xff)

    def test_number_to_minimal_bytes(self):
        n2mb = util.number_to_minimal_bytes
        self.assertEqual(n2mb(0), b"\x00")
        self.assertEqual(n2mb(1), b"\x01")
        self.assertEqual(n2mb(0xff), b"\xff")
        self.assertEqual(n2mb(0x100), b"\x01\x00")
        self.assertEqual(n2mb(0x00ffee), b"\xff\xee")
        self.assertRaises(ValueError, n2mb, -5)

    def test_bytes_to_number(self):
        b2n = util.bytes_to_number
        self.assertEqual(b2n(b"\x00"), 0x00)
        self.assertEqual(b2n(b"\x01"), 0x01)
        self.assertEqual(b2n(b"\xff"), 0xff)
        self.assertEqual(b2n(b"\x01\x00"), 0x0100)
        self.assertEqual(b2n(b"\x02\x00"), 0x0200)
        self.assertEqual(b2n(b"\xff\xff"), 0xffff)
        self.assertEqual(b2n(b"\x00\x00\x00\x01"), 0x01)
        self.assertRaises(TypeError, b2n, 42)
        self.assertRaises(TypeError, b2n, "not bytes")
        self.assertRaises(ValueError, b2n, b"")

    def test_xor(self):
        self.assertEqual(util.xor_bytes(b"\x0f\xf0", b"\xff\xff"), b"\xf0\x0f")
        self.assertEqual(util.xor_bytes(b"", b""), b"")
        self.assertRaises(ValueError, util.xor_bytes, b"\x00", b"\x00\x00")

    def test_constant_time_equals(self):
        self.assertTrue(util.constant_time_equals(b"abc", b"abc"))
        self.assertFalse(util.constant_time_equals(b"abc", b"abd"))
        self.assertFalse(util.constant_time_equals(b"abc", b"abcd"))

    def test_mask(self):
        gen = util.generate_mask
        self.assertEqual(gen(0x01), (0x01, 1))
        self.assertEqual(gen(0x02), (0x03, 1))
        self.assertEqual(gen(0x04), (0x07, 1))
        self.assertEqual(gen(0x7f), (0x7f, 1))
        self.assertEqual(gen(0x80), (0xff, 1))
        self.assertEqual(gen(0xff), (0xff, 1))
        self.assertEqual(gen(0x0100), (0x01, 2))
        self.assertEqual(gen(2**255-19), (0x7f, 32))
        mask = util.mask_list_of_ints
        self.assertEqual(mask(0x03, [0xff, 0x55, 0xaa]), [0x03, 0x55, 0xaa])
        self.assertEqual(mask(0xff, [0xff]), [0xff])

    def test_l2n(self):
        l2n = util.list_of_ints_to_number
        self.assertEqual(l2n([0x00]), 0x00)
        self.assertEqual(l2n([0x7f]), 0x7f)
        self.assertEqual(l2n([0xff]), 0xff)
        self.assertEqual(l2n([0x01, 0x00]), 0x0100)

    def test_unbiased_randrange(self):
        for seed in range(1000):
            self.do_test_unbiased_randrange(0, 254, seed)
            self.do_test_unbiased_randrange(0, 255, seed)
            self.do_test_unbiased_randrange(0, 256, seed)
            self.do_test_unbiased_randrange(0, 257, seed)
            self.do_test_unbiased_randrange(1, 257, seed)

    def do_test_unbiased_randrange(self, start, stop, seed):
        seed_b = str(seed).encode("ascii")
        num = util.unbiased_randrange(start, stop, entropy_f=PRG(seed_b))
        self.assertTrue(start <= num < stop, (num, seed))

class Entropy(unittest.TestCase):
    def test_get_random_bytes(self):
        data = util.get_random_bytes(16, PRG(b"seed"))
        self.assertEqual(len(data), 16)
        self.assertEqual(data, PRG(b"seed")(16))

    def test_failing_source(self):
        self.assertRaises(RandomSourceFailure,
                          util.get_random_bytes, 16, failing_entropy)
        self.assertRaises(RandomSourceFailure,
                          util.unbiased_randrange, 1, 2**256, failing_entropy)

    def test_any_source_error(self):
        def broken(numbytes):
            raise RuntimeError("entropy pool not seeded")
        with self.assertRaises(RandomSourceFailure) as cm:
            util.get_random_bytes(16, broken)
        self.assertIsInstance(cm.exception.__cause__, RuntimeError)

    def test_short_read(self):
        self.assertRaises(RandomSourceFailure,
                          util.get_random_bytes, 16, lambda n: b"\x00" * (n-1))
        self.assertRaises(RandomSourceFailure,
                          util.get_random_bytes, 16, lambda n: None)

class Primality(unittest.TestCase):
    def test_small(self):
        primes = [p for p in range(2, 400)
                  if all(p % d for d in range(2, p))]
        for n in range(-3, 400):
            self.assertEqual(util.is_probable_prime(n, entropy_f=PRG(b"mr")),
                             n in primes, n)

    def test_large(self):
        mersenne = 2**521 - 1
        self.assertTrue(util.is_probable_prime(mersenne, entropy_f=PRG(b"1")))
        self.assertFalse(util.is_probable_prime(mersenne * (2**127 - 1),
                                                entropy_f=PRG(b"2")))
        # a Carmichael number (with no small factors) fools Fermat, but not
        # Miller-Rabin
        carmichael = 211 * 421 * 631
        self.assertFalse(util.is_probable_prime(carmichael,
                                                entropy_f=PRG(b"3")))

if __name__ == '__main__':
    unittest.main()
