#!/usr/bin/env python

import re, timeit
from setuptools import setup, Command

def get_version():
    with open("src/srp6a/_version.py") as f:
        return re.search(r'^__version__ = "([^"]+)"', f.read(), re.M).group(1)

cmdclass = {}

class Speed(Command):
    description = "run speed benchmarks"
    user_options = []
    boolean_options = []
    def initialize_options(self):
        pass
    def finalize_options(self):
        pass
    def run(self):
        def do(setup_statements, statement):
            # extracted from timeit.py
            t = timeit.Timer(stmt=statement,
                             setup="\n".join(setup_statements))
            # determine number so that 0.2 <= total time < 2.0
            for i in range(0, 10):
                number = 10**i
                x = t.timeit(number)
                if x >= 0.2:
                    break
            return x / number

        def abbrev(t):
            if t > 1.0:
                return "%.3fs" % t
            if t > 1e-3:
                return "%.1fms" % (t*1e3)
            return "%.1fus" % (t*1e6)

        for bits in [1024, 2048, 3072, 4096]:
            S1 = "from srp6a import SRPClient, SRPServer, GroupParams"
            S2 = "p = GroupParams.standard(%d, 'sha256')" % bits
            S3 = "salt, v = SRPClient(b'alice', b'password', params=p).register()"
            S4 = "c = SRPClient(b'alice', b'password', params=p)"
            S5 = "s = SRPServer(b'alice', salt, v, params=p)"
            S6 = "salt, B = s.hello(); A = c.key_exchange()"
            S7 = "c.session_key(B, salt); s.session_key(A)"
            S8 = "s.verify_evidence(c.evidence_message())"
            S9 = "c.verify_evidence(s.evidence_message())"

            register = do([S1, S2], S3)
            full = do([S1, S2, S3], ";".join([S4, S5, S6, S7, S8, S9]))
            # how large are the public values and the suspended state?
            from srp6a import SRPClient, GroupParams
            p = GroupParams.standard(bits, "sha256")
            c = SRPClient(b"alice", b"password", params=p)
            msglen = len(c.key_exchange())
            statelen = len(c.serialize())
            print("SRP-%-5d: msglen=%4d, statelen=%4d, register=%6s, full=%6s"
                  % (bits, msglen, statelen, abbrev(register), abbrev(full)))
cmdclass["speed"] = Speed

setup(name="srp6a",
      version=get_version(),
      description="SRP-6a password-authenticated key exchange (pure python)",
      package_dir={"": "src"},
      packages=["srp6a", "srp6a.test"],
      license="MIT",
      cmdclass=cmdclass,
      classifiers=[
          "Intended Audience :: Developers",
          "License :: OSI Approved :: MIT License",
          "Programming Language :: Python",
          "Programming Language :: Python :: 3",
          "Topic :: Security :: Cryptography",
          ],
      python_requires=">=3.6",
      install_requires=["hkdf"],
      )
