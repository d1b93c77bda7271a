"""
Canonicalization and hashing tests.

The checksum input keeps the signature line; the signed body has neither
marker line.
"""

import hashlib
import unittest

from code_signature import canonicalize, sha256_hash, verify_hash

HASH = "0x" + "c" * 64
SIG = "0x" + "d" * 130


class TestCanonicalize(unittest.TestCase):

    def setUp(self):
        self.content = f"// @sha256sum {HASH}\n// @eip191signature {SIG}\nprint('hi')\n"

    def test_hash_input_keeps_signature_line(self):
        canonical = canonicalize(self.content)
        self.assertEqual(canonical.hash_input, f"// @eip191signature {SIG}\nprint('hi')\n")

    def test_bare_body_has_neither_marker(self):
        canonical = canonicalize(self.content)
        self.assertEqual(canonical.bare_body, "print('hi')\n")

    def test_claimed_values(self):
        canonical = canonicalize(self.content)
        self.assertEqual(canonical.claimed_hash, HASH)
        self.assertEqual(canonical.claimed_signature, SIG)

    def test_order_independent_of_line_order(self):
        swapped = f"// @eip191signature {SIG}\n// @sha256sum {HASH}\nprint('hi')\n"
        canonical = canonicalize(swapped)

        self.assertEqual(canonical.hash_input, f"// @eip191signature {SIG}\nprint('hi')\n")
        self.assertEqual(canonical.bare_body, "print('hi')\n")

    def test_plain_content(self):
        canonical = canonicalize("x\n")
        self.assertEqual(canonical.hash_input, "x\n")
        self.assertEqual(canonical.bare_body, "x\n")
        self.assertIsNone(canonical.claimed_hash)
        self.assertIsNone(canonical.claimed_signature)


class TestHashing(unittest.TestCase):

    def test_format(self):
        h = sha256_hash("abc")
        self.assertTrue(h.startswith("0x"))
        self.assertEqual(len(h), 66)
        self.assertEqual(h, h.lower())

    def test_known_vector(self):
        self.assertEqual(sha256_hash(b"abc"), "0x" + hashlib.sha256(b"abc").hexdigest())

    def test_str_and_bytes_agree(self):
        self.assertEqual(sha256_hash("héllo"), sha256_hash("héllo".encode("utf-8")))

    def test_verify_hash(self):
        self.assertTrue(verify_hash(sha256_hash("data"), "data"))
        self.assertFalse(verify_hash(sha256_hash("data"), "date"))
        self.assertFalse(verify_hash(None, "data"))


if __name__ == "__main__":
    unittest.main()
