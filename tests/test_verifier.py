"""
Verification tests: checksum gate, signer recovery, tamper sensitivity.
"""

import hashlib
import unittest

from code_signature import (
    derive_account,
    mnemonic_from_entropy,
    sha256_hash,
    sign,
    verify,
)

TEST_MNEMONIC = mnemonic_from_entropy(hashlib.sha256(b"test").digest())

BODY = """import sys


def main():
    print("hello")
    return 0
"""


class TestVerify(unittest.TestCase):

    def test_unsigned_document_fails(self):
        result = verify(BODY)

        self.assertFalse(result.hash_valid)
        self.assertFalse(result.is_valid())
        self.assertIsNone(result.claimed_hash)
        self.assertIsNone(result.recovered_address)
        self.assertEqual(result.computed_hash, sha256_hash(BODY))

    def test_checksum_only_document_passes(self):
        content = f"// @sha256sum {sha256_hash(BODY)}\n{BODY}"
        result = verify(content)

        self.assertTrue(result.hash_valid)
        self.assertIsNone(result.recovered_address)

    def test_wrong_checksum_fails(self):
        content = f"// @sha256sum 0x{'0' * 64}\n{BODY}"
        self.assertFalse(verify(content).hash_valid)

    def test_uppercase_checksum_fails(self):
        content = f"// @sha256sum {sha256_hash(BODY).upper().replace('0X', '0x')}\n{BODY}"
        self.assertFalse(verify(content).hash_valid)

    def test_result_variants(self):
        content = f"# @sha256sum 0x1\n# @eip191signature 0x2\n{BODY}"
        result = verify(content, prefix="#")

        self.assertEqual(result.content, content)
        self.assertEqual(result.without_integrity.content, f"# @eip191signature 0x2\n{BODY}")
        self.assertEqual(result.without_either.content, BODY)
        self.assertEqual(result.claimed_signature, "0x2")
        self.assertEqual(result.prefix, "#")

    def test_unrecoverable_signature_counts_as_absent(self):
        content = f"// @eip191signature 0x{'00' * 65}\n{BODY}"
        result = verify(content)

        self.assertEqual(result.claimed_signature, "0x" + "00" * 65)
        self.assertIsNone(result.recovered_address)
        self.assertFalse(result.hash_valid)

    def test_is_repeatable(self):
        self.assertEqual(verify(BODY), verify(BODY))


class TestSignedDocuments(unittest.TestCase):

    def setUp(self):
        self.account = derive_account(TEST_MNEMONIC)
        self.signed = sign(verify(BODY), TEST_MNEMONIC).rendered_content

    def test_signed_document_passes_and_recovers_signer(self):
        result = verify(self.signed)

        self.assertTrue(result.hash_valid)
        self.assertEqual(result.recovered_address, self.account.address)

    def test_tampered_body_fails(self):
        lines = self.signed.split("\n")
        for index in range(2, len(lines)):
            if not lines[index]:
                continue
            with self.subTest(line=index):
                tampered_line = lines[index][:-1] + chr(ord(lines[index][-1]) ^ 1)
                tampered = "\n".join(lines[:index] + [tampered_line] + lines[index + 1:])
                self.assertFalse(verify(tampered).hash_valid)

    def test_appended_content_fails(self):
        self.assertFalse(verify(self.signed + "x").hash_valid)

    def test_tampered_signature_fails_checksum(self):
        lines = self.signed.split("\n")
        signature = lines[1].split()[-1]
        forged = signature[:-4] + ("aaaa" if signature[-4:] != "aaaa" else "bbbb")
        lines[1] = lines[1].replace(signature, forged)

        self.assertFalse(verify("\n".join(lines)).hash_valid)

    def test_valid_signer_does_not_rescue_bad_checksum(self):
        lines = self.signed.split("\n")
        lines[0] = f"// @sha256sum 0x{'f' * 64}"
        result = verify("\n".join(lines))

        self.assertFalse(result.hash_valid)
        self.assertEqual(result.recovered_address, self.account.address)

    def test_reformatted_checksum_line_keeps_signature(self):
        lines = self.signed.split("\n")
        lines[0] = lines[0].replace("// @sha256sum ", "#   @sha256sum\t")
        result = verify("\n".join(lines))

        self.assertTrue(result.hash_valid)
        self.assertEqual(result.recovered_address, self.account.address)

    def test_duplicate_marker_later_is_inert(self):
        forged = self.signed + f"\n// @eip191signature 0x{'ab' * 65}"
        result = verify(forged)

        self.assertEqual(result.claimed_signature, self.signed.split("\n")[1].split()[-1])
        self.assertFalse(result.hash_valid)


if __name__ == "__main__":
    unittest.main()
