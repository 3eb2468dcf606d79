import unittest

from romdex.scan import fingerprint_of, format_crc32, identify


class FingerprintTest(unittest.TestCase):
    def test_check_value(self):
        self.assertEqual(0xCBF43926, fingerprint_of(b'123456789'))

    def test_empty_input(self):
        self.assertEqual(0, fingerprint_of(b''))

    def test_unsigned(self):
        self.assertGreater(fingerprint_of(b'\xff' * 4), 0x7FFFFFFF)

    def test_format(self):
        self.assertEqual('CBF43926', format_crc32(0xCBF43926))
        self.assertEqual('0000ABCD', format_crc32(0xABCD))

    def test_identify(self):
        fingerprint = identify(b'')
        self.assertEqual(0, fingerprint.crc32)
        self.assertEqual('00000000', fingerprint.crc32_hex)
        self.assertEqual('DA39A3EE5E6B4B0D3255BFEF95601890AFD80709', fingerprint.sha1)
        self.assertEqual('D41D8CD98F00B204E9800998ECF8427E', fingerprint.md5)

        self.assertEqual('CBF43926', identify(b'123456789').crc32_hex)


if __name__ == '__main__':
    unittest.main()
