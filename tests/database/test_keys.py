import unittest

from romdex.database.keys import encode_varint, decode_varint, index_prefix, index_key_hash, MAX_VARINT


class VarintTest(unittest.TestCase):
    BOUNDARIES = [0, 1, 127, 128, 16383, 16384, (1 << 21) - 1, 1 << 21, (1 << 56) - 1, 1 << 56, MAX_VARINT]

    def test_lengths(self):
        """Each extra byte adds seven bits of payload."""
        self.assertEqual(b'\x00', encode_varint(0))
        self.assertEqual(b'\x7f', encode_varint(127))
        self.assertEqual(b'\x80\x80', encode_varint(128))
        self.assertEqual(b'\xbf\xff', encode_varint(16383))
        self.assertEqual(b'\xc0\x40\x00', encode_varint(16384))
        self.assertEqual(8, len(encode_varint((1 << 56) - 1)))
        self.assertEqual(9, len(encode_varint(1 << 56)))

    def test_byte_order_matches_numeric_order(self):
        """Encoded keys sort like the integers, so LevelDB yields records in id order."""
        encoded = [encode_varint(v) for v in self.BOUNDARIES]
        self.assertEqual(encoded, sorted(encoded))

    def test_decode_boundaries(self):
        for value in self.BOUNDARIES:
            data = encode_varint(value)
            self.assertEqual((value, len(data)), decode_varint(data))

    def test_decode_at_offset(self):
        data = b'xyz' + encode_varint(300) + b'tail'
        self.assertEqual((300, 2), decode_varint(data, 3))

    def test_rejects_out_of_range(self):
        with self.assertRaises(ValueError):
            encode_varint(-1)
        with self.assertRaises(ValueError):
            encode_varint(MAX_VARINT + 1)

    def test_truncated_data(self):
        with self.assertRaises(ValueError) as cm:
            decode_varint(encode_varint(16384)[:2])
        self.assertIn("Insufficient data", str(cm.exception))

        with self.assertRaises(ValueError):
            decode_varint(b'', 0)


class IndexKeyTest(unittest.TestCase):
    def test_hash_is_sixteen_bytes(self):
        self.assertEqual(16, len(index_key_hash('Super Mario World')))

    def test_text_and_utf8_bytes_hash_alike(self):
        self.assertEqual(index_key_hash('Zelda'), index_key_hash(b'Zelda'))

    def test_prefix_layout(self):
        prefix = index_prefix('crc', b'\xb1\x9e\xd4\x89')
        self.assertTrue(prefix.startswith(b'crc\0'))
        self.assertEqual(len(b'crc\0') + 16, len(prefix))
        self.assertNotEqual(prefix, index_prefix('crc', b'\xb1\x9e\xd4\x8a'))
        self.assertNotEqual(prefix, index_prefix('md5', b'\xb1\x9e\xd4\x89'))


if __name__ == '__main__':
    unittest.main()
