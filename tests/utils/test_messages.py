import unittest

from romdex.utils.messages import MessageQueue


class MessageQueueTest(unittest.TestCase):
    def test_empty(self):
        queue = MessageQueue()
        self.assertIsNone(queue.pull())
        self.assertEqual(0, len(queue))

    def test_lifetime_in_ticks(self):
        queue = MessageQueue()
        queue.post_message('Loading', 1, 3, False)

        self.assertEqual(['Loading', 'Loading', 'Loading', None],
                         [queue.pull() for _ in range(4)])

    def test_transient_replaces_pending(self):
        queue = MessageQueue()
        queue.post_message('1/2: Scanning a.bin...', 1, 10, True)
        queue.post_message('2/2: Scanning b.bin...', 1, 10, True)

        self.assertEqual(1, len(queue))
        self.assertEqual('2/2: Scanning b.bin...', queue.pull())
        self.assertEqual(['1/2: Scanning a.bin...', '2/2: Scanning b.bin...'], queue.posted)

    def test_priority_then_age(self):
        queue = MessageQueue()
        queue.post_message('low', 1, 1, False)
        queue.post_message('high', 5, 1, False)
        queue.post_message('also low', 1, 1, False)

        self.assertEqual(['high', 'low', 'also low', None], [queue.pull() for _ in range(4)])

    def test_capacity_drops_least_important(self):
        queue = MessageQueue(capacity=2)
        queue.post_message('a', 2, 1, False)
        queue.post_message('b', 3, 1, False)

        queue.post_message('ignored', 1, 1, False)
        self.assertEqual(2, len(queue))

        queue.post_message('c', 4, 1, False)
        self.assertEqual(['c', 'b', None], [queue.pull() for _ in range(3)])

    def test_clear(self):
        queue = MessageQueue()
        queue.post_message('a', 1, 5, False)
        queue.clear()
        self.assertIsNone(queue.pull())
        self.assertEqual(['a'], queue.posted)

    def test_posts_are_logged(self):
        queue = MessageQueue()
        with self.assertLogs('romdex.utils.messages', level='INFO') as logs:
            queue.post_message('Scanning of directory finished.')
        self.assertIn('Scanning of directory finished.', logs.output[0])


if __name__ == '__main__':
    unittest.main()
