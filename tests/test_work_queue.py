"""
WorkQueue 单元测试
"""

import os
import sys
import unittest

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from span_chart_tool.utils.work_queue import WorkQueue


class TestWorkQueue(unittest.TestCase):
    """测试 WorkQueue"""

    def test_fifo_order(self):
        queue = WorkQueue()
        for i in range(5):
            queue.push(i)
        self.assertEqual([queue.pop() for _ in range(5)], [0, 1, 2, 3, 4])

    def test_initial_elements(self):
        queue = WorkQueue(["a", "b"])
        queue.push("c")
        self.assertEqual(len(queue), 3)
        self.assertEqual(queue.pop(), "a")
        self.assertEqual(queue.pop(), "b")
        self.assertEqual(queue.pop(), "c")

    def test_interleaved_push_pop(self):
        """交替 push/pop 时仍保持插入顺序"""
        queue = WorkQueue([1, 2])
        self.assertEqual(queue.pop(), 1)
        queue.push(3)
        queue.push(4)
        self.assertEqual(queue.pop(), 2)
        queue.push(5)
        self.assertEqual([queue.pop() for _ in range(3)], [3, 4, 5])

    def test_reversal_swaps_lists(self):
        """outgoing 耗尽时才把 incoming 整体反转"""
        queue = WorkQueue([1, 2, 3])
        self.assertEqual(queue.pop(), 1)
        self.assertEqual(queue.reversed, [3, 2])
        self.assertEqual(queue.in_order, [])
        queue.push(4)
        self.assertEqual(queue.in_order, [4])
        self.assertEqual(len(queue), 3)

    def test_pop_empty_raises(self):
        queue = WorkQueue()
        self.assertEqual(len(queue), 0)
        with self.assertRaises(IndexError):
            queue.pop()

        queue.push(1)
        queue.pop()
        with self.assertRaises(IndexError):
            queue.pop()


if __name__ == '__main__':
    unittest.main()
