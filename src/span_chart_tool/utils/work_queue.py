"""
FIFO 工作队列
"""

from typing import Generic, Iterable, List, Optional, TypeVar

T = TypeVar('T')


class WorkQueue(Generic[T]):
    """
    基于两个列表的 FIFO 队列，push/pop 均摊 O(1)

    in_order 只在尾部追加；reversed 从尾部弹出。reversed 为空时，
    把 in_order 整体原地反转后与 reversed 交换。
    """

    def __init__(self, elements: Optional[Iterable[T]] = None):
        self.reversed: List[T] = []
        self.in_order: List[T] = list(elements) if elements is not None else []

    def push(self, element: T):
        self.in_order.append(element)

    def pop(self) -> T:
        """
        弹出队首元素

        Raises:
            IndexError: 队列为空
        """
        if self.reversed:
            return self.reversed.pop()
        if not self.in_order:
            raise IndexError("pop from empty WorkQueue")
        self.in_order.reverse()
        self.in_order, self.reversed = self.reversed, self.in_order
        return self.reversed.pop()

    def __len__(self) -> int:
        return len(self.reversed) + len(self.in_order)
