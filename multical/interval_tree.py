from typing import Any, Iterator, Optional, TypeVar, Generic

# T represents the Totally Ordered type used for coordinates (Time)
T = TypeVar('T')

class IntervalHandle(Generic[T]):
    """Opaque handle with public accessors for start, end, and data.

    A handle stays attached to the same data for its whole life in the
    tree; deleting other entries never moves data between handles.
    """
    __slots__ = ['start', 'end', 'data', 'left', 'right', 'parent', 'max_end', 'height']

    def __init__(self, start: T, end: T, data: Any):
        self.start: T = start
        self.end: T = end
        self.data: Any = data
        self.left: Optional['IntervalHandle[T]'] = None
        self.right: Optional['IntervalHandle[T]'] = None
        self.parent: Optional['IntervalHandle[T]'] = None
        self.max_end: T = end
        self.height: int = 1

class IntervalTree(Generic[T]):
    """AVL tree of closed intervals [start, end], augmented with subtree max_end."""

    def __init__(self):
        self.root: Optional[IntervalHandle[T]] = None
        self._size = 0

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[IntervalHandle[T]]:
        """In-order traversal: handles ordered by start."""
        stack = []
        node = self.root
        while stack or node:
            while node:
                stack.append(node)
                node = node.left
            node = stack.pop()
            yield node
            node = node.right

    # --- Internal Utilities ---

    def _get_height(self, node: Optional[IntervalHandle[T]]) -> int:
        return node.height if node else 0

    def _update(self, node: Optional[IntervalHandle[T]]):
        if not node: return
        node.height = 1 + max(self._get_height(node.left), self._get_height(node.right))

        m = node.end
        if node.left: m = max(m, node.left.max_end)
        if node.right: m = max(m, node.right.max_end)
        node.max_end = m

    def _rotate_left(self, x: IntervalHandle[T]):
        y = x.right
        x.right = y.left
        if y.left: y.left.parent = x
        y.parent = x.parent
        if not x.parent: self.root = y
        elif x is x.parent.left: x.parent.left = y
        else: x.parent.right = y
        y.left = x
        x.parent = y
        self._update(x)
        self._update(y)

    def _rotate_right(self, y: IntervalHandle[T]):
        x = y.left
        y.left = x.right
        if x.right: x.right.parent = y
        x.parent = y.parent
        if not y.parent: self.root = x
        elif y is y.parent.left: y.parent.left = x
        else: y.parent.right = x
        x.right = y
        y.parent = x
        self._update(y)
        self._update(x)

    def _rebalance(self, node: Optional[IntervalHandle[T]]):
        while node:
            self._update(node)
            balance = self._get_height(node.left) - self._get_height(node.right)
            if balance > 1:
                if self._get_height(node.left.left) < self._get_height(node.left.right):
                    self._rotate_left(node.left)
                self._rotate_right(node)
            elif balance < -1:
                if self._get_height(node.right.right) < self._get_height(node.right.left):
                    self._rotate_right(node.right)
                self._rotate_left(node)
            node = node.parent

    def _transplant(self, u: IntervalHandle[T], v: Optional[IntervalHandle[T]]):
        """Put v where u hangs in the tree (u's own links are left alone)."""
        if not u.parent: self.root = v
        elif u is u.parent.left: u.parent.left = v
        else: u.parent.right = v
        if v: v.parent = u.parent


    # --- Public API ---

    def insert(self, start: T, end: T, data: Any) -> IntervalHandle[T]:
        if end < start:
            raise ValueError(f"Interval end {end} precedes start {start}")
        new_node = IntervalHandle(start, end, data)
        self._size += 1
        if not self.root:
            self.root = new_node
            return new_node

        curr = self.root
        parent = None
        while curr:
            parent = curr
            if start < curr.start: curr = curr.left
            else: curr = curr.right

        new_node.parent = parent
        if start < parent.start: parent.left = new_node
        else: parent.right = new_node

        self._rebalance(new_node)
        return new_node

    def delete(self, handle: IntervalHandle[T]):
        if not handle: return
        if handle.left and handle.right:
            # Splice the in-order successor node into handle's position
            succ = handle.right
            while succ.left: succ = succ.left
            if succ.parent is not handle:
                rebalance_point = succ.parent
                self._transplant(succ, succ.right)
                succ.right = handle.right
                succ.right.parent = succ
            else:
                rebalance_point = succ
            self._transplant(handle, succ)
            succ.left = handle.left
            succ.left.parent = succ
        else:
            rebalance_point = handle.parent
            self._transplant(handle, handle.left or handle.right)

        handle.left = handle.right = handle.parent = None
        handle.height = 1
        handle.max_end = handle.end
        self._size -= 1
        self._rebalance(rebalance_point)


    # --- Search Methods ---

    def find_intersecting(self, start: T, end: T) -> Iterator[IntervalHandle[T]]:
        """Yields intervals that share at least one point with [start, end]."""
        def _search(node):
            if not node or start > node.max_end: return
            if node.left and node.left.max_end >= start: yield from _search(node.left)
            if node.start <= end and node.end >= start: yield node
            if node.start <= end: yield from _search(node.right)
        return _search(self.root)

    def find_overlapping(self, time: T) -> Iterator[IntervalHandle[T]]:
        """Yields intervals that cover a specific point in time."""
        return self.find_intersecting(time, time)

    def any_intersecting(self, start: T, end: T) -> Optional[IntervalHandle[T]]:
        """First interval intersecting [start, end] (in start order), or None."""
        return next(self.find_intersecting(start, end), None)


    # --- Debug Tool ---

    def verify_integrity(self):
        """Crashes if AVL height, max_end, ordering or parent links are violated."""
        count = 0

        def _walk(node, parent):
            nonlocal count
            if not node: return 0, None
            count += 1
            if node.parent is not parent:
                raise RuntimeError(f"Parent link violation at {node.start}")
            if node.left and node.left.start > node.start:
                raise RuntimeError(f"Order violation at {node.start}")
            if node.right and node.right.start < node.start:
                raise RuntimeError(f"Order violation at {node.start}")

            left_h, left_max = _walk(node.left, node)
            right_h, right_max = _walk(node.right, node)

            # Check AVL Balance
            if abs(left_h - right_h) > 1:
                raise RuntimeError(f"AVL Violation at {node.start}")
            if node.height != 1 + max(left_h, right_h):
                raise RuntimeError(f"Height Violation at {node.start}")

            # Check Augmentation
            expected_max = max(m for m in (node.end, left_max, right_max) if m is not None)
            if node.max_end != expected_max:
                raise RuntimeError(f"MaxEnd Violation at {node.start}")

            return 1 + max(left_h, right_h), expected_max

        _walk(self.root, None)
        if count != self._size:
            raise RuntimeError(f"Size Violation: counted {count}, recorded {self._size}")
