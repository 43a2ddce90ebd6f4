"""AVL tree with order statistics and range-minimum queries.

Every node keeps the size of its subtree and a reference to the node with
the smallest "min key" inside that subtree.  This makes rank lookups and
minimum queries over a closed key interval run in logarithmic time.
"""

from __future__ import annotations

from typing import Any, Callable, Iterator, Optional

__all__ = ["RmqTree"]


class _Node:
    __slots__ = ("item", "key", "mk", "p", "balance", "size", "s")

    def __init__(self, item: Any, key: Any, mk: Any) -> None:
        self.item = item
        self.key = key
        self.mk = mk
        self.p: list[Optional[_Node]] = [None, None]
        self.balance = 0
        self.size = 1
        self.s: _Node = self


def _size(node: Optional[_Node]) -> int:
    return node.size if node is not None else 0


def _cmp(xk: Any, node: _Node) -> int:
    return (node.key < xk) - (xk < node.key)


def _update_min(p: _Node, q: Optional[_Node], r: Optional[_Node]) -> None:
    p.s = p if q is None or p.mk < q.s.mk else q.s
    if r is not None and not (p.s.mk < r.s.mk):
        p.s = r.s


def _rotate1(p: _Node, direction: int) -> _Node:
    """Single rotation; direction 0 rotates left, 1 rotates right."""
    opp = 1 - direction
    q = p.p[opp]
    s = p.s
    size_p = p.size
    p.size -= q.size - _size(q.p[direction])
    q.size = size_p
    _update_min(p, p.p[direction], q.p[direction])
    q.s = s
    p.p[opp] = q.p[direction]
    q.p[direction] = p
    return q


def _rotate2(p: _Node, direction: int) -> _Node:
    """Double rotation around the grandchild on the inner side."""
    opp = 1 - direction
    q = p.p[opp]
    r = q.p[direction]
    s = p.s
    size_x_dir = _size(r.p[direction])
    r.size = p.size
    p.size -= q.size - size_x_dir
    q.size -= size_x_dir + 1
    _update_min(p, p.p[direction], r.p[direction])
    _update_min(q, q.p[opp], r.p[opp])
    r.s = s
    p.p[opp] = r.p[direction]
    r.p[direction] = p
    q.p[direction] = r.p[opp]
    r.p[opp] = q
    b1 = 1 if direction == 0 else -1
    if r.balance == b1:
        q.balance, p.balance = 0, -b1
    elif r.balance == 0:
        q.balance = p.balance = 0
    else:
        q.balance, p.balance = b1, 0
    r.balance = 0
    return r


class RmqTree:
    """Ordered set of items supporting rank and range-minimum queries.

    ``key`` orders the items (items with equal keys are duplicates);
    ``min_key`` is the value minimised by :meth:`rmq`.  Both default to the
    item itself.  Modifying the tree while iterating over it is not supported.
    """

    def __init__(
        self,
        key: Optional[Callable[[Any], Any]] = None,
        min_key: Optional[Callable[[Any], Any]] = None,
    ) -> None:
        self._key = key
        self._min_key = min_key
        self._root: Optional[_Node] = None

    def _key_of(self, item: Any) -> Any:
        return item if self._key is None else self._key(item)

    def _min_key_of(self, item: Any) -> Any:
        return item if self._min_key is None else self._min_key(item)

    def __len__(self) -> int:
        return _size(self._root)

    def __iter__(self) -> Iterator[Any]:
        stack: list[_Node] = []
        node = self._root
        while node is not None:
            stack.append(node)
            node = node.p[0]
        return self._walk(stack, 1)

    def __reversed__(self) -> Iterator[Any]:
        stack: list[_Node] = []
        node = self._root
        while node is not None:
            stack.append(node)
            node = node.p[1]
        return self._walk(stack, 0)

    @staticmethod
    def _walk(stack: list[_Node], direction: int) -> Iterator[Any]:
        while stack:
            node = stack.pop()
            yield node.item
            child = node.p[direction]
            while child is not None:
                stack.append(child)
                child = child.p[1 - direction]

    def iter_from(self, item: Any) -> Iterator[Any]:
        """Iterate in order over the items whose key is not below ``item``'s."""
        xk = self._key_of(item)
        stack: list[_Node] = []
        node = self._root
        while node is not None:
            if node.key < xk:
                node = node.p[1]
            else:
                stack.append(node)
                node = node.p[0]
        return self._walk(stack, 1)

    def find(self, item: Any) -> tuple[Any, int]:
        """Return ``(stored item or None, number of items <= item)``."""
        xk = self._key_of(item)
        node = self._root
        count = 0
        while node is not None:
            c = _cmp(xk, node)
            if c >= 0:
                count += _size(node.p[0]) + 1
            if c < 0:
                node = node.p[0]
            elif c > 0:
                node = node.p[1]
            else:
                break
        return (node.item if node is not None else None), count

    def interval(self, item: Any) -> tuple[Any, Any]:
        """Return the nearest items ``(lower, upper)`` around ``item``.

        ``lower`` is the largest item not above it and ``upper`` the smallest
        item not below it; either is ``None`` when absent.
        """
        xk = self._key_of(item)
        node = self._root
        lower = upper = None
        while node is not None:
            c = _cmp(xk, node)
            if c < 0:
                upper = node
                node = node.p[0]
            elif c > 0:
                lower = node
                node = node.p[1]
            else:
                lower = upper = node
                break
        return (
            lower.item if lower is not None else None,
            upper.item if upper is not None else None,
        )

    def rmq(self, lo: Any, hi: Any) -> Any:
        """Return the item with the smallest min key within ``[lo, hi]``."""
        root = self._root
        if root is None:
            return None

        def descend(xk: Any) -> tuple[list[_Node], list[int]]:
            path: list[_Node] = []
            cmps: list[int] = []
            node = root
            while node is not None:
                c = _cmp(xk, node)
                path.append(node)
                cmps.append(c)
                if c < 0:
                    node = node.p[0]
                elif c > 0:
                    node = node.p[1]
                else:
                    break
            return path, cmps

        path_lo, cmp_lo = descend(self._key_of(lo))
        path_hi, cmp_hi = descend(self._key_of(hi))
        lca = next(
            (
                i
                for i, (a, b) in enumerate(zip(path_lo, path_hi))
                if a is b and cmp_lo[i] <= 0 and cmp_hi[i] >= 0
            ),
            None,
        )
        if lca is None:
            return None
        best = path_lo[lca]
        for node, c in zip(path_lo[lca + 1:], cmp_lo[lca + 1:]):
            if c <= 0:
                if node.mk < best.mk:
                    best = node
                right = node.p[1]
                if right is not None and right.s.mk < best.mk:
                    best = right.s
        for node, c in zip(path_hi[lca + 1:], cmp_hi[lca + 1:]):
            if c >= 0:
                if node.mk < best.mk:
                    best = node
                left = node.p[0]
                if left is not None and left.s.mk < best.mk:
                    best = left.s
        return best.item

    def insert(self, item: Any) -> tuple[Any, int]:
        """Insert ``item`` unless an equal one exists.

        Returns ``(stored item, number of items <= item)``; the stored item
        is ``item`` itself when it was inserted, or the existing equal item.
        """
        xk = self._key_of(item)
        path: list[_Node] = []
        dirs: list[int] = []
        bp = self._root
        bq: Optional[_Node] = None
        start = 0
        p = self._root
        q: Optional[_Node] = None
        which = 0
        count = 0
        while p is not None:
            c = _cmp(xk, p)
            if c >= 0:
                count += _size(p.p[0]) + 1
            if c == 0:
                return p.item, count
            if p.balance != 0:
                bq, bp, start = q, p, len(dirs)
            which = int(c > 0)
            dirs.append(which)
            path.append(p)
            q, p = p, p.p[which]

        x = _Node(item, xk, self._min_key_of(item))
        if q is None:
            self._root = x
        else:
            q.p[which] = x
        if bp is None:
            return item, count
        for node in path:
            node.size += 1
        for node in reversed(path):
            _update_min(node, node.p[0], node.p[1])
            if node.s is not x:
                break
        node = bp
        for d in dirs[start:]:
            node.balance += 1 if d else -1
            node = node.p[d]
        if -2 < bp.balance < 2:
            return item, count

        which = int(bp.balance < 0)
        b1 = 1 if which == 0 else -1
        child = bp.p[1 - which]
        if child.balance == b1:
            r = _rotate1(bp, which)
            child.balance = bp.balance = 0
        else:
            r = _rotate2(bp, which)
        if bq is None:
            self._root = r
        else:
            bq.p[0 if bp is bq.p[0] else 1] = r
        return item, count

    def erase(self, item: Any) -> tuple[Any, int]:
        """Remove the item equal to ``item``.

        Returns ``(removed item, number of items <= item before removal)``,
        or ``(None, 0)`` when no such item is present.
        """
        return self._erase(self._key_of(item), first=False)

    def erase_first(self) -> Any:
        """Remove and return the smallest item, or ``None`` if empty."""
        removed, _ = self._erase(None, first=True)
        return removed

    def _erase(self, xk: Any, first: bool) -> tuple[Any, int]:
        root = self._root
        if root is None:
            return None, 0
        fake = _Node(root.item, root.key, root.mk)
        fake.p = [root, None]
        path: list[_Node] = []
        dirs: list[int] = []
        count = 0
        if not first:
            c = -1
            p: Optional[_Node] = fake
            while c:
                which = int(c > 0)
                if c > 0:
                    count += _size(p.p[0]) + 1
                dirs.append(which)
                path.append(p)
                p = p.p[which]
                if p is None:
                    return None, 0
                c = _cmp(xk, p)
            count += _size(p.p[0]) + 1
        else:
            p = fake
            count = 1
            while p is not None:
                dirs.append(0)
                path.append(p)
                p = p.p[0]
            p = path.pop()
            dirs.pop()

        for node in path[1:]:
            node.size -= 1
        if p.p[1] is None:
            path[-1].p[dirs[-1]] = p.p[0]
        else:
            q = p.p[1]
            if q.p[0] is None:
                q.p[0] = p.p[0]
                q.balance = p.balance
                path[-1].p[dirs[-1]] = q
                path.append(q)
                dirs.append(1)
                q.size = p.size - 1
            else:
                e = len(path)
                path.append(q)  # placeholder, replaced by the successor below
                dirs.append(1)
                while True:
                    dirs.append(0)
                    path.append(q)
                    r = q.p[0]
                    if r.p[0] is None:
                        break
                    q = r
                r.p[0] = p.p[0]
                q.p[0] = r.p[1]
                r.p[1] = p.p[1]
                r.balance = p.balance
                path[e - 1].p[dirs[e - 1]] = r
                path[e] = r
                for node in path[e + 1:]:
                    node.size -= 1
                r.size = p.size - 1

        for node in reversed(path):
            _update_min(node, node.p[0], node.p[1])

        d = len(path) - 1
        while d > 0:
            q = path[d]
            which = dirs[d]
            other = 1 - which
            b1, b2 = (-1, -2) if which else (1, 2)
            q.balance += b1
            if q.balance == b1:
                break
            if q.balance == b2:
                r = q.p[other]
                parent = path[d - 1]
                if r.balance == -b1:
                    parent.p[dirs[d - 1]] = _rotate2(q, which)
                else:
                    parent.p[dirs[d - 1]] = _rotate1(q, which)
                    if r.balance == 0:
                        r.balance = -b1
                        q.balance = b1
                        break
                    r.balance = q.balance = 0
            d -= 1

        self._root = fake.p[0]
        return p.item, count