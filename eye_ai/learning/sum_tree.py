"""
Sum Tree for Prioritized Experience Replay
Implicit binary tree over a circular buffer of priorities

Array layout: [root] [internal nodes] ... [leaves], size 2 * capacity - 1.
Leaves start at index capacity - 1 and map 1:1 to replay buffer slots.
Every internal node holds the sum of its two children, so the root is the
total priority and weighted sampling / priority updates are O(log capacity).
"""
import math
import threading
import logging
from typing import Tuple

import numpy as np

from eye_ai.core.errors import ConstructionError, InvalidArgumentError

logger = logging.getLogger(__name__)

class SumTree:
    """
    Fixed-size sum tree of non-negative priorities
    insert/update/sample are serialized by an internal lock
    """

    def __init__(self, capacity: int):
        if isinstance(capacity, bool) or not isinstance(capacity, (int, np.integer)) or capacity <= 0:
            raise ConstructionError(f"SumTree capacity must be a positive integer, got {capacity!r}")
        self._capacity = int(capacity)
        # float64 keeps accumulated propagation error small
        self._tree = np.zeros(2 * self._capacity - 1, dtype=np.float64)
        self._write_index = 0
        self._size = 0
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def size(self) -> int:
        """Number of leaves written at least once (saturates at capacity)"""
        return self._size

    @property
    def write_index(self) -> int:
        """Data index the next insert will write (the oldest entry once full)"""
        return self._write_index

    def __len__(self) -> int:
        return self._size

    def total(self) -> float:
        """Total sum of all leaf priorities"""
        return float(self._tree[0])

    def insert(self, priority: float) -> int:
        """
        Write a priority at the next slot, overwriting the oldest once full

        Args:
            priority: Finite, non-negative priority

        Returns:
            Leaf index of the written slot
        """
        self._check_priority(priority)
        with self._lock:
            leaf_index = self._write_index + self._capacity - 1
            self._set_leaf(leaf_index, float(priority))

            self._write_index = (self._write_index + 1) % self._capacity
            if self._size < self._capacity:
                self._size += 1
        return leaf_index

    def update(self, leaf_index: int, priority: float):
        """
        Replace a leaf priority and propagate the change to the root

        Args:
            leaf_index: Tree index of a leaf (capacity - 1 <= index < 2 * capacity - 1)
            priority: Finite, non-negative priority
        """
        self._check_leaf_index(leaf_index)
        self._check_priority(priority)
        with self._lock:
            self._set_leaf(int(leaf_index), float(priority))

    def sample(self, value: float) -> Tuple[int, float, int]:
        """
        Find the leaf whose cumulative priority range contains value

        Args:
            value: Cumulative priority in [0, total())

        Returns:
            (leaf_index, priority, data_index)
        """
        with self._lock:
            return self._retrieve(float(value))

    def leaf_priorities(self) -> np.ndarray:
        """Copy of the leaf layer, indexed by data slot"""
        with self._lock:
            return self._tree[self._capacity - 1:].copy()

    def _set_leaf(self, leaf_index: int, priority: float):
        change = priority - self._tree[leaf_index]
        self._tree[leaf_index] = priority

        idx = leaf_index
        while idx > 0:
            idx = (idx - 1) // 2
            self._tree[idx] += change

    def _retrieve(self, value: float) -> Tuple[int, float, int]:
        tree = self._tree
        n_nodes = len(tree)
        idx = 0
        while True:
            left = 2 * idx + 1
            if left >= n_nodes:  # idx is a leaf
                break
            right = left + 1
            left_weight = tree[left]

            # Never descend into an empty subtree while the sibling holds weight
            if tree[right] <= 0.0 or (value <= left_weight and left_weight > 0.0):
                idx = left
            else:
                value -= left_weight
                idx = right

        return idx, float(tree[idx]), idx - (self._capacity - 1)

    def _check_leaf_index(self, leaf_index):
        if isinstance(leaf_index, bool) or not isinstance(leaf_index, (int, np.integer)):
            raise InvalidArgumentError(f"Leaf index must be an integer, got {leaf_index!r}")
        if not self._capacity - 1 <= leaf_index < 2 * self._capacity - 1:
            raise InvalidArgumentError(
                f"Leaf index {leaf_index} outside [{self._capacity - 1}, {2 * self._capacity - 1})"
            )

    @staticmethod
    def _check_priority(priority):
        if isinstance(priority, bool) or not isinstance(priority, (int, float, np.integer, np.floating)):
            raise InvalidArgumentError(f"Priority must be a number, got {priority!r}")
        if not math.isfinite(priority) or priority < 0:
            raise InvalidArgumentError(f"Priority must be finite and non-negative, got {priority}")
