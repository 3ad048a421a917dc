"""
Myers shortest-edit-script alignment of two line sequences.

The forward pass records the frontier `V` (diagonal `k` -> furthest `x`)
for every edit distance `d`; the backward pass walks those snapshots from
the bottom-right corner to the origin to recover one shortest path.
`opcodes` then groups the path into equal and changed blocks.
"""

from typing import Dict, List, Sequence, Tuple

EQUAL = "equal"
DELETE = "delete"
INSERT = "insert"
REPLACE = "replace"

Step = Tuple[str, int, int]
Opcode = Tuple[str, int, int, int, int]


def _moves_down(v: Dict[int, int], k: int, d: int) -> bool:
    return k == -d or (k != d and v[k - 1] < v[k + 1])


def shortest_edit_script(a: Sequence[str], b: Sequence[str]) -> List[Step]:
    """
    One shortest edit path from `a` to `b`, as forward `(tag, x, y)` steps.

    `x` and `y` are the positions in `a` and `b` before the step is applied.
    """
    n, m = len(a), len(b)
    v: Dict[int, int] = {1: 0}
    trace: List[Dict[int, int]] = []

    for d in range(n + m + 1):
        trace.append(dict(v))
        for k in range(-d, d + 1, 2):
            x = v[k + 1] if _moves_down(v, k, d) else v[k - 1] + 1
            y = x - k
            while x < n and y < m and a[x] == b[y]:
                x += 1
                y += 1
            v[k] = x
            if x >= n and y >= m:
                return _backtrack(trace, n, m)

    return []


def _backtrack(trace: List[Dict[int, int]], n: int, m: int) -> List[Step]:
    steps: List[Step] = []
    x, y = n, m

    for d in reversed(range(len(trace))):
        v = trace[d]
        k = x - y
        prev_k = k + 1 if _moves_down(v, k, d) else k - 1
        prev_x = v[prev_k]
        prev_y = prev_x - prev_k

        while x > prev_x and y > prev_y:
            x -= 1
            y -= 1
            steps.append((EQUAL, x, y))

        if d > 0:
            if x == prev_x:
                steps.append((INSERT, x, y - 1))
            else:
                steps.append((DELETE, x - 1, y))
        x, y = prev_x, prev_y

    steps.reverse()
    return steps


def opcodes(a: Sequence[str], b: Sequence[str]) -> List[Opcode]:
    """
    Group the shortest edit script into `(tag, i1, i2, j1, j2)` blocks.

    A changed block spans every deletion and insertion between two equal
    runs; its tag is `delete`, `insert` or `replace`.
    """
    blocks: List[Opcode] = []
    i = j = 0
    block_start = None

    def close_block():
        start_i, start_j = block_start
        if i > start_i and j > start_j:
            tag = REPLACE
        elif i > start_i:
            tag = DELETE
        else:
            tag = INSERT
        blocks.append((tag, start_i, i, start_j, j))

    for tag, _, _ in shortest_edit_script(a, b):
        if tag == EQUAL:
            if block_start is not None:
                close_block()
                block_start = None
            if blocks and blocks[-1][0] == EQUAL:
                _, i1, _, j1, _ = blocks.pop()
                blocks.append((EQUAL, i1, i + 1, j1, j + 1))
            else:
                blocks.append((EQUAL, i, i + 1, j, j + 1))
            i += 1
            j += 1
            continue

        if block_start is None:
            block_start = (i, j)
        if tag == DELETE:
            i += 1
        else:
            j += 1

    if block_start is not None:
        close_block()
    return blocks
