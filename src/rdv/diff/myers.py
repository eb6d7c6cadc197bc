"""Myers' O(ND) shortest edit script, linear-space variant.

E. W. Myers, "An O(ND) Difference Algorithm and Its Variations" (1986),
section 4b. Forward and reverse searches meet on a middle snake, the
problem is split there, and both halves are solved recursively. Memory is
O(N+M); recursion depth is logarithmic in D. Common prefix and suffix are
stripped at every level, so one-sided ranges (a whole render added or
removed) never reach the search.
"""

from __future__ import annotations

from collections.abc import Sequence

from rdv.diff.models import Edit, EditKind

Move = tuple[EditKind, int, int]


def _bisect(
    a: Sequence[str], b: Sequence[str], a_lo: int, a_hi: int, b_lo: int, b_hi: int
) -> tuple[int, int] | None:
    """Point on a shortest path through the range, relative to (a_lo, b_lo).

    Returns None when the two ranges share no line at all.
    """
    n, m = a_hi - a_lo, b_hi - b_lo
    max_d = (n + m + 1) // 2
    offset = max_d
    size = 2 * max_d + 2
    forward = [-1] * size
    reverse = [-1] * size
    forward[offset + 1] = 0
    reverse[offset + 1] = 0
    delta = n - m
    odd = delta % 2 != 0
    # Diagonals that ran off the grid are trimmed from later rounds
    f_start = f_end = r_start = r_end = 0

    for d in range(max_d):
        for k in range(-d + f_start, d + 1 - f_end, 2):
            i = offset + k
            if k == -d or (k != d and forward[i - 1] < forward[i + 1]):
                x = forward[i + 1]
            else:
                x = forward[i - 1] + 1
            y = x - k
            while x < n and y < m and a[a_lo + x] == b[b_lo + y]:
                x += 1
                y += 1
            forward[i] = x
            if x > n:
                f_end += 2
            elif y > m:
                f_start += 2
            elif odd:
                j = offset + delta - k
                if 0 <= j < size and reverse[j] != -1 and x >= n - reverse[j]:
                    return x, y

        for k in range(-d + r_start, d + 1 - r_end, 2):
            j = offset + k
            if k == -d or (k != d and reverse[j - 1] < reverse[j + 1]):
                x = reverse[j + 1]
            else:
                x = reverse[j - 1] + 1
            y = x - k
            while x < n and y < m and a[a_hi - 1 - x] == b[b_hi - 1 - y]:
                x += 1
                y += 1
            reverse[j] = x
            if x > n:
                r_end += 2
            elif y > m:
                r_start += 2
            elif not odd:
                i = offset + delta - k
                if 0 <= i < size and forward[i] != -1:
                    fx = forward[i]
                    if fx >= n - x:
                        return fx, offset + fx - i
    return None


def _diff(
    a: Sequence[str],
    b: Sequence[str],
    a_lo: int,
    a_hi: int,
    b_lo: int,
    b_hi: int,
    moves: list[Move],
) -> None:
    while a_lo < a_hi and b_lo < b_hi and a[a_lo] == b[b_lo]:
        moves.append((EditKind.EQUAL, a_lo, b_lo))
        a_lo += 1
        b_lo += 1
    suffix = 0
    while (
        a_lo < a_hi - suffix
        and b_lo < b_hi - suffix
        and a[a_hi - 1 - suffix] == b[b_hi - 1 - suffix]
    ):
        suffix += 1
    a_end, b_end = a_hi - suffix, b_hi - suffix

    if a_lo == a_end:
        moves.extend((EditKind.INSERT, a_lo, y) for y in range(b_lo, b_end))
    elif b_lo == b_end:
        moves.extend((EditKind.DELETE, x, b_lo) for x in range(a_lo, a_end))
    else:
        split = _bisect(a, b, a_lo, a_end, b_lo, b_end)
        if split is None:
            moves.extend((EditKind.DELETE, x, b_lo) for x in range(a_lo, a_end))
            moves.extend((EditKind.INSERT, a_end, y) for y in range(b_lo, b_end))
        else:
            x, y = split
            _diff(a, b, a_lo, a_lo + x, b_lo, b_lo + y, moves)
            _diff(a, b, a_lo + x, a_end, b_lo + y, b_end, moves)

    moves.extend((EditKind.EQUAL, a_end + i, b_end + i) for i in range(suffix))


def shortest_edit_script(a: Sequence[str], b: Sequence[str]) -> list[Edit]:
    """Minimal sequence of EQUAL/DELETE/INSERT edits turning ``a`` into ``b``.

    Deterministic: the same inputs always yield the same script.
    """
    moves: list[Move] = []
    _diff(a, b, 0, len(a), 0, len(b), moves)

    edits: list[Edit] = []
    for kind, x, y in moves:
        if kind is EditKind.EQUAL:
            edits.append(Edit(kind, a[x], x, y))
        elif kind is EditKind.DELETE:
            edits.append(Edit(kind, a[x], old_index=x))
        else:
            edits.append(Edit(kind, b[y], new_index=y))
    return edits
