"""Append-only log of the opponent's moves for one session."""

from typing import List

from rps_moves import IDX_TO_MOVE, NUM_MOVES, WINDOW_SIZE, MoveLike, move_index


class MoveHistory:
    """Ordered opponent moves, stored as indices. Only the tail is ever read."""

    def __init__(self, window_size: int = WINDOW_SIZE):
        self.window_size = window_size
        self._moves: List[int] = []

    def __len__(self) -> int:
        return len(self._moves)

    def append(self, move: MoveLike) -> int:
        idx = move_index(move)
        self._moves.append(idx)
        return idx

    def last(self, n: int) -> List[int]:
        if n <= 0:
            return []
        return self._moves[-n:]

    def window(self) -> List[int]:
        return self.last(self.window_size)

    def has_full_window(self) -> bool:
        return len(self._moves) >= self.window_size

    def moves(self) -> List[str]:
        return [IDX_TO_MOVE[i] for i in self._moves]

    def counts(self) -> List[int]:
        counts = [0] * NUM_MOVES
        for i in self._moves:
            counts[i] += 1
        return counts

    def clear(self):
        self._moves = []
