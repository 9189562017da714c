"""
Move vocabulary for Neural Hand.

Three symmetric classes with a fixed cyclic "beats" relation:
class (i+1) % 3 beats class i. Also holds the one-hot encoder used to
turn a window of moves into model input, and the counter selector that
turns a predicted distribution back into a move.
"""

from typing import List, Sequence, Union

# Constants
MOVES = ['rock', 'paper', 'scissors']
MOVE_TO_IDX = {'rock': 0, 'paper': 1, 'scissors': 2}
IDX_TO_MOVE = {0: 'rock', 1: 'paper', 2: 'scissors'}
BEATS = {'rock': 'paper', 'paper': 'scissors', 'scissors': 'rock'}
LOSES_TO = {'rock': 'scissors', 'paper': 'rock', 'scissors': 'paper'}

NUM_MOVES = 3
WINDOW_SIZE = 5
FEATURE_SIZE = WINDOW_SIZE * NUM_MOVES
UNIFORM = [1.0 / 3, 1.0 / 3, 1.0 / 3]

MoveLike = Union[str, int]


def move_index(move: MoveLike) -> int:
    """Normalize a move name or index to its index. Raises ValueError."""
    if isinstance(move, bool):
        raise ValueError(f"Invalid move: {move!r}")
    if isinstance(move, int):
        if 0 <= move < NUM_MOVES:
            return move
        raise ValueError(f"Invalid move index: {move}")
    if isinstance(move, str):
        idx = MOVE_TO_IDX.get(move.strip().lower())
        if idx is None:
            raise ValueError(f"Invalid move name: {move!r}")
        return idx
    raise ValueError(f"Invalid move: {move!r}")


def move_name(move: MoveLike) -> str:
    return IDX_TO_MOVE[move_index(move)]


def indicator(move: MoveLike) -> List[float]:
    """One-hot vector for a single move."""
    encoded = [0.0, 0.0, 0.0]
    encoded[move_index(move)] = 1.0
    return encoded


def encode_window(moves: Sequence[MoveLike], window_size: int = WINDOW_SIZE) -> List[float]:
    """Flatten a full window of moves into one feature vector."""
    assert len(moves) == window_size, f"window needs {window_size} moves, got {len(moves)}"
    features: List[float] = []
    for m in moves:
        features.extend(indicator(m))
    return features


def argmax_index(distribution: Sequence[float]) -> int:
    # First strictly greater value wins, so ties go to the lowest index
    assert len(distribution) == NUM_MOVES, f"expected {NUM_MOVES} values, got {len(distribution)}"
    best = 0
    best_val = -1.0
    for i in range(NUM_MOVES):
        if distribution[i] > best_val:
            best_val = distribution[i]
            best = i
    return best


def counter_for(move: MoveLike) -> str:
    """The move that defeats `move`."""
    return BEATS[move_name(move)]


def select_counter(distribution: Sequence[float]) -> str:
    """Counter the most likely opponent move."""
    return counter_for(argmax_index(distribution))


def get_winner(my_move: MoveLike, opp_move: MoveLike) -> str:
    """Determine winner from moves."""
    mine, theirs = move_name(my_move), move_name(opp_move)
    if mine == theirs:
        return "tie"
    elif BEATS[theirs] == mine:
        return "you"
    else:
        return "opponent"
