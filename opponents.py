"""
Scripted opponents for local matches against the Neural Hand.

Every strategy has the signature strategy(state, round_num) -> move name.
`state` is built by new_opponent_state() and updated by the match runner:
  rng         random.Random used for any randomness
  last_move   the opponent's previous move
  won_last    whether the opponent won the previous round
  my_history  the AI's moves so far
"""

import random
from collections import Counter
from typing import Callable, Dict, Optional

from rps_moves import BEATS, MOVES

Strategy = Callable[[Dict, int], str]


def new_opponent_state(rng: Optional[random.Random] = None) -> Dict:
    rng = rng or random.Random()
    return {"rng": rng, "last_move": rng.choice(MOVES), "won_last": False, "my_history": []}


def rock_spam(state, round_num):
    rng = state["rng"]
    return "rock" if rng.random() < 0.85 else rng.choice(MOVES)


def paper_spam(state, round_num):
    rng = state["rng"]
    return "paper" if rng.random() < 0.85 else rng.choice(MOVES)


def scissors_spam(state, round_num):
    rng = state["rng"]
    return "scissors" if rng.random() < 0.85 else rng.choice(MOVES)


def pure_random(state, round_num):
    return state["rng"].choice(MOVES)


def cycle_forward(state, round_num):
    """Rock -> Paper -> Scissors cycle."""
    return MOVES[(MOVES.index(state["last_move"]) + 1) % 3]


def cycle_backward(state, round_num):
    """Scissors -> Paper -> Rock cycle."""
    return MOVES[(MOVES.index(state["last_move"]) - 1) % 3]


def counter_last(state, round_num):
    """Counter the AI's last move."""
    if state["my_history"]:
        return BEATS[state["my_history"][-1]]
    return state["rng"].choice(MOVES)


def wsls_opponent(state, round_num):
    """Win-Stay-Lose-Shift."""
    if round_num == 0:
        return state["rng"].choice(MOVES)

    if state["won_last"]:
        return state["last_move"]  # Stay
    else:
        return MOVES[(MOVES.index(state["last_move"]) + 1) % 3]  # Shift


def frequency_counter(state, round_num):
    """Counter the AI's most frequent move."""
    if len(state["my_history"]) < 5:
        return state["rng"].choice(MOVES)

    freq = Counter(state["my_history"])
    most_common = freq.most_common(1)[0][0]
    return BEATS[most_common]


def adaptive_opponent(state, round_num):
    """Switches strategy mid-match."""
    if round_num < 30:
        return rock_spam(state, round_num)
    elif round_num < 60:
        return counter_last(state, round_num)
    else:
        return frequency_counter(state, round_num)


OPPONENTS: Dict[str, Strategy] = {
    "rock_spam": rock_spam,
    "paper_spam": paper_spam,
    "scissors_spam": scissors_spam,
    "random": pure_random,
    "cycle": cycle_forward,
    "cycle_back": cycle_backward,
    "counter": counter_last,
    "wsls": wsls_opponent,
    "freq_counter": frequency_counter,
    "adaptive": adaptive_opponent,
}
