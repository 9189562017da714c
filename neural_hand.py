#!/usr/bin/env python3
"""
Neural Hand - online counter-move predictor

Each round:
1. choose_move(): encode the opponent's last WINDOW_SIZE moves, ask the
   model for a distribution over their next move, play its counter.
2. record_move_and_train(move): once the real move is revealed, train on
   (previous window -> move), then append the move to history.

Until the history holds a full window and the model has taken at least
one update, moves are uniformly random and confidence is uniform.
"""

import asyncio
import random
import threading
from typing import Dict, List, Optional, Tuple

from hand_model import HandModelConfig, OnlineLearner
from rps_history import MoveHistory
from rps_moves import (
    IDX_TO_MOVE, MOVES, UNIFORM, MoveLike,
    argmax_index, counter_for, encode_window, indicator, move_index,
)

VERSION = "1.0"

# record_move_and_train outcomes
WARMING_UP = "warming_up"
TRAINED = "trained"
SKIPPED = "skipped"


class PredictionService:
    VERSION = VERSION

    def __init__(self, config: HandModelConfig = None, seed: Optional[int] = None,
                 rng: Optional[random.Random] = None, verbose: bool = False):
        self.config = config or HandModelConfig()
        self.seed = seed
        self.verbose = verbose
        self._custom_rng = rng is not None
        self.rng = rng if rng is not None else random.Random(seed)

        self.history = MoveHistory(self.config.window_size)
        self.learner = OnlineLearner(self.config, seed=seed)
        self._lock = threading.RLock()

    @property
    def is_trained(self) -> bool:
        return self.learner.trained

    @property
    def training_steps(self) -> int:
        return self.learner.steps

    @property
    def skipped_steps(self) -> int:
        return self.learner.skipped

    def _model_ready(self) -> bool:
        return self.history.has_full_window() and self.learner.trained

    def get_history_length(self) -> int:
        with self._lock:
            return len(self.history)

    def get_confidence(self) -> List[float]:
        """Model's distribution over the opponent's next move, uniform while warming up."""
        with self._lock:
            if not self._model_ready():
                return list(UNIFORM)
            features = encode_window(self.history.window(), self.config.window_size)
            return self.learner.predict(features)

    def choose_move(self) -> Tuple[str, str]:
        """Choose a counter move and explain it."""
        with self._lock:
            round_num = len(self.history) + 1
            if not self._model_ready():
                move = self.rng.choice(MOVES)
                return move, f"R{round_num}: Random (warming up)→{move}"

            probs = self.get_confidence()
            predicted = argmax_index(probs)
            move = counter_for(predicted)
            return move, f"R{round_num}: predict {IDX_TO_MOVE[predicted]}({probs[predicted]:.2f})→{move}"

    def predict_counter_move(self) -> str:
        return self.choose_move()[0]

    def record_move_and_train(self, move: MoveLike) -> str:
        """
        Learn from the opponent's revealed move, then append it to history.

        Training only fires when a full window was already recorded before
        this move. Returns WARMING_UP, TRAINED or SKIPPED.
        """
        idx = move_index(move)
        with self._lock:
            outcome = WARMING_UP
            if self.history.has_full_window():
                features = encode_window(self.history.window(), self.config.window_size)
                result = self.learner.train_step(features, indicator(idx))
                if result.applied:
                    outcome = TRAINED
                else:
                    outcome = SKIPPED
                    if self.verbose:
                        print(f"Training step skipped at round {len(self.history) + 1}: "
                              f"non-finite loss/weights (loss={result.loss})", flush=True)

            self.history.append(idx)
            return outcome

    async def record_move_and_train_async(self, move: MoveLike) -> str:
        """Same as record_move_and_train, off the event loop. Await before the next round."""
        return await asyncio.to_thread(self.record_move_and_train, move)

    def reset(self):
        """Forget everything: clear history, reinitialize weights and the fallback RNG."""
        with self._lock:
            self.history.clear()
            self.learner.reinitialize()
            if not self._custom_rng:
                self.rng = random.Random(self.seed)
            if self.verbose:
                print("Neural Hand reset: history cleared, weights reinitialized", flush=True)

    def stats(self) -> Dict:
        with self._lock:
            return {
                "history_length": len(self.history),
                "trained": self.learner.trained,
                "training_steps": self.learner.steps,
                "skipped_steps": self.learner.skipped,
                "move_counts": dict(zip(MOVES, self.history.counts())),
                "confidence": self.get_confidence(),
            }


if __name__ == "__main__":
    print(f"Neural Hand v{VERSION}")
    service = PredictionService(seed=7)

    # Quick test
    test_moves = ['rock'] * 8 + ['paper', 'paper', 'scissors']
    for opp in test_moves:
        my_move, reason = service.choose_move()
        outcome = service.record_move_and_train(opp)
        print(f"{my_move} vs {opp} | {reason} | {outcome}")
