#!/usr/bin/env python3
"""
Hand Model: online opponent-move classifier

A small feed-forward network that reads the opponent's last few moves
(one-hot, flattened) and predicts their next move.

Architecture:
- Input: WINDOW_SIZE x 3 one-hot features
- Dense 32 + ReLU, Dropout 0.2 (training only), Dense 16 + ReLU
- Output: 3 logits, softmax at prediction time

Learning is purely online: one Adam step (batch 1) per observed move,
categorical cross-entropy against the one-hot of that move.
"""

import copy
import math
from contextlib import contextmanager
from dataclasses import dataclass
from typing import List, Optional, Sequence

import torch
import torch.nn as nn
import torch.nn.functional as F

from rps_moves import NUM_MOVES, WINDOW_SIZE


@dataclass
class HandModelConfig:
    """Configuration for the hand model."""
    window_size: int = WINDOW_SIZE
    hidden_units: int = 32
    second_hidden_units: int = 16
    dropout: float = 0.2
    learning_rate: float = 0.01
    output_size: int = NUM_MOVES

    @property
    def feature_size(self) -> int:
        return self.window_size * NUM_MOVES


@dataclass
class TrainResult:
    """Outcome of a single online update."""
    applied: bool
    loss: float


@contextmanager
def _seeded(generator: Optional[torch.Generator]):
    """Draw torch randomness from `generator` without touching the global RNG."""
    if generator is None:
        yield
        return
    seed = int(torch.randint(0, 2**31 - 1, (1,), generator=generator).item())
    with torch.random.fork_rng(devices=[]):
        torch.manual_seed(seed)
        yield


class HandModel(nn.Module):
    """
    Feed-forward move predictor.

    Takes a flattened window of one-hot moves and returns logits over the
    opponent's next move.
    """

    def __init__(self, config: HandModelConfig = None):
        super().__init__()

        if config is None:
            config = HandModelConfig()

        self.config = config

        self.net = nn.Sequential(
            nn.Linear(config.feature_size, config.hidden_units),
            nn.ReLU(),
            nn.Dropout(config.dropout),
            nn.Linear(config.hidden_units, config.second_hidden_units),
            nn.ReLU(),
            nn.Linear(config.second_hidden_units, config.output_size),
        )

        # Initialize weights
        self._init_weights()

    def _init_weights(self):
        """Glorot-uniform kernels, zero biases."""
        for module in self.modules():
            if isinstance(module, nn.Linear):
                nn.init.xavier_uniform_(module.weight)
                if module.bias is not None:
                    nn.init.zeros_(module.bias)

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        """
        Forward pass.

        Args:
            x: Tensor of shape (batch, feature_size) with one-hot features

        Returns:
            Tensor of shape (batch, 3) with move logits
        """
        return self.net(x)


class OnlineLearner:
    """
    Owns a HandModel, its optimizer and the trained flag.

    The flag flips the first time an update is actually applied and stays
    set until reinitialize().
    """

    def __init__(self, config: HandModelConfig = None, seed: Optional[int] = None):
        self.config = config or HandModelConfig()
        self.seed = seed
        self.reinitialize()

    def reinitialize(self):
        """Fresh weights, fresh optimizer, untrained."""
        self._generator = None
        if self.seed is not None:
            self._generator = torch.Generator().manual_seed(self.seed)

        with _seeded(self._generator):
            self.model = HandModel(self.config)
        self.model.eval()

        self.optimizer = torch.optim.Adam(self.model.parameters(), lr=self.config.learning_rate)
        self.trained = False
        self.steps = 0
        self.skipped = 0

    def _as_batch(self, features: Sequence[float]) -> torch.Tensor:
        assert len(features) == self.config.feature_size, (
            f"feature vector needs {self.config.feature_size} values, got {len(features)}"
        )
        return torch.tensor([list(features)], dtype=torch.float32)

    def _parameters_finite(self) -> bool:
        return all(torch.isfinite(p).all().item() for p in self.model.parameters())

    def predict(self, features: Sequence[float]) -> List[float]:
        """
        Predict the opponent's next move.

        Returns:
            List of 3 probabilities [rock, paper, scissors]
        """
        x = self._as_batch(features)
        self.model.eval()
        with torch.no_grad():
            logits = self.model(x)
            probs = F.softmax(logits, dim=-1)
        return probs.squeeze(0).tolist()

    def train_step(self, features: Sequence[float], target: Sequence[float]) -> TrainResult:
        """
        One Adam update on a single (window, next move) sample.

        A non-finite loss, or non-finite weights after the step, discards
        the update and leaves the previous weights in place.
        """
        x = self._as_batch(features)
        y = torch.tensor([list(target)], dtype=torch.float32)
        assert y.shape == (1, self.config.output_size), f"bad target shape {tuple(y.shape)}"

        model_state = copy.deepcopy(self.model.state_dict())
        optim_state = copy.deepcopy(self.optimizer.state_dict())

        self.model.train()
        self.optimizer.zero_grad()
        with _seeded(self._generator):
            logits = self.model(x)
        loss = F.cross_entropy(logits, y)
        loss_value = loss.item()

        if not math.isfinite(loss_value):
            self.optimizer.zero_grad()
            self.model.eval()
            self.skipped += 1
            return TrainResult(applied=False, loss=loss_value)

        loss.backward()
        self.optimizer.step()
        self.model.eval()

        if not self._parameters_finite():
            self.model.load_state_dict(model_state)
            self.optimizer.load_state_dict(optim_state)
            self.skipped += 1
            return TrainResult(applied=False, loss=loss_value)

        self.trained = True
        self.steps += 1
        return TrainResult(applied=True, loss=loss_value)

    def parameter_count(self) -> int:
        return sum(p.numel() for p in self.model.parameters())
