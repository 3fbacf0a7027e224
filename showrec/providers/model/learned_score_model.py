"""Small feed-forward network scorer built on PyTorch.

Architecture::

    Linear(10, 32) → ReLU → Dropout(0.2)
    → Linear(32, 16) → ReLU → Dropout(0.2)
    → Linear(16, 1) → Sigmoid

Trained with ``BCELoss`` and ``Adam`` on positive-only examples (every
favourite is labelled 1).  Dropout is only active in ``train()`` mode.
The last 20% of the examples are held out for a validation loss that is
logged per epoch.

PyTorch is an optional extra (``pip install showrec[ml]``) and is imported
lazily; ``is_available()`` is the import check used at assembly time to
choose between this model and the heuristic.

Until the first successful training pass the network is untrained, so
scoring is delegated to the fallback scorer instead.  Training works on a
deep copy of the network and swaps it in only once every epoch has
finished with a finite loss.
"""

from __future__ import annotations

import asyncio
import copy
import math
from typing import Any

from showrec.interfaces.score_model import IScoreModel
from showrec.models.features import CandidateFeatures, ProfileFeatures, TrainingExample
from showrec.providers.model.heuristic_score_model import HeuristicScoreModel
from showrec.services.feature_encoder import FEATURE_VECTOR_LENGTH, FeatureEncoder
from showrec.utils.errors import ModelTrainingError
from showrec.utils.logging import get_logger

_HIDDEN_SIZES = (32, 16)
_MIN_TRAINING_EXAMPLES = 10


def build_network(dropout_rate: float = 0.2) -> Any:
    """Return the untrained ``nn.Sequential`` scorer network."""
    from torch import nn

    first, second = _HIDDEN_SIZES
    return nn.Sequential(
        nn.Linear(FEATURE_VECTOR_LENGTH, first),
        nn.ReLU(),
        nn.Dropout(dropout_rate),
        nn.Linear(first, second),
        nn.ReLU(),
        nn.Dropout(dropout_rate),
        nn.Linear(second, 1),
        nn.Sigmoid(),
    )


class LearnedScoreModel(IScoreModel):
    """Trainable scorer with a heuristic fallback before first training.

    Parameters
    ----------
    encoder:
        Builds the 10-element input vector.
    fallback:
        Scorer used while untrained and when the network yields a
        non-finite value.
    seed:
        Seeds weight initialisation, dropout and shuffling.
    """

    def __init__(
        self,
        encoder: FeatureEncoder | None = None,
        fallback: IScoreModel | None = None,
        seed: int = 42,
        epochs: int = 10,
        batch_size: int = 32,
        validation_split: float = 0.2,
        dropout_rate: float = 0.2,
        learning_rate: float = 1e-3,
    ) -> None:
        self._encoder = encoder or FeatureEncoder()
        self._fallback = fallback or HeuristicScoreModel()
        self._seed = seed
        self._epochs = epochs
        self._batch_size = batch_size
        self._validation_split = validation_split
        self._dropout_rate = dropout_rate
        self._learning_rate = learning_rate
        self._network: Any = None
        self._trained = False
        self._passes = 0
        self._logger = get_logger(__name__)

    # ------------------------------------------------------------------
    # IScoreModel implementation
    # ------------------------------------------------------------------

    async def initialize(self) -> None:
        if self._network is not None:
            return
        import torch

        with torch.random.fork_rng(devices=[]):
            torch.manual_seed(self._seed)
            self._network = build_network(self._dropout_rate)
        self._network.eval()
        self._logger.info(
            "learned_model_initialized",
            layers=[FEATURE_VECTOR_LENGTH, *_HIDDEN_SIZES, 1],
        )

    def score(
        self,
        profile_features: ProfileFeatures,
        candidate_features: CandidateFeatures,
    ) -> float:
        if not self._trained or self._network is None:
            return self._fallback.score(profile_features, candidate_features)

        import torch

        features = self._encoder.encode(profile_features, candidate_features)
        with torch.no_grad():
            value = float(self._network(torch.tensor([features], dtype=torch.float32))[0, 0])
        if not math.isfinite(value):
            self._logger.warning("learned_model_non_finite_score")
            return self._fallback.score(profile_features, candidate_features)
        return min(max(value, 0.0), 1.0)

    async def train(self, examples: list[TrainingExample]) -> bool:
        if len(examples) < _MIN_TRAINING_EXAMPLES:
            self._logger.info(
                "learned_model_training_skipped",
                examples=len(examples),
                minimum=_MIN_TRAINING_EXAMPLES,
            )
            return False
        await self.initialize()

        rows = [self._encoder.encode(e.profile, e.candidate) for e in examples]
        labels = [float(e.label) for e in examples]
        try:
            network = await asyncio.to_thread(
                self._fit, copy.deepcopy(self._network), rows, labels, self._seed + self._passes
            )
        except (RuntimeError, ValueError, FloatingPointError) as exc:
            raise ModelTrainingError(
                message=f"Fitting failed: {exc}",
                provider_name=self.get_model_name(),
            ) from exc

        network.eval()
        self._network = network
        self._trained = True
        self._passes += 1
        self._logger.info("learned_model_trained", examples=len(examples), epochs=self._epochs)
        return True

    def dispose(self) -> None:
        self._network = None
        self._trained = False
        self._passes = 0

    def get_model_name(self) -> str:
        return "learned_mlp"

    def is_available(self) -> bool:
        """Return ``True`` if PyTorch is installed."""
        try:
            import torch  # noqa: F401
            return True
        except ImportError:
            return False

    @property
    def is_trained(self) -> bool:
        return self._trained

    def state_dict(self) -> dict[str, Any]:
        """Copy of the current network parameters (empty before ``initialize``)."""
        if self._network is None:
            return {}
        return {k: v.detach().clone() for k, v in self._network.state_dict().items()}

    # ------------------------------------------------------------------
    # Training loop (runs in a worker thread)
    # ------------------------------------------------------------------

    def _fit(self, network: Any, rows: list[list[float]], labels: list[float], seed: int) -> Any:
        """Train *network* in place and return it."""
        import torch
        from torch import nn

        x = torch.tensor(rows, dtype=torch.float32)
        y = torch.tensor(labels, dtype=torch.float32).unsqueeze(1)

        n_val = int(len(x) * self._validation_split)
        n_train = len(x) - n_val
        x_train, y_train = x[:n_train], y[:n_train]
        x_val, y_val = x[n_train:], y[n_train:]
        batch_size = min(self._batch_size, n_train)

        criterion = nn.BCELoss()
        optimizer = torch.optim.Adam(network.parameters(), lr=self._learning_rate)

        with torch.random.fork_rng(devices=[]):
            torch.manual_seed(seed)
            generator = torch.Generator().manual_seed(seed)

            for epoch in range(self._epochs):
                network.train()
                order = torch.randperm(n_train, generator=generator)
                total_loss = 0.0
                for start in range(0, n_train, batch_size):
                    idx = order[start:start + batch_size]
                    optimizer.zero_grad()
                    loss = criterion(network(x_train[idx]), y_train[idx])
                    loss.backward()
                    optimizer.step()
                    total_loss += loss.item() * len(idx)

                train_loss = total_loss / n_train
                if not math.isfinite(train_loss):
                    raise FloatingPointError(f"non-finite loss at epoch {epoch + 1}")

                val_loss = None
                if n_val:
                    network.eval()
                    with torch.no_grad():
                        val_loss = criterion(network(x_val), y_val).item()
                self._logger.debug(
                    "learned_model_epoch",
                    epoch=epoch + 1,
                    loss=round(train_loss, 5),
                    val_loss=round(val_loss, 5) if val_loss is not None else None,
                )

        return network
