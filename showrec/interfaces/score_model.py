"""Abstract base class for candidate score models.

Two interchangeable variants implement this contract: a small trainable
neural network and a weighted heuristic.  The variant is chosen once when
the engine is assembled; callers never branch on which one they hold.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from showrec.models.features import CandidateFeatures, ProfileFeatures, TrainingExample


class IScoreModel(ABC):
    """Contract for ``(profile, candidate) -> [0, 1]`` scorers."""

    @abstractmethod
    async def initialize(self) -> None:
        """Prepare the model for scoring.  Safe to call more than once."""

    @abstractmethod
    def score(
        self,
        profile_features: ProfileFeatures,
        candidate_features: CandidateFeatures,
    ) -> float:
        """Return a score in ``[0, 1]``.

        Must not raise: missing or malformed feature values count as zero.
        """

    @abstractmethod
    async def train(self, examples: list[TrainingExample]) -> bool:
        """Fit the model on *examples*.

        Returns ``True`` when the model changed.  Implementations that
        cannot learn return ``False``.

        Raises
        ------
        showrec.utils.errors.ModelTrainingError
            If fitting fails.  The previous state must remain usable.
        """

    @abstractmethod
    def dispose(self) -> None:
        """Release model resources; ``initialize`` may be called again later."""

    @abstractmethod
    def get_model_name(self) -> str:
        """Return a short identifier, e.g. ``"heuristic"`` or ``"learned_mlp"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if this variant can run in the current environment."""
