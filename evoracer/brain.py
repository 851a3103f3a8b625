"""
Feed-forward neural controller.

A Brain is a fixed two-layer tanh network whose parameters live in one
flat genome so the genetic algorithm can cut and perturb it without
knowing the layer shapes.

Genome layout: for each hidden unit, its input weights followed by its
bias; then for each output unit, its hidden weights followed by its bias.
"""

from typing import Optional, Sequence, Tuple

import numpy as np

from .errors import InvalidGenomeLengthError
from .constants import (
    BRAIN_INPUT_SIZE,
    BRAIN_HIDDEN_SIZE,
    BRAIN_OUTPUT_SIZE,
    WEIGHT_INIT_SCALE
)


class Brain:
    """Two-layer tanh network backed by a flat weight vector"""

    def __init__(self,
                 input_size: int = BRAIN_INPUT_SIZE,
                 hidden_size: int = BRAIN_HIDDEN_SIZE,
                 output_size: int = BRAIN_OUTPUT_SIZE,
                 weights: Optional[Sequence[float]] = None,
                 rng: Optional[np.random.Generator] = None,
                 weight_scale: float = WEIGHT_INIT_SCALE):
        """
        Create a brain from explicit weights or random ones.

        Args:
            input_size: Number of network inputs
            hidden_size: Number of hidden units
            output_size: Number of outputs
            weights: Flat genome; copied. Random when omitted
            rng: Source for random weights; a fresh unseeded generator when omitted
            weight_scale: Random weights are uniform in [-weight_scale, weight_scale]

        Raises:
            InvalidGenomeLengthError: ``weights`` is not a flat vector of the right length
        """
        if min(input_size, hidden_size, output_size) < 1:
            raise ValueError(
                f"Layer sizes must be positive: {input_size}, {hidden_size}, {output_size}"
            )

        self.input_size = input_size
        self.hidden_size = hidden_size
        self.output_size = output_size

        expected = self.genome_length_for(input_size, hidden_size, output_size)
        if weights is None:
            rng = rng if rng is not None else np.random.default_rng()
            genes = rng.uniform(-1.0, 1.0, size=expected) * weight_scale
        else:
            genes = np.array(weights, dtype=np.float64)
            if genes.ndim != 1 or genes.shape[0] != expected:
                raise InvalidGenomeLengthError(
                    f"Expected a flat genome of {expected} weights, got shape {genes.shape}"
                )
        self._genes = genes
        self._unpack()

        # Last activations, kept for observers only
        self.last_inputs = np.zeros(input_size)
        self.last_hidden = np.zeros(hidden_size)
        self.last_outputs = np.zeros(output_size)

    @staticmethod
    def genome_length_for(input_size: int, hidden_size: int, output_size: int) -> int:
        return (input_size + 1) * hidden_size + (hidden_size + 1) * output_size

    @property
    def genome_length(self) -> int:
        return self._genes.shape[0]

    def _unpack(self) -> None:
        split = (self.input_size + 1) * self.hidden_size
        hidden = self._genes[:split].reshape(self.hidden_size, self.input_size + 1)
        output = self._genes[split:].reshape(self.output_size, self.hidden_size + 1)
        self._w1, self._b1 = hidden[:, :-1], hidden[:, -1]
        self._w2, self._b2 = output[:, :-1], output[:, -1]

    def predict(self, inputs: Sequence[float]) -> np.ndarray:
        """
        Run one forward pass.

        Args:
            inputs: ``input_size`` values

        Returns:
            numpy array of ``output_size`` values in (-1, 1)

        Raises:
            ValueError: Wrong number of inputs
        """
        x = np.asarray(inputs, dtype=np.float64)
        if x.shape != (self.input_size,):
            raise ValueError(f"Expected {self.input_size} inputs, got shape {x.shape}")

        hidden = np.tanh(self._w1 @ x + self._b1)
        outputs = np.tanh(self._w2 @ hidden + self._b2)

        self.last_inputs = x.copy()
        self.last_hidden = hidden
        self.last_outputs = outputs
        return outputs.copy()

    def get_genes(self) -> np.ndarray:
        """Copy of the flat genome"""
        return self._genes.copy()

    @classmethod
    def from_genes(cls, genes: Sequence[float], template: "Brain") -> "Brain":
        """Brain with ``template``'s shape and the given genome"""
        return cls(template.input_size, template.hidden_size, template.output_size, weights=genes)

    def clone(self) -> "Brain":
        return Brain.from_genes(self._genes, self)

    def layers(self) -> Tuple[Tuple[np.ndarray, np.ndarray], Tuple[np.ndarray, np.ndarray]]:
        """Copies of ((W1, b1), (W2, b2))"""
        return ((self._w1.copy(), self._b1.copy()), (self._w2.copy(), self._b2.copy()))

    def __repr__(self) -> str:
        return f"Brain({self.input_size}-{self.hidden_size}-{self.output_size}, genes={self.genome_length})"
