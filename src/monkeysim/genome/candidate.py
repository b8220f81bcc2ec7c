# A single individual: an immutable genome and its memoized fitness


from dataclasses import dataclass

import numpy as np

from monkeysim.evolution.mutator import UniformMutator
from monkeysim.genome.sequence import Alphabet, make_rng


class Unscored:
    """Fitness state of a candidate that has not been evaluated yet."""

    def __repr__(self):
        return "UNSCORED"


UNSCORED = Unscored()


@dataclass(frozen=True)
class Scored:
    """Fitness state of an evaluated candidate."""
    value: int


class Candidate:
    """
    Represents a single individual in the population.

    The genome is fixed at construction and never changes; new genomes only
    come from new candidates. The fitness score is computed at most once, by
    whichever evaluator asks first.
    """

    __slots__ = ("_genes", "_fitness")

    def __init__(self, genes):
        if isinstance(genes, str):
            genes = list(genes)
        genes = np.array(genes, dtype=str)
        if genes.ndim != 1:
            raise ValueError("A genome must be a one-dimensional sequence of symbols.")
        if genes.size and np.any(np.char.str_len(genes) != 1):
            raise ValueError(f"Every gene must be exactly one symbol, got {genes.tolist()}")
        genes = genes.astype("<U1")
        genes.setflags(write=False)
        self._genes = genes
        self._fitness = UNSCORED

    @classmethod
    def random(cls, length: int, alphabet: Alphabet, rng: np.random.Generator = None):
        """Creates a candidate whose genes are drawn uniformly from the alphabet."""
        rng = rng if rng is not None else make_rng()
        return cls(alphabet.random_symbols(rng, length))

    @classmethod
    def offspring(cls, parent1, parent2, mutation_rate: float, alphabet: Alphabet,
                  rng: np.random.Generator = None):
        """
        Breeds one child from two parents of equal length.
        Each gene is taken from a randomly chosen parent, unless a mutation
        (probability `mutation_rate`) replaces it with a random symbol.
        :raises ValueError: if the parents have different genome lengths.
        """
        if len(parent1) != len(parent2):
            raise ValueError(
                f"A candidate with {len(parent1)} genes cannot breed with "
                f"a candidate with {len(parent2)} genes"
            )
        rng = rng if rng is not None else make_rng()
        mutator = UniformMutator(rate=mutation_rate)

        # Take gene from one of the parents
        from_first = rng.random(len(parent1)) < 0.5
        child_genes = np.where(from_first, parent1._genes, parent2._genes)

        return cls(mutator.apply(child_genes, alphabet, rng))

    def breed(self, other, mutation_rate: float, alphabet: Alphabet, rng: np.random.Generator = None):
        return Candidate.offspring(self, other, mutation_rate, alphabet, rng)

    @property
    def genes(self) -> np.ndarray:
        return self._genes

    @property
    def fitness_state(self):
        return self._fitness

    @property
    def is_scored(self) -> bool:
        return isinstance(self._fitness, Scored)

    def gene(self, index: int) -> str:
        if not 0 <= index < len(self._genes):
            raise IndexError(f"Gene index {index} out of range for a genome of length {len(self._genes)}")
        return str(self._genes[index])

    def get_fitness_score(self, fitness) -> int:
        """
        Returns the fitness score, computing it with `fitness` on first use.
        The score is cached, so the evaluator is ignored on later calls.
        """
        if not self.is_scored:
            self._fitness = Scored(fitness.compute_fitness(self))
        return self._fitness.value

    def __len__(self):
        return len(self._genes)

    def __str__(self):
        return Alphabet.to_string(self._genes)

    def __repr__(self):
        return f"Candidate({str(self)!r}, fitness={self._fitness!r})"
