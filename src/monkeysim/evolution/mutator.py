# Mutation models - how offspring genes get replaced

import numpy as np
from abc import ABC, abstractmethod


def check_rate(rate: float) -> float:
    if not 0.0 <= rate <= 1.0:
        raise ValueError(f"mutation_rate must be between 0 and 1, got {rate}")
    return float(rate)


class Mutator(ABC):
    """
    Abstract Base Class for all mutation models.
    Ensures that any new mutator implements the 'apply' method.
    """

    def __init__(self, rate: float):
        self.rate = check_rate(rate)

    @abstractmethod
    def apply(self, genes: np.ndarray, alphabet, rng: np.random.Generator) -> np.ndarray:
        pass


class UniformMutator(Mutator):
    """
    Simple mutator - every site mutates with probability `rate`,
    and the replacement is drawn uniformly from the whole alphabet
    (so a mutation may redraw the symbol that was already there).
    """

    def __init__(self, **kwargs):
        super().__init__(**kwargs)

    def apply(self, genes, alphabet, rng):
        # Decide which sites mutate
        mutation_mask = rng.random(genes.shape) < self.rate
        num_mutations = np.count_nonzero(mutation_mask)
        if num_mutations == 0:
            return genes

        genes = genes.copy()
        genes[mutation_mask] = alphabet.random_symbols(rng, num_mutations)
        return genes
