# Fitness landscapes - how close a genome is to the target

from abc import ABC, abstractmethod
import numpy as np

from monkeysim.genome.sequence import Alphabet, SequenceHandler


class FitnessModel(ABC):
    """
    The Base Template for all Fitness Landscapes.
    """
    def __init__(self, reference_sequence=None, **kwargs):
        self.reference_sequence = reference_sequence

    @abstractmethod
    def compute_fitness(self, candidate) -> int:
        pass

    def compare(self, candidate1, candidate2) -> int:
        """Sorts fitter candidates earlier."""
        return candidate2.get_fitness_score(self) - candidate1.get_fitness_score(self)

    def evaluate_population(self, population) -> np.ndarray:
        """
        Returns a 1D NumPy array of fitness scores
        corresponding to each individual in the population.
        Scores already memoized on the candidates are reused.
        """
        return np.array([c.get_fitness_score(self) for c in population.get_candidates()], dtype=np.int64)


class TargetFitness(FitnessModel):
    """
    Scores a genome by the number of positions that match the target.
    Note that usually the genome would dictate a behaviour and the fitness
    would judge the outcome; here the genome itself is compared directly.
    """

    def __init__(self, target, alphabet: Alphabet = None):
        if not isinstance(target, str):
            target = Alphabet.to_string(target)
        if alphabet is not None:
            target = alphabet.encode(target)
        else:
            target = np.array(list(target), dtype="<U1")
            target.setflags(write=False)
        super().__init__(reference_sequence=target)

    @property
    def length(self) -> int:
        return len(self.reference_sequence)

    @property
    def target(self) -> str:
        return Alphabet.to_string(self.reference_sequence)

    def compute_fitness(self, candidate) -> int:
        """
        :param candidate: The Candidate to evaluate.
        :return: The fitness score, between 0 and the length of the target.
        """
        if len(candidate) != self.length:
            raise ValueError(
                f"Cannot score a genome of length {len(candidate)} against a target of length {self.length}"
            )
        return int(SequenceHandler.count_matches(candidate.genes, self.reference_sequence))
