import math
from functools import cmp_to_key

import numpy as np

from monkeysim.evolution.mutator import check_rate
from monkeysim.genome.candidate import Candidate
from monkeysim.genome.sequence import Alphabet, make_rng


def check_survival_threshold(size: int, survival_threshold: float) -> int:
    """
    Returns how many candidates survive the cull.
    :raises ValueError: if the threshold is outside (0, 1] or leaves no survivors.
    """
    if not 0.0 < survival_threshold <= 1.0:
        raise ValueError(f"survival_threshold must be in (0, 1], got {survival_threshold}")
    culled_size = math.floor(size * survival_threshold)
    if culled_size < 1:
        raise ValueError(
            f"survival_threshold {survival_threshold} leaves no survivors in a population of {size}"
        )
    return culled_size


class Population:
    """
    A generation of candidates, always sorted fittest first.
    A population is never changed after construction; evolving it
    returns a brand new Population.
    """

    def __init__(self, candidates, fitness, rng: np.random.Generator = None):
        if len(candidates) == 0:
            raise ValueError("A population needs at least one candidate.")
        self.fitness = fitness
        self.rng = rng if rng is not None else make_rng()
        # sorted() is stable: equally fit candidates keep their order
        self.candidates = tuple(sorted(candidates, key=cmp_to_key(fitness.compare)))
        self.size = len(self.candidates)                # constant across generations
        self.genome_length = len(self.candidates[0])

    @classmethod
    def create_random(cls, size: int, genome_length: int, alphabet: Alphabet, fitness,
                      rng: np.random.Generator = None):
        """
        Initializes a population of randomly generated candidates.
        :param size: Integer, number of individuals in the population.
        :param genome_length: Number of genes each candidate should have.
        :param alphabet: The symbols genes are drawn from.
        :param fitness: The model that ranks the candidates.
        """
        if size < 1:
            raise ValueError(f"population_size must be a positive integer, got {size}")
        rng = rng if rng is not None else make_rng()
        candidates = [Candidate.random(genome_length, alphabet, rng) for _ in range(size)]
        return cls(candidates, fitness, rng)

    def evolve(self, survival_threshold: float, mutation_rate: float, alphabet: Alphabet):
        """
        Returns a new Population of evolved candidates. Evolution happens by keeping
        the top fraction of fittest candidates, culling the rest, then breeding the
        survivors to return the population to its original size.
        :param survival_threshold: The fraction of candidates that survive the cull
        :param mutation_rate: The per-gene mutation probability of offspring
        :param alphabet: The symbols that can be inserted by mutations
        """
        # Cull population to the fittest candidates
        culled_size = check_survival_threshold(self.size, survival_threshold)
        check_rate(mutation_rate)
        survivors = self.candidates[:culled_size]

        # Breed those candidates (parents drawn with replacement)
        offspring = []
        for _ in range(self.size - culled_size):
            parent1 = survivors[self.rng.integers(culled_size)]
            parent2 = survivors[self.rng.integers(culled_size)]
            offspring.append(parent1.breed(parent2, mutation_rate, alphabet, self.rng))

        return Population(list(survivors) + offspring, self.fitness, self.rng)

    def fittest(self) -> Candidate:
        return self.candidates[0]

    def record_fitness_into(self, distribution: dict) -> dict:
        """Adds the fitness score of every candidate to the given distribution map."""
        for candidate in self.candidates:
            score = candidate.get_fitness_score(self.fitness)
            distribution[score] = distribution.get(score, 0) + 1
        return distribution

    def get_count(self) -> int:
        return self.size

    def get_candidates(self) -> tuple:
        return self.candidates

    def get_scores(self) -> np.ndarray:
        return self.fitness.evaluate_population(self)

    def get_matrix(self) -> np.ndarray:
        """Rows = Individuals, Columns = Gene Positions"""
        return np.stack([c.genes for c in self.candidates])

    def __len__(self):
        return self.size

    def __iter__(self):
        return iter(self.candidates)
