# Main simulation loop
# until the fittest candidate types the target:
#   Evolve (cull + breed) the population
#   Record the fitness distribution
#   Report the fittest candidate to the samplers


import logging
import time
from typing import NamedTuple, Dict, List

from monkeysim.evolution.fitness import TargetFitness
from monkeysim.evolution.mutator import check_rate
from monkeysim.genome.candidate import Candidate
from monkeysim.genome.sequence import Alphabet, make_rng
from monkeysim.population.container import Population, check_survival_threshold

logger = logging.getLogger(__name__)

DEFAULT_POPULATION_SIZE = 1000
DEFAULT_SURVIVAL_THRESHOLD = 0.2
DEFAULT_MUTATION_RATE = 0.01


class GenerationRecord(NamedTuple):
    generation: int
    score: int
    genome: str


class SimulationResult(NamedTuple):
    generations: int
    fittest: Candidate
    score: int
    elapsed: float                  # seconds
    words_per_minute: int
    distribution: Dict[int, int]
    history: List[GenerationRecord]

    @property
    def genome(self) -> str:
        return str(self.fittest)


def typing_speed(generations: int, length: int, population_size: int, elapsed: float) -> int:
    """How many five-letter words per minute the monkeys typed."""
    if elapsed <= 0:
        return 0
    words = generations * length * population_size / 5.0
    minutes = elapsed / 60.0
    return int(round(words / minutes))


class Simulator:
    """The engine that runs the generations."""

    def __init__(self, target: str, alphabet: Alphabet = None,
                 population_size: int = DEFAULT_POPULATION_SIZE,
                 survival_threshold: float = DEFAULT_SURVIVAL_THRESHOLD,
                 mutation_rate: float = DEFAULT_MUTATION_RATE,
                 samplers=(), rng=None):
        self.alphabet = alphabet if alphabet is not None else Alphabet()
        if not target:
            raise ValueError("target must contain at least one symbol")
        if isinstance(population_size, bool) or not isinstance(population_size, int) or population_size < 1:
            raise ValueError(f"population_size must be a positive integer, got {population_size}")
        check_survival_threshold(population_size, survival_threshold)

        self.fitness = TargetFitness(target, self.alphabet)
        self.length = self.fitness.length
        self.population_size = population_size
        self.survival_threshold = survival_threshold
        self.mutation_rate = check_rate(mutation_rate)
        self.samplers = list(samplers)
        self.rng = rng if rng is not None else make_rng()
        self.current_generation = 0

    def new_distribution(self) -> Dict[int, int]:
        return {score: 0 for score in range(self.length + 1)}

    def initial_population(self) -> Population:
        return Population.create_random(self.population_size, self.length, self.alphabet, self.fitness, self.rng)

    def run(self, population: Population = None) -> SimulationResult:
        """
        The main simulation loop. Runs until a candidate matches the target
        exactly; there is no generation limit.
        """
        start = time.perf_counter()
        if population is None:
            population = self.initial_population()
        elif population.size != self.population_size or population.genome_length != self.length:
            raise ValueError(
                f"Initial population must hold {self.population_size} candidates of length {self.length}"
            )
        elif getattr(population.fitness, "target", None) != self.fitness.target:
            raise ValueError(
                f"Initial population was scored against {getattr(population.fitness, 'target', None)!r}, not {self.fitness.target!r}"
            )

        distribution = population.record_fitness_into(self.new_distribution())
        history = []
        self.current_generation = 0
        logger.info("Evolving %d candidates towards %r", self.population_size, self.fitness.target)

        while True:
            population = population.evolve(self.survival_threshold, self.mutation_rate, self.alphabet)
            population.record_fitness_into(distribution)
            fittest = population.fittest()
            self.current_generation += 1

            score = fittest.get_fitness_score(self.fitness)
            record = GenerationRecord(self.current_generation, score, str(fittest))
            history.append(record)
            logger.debug("Generation %d: %d/%d %s", record.generation, score, self.length, record.genome)
            self.collect_data(population, record)

            if score >= self.length:
                break

        elapsed = time.perf_counter() - start
        result = SimulationResult(
            generations=self.current_generation,
            fittest=fittest,
            score=score,
            elapsed=elapsed,
            words_per_minute=typing_speed(self.current_generation, self.length, self.population_size, elapsed),
            distribution=distribution,
            history=history
        )
        logger.info("Target found after %d generations (%.3f s)", result.generations, elapsed)

        for sampler in self.samplers:
            sampler.finalize(result)
        return result

    def collect_data(self, population: Population, record: GenerationRecord):
        """Hand the generation over to the samplers that want it."""
        for sampler in self.samplers:
            if sampler.is_sampling_time(record.generation):
                sampler.sample(population, record.generation, record=record)
