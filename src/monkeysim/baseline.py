# Non-genetic baseline: every monkey types completely at random


import logging
import time
from typing import NamedTuple, Dict

import numpy as np

from monkeysim.genome.sequence import Alphabet, SequenceHandler, make_rng
from monkeysim.simulator import typing_speed

logger = logging.getLogger(__name__)

DEFAULT_ITERATIONS = 1_000_000


class SearchResult(NamedTuple):
    iterations: int
    genome: str
    score: int
    elapsed: float
    words_per_minute: int
    distribution: Dict[int, int]


class RandomSearch:
    """
    Draws uniformly random strings and keeps the best one.
    For anything but trivial targets this will not find an exact match,
    so it stops after a fixed number of samples.
    """

    def __init__(self, target: str, alphabet: Alphabet = None, rng=None, batch_size: int = 10_000):
        self.alphabet = alphabet if alphabet is not None else Alphabet()
        if not target:
            raise ValueError("target must contain at least one symbol")
        if batch_size < 1:
            raise ValueError(f"batch_size must be a positive integer, got {batch_size}")
        self.target = self.alphabet.encode(target)
        self.rng = rng if rng is not None else make_rng()
        self.batch_size = batch_size

    def run(self, iterations: int = DEFAULT_ITERATIONS) -> SearchResult:
        if iterations < 1:
            raise ValueError(f"iterations must be a positive integer, got {iterations}")
        length = len(self.target)
        counts = np.zeros(length + 1, dtype=np.int64)
        best_score = -1
        best_genome = None
        start = time.perf_counter()

        remaining = iterations
        while remaining > 0:
            rows = min(self.batch_size, remaining)
            matrix = SequenceHandler.create_random_matrix(rows, length, self.alphabet, self.rng)
            scores = SequenceHandler.count_matches(matrix, self.target)
            counts += np.bincount(scores, minlength=length + 1)

            # argmax picks the first of equal scores, so earlier samples win ties
            best = int(np.argmax(scores))
            if scores[best] > best_score:
                best_score = int(scores[best])
                best_genome = Alphabet.to_string(matrix[best])
            remaining -= rows

        elapsed = time.perf_counter() - start
        logger.info("Sampled %d strings in %.3f s, best %d/%d", iterations, elapsed, best_score, length)
        return SearchResult(
            iterations=iterations,
            genome=best_genome,
            score=best_score,
            elapsed=elapsed,
            words_per_minute=typing_speed(iterations, length, 1, elapsed),
            distribution={score: int(count) for score, count in enumerate(counts)}
        )
