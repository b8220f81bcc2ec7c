import matplotlib
matplotlib.use("Agg")

import numpy as np
import pytest

from monkeysim.evolution.fitness import TargetFitness
from monkeysim.genome.sequence import Alphabet


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def alphabet():
    return Alphabet()


@pytest.fixture
def small_alphabet():
    return Alphabet(" AB")


@pytest.fixture
def weasel_fitness(alphabet):
    return TargetFitness("METHINKS IT IS LIKE A WEASEL", alphabet)
