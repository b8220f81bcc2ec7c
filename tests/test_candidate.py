import numpy as np
import pytest
from scipy import stats

from monkeysim.evolution.fitness import TargetFitness
from monkeysim.genome.candidate import Candidate, Scored, UNSCORED
from monkeysim.genome.sequence import Alphabet


class TestCandidateCreation:
    """Test random candidates and their genome accessors."""

    def test_random_candidate(self, rng, alphabet):
        candidate = Candidate.random(20, alphabet, rng)

        assert len(candidate) == 20
        assert all(candidate.gene(i) in alphabet for i in range(20))
        assert len(str(candidate)) == 20

    def test_genome_text(self):
        candidate = Candidate("HI THERE")

        assert str(candidate) == "HI THERE"
        assert candidate.gene(2) == " "
        assert candidate.gene(7) == "E"

    def test_gene_index_out_of_range(self):
        candidate = Candidate("ABC")

        with pytest.raises(IndexError):
            candidate.gene(3)
        with pytest.raises(IndexError):
            candidate.gene(-1)

    def test_genome_is_immutable(self):
        candidate = Candidate("ABC")

        with pytest.raises(ValueError):
            candidate.genes[0] = "Z"
        assert str(candidate) == "ABC"

    def test_genome_is_copied_on_construction(self):
        genes = np.array(list("ABC"))
        candidate = Candidate(genes)
        genes[0] = "Z"

        assert str(candidate) == "ABC"

    @pytest.mark.parametrize("genes", [["AB", "CD"], ["A", ""], ["A", "BC", "D"]])
    def test_multi_symbol_genes_rejected(self, genes):
        with pytest.raises(ValueError, match="exactly one symbol"):
            Candidate(genes)

    def test_symbol_array_accepted(self):
        assert str(Candidate(np.array(["A", " ", "B"]))) == "A B"

    def test_starts_unscored(self):
        candidate = Candidate("ABC")

        assert candidate.fitness_state is UNSCORED
        assert not candidate.is_scored


class TestFitnessMemoization:
    """Test that a candidate's score is computed once."""

    def test_score_is_cached(self):
        candidate = Candidate("ABC")
        fitness = TargetFitness("ABD")

        assert candidate.get_fitness_score(fitness) == 2
        assert candidate.fitness_state == Scored(2)
        assert candidate.get_fitness_score(fitness) == 2

    def test_first_evaluator_wins(self):
        candidate = Candidate("ABC")

        assert candidate.get_fitness_score(TargetFitness("ABC")) == 3
        # A differently-targeted evaluator does not recompute
        assert candidate.get_fitness_score(TargetFitness("XYZ")) == 3

    def test_evaluator_called_once(self):
        calls = []

        class CountingFitness(TargetFitness):
            def compute_fitness(self, candidate):
                calls.append(candidate)
                return super().compute_fitness(candidate)

        fitness = CountingFitness("AB")
        candidate = Candidate("AA")
        candidate.get_fitness_score(fitness)
        candidate.get_fitness_score(fitness)

        assert len(calls) == 1


class TestBreeding:
    """Test offspring construction (crossover + mutation)."""

    def test_child_has_parent_length(self, rng, alphabet):
        parent1 = Candidate.random(15, alphabet, rng)
        parent2 = Candidate.random(15, alphabet, rng)
        child = parent1.breed(parent2, 0.5, alphabet, rng)

        assert len(child) == 15
        assert not child.is_scored

    def test_mismatched_parents_rejected(self, rng, alphabet):
        with pytest.raises(ValueError, match="3 genes cannot breed with a candidate with 4 genes"):
            Candidate.offspring(Candidate("ABC"), Candidate("ABCD"), 0.01, alphabet, rng)

    def test_invalid_mutation_rate_rejected(self, rng, alphabet):
        with pytest.raises(ValueError, match="mutation_rate"):
            Candidate("AB").breed(Candidate("AB"), 1.5, alphabet, rng)

    def test_parents_unchanged(self, rng, alphabet):
        parent1 = Candidate("AAAA")
        parent2 = Candidate("BBBB")
        parent1.breed(parent2, 1.0, alphabet, rng)

        assert str(parent1) == "AAAA"
        assert str(parent2) == "BBBB"

    def test_no_mutation_only_inherits(self, rng, alphabet):
        parent1 = Candidate("A" * 50)
        parent2 = Candidate("B" * 50)

        for _ in range(200):
            child = Candidate.offspring(parent1, parent2, 0.0, alphabet, rng)
            assert set(str(child)) <= {"A", "B"}

    def test_no_mutation_per_position(self, rng, alphabet):
        parent1 = Candidate("HELLO WORLD")
        parent2 = Candidate("JUMPY QUAKE")

        for _ in range(200):
            child = parent1.breed(parent2, 0.0, alphabet, rng)
            for i in range(len(child)):
                assert child.gene(i) in (parent1.gene(i), parent2.gene(i))

    def test_crossover_draws_from_both_parents(self, rng, alphabet):
        parent1 = Candidate("A" * 1000)
        parent2 = Candidate("B" * 1000)
        child = parent1.breed(parent2, 0.0, alphabet, rng)

        from_first = str(child).count("A")
        assert stats.binomtest(from_first, 1000, 0.5).pvalue > 1e-6

    def test_full_mutation_redraws_every_position(self, rng, alphabet):
        parent1 = Candidate("A" * 200)
        parent2 = Candidate("B" * 200)
        matches = 0
        total = 0

        for _ in range(50):
            child = parent1.breed(parent2, 1.0, alphabet, rng)
            matches += sum(1 for symbol in str(child) if symbol in "AB")
            total += len(child)

        # Only the chance of redrawing A or B remains
        expected = 2 / len(alphabet)
        assert matches / total < 0.2
        assert stats.binomtest(matches, total, expected).pvalue > 1e-6

    def test_seeded_breeding_is_reproducible(self, alphabet):
        parent1 = Candidate("METHINKS")
        parent2 = Candidate("IT IS LI")

        first = parent1.breed(parent2, 0.3, alphabet, np.random.default_rng(7))
        second = parent1.breed(parent2, 0.3, alphabet, np.random.default_rng(7))

        assert str(first) == str(second)

    def test_mutation_uses_given_alphabet(self, rng):
        alphabet = Alphabet("XYZ")
        child = Candidate("AAAA").breed(Candidate("BBBB"), 1.0, alphabet, rng)

        assert set(str(child)) <= {"X", "Y", "Z"}
