# Reporters for the console, statistics and plots - collected during the simulation


import numpy as np
from pathlib import Path
import pandas as pd
import matplotlib.pyplot as plt
from abc import ABC, abstractmethod

from monkeysim.color import fg, bg


class Sampler(ABC):
    """
    The Base Template for all Samplers.
    """

    def __init__(self, interval: int = 1, output_path: str = None, **kwargs):
        if interval < 1:
            raise ValueError(f"Sampling interval must be a positive integer, got {interval}")
        self.interval = interval
        self.output_path = Path(output_path) if output_path else None
        if self.output_path is not None:
            self.output_path.parent.mkdir(parents=True, exist_ok=True)

    def is_sampling_time(self, generation: int) -> bool:
        """Standard check for all samplers."""
        return generation % self.interval == 0

    @abstractmethod
    def sample(self, population, generation: int, record=None, **kwargs):
        """Must be implemented by child classes."""
        pass

    def finalize(self, result):
        """Optional hook for end-of-simulation tasks (like plotting)."""
        pass

    def _require_output_path(self):
        if self.output_path is None:
            raise ValueError(f"{type(self).__name__} needs an output file")
        return self.output_path


class ConsoleSampler(Sampler):
    """
    Prints the fittest genome of each sampled generation,
    and the run statistics once the target is found.
    """

    def __init__(self, interval: int = 1, output_path: str = None, show_distribution: bool = True):
        super().__init__(interval, output_path)
        self.show_distribution = show_distribution

    def sample(self, population, generation: int, record=None, **kwargs):
        length = population.genome_length
        print(f"Gen {record.generation:>3} [{record.score:>3}/{length}] {record.genome}")

    def finalize(self, result):
        print(fg.GREEN, f"Match found: {bg.BLACK}{result.genome}{bg.RESET}", fg.RESET)
        print(f"Elapsed: {result.elapsed:.6f} s")
        print(f"Typing speed: {result.words_per_minute} wpm")
        if self.show_distribution:
            print("Distribution:")
            for score, count in result.distribution.items():
                print(f"{score}\t{count}")


class FittestSampler(Sampler):
    """Tracks the best score (and its genome) over time."""

    def __init__(self, interval: int = 1, output_path: str = "output/fittest.csv"):
        super().__init__(interval, output_path)
        self._require_output_path()
        self.history = []

    def sample(self, population, generation: int, record=None, **kwargs):
        self.history.append({
            "generation": generation,
            "score": record.score,
            "genome": record.genome
        })
        pd.DataFrame(self.history).to_csv(self.output_path, index=False)

    def finalize(self, result):
        if not self.history: return
        df = pd.read_csv(self.output_path, keep_default_na=False)
        plt.figure(figsize=(10, 5))
        plt.plot(df['generation'], df['score'], color='teal', linewidth=2)
        plt.axhline(len(result.genome), color='grey', linestyle='--', alpha=0.7)
        plt.title("Fittest Candidate Score per Generation")
        plt.xlabel("Generation")
        plt.ylabel("Matching Characters")
        plt.grid(True, alpha=0.3)
        plt.savefig(self.output_path.with_suffix('.png'))
        plt.close()


class FitnessSampler(Sampler):
    """Tracks Average Fitness over time."""

    def __init__(self, interval: int = 1, output_path: str = "output/fitness.csv"):
        super().__init__(interval, output_path)
        self._require_output_path()
        self.history = []

    def sample(self, population, generation: int, record=None, **kwargs):
        fitness_vals = population.get_scores()

        self.history.append({
            "generation": generation,
            "avg_fitness": fitness_vals.mean(),
            "min_fitness": int(fitness_vals.min())
        })
        pd.DataFrame(self.history).to_csv(self.output_path, index=False)

    def finalize(self, result):
        if not self.history: return
        df = pd.read_csv(self.output_path)
        plt.figure(figsize=(10, 5))
        plt.plot(df['generation'], df['avg_fitness'], color='green', linewidth=2, label='Mean')
        plt.plot(df['generation'], df['min_fitness'], color='orange', linewidth=1, label='Min')
        plt.title("Population Fitness")
        plt.xlabel("Generation")
        plt.ylabel("Fitness Score")
        plt.legend(loc='lower right')
        plt.grid(True, alpha=0.3)
        plt.savefig(self.output_path.with_suffix('.png'))
        plt.close()


class DiversitySampler(Sampler):
    """Tracks Population Diversity (Unique Genomes) over time."""

    def __init__(self, interval: int = 1, output_path: str = "output/diversity.csv"):
        super().__init__(interval, output_path)
        self._require_output_path()
        self.history = []

    def sample(self, population, generation: int, record=None, **kwargs):
        matrix = population.get_matrix()
        unique_genomes = len(np.unique(["".join(row) for row in matrix]))
        pop_count = population.get_count()

        self.history.append({
            "generation": generation,
            "unique_genomes": unique_genomes,
            "population_size": pop_count,
            "diversity_ratio": unique_genomes / pop_count
        })
        pd.DataFrame(self.history).to_csv(self.output_path, index=False)

    def finalize(self, result):
        if not self.history: return
        df = pd.read_csv(self.output_path)
        fig, ax1 = plt.subplots(figsize=(12, 6))
        # Primary Axis: Absolute Unique Genomes
        color_unique = 'tab:purple'
        ax1.set_xlabel('Generation')
        ax1.set_ylabel('Number of Unique Genomes', color=color_unique, fontweight='bold')
        ax1.plot(df['generation'], df['unique_genomes'], color=color_unique, linewidth=2, label='Unique Genomes')
        ax1.tick_params(axis='y', labelcolor=color_unique)
        ax1.grid(True, alpha=0.3, linestyle='--')
        # Secondary Axis: Diversity Ratio
        ax2 = ax1.twinx()
        color_ratio = 'tab:cyan'
        ax2.set_ylabel('Diversity Ratio (Unique/Total)', color=color_ratio, fontweight='bold')
        ax2.plot(df['generation'], df['diversity_ratio'], color=color_ratio, linestyle='--', linewidth=1.5,
                 label='Diversity Ratio')
        ax2.set_ylim(0, 1.05)
        plt.title("Population Diversity", fontsize=14)
        lines1, labels1 = ax1.get_legend_handles_labels()
        lines2, labels2 = ax2.get_legend_handles_labels()
        ax1.legend(lines1 + lines2, labels1 + labels2, loc='upper right')
        plt.tight_layout()
        plt.savefig(self.output_path.with_suffix('.png'))
        plt.close()


class DistributionSampler(Sampler):
    """
    Writes the cumulative fitness distribution (score -> count over all
    generations) once the simulation is over.
    """

    def __init__(self, interval: int = 1, output_path: str = "output/distribution.csv"):
        super().__init__(interval, output_path)
        self._require_output_path()

    def sample(self, population, generation: int, record=None, **kwargs):
        # The driver already accumulates the distribution
        pass

    def finalize(self, result):
        df = pd.DataFrame(list(result.distribution.items()), columns=["score", "count"])
        df.to_csv(self.output_path, index=False)

        plt.figure(figsize=(10, 5))
        plt.bar(df['score'], df['count'], color='tab:blue')
        if df['count'].max() > 0:
            plt.yscale('log')
        plt.title("Fitness Distribution (All Generations)")
        plt.xlabel("Fitness Score")
        plt.ylabel("Candidates")
        plt.grid(True, axis='y', alpha=0.3)
        plt.savefig(self.output_path.with_suffix('.png'))
        plt.close()
