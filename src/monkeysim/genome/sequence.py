# Sequence representation (NumPy arrays of single characters)


import numpy as np

DEFAULT_SYMBOLS = " ABCDEFGHIJKLMNOPQRSTUVWXYZ"


class Alphabet:
    """
    The ordered set of symbols a genome can be made of.
    Used both for random genome generation and for mutation substitution.
    """

    def __init__(self, symbols: str = DEFAULT_SYMBOLS):
        if not symbols:
            raise ValueError("Alphabet must contain at least one symbol.")
        if len(set(symbols)) != len(symbols):
            raise ValueError(f"Alphabet contains duplicate symbols: {symbols!r}")

        self.symbols = np.array(list(symbols), dtype="<U1")
        self.symbols.setflags(write=False)
        self._text = symbols

    def __len__(self):
        return len(self._text)

    def __contains__(self, symbol):
        return symbol in self._text

    def __eq__(self, other):
        return isinstance(other, Alphabet) and self._text == other._text

    def __hash__(self):
        return hash(self._text)

    def __str__(self):
        return self._text

    def __repr__(self):
        return f"Alphabet({self._text!r})"

    def random_symbols(self, rng: np.random.Generator, size) -> np.ndarray:
        """Draws `size` symbols independently and uniformly from the alphabet."""
        return self.symbols[rng.integers(0, len(self), size=size)]

    def encode(self, text: str) -> np.ndarray:
        """Converts text into a read-only symbol array, rejecting unknown symbols."""
        invalid = sorted({symbol for symbol in text if symbol not in self})
        if invalid:
            raise ValueError(f"Invalid symbols {invalid} (allowed: {self._text!r})")

        sequence = np.array(list(text), dtype="<U1")
        sequence.setflags(write=False)
        return sequence

    @staticmethod
    def to_string(sequence_array: np.ndarray) -> str:
        """Converts a symbol array back into text."""
        return "".join(sequence_array)


class SequenceHandler:
    """
    Utility to handle bulk operations on sequences.
    Using a 2D NumPy array [Rows, Genome_Length].
    """

    @staticmethod
    def create_random_matrix(rows: int, length: int, alphabet: Alphabet, rng: np.random.Generator):
        """Creates a 2D matrix of uniformly random symbols."""
        return alphabet.random_symbols(rng, (rows, length))

    @staticmethod
    def count_matches(matrix: np.ndarray, target: np.ndarray) -> np.ndarray:
        """Counts, for every row, the positions equal to the target (broadcasting)."""
        return np.count_nonzero(matrix == target, axis=-1)


def make_rng(seed=None) -> np.random.Generator:
    """The random source shared by a simulation run."""
    return np.random.default_rng(seed)
