import argparse
import copy
import logging
import sys

import yaml

from monkeysim.baseline import RandomSearch, DEFAULT_ITERATIONS
from monkeysim.color import fg
from monkeysim.genome.sequence import Alphabet, DEFAULT_SYMBOLS, make_rng
from monkeysim.io.sampler_registry import SamplerRegistry
from monkeysim.simulator import (Simulator, DEFAULT_POPULATION_SIZE, DEFAULT_SURVIVAL_THRESHOLD,
                                 DEFAULT_MUTATION_RATE)

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = {
    "alphabet": DEFAULT_SYMBOLS,
    "seed": None,
    "population": {
        "size": DEFAULT_POPULATION_SIZE,
        "survival_threshold": DEFAULT_SURVIVAL_THRESHOLD,
        "mutation_rate": DEFAULT_MUTATION_RATE
    },
    "sampling": [
        {"type": "console", "interval": 1}
    ]
}


def load_config(path):
    """Reads a YAML configuration file into a dictionary."""
    try:
        with open(path, 'r') as f:
            conf = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ValueError(f"Could not read config file {path}: {e}")
    if not isinstance(conf, dict):
        raise ValueError(f"Config file {path} must contain a mapping")
    return conf


def merge_config(base, override):
    """Returns `base` updated with `override`; nested mappings are merged, not replaced."""
    merged = copy.deepcopy(base)
    for key, value in (override or {}).items():
        if isinstance(merged.get(key), dict) and value is None:
            continue
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value
    return merged


def _config_value(section, key, kind, name=None):
    """Reads `section[key]` as `kind`, naming the parameter when it cannot."""
    name = name or key
    value = section[key]
    if isinstance(value, bool) or (kind is int and isinstance(value, float) and not value.is_integer()):
        raise ValueError(f"{name} must be {kind.__name__}, got {value!r}")
    try:
        return kind(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be {kind.__name__}, got {value!r}")


def build_simulator(conf):
    """Assembles the Simulator described by a configuration dictionary."""
    conf = merge_config(DEFAULT_CONFIG, conf)

    target = conf.get('target')
    if not target:
        print(fg.RED, "Error: A target sequence is required.", fg.RESET)
        raise ValueError("A target sequence is required.")

    alphabet = Alphabet(str(conf['alphabet']))
    pop_conf = conf['population']
    if not isinstance(pop_conf, dict):
        raise ValueError(f"population must be a mapping, got {pop_conf!r}")
    seed = conf.get('seed')
    if seed is not None:
        seed = _config_value(conf, 'seed', int)
    samplers = SamplerRegistry.get_samplers(conf)

    return Simulator(
        target=str(target).upper(),
        alphabet=alphabet,
        population_size=_config_value(pop_conf, 'size', int, 'population_size'),
        survival_threshold=_config_value(pop_conf, 'survival_threshold', float),
        mutation_rate=_config_value(pop_conf, 'mutation_rate', float),
        samplers=samplers,
        rng=make_rng(seed)
    )


def run_simulation_from_config(conf):
    """
    Runs the simulation based on a configuration dictionary.
    This function is reusable for both CLI and Streamlit UI.
    """
    sim = build_simulator(conf)

    print(fg.GREEN, "--- Starting Simulation ---", fg.RESET)
    result = sim.run()
    print(fg.GREEN, "--- Done ---", fg.RESET)
    return result


def _overrides(args):
    """Collects the command line options that were actually given."""
    conf = {}
    if args.target is not None:
        conf['target'] = args.target
    if args.alphabet is not None:
        conf['alphabet'] = args.alphabet
    if args.seed is not None:
        conf['seed'] = args.seed
    population = {}
    if args.population_size is not None:
        population['size'] = args.population_size
    if args.survival_threshold is not None:
        population['survival_threshold'] = args.survival_threshold
    if args.mutation_rate is not None:
        population['mutation_rate'] = args.mutation_rate
    if population:
        conf['population'] = population
    return conf


def _configure_logging(verbose):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s"
    )


def main(argv=None):
    """
    CLI Entry point
    """
    parser = argparse.ArgumentParser(description="Infinite monkey simulation driven by a genetic algorithm")
    parser.add_argument("target", nargs="?", help="The sequence we want a monkey to type")
    parser.add_argument("-c", "--config", help="Path to a YAML configuration file")
    parser.add_argument("--alphabet", help=f"Symbols genomes are made of (default: {DEFAULT_SYMBOLS!r})")
    parser.add_argument("-n", "--population-size", type=int, help="Candidates per generation")
    parser.add_argument("-s", "--survival-threshold", type=float, help="Fraction surviving each cull")
    parser.add_argument("-m", "--mutation-rate", type=float, help="Per-gene mutation probability")
    parser.add_argument("--seed", type=int, help="Seed for the random number generator")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every generation")
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        conf = load_config(args.config) if args.config else {}
        conf = merge_config(conf, _overrides(args))
        run_simulation_from_config(conf)
    except ValueError as e:
        logger.error("Simulation aborted: %s", e)
        print(fg.RED, f"Error: {e}", fg.RESET, file=sys.stderr)
        sys.exit(1)


def random_main(argv=None):
    """
    Entry point for the random-typing baseline.
    """
    parser = argparse.ArgumentParser(description="Infinite monkey simulation by pure random sampling")
    parser.add_argument("target", help="The sequence we want a monkey to type")
    parser.add_argument("-i", "--iterations", type=int, default=DEFAULT_ITERATIONS,
                        help=f"Number of random strings to sample (default: {DEFAULT_ITERATIONS})")
    parser.add_argument("--alphabet", default=DEFAULT_SYMBOLS, help="Symbols the monkeys can type")
    parser.add_argument("--seed", type=int, help="Seed for the random number generator")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    try:
        search = RandomSearch(args.target.upper(), Alphabet(args.alphabet), rng=make_rng(args.seed))
        result = search.run(args.iterations)
    except ValueError as e:
        logger.error("Random search aborted: %s", e)
        print(fg.RED, f"Error: {e}", fg.RESET, file=sys.stderr)
        sys.exit(1)

    print(f"Elapsed: {result.elapsed:.3f} s")
    print(f"Typing speed: {result.words_per_minute} wpm")
    print(f"Fittest: [{result.score}/{len(search.target)}] {result.genome}")
    print("Distribution:")
    for score, count in result.distribution.items():
        print(f"{score}\t{count}")


if __name__ == "__main__":
    main()
