import pandas as pd
import pytest
import yaml

from monkeysim.cli import (DEFAULT_CONFIG, build_simulator, load_config, main, merge_config,
                           random_main, run_simulation_from_config)
from monkeysim.io.sampler import ConsoleSampler, FittestSampler


class TestConfiguration:
    """Test loading and merging configuration."""

    def test_merge_keeps_nested_defaults(self):
        merged = merge_config(DEFAULT_CONFIG, {"population": {"size": 50}})

        assert merged["population"] == {"size": 50, "survival_threshold": 0.2, "mutation_rate": 0.01}
        assert DEFAULT_CONFIG["population"]["size"] == 1000

    def test_merge_ignores_empty_sections(self):
        merged = merge_config(DEFAULT_CONFIG, {"population": None})

        assert merged["population"]["size"] == 1000

    def test_load_config(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.dump({"target": "HI", "population": {"mutation_rate": 0.5}}))

        assert load_config(path) == {"target": "HI", "population": {"mutation_rate": 0.5}}

    def test_load_missing_config(self, tmp_path):
        with pytest.raises(ValueError, match="Could not read config file"):
            load_config(tmp_path / "missing.yaml")

    def test_load_non_mapping(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- just\n- a list\n")

        with pytest.raises(ValueError, match="mapping"):
            load_config(path)

    def test_build_simulator(self):
        sim = build_simulator({"target": "hello world", "seed": 1, "population": {"size": 40}})

        assert sim.fitness.target == "HELLO WORLD"
        assert sim.population_size == 40
        assert sim.survival_threshold == 0.2
        assert isinstance(sim.samplers[0], ConsoleSampler)

    def test_build_requires_target(self):
        with pytest.raises(ValueError, match="target"):
            build_simulator({})

    def test_build_names_bad_parameter(self):
        with pytest.raises(ValueError, match="survival_threshold"):
            build_simulator({"target": "HI", "population": {"size": 3, "survival_threshold": 0.1}})


class TestRunSimulation:
    def test_run_from_config(self, tmp_path):
        conf = {
            "target": "ab",
            "alphabet": " AB",
            "seed": 42,
            "population": {"size": 20, "survival_threshold": 0.5, "mutation_rate": 0.1},
            "sampling": [{"type": "fittest", "file": str(tmp_path / "fittest.csv")}]
        }

        result = run_simulation_from_config(conf)

        assert result.genome == "AB"
        df = pd.read_csv(tmp_path / "fittest.csv", keep_default_na=False)
        assert len(df) == result.generations

    def test_same_seed_same_run(self):
        conf = {"target": "CAT", "seed": 7, "population": {"size": 50}, "sampling": []}

        first = run_simulation_from_config(conf)
        second = run_simulation_from_config(conf)

        assert first.history == second.history


class TestMain:
    def test_main_with_options(self, capsys):
        main(["AB", "--alphabet", " AB", "-n", "10", "-s", "0.5", "-m", "0.1", "--seed", "3"])

        out = capsys.readouterr().out
        assert "[  2/2] AB" in out
        assert "Done" in out

    def test_main_with_config_file(self, tmp_path, capsys):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.dump({
            "target": "BA",
            "alphabet": "AB",
            "population": {"size": 10, "survival_threshold": 0.5},
            "sampling": [{"type": "console", "params": {"show_distribution": False}}]
        }))

        # Command line options override the file
        main(["--config", str(path), "--seed", "1", "--mutation-rate", "0.2"])

        out = capsys.readouterr().out
        assert "[  2/2] BA" in out
        assert "Distribution:" not in out

    def test_main_reports_bad_parameter(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main(["HELLO", "--mutation-rate", "2"])

        assert exc.value.code == 1
        assert "mutation_rate" in capsys.readouterr().err

    @pytest.mark.parametrize("conf, message", [
        ({"population": {"survival_threshold": "half"}}, "survival_threshold"),
        ({"population": {"size": "many"}}, "population_size"),
        ({"population": {"size": 12.5}}, "population_size"),
        ({"population": {"mutation_rate": [0.1]}}, "mutation_rate"),
        ({"population": "big"}, "population"),
        ({"seed": "abc"}, "seed"),
        ({"sampling": [{"type": "console", "params": None}, "fittest"]}, "sampling entry"),
        ({"sampling": [{"type": "console", "params": ["quiet"]}]}, "params"),
        ({"sampling": [{"type": "console", "interval": "often"}]}, "interval"),
        ({"sampling": [{"type": "console", "params": {"colour": True}}]}, "Invalid params"),
        ({"sampling": "console"}, "sampling"),
    ])
    def test_main_rejects_badly_typed_config(self, tmp_path, capsys, conf, message):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.dump(dict(conf, target="HI")))

        with pytest.raises(SystemExit) as exc:
            main(["--config", str(path)])

        assert exc.value.code == 1
        assert message in capsys.readouterr().err

    def test_null_sampler_params_allowed(self, capsys):
        conf = {"target": "AB", "alphabet": "AB", "seed": "4",
                "population": {"size": "10", "survival_threshold": 0.5, "mutation_rate": 0.1},
                "sampling": [{"type": "console", "params": None}]}

        result = run_simulation_from_config(conf)

        assert result.genome == "AB"
        assert "Distribution:" in capsys.readouterr().out

    def test_main_without_target(self, capsys):
        with pytest.raises(SystemExit) as exc:
            main([])

        assert exc.value.code == 1

    def test_random_main(self, capsys):
        random_main(["ab", "--alphabet", "AB", "--iterations", "500", "--seed", "5"])

        out = capsys.readouterr().out
        assert "Fittest: [2/2] AB" in out
        assert "Typing speed:" in out

    def test_random_main_bad_target(self, capsys):
        with pytest.raises(SystemExit) as exc:
            random_main(["hello!", "--iterations", "10"])

        assert exc.value.code == 1
        assert "Invalid symbols" in capsys.readouterr().err
