# Creates a Sampler from string

from monkeysim.io.sampler import (ConsoleSampler, FittestSampler, FitnessSampler,
                                  DiversitySampler, DistributionSampler)


class SamplerRegistry:
    """Registry for all available samplers."""
    _samplers = {
        'console': ConsoleSampler,
        'fittest': FittestSampler,
        'fitness': FitnessSampler,
        'diversity': DiversitySampler,
        'distribution': DistributionSampler
    }

    @classmethod
    def available(cls):
        return list(cls._samplers.keys())

    @classmethod
    def get_samplers(cls, conf):
        """Initialize samplers based on configuration."""
        samplers = []
        sampling = conf.get('sampling') or []
        if not isinstance(sampling, list):
            raise ValueError(f"sampling must be a list of samplers, got {sampling!r}")

        for s_conf in sampling:
            if not isinstance(s_conf, dict):
                raise ValueError(f"Each sampling entry must be a mapping, got {s_conf!r}")
            s_type = str(s_conf.get('type', '')).lower()
            sampler_class = cls._samplers.get(s_type)

            if not sampler_class:
                raise ValueError(f"Unknown sampler type: {s_conf.get('type')}. Available: {cls.available()}")

            params = s_conf.get('params') or {}
            if not isinstance(params, dict):
                raise ValueError(f"Sampler '{s_type}' params must be a mapping, got {params!r}")
            params = params.copy()
            if 'file' in s_conf:
                params['output_path'] = s_conf['file']

            interval = s_conf.get('interval', 1)
            if isinstance(interval, bool) or not isinstance(interval, int):
                raise ValueError(f"Sampler '{s_type}' interval must be an integer, got {interval!r}")

            try:
                samplers.append(sampler_class(interval=interval, **params))
            except TypeError as e:
                raise ValueError(f"Invalid params for sampler '{s_type}': {e}")
        return samplers
