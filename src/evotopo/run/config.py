"""
Configuration Module

This module implements the configuration layer of the package: the Config
class, which parses an INI file, and the MutationRates record describing how
often each kind of mutation fires.

Classes:
    MutationRates: Named mutation probabilities, with the standard presets
    Config:        Stores configuration parameters parsed from an INI file

Functions:
    make_rng: Build the random number generator described by a Config
"""

import configparser
import os
import numpy as np

class MutationRates:
    """
    Probabilities with which the different mutations are applied to a genome.
    Instances are immutable: build a new record to change a rate.

    Only 'new_neuron' and 'new_synapse' drive structural mutation of the
    genotype. The remaining three rates are consumed by whatever builds the
    phenotype and randomizes its parameters; they are kept here so a single
    record describes a complete mutation regime.

    Public Attributes:
        new_neuron:       Probability of splitting a synapse with a new hidden neuron
        new_synapse:      Probability of connecting two existing neurons
        random_weight:    Probability of randomizing a synapse weight
        random_bias:      Probability of randomizing a neuron bias
        random_threshold: Probability of randomizing a neuron threshold

    Class Attributes (presets):
        DISABLED, SLOW, MEDIUM, FAST

    Class Methods:
        from_preset(name): Look up a preset by name
    """

    _FIELDS = ('new_neuron', 'new_synapse', 'random_weight', 'random_bias', 'random_threshold')

    def __init__(self,
                 new_neuron      : float = 0.0,
                 new_synapse     : float = 0.0,
                 random_weight   : float = 0.0,
                 random_bias     : float = 0.0,
                 random_threshold: float = 0.0):
        """
        Parameters:
            new_neuron:       Probability of the 'add neuron' mutation
            new_synapse:      Probability of the 'add synapse' mutation
            random_weight:    Probability of weight randomization
            random_bias:      Probability of bias randomization
            random_threshold: Probability of threshold randomization

        Raises:
            ValueError: If any of the rates lies outside [0, 1]
        """
        values = (new_neuron, new_synapse, random_weight, random_bias, random_threshold)
        for name, value in zip(self._FIELDS, values):
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"Mutation rate '{name}' must be in [0, 1], got {value}")

        # Presets are shared by every Config, so instances are read-only
        for name, value in zip(self._FIELDS, values):
            object.__setattr__(self, name, value)

    def __setattr__(self, name, value):
        raise AttributeError(f"MutationRates is immutable, cannot set '{name}'")

    def __delattr__(self, name):
        raise AttributeError(f"MutationRates is immutable, cannot delete '{name}'")

    @classmethod
    def from_preset(cls, name: str) -> 'MutationRates':
        """
        Get one of the named presets ("disabled", "slow", "medium", "fast").

        Parameters:
            name: Preset name (case insensitive)

        Returns:
            The preset

        Raises:
            ValueError: If there is no preset with this name
        """
        presets = {'disabled': cls.DISABLED,
                   'slow'    : cls.SLOW,
                   'medium'  : cls.MEDIUM,
                   'fast'    : cls.FAST}
        try:
            return presets[name.strip().lower()]
        except KeyError:
            raise ValueError(f"Unknown mutation preset '{name}' (expected one of {sorted(presets)})") from None

    def as_tuple(self) -> tuple[float, float, float, float, float]:
        return tuple(getattr(self, name) for name in self._FIELDS)

    def __eq__(self, other):
        if not isinstance(other, MutationRates):
            return NotImplemented
        return self.as_tuple() == other.as_tuple()

    def __hash__(self):
        return hash(self.as_tuple())

    def __repr__(self):
        fields = ", ".join(f"{name}={getattr(self, name)}" for name in self._FIELDS)
        return f"MutationRates({fields})"

MutationRates.DISABLED = MutationRates(0.0, 0.0, 0.0, 0.0, 0.0)
MutationRates.SLOW     = MutationRates(0.1, 0.1, 0.3, 0.1, 0.1)
MutationRates.MEDIUM   = MutationRates(0.3, 0.3, 0.3, 0.3, 0.3)
MutationRates.FAST     = MutationRates(0.5, 0.5, 0.5, 0.5, 0.5)

class Config:

    _CXN_POLICIES = ("none", "one-input", "partial", "full")

    def __init__(self, config_file: str | None = None):
        """
        Initialize Config by parsing an INI file, or create a default Config.

        Parameters:
            config_file: Path to the INI configuration file.
                         If None, creates a Config with default values,
                         meant for testing and manual attribute setting.
        """

        # Default config for testing/manual setup
        if config_file is None:
            self.num_inputs           = 2
            self.num_outputs          = 1
            self.initial_cxn_policy   = "full"
            self.initial_cxn_fraction = None
            self.mutation_preset      = "medium"
            self.mutation_rates       = MutationRates.MEDIUM
            self.seed                 = None
            return

        if not os.path.exists(config_file):
            raise FileNotFoundError(f"Configuration file '{config_file}' not found")

        parser = configparser.ConfigParser()
        parser.read(config_file)

        # Sentinel for missing default values
        _NO_DEFAULT = object()

        # Helper function to safely parse values
        def get_value(section, key, value_type, default=_NO_DEFAULT):
            try:
                raw_value = parser.get(section, key)
                if raw_value.lower() == 'none':
                    return None
                if value_type == int:
                    return parser.getint(section, key)
                elif value_type == float:
                    return parser.getfloat(section, key)
                elif value_type == bool:
                    return parser.getboolean(section, key)
                elif value_type == str:
                    return raw_value
            except (configparser.NoSectionError, configparser.NoOptionError):
                if default is not _NO_DEFAULT:
                    return default
                raise

        # [POPULATION INIT]

        # The number of input neurons, all placed on layer 0.
        self.num_inputs = get_value('POPULATION_INIT', 'num_inputs', int)

        # The number of output neurons, all placed on layer 1.
        self.num_outputs = get_value('POPULATION_INIT', 'num_outputs', int)

        # Specifies which synapses the gene pool is bootstrapped with.
        # Allowed values:
        #   "none"      - no synapses are initially present
        #   "one-input" - one random input neuron is connected to all output neurons
        #   "partial"   - a fraction of all possible synapses are instantiated randomly
        #   "full"      - connect all input neurons to all output neurons
        self.initial_cxn_policy = get_value('POPULATION_INIT', 'initial_cxn_policy', str, default="full")
        if self.initial_cxn_policy not in self._CXN_POLICIES:
            raise ValueError(f"Invalid initial_cxn_policy '{self.initial_cxn_policy}'")

        # The fraction of synapses to instantiate (only applicable
        # if the initial connection policy is "partial").
        # Use "None" if not applicable.
        self.initial_cxn_fraction = get_value('POPULATION_INIT', 'initial_cxn_fraction', float, default=None)

        # [STRUCTURAL MUTATIONS]

        # One of the named presets ("disabled", "slow", "medium", "fast"),
        # or "custom" to read each rate individually from this section.
        # "None" falls back to "medium", same as a missing key.
        self.mutation_preset = get_value('STRUCTURAL_MUTATIONS', 'mutation_preset', str, default="medium")
        if self.mutation_preset is None:
            self.mutation_preset = "medium"

        if self.mutation_preset.strip().lower() == "custom":
            self.mutation_rates = MutationRates(
                new_neuron       = get_value('STRUCTURAL_MUTATIONS', 'neuron_add_probability',          float),
                new_synapse      = get_value('STRUCTURAL_MUTATIONS', 'synapse_add_probability',         float),
                random_weight    = get_value('STRUCTURAL_MUTATIONS', 'weight_randomize_probability',    float, default=0.0),
                random_bias      = get_value('STRUCTURAL_MUTATIONS', 'bias_randomize_probability',      float, default=0.0),
                random_threshold = get_value('STRUCTURAL_MUTATIONS', 'threshold_randomize_probability', float, default=0.0))
        else:
            self.mutation_rates = MutationRates.from_preset(self.mutation_preset)

        # [RANDOM] (optional section)

        # Seed for the random number generator; "None" draws fresh entropy.
        self.seed = get_value('RANDOM', 'seed', int, default=None)

def make_rng(config: Config) -> np.random.Generator:
    """
    Create the random number generator used for all crossover and mutation draws.

    Parameters:
        config: Stores configuration parameters

    Returns:
        A numpy Generator seeded with 'config.seed'
    """
    return np.random.default_rng(config.seed)
