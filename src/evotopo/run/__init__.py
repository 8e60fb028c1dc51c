"""
Run Package

Configuration of an evolutionary run.

Exported Classes:
    Config:        Stores configuration parameters parsed from an INI file
    MutationRates: Named mutation probabilities and their presets

Exported Functions:
    make_rng: Build the random number generator described by a Config
"""

from evotopo.run.config import Config, MutationRates, make_rng

__all__ = ['Config', 'MutationRates', 'make_rng']
