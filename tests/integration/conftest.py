"""
Shared fixtures for integration tests.
"""

import pytest
from evotopo.run.config import Config
from evotopo.genotype import Genome


@pytest.fixture
def vehicles_config():
    """Default config with 4 inputs, 2 outputs and full initial connectivity."""
    config = Config()
    config.num_inputs  = 4
    config.num_outputs = 2
    config.seed        = 42
    return config


def evolve(gene_pool, genomes, rates, rng, num_rounds):
    """
    Run rounds of uniform-pair crossover followed by mutation (no fitness involved).

    Parameters:
        gene_pool:  the registry of all genes
        genomes:    the starting population
        rates:      MutationRates applied to every offspring
        rng:        random number generator
        num_rounds: number of rounds

    Returns:
        The final population
    """
    for _ in range(num_rounds):
        offspring = []
        for _ in range(len(genomes)):
            parent1 = genomes[rng.integers(len(genomes))]
            parent2 = genomes[rng.integers(len(genomes))]
            child   = Genome.crossover(parent1, parent2, rng, gene_pool)
            child.mutate_with(rates, gene_pool, rng)
            offspring.append(child)
        genomes = offspring
    return genomes


@pytest.fixture
def make_population():
    """Build a population of genomes sharing the starting topology of a gene pool."""
    def _make(gene_pool, size):
        genomes = []
        for _ in range(size):
            genome = Genome()
            genome.initialize_genes(gene_pool)
            genomes.append(genome)
        return genomes
    return _make


@pytest.fixture
def run_evolution():
    """The crossover + mutation loop, see 'evolve'."""
    return evolve
