"""
evotopo - evolving layered feed-forward network topologies.

This package provides the genetic encoding used to grow neural network
topologies over an evolutionary run: neurons and synapses are genes with a
run-wide identity, kept in a shared gene pool, so that independently
evolved genomes can be recombined gene by gene.

Main components:
- genotype: Genetic encoding (gene pool, genomes, neuron and synapse genes)
- run:      Configuration and mutation rate presets

Example:
    >>> from evotopo import Config, GenePool, Genome, make_rng
    >>> config = Config("config.ini")
    >>> rng    = make_rng(config)
    >>> pool   = GenePool.from_config(config, rng)
    >>> genome = Genome()
    >>> genome.initialize_genes(pool)
    >>> genome.mutate_with(config.mutation_rates, pool, rng)
"""

__version__ = "0.1.0"

# Import main classes for convenient access
from evotopo.run.config import Config, MutationRates, make_rng
from evotopo.genotype.gene_pool import GenePool
from evotopo.genotype.genome import Genome
from evotopo.genotype.neuron_gene import NeuronGene, NeuronType
from evotopo.genotype.synapse_gene import SynapseGene

__all__ = [
    "Config",
    "MutationRates",
    "make_rng",
    "GenePool",
    "Genome",
    "NeuronGene",
    "NeuronType",
    "SynapseGene",
]
