"""Pytest configuration and shared fixtures."""

import pytest
import sys
import numpy as np
from pathlib import Path

# Add the source directory to the Python path
src_dir = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_dir))


@pytest.fixture
def rng():
    """Seeded random number generator, so tests are reproducible."""
    return np.random.default_rng(42)


@pytest.fixture
def gene_pool():
    """
    Gene pool with 2 inputs (layer 0) and 1 output (layer 1), and
    a single synapse joining the first input to the output.
    """
    from evotopo.genotype.gene_pool import GenePool
    from evotopo.genotype.neuron_gene import NeuronType

    pool = GenePool()
    in0 = pool.add_neuron_gene(0, NeuronType.INPUT)
    pool.add_neuron_gene(0, NeuronType.INPUT)
    out = pool.add_neuron_gene(1, NeuronType.OUTPUT)
    pool.add_synapse_gene(in0, out)
    return pool


@pytest.fixture
def sample_genome(gene_pool):
    """Genome holding every gene of the 'gene_pool' fixture."""
    from evotopo.genotype.genome import Genome

    genome = Genome()
    genome.initialize_genes(gene_pool)
    return genome


def assert_genome_invariants(genome, gene_pool):
    """
    Check the structural invariants every genome must satisfy.

    Parameters:
        genome:    the genome to check
        gene_pool: the gene pool the genome draws its genes from
    """
    neuron_ids = [ng.id for ng in genome.get_all_neuron_genes()]
    synapse_ids = list(genome.synapse_genes)

    # No gene appears twice, across all collections
    all_ids = neuron_ids + synapse_ids
    assert len(all_ids) == len(set(all_ids))

    # Every gene is the pool's own object
    for ng in genome.get_all_neuron_genes():
        assert gene_pool.neuron_genes[ng.id] is ng
    for sg in genome.synapse_genes.values():
        assert gene_pool.synapse_genes[sg.id] is sg

    # Synapses are strictly feed-forward and both endpoints are present
    for sg in genome.synapse_genes.values():
        assert sg.node_in.layer < sg.node_out.layer
        assert sg.length >= 1
        assert genome.contains_neuron_gene(sg.node_in)
        assert genome.contains_neuron_gene(sg.node_out)


@pytest.fixture
def check_invariants():
    """The invariant checker, for tests that need to run it on many genomes."""
    return assert_genome_invariants
