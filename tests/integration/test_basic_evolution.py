"""
Integration tests for topology growth.

These tests run many rounds of crossover and structural mutation over a
population sharing a single gene pool, and check that the genomes stay
consistent with the pool and with each other throughout.

NOTE: These tests use fixed random seeds for reproducibility.
"""

import pytest
import threading
import numpy as np
from evotopo.run.config import MutationRates
from evotopo.genotype import GenePool
from evotopo.genotype.neuron_gene import NeuronType


# ============================================================================
# Test Growth Under Crossover And Mutation
# ============================================================================

class TestTopologyGrowth:
    """Populations keep their invariants while growing."""

    @pytest.mark.parametrize("preset", ['slow', 'medium', 'fast'])
    def test_invariants_hold_after_many_rounds(self, vehicles_config, make_population, run_evolution,
                                               check_invariants, preset):
        rng     = np.random.default_rng(vehicles_config.seed)
        pool    = GenePool.from_config(vehicles_config, rng)
        genomes = make_population(pool, 15)

        genomes = run_evolution(pool, genomes, MutationRates.from_preset(preset), rng, 30)

        for genome in genomes:
            check_invariants(genome, pool)

    def test_pool_synapses_feed_forward(self, vehicles_config, make_population, run_evolution):
        rng     = np.random.default_rng(7)
        pool    = GenePool.from_config(vehicles_config, rng)
        genomes = make_population(pool, 10)

        run_evolution(pool, genomes, MutationRates.FAST, rng, 25)

        for sg in pool.synapse_genes.values():
            assert sg.node_in.layer < sg.node_out.layer
            assert sg.length >= 1

    def test_pool_layers_consistent(self, vehicles_config, make_population, run_evolution):
        rng     = np.random.default_rng(11)
        pool    = GenePool.from_config(vehicles_config, rng)
        genomes = make_population(pool, 10)

        run_evolution(pool, genomes, MutationRates.FAST, rng, 25)

        assert pool.num_layers > 2
        assert max(ng.layer for ng in pool.neuron_genes.values()) < pool.num_layers

        # Inputs never move: layer insertions always happen above layer 0
        assert all(ng.layer == 0 for ng in pool.input_neurons)
        # Outputs are moved up together, as every insertion lies below all of them
        assert len({ng.layer for ng in pool.output_neurons}) == 1

    def test_pool_ids_unique(self, vehicles_config, make_population, run_evolution):
        rng     = np.random.default_rng(5)
        pool    = GenePool.from_config(vehicles_config, rng)
        genomes = make_population(pool, 10)

        run_evolution(pool, genomes, MutationRates.MEDIUM, rng, 20)

        neuron_ids  = set(pool.neuron_genes)
        synapse_ids = set(pool.synapse_genes)
        assert neuron_ids.isdisjoint(synapse_ids)
        assert len(neuron_ids) + len(synapse_ids) == len(pool)

    def test_one_synapse_per_neuron_pair(self, vehicles_config, make_population, run_evolution):
        rng     = np.random.default_rng(3)
        pool    = GenePool.from_config(vehicles_config, rng)
        genomes = make_population(pool, 10)

        run_evolution(pool, genomes, MutationRates.FAST, rng, 25)

        pairs = [frozenset((sg.node_in.id, sg.node_out.id)) for sg in pool.synapse_genes.values()]
        assert len(pairs) == len(set(pairs))

    def test_population_shares_gene_objects(self, vehicles_config, make_population, run_evolution):
        rng     = np.random.default_rng(9)
        pool    = GenePool.from_config(vehicles_config, rng)
        genomes = make_population(pool, 10)

        genomes = run_evolution(pool, genomes, MutationRates.FAST, rng, 15)

        seen = {}
        for genome in genomes:
            for gene_id, sg in genome.synapse_genes.items():
                assert seen.setdefault(gene_id, sg) is sg

    def test_interface_preserved(self, vehicles_config, make_population, run_evolution):
        rng     = np.random.default_rng(13)
        pool    = GenePool.from_config(vehicles_config, rng)
        genomes = make_population(pool, 10)

        genomes = run_evolution(pool, genomes, MutationRates.FAST, rng, 20)

        input_ids  = sorted(ng.id for ng in pool.input_neurons)
        output_ids = sorted(ng.id for ng in pool.output_neurons)
        for genome in genomes:
            assert sorted(genome.input_neuron_genes) == input_ids
            assert sorted(genome.output_neuron_genes) == output_ids

    def test_disabled_rates_freeze_topology(self, vehicles_config, make_population, run_evolution):
        rng     = np.random.default_rng(17)
        pool    = GenePool.from_config(vehicles_config, rng)
        genomes = make_population(pool, 10)
        size_before = len(pool)

        genomes = run_evolution(pool, genomes, MutationRates.DISABLED, rng, 10)

        assert len(pool) == size_before
        assert pool.num_layers == 2
        # All parents are identical, so is every offspring
        for genome in genomes:
            assert sorted(genome.synapse_genes) == sorted(pool.synapse_genes)

    def test_growth_reproducible(self, vehicles_config, make_population, run_evolution):
        def grow():
            rng     = np.random.default_rng(99)
            pool    = GenePool.from_config(vehicles_config, rng)
            genomes = run_evolution(pool, make_population(pool, 8), MutationRates.FAST, rng, 10)
            return pool, genomes

        pool1, genomes1 = grow()
        pool2, genomes2 = grow()

        assert str(pool1) == str(pool2)
        assert [str(g) for g in genomes1] == [str(g) for g in genomes2]


# ============================================================================
# Test Growth From A Sparse Start
# ============================================================================

class TestSparseStart:
    """A pool bootstrapped without synapses can still grow."""

    def test_growth_from_no_synapses(self, vehicles_config, make_population, run_evolution, check_invariants):
        vehicles_config.initial_cxn_policy = 'none'
        rng = np.random.default_rng(21)
        with pytest.warns(UserWarning):
            pool = GenePool.from_config(vehicles_config, rng)
        genomes = make_population(pool, 10)

        genomes = run_evolution(pool, genomes, MutationRates.FAST, rng, 20)

        assert pool.synapse_genes
        assert pool.hidden_neurons
        for genome in genomes:
            check_invariants(genome, pool)


# ============================================================================
# Test Concurrent Mutation
# ============================================================================

class TestConcurrentMutation:
    """Genomes mutated from several threads against one gene pool."""

    def test_concurrent_mutation_keeps_invariants(self, vehicles_config, make_population, check_invariants):
        pool    = GenePool.from_config(vehicles_config, np.random.default_rng(0))
        genomes = make_population(pool, 12)

        def worker(genome, seed):
            rng = np.random.default_rng(seed)
            for _ in range(25):
                genome.mutate_with(MutationRates.FAST, pool, rng)

        threads = [threading.Thread(target=worker, args=(genome, seed)) for seed, genome in enumerate(genomes)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        for genome in genomes:
            check_invariants(genome, pool)

        pairs = [frozenset((sg.node_in.id, sg.node_out.id)) for sg in pool.synapse_genes.values()]
        assert len(pairs) == len(set(pairs))
        assert all(ng.type == NeuronType.HIDDEN for ng in pool.hidden_neurons)
