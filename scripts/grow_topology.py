#!/usr/bin/env python3
"""
Utility script to watch network topologies grow under crossover and mutation.

No fitness is involved: every round, each offspring is bred from two parents
picked uniformly at random and then mutated. Useful to get a feel for how fast
a given mutation preset grows the networks.

Usage:
    python scripts/grow_topology.py examples/configs/config_vehicles.ini
    python scripts/grow_topology.py examples/configs/config_vehicles.ini --rounds 50 --preset fast
"""

import argparse
from statistics import mean

from evotopo import Config, GenePool, Genome, MutationRates, make_rng


def main():
    parser = argparse.ArgumentParser(description='Grow genome topologies from a configuration file')
    parser.add_argument('config', help='Path to the INI configuration file')
    parser.add_argument('--population-size', type=int, default=20,
                        help='Number of genomes')
    parser.add_argument('--rounds', type=int, default=20,
                        help='Number of crossover + mutation rounds')
    parser.add_argument('--preset', choices=['disabled', 'slow', 'medium', 'fast'], default=None,
                        help='Override the mutation rates of the configuration file')

    args = parser.parse_args()

    config = Config(args.config)
    rates  = MutationRates.from_preset(args.preset) if args.preset else config.mutation_rates
    rng    = make_rng(config)
    pool   = GenePool.from_config(config, rng)

    print(f"Inputs: {config.num_inputs}, outputs: {config.num_outputs}, "
          f"initial connections: {config.initial_cxn_policy}")
    print(f"Mutation rates: {rates}")

    genomes = []
    for _ in range(args.population_size):
        genome = Genome()
        genome.initialize_genes(pool)
        genomes.append(genome)

    for round_number in range(1, args.rounds + 1):
        offspring = []
        for _ in range(args.population_size):
            parent1 = genomes[rng.integers(len(genomes))]
            parent2 = genomes[rng.integers(len(genomes))]
            child   = Genome.crossover(parent1, parent2, rng, pool)
            child.mutate_with(rates, pool, rng)
            offspring.append(child)
        genomes = offspring

        print(f"Round {round_number:03d} "
              f"Pool: {len(pool.neuron_genes)} neurons, {len(pool.synapse_genes)} synapses, {pool.num_layers} layers | "
              f"Genomes: avg {mean(g.num_genes for g in genomes):.1f} genes, "
              f"max span {max(g.get_max_synapse_length() for g in genomes)}")

    largest = max(genomes, key=lambda g: g.num_genes)
    print(f"\nLargest genome:\n{largest}")


if __name__ == '__main__':
    main()
