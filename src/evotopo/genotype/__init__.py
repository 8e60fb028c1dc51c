"""
Genotype Package

This package implements the genotype representation: the genes describing
a layered feed-forward network and the shared registry they are drawn from.

The genotype consists of two types of genes:
- Neuron genes:  Encode individual neurons, their role and the layer they sit on
- Synapse genes: Encode directed edges from a lower layer to a strictly higher one

Modules:
    neuron_gene:  NeuronType enumeration and NeuronGene class
    synapse_gene: SynapseGene class
    gene_pool:    GenePool class
    genome:       Genome class

Exported Classes:
    NeuronType:  Enumeration for neuron roles (INPUT, HIDDEN, OUTPUT)
    NeuronGene:  Gene encoding a single network neuron
    SynapseGene: Gene encoding a synapse between two neurons
    GenePool:    Run-wide registry of genes and layer structure
    Genome:      One individual's subset of the genes in the pool
"""

from evotopo.genotype.gene_pool    import GenePool
from evotopo.genotype.genome       import Genome
from evotopo.genotype.neuron_gene  import NeuronType, NeuronGene
from evotopo.genotype.synapse_gene import SynapseGene

__all__ = ['GenePool',
           'Genome',
           'NeuronGene',
           'NeuronType',
           'SynapseGene']
