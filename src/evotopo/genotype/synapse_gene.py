"""
Synapse Gene Module

This module implements the SynapseGene class for the layered
(strictly feed-forward) genetic encoding.

Classes:
    SynapseGene: Gene encoding a directed edge between two neurons
"""

from evotopo.genotype.neuron_gene import NeuronGene

class SynapseGene:
    """
    A gene describing a directed synapse between two neurons.

    The synapse always points from a lower layer to a strictly higher one;
    the gene pool canonicalizes the endpoints when minting the gene. Like
    neuron genes, synapse genes are owned by the gene pool, shared by
    reference between genomes and identified by their ID alone. The ID
    acts as the historical marking which aligns genes during crossover.

    Public Attributes:
        id:       Globally unique identifier, assigned by the gene pool
        node_in:  Neuron gene at the source (lower layer) end
        node_out: Neuron gene at the destination (higher layer) end

    Public Properties:
        length: Number of layers spanned by the synapse
    """

    def __init__(self, gene_id: int, node_in: NeuronGene, node_out: NeuronGene):
        """
        Initialize a synapse gene.
        Should only be called by the GenePool, which owns ID assignment.

        Parameters:
            gene_id:  Unique identifier for this synapse
            node_in:  Neuron gene at the source end
            node_out: Neuron gene at the destination end
        """
        self.id      : int        = gene_id
        self.node_in : NeuronGene = node_in
        self.node_out: NeuronGene = node_out

    @property
    def length(self) -> int:
        """
        Layer span of the synapse.

        Derived from the current layers of the endpoints, so it stays correct
        after the gene pool inserts a layer between them.
        """
        return self.node_out.layer - self.node_in.layer

    def __eq__(self, other):
        if not isinstance(other, SynapseGene):
            return NotImplemented
        return self.id == other.id

    def __hash__(self):
        return hash(("synapse", self.id))

    def __repr__(self):
        return (f"SynapseGene(gene_id={self.id:03d}, node_in={self.node_in.id:03d}, "
                f"node_out={self.node_out.id:03d}, length={self.length})")

    def __str__(self):
        return f"[{self.id:03d},{self.node_in.id:02d}=>{self.node_out.id:02d},len={self.length}]"
