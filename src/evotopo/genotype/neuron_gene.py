"""
Neuron Gene Module.

This module implements the NeuronGene class and NeuronType enumeration
for the layered (strictly feed-forward) genetic encoding.

Classes:
    NeuronType: Enumeration for neuron roles (INPUT, HIDDEN, OUTPUT)
    NeuronGene: Gene encoding a single network neuron and the layer it occupies
"""

from enum import Enum

class NeuronType(Enum):
    """
    Neurons come in three roles: input, hidden, output.
    """
    INPUT  = "I"
    HIDDEN = "H"
    OUTPUT = "O"

class NeuronGene:
    """
    A gene describing a neuron in a layered feed-forward network.

    Neuron genes are created exactly once, by a GenePool, and are shared by
    reference between all genomes which include them. Two neuron genes are
    the same gene if and only if they have the same ID.

    The role of a neuron never changes. Its layer does: when the gene pool
    inserts a new layer at or below the neuron, the layer is incremented and
    every genome referencing the neuron sees the new value.

    Public Attributes:
        id:    Globally unique identifier, assigned by the gene pool
        layer: Index of the layer occupied by the neuron (non-negative)
        type:  Role of the neuron (INPUT, HIDDEN or OUTPUT)
    """

    def __init__(self, gene_id: int, layer: int, neuron_type: NeuronType):
        """
        Initialize a neuron gene.
        Should only be called by the GenePool, which owns ID assignment.

        Parameters:
            gene_id:     Unique identifier for this neuron
            layer:       Layer the neuron sits on
            neuron_type: Role of the neuron (INPUT, HIDDEN, or OUTPUT)
        """
        self.id   : int        = gene_id
        self.layer: int        = layer
        self.type : NeuronType = neuron_type

    def __eq__(self, other):
        if not isinstance(other, NeuronGene):
            return NotImplemented
        return self.id == other.id

    def __hash__(self):
        return hash(("neuron", self.id))

    def __repr__(self):
        return f"NeuronGene(gene_id={self.id:03d}, layer={self.layer}, neuron_type=NeuronType.{self.type.name})"

    def __str__(self):
        return f"[{self.type.value}{self.id}@L{self.layer}]"
