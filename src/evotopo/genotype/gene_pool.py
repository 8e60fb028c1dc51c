"""
Gene Pool Module

This module implements the GenePool class, the registry of every
gene created during an evolutionary run.

Classes:
    GenePool: Registry of all neuron and synapse genes, and of the layer structure
"""

import logging
import threading
import warnings
import numpy as np
from itertools import count
from typing    import TYPE_CHECKING

from evotopo.genotype.neuron_gene  import NeuronType, NeuronGene
from evotopo.genotype.synapse_gene import SynapseGene
if TYPE_CHECKING:
    from evotopo.run.config import Config

logger = logging.getLogger(__name__)

class GenePool:
    """
    Tracks every gene ever created, across all genomes of a run.

    The gene pool is the only component allowed to create genes (and so to
    assign IDs) and the only one allowed to insert layers. Genomes hold
    references to the genes stored here, so the same structural change
    made independently by two genomes resolves to the same gene, and
    the renumbering done by 'add_layer()' is seen by every genome.

    Genes are never removed from the pool, and IDs are never reused.
    Neuron and synapse IDs are drawn from a single counter.

    All methods that change the pool are serialized through 'lock'. Genome
    operations that must look a gene up and then add it (or insert a layer
    and then add genes) hold the same lock for the whole sequence.

    Public Attributes:
        neuron_genes:  Dictionary mapping gene IDs to NeuronGene objects
        synapse_genes: Dictionary mapping gene IDs to SynapseGene objects
        num_layers:    Current number of layers
        lock:          Re-entrant lock guarding all changes to the pool

    Public Properties:
        input_neurons:  List of all input neuron genes
        output_neurons: List of all output neuron genes
        hidden_neurons: List of all hidden neuron genes

    Public Methods:
        add_neuron_gene(layer, neuron_type): Create a new neuron gene
        add_synapse_gene(ng1, ng2):          Create (or retrieve) the synapse joining two neurons
        get_synapse_gene(ng1, ng2):          Look up the synapse joining two neurons
        get_synapse_gene_by_id(gene_id):     Look up a synapse by ID
        get_neuron_gene(gene_id):            Look up a neuron by ID
        add_layer(index):                    Insert a new layer
        get_layer(layer):                    List the neurons on a layer

    Class Methods:
        from_config(config, rng): Create a gene pool holding the initial topology
    """

    def __init__(self):
        """
        Initialize an empty gene pool (no genes, no layers).
        """
        self.neuron_genes : dict[int, NeuronGene]  = {}  # gene ID => neuron gene
        self.synapse_genes: dict[int, SynapseGene] = {}  # gene ID => synapse gene
        self.num_layers   : int                    = 0

        # (lower neuron ID, higher neuron ID) => synapse gene ID
        self._synapse_ids: dict[tuple[int, int], int] = {}

        self._next_gene_id = count(0)
        self.lock = threading.RLock()

    @classmethod
    def from_config(cls, config: 'Config', rng: np.random.Generator | None = None) -> 'GenePool':
        """
        Create a gene pool pre-populated with the initial network topology.

        Input neurons are placed on layer 0 and output neurons on layer 1.
        Which input/output pairs get a synapse depends on the initial
        connection policy found in the configuration.

        Parameters:
            config: Stores configuration parameters
            rng:    Random number generator (used by the "one-input" and "partial" policies)

        Returns:
            The new gene pool

        Raises:
            ValueError: If the initial connection policy is not recognized
        """
        if rng is None:
            rng = np.random.default_rng()

        pool = cls()
        inputs  = [pool.add_neuron_gene(0, NeuronType.INPUT)  for _ in range(config.num_inputs)]
        outputs = [pool.add_neuron_gene(1, NeuronType.OUTPUT) for _ in range(config.num_outputs)]

        policy = config.initial_cxn_policy
        if policy == "none":
            pass

        elif policy == "one-input":
            if inputs:
                ng_in = inputs[rng.integers(len(inputs))]
                for ng_out in outputs:
                    pool.add_synapse_gene(ng_in, ng_out)

        elif policy == "partial":
            fraction = config.initial_cxn_fraction
            if fraction is None or not 0.0 <= fraction <= 1.0:
                raise ValueError(f"initial_cxn_fraction must be in [0, 1] for the 'partial' policy, got {fraction}")
            for ng_in in inputs:
                for ng_out in outputs:
                    if rng.random() < fraction:
                        pool.add_synapse_gene(ng_in, ng_out)

        elif policy == "full":
            for ng_in in inputs:
                for ng_out in outputs:
                    pool.add_synapse_gene(ng_in, ng_out)

        else:
            raise ValueError(f"bad initial connection policy '{policy}'")

        if not pool.synapse_genes:
            warnings.warn("Gene pool bootstrapped without synapses; "
                          "neuron mutations cannot fire until a synapse mutation succeeds")
        return pool

    @property
    def input_neurons(self) -> list[NeuronGene]:
        return [ng for ng in self.neuron_genes.values() if ng.type == NeuronType.INPUT]

    @property
    def output_neurons(self) -> list[NeuronGene]:
        return [ng for ng in self.neuron_genes.values() if ng.type == NeuronType.OUTPUT]

    @property
    def hidden_neurons(self) -> list[NeuronGene]:
        return [ng for ng in self.neuron_genes.values() if ng.type == NeuronType.HIDDEN]

    def add_neuron_gene(self, layer: int, neuron_type: NeuronType) -> NeuronGene:
        """
        Create a new neuron gene and register it.

        Parameters:
            layer:       Layer the new neuron sits on
            neuron_type: Role of the new neuron

        Returns:
            The new neuron gene

        Raises:
            ValueError: If 'layer' is negative
        """
        if layer < 0:
            raise ValueError(f"Layer must be non-negative, got {layer}")

        with self.lock:
            ng = NeuronGene(next(self._next_gene_id), layer, neuron_type)
            self.neuron_genes[ng.id] = ng
            self.num_layers = max(self.num_layers, layer + 1)
        return ng

    def add_synapse_gene(self, ng1: NeuronGene, ng2: NeuronGene) -> SynapseGene:
        """
        Create the synapse gene joining two neurons and register it.

        The endpoints are ordered so that the synapse points from the lower
        layer to the higher one, whatever the order of the arguments. If a
        synapse joining the two neurons already exists, no gene is created
        and the existing one is returned.

        Parameters:
            ng1: neuron gene at one end of the synapse
            ng2: neuron gene at the other end of the synapse

        Returns:
            The synapse gene joining 'ng1' and 'ng2'

        Raises:
            KeyError:   If either neuron is not registered in this pool
            ValueError: If both neurons sit on the same layer
        """
        with self.lock:
            for ng in (ng1, ng2):
                if ng.id not in self.neuron_genes:
                    raise KeyError(f"Neuron gene {ng.id} is not registered in this gene pool")

            existing = self.get_synapse_gene(ng1, ng2)
            if existing is not None:
                return existing

            if ng1.layer == ng2.layer:
                raise ValueError(f"Cannot join neurons {ng1.id} and {ng2.id}: both sit on layer {ng1.layer}")
            if ng1.layer > ng2.layer:
                ng1, ng2 = ng2, ng1

            # Use the pool's own objects so the endpoints are the shared references
            sg = SynapseGene(next(self._next_gene_id), self.neuron_genes[ng1.id], self.neuron_genes[ng2.id])
            self.synapse_genes[sg.id] = sg
            self._synapse_ids[self._endpoints_key(ng1, ng2)] = sg.id
        return sg

    def get_synapse_gene(self, ng1: NeuronGene, ng2: NeuronGene) -> SynapseGene | None:
        """
        Get the synapse gene joining two neurons, in either direction.

        Parameters:
            ng1: neuron gene at one end
            ng2: neuron gene at the other end

        Returns:
            The synapse gene, or None if the two neurons have never been joined
        """
        gene_id = self._synapse_ids.get(self._endpoints_key(ng1, ng2))
        return None if gene_id is None else self.synapse_genes[gene_id]

    def get_synapse_gene_by_id(self, gene_id: int) -> SynapseGene | None:
        return self.synapse_genes.get(gene_id)

    def get_neuron_gene(self, gene_id: int) -> NeuronGene | None:
        return self.neuron_genes.get(gene_id)

    def add_layer(self, index: int) -> None:
        """
        Insert a new, empty layer at position 'index'.

        Every neuron on layer 'index' or above moves up by one layer. Synapse
        lengths follow automatically since they are derived from the layers
        of their endpoints. This changes genes shared by every genome.

        Parameters:
            index: position of the new layer

        Raises:
            ValueError: If 'index' is outside [0, num_layers]
        """
        with self.lock:
            if not 0 <= index <= self.num_layers:
                raise ValueError(f"Layer index must be in [0, {self.num_layers}], got {index}")

            for ng in self.neuron_genes.values():
                if ng.layer >= index:
                    ng.layer += 1
            self.num_layers += 1

        logger.debug("Inserted layer %d (now %d layers)", index, self.num_layers)

    def get_layer(self, layer: int) -> list[NeuronGene]:
        """
        Get the neuron genes currently sitting on a layer, in creation order.
        """
        return [ng for ng in self.neuron_genes.values() if ng.layer == layer]

    @staticmethod
    def _endpoints_key(ng1: NeuronGene, ng2: NeuronGene) -> tuple[int, int]:
        # Unordered: the pair is identified by its endpoints, not their direction
        return (ng1.id, ng2.id) if ng1.id < ng2.id else (ng2.id, ng1.id)

    def __len__(self):
        return len(self.neuron_genes) + len(self.synapse_genes)

    def __str__(self):
        layers = []
        for layer in range(self.num_layers):
            layers.append(f"L{layer}: " + ''.join(str(ng) for ng in self.get_layer(layer)))
        synapses = ''.join(str(sg) for sg in self.synapse_genes.values())
        return "\n".join(layers) + f"\nSynapses: {synapses}"
