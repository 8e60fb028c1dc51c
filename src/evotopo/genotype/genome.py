"""
Genome Module

This module implements the Genome class: one individual's share of
the genes held by a GenePool.

Classes:
    Genome: Collection of neuron and synapse genes describing a layered network
"""

import numpy as np
from contextlib import nullcontext
from typing     import TYPE_CHECKING

from evotopo.genotype.gene_pool    import GenePool
from evotopo.genotype.neuron_gene  import NeuronType, NeuronGene
from evotopo.genotype.synapse_gene import SynapseGene
if TYPE_CHECKING:
    from evotopo.run.config import MutationRates

class Genome:
    """
    A genome describing a layered feed-forward network as a subset of the genes in a GenePool.

    A genome never owns genes. It holds references to genes created by the
    gene pool, which is the single source of truth for their identity and for
    their layer. Genes are indexed by ID, and membership is decided by ID.

    Invariants maintained by every operation:
        - a gene ID appears at most once across all collections of the genome
        - both endpoints of every synapse gene are part of the genome
        - every synapse goes from a lower layer to a strictly higher one

    Attributes:
        input_neuron_genes:  Dictionary mapping gene IDs to input NeuronGene objects
        output_neuron_genes: Dictionary mapping gene IDs to output NeuronGene objects
        hidden_neuron_genes: Dictionary mapping gene IDs to hidden NeuronGene objects
        synapse_genes:       Dictionary mapping gene IDs to SynapseGene objects

    Public Methods:
        initialize_genes(gene_pool):           Add every gene currently in the pool
        mutate(synapse_rate, neuron_rate, ..): Apply structural mutations stochastically
        mutate_with(rates, gene_pool):         Same as 'mutate', rates taken from a MutationRates
        mutate_add_synapse(ng1, ng2, ..):      Join two neurons with a synapse
        mutate_add_neuron(sg, gene_pool):      Split a synapse with a new hidden neuron
        add_neuron_gene(ng), add_synapse_gene(sg), remove_synapse_gene(sg)
        contains_neuron_gene(ng), contains_synapse_gene(sg)
        get_all_neuron_genes():                All neuron genes, inputs first
        get_synapse_gene_by_id(gene_id):       Look up a synapse of this genome by ID
        get_max_synapse_length():              Longest layer span among the synapses
        layers():                              Neuron genes grouped by layer
        clone():                               New genome sharing the same genes

    Static Methods:
        crossover(genome1, genome2, ..):  Create an offspring from two parents
        show_aligned(genome1, genome2):   Print two genomes with aligned genes for comparison
    """

    def __init__(self):
        """
        Initialize an empty Genome (no neuron or synapse genes).
        """
        self.input_neuron_genes : dict[int, NeuronGene]  = {}  # gene ID => input  neuron gene
        self.output_neuron_genes: dict[int, NeuronGene]  = {}  # gene ID => output neuron gene
        self.hidden_neuron_genes: dict[int, NeuronGene]  = {}  # gene ID => hidden neuron gene
        self.synapse_genes      : dict[int, SynapseGene] = {}  # gene ID => synapse gene

    def initialize_genes(self, gene_pool: GenePool) -> None:
        """
        Add to this genome every gene currently in the gene pool.

        Used to give every individual of the initial population the same
        starting topology, the one the gene pool was bootstrapped with.

        Parameters:
            gene_pool: the registry of all genes
        """
        with gene_pool.lock:
            for ng in gene_pool.neuron_genes.values():
                self.add_neuron_gene(ng)
            for sg in gene_pool.synapse_genes.values():
                self.add_neuron_gene(sg.node_in)
                self.add_neuron_gene(sg.node_out)
                self.add_synapse_gene(sg)

    @staticmethod
    def crossover(genome1  : 'Genome',
                  genome2  : 'Genome',
                  rng      : np.random.Generator | None = None,
                  gene_pool: GenePool | None = None) -> 'Genome':
        """
        Create a new genome by recombining the genes of two parents.

        The synapse genes of both parents are visited in ascending order of
        the layer of their source neuron (ties broken by gene ID):
          + synapses found in both parents are always inherited, with both endpoints
          + synapses found in only one parent are inherited with probability 0.5,
            and only if their source neuron is already part of the offspring;
            the destination neuron comes along with the synapse
        Finally, the input and output neurons shared by both parents are added,
        so the offspring keeps the interface of its parents.

        Neither parent is modified.

        The visiting order depends on the current layers, which a concurrent
        'add_layer()' renumbers. When genomes are mutated from other threads,
        pass the gene pool: its lock is then held for the whole recombination.
        Without it, crossover must not run alongside writers to the pool.

        Parameters:
            genome1:   the first  parent
            genome2:   the second parent
            rng:       random number generator for the coin flips
            gene_pool: the registry of all genes (optional, only its lock is used)

        Returns:
            New offspring genome
        """
        if rng is None:
            rng = np.random.default_rng()

        offspring = Genome()

        with gene_pool.lock if gene_pool is not None else nullcontext():
            all_synapse_genes = genome1.combine_synapse_genes_no_repeat(genome2)
            all_synapse_genes.sort(key=lambda sg: (sg.node_in.layer, sg.id))

            for sg in all_synapse_genes:

                # Matching gene: inherit it
                if genome1.contains_synapse_gene(sg) and genome2.contains_synapse_gene(sg):
                    offspring.add_neuron_gene(sg.node_in)
                    offspring.add_neuron_gene(sg.node_out)
                    offspring.add_synapse_gene(sg)

                # Disjoint gene: flip a coin, then require the source to be already present
                elif rng.random() < 0.5:
                    if offspring.contains_neuron_gene(sg.node_in):
                        offspring.add_neuron_gene(sg.node_out)
                        offspring.add_synapse_gene(sg)

        for ng in list(genome1.input_neuron_genes.values()) + list(genome1.output_neuron_genes.values()):
            if genome2.contains_neuron_gene(ng):
                offspring.add_neuron_gene(ng)

        return offspring

    def mutate(self,
               synapse_rate: float,
               neuron_rate : float,
               gene_pool   : GenePool,
               rng         : np.random.Generator | None = None) -> None:
        """
        Apply structural mutations to the current genome.

        Two independent trials take place, so either, both or neither
        mutation may occur:
          + with probability 'synapse_rate', two distinct neurons of the genome
            are picked at random and joined (see 'mutate_add_synapse')
          + with probability 'neuron_rate', a synapse of the genome is picked
            at random and split (see 'mutate_add_neuron')
        A trial which has nothing to pick from (fewer than two neurons, or
        no synapses) does nothing.

        Parameters:
            synapse_rate: probability of the 'add synapse' mutation
            neuron_rate:  probability of the 'add neuron' mutation
            gene_pool:    the registry of all genes
            rng:          random number generator
        """
        if rng is None:
            rng = np.random.default_rng()

        if rng.random() < synapse_rate:
            all_neuron_genes = self.get_all_neuron_genes()
            if len(all_neuron_genes) >= 2:
                ng1 = all_neuron_genes[rng.integers(len(all_neuron_genes))]
                ng2 = ng1
                while ng2.id == ng1.id:
                    ng2 = all_neuron_genes[rng.integers(len(all_neuron_genes))]
                self.mutate_add_synapse(ng1, ng2, gene_pool)

        if rng.random() < neuron_rate:
            synapse_genes = list(self.synapse_genes.values())
            if synapse_genes:
                sg = synapse_genes[rng.integers(len(synapse_genes))]
                self.mutate_add_neuron(sg, gene_pool)

    def mutate_with(self,
                    rates    : 'MutationRates',
                    gene_pool: GenePool,
                    rng      : np.random.Generator | None = None) -> None:
        self.mutate(rates.new_synapse, rates.new_neuron, gene_pool, rng)

    def mutate_add_synapse(self, ng1: NeuronGene, ng2: NeuronGene, gene_pool: GenePool) -> None:
        """
        Join two neurons of this genome with a synapse.

        Nothing happens if the two neurons sit on the same layer, or if either
        of them is not part of this genome. Otherwise the gene pool is asked
        for the synapse joining them:
          + if it exists, the shared gene is added to this genome (when not already present)
          + if it does not, a new gene is created in the gene pool and then added
        This way two genomes which make the same connection independently end
        up holding the same gene.

        Parameters:
            ng1:       neuron gene at one end of the new synapse
            ng2:       neuron gene at the other end of the new synapse
            gene_pool: the registry of all genes
        """
        with gene_pool.lock:
            if ng1.layer == ng2.layer:
                return
            if not (self.contains_neuron_gene(ng1) and self.contains_neuron_gene(ng2)):
                return
            if ng1.layer > ng2.layer:
                ng1, ng2 = ng2, ng1

            sg = gene_pool.get_synapse_gene(ng1, ng2)
            if sg is None:
                sg = gene_pool.add_synapse_gene(ng1, ng2)
                self.add_synapse_gene(sg)
            elif not self.contains_synapse_gene(sg):
                self.add_synapse_gene(sg)

    def mutate_add_neuron(self, sg: SynapseGene, gene_pool: GenePool) -> None:
        """
        Split a synapse of this genome by adding a new hidden neuron in between.

        The new neuron goes on the layer right above the source of the synapse.
        If the synapse spans a single layer there is no room for it, so the gene
        pool first inserts a new layer there (which renumbers the neurons above,
        for all genomes). The split synapse is removed from this genome only and
        two new synapses, source -> new neuron -> destination, are added.

        Nothing happens if 'sg' is not part of this genome.

        Parameters:
            sg:        the synapse gene to split
            gene_pool: the registry of all genes
        """
        with gene_pool.lock:
            if not self.contains_synapse_gene(sg):
                return

            ng1       = sg.node_in
            ng2       = sg.node_out
            new_layer = ng1.layer + 1

            if sg.length == 1:
                gene_pool.add_layer(new_layer)

            self.remove_synapse_gene(sg)

            new_ng = gene_pool.add_neuron_gene(new_layer, NeuronType.HIDDEN)
            self.add_neuron_gene(new_ng)

            sg1 = gene_pool.add_synapse_gene(ng1, new_ng)
            sg2 = gene_pool.add_synapse_gene(new_ng, ng2)
            self.add_synapse_gene(sg1)
            self.add_synapse_gene(sg2)

    def get_all_neuron_genes(self) -> list[NeuronGene]:
        """
        Get all neuron genes of this genome: inputs, then outputs, then hidden neurons.
        """
        return list(self.input_neuron_genes.values())  + \
               list(self.output_neuron_genes.values()) + \
               list(self.hidden_neuron_genes.values())

    def add_neuron_gene(self, ng: NeuronGene) -> None:
        if self.contains_neuron_gene(ng):
            return
        if ng.type == NeuronType.INPUT:
            self.input_neuron_genes[ng.id] = ng
        elif ng.type == NeuronType.OUTPUT:
            self.output_neuron_genes[ng.id] = ng
        else:
            self.hidden_neuron_genes[ng.id] = ng

    def add_synapse_gene(self, sg: SynapseGene) -> None:
        if not self.contains_synapse_gene(sg):
            self.synapse_genes[sg.id] = sg

    def remove_synapse_gene(self, sg: SynapseGene) -> None:
        self.synapse_genes.pop(sg.id, None)

    def contains_synapse_gene(self, sg: SynapseGene) -> bool:
        return sg.id in self.synapse_genes

    def contains_neuron_gene(self, ng: NeuronGene) -> bool:
        return ng.id in self.input_neuron_genes  or \
               ng.id in self.output_neuron_genes or \
               ng.id in self.hidden_neuron_genes

    def combine_synapse_genes_no_repeat(self, other: 'Genome') -> list[SynapseGene]:
        """
        Get the synapse genes of this genome followed by those of 'other' not found here.
        """
        combined = list(self.synapse_genes.values())
        combined.extend(sg for sg in other.synapse_genes.values() if not self.contains_synapse_gene(sg))
        return combined

    def combine_neuron_genes_no_repeat(self, other: 'Genome') -> list[NeuronGene]:
        """
        Get the neuron genes of this genome followed by those of 'other' not found here.
        """
        combined = self.get_all_neuron_genes()
        combined.extend(ng for ng in other.get_all_neuron_genes() if not self.contains_neuron_gene(ng))
        return combined

    def get_synapse_gene_by_id(self, gene_id: int) -> SynapseGene | None:
        return self.synapse_genes.get(gene_id)

    def get_max_synapse_length(self) -> int:
        return max((sg.length for sg in self.synapse_genes.values()), default=0)

    def layers(self) -> list[list[NeuronGene]]:
        """
        Group the neuron genes of this genome by their current layer.

        Layers holding none of this genome's neurons are skipped, so the
        result can be used directly as an evaluation order.

        Returns:
            List of lists of neuron genes, ordered by ascending layer
        """
        by_layer: dict[int, list[NeuronGene]] = {}
        for ng in self.get_all_neuron_genes():
            by_layer.setdefault(ng.layer, []).append(ng)
        return [by_layer[layer] for layer in sorted(by_layer)]

    def clone(self) -> 'Genome':
        """
        Create a new genome holding the same genes as this one.

        The gene objects are shared (they belong to the gene pool), the
        collections are not: changing the clone leaves this genome intact.
        """
        twin = Genome()
        twin.input_neuron_genes  = dict(self.input_neuron_genes)
        twin.output_neuron_genes = dict(self.output_neuron_genes)
        twin.hidden_neuron_genes = dict(self.hidden_neuron_genes)
        twin.synapse_genes       = dict(self.synapse_genes)
        return twin

    @property
    def num_genes(self) -> int:
        return len(self.get_all_neuron_genes()) + len(self.synapse_genes)

    def __str__(self):
        neuron_genes_str  = ''.join(str(ng) for ng in self.input_neuron_genes.values())
        neuron_genes_str += ''.join(str(ng) for ng in self.hidden_neuron_genes.values())
        neuron_genes_str += ''.join(str(ng) for ng in self.output_neuron_genes.values())
        synapse_genes_str = ''.join(str(sg) for sg in self.synapse_genes.values())
        return f"Neurons: {neuron_genes_str}\nSynapses: {synapse_genes_str}"

    @staticmethod
    def show_aligned(genome1: 'Genome', genome2: 'Genome') -> None:
        """
        Print two genomes aligning the neuron and synapse genes.
        """

        # Align neurons by ID
        neurons1 = {ng.id: ng for ng in genome1.get_all_neuron_genes()}
        neurons2 = {ng.id: ng for ng in genome2.get_all_neuron_genes()}
        neuron_ids_all = sorted(set(neurons1) | set(neurons2))
        neuron_str1 = ""
        neuron_str2 = ""
        for neuron_id in neuron_ids_all:
            str1 = str(neurons1[neuron_id]) if neuron_id in neurons1 else ""
            str2 = str(neurons2[neuron_id]) if neuron_id in neurons2 else ""
            width = max(len(str1), len(str2))
            neuron_str1 += str1.ljust(width)
            neuron_str2 += str2.ljust(width)

        # Print aligned neurons
        print(f"Neurons:\n{neuron_str1}\n{neuron_str2}\n")

        # Align synapses by ID
        synapse_ids_all = sorted(set(genome1.synapse_genes) | set(genome2.synapse_genes))
        synapse_str1 = ""
        synapse_str2 = ""
        for synapse_id in synapse_ids_all:
            str1 = str(genome1.synapse_genes[synapse_id]) if synapse_id in genome1.synapse_genes else ""
            str2 = str(genome2.synapse_genes[synapse_id]) if synapse_id in genome2.synapse_genes else ""
            width = max(len(str1), len(str2))
            synapse_str1 += str1.ljust(width)
            synapse_str2 += str2.ljust(width)

        # Print aligned synapses
        print(f"Synapses:\n{synapse_str1}\n{synapse_str2}\n")
