"""
Add a fact to a relation whose ancestry allows it.

Which relations qualify depends on the requested class:

    EQUIVALENT   NONE                 the output cannot see the new tuple
    CONTRACTIVE  NONE or NEGATIVE     the output can only lose tuples
    EXPANSIVE    NONE or POSITIVE     the output can only gain tuples

The fact uses the relation's established arity, or a random one in
[1, 6) if nothing fixes it yet. Each argument reuses a known constant
with probability 1/2, otherwise it is a freshly minted string or integer.
"""

from ..core.lattice import Ancestry, TransformationType
from ..errors import ValidationFailure, NameGenerationExhausted
from ..program.model import Constant, Fact
from .base import MetamorphicTransformation


REALIZED_BY_ANCESTRY = {
    Ancestry.NONE:     TransformationType.EQUIVALENT,
    Ancestry.NEGATIVE: TransformationType.CONTRACTIVE,
    Ancestry.POSITIVE: TransformationType.EXPANSIVE,
}

MIN_ARITY = 1
MAX_ARITY = 6  # exclusive


class AddFactNodeAndEdge(MetamorphicTransformation):
    kind = "add_fact_node_and_edge"
    description = "Add a fact to a relation the oracle can predict"

    def __init__(self, adg, rng, target, realized_type, verbose=True):
        super().__init__(adg, rng, realized_type, verbose=verbose)
        self.target = target

    @classmethod
    def try_construct(cls, adg, rng, intended, verbose=True):
        candidates = adg.eligible_tags(intended)
        if not candidates:
            return None
        target = rng.choice(candidates)
        realized = REALIZED_BY_ANCESTRY[adg.node_for(target).ancestry]
        return cls(adg, rng, target, realized, verbose=verbose)

    def _fresh_constant(self):
        registry = self.adg.registry
        if self.rng.random() < 0.5:
            return registry.fresh_string_constant(self.rng)
        return registry.fresh_integer_constant(self.rng)

    def _argument(self):
        known = self.adg.registry.constants()
        if self.rng.random() < 0.5:
            if known:
                return self.rng.choice(known)
            return self._fresh_constant()
        return self._fresh_constant()

    def apply(self, program):
        arities = program.arities()
        if self.target in arities:
            arity = arities[self.target]
        else:
            arity = self.rng.randrange(MIN_ARITY, MAX_ARITY)

        mark = self.adg.registry.checkpoint()
        try:
            fact = Fact(self.target, tuple(Constant(self._argument()) for _ in range(arity)))
            commit = program.fork()
            commit.add_fact(fact)
            new_program = commit.submit()
        except (ValidationFailure, NameGenerationExhausted):
            # constants minted for a fact that never lands are forgotten
            self.adg.registry.rollback(mark)
            raise

        fact_node = self.adg.add_fact_node(fact.label)
        self.adg.add_fact_edge(fact_node, self.adg.handle_for(self.target))
        if self.verbose:
            print(f"  Added new fact node {fact}")
        return new_program
