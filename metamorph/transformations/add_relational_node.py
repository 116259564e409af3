"""
Add a relation that nothing refers to.

The new relation gets a fresh name and a relational node with no edges.
On the program side it is only declared, so no fact or rule changes and
the output cannot change either: equivalent under every request.
"""

from ..core.lattice import TransformationType
from ..program.model import Declaration
from .base import MetamorphicTransformation


class AddRelationalNode(MetamorphicTransformation):
    kind = "add_relational_node"
    description = "Declare a fresh, unused relation"

    @classmethod
    def try_construct(cls, adg, rng, intended, verbose=True):
        return cls(adg, rng, TransformationType.EQUIVALENT, verbose=verbose)

    def apply(self, program):
        tag = self.adg.registry.fresh_relation_name(self.rng)
        commit = program.fork()
        commit.add_declaration(Declaration(tag))
        new_program = commit.submit()

        self.adg.add_relational_node(tag)
        if self.verbose:
            print(f"  Added new relation of name {tag}")
        return new_program
