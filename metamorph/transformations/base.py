"""
The capability interface every metamorphic transformation implements.

    try_construct(adg, rng, intended)  -> instance, or None if this kind
                                          has no eligible target right now
    apply(program)                     -> new Program

apply() commits through the program's fork/commit and, only once the
commit is accepted, mirrors the same edit into the graph. A rejected
commit raises ValidationFailure and leaves graph and registry as they were.

realized_type is the transformation class the constructed instance
actually achieves; the orchestrator only accepts it if it is <= the
class that was asked for.
"""

from typing import Optional

from ..core.lattice import TransformationType


class MetamorphicTransformation:
    kind = "transformation"
    description = ""

    def __init__(self, adg, rng, realized_type=TransformationType.EQUIVALENT, verbose=True):
        self.adg = adg
        self.rng = rng
        self.realized_type = realized_type
        self.verbose = verbose

    @classmethod
    def try_construct(cls, adg, rng, intended: TransformationType,
                      verbose: bool = True) -> Optional["MetamorphicTransformation"]:
        raise NotImplementedError

    def apply(self, program):
        raise NotImplementedError

    @property
    def name(self):
        return f"{self.kind} [{self.realized_type.value}]"

    def __repr__(self):
        return f"{type(self).__name__}({self.realized_type.value})"
