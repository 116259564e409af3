"""
The small orders the oracle is built on.

Ancestry: how a relation can influence the output relation.

          UNKNOWN
          /     \\
    POSITIVE   NEGATIVE
          \\     /
           NONE

    NONE      not an ancestor of the output at all
    POSITIVE  reaches the output through an even number of negations
    NEGATIVE  reaches the output through an odd number of negations
    UNKNOWN   both

join is the least upper bound. POSITIVE and NEGATIVE are incomparable,
so the comparison operators below return False both ways for that pair.

TransformationType: the intended effect of a mutation on the output.

    EQUIVALENT < CONTRACTIVE,  EQUIVALENT < EXPANSIVE

A mutation that realizes type t is acceptable for an intended type i
iff t <= i: an equivalent mutation is fine for every request.
"""

from enum import Enum


class Ancestry(Enum):
    NONE = "n"
    POSITIVE = "+"
    NEGATIVE = "-"
    UNKNOWN = "?"

    def join(self, other: "Ancestry") -> "Ancestry":
        if self is other or other is Ancestry.NONE:
            return self
        if self is Ancestry.NONE:
            return other
        return Ancestry.UNKNOWN

    def inverse(self) -> "Ancestry":
        if self is Ancestry.POSITIVE:
            return Ancestry.NEGATIVE
        if self is Ancestry.NEGATIVE:
            return Ancestry.POSITIVE
        return self

    @property
    def is_concrete(self):
        return self in (Ancestry.POSITIVE, Ancestry.NEGATIVE)

    def __le__(self, other):
        if not isinstance(other, Ancestry):
            return NotImplemented
        return self.join(other) is other

    def __lt__(self, other):
        if not isinstance(other, Ancestry):
            return NotImplemented
        return self is not other and self <= other

    def __ge__(self, other):
        if not isinstance(other, Ancestry):
            return NotImplemented
        return other <= self

    def __gt__(self, other):
        if not isinstance(other, Ancestry):
            return NotImplemented
        return other < self


class Sign(Enum):
    POSITIVE = "+"
    NEGATIVE = "-"


class TransformationType(Enum):
    EQUIVALENT = "equivalent"
    CONTRACTIVE = "contractive"
    EXPANSIVE = "expansive"

    def __le__(self, other):
        if not isinstance(other, TransformationType):
            return NotImplemented
        return self is other or self is TransformationType.EQUIVALENT

    def __lt__(self, other):
        if not isinstance(other, TransformationType):
            return NotImplemented
        return self is not other and self <= other

    def __ge__(self, other):
        if not isinstance(other, TransformationType):
            return NotImplemented
        return other <= self

    def __gt__(self, other):
        if not isinstance(other, TransformationType):
            return NotImplemented
        return other < self

    @classmethod
    def from_name(cls, name: str) -> "TransformationType":
        try:
            return cls(name.lower())
        except ValueError:
            raise ValueError(f"Unknown transformation type: {name}") from None
