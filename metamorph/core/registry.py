"""
Constant and name registry.

Keeps every constant the program uses and every predicate name the graph
knows, and mints fresh ones that collide with neither. Everything is kept
in insertion order: random choices over the registry must not depend on
string hashing, or two runs with the same seed would diverge.
"""

from ..errors import NameGenerationExhausted


MAX_ATTEMPTS = 1000


class NameRegistry:

    def __init__(self, constants=(), predicates=()):
        self._constants = []
        self._constant_keys = set()
        self._predicates = {}
        for value in constants:
            self.register_constant(value)
        for tag in predicates:
            self.register_predicate(tag)

    @classmethod
    def from_program(cls, program) -> "NameRegistry":
        return cls(program.constants(), program.all_predicates())

    @staticmethod
    def _key(value):
        # 7 and "7" are different constants
        return (type(value), value)

    # -- constants --

    def known_constants(self) -> set:
        return set(self._constants)

    def constants(self) -> list:
        return list(self._constants)

    def has_constant(self, value) -> bool:
        return self._key(value) in self._constant_keys

    def register_constant(self, value) -> bool:
        """Add value; return False if it was already known."""
        key = self._key(value)
        if key in self._constant_keys:
            return False
        self._constant_keys.add(key)
        self._constants.append(value)
        return True

    def _fresh(self, make_candidate, is_taken, what):
        for _ in range(MAX_ATTEMPTS):
            candidate = make_candidate()
            if not is_taken(candidate):
                return candidate
        raise NameGenerationExhausted(
            f"no fresh {what} found after {MAX_ATTEMPTS} attempts"
        )

    def fresh_string_constant(self, rng) -> str:
        value = self._fresh(lambda: f"c_{rng.getrandbits(32)}",
                            self.has_constant, "string constant")
        self.register_constant(value)
        return value

    def fresh_integer_constant(self, rng) -> int:
        value = self._fresh(lambda: rng.getrandbits(32),
                            self.has_constant, "integer constant")
        self.register_constant(value)
        return value

    def checkpoint(self) -> int:
        return len(self._constants)

    def rollback(self, mark: int):
        """Forget constants registered after checkpoint() returned mark."""
        for value in self._constants[mark:]:
            self._constant_keys.discard(self._key(value))
        del self._constants[mark:]

    # -- predicate names --

    def predicates(self) -> list:
        return list(self._predicates)

    def has_predicate(self, tag: str) -> bool:
        return tag in self._predicates

    def register_predicate(self, tag: str):
        self._predicates.setdefault(tag, None)

    def fresh_relation_name(self, rng) -> str:
        """A name no predicate has yet. Not registered: the caller does that."""
        return self._fresh(lambda: f"R_{rng.getrandbits(32)}",
                           self.has_predicate, "relation name")
