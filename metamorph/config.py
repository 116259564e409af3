"""
Run configuration: everything a transformation sequence depends on.

Two runs with equal configs on the same rule file produce byte-identical
artifacts.
"""

from dataclasses import dataclass

from .core.lattice import TransformationType


DEFAULT_SEED = 42
DEFAULT_ROUNDS = 32
DEFAULT_NAME = "Transformation Sequence 1"


@dataclass
class RunConfig:
    source: str
    seed: int = DEFAULT_SEED
    rounds: int = DEFAULT_ROUNDS
    transformation_type: TransformationType = TransformationType.CONTRACTIVE
    name: str = DEFAULT_NAME
    output_dir: str = "."
    verbose: bool = True

    def __post_init__(self):
        if isinstance(self.transformation_type, str):
            self.transformation_type = TransformationType.from_name(self.transformation_type)
        if self.rounds < 1:
            raise ValueError(f"rounds must be positive, got {self.rounds}")
        if not 0 <= self.seed < 2 ** 64:
            raise ValueError(f"seed must be a 64-bit unsigned integer, got {self.seed}")
        if not self.name:
            raise ValueError("sequence name must not be empty")

    @classmethod
    def from_args(cls, args) -> "RunConfig":
        return cls(
            source=args.source,
            seed=args.seed,
            rounds=args.rounds,
            transformation_type=args.type,
            name=args.name,
            output_dir=args.output_dir,
            verbose=not args.quiet,
        )
