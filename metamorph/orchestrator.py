"""
The transformation loop.

One round: shuffle the registered transformation kinds, construct the
first one that has an eligible target under the requested class, apply
it, and keep program and graph in step. A round ends in one of three
states:

    COMMITTED   the mutation is in the new program and in the graph
    REJECTED    validation refused the commit; nothing changed
    NO_TARGET   no kind could be constructed this round

prepare() and run_sequence() are the driver around it: name rules, build
the graph, choose the output relation, propagate, write the input
artifacts, run the rounds, write the output artifacts.
"""

import os
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .core.graph import AnnotatedDependencyGraph
from .core.lattice import TransformationType
from .errors import GraphInvariantViolation, NoEligibleMutationTarget, ValidationFailure
from .program.parser import load_program
from .transformations import TRANSFORMATIONS, NameRules, SelectOutputPredicate
from .visualization import write_artifacts, print_graph, print_outcomes


class RoundStatus(Enum):
    COMMITTED = "committed"
    REJECTED = "rejected"
    NO_TARGET = "no target"


@dataclass
class RoundOutcome:
    round: int
    status: RoundStatus
    program: object
    kind: Optional[str] = None
    realized_type: Optional[TransformationType] = None
    report: object = None
    error: Optional[Exception] = None

    @property
    def name(self):
        text = f"Round {self.round}: {self.status.value}"
        if self.kind:
            text += f" ({self.kind}"
            if self.realized_type:
                text += f", {self.realized_type.value}"
            text += ")"
        if self.report is not None:
            text += f" -- {self.report}"
        elif self.error is not None:
            text += f" -- {self.error}"
        return text


@dataclass
class TransformationSequence:
    program: object
    adg: AnnotatedDependencyGraph
    outcomes: list = field(default_factory=list)

    def with_status(self, status: RoundStatus) -> list:
        return [o for o in self.outcomes if o.status is status]

    @property
    def committed(self):
        return self.with_status(RoundStatus.COMMITTED)

    @property
    def rejected(self):
        return self.with_status(RoundStatus.REJECTED)

    @property
    def aborted(self):
        return bool(self.rejected)


class TransformationOrchestrator:

    def __init__(self, adg, rng, intended: TransformationType,
                 transformations: Optional[dict] = None, verbose: bool = True):
        self.adg = adg
        self.rng = rng
        self.intended = intended
        self.transformations = dict(TRANSFORMATIONS if transformations is None else transformations)
        self.verbose = verbose

    def construct(self):
        """
        Return the first constructible transformation in a random kind order.

        Raises NoEligibleMutationTarget if no registered kind has a target.
        """
        kinds = list(self.transformations)
        for kind in self.rng.sample(kinds, len(kinds)):
            transformation = self.transformations[kind].try_construct(
                self.adg, self.rng, self.intended, verbose=self.verbose,
            )
            if transformation is None:
                if self.verbose:
                    print(f"  [no target] {kind}")
                continue
            if not transformation.realized_type <= self.intended:
                raise GraphInvariantViolation(
                    f"{kind} realizes {transformation.realized_type.value}, "
                    f"which is not allowed for {self.intended.value}"
                )
            return transformation
        raise NoEligibleMutationTarget(
            f"no transformation of {sorted(kinds)} has an eligible target "
            f"for {self.intended.value}"
        )

    def run_round(self, program, number: int = 1) -> RoundOutcome:
        if self.verbose:
            print(f"\n--- Transformation {number} ---")
        try:
            transformation = self.construct()
        except NoEligibleMutationTarget as e:
            return RoundOutcome(number, RoundStatus.NO_TARGET, program, error=e)

        if self.verbose:
            print(f"  [selected] {transformation.name}")
        try:
            new_program = transformation.apply(program)
        except ValidationFailure as e:
            if self.verbose:
                print(f"  [rejected] {e.report}")
            return RoundOutcome(number, RoundStatus.REJECTED, program,
                                transformation.kind, transformation.realized_type,
                                report=e.report, error=e)
        return RoundOutcome(number, RoundStatus.COMMITTED, new_program,
                            transformation.kind, transformation.realized_type)

    def run(self, program, rounds: int) -> TransformationSequence:
        """Run up to `rounds` rounds; stop at the first rejected commit."""
        sequence = TransformationSequence(program, self.adg)
        for number in range(1, rounds + 1):
            outcome = self.run_round(sequence.program, number)
            sequence.outcomes.append(outcome)
            sequence.program = outcome.program
            if outcome.status is RoundStatus.REJECTED:
                break
        return sequence


def prepare(program, rng, verbose: bool = True):
    """Name rules, build the graph, choose the output, propagate."""
    program = program.transform(NameRules(verbose=verbose))
    adg = AnnotatedDependencyGraph.from_program(program)
    program = program.transform(SelectOutputPredicate(adg, rng, verbose=verbose))
    adg.propagate(verbose=verbose)
    return program, adg


def run_sequence(config) -> TransformationSequence:
    """Load, prepare, transform and write artifacts as described by config."""
    if config.verbose:
        print(f"Using seed: {config.seed}")
    rng = random.Random(config.seed)
    program = load_program(config.source)
    program, adg = prepare(program, rng, verbose=config.verbose)

    folder = os.path.join(config.output_dir, config.name)
    write_artifacts(os.path.join(folder, "input"), "input", program, adg,
                    verbose=config.verbose)
    if config.verbose:
        print_graph(adg)

    orchestrator = TransformationOrchestrator(
        adg, rng, config.transformation_type, verbose=config.verbose,
    )
    sequence = orchestrator.run(program, config.rounds)

    write_artifacts(os.path.join(folder, "output"), "output", sequence.program, adg,
                    verbose=config.verbose)
    if config.verbose:
        print_graph(adg)
        print_outcomes(sequence)
    return sequence
