import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, Type

import pydantic

from ..errors import (
    CollaboratorError,
    PipelineConfigurationError,
    PipelineError,
    TransportError,
)
from .context import ContextKey, PipelineContext
from .transport import CollaboratorResponse, HttpTransport, RequestDescriptor, Transport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StepOutcome:
    """Result of a step's response phase: proceed, or fail with an error."""

    error: Optional[PipelineError] = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    @classmethod
    def proceed(cls) -> "StepOutcome":
        return cls()

    @classmethod
    def fail(cls, error: PipelineError) -> "StepOutcome":
        return cls(error=error)


class Step(ABC):
    """
    Base class for all pipeline steps.

    A step is split in two phases so that it never performs I/O itself:
    ``build_request`` describes the collaborator call (or returns None for
    a local step), and ``handle_response`` interprets the reply and writes
    its results into the context. Steps keep only configuration, never
    per-query state.
    """

    # Context fields the step reads / writes. Checked by Pipeline.
    requires: Tuple[ContextKey, ...] = ()
    provides: Tuple[ContextKey, ...] = ()

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    def build_request(
        self, query: str, context: PipelineContext
    ) -> Optional[RequestDescriptor]:
        pass

    @abstractmethod
    def handle_response(
        self, response: Optional[CollaboratorResponse], context: PipelineContext
    ) -> StepOutcome:
        pass


class CollaboratorStep(Step):
    """
    Step that calls an external service and parses a typed reply.

    Non-success statuses become a CollaboratorError carrying the status and
    body untouched. A success body that does not match ``response_model``
    becomes a TransportError.
    """

    collaborator: str = ""
    response_model: Type[pydantic.BaseModel] = pydantic.BaseModel

    def handle_response(
        self, response: Optional[CollaboratorResponse], context: PipelineContext
    ) -> StepOutcome:
        if response is None:
            raise RuntimeError(f"Step '{self.name}' expects a collaborator response")

        if not response.is_success:
            return StepOutcome.fail(
                CollaboratorError(
                    response.status_code,
                    response.body,
                    collaborator=self.collaborator,
                    step=self.name,
                    raw_body=response.content or None,
                )
            )

        try:
            parsed = self.response_model.model_validate_json(response.body)
        except pydantic.ValidationError as e:
            return StepOutcome.fail(
                TransportError(
                    f"Malformed {self.collaborator} response: {e.error_count()} "
                    f"validation error(s), first: {e.errors()[0]['msg']}",
                    error_type="MalformedResponse",
                    collaborator=self.collaborator,
                    step=self.name,
                )
            )

        self.apply(parsed, context)
        return StepOutcome.proceed()

    @abstractmethod
    def apply(self, parsed: pydantic.BaseModel, context: PipelineContext) -> None:
        """Write the parsed reply into the context."""
        pass


def validate_step_order(
    steps: Iterable[Step], available: Iterable[ContextKey] = ()
) -> None:
    """
    Check that every field a step reads is written by an earlier step.

    Raises:
        PipelineConfigurationError: On the first forward reference
    """
    written = set(available)
    for step in steps:
        missing = [str(key) for key in step.requires if key not in written]
        if missing:
            raise PipelineConfigurationError(
                f"Step '{step.name}' reads {missing} before any earlier step writes them"
            )
        written.update(step.provides)


class Pipeline:
    """Chain of steps with sequential async execution. Stops at the first failure."""

    def __init__(
        self,
        steps: List[Step] | None = None,
        transport: Transport | None = None,
        available: Iterable[ContextKey] = (),
    ):
        """
        Args:
            steps: Steps in execution order
            transport: How collaborator calls are made (pooled HTTP by default)
            available: Fields already present in the context handed to execute()
        """
        self.steps = steps or []
        self.transport = transport or HttpTransport()
        self.available = tuple(available)
        validate_step_order(self.steps, self.available)

    async def execute(self, context: PipelineContext) -> PipelineContext:
        """
        Run every step in order against ``context``.

        Returns:
            The same context, with every step's fields written

        Raises:
            PipelineError: The failing step's error, unchanged
        """
        timings = {}
        context.set_metadata("step_timings_ms", timings)

        for step in self.steps:
            started = time.perf_counter()
            logger.debug(f"▶ {step.name}")

            outcome = await self._run_step(step, context)

            timings[step.name] = round((time.perf_counter() - started) * 1000, 2)
            if outcome.failed:
                error = outcome.error
                if error.step is None:
                    error.step = step.name
                context.set_metadata("failed_step", step.name)
                logger.warning(f"✗ {step.name} failed: {error.message}")
                raise error

            logger.debug(f"✓ {step.name} ({timings[step.name]} ms)")

        return context

    async def _run_step(self, step: Step, context: PipelineContext) -> StepOutcome:
        request = step.build_request(context.query, context)

        response = None
        if request is not None:
            try:
                response = await self.transport.send(request)
            except TransportError as e:
                return StepOutcome.fail(e)

        return step.handle_response(response, context)

    def with_step(self, step: Step) -> "Pipeline":
        """
        Return new pipeline with step appended.

        Creates a new pipeline, leaves the original unchanged.
        """
        return Pipeline(self.steps + [step], self.transport, self.available)

    def __len__(self) -> int:
        return len(self.steps)

    def __repr__(self) -> str:
        step_names = [s.name for s in self.steps]
        return f"Pipeline(steps={step_names})"
