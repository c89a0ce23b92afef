"""Prompt builder step: renders the grounded prompt. Local, no collaborator call."""

from typing import List, Optional

from ...loader import PromptConfig
from ..base import Step, StepOutcome
from ..context import PipelineContext
from ..context_keys import PROMPT, QUERY_CONTEXTS
from ..transport import CollaboratorResponse


PROMPT_TEMPLATE = """<Question> {query}</Question>
<Contextual Information>:
{contexts}
</Contextual Information>
<Instructions>
{instructions}
</Instructions>
Your Answer:"""


def build_instructions(config: PromptConfig) -> List[str]:
    """The six behavioural instructions, in order."""
    return [
        "Provide a direct and concise answer to the question based on your knowledge, "
        'without explicitly referencing or mentioning the provided "Contextual Information".',
        f"Respond as {config.persona} who has internalized the relevant information, "
        "without indicating separate context pieces or referencing them directly.",
        "If you do not have enough information to answer the question, respond with "
        f"'{config.fallback_answer}', nothing more, nothing less.",
        'Avoid any meta-references to the process of consulting the "Contextual Information" '
        "provided or the structure of this query.",
        "Keep your answer as short as possible while still fully addressing the question.",
        "Validate that you are complying to ALL the above instructions before answering any question.",
    ]


def render_prompt(
    query: str, contexts: List[str], config: Optional[PromptConfig] = None
) -> str:
    """
    Render the question, retrieved texts and instructions into one prompt.

    Each context becomes a ``* `` bullet line in retrieval order. With no
    contexts the block is left empty; the model is expected to answer with
    the fallback sentence on its own.
    """
    config = config or PromptConfig()
    instructions = build_instructions(config)

    return PROMPT_TEMPLATE.format(
        query=query,
        contexts="\n".join(f"* {text}" for text in contexts),
        instructions="\n".join(
            f"  {i}. {instruction}" for i, instruction in enumerate(instructions, 1)
        ),
    )


class PromptBuilderStep(Step):
    requires = (QUERY_CONTEXTS,)
    provides = (PROMPT,)

    def __init__(self, config: PromptConfig | None = None):
        self.config = config or PromptConfig()

    @property
    def name(self) -> str:
        return "PromptBuilderStep"

    def build_request(self, query: str, context: PipelineContext) -> None:
        return None

    def handle_response(
        self, response: Optional[CollaboratorResponse], context: PipelineContext
    ) -> StepOutcome:
        context.set(
            PROMPT, render_prompt(context.query, context.get(QUERY_CONTEXTS), self.config)
        )
        return StepOutcome.proceed()
