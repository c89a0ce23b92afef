"""Generator step: asks the language model to answer the prompt."""

import json

from ...loader import GenerationConfig
from ...schemas import GenerationResponse
from ..base import CollaboratorStep
from ..context import PipelineContext
from ..context_keys import PROMPT, QUERY_ANSWER
from ..transport import RequestDescriptor


class GeneratorStep(CollaboratorStep):
    """Sends the prompt as the only user message and keeps the first text block."""

    collaborator = "bedrock"
    response_model = GenerationResponse
    requires = (PROMPT,)
    provides = (QUERY_ANSWER,)

    def __init__(self, config: GenerationConfig | None = None):
        self.config = config or GenerationConfig()

    @property
    def name(self) -> str:
        return "GeneratorStep"

    def build_request(self, query: str, context: PipelineContext) -> RequestDescriptor:
        payload = {
            "anthropic_version": self.config.anthropic_version,
            "max_tokens": self.config.max_tokens,
            "messages": [
                {
                    "role": "user",
                    "content": [{"type": "text", "text": context.get(PROMPT)}],
                }
            ],
        }

        return RequestDescriptor(
            collaborator=self.collaborator,
            method="POST",
            path=f"/model/{self.config.model_id}/invoke",
            headers={"content-type": "application/json", "accept": "*/*"},
            body=json.dumps(payload),
        )

    def apply(self, parsed: GenerationResponse, context: PipelineContext) -> None:
        context.set(QUERY_ANSWER, parsed.text)
