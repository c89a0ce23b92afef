"""Secret provider step: fetches the vector-store API key."""

import json

from ...loader import SecretsConfig
from ...schemas import SecretValueResponse
from ..base import CollaboratorStep
from ..context import PipelineContext
from ..context_keys import PINECONE_API_KEY
from ..transport import RequestDescriptor


class SecretProviderStep(CollaboratorStep):
    """Reads the Pinecone API key from Secrets Manager, fresh on every run."""

    collaborator = "secrets"
    response_model = SecretValueResponse
    provides = (PINECONE_API_KEY,)

    def __init__(self, config: SecretsConfig | None = None):
        self.config = config or SecretsConfig()

    @property
    def name(self) -> str:
        return "SecretProviderStep"

    def build_request(self, query: str, context: PipelineContext) -> RequestDescriptor:
        return RequestDescriptor(
            collaborator=self.collaborator,
            method="POST",
            path="/",
            headers={
                "content-type": "application/x-amz-json-1.1",
                "X-Amz-Target": "secretsmanager.GetSecretValue",
            },
            body=json.dumps({"SecretId": self.config.secret_id}),
        )

    def apply(self, parsed: SecretValueResponse, context: PipelineContext) -> None:
        context.set(PINECONE_API_KEY, parsed.secret_string)
