"""Typed views of the collaborator replies the pipeline consumes.

Only the fields the steps read are declared; everything else in a reply is
ignored. A reply that does not fit its model is treated as a transport
failure by ``CollaboratorStep``.
"""

from typing import List, Optional

from pydantic import BaseModel, Field


class SecretValueResponse(BaseModel):
    """Secrets Manager GetSecretValue reply."""

    secret_string: str = Field(alias="SecretString")


class EmbeddingResponse(BaseModel):
    """Titan text embedding reply."""

    embedding: List[float] = Field(min_length=1)


class MatchMetadata(BaseModel):
    text: str


class QueryMatch(BaseModel):
    id: Optional[str] = None
    score: Optional[float] = None
    metadata: MatchMetadata


class QueryResponse(BaseModel):
    """Pinecone /query reply, matches in the store's ranking order."""

    matches: List[QueryMatch]


class UpsertResponse(BaseModel):
    """Pinecone /vectors/upsert reply."""

    upserted_count: Optional[int] = Field(default=None, alias="upsertedCount")


class ContentBlock(BaseModel):
    type: str = "text"
    text: str = Field(min_length=1)


class GenerationResponse(BaseModel):
    """Anthropic messages reply as returned by Bedrock invoke."""

    id: Optional[str] = None
    model: Optional[str] = None
    stop_reason: Optional[str] = None
    content: List[ContentBlock] = Field(min_length=1)

    @property
    def text(self) -> str:
        return self.content[0].text
