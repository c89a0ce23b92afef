"""In-memory stand-ins for Secrets Manager, Bedrock and Pinecone.

The fakes speak the same request/response shapes as the real services, so
the pipelines run end to end against them through a StubTransport.
"""

import json
import math
import re
import zlib
from typing import Dict, List, Optional

from computeless_rag.loader import PipelineConfig
from computeless_rag.pipeline.transport import CollaboratorResponse, RequestDescriptor

from .stub_transport import StubTransport, json_response, raw_response

TEST_API_KEY = "pc-test-key"


def embed_text(text: str, dimension: int = 32) -> List[float]:
    """Deterministic bag-of-words embedding (unit length)."""
    tokens = re.findall(r"\w+", text.lower()) or [text]
    vector = [0.0] * dimension
    for token in tokens:
        vector[zlib.crc32(token.encode("utf-8")) % dimension] += 1.0
    norm = math.sqrt(sum(v * v for v in vector))
    return [v / norm for v in vector]


def _cosine(a: List[float], b: List[float]) -> float:
    dot = sum(x * y for x, y in zip(a, b))
    norm = math.sqrt(sum(x * x for x in a)) * math.sqrt(sum(y * y for y in b))
    return dot / norm if norm else 0.0


class FakeServices:
    """Faithful enough fakes of the four collaborators."""

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        api_key: str = TEST_API_KEY,
        answer: str = "30 days.",
    ):
        self.config = config or PipelineConfig()
        self.api_key = api_key
        self.answer = answer
        self.vectors: Dict[str, List[dict]] = {}
        self.prompts: List[str] = []

    # ==================== Handlers ====================

    def get_secret(self, request: RequestDescriptor) -> CollaboratorResponse:
        payload = json.loads(request.body)
        if payload["SecretId"] != self.config.secrets.secret_id:
            return raw_response(
                '{"__type":"ResourceNotFoundException","Message":"Secrets Manager can\'t find the specified secret."}',
                400,
            )
        return json_response({"Name": payload["SecretId"], "SecretString": self.api_key})

    def embed(self, request: RequestDescriptor) -> CollaboratorResponse:
        text = json.loads(request.body)["inputText"]
        return json_response(
            {"embedding": embed_text(text), "inputTextTokenCount": len(text.split())}
        )

    def generate(self, request: RequestDescriptor) -> CollaboratorResponse:
        payload = json.loads(request.body)
        self.prompts.append(payload["messages"][0]["content"][0]["text"])
        return json_response(
            {
                "id": "msg_test",
                "type": "message",
                "role": "assistant",
                "model": self.config.generation.model_id,
                "content": [{"type": "text", "text": self.answer}],
                "stop_reason": "end_turn",
            }
        )

    def _check_key(self, request: RequestDescriptor) -> Optional[CollaboratorResponse]:
        if request.headers.get("Api-Key") != self.api_key:
            return raw_response('{"code":16,"message":"Invalid API Key"}', 401)
        return None

    def upsert(self, request: RequestDescriptor) -> CollaboratorResponse:
        denied = self._check_key(request)
        if denied:
            return denied
        payload = json.loads(request.body)
        namespace = self.vectors.setdefault(payload["namespace"], [])
        namespace.extend(payload["vectors"])
        return json_response({"upsertedCount": len(payload["vectors"])})

    def query(self, request: RequestDescriptor) -> CollaboratorResponse:
        denied = self._check_key(request)
        if denied:
            return denied
        payload = json.loads(request.body)
        scored = sorted(
            (
                {
                    "id": v["id"],
                    "score": _cosine(payload["vector"], v["values"]),
                    "metadata": v["metadata"],
                }
                for v in self.vectors.get(payload["namespace"], [])
            ),
            key=lambda match: match["score"],
            reverse=True,
        )
        return json_response(
            {"matches": scored[: payload["topK"]], "namespace": payload["namespace"]}
        )

    # ==================== Wiring ====================

    def seed(self, *texts: str, namespace: Optional[str] = None) -> None:
        """Store texts directly, bypassing the store pipeline."""
        bucket = self.vectors.setdefault(
            namespace or self.config.vector_store.namespace, []
        )
        for text in texts:
            bucket.append(
                {
                    "id": f"seed-{len(bucket)}",
                    "values": embed_text(text),
                    "metadata": {"text": text},
                }
            )

    def transport(self) -> StubTransport:
        embed_path = f"/model/{self.config.embedding.model_id}/invoke"
        generate_path = f"/model/{self.config.generation.model_id}/invoke"
        return (
            StubTransport()
            .route("secrets", "/", self.get_secret)
            .route("bedrock", embed_path, self.embed)
            .route("bedrock", generate_path, self.generate)
            .route("pinecone", "/query", self.query)
            .route("pinecone", "/vectors/upsert", self.upsert)
        )
