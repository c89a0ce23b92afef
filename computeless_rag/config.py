"""Configuration for the computeless RAG service."""

import os
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

# ============================================================================
# AWS Configuration
# ============================================================================

AWS_REGION = os.getenv("AWS_REGION", "us-east-1")

# Bedrock runtime serves both the embedding and the generation model
BEDROCK_RUNTIME_URL = os.getenv(
    "BEDROCK_RUNTIME_URL", f"https://bedrock-runtime.{AWS_REGION}.amazonaws.com"
)

# Secrets Manager JSON 1.1 endpoint (holds the Pinecone API key)
SECRETS_MANAGER_URL = os.getenv(
    "SECRETS_MANAGER_URL", f"https://secretsmanager.{AWS_REGION}.amazonaws.com"
)

# ============================================================================
# Pinecone Configuration
# ============================================================================

# Data-plane host of the index, e.g. https://my-index-abc123.svc.us-east-1.pinecone.io
PINECONE_INDEX_HOST = os.getenv("PINECONE_INDEX_HOST", "")

# ============================================================================
# Pipeline Configuration
# ============================================================================

# YAML file with model ids, namespace and top-K (defaults to the packaged one)
PIPELINE_CONFIG_PATH = os.getenv(
    "PIPELINE_CONFIG_PATH", str(Path(__file__).parent / "pipeline.yaml")
)

# ============================================================================
# Service Configuration
# ============================================================================

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()


def get_port(env_var: str, default: int) -> int:
    """Get port from environment or return default."""
    try:
        return int(os.getenv(env_var, default))
    except ValueError:
        print(f"Warning: Invalid {env_var}, using default {default}")
        return default


# HTTP API server port
API_PORT = get_port("PORT_API", 8300)


def get_collaborator_urls() -> dict[str, str]:
    """Base URL for every collaborator the pipelines talk to."""
    return {
        "secrets": SECRETS_MANAGER_URL,
        "bedrock": BEDROCK_RUNTIME_URL,
        "pinecone": PINECONE_INDEX_HOST,
    }
