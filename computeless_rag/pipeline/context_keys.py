from .context import ContextKey


PINECONE_API_KEY = ContextKey("pineconeApiKey")
QUERY_EMBEDDING = ContextKey("queryEmbedding")
QUERY_CONTEXTS = ContextKey("queryContexts")
PROMPT = ContextKey("prompt")
QUERY_ANSWER = ContextKey("queryAnswer")
UPSERTED_VECTOR_ID = ContextKey("upsertedVectorId")
