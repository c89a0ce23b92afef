"""Shared test fixtures for the computeless RAG tests.

This package provides:
- A recording stub transport
- In-memory fakes of the collaborators
"""

__all__ = [
    "stub_transport",
    "fake_services",
]
