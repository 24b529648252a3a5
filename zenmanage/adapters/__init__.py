"""
Adapters package.

HTTP client wrapper for the Zenmanage API. The adapter encapsulates:

- Base URL, authentication headers and request shapes
- Retry policy for rule fetches
- Mapping of transport failures to client errors

Keep adapters thin and side-effect free outside of explicit calls.
"""

from .api_client import ApiClient, FlagMetadataResponse, RulesDocument

__all__ = [
    "ApiClient",
    "FlagMetadataResponse",
    "RulesDocument",
]
