"""
Shared fixtures and test data factories.
"""

import json
from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest

from zenmanage.adapters.api_client import ApiClient, RulesDocument
from zenmanage.context import Attribute, Context


class RulesFactory:
    """Factory for rule set documents in their wire format."""

    @staticmethod
    def value(value: Any) -> Dict[str, Any]:
        if isinstance(value, bool):
            return {"value": {"boolean": value}}
        if isinstance(value, (int, float)):
            return {"value": {"number": value}}
        return {"value": {"string": value}}

    @staticmethod
    def clause(attribute: str, operator: str, value: Any) -> Dict[str, Any]:
        return {"attribute": attribute, "operator": operator, "value": value}

    @staticmethod
    def flag(key: str,
             value: Any,
             flag_type: Optional[str] = None,
             rules: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
        if flag_type is None:
            if isinstance(value, bool):
                flag_type = "boolean"
            elif isinstance(value, (int, float)):
                flag_type = "number"
            else:
                flag_type = "string"
        data = {
            "version": f"{key}-v1",
            "type": flag_type,
            "key": key,
            "name": key.replace("-", " ").title(),
            "target": {
                "version": f"{key}-target-v1",
                "expired_at": None,
                "published_at": "2024-01-01T00:00:00Z",
                "scheduled_at": None,
                "value": RulesFactory.value(value),
            },
        }
        if rules is not None:
            data["rules"] = rules
        return data

    @staticmethod
    def document(*flags: Dict[str, Any], version: str = "rules-v1") -> Dict[str, Any]:
        return {"version": version, "flags": list(flags)}


@pytest.fixture
def rules_factory():
    return RulesFactory


@pytest.fixture
def rules_document():
    """Rule set with a targeted boolean flag, a string flag and a number flag."""
    return RulesFactory.document(
        RulesFactory.flag(
            "us-checkout",
            False,
            rules=[
                {
                    "description": "US customers",
                    "clauses": [RulesFactory.clause("country", "equals", "US")],
                    "value": RulesFactory.value(True),
                }
            ],
        ),
        RulesFactory.flag("banner-text", "Welcome"),
        RulesFactory.flag("max-items", 25),
    )


@pytest.fixture
def us_context():
    return Context("user", name="Jane", identifier="user-123", attributes=[Attribute("country", ["US"])])


@pytest.fixture
def ca_context():
    return Context("user", identifier="user-456", attributes=[Attribute("country", ["CA"])])


@pytest.fixture
def mock_api_client(rules_document):
    """ApiClient double returning ``rules_document``."""
    client = MagicMock(spec=ApiClient)
    client.get_rules = AsyncMock(return_value=RulesDocument.model_validate(rules_document))
    client.report_usage = AsyncMock(return_value=None)
    return client


def serialized(document: Dict[str, Any]) -> str:
    return json.dumps(document)
