import json
from typing import Any

import pytest


@pytest.fixture
def json_event():
    """Build an API Gateway proxy event carrying a JSON body."""

    def _event(body: Any, *, raw: str | None = None, content_type: str = "application/json"):
        return {
            "httpMethod": "POST",
            "path": "/v1/images",
            "headers": {"Content-Type": content_type},
            "body": raw if raw is not None else json.dumps(body),
            "isBase64Encoded": False,
        }

    return _event
