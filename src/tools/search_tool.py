"""The `phase2-search` tool."""

from typing import Any

import pydantic
from fastapi import Request

from src.api.dependencies import get_orchestrator
from src.exceptions import ValidationError
from src.search.models import Query, SearchResponse
from src.tools.registry import Parameter, ParameterType, tool

TOOL_NAME = "phase2-search"


@tool(
    name=TOOL_NAME,
    description=(
        "Searches the Phase2 Technology website content using semantic vector "
        "search. Returns relevant pages and content based on the query."
    ),
    parameters=[
        Parameter(
            name="query",
            type=ParameterType.STRING,
            description="The search query to find relevant Phase2 Technology content",
            required=True,
        ),
        Parameter(
            name="limit",
            type=ParameterType.INTEGER,
            description="Maximum number of results to return (default: 5, max: 20)",
            required=False,
        ),
    ],
)
async def phase2_search(parameters: dict[str, Any], request: Request) -> SearchResponse:
    """Run a semantic search over the Phase2 website collection."""
    orchestrator = get_orchestrator(request)

    try:
        query = Query(text=parameters["query"], limit=parameters.get("limit"))
    except pydantic.ValidationError as e:
        raise ValidationError(
            "Invalid search query",
            details={"errors": [err["msg"] for err in e.errors()]},
        ) from e

    return await orchestrator.search(query)
