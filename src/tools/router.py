"""HTTP routes for tool discovery and invocation."""

import json
from typing import Any

from fastapi import APIRouter, HTTPException, Request, status
from pydantic import BaseModel

from src.exceptions import ValidationError
from src.logging_config import get_logger
from src.tools.registry import ToolRegistry

logger = get_logger(__name__)


def create_tools_router(registry: ToolRegistry) -> APIRouter:
    """Build the discovery and invocation routes for a registry.

    Args:
        registry: Tools to expose.

    Returns:
        Router with `GET /discovery` and `POST /tools/{name}`.
    """
    router = APIRouter(tags=["Tools"])

    @router.get("/discovery")
    async def discovery() -> dict[str, Any]:
        """List the available tools and their parameter schemas."""
        return registry.discovery()

    @router.post("/tools/{name}")
    async def invoke_tool(name: str, request: Request) -> Any:
        """Invoke a registered tool.

        The body is either `{"parameters": {...}}` or the bare parameter
        object.
        """
        registered = registry.get(name)
        if registered is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail={"error": f"Unknown tool: {name}"},
            )

        try:
            body = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise ValidationError(
                "Request body must be valid JSON",
                details={"tool": name},
            ) from e

        raw = body.get("parameters", body) if isinstance(body, dict) else body
        parameters = registered.validate(raw)

        logger.info(f"Invoking tool: {name}")
        result = await registered.handler(parameters, request)

        if isinstance(result, BaseModel):
            return result.model_dump(mode="json", exclude_none=True)
        return result

    return router
