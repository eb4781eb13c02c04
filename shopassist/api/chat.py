"""
API endpoints for the storefront assistant

Endpoints:
- POST /api/v1/assistant/chat - Process natural language storefront queries
- GET  /api/v1/assistant/chat/health - Chat configuration status
- GET  /api/v1/assistant/tools - Tool catalogue
- POST /api/v1/assistant/tools/{tool_name} - Invoke one tool directly
- GET  /api/v1/assistant/context - Page, cart and login context

Author: TM3
Date: 2026-10-16
"""
from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import BaseModel, Field
from typing import List, Optional, Literal, Dict, Any
from datetime import datetime, timezone
import logging

from shopassist.core.config import settings
from shopassist.services.claude_chat_service import get_chat_service
from shopassist.services.context_helpers import build_context, get_user_info
from shopassist.services.store_chat_tools import ADMIN_TOOLS, TOOLS, TOOL_FUNCTIONS, invoke_tool, tools_for
from shopassist.services.tool_context import ToolContext, build_tool_context

logger = logging.getLogger(__name__)

# ============================================================================
# ROUTER
# ============================================================================

router = APIRouter(prefix="/api/v1/assistant", tags=["assistant"])

_tool_context: Optional[ToolContext] = None


def get_tool_context() -> ToolContext:
    """Shared ToolContext built from settings on first use"""
    global _tool_context
    if _tool_context is None:
        _tool_context = build_tool_context(settings)
    return _tool_context


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


# ============================================================================
# REQUEST/RESPONSE MODELS
# ============================================================================

class ChatMessage(BaseModel):
    """A single message in the conversation history"""
    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    """Request body for chat endpoint"""
    message: str = Field(..., min_length=1, max_length=1000, description="User's question")
    history: List[ChatMessage] = Field(default=[], description="Conversation history")
    path: Optional[str] = Field(default=None, description="Storefront path the user is on")
    query_string: str = Field(default="", description="Storefront query string, without '?'")


class ChatResponse(BaseModel):
    """Response from chat endpoint"""
    success: bool
    response: str
    tools_used: List[str]
    model: str
    usage: dict
    timestamp: str


# ============================================================================
# ENDPOINT: POST /api/v1/assistant/chat
# ============================================================================

@router.post("/chat", response_model=ChatResponse)
async def chat(request: ChatRequest, ctx: ToolContext = Depends(get_tool_context)):
    """
    Process a natural language query about the store.

    Examples:
    - "Show me gaming mice under $50"
    - "Add this product to my cart"
    - "What do people complain about in the reviews?"
    - "How much did I spend in the last 90 days?"

    Args:
        request: ChatRequest with message, optional history and page location

    Returns:
        ChatResponse with AI-generated response
    """
    try:
        logger.info(f"Chat request received: {request.message[:50]}...")

        chat_service = get_chat_service()

        history = [{"role": msg.role, "content": msg.content} for msg in request.history]

        result = await chat_service.process_query(
            ctx,
            message=request.message,
            history=history,
            path=request.path,
            query_string=request.query_string
        )

        return ChatResponse(
            success=True,
            response=result.response,
            tools_used=result.tools_used,
            model=result.model,
            usage={
                "input_tokens": result.input_tokens,
                "output_tokens": result.output_tokens,
                "total_tokens": result.input_tokens + result.output_tokens,
                "estimated_cost_usd": result.estimated_cost_usd,
                "context_messages": result.context_messages
            },
            timestamp=_timestamp()
        )

    except ValueError as e:
        # API key not configured
        logger.error(f"Configuration error: {str(e)}")
        raise HTTPException(
            status_code=500,
            detail="Chat service not configured. Please contact administrator."
        )

    except Exception as e:
        logger.error(f"Chat error: {str(e)}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail=f"Error processing chat: {str(e)}"
        )


# ============================================================================
# ENDPOINT: GET /api/v1/assistant/chat/health
# ============================================================================

@router.get("/chat/health")
async def chat_health():
    """
    Health check for chat service.

    Returns service status and configuration info.
    """
    api_key_configured = bool(settings.ANTHROPIC_API_KEY)

    return {
        "status": "healthy" if api_key_configured else "not_configured",
        "api_key_configured": api_key_configured,
        "model": settings.CLAUDE_MODEL,
        "store_api_url": settings.STORE_API_URL,
        "timestamp": _timestamp()
    }


# ============================================================================
# ENDPOINTS: tools
# ============================================================================

@router.get("/tools")
async def list_tools():
    """Every tool with its description, input schema and admin flag"""
    return {
        "count": len(TOOLS),
        "tools": [
            {
                "name": tool["name"],
                "description": tool["description"],
                "input_schema": tool["input_schema"],
                "admin_only": tool["name"] in ADMIN_TOOLS
            }
            for tool in TOOLS
        ]
    }


@router.post("/tools/{tool_name}")
async def run_tool(
    tool_name: str,
    params: Dict[str, Any] = Body(default={}),
    ctx: ToolContext = Depends(get_tool_context)
):
    """
    Invoke one tool directly, e.g. from an "Add to cart" button.

    The body is the tool's input object. The response is the tool's
    envelope; a failed tool still answers 200 with success=false. Admin
    tools answer 403 unless the stored user is an administrator.
    """
    if tool_name not in TOOL_FUNCTIONS:
        raise HTTPException(status_code=404, detail=f"Tool '{tool_name}' not found")

    is_admin = get_user_info(ctx.storage).get("isAdmin", False)
    if tool_name not in {tool["name"] for tool in tools_for(is_admin)}:
        logger.warning(f"Refused admin tool {tool_name} for non-admin user")
        raise HTTPException(status_code=403, detail=f"Tool '{tool_name}' is not available for this user")

    try:
        result = await invoke_tool(ctx, tool_name, params)
    except TypeError as e:
        raise HTTPException(status_code=422, detail=f"Invalid parameters for {tool_name}: {str(e)}")

    return result.to_dict()


# ============================================================================
# ENDPOINT: GET /api/v1/assistant/context
# ============================================================================

@router.get("/context")
async def get_context(
    path: str = "/",
    query_string: str = "",
    ctx: ToolContext = Depends(get_tool_context)
):
    """Page, cart and login context as the assistant sees it"""
    return build_context(ctx.storage, path, query_string)
