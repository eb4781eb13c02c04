"""
Claude Chat Service for the ShopAssist storefront

This module integrates with Claude AI (Anthropic) so shoppers and store
admins can search, manage the cart, read reviews, check orders and edit
the catalog in natural language.

Features:
- System prompt with today's date and the shopper's page/cart/login context
- 15 storefront tools (admin tools only offered to admins)
- Tool use loop for multi-step queries
- Conversation history support

Author: TM3
Date: 2026-10-16
"""
import json
import logging
from typing import List, Dict, Any, Optional, Tuple
from dataclasses import dataclass

import anthropic

from shopassist.core.config import settings
from shopassist.services.context_helpers import build_context
from shopassist.services.store_chat_tools import execute_tool, tools_for
from shopassist.services.tool_context import ToolContext

logger = logging.getLogger(__name__)


def estimate_tokens(text: str) -> int:
    """Rough token estimation: ~4 chars per token."""
    return len(text) // 4


def limit_history(
    history: List[Dict[str, str]],
    max_messages: Optional[int] = None,
    max_tokens: Optional[int] = None
) -> Tuple[List[Dict[str, str]], int]:
    """
    Limit conversation history to prevent context explosion.

    Strategy:
    1. Keep at most max_messages recent messages
    2. Further trim if estimated tokens exceed max_tokens

    Returns:
        Tuple of (limited_history, estimated_tokens)
    """
    if not history:
        return [], 0

    max_messages = max_messages or settings.MAX_HISTORY_MESSAGES
    max_tokens = max_tokens or settings.MAX_HISTORY_TOKENS

    limited = history[-max_messages:] if len(history) > max_messages else history.copy()

    total_tokens = sum(estimate_tokens(msg.get("content", "")) for msg in limited)

    while total_tokens > max_tokens and len(limited) > 2:
        # Remove oldest messages (keep at least 2 for context)
        removed = limited.pop(0)
        total_tokens -= estimate_tokens(removed.get("content", ""))

    messages_trimmed = len(history) - len(limited)
    if messages_trimmed > 0:
        logger.info(f"History trimmed: {len(history)} -> {len(limited)} messages (~{total_tokens} tokens)")

    return limited, total_tokens


def get_system_prompt(context: Dict[str, Any], today: str) -> str:
    """System prompt with the current date and the shopper's situation."""
    is_admin = context.get("userInfo", {}).get("isAdmin", False)
    admin_section = """
## Admin Tools
This user is a store administrator. You may use update_product_details,
get_product_for_admin, bulk_update_products and update_product_stock.
Before a change, show the admin what will change and confirm it. After a
change, report the old and new values returned by the tool.
""" if is_admin else ""

    return f"""You are a friendly shopping assistant for an online electronics store.

## IMPORTANT: Current Date
TODAY IS: {today}
Use this date for every time calculation ("last 30 days", "this year").

## Current Context
```json
{json.dumps(context, indent=2, default=str)}
```
When the user says "this product" on a product page, use the productId above.
When they ask about "my cart", use the cart state above or the cart tools.

## Your Role
- Find products by keyword, price range, category and rating
- Add, remove and clear cart items
- Summarise reviews, list pros and cons, answer questions about reviews
- Look up order history, order details and spending statistics
{admin_section}
## Response Format
- Use markdown tables for tabular data
- Always mention price and stock when recommending products
- Be concise but informative

## Accuracy Rules
1. **NEVER invent data** - Only report what the tools return
2. **NEVER guess dates** - Use today's date ({today}) as reference
3. If a tool returns success=false, tell the user what went wrong
4. **If in doubt, ASK** - Ask for a product or order ID rather than guessing
"""


# ============================================================================
# DATA CLASSES
# ============================================================================

@dataclass
class ChatResult:
    """Result of processing a chat query"""
    response: str
    tools_used: List[str]
    model: str
    input_tokens: int
    output_tokens: int
    estimated_cost_usd: float = 0.0
    context_messages: int = 0

    def __post_init__(self):
        # Claude Haiku 4.5 pricing: $1/1M input, $5/1M output
        input_cost = (self.input_tokens / 1_000_000) * 1.0
        output_cost = (self.output_tokens / 1_000_000) * 5.0
        self.estimated_cost_usd = round(input_cost + output_cost, 6)


# ============================================================================
# MAIN SERVICE CLASS
# ============================================================================

class ClaudeChatService:
    """
    Service for processing natural language storefront queries using Claude AI.
    """

    def __init__(self, client: Optional[anthropic.AsyncAnthropic] = None):
        """Initialize the Claude client"""
        if client is None:
            if not settings.ANTHROPIC_API_KEY:
                raise ValueError("ANTHROPIC_API_KEY environment variable not set")
            client = anthropic.AsyncAnthropic(api_key=settings.ANTHROPIC_API_KEY)

        self.client = client
        self.model = settings.CLAUDE_MODEL
        self.max_tokens = settings.MAX_TOKENS
        logger.info(f"ClaudeChatService initialized with model: {self.model}")

    async def process_query(
        self,
        ctx: ToolContext,
        message: str,
        history: Optional[List[Dict[str, str]]] = None,
        path: Optional[str] = None,
        query_string: str = ""
    ) -> ChatResult:
        """
        Process a natural language query about the store.

        Args:
            ctx: Collaborators the tools run against
            message: User's question in natural language
            history: Optional conversation history (list of {"role": "user"|"assistant", "content": "..."})
            path: Storefront path the user is on
            query_string: Storefront query string

        Returns:
            ChatResult with response text and metadata
        """
        tools_used = []
        total_input_tokens = 0
        total_output_tokens = 0
        history_tokens = 0

        context = build_context(ctx.storage, path, query_string)
        system = get_system_prompt(context, ctx.now().strftime("%Y-%m-%d"))
        tools = tools_for(context["userInfo"].get("isAdmin", False))
        allowed = {tool["name"] for tool in tools}

        messages = []

        if history:
            limited_history, history_tokens = limit_history(history)
            for msg in limited_history:
                messages.append({
                    "role": msg["role"],
                    "content": msg["content"]
                })

        messages.append({
            "role": "user",
            "content": message
        })

        logger.info(f"Context: {len(messages)} messages, ~{history_tokens + estimate_tokens(message)} history tokens")
        logger.info(f"Processing query: {message[:100]}...")

        response = await self.client.messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            system=system,
            tools=tools,
            messages=messages
        )

        total_input_tokens += response.usage.input_tokens
        total_output_tokens += response.usage.output_tokens

        # Tool use loop
        while response.stop_reason == "tool_use":
            tool_use_blocks = [
                block for block in response.content
                if block.type == "tool_use"
            ]

            tool_results = []
            for tool_use in tool_use_blocks:
                tool_name = tool_use.name
                tool_input = tool_use.input

                logger.info(f"Executing tool: {tool_name} with input: {tool_input}")
                tools_used.append(tool_name)

                if tool_name in allowed:
                    result = await execute_tool(ctx, tool_name, tool_input)
                else:
                    logger.warning(f"Tool {tool_name} requested without permission")
                    result = json.dumps({"error": f"Tool '{tool_name}' is not available for this user"})

                tool_results.append({
                    "type": "tool_result",
                    "tool_use_id": tool_use.id,
                    "content": result
                })

            messages.append({
                "role": "assistant",
                "content": response.content
            })
            messages.append({
                "role": "user",
                "content": tool_results
            })

            response = await self.client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                system=system,
                tools=tools,
                messages=messages
            )

            total_input_tokens += response.usage.input_tokens
            total_output_tokens += response.usage.output_tokens

        text_content = None
        for block in response.content:
            if hasattr(block, 'text'):
                text_content = block.text
                break

        if not text_content:
            text_content = "I couldn't generate a response. Please try rephrasing your question."

        logger.info(f"Query completed. Tools used: {tools_used}, Tokens: {total_input_tokens}/{total_output_tokens}")

        return ChatResult(
            response=text_content,
            tools_used=tools_used,
            model=self.model,
            input_tokens=total_input_tokens,
            output_tokens=total_output_tokens,
            context_messages=len(messages)
        )


# ============================================================================
# SINGLETON INSTANCE
# ============================================================================

_service_instance: Optional[ClaudeChatService] = None


def get_chat_service() -> ClaudeChatService:
    """
    Get the singleton chat service instance.

    Returns:
        ClaudeChatService instance
    """
    global _service_instance
    if _service_instance is None:
        _service_instance = ClaudeChatService()
    return _service_instance
