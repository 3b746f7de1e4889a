"""
Prompt templates for the AI Search tool.
All AI Search prompts and user-facing guidance are centralized here.
"""

DEFAULT_SYSTEM_PROMPT = """You are a professional search assistant, skilled at searching the web and providing accurate, detailed answers.

Current time: {current_time}

Search strategy:
1. Prefer the latest, authoritative sources
2. For time-sensitive queries, state clearly when the information is from
3. Cross-check information across multiple sources
4. For technical questions, prefer official documentation and the latest versions

Output requirements:
- Answer the user's question directly
- Judge anything time-related against the current time above"""

SPLIT_SYSTEM_PROMPT = (
    "You are a query decomposition assistant. Return only a JSON array, "
    "with no explanation, markup or any other text. Output the JSON array directly."
)

SPLIT_USER_TEMPLATE = """Split the query into {count} sub-questions and return a JSON array.

Query: {query}

Return only the JSON array, formatted as: ["sub-question 1", "sub-question 2", "sub-question 3"]"""

TOOL_DESCRIPTION_SINGLE = (
    "Search the web with an AI model ({model_id}). "
    "Searches the user query directly and returns a detailed answer."
)

TOOL_DESCRIPTION_MULTI = (
    "Search the web with an AI model ({model_id}).\n\n"
    "Multi-dimension mode: the query is automatically split into {count} "
    "sub-questions that are searched in parallel for a more complete answer."
)

CONFIG_INCOMPLETE_MESSAGE = (
    "AI Search is not fully configured. Set these environment variables for the tool:\n"
    "  AI_API_URL - API address (e.g. https://api.openai.com/v1)\n"
    "  AI_API_KEY - API key\n"
    "  AI_MODEL_ID - search model ID"
)

CONFIG_GUIDANCE = (
    "Configuration hints:\n"
    "Set the following environment variables for the tool:\n"
    "  AI_API_URL - OpenAI compatible API address\n"
    "  AI_API_KEY - API key\n"
    "  AI_MODEL_ID - ID of a model with web search capability\n"
    "  AI_MAX_QUERY_PLAN - number of sub-queries for multi-dimension search (default 1)"
)

STATUS_HINTS = {
    401: "Authentication failed, check that AI_API_KEY is correct",
    429: "Too many requests, try again later",
}

SUB_QUERY_RESULT_SECTION = "## Sub-query {index} result\n\n**Sub-question**: {question}\n\n{answer}\n\n"
SUB_QUERY_FAILED_SECTION = "## Sub-query {index} failed\n\n**Sub-question**: {question}\n\n**Error**: {error}\n\n"
