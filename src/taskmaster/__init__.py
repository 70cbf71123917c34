"""Task Master MCP: AI-assisted, in-memory task tracking served over MCP (stdio and HTTP/SSE)."""

__version__ = "1.0.0"
