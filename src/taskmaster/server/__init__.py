"""
Transports.

Components:
- tools.py: the named operations table and dispatcher
- mcp_server.py: MCP wiring and the stdio transport
- http_app.py: HTTP/SSE transport and JSON endpoints
"""
