"""MCP server and tools."""
