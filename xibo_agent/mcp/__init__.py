"""MCP server exposing the Xibo tools."""
