"""Core helpers shared by every Xibo tool."""
