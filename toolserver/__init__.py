"""toolserver — MCP tool server: typed tools, one introspection resource."""
__version__ = "1.0.0"
