"""Browser-facing pages served alongside the MCP HTTP endpoint."""
