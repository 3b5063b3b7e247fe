"""Test Runner MCP Server - protocol bridge to a local test runner."""

__version__ = "1.0.0"
