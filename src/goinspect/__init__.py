"""go-inspector - structured summaries of Go declarations for AI coding agents."""

__version__ = "0.1.0"
