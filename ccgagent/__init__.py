"""CCG Agent dispatcher.

Exposes Codex and Gemini (via codeagent-wrapper) and Nano Banana image
generation (via nanobanana-wrapper) as MCP tools, with keyword-based routing
between the two code backends.
"""

__version__ = "1.0.0"
