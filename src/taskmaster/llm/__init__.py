"""
Generation layer.

Components:
- client.py: OpenAI-compatible chat-completions call (GenerationError on any failure)
- parsing.py: lenient parsing of freeform model output
- assistant.py: task intents with per-operation fallback values
"""
