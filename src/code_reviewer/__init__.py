"""
Code Review Service.

Forwards a submitted code snippet to a generative model (Gemini) and returns
a structured Markdown review:
- Prompt with a fixed 9-section reviewer schema
- Retry on model overload (503) with exponential backoff and jitter
- Normalization of the provider's response into plain text

Architecture: FastAPI orchestrator + Gemini REST client + retry engine
"""

__version__ = "0.1.0"
