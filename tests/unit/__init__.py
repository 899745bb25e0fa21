"""
Unit tests for the Code Review Service.

Test individual components in isolation:
- Backoff policy and cancellable delay
- Transient-error classifier
- Retry engine (attempt loop, terminal errors, cancellation)
- Response normalizer and prompt builder
- Gemini client (httpx.MockTransport)
- Review service
"""
