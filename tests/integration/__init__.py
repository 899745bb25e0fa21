"""
Integration tests for the Code Review Service.

Test components together through the FastAPI app (TestClient):
- Review endpoint (prompt → scripted model → retry → normalizer → JSON)
- Error mapping (400, 499, 503, provider status passthrough)
- Health and root endpoints
"""
