"""Test package for the Document Assistant.

Unit tests cover isolated logic; integration tests drive the FastAPI app.

Structure:
    - unit/: Normalizer, parsers, adapter, vision helper, session
    - integration/: HTTP endpoints through ASGITransport

No network access needed: the OpenAI client is always mocked and sample
files are generated in memory. Leverages pytest with pytest-check for soft
assertions.
"""
