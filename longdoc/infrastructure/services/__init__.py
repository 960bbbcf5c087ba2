"""
Infrastructure Services (Infrastructure Layer)

Facade/Barrel del paquete `infrastructure.services`: re-exporta los adapters
de generación de texto y sus utilidades (retry, normalización HTML) para que
el composition root importe desde un único lugar.

Constraints:
  - No contener lógica (solo re-export)
"""

# ---------------------------------------------------------------------------
# Text generation backends
# ---------------------------------------------------------------------------
from .anthropic_backend import AnthropicTextBackend  # noqa: F401
from .fake_backend import FakeTextBackend, RecordedCall  # noqa: F401
from .google_backend import GoogleTextBackend  # noqa: F401

# ---------------------------------------------------------------------------
# Output formatting / resilience
# ---------------------------------------------------------------------------
from .html_format import markdown_to_html  # noqa: F401
from .retry import (  # noqa: F401
    create_retry_decorator,
    get_http_status_code,
    is_transient_error,
)

__all__ = [
    "AnthropicTextBackend",
    "FakeTextBackend",
    "GoogleTextBackend",
    "RecordedCall",
    "create_retry_decorator",
    "get_http_status_code",
    "is_transient_error",
    "markdown_to_html",
]
