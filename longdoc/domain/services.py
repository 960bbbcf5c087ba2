"""
===============================================================================
TARJETA CRC — domain/services.py
===============================================================================

Módulo:
    Puertos de Servicios Externos (Protocols)

Responsabilidades:
    - Definir el contrato del backend de generación de texto.
    - Definir el contrato del proveedor de instrucciones de sistema.
    - Definir el colaborador de observabilidad inyectado en el pipeline.

Colaboradores:
    - infrastructure/services/*: backends concretos (Anthropic / Google / Fake).
    - infrastructure/prompts: PromptLoader implementa SystemPromptProvider.
    - crosscutting/observer.py: StructuredPipelineObserver.
    - application/*: consumen estos puertos.

Reglas:
    - SOLO interfaces: nada de implementación.
    - Firmas estables y provider-agnostic.
===============================================================================
"""

from __future__ import annotations

from typing import Any, Optional, Protocol

from .entities import Task


class TextGenerationBackend(Protocol):
    """Contrato para generación de texto (LLM)."""

    def generate(
        self,
        system_instruction: str,
        user_message: str,
        *,
        timeout_seconds: Optional[float] = None,
    ) -> str:
        """
        Genera texto a partir de instrucción de sistema + mensaje de usuario.

        Raises:
            BackendError: rate limit, respuesta malformada, timeout u otra falla.
        """
        ...


class SystemPromptProvider(Protocol):
    """Contrato para elegir la instrucción de sistema según documento y tarea."""

    def system_instruction(self, *, is_transcript: bool, task: Task) -> str: ...


class PipelineObserver(Protocol):
    """Colaborador de observabilidad: eventos estructurados con nivel."""

    def emit(self, event: str, *, level: int = ..., **fields: Any) -> None: ...
