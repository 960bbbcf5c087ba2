"""
Prompt Infrastructure (Infrastructure Layer)

Facade del paquete `infrastructure.prompts`: carga de instrucciones de sistema
versionadas (archivos .md con frontmatter).
"""

from .loader import PromptLoader, PromptMetadata, get_prompt_loader, parse_frontmatter

__all__ = ["PromptLoader", "PromptMetadata", "get_prompt_loader", "parse_frontmatter"]
