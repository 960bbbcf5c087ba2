"""
Infrastructure Layer

Adapters concretos de los puertos del dominio: backends de generación de texto
(Anthropic / Google / Fake) y el loader de instrucciones de sistema versionadas.
"""
