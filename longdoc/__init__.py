"""
longdoc: procesamiento de documentos largos con un modelo de lenguaje.

Parte el documento en segmentos por fronteras semánticas, procesa cada uno
(resumen o respuesta a una pregunta) y recombina los parciales en una única
respuesta, con fallback determinista si la síntesis falla.
"""

__version__ = "0.1.0"
