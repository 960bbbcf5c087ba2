"""
===============================================================================
CRC CARD — application/splitter.py
===============================================================================

Componente:
  Splitter de texto por fronteras semánticas (Boundary-Aware Splitter)

Responsabilidades:
  - Partir un texto largo en segmentos de a lo sumo `max_segment_size` chars.
  - Preferir cortes naturales: párrafo > salto de línea > fin de oración.
  - Ser lossless: concatenar los segmentos reproduce el texto exacto.
  - Exponer:
      * split_text(...) -> list[Segment]
      * BoundaryAwareSplitter (servicio)

Colaboradores:
  - domain/entities.py (Segment)

Decisiones:
  - Sin strip ni overlap: el pipeline necesita el texto exacto por segmento.
  - Guard clauses + validación de parámetros (fail-fast).
  - Un corte nunca cae más allá del fin de la ventana ni sobre el cursor,
    así ningún segmento supera el máximo y ninguno queda vacío.
===============================================================================
"""

from __future__ import annotations

from typing import Final

from ..domain.entities import Segment

DEFAULT_MAX_SEGMENT_SIZE: Final[int] = 8000

_PARAGRAPH_BREAK: Final[str] = "\n\n"
_LINE_BREAK: Final[str] = "\n"
_SENTENCE_END: Final[str] = ". "

# Cuánto hacia atrás (desde el fin de la ventana) se acepta cada frontera.
_PARAGRAPH_LOOKBACK: Final[int] = 500
_LINE_LOOKBACK: Final[int] = 200
_SENTENCE_LOOKBACK: Final[int] = 100


def _rfind_boundary(
    text: str, sep: str, *, cursor: int, window_end: int, lookback: int, limit: int
) -> int:
    """
    Última ocurrencia de `sep` que empieza después del cursor, a menos de
    `lookback` chars del fin de ventana y antes de `limit`. -1 si no hay.
    """
    lo = max(cursor + 1, window_end - lookback + 1)
    if lo >= limit:
        return -1
    return text.rfind(sep, lo, limit)


def _find_break(text: str, cursor: int, window_end: int) -> int:
    """
    Elige el punto de corte para la ventana [cursor, window_end).

    Prioridad:
      1) "\\n\\n" → corta EN el salto de párrafo (el salto abre el siguiente segmento)
      2) "\\n"    → corta en el salto de línea
      3) ". "     → corta justo DESPUÉS del punto
      4) corte duro en window_end
    """
    # Los saltos pueden empezar exactamente en window_end: el corte queda en window_end.
    pos = _rfind_boundary(
        text,
        _PARAGRAPH_BREAK,
        cursor=cursor,
        window_end=window_end,
        lookback=_PARAGRAPH_LOOKBACK,
        limit=window_end + len(_PARAGRAPH_BREAK),
    )
    if pos != -1:
        return pos

    pos = _rfind_boundary(
        text,
        _LINE_BREAK,
        cursor=cursor,
        window_end=window_end,
        lookback=_LINE_LOOKBACK,
        limit=window_end + len(_LINE_BREAK),
    )
    if pos != -1:
        return pos

    # El punto queda con la oración anterior: pos + 1 debe ser <= window_end.
    pos = _rfind_boundary(
        text,
        _SENTENCE_END,
        cursor=cursor,
        window_end=window_end,
        lookback=_SENTENCE_LOOKBACK,
        limit=window_end + 1,
    )
    if pos != -1:
        return pos + 1

    return window_end


def _validate_max_segment_size(max_segment_size: int) -> None:
    if isinstance(max_segment_size, bool) or not isinstance(max_segment_size, int):
        raise ValueError(f"max_segment_size debe ser int. got={max_segment_size!r}")
    if max_segment_size <= 0:
        raise ValueError(f"max_segment_size debe ser > 0. got={max_segment_size}")


def split_text(
    text: str, max_segment_size: int = DEFAULT_MAX_SEGMENT_SIZE
) -> list[Segment]:
    """
    Parte `text` en segmentos contiguos, sin solapamiento ni pérdida.

    Casos:
      - len(text) < max_segment_size → un único segmento (incluye texto vacío).
      - Si no, ventanas sucesivas ajustadas a la mejor frontera disponible.
    """
    _validate_max_segment_size(max_segment_size)

    text = text or ""

    if len(text) < max_segment_size:
        return [Segment(index=0, text=text, start=0, end=len(text), total=1)]

    bounds: list[tuple[int, int]] = []
    cursor = 0
    length = len(text)

    while cursor < length:
        window_end = min(cursor + max_segment_size, length)
        if window_end < length:
            window_end = _find_break(text, cursor, window_end)
        bounds.append((cursor, window_end))
        cursor = window_end

    total = len(bounds)
    return [
        Segment(index=i, text=text[start:end], start=start, end=end, total=total)
        for i, (start, end) in enumerate(bounds)
    ]


class BoundaryAwareSplitter:
    """
    Servicio de splitting (inyectable en el pipeline).

    Diseño:
      - Valida parámetros al construir.
      - `split()` delega a `split_text`.
    """

    def __init__(self, max_segment_size: int = DEFAULT_MAX_SEGMENT_SIZE):
        _validate_max_segment_size(max_segment_size)
        self.max_segment_size = max_segment_size

    def split(self, text: str) -> list[Segment]:
        return split_text(text, max_segment_size=self.max_segment_size)
