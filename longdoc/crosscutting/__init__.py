"""Crosscutting: config, logging, errores, métricas, timings y observer."""
