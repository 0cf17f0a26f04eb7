"""Registro de ciudadanos en albergues y distribución de medicamentos."""

__version__ = '1.0.0'
