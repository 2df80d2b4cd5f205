# models/errors.py

class EpidemicModelError(Exception):
    """
    Base de los errores del modelo epidemico.
    """


class InvalidSize(EpidemicModelError, ValueError):
    """La grilla se construyo con un lado no positivo."""


class IndexOutOfBounds(EpidemicModelError, IndexError):
    """Un indice de celda cae fuera de [0, n)."""


class InvalidParameter(EpidemicModelError, ValueError):
    """Una tasa o parametro de corrida fuera de su dominio."""
