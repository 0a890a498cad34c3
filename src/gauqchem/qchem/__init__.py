from . import parse
from . import fchk
from . import render
from . import run

__all__ = [
    "parse",
    "fchk",
    "render",
    "run",
]
