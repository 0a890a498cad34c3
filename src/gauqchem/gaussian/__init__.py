from . import fields
from . import request
from . import report

__all__ = [
    "fields",
    "request",
    "report",
]
