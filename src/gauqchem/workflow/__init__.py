"""
Translation pipeline for one Gaussian external step.

Exports the public API:
- translate
- translate_files
"""
from .translate import translate, translate_files
