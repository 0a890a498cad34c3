"""
Reader for Q-Chem formatted checkpoint (.fchk) files.

The fchk layout is the Gaussian one: a record header line
``<label>  R   N=  <count>`` followed by the values five per line, or a
scalar record with the value at the end of the header line.
"""
from __future__ import annotations

import re
from typing import List

import numpy as np

from gauqchem.errors import SectionMalformed, SectionNotFound
from gauqchem.gaussian.request import Calculation
from gauqchem.qchem.parse import ParsedResult, section_floats

ENERGY_RECORD = "Total Energy"
GRADIENT_RECORD = "Cartesian Gradient"
HESSIAN_RECORD = "Cartesian Force Constants"

_ARRAY_HDR = re.compile(r"^(?P<label>.{40})\s*(?P<kind>[IRCLH])\s+N=\s*(?P<count>\d+)\s*$")
_SCALAR_HDR = re.compile(r"^(?P<label>.{40})\s*(?P<kind>[IR])\s+(?P<value>\S+)\s*$")


def _find_header(lines: List[str], label: str) -> int:
    for i, line in enumerate(lines):
        if line[:40].strip() == label:
            return i
    raise SectionNotFound(label)


def read_scalar(text: str, label: str) -> float:
    lines = text.splitlines()
    i = _find_header(lines, label)
    m = _SCALAR_HDR.match(lines[i])
    if not m:
        raise SectionMalformed(label, f"not a scalar record: {lines[i].strip()!r}")
    try:
        return float(m.group("value"))
    except ValueError:
        raise SectionMalformed(label, f"non-numeric value {m.group('value')!r}") from None


def read_array(text: str, label: str, expected: int) -> List[float]:
    lines = text.splitlines()
    i = _find_header(lines, label)
    m = _ARRAY_HDR.match(lines[i])
    if not m:
        raise SectionMalformed(label, f"not an array record: {lines[i].strip()!r}")

    count = int(m.group("count"))
    if count != expected:
        raise SectionMalformed(label, f"record holds {count} values, expected {expected}")

    # payload lines run until the next header (first column is a letter)
    body = []
    for line in lines[i + 1:]:
        if line[:1].isalpha():
            break
        body.append(line)
    return section_floats(body, label, expected)


def parse_qchem_fchk(text: str, calc: Calculation) -> ParsedResult:
    level = calc.level
    energy = read_scalar(text, ENERGY_RECORD)

    gradient = None
    if level.has_gradient:
        gradient = np.array(read_array(text, GRADIENT_RECORD, calc.ncoord)).reshape(calc.natoms, 3)

    hessian = None
    if level.has_hessian:
        n = calc.ncoord
        packed = read_array(text, HESSIAN_RECORD, n * (n + 1) // 2)
        hessian = np.zeros((n, n))
        hessian[np.tril_indices(n)] = packed
        hessian = hessian + np.tril(hessian, -1).T

    return ParsedResult(energy=energy, gradient=gradient, hessian=hessian)
