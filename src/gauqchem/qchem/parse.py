# src/gauqchem/qchem/parse.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional

import numpy as np

from gauqchem.errors import (
    EnergyParseError,
    EnergyTagNotFound,
    SectionMalformed,
    SectionNotFound,
    SectionTruncated,
)
from gauqchem.gaussian.request import Calculation

ENERGY_TAG = "Total energy in the final basis set ="
GRADIENT_START = "Gradient of SCF Energy"
GRADIENT_END = "Max gradient component"
HESSIAN_START = "Hessian of the SCF Energy"
HESSIAN_END = "VIBRATIONAL ANALYSIS"

# Q-Chem prints matrices six columns at a time.
WRAP = 6


# ===================== Models =====================
@dataclass(frozen=True, eq=False)
class ParsedResult:
    energy: float
    gradient: Optional[np.ndarray] = None  # (natoms, 3), Eh/bohr
    hessian: Optional[np.ndarray] = None   # (3N, 3N), symmetric


# ===================== Section helpers =====================
def section_lines(text: str, start: str, end: Optional[str] = None) -> List[str]:
    """
    Lines strictly between the first line starting with ``start`` and the
    next line containing ``end`` (or the end of the text).
    """
    lines = iter(text.splitlines())
    for line in lines:
        if line.lstrip().startswith(start):
            break
    else:
        raise SectionNotFound(start)

    out = []
    for line in lines:
        if end is not None and end in line:
            break
        out.append(line)
    return out


def section_floats(lines: Iterable[str], tag: str, expected: int) -> List[float]:
    """
    Parse the numeric payload of a section.

    Row and column labels are plain integers; only tokens containing a
    decimal point are data.
    """
    vals = []
    for line in lines:
        for tok in line.split():
            if "." not in tok:
                continue
            try:
                vals.append(float(tok))
            except ValueError:
                raise SectionMalformed(tag, f"non-numeric token {tok!r}") from None

    if len(vals) < expected:
        raise SectionTruncated(tag, expected, len(vals))
    return vals[:expected]


# ===================== Energy =====================
def parse_energy(text: str) -> float:
    for line in text.splitlines():
        s = line.lstrip()
        if s.startswith(ENERGY_TAG):
            rest = s[len(ENERGY_TAG):].strip()
            try:
                return float(rest)
            except ValueError:
                raise EnergyParseError(
                    f"failed to parse energy {rest!r} into float"
                ) from None
    raise EnergyTagNotFound("no energy line found in qchem output")


# ===================== Gradient =====================
def _gradient_order(natoms: int) -> Iterator[tuple]:
    # blocks of up to six atoms; x row, then y row, then z row
    for start in range(0, natoms, WRAP):
        stop = min(start + WRAP, natoms)
        for xyz in range(3):
            for atom in range(start, stop):
                yield atom, xyz


def unwrap_gradient(values: Iterable[float], natoms: int) -> np.ndarray:
    grad = np.zeros((natoms, 3))
    vals = iter(values)
    for atom, xyz in _gradient_order(natoms):
        grad[atom, xyz] = next(vals)
    return grad


def wrap_gradient_rows(grad: np.ndarray) -> List[str]:
    """Render a (natoms, 3) gradient the way Q-Chem prints it."""
    grad = np.asarray(grad, dtype=float)
    natoms = grad.shape[0]
    rows = []
    for start in range(0, natoms, WRAP):
        stop = min(start + WRAP, natoms)
        rows.append("".join(f"{i + 1:12d}" for i in range(start, stop)))
        for xyz in range(3):
            rows.append(
                f"{xyz + 1:4d}" + "".join(f"{grad[a, xyz]:12.7f}" for a in range(start, stop))
            )
    return rows


def parse_gradient(text: str, natoms: int) -> np.ndarray:
    lines = section_lines(text, GRADIENT_START, GRADIENT_END)
    vals = section_floats(lines, GRADIENT_START, 3 * natoms)
    return unwrap_gradient(vals, natoms)


# ===================== Hessian =====================
def _hessian_order(ncoord: int) -> Iterator[tuple]:
    # column bands left to right; every row once per band, lower triangle only
    for col0 in range(0, ncoord, WRAP):
        for row in range(ncoord):
            for col in range(col0, min(col0 + WRAP, row + 1)):
                yield row, col


def unwrap_hessian(values: Iterable[float], ncoord: int) -> np.ndarray:
    hess = np.zeros((ncoord, ncoord))
    vals = iter(values)
    for row, col in _hessian_order(ncoord):
        hess[row, col] = next(vals)
    return hess + np.tril(hess, -1).T


def wrap_hessian_rows(hess: np.ndarray) -> List[str]:
    """Render the lower triangle of ``hess`` in Q-Chem's banded layout."""
    hess = np.asarray(hess, dtype=float)
    ncoord = hess.shape[0]
    rows = []
    for col0 in range(0, ncoord, WRAP):
        cols = range(col0, min(col0 + WRAP, ncoord))
        rows.append("".join(f"{c + 1:12d}" for c in cols))
        for row in range(col0, ncoord):
            band = [c for c in cols if c <= row]
            rows.append(f"{row + 1:4d}" + "".join(f"{hess[row, c]:12.7f}" for c in band))
    return rows


def parse_hessian(text: str, natoms: int) -> np.ndarray:
    ncoord = 3 * natoms
    nel = ncoord * (ncoord + 1) // 2
    lines = section_lines(text, HESSIAN_START, HESSIAN_END)
    vals = section_floats(lines, HESSIAN_START, nel)
    return unwrap_hessian(vals, ncoord)


# ===================== Report =====================
def parse_qchem_output(text: str, calc: Calculation) -> ParsedResult:
    level = calc.level
    energy = parse_energy(text)
    gradient = parse_gradient(text, calc.natoms) if level.has_gradient else None
    hessian = parse_hessian(text, calc.natoms) if level.has_hessian else None
    return ParsedResult(energy=energy, gradient=gradient, hessian=hessian)
