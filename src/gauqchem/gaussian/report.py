# gauqchem/gaussian/report.py

from __future__ import annotations

from typing import Iterable, List

import numpy as np

from gauqchem.errors import EncodingError
from gauqchem.gaussian.request import Calculation
from gauqchem.qchem.parse import ParsedResult

# Gaussian reads the external output with a fixed (3D20.12) layout.
FIELD_FORMAT = "{:+20.12f}"
FIELD_WIDTH = 20
FIELDS_PER_LINE = 3


def fmt(x: float) -> str:
    return FIELD_FORMAT.format(x)


def _zero_line() -> str:
    return fmt(0.0) * 3 + "\n"


def _wrap_fields(values: Iterable[float]) -> str:
    """Emit fields three per line; a trailing partial line is left as is."""
    out: List[str] = []
    count = 0
    for x in values:
        out.append(fmt(x))
        count += 1
        if count == FIELDS_PER_LINE:
            out.append("\n")
            count = 0
    return "".join(out)


def _check_shapes(calc: Calculation, result: ParsedResult) -> None:
    level = calc.level
    if level.has_gradient:
        if result.gradient is None:
            raise EncodingError("gradient requested but not parsed")
        if np.shape(result.gradient) != (calc.natoms, 3):
            raise EncodingError(
                f"gradient shape {np.shape(result.gradient)} does not match {calc.natoms} atoms"
            )
    if level.has_hessian:
        if result.hessian is None:
            raise EncodingError("hessian requested but not parsed")
        if np.shape(result.hessian) != (calc.ncoord, calc.ncoord):
            raise EncodingError(
                f"hessian shape {np.shape(result.hessian)} does not match {calc.ncoord} coordinates"
            )


def format_driver_report(calc: Calculation, result: ParsedResult) -> str:
    """
    Build the Gaussian external output file.

    Layout:
      energy, dipole (3 zeros)                        one line
      gradient, x y z per atom                        natoms lines    (nder >= 1)
      polarizability + dipole derivatives (zeros)     2 + 3*natoms    (nder >= 1)
      hessian lower triangle, 3 per line              ceil(n(n+1)/6)  (nder >= 2)
    """
    _check_shapes(calc, result)
    level = calc.level
    out: List[str] = []

    out.append(fmt(result.energy))
    out.append(_zero_line())

    if level.has_gradient:
        for gx, gy, gz in np.asarray(result.gradient, dtype=float):
            out.append(fmt(gx) + fmt(gy) + fmt(gz) + "\n")
        out.append(_zero_line() * (2 + 3 * calc.natoms))

    if level.has_hessian:
        hess = np.asarray(result.hessian, dtype=float)
        out.append(_wrap_fields(hess[np.tril_indices(calc.ncoord)]))

    return "".join(out)


def split_fields(line: str) -> List[float]:
    """Read back the fixed-width fields of one driver report line."""
    line = line.rstrip("\n")
    if len(line) % FIELD_WIDTH:
        raise ValueError(f"line length {len(line)} is not a multiple of {FIELD_WIDTH}")
    return [float(line[i:i + FIELD_WIDTH]) for i in range(0, len(line), FIELD_WIDTH)]
