from typing import Optional, Sequence

import numpy as np
import pytest

from gauqchem.log import get_logger
from gauqchem.qchem.parse import wrap_gradient_rows, wrap_hessian_rows

# bind the stream handler to the session stderr, not a CliRunner buffer
get_logger()


# -------------------------------------------------------
# Gaussian side
# -------------------------------------------------------

def request_text(natoms, nder, charge, spin, zvals: Sequence[int], coords) -> str:
    """Gaussian InputFile: (4I10) header, then (I10,4F20.12) per atom."""
    lines = [f"{natoms:10d}{nder:10d}{charge:10d}{spin:10d}"]
    for z, (x, y, w) in zip(zvals, coords):
        lines.append(f"{z:10d}{x:20.12f}{y:20.12f}{w:20.12f}{0.0:20.12f}")
    return "\n".join(lines) + "\n"


@pytest.fixture
def write_request(tmp_path):
    def _write(natoms=2, nder=1, charge=0, spin=1, zvals=None, coords=None, name="gau.EIn"):
        zvals = zvals if zvals is not None else [8, 1] * natoms
        coords = coords if coords is not None else [
            (0.1 * i, -0.2 * i, 1.5 + i) for i in range(natoms)
        ]
        p = tmp_path / name
        p.write_text(request_text(natoms, nder, charge, spin, zvals[:natoms], coords[:natoms]))
        return p
    return _write


# -------------------------------------------------------
# Q-Chem side
# -------------------------------------------------------

def qchem_output_text(
    energy: float,
    gradient: Optional[np.ndarray] = None,
    hessian: Optional[np.ndarray] = None,
) -> str:
    lines = [
        "                  Welcome to Q-Chem",
        " SCF converges when DIIS error is below 1.0e-08",
        " ---------------------------------------",
        "    1     -75.9      4.21e-02",
        f" Total energy in the final basis set = {energy:.12f}",
        " ---------------------------------------",
    ]
    if gradient is not None:
        lines.append(" Gradient of SCF Energy (in au.)")
        lines.extend(wrap_gradient_rows(gradient))
        lines.append(" Max gradient component =       1.234E-02")
        lines.append(" RMS gradient           =       5.678E-03")
        lines.append(" Gradient time:  CPU 0.12 s  wall 0.13 s")
    if hessian is not None:
        lines.append(" Hessian of the SCF Energy")
        lines.extend(wrap_hessian_rows(hessian))
        lines.append(" **********************************************************************")
        lines.append(" **                       VIBRATIONAL ANALYSIS                       **")
        lines.append(" **********************************************************************")
        lines.append(" Mode:  1  Frequency:  1648.21")
    lines.append("        *  Thank you very much for using Q-Chem.  Have a nice day.  *")
    return "\n".join(lines) + "\n"


def random_gradient(natoms: int, seed: int = 0) -> np.ndarray:
    rng = np.random.default_rng(seed)
    return np.round(rng.uniform(-0.5, 0.5, size=(natoms, 3)), 7)


def random_hessian(natoms: int, seed: int = 0) -> np.ndarray:
    rng = np.random.default_rng(seed)
    n = 3 * natoms
    a = np.round(rng.uniform(-1.0, 1.0, size=(n, n)), 7)
    return np.tril(a) + np.tril(a, -1).T


@pytest.fixture
def qchem_output():
    return qchem_output_text
