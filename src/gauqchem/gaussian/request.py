# gauqchem/gaussian/request.py

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Tuple

import numpy as np

from gauqchem.errors import (
    MalformedAtomLine,
    RequestFormatError,
    TruncatedBody,
    TruncatedHeader,
)
from gauqchem.gaussian.fields import parse_int, parse_nums

# Gaussian writes the atomic number right-aligned in the first 11 columns of
# every atom record; the remainder holds x, y, z and a mass-like field.
ATOM_FIELD_WIDTH = 11


class DerivativeLevel(Enum):
    """Which blocks Gaussian asked for, and which Q-Chem job produces them."""

    SINGLE_POINT = 0
    GRADIENT = 1
    GRADIENT_AND_HESSIAN = 2

    @classmethod
    def from_order(cls, nder: int) -> "DerivativeLevel":
        if nder < 0:
            raise RequestFormatError(f"negative derivative order: {nder}")
        # Gaussian never asks for more than second derivatives; anything
        # above that still gets the full gradient + Hessian report.
        return cls(min(nder, 2))

    @property
    def has_gradient(self) -> bool:
        return self.value >= 1

    @property
    def has_hessian(self) -> bool:
        return self.value >= 2

    @property
    def jobtype(self) -> str:
        return ("sp", "force", "freq")[self.value]


@dataclass(frozen=True, eq=False)
class Calculation:
    """
    One Gaussian external request.

    Built once from the request file and only read afterwards; ``coords``
    is a read-only (natoms, 3) array in Gaussian's length unit.
    """

    natoms: int
    nder: int
    charge: int
    spin: int
    atomic_numbers: Tuple[int, ...]
    coords: np.ndarray

    def __post_init__(self) -> None:
        coords = np.array(self.coords, dtype=float).reshape(-1, 3)
        coords.setflags(write=False)
        object.__setattr__(self, "coords", coords)
        object.__setattr__(self, "atomic_numbers", tuple(self.atomic_numbers))

        if len(self.atomic_numbers) != self.natoms or coords.shape[0] != self.natoms:
            raise RequestFormatError(
                f"Calculation has {self.natoms} atoms but "
                f"{len(self.atomic_numbers)} atomic numbers and {coords.shape[0]} coordinates"
            )

    # ------------------------------------------------------------------
    @property
    def ncoord(self) -> int:
        return 3 * self.natoms

    @property
    def level(self) -> DerivativeLevel:
        return DerivativeLevel.from_order(self.nder)

    # ------------------------------------------------------------------
    # Q-Chem side
    # ------------------------------------------------------------------
    def geometry(self) -> str:
        lines = [
            f"{z}   {x:.12f}   {y:.12f}   {w:.12f}"
            for z, (x, y, w) in zip(self.atomic_numbers, self.coords.tolist())
        ]
        return "\n".join(lines).strip()

    def qchem_molecule(self) -> str:
        return f"$molecule\n{self.charge} {self.spin}\n{self.geometry()}\n$end\n"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "natoms": self.natoms,
            "nder": self.nder,
            "charge": self.charge,
            "spin": self.spin,
            "atomic_numbers": list(self.atomic_numbers),
            "coords": self.coords.tolist(),
        }

    # ------------------------------------------------------------------
    # Gaussian side
    # ------------------------------------------------------------------
    @classmethod
    def from_ext(cls, text: str) -> "Calculation":
        lines = text.splitlines()
        if not lines:
            raise TruncatedHeader("Gaussian input file is empty")

        try:
            natoms, nder, charge, spin = parse_nums(lines[0], 4, int)
        except RequestFormatError as exc:
            exc.args = (f"header: {exc}",)
            raise
        if natoms < 1:
            raise RequestFormatError(f"atom count must be positive, got {natoms}")
        DerivativeLevel.from_order(nder)

        body = lines[1 : natoms + 1]
        if len(body) < natoms:
            raise TruncatedBody(natoms, len(body))

        zvals: List[int] = []
        coords: List[List[float]] = []
        for i, line in enumerate(body):
            z, xyz = _parse_atom_line(i, line)
            zvals.append(z)
            coords.append(xyz)

        return cls(
            natoms=natoms,
            nder=nder,
            charge=charge,
            spin=spin,
            atomic_numbers=tuple(zvals),
            coords=np.array(coords, dtype=float),
        )


def _parse_atom_line(index: int, line: str) -> Tuple[int, List[float]]:
    head, tail = line[:ATOM_FIELD_WIDTH], line[ATOM_FIELD_WIDTH:]
    try:
        z = parse_int(head.strip())
        vals = parse_nums(tail, 4, float)
    except RequestFormatError as exc:
        raise MalformedAtomLine(index, str(exc)) from exc

    if z < 0:
        raise MalformedAtomLine(index, f"negative atomic number {z}")
    return z, vals[:3]


def read_request(path: Path) -> Calculation:
    path = Path(path)
    try:
        text = path.read_text()
    except OSError as exc:
        raise RequestFormatError(f"{path}: cannot read request file: {exc}") from exc
    try:
        return Calculation.from_ext(text)
    except RequestFormatError as exc:
        exc.args = (f"{path}: {exc}",)
        raise
