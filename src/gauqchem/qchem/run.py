# src/gauqchem/qchem/run.py

from __future__ import annotations

import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List

from gauqchem.errors import WorkerInvocationError
from gauqchem.schemas.models import BridgeSettings


@dataclass(frozen=True)
class WorkerFiles:
    """Files of one Q-Chem run, all inside the run directory."""

    rundir: Path
    stem: str

    @property
    def inp(self) -> Path:
        return self.rundir / f"{self.stem}.inp"

    @property
    def out(self) -> Path:
        return self.rundir / f"{self.stem}.out"

    @property
    def log(self) -> Path:
        return self.rundir / f"{self.stem}.log"

    @property
    def fchk(self) -> Path:
        return self.rundir / f"{self.stem}.fchk"

    def all(self) -> List[Path]:
        return [self.inp, self.out, self.log, self.fchk]


def _tail(path: Path, n: int = 20) -> str:
    if not path.exists():
        return ""
    lines = path.read_text(errors="ignore").splitlines()
    return "\n".join(lines[-n:])


def qchem_command(files: WorkerFiles, settings: BridgeSettings) -> List[str]:
    return [
        settings.qchem_exe,
        "-nt",
        str(settings.nthreads),
        files.inp.name,
        files.out.name,
    ]


def run_qchem(files: WorkerFiles, settings: BridgeSettings) -> int:
    """
    Run Q-Chem inside the run directory and wait for it.
    Q-Chem stdout/stderr go to <stem>.log; the report goes to <stem>.out.
    """
    cmd = qchem_command(files, settings)

    try:
        with open(files.log, "w") as flog:
            proc = subprocess.run(
                cmd,
                cwd=files.rundir,
                stdout=flog,
                stderr=subprocess.STDOUT,
            )
    except OSError as exc:
        raise WorkerInvocationError(f"failed to launch {cmd[0]!r}: {exc}") from exc

    return proc.returncode


def check_returncode(files: WorkerFiles, returncode: int) -> None:
    if returncode != 0:
        raise WorkerInvocationError(
            f"Q-Chem exited with status {returncode} ({files.inp})",
            returncode=returncode,
            output_tail=_tail(files.log),
        )


def cleanup(files: WorkerFiles) -> List[Path]:
    removed = []
    for p in files.all():
        if p.exists():
            p.unlink()
            removed.append(p)
    return removed
