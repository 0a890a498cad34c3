# gauqchem/workflow/translate.py

from __future__ import annotations

import re
from pathlib import Path
from typing import Callable, Dict

from gauqchem.errors import ReportParseError, WorkerInvocationError
from gauqchem.gaussian.report import format_driver_report
from gauqchem.gaussian.request import Calculation, read_request
from gauqchem.log import get_logger
from gauqchem.qchem.fchk import parse_qchem_fchk
from gauqchem.qchem.parse import ParsedResult, parse_qchem_output
from gauqchem.qchem.render import write_input
from gauqchem.schemas.models import BridgeSettings
import gauqchem.qchem.run as qrun

REPORT_PARSERS: Dict[str, Callable[[str, Calculation], ParsedResult]] = {
    "output": parse_qchem_output,
    "fchk": parse_qchem_fchk,
}


def _sanitize_name(s: str) -> str:
    return re.sub(r"[^A-Za-z0-9_\-]+", "_", s).strip("_") or "R"


def write_atomic(path: Path, text: str) -> None:
    """Write ``text`` to ``path`` so Gaussian never sees a half-written file."""
    path = Path(path)
    tmp = path.with_name(path.name + ".tmp")
    tmp.write_text(text)
    tmp.replace(path)


def read_report(path: Path) -> str:
    path = Path(path)
    if not path.is_file():
        raise ReportParseError(f"Q-Chem report not found: {path}")
    return path.read_text(errors="ignore")


def parse_report(text: str, calc: Calculation, source: str = "output") -> ParsedResult:
    if source not in REPORT_PARSERS:
        raise ValueError(f"Unknown report source '{source}'. Choose one of {list(REPORT_PARSERS)}")
    log = get_logger()
    log.info(f"\tparsing {source} report ({calc.level.name.lower()})")
    result = REPORT_PARSERS[source](text, calc)
    log.info("\t\tdone")
    return result


def translate_files(
    request: Path,
    report: Path,
    output: Path,
    source: str = "output",
) -> Path:
    """Turn an existing Q-Chem report into the Gaussian output file."""
    log = get_logger()
    log.info(f"reading request {request}")
    calc = read_request(request)

    log.info(f"reading Q-Chem report {report}")
    result = parse_report(read_report(report), calc, source)

    write_atomic(output, format_driver_report(calc, result))
    log.info(f"wrote {output}")
    return Path(output)


def translate(
    request: Path,
    output: Path,
    settings: BridgeSettings,
    layer: str = "R",
) -> Path:
    """
    Full Gaussian external step: decode the request, run Q-Chem,
    parse its report and write the Gaussian output file.
    """
    log = get_logger()

    log.info(f"reading request {request}")
    calc = read_request(request)
    log.info(f"\t{calc.natoms} atoms, derivative order {calc.nder}, "
             f"charge {calc.charge}, spin {calc.spin}")

    rundir = Path(settings.rundir).expanduser().resolve()
    rundir.mkdir(parents=True, exist_ok=True)
    files = qrun.WorkerFiles(rundir, f"{_sanitize_name(layer)}_qchem")

    write_input(calc, settings, files.inp)
    log.info(f"running {settings.qchem_exe} on {files.inp} ({settings.nthreads} threads)")
    returncode = qrun.run_qchem(files, settings)

    try:
        qrun.check_returncode(files, returncode)
    except WorkerInvocationError as exc:
        if not settings.parse_on_failure:
            raise
        log.warning(f"{exc}\n\tparsing partial output anyway")

    report = files.fchk if settings.source == "fchk" else files.out
    result = parse_report(read_report(report), calc, settings.source)

    write_atomic(output, format_driver_report(calc, result))
    log.info(f"wrote {output}")

    if not settings.keep_files:
        for p in qrun.cleanup(files):
            log.info(f"\tremoved {p}")

    return Path(output)
