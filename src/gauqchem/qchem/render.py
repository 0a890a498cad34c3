# gauqchem/qchem/render.py

from __future__ import annotations
from pathlib import Path
from typing import Dict, Any
import jinja2

from gauqchem.gaussian.request import Calculation, DerivativeLevel
from gauqchem.schemas.models import BridgeSettings


# ---------------------------------------------------------------
# Canonical template locations
# ---------------------------------------------------------------
TEMPLATE_ROOT = Path(__file__).resolve().parents[1] / "templates"
QCHEM_TPL_DIR = TEMPLATE_ROOT / "qchem"

CANONICAL_TEMPLATES = {
    DerivativeLevel.SINGLE_POINT: "qchem_sp.inp.j2",
    DerivativeLevel.GRADIENT: "qchem_force.inp.j2",
    DerivativeLevel.GRADIENT_AND_HESSIAN: "qchem_freq.inp.j2",
}

jenv = jinja2.Environment(
    loader=jinja2.FileSystemLoader(str(QCHEM_TPL_DIR)),
    autoescape=False,
    trim_blocks=True,
    lstrip_blocks=True,
    undefined=jinja2.StrictUndefined,
)


def build_context(calc: Calculation, settings: BridgeSettings) -> Dict[str, Any]:
    return {
        "molecule": calc.qchem_molecule(),
        "jobtype": calc.level.jobtype,
        "method": settings.method,
        "basis": settings.basis,
        "rem": dict(settings.rem),
        "gui": settings.source == "fchk",
    }


def render_input(calc: Calculation, settings: BridgeSettings) -> str:
    tpl = jenv.get_template(CANONICAL_TEMPLATES[calc.level])
    return tpl.render(**build_context(calc, settings))


def write_input(calc: Calculation, settings: BridgeSettings, out_path: Path) -> Path:
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(render_input(calc, settings))
    return out_path
