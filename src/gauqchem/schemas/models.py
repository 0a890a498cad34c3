from __future__ import annotations
from pathlib import Path
from typing import Any, Dict, Literal
from pydantic import BaseModel, Field

class BridgeSettings(BaseModel):
    # Settings for one Gaussian -> Q-Chem bridge run
    qchem_exe: str = Field(default="qchem")
    nthreads: int = Field(default=1, ge=1)
    rundir: Path = Field(default=Path("."))
    method: str = Field(default="b3lyp")
    basis: str = Field(default="6-31g*")
    rem: Dict[str, Any] = Field(default_factory=dict)  # extra $rem keywords
    source: Literal["output", "fchk"] = Field(default="output")
    keep_files: bool = True
    parse_on_failure: bool = False
