from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from pydantic import ValidationError

from gauqchem.errors import ConfigError
from gauqchem.schemas.models import BridgeSettings

CONFIG_ENV = "GAUQCHEM_CONFIG"

# environment variable -> settings field
ENV_OVERRIDES = {
    "QCHEM_RUNDIR": "rundir",
    "QCHEM_EXE": "qchem_exe",
    "QCHEM_NTHREADS": "nthreads",
}


def load_settings(
    path: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
) -> BridgeSettings:
    """
    Build settings from a YAML file and the environment.

    Precedence (last wins): defaults, YAML file (``path`` or
    $GAUQCHEM_CONFIG), QCHEM_* environment variables.

    Example file:

        qchem_exe: /opt/qchem/bin/qchem
        nthreads: 8
        method: wb97x-d
        basis: def2-tzvp
        rem:
          scf_convergence: 8
        source: fchk
    """
    env = os.environ if env is None else env

    cfg: Dict[str, Any] = {}
    cfg_path = path or env.get(CONFIG_ENV)
    if cfg_path:
        cfg_path = Path(cfg_path)
        if not cfg_path.is_file():
            raise ConfigError(f"config file not found: {cfg_path}")
        try:
            loaded = yaml.safe_load(cfg_path.read_text())
        except yaml.YAMLError as exc:
            raise ConfigError(f"{cfg_path}: invalid YAML: {exc}") from exc
        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigError(f"{cfg_path}: top level must be a mapping")
        cfg.update(loaded)

    for var, key in ENV_OVERRIDES.items():
        if env.get(var):
            cfg[key] = env[var]

    try:
        return BridgeSettings(**cfg)
    except ValidationError as exc:
        raise ConfigError(f"invalid settings: {exc}") from exc
