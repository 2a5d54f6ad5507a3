from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

from dvsim.backends.emu import EmuBackend
from dvsim.cli.validate import validate_config
from dvsim.core.topology import ConfigError
from dvsim.utils.io import deep_merge, load_yaml


def load_effective_config(config_path: str | Path) -> Dict[str, Any]:
    """Load an experiment YAML on top of ``configs/defaults.yaml``.

    The defaults file is looked up under the directory that contains the
    ``configs`` path component, or next to the experiment file otherwise.
    """
    cfg_path = Path(config_path).resolve()
    parts = cfg_path.parts
    if "configs" in parts:
        cfg_idx = parts.index("configs")
        root = Path(*parts[:cfg_idx]) if cfg_idx > 0 else Path("/")
    else:
        root = cfg_path.parent
    defaults_path = root / "configs" / "defaults.yaml"

    cfg: Dict[str, Any] = {}
    if defaults_path.exists() and defaults_path != cfg_path:
        cfg = load_yaml(defaults_path)

    return deep_merge(cfg, load_yaml(cfg_path))


def run_emu(config_path: str | Path) -> Dict[str, Any]:
    cfg = load_effective_config(config_path)
    errors = validate_config(cfg)
    if errors:
        raise ConfigError("Invalid config: " + "; ".join(errors))
    return EmuBackend().run(cfg)
