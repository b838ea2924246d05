# src/levstation/core/config.py

from datetime import date
from pathlib import Path

from hydra import compose, initialize_config_dir
from loguru import logger
from omegaconf import DictConfig, OmegaConf

from levstation.core.case_file import case_name, load_case_file
from levstation.core.constants import ModelConstants
from levstation.core.life_table import LifeTable, life_table_from_points
from levstation.core.override_parser import hydra_overrides_to_dict, reject_sweeps
from levstation.core.scenario import Scenario

CONF_DIR = Path(__file__).parents[1] / "conf"

# ---------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------


def load_hydra_cfg(conf_dir: Path = CONF_DIR) -> DictConfig:
    """
    Compose the packaged Hydra config tree (defaults only).
    """
    if not conf_dir.exists():
        raise RuntimeError(f"Hydra conf directory not found: {conf_dir}")

    with initialize_config_dir(config_dir=str(conf_dir.resolve()), version_base=None):
        return compose(config_name="config")


def load_config(
    case_file: str | Path | None = None,
    overrides: list[str] | tuple[str, ...] = (),
    conf_dir: Path = CONF_DIR,
) -> DictConfig:
    """
    Resolve the effective configuration.

    Precedence (lowest → highest):
      1. packaged defaults (conf/config.yaml + groups)
      2. case TOML file
      3. command-line overrides, e.g. scenario.optimism=2
    """
    overrides = list(overrides)
    reject_sweeps(overrides)

    cfg = load_hydra_cfg(conf_dir)
    layers = [cfg]

    if case_file is not None:
        case_data = load_case_file(case_file)
        case_data["case_name"] = case_name(case_data, case_file)
        logger.debug("Case file {}: {}", case_file, case_data)
        layers.append(OmegaConf.create(case_data))

    if overrides:
        override_dict = hydra_overrides_to_dict(overrides)
        logger.debug("Command-line overrides: {}", override_dict)
        layers.append(OmegaConf.create(override_dict))

    # Struct mode (set by compose) rejects unknown keys
    merged = OmegaConf.merge(*layers)

    logger.debug("Resolved configuration:\n{}", OmegaConf.to_yaml(merged, resolve=True))

    return merged


# ---------------------------------------------------------------------
# Typed views
# ---------------------------------------------------------------------


def constants_from_config(cfg: DictConfig) -> ModelConstants:
    return ModelConstants.from_config(OmegaConf.to_container(cfg.model, resolve=True))


def scenario_from_config(cfg: DictConfig) -> Scenario:
    sc = cfg.scenario
    current_year = sc.current_year if sc.current_year is not None else date.today().year

    return Scenario(
        name=str(cfg.case_name),
        start_age=int(sc.start_age),
        sex=str(sc.sex).lower(),
        current_score=int(sc.current_score),
        target_score=int(sc.target_score),
        horizon_year=int(sc.horizon_year),
        optimism=sc.optimism,  # integrality checked by Scenario.validate
        current_year=int(current_year),
    )


def life_table_from_config(cfg: DictConfig) -> LifeTable | None:
    """
    Custom life table from ``life_table.points``, or None for the
    embedded sample table.
    """
    points = OmegaConf.to_container(cfg.life_table, resolve=True).get("points") or []
    if not points:
        return None

    try:
        pairs = [(float(age), float(qx)) for age, qx in points]
    except (TypeError, ValueError) as e:
        raise ValueError("life_table.points must be a list of [age, qx] pairs") from e

    return life_table_from_points(pairs, source=f"Custom ({cfg.case_name})")
