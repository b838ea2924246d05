import tomllib
from pathlib import Path

CASE_SECTIONS = ("scenario", "model", "life_table")


def load_case_file(path: str | Path) -> dict:
    """
    Load a scenario case TOML file.

    Expected TOML structure:
      case_name = "Jill baseline"

      [scenario]
      start_age = 35
      target_score = 80

      [model]           # optional
      rejuv_tau = 8.0

      [life_table]      # optional
      points = [[0, 0.005], [50, 0.0045], [90, 0.10], [110, 0.48]]
    """
    p = Path(path)

    if not p.exists():
        raise FileNotFoundError(f"Case file not found: {p}")

    with p.open("rb") as f:
        data = tomllib.load(f)

    unknown = sorted(k for k in data if k != "case_name" and k not in CASE_SECTIONS)
    if unknown:
        raise KeyError(f"Unknown sections {unknown} in {p}. Valid sections: {list(CASE_SECTIONS)}")

    for section in CASE_SECTIONS:
        if section in data and not isinstance(data[section], dict):
            raise KeyError(f"'{section}' must be a table in {p}")

    return data


def case_name(data: dict, path: str | Path) -> str:
    """
    Display name of a loaded case: ``case_name`` with spaces and "&"
    made filesystem safe, or the file stem when unset.
    """
    name = data.get("case_name") or Path(path).stem
    return str(name).strip().replace(" ", "_").replace("&", "and")
