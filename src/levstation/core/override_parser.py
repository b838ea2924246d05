def coerce_value(value: str):
    """
    Coerce a command-line override value to int, float, bool or None.
    Anything else stays a string.
    """
    lowered = value.lower()
    if lowered in {"true", "false"}:
        return lowered == "true"
    if lowered in {"null", "none"}:
        return None
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return float(value)
    except ValueError:
        return value


def reject_sweeps(overrides: list[str]) -> None:
    """
    Reject Hydra multirun / sweep syntax; one projection per run.
    """
    for tok in overrides:
        if tok in {"-m", "--multirun"} or "," in tok:
            raise ValueError(
                f"Parameter sweeps are not supported (got '{tok}'). "
                "Use single-value overrides only, e.g. scenario.optimism=2"
            )


def hydra_overrides_to_dict(overrides: list[str]) -> dict:
    """
    Convert Hydra-style override strings into a nested dictionary.

    Example:
      ["scenario.optimism=2", "model.rejuv_tau=8"]
        → {"scenario": {"optimism": 2}, "model": {"rejuv_tau": 8}}

    Keys without a group prefix (no ".") are ignored.
    """
    result: dict = {}

    for item in overrides:
        if "=" not in item:
            continue

        key, raw_value = item.split("=", 1)
        key = key.lstrip("+")
        value = coerce_value(raw_value.strip())

        parts = key.strip().split(".")
        if len(parts) < 2:
            continue

        cur = result
        for part in parts[:-1]:
            node = cur.setdefault(part, {})
            if not isinstance(node, dict):
                raise ValueError(f"Conflicting override for '{key}'")
            cur = node

        cur[parts[-1]] = value

    return result
