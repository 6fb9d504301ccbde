# zonetime/utils/config.py
import os
import yaml

AMBIGUOUS_POLICIES = ("error", "earliest", "latest")

_DEFAULTS = {
    "ambiguous_policy": "error",
    "preload_zones": [],
}


class AttrDict(dict):
    """Dict that also supports attribute access: cfg.ambiguous_policy and cfg['ambiguous_policy'] both work."""
    def __getattr__(self, item):
        try:
            return self[item]
        except KeyError as e:
            raise AttributeError(item) from e
    def __setattr__(self, key, value):
        self[key] = value

def _to_attr(obj):
    if isinstance(obj, dict):
        return AttrDict({k: _to_attr(v) for k, v in obj.items()})
    if isinstance(obj, list):
        return [_to_attr(x) for x in obj]
    return obj

def _split_zones(raw):
    if isinstance(raw, str):
        raw = raw.split(",")
    return [z.strip() for z in (raw or []) if z and z.strip()]

def default_config():
    return _to_attr(dict(_DEFAULTS))

def load_config(path: str):
    """
    Load YAML config from `path` over the built-in defaults.
    Optional env overrides:
      - ZONETIME_AMBIGUOUS_POLICY  (error | earliest | latest)
      - ZONETIME_PRELOAD_ZONES     (comma list of zone names to warm at startup)
    Returns an AttrDict for convenient access.
    """
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    merged = dict(_DEFAULTS)
    merged.update(data)

    policy = os.getenv("ZONETIME_AMBIGUOUS_POLICY")
    if policy:
        merged["ambiguous_policy"] = policy
    preload = os.getenv("ZONETIME_PRELOAD_ZONES")
    if preload is not None:
        merged["preload_zones"] = preload

    merged["ambiguous_policy"] = str(merged["ambiguous_policy"]).strip().lower()
    if merged["ambiguous_policy"] not in AMBIGUOUS_POLICIES:
        raise ValueError(
            f"ambiguous_policy must be one of {', '.join(AMBIGUOUS_POLICIES)}, "
            f"got {merged['ambiguous_policy']!r}"
        )
    merged["preload_zones"] = _split_zones(merged["preload_zones"])

    return _to_attr(merged)
