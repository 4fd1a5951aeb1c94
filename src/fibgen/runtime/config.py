from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from fibgen.utils.io import load_yaml

IP_FORMATS = ("dotted", "integer")
ADDRESS_MODES = ("peer", "all")
GENERATOR_TYPES = ("fullmesh", "mesh2d", "grid")


@dataclass(frozen=True)
class OutputConfig:
    path: Path
    ip_format: str = "dotted"

    def __post_init__(self) -> None:
        if self.ip_format not in IP_FORMATS:
            raise ValueError(f"ip_format must be one of {list(IP_FORMATS)}, got {self.ip_format!r}")

    @property
    def as_integer(self) -> bool:
        return self.ip_format == "integer"


@dataclass(frozen=True)
class ForwardingConfig:
    """Knobs for one forwarding-table generation pass.

    ``address_mode`` selects how a destination's address is resolved:
    ``peer`` uses only the interface at the far end of the discovering link,
    ``all`` emits one route per address configured on the destination node.
    """

    metric_scale: int = 8
    address_mode: str = "peer"
    ip_format: str = "dotted"

    def __post_init__(self) -> None:
        if not _is_int(self.metric_scale) or self.metric_scale <= 0:
            raise ValueError(f"metric_scale must be a positive integer, got {self.metric_scale!r}")
        if self.address_mode not in ADDRESS_MODES:
            raise ValueError(
                f"address_mode must be one of {list(ADDRESS_MODES)}, got {self.address_mode!r}"
            )
        if self.ip_format not in IP_FORMATS:
            raise ValueError(f"ip_format must be one of {list(IP_FORMATS)}, got {self.ip_format!r}")

    @property
    def as_integer(self) -> bool:
        return self.ip_format == "integer"

    def with_ip_format(self, ip_format: str) -> "ForwardingConfig":
        return ForwardingConfig(
            metric_scale=self.metric_scale,
            address_mode=self.address_mode,
            ip_format=ip_format,
        )


@dataclass(frozen=True)
class GeneratorConfig:
    type: str = "fullmesh"
    n_nodes: int = 4
    rows: int = 2
    cols: int = 2


@dataclass(frozen=True)
class RunConfig:
    topology_file: Path
    address_file: Path
    forwarding: ForwardingConfig
    outputs: List[OutputConfig] = field(default_factory=list)
    generator: Optional[GeneratorConfig] = None


def validate_config(raw: Dict[str, Any]) -> list[str]:
    errors: list[str] = []

    generator = raw.get("generator")
    if generator is not None:
        if not isinstance(generator, dict):
            errors.append("'generator' must be a dict")
        elif str(generator.get("type", "fullmesh")).lower() not in GENERATOR_TYPES:
            errors.append(
                f"generator.type must be one of {list(GENERATOR_TYPES)}, "
                f"got {generator.get('type')!r}"
            )

    inputs = raw.get("inputs", {})
    if not isinstance(inputs, dict):
        errors.append("'inputs' must be a dict")
    else:
        for key in ("topology_file", "address_file"):
            if not inputs.get(key):
                errors.append(f"inputs.{key} is required")

    forwarding = raw.get("forwarding", {})
    if not isinstance(forwarding, dict):
        errors.append("'forwarding' must be a dict")
        return errors

    scale = forwarding.get("metric_scale", 8)
    if not _is_int(scale):
        errors.append("forwarding.metric_scale must be an integer")
    elif scale <= 0:
        errors.append("forwarding.metric_scale must be > 0")

    mode = str(forwarding.get("address_mode", "peer")).lower()
    if mode not in ADDRESS_MODES:
        errors.append(f"forwarding.address_mode must be one of {list(ADDRESS_MODES)}, got {mode!r}")

    outputs = forwarding.get("outputs", [])
    if not isinstance(outputs, list) or not outputs:
        errors.append("forwarding.outputs must be a non-empty list")
    else:
        for idx, item in enumerate(outputs):
            if not isinstance(item, dict) or not item.get("path"):
                errors.append(f"forwarding.outputs[{idx}].path is required")
                continue
            fmt = str(item.get("ip_format", "dotted")).lower()
            if fmt not in IP_FORMATS:
                errors.append(
                    f"forwarding.outputs[{idx}].ip_format must be one of {list(IP_FORMATS)}, got {fmt!r}"
                )

    return errors


def load_run_config(path: str | Path) -> RunConfig:
    cfg_path = Path(path)
    raw = load_yaml(cfg_path)
    errors = validate_config(raw)
    if errors:
        raise ValueError("Invalid config: " + "; ".join(errors))
    return parse_run_config(raw, base_dir=cfg_path.resolve().parent)


def parse_run_config(raw: Dict[str, Any], base_dir: Path) -> RunConfig:
    inputs = dict(raw.get("inputs", {}))
    forwarding_raw = dict(raw.get("forwarding", {}))
    generator_raw = raw.get("generator")

    forwarding = ForwardingConfig(
        metric_scale=forwarding_raw.get("metric_scale", 8),
        address_mode=str(forwarding_raw.get("address_mode", "peer")).lower(),
    )
    outputs = [
        OutputConfig(
            path=_resolve(base_dir, item["path"]),
            ip_format=str(item.get("ip_format", "dotted")).lower(),
        )
        for item in forwarding_raw.get("outputs", [])
    ]

    generator = None
    if generator_raw is not None:
        generator_raw = dict(generator_raw)
        generator = GeneratorConfig(
            type=str(generator_raw.get("type", "fullmesh")).lower(),
            n_nodes=int(generator_raw.get("n_nodes", 4)),
            rows=int(generator_raw.get("rows", 2)),
            cols=int(generator_raw.get("cols", 2)),
        )

    return RunConfig(
        topology_file=_resolve(base_dir, inputs["topology_file"]),
        address_file=_resolve(base_dir, inputs["address_file"]),
        forwarding=forwarding,
        outputs=outputs,
        generator=generator,
    )


def _resolve(base_dir: Path, raw: Any) -> Path:
    p = Path(str(raw)).expanduser()
    if not p.is_absolute():
        p = base_dir / p
    return p


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)
