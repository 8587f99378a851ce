from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
import tomllib
from typing import Any
from typing import Dict
from typing import Optional
from typing import Tuple

from import_tidy.errors import ConfigError
from import_tidy.rules import DEFAULT_ORDER_SPEC
from import_tidy.rules import TierOrder
from import_tidy.rules import resolve_order

CONFIG_FILE_NAME = ".import-tidy.toml"
DEFAULT_FORMATTER = "gofmt"


@dataclass(frozen=True)
class TidyConfig:
    """Settings shared by every file of one run."""

    internal_prefix: str
    order: TierOrder = TierOrder()
    formatter: Optional[str] = DEFAULT_FORMATTER
    exclude: Tuple[str, ...] = ()


def read_config_file(root: str) -> Dict[str, Any]:
    """Read ``.import-tidy.toml`` from ``root``, or return an empty dict."""
    config_path = Path(root) / CONFIG_FILE_NAME
    if not config_path.exists():
        return {}
    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"could not read {config_path}: {exc}") from exc
    return data


def build_config(
    root: str,
    internal_prefix: Optional[str] = None,
    order: Optional[str] = None,
    formatter: Optional[str] = None,
    exclude: Tuple[str, ...] = (),
) -> TidyConfig:
    """Merge explicit settings over the config file found in ``root``.

    Raises:
        ConfigError: If no internal prefix is configured anywhere, or a
            setting has the wrong type.
    """
    data = read_config_file(root)

    prefix = internal_prefix or data.get("internal-prefix") or ""
    if not isinstance(prefix, str) or not prefix:
        raise ConfigError("--internal-prefix is required")

    order_spec = order or data.get("order") or DEFAULT_ORDER_SPEC
    if isinstance(order_spec, list):
        order_spec = ",".join(str(token) for token in order_spec)
    if not isinstance(order_spec, str):
        raise ConfigError(f"order must be a string or a list, not {order_spec!r}")

    formatter = formatter or data.get("formatter") or DEFAULT_FORMATTER
    if not isinstance(formatter, str):
        raise ConfigError(f"formatter must be a string, not {formatter!r}")
    if formatter == "none":
        formatter = None

    excluded = exclude or data.get("exclude", ())
    if isinstance(excluded, str):
        excluded = (excluded,)
    if not isinstance(excluded, (list, tuple)) or not all(isinstance(p, str) for p in excluded):
        raise ConfigError(f"exclude must be a string or a list of strings, not {excluded!r}")

    return TidyConfig(
        internal_prefix=prefix,
        order=resolve_order(order_spec),
        formatter=formatter,
        exclude=tuple(excluded),
    )
