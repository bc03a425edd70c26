"""Configuration loading utilities."""

from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

# configs/ directory at the repository root
DEFAULT_CONFIG_DIR = Path(__file__).resolve().parent.parent.parent / "configs"
DEFAULT_CONFIG_FILE = "default.yaml"


class _IncludeLoader(yaml.SafeLoader):
    """SafeLoader resolving ``!include other.yaml`` relative to the current file."""

    def __init__(self, stream, base_dir: Path):
        super().__init__(stream)
        self.base_dir = base_dir


def _construct_include(loader: _IncludeLoader, node: yaml.Node) -> Any:
    include_path = loader.base_dir / loader.construct_scalar(node)
    return _read_yaml(include_path)


_IncludeLoader.add_constructor("!include", _construct_include)


def _read_yaml(path: Path) -> Any:
    with open(path, "r") as f:
        loader = _IncludeLoader(f, path.parent)
        try:
            return loader.get_single_data()
        finally:
            loader.dispose()


class ConfigLoader:
    """Load and manage YAML configurations."""

    def __init__(self, config_dir: Optional[Union[str, Path]] = None):
        """
        Initialize config loader.

        Args:
            config_dir: Directory searched for relative config paths
                (defaults to the repository configs/ directory).
        """
        self.config_dir = Path(config_dir) if config_dir else DEFAULT_CONFIG_DIR
        self._cache: Dict[str, Dict] = {}

    def resolve(self, config_path: Union[str, Path]) -> Path:
        """Resolve a config path, trying it as given before config_dir."""
        config_path = Path(config_path)
        if config_path.is_absolute() or config_path.exists():
            return config_path
        return self.config_dir / config_path

    def load(
        self,
        config_path: Union[str, Path] = DEFAULT_CONFIG_FILE,
        use_cache: bool = True,
    ) -> Dict[str, Any]:
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to config file.
            use_cache: Whether to use cached config.

        Returns:
            Configuration dictionary.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file does not hold a mapping.
        """
        config_path = self.resolve(config_path)
        cache_key = str(config_path)

        if use_cache and cache_key in self._cache:
            return self.merge({}, self._cache[cache_key])

        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        config = _read_yaml(config_path)
        if config is None:
            config = {}
        if not isinstance(config, dict):
            raise ValueError(
                f"Config file must contain a mapping, got {type(config).__name__}: {config_path}"
            )

        if use_cache:
            self._cache[cache_key] = config

        return self.merge({}, config)

    def merge(
        self,
        base: Dict[str, Any],
        override: Dict[str, Any],
    ) -> Dict[str, Any]:
        """
        Deep merge two configurations.

        Args:
            base: Base configuration.
            override: Override configuration.

        Returns:
            Merged configuration (neither input is modified).
        """
        result = dict(base)

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self.merge(result[key], value)
            elif isinstance(value, dict):
                result[key] = self.merge({}, value)
            else:
                result[key] = value

        return result

    def save(
        self,
        config: Dict[str, Any],
        path: Union[str, Path],
    ) -> None:
        """
        Save configuration to YAML file.

        Args:
            config: Configuration dictionary.
            path: Output file path.
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            yaml.safe_dump(config, f, default_flow_style=False, sort_keys=False)


def load_config(
    config_path: Union[str, Path] = DEFAULT_CONFIG_FILE,
    overrides: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Convenience function to load configuration.

    Args:
        config_path: Path to config file.
        overrides: Optional overrides to apply.

    Returns:
        Configuration dictionary.
    """
    loader = ConfigLoader()
    config = loader.load(config_path)

    if overrides:
        config = loader.merge(config, overrides)

    return config


def get_nested(
    config: Dict[str, Any],
    key: str,
    default: Any = None,
) -> Any:
    """
    Get nested config value using dot notation.

    Args:
        config: Configuration dictionary.
        key: Dot-separated key (e.g., 'clipping.near').
        default: Default value if key not found.

    Returns:
        Config value or default.
    """
    value = config

    for k in key.split("."):
        if isinstance(value, dict) and k in value:
            value = value[k]
        else:
            return default

    return value
