"""Configuration loading and normalization for mdmirror builds."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

CONFIG_FILENAME = "mdmirror.yml"

SUPPORTED_MARKDOWN_EXTENSIONS = frozenset(
    {"table", "strikethrough", "footnote", "deflist", "tasklists"}
)


class ConfigError(ValueError):
    """Raised when the configured roots cannot be used for a build."""


class Config(BaseModel):
    """Settings for one conversion run."""

    input_dir: Path = Field(default=Path("."), description="Directory scanned for Markdown sources.")
    output_dir: Path = Field(default=Path("out"), description="Directory receiving the mirrored HTML tree.")
    header_template: Path = Field(
        default=Path("header.html"),
        description="Header fragment, relative to input_dir unless absolute.",
    )
    footer_template: Path = Field(
        default=Path("footer.html"),
        description="Footer fragment, relative to input_dir unless absolute.",
    )
    asset_manifest: Path = Field(
        default=Path("assets.txt"),
        description="Plain-text list of extra files to copy, relative to input_dir unless absolute.",
    )
    markdown_extension: str = Field(default=".md")
    markdown_extensions: list[str] = Field(
        default_factory=list,
        description="Optional markdown-it features layered on top of strict CommonMark.",
    )

    @field_validator(
        "input_dir",
        "output_dir",
        "header_template",
        "footer_template",
        "asset_manifest",
        mode="before",
    )
    def _ensure_path(cls, value: Any) -> Path:
        return Path(value)

    @field_validator("markdown_extension")
    def _normalize_extension(cls, value: str) -> str:
        text = value.strip()
        if not text:
            return ".md"
        if not text.startswith("."):
            text = f".{text}"
        return text.lower()

    @field_validator("markdown_extensions")
    def _check_markdown_extensions(cls, value: list[str]) -> list[str]:
        names = [item.strip().lower() for item in value if item.strip()]
        unknown = sorted(set(names) - SUPPORTED_MARKDOWN_EXTENSIONS)
        if unknown:
            raise ValueError(f"Unsupported markdown extension(s): {', '.join(unknown)}")
        return names

    @property
    def header_path(self) -> Path:
        return self._under_input(self.header_template)

    @property
    def footer_path(self) -> Path:
        return self._under_input(self.footer_template)

    @property
    def manifest_path(self) -> Path:
        return self._under_input(self.asset_manifest)

    def _under_input(self, value: Path) -> Path:
        return value if value.is_absolute() else self.input_dir / value


def load_config(path: str | Path | None = None, **overrides: Any) -> Config:
    """Load configuration and resolve relative roots based on the config location.

    ``path`` may point to a YAML file or to a directory that may contain
    ``mdmirror.yml``. Without a path, the current directory is used. Keyword
    overrides (typically CLI flags) replace values read from the file; ``None``
    overrides are ignored. Relative roots from the file are anchored to the
    directory holding it, while relative overrides stay relative to the
    working directory.
    """
    candidate = Path(path) if path is not None else Path.cwd()
    data: dict[str, Any] = {}
    if candidate.is_dir():
        config_file = candidate / CONFIG_FILENAME
        if config_file.exists():
            data = _read_yaml(config_file)
        base_dir = candidate.resolve()
    else:
        if not candidate.exists():
            raise FileNotFoundError(candidate)
        data = _read_yaml(candidate)
        base_dir = candidate.parent.resolve()

    supplied = {key: value for key, value in overrides.items() if value is not None}
    merged = {**data, **supplied}
    try:
        cfg = Config(**merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc

    for name in ("input_dir", "output_dir"):
        value: Path = getattr(cfg, name)
        if name not in supplied and not value.is_absolute():
            setattr(cfg, name, base_dir / value)
    return cfg


def normalize_config(config: Config) -> Config:
    """Validate both roots and return a copy holding their canonical paths.

    The input root must be an existing directory. The output root is created
    when missing. This is the only place the roots are resolved; every later
    path comparison relies on the returned values.
    """
    input_dir = config.input_dir.expanduser()
    if not input_dir.exists():
        raise ConfigError(f"Input directory does not exist: {input_dir}")
    if not input_dir.is_dir():
        raise ConfigError(f"Input path is not a directory: {input_dir}")

    output_dir = config.output_dir.expanduser()
    if output_dir.exists() and not output_dir.is_dir():
        raise ConfigError(f"Output path is not a directory: {output_dir}")
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ConfigError(f"Cannot create output directory {output_dir}: {exc}") from exc

    input_root = input_dir.resolve()
    output_root = output_dir.resolve()
    if input_root == output_root:
        raise ConfigError(f"Output directory must differ from the input directory: {input_root}")

    return config.model_copy(update={"input_dir": input_root, "output_dir": output_root})


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file {path} should define a mapping.")
    return data
