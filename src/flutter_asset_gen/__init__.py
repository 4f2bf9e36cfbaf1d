# src/flutter_asset_gen/__init__.py
from .builder import AssetGenBuilder
from .config import ConfigError, load_config, parse_config_text
from .hashing import content_hash
from .logic import collect_entries, generate_assets
from .models import AssetEntry, AssetGenConfig, GenerationResult, ValidationResult
from .render import OutputKind, render_output
from .utils import build_identifier
from .validation import format_validation_report, validate_assets
from .watcher import AssetWatcher

__all__ = [
    "AssetEntry",
    "AssetGenBuilder",
    "AssetGenConfig",
    "AssetWatcher",
    "ConfigError",
    "GenerationResult",
    "OutputKind",
    "ValidationResult",
    "build_identifier",
    "collect_entries",
    "content_hash",
    "format_validation_report",
    "generate_assets",
    "load_config",
    "parse_config_text",
    "render_output",
    "validate_assets",
]
