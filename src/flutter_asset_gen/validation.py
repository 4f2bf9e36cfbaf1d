# src/flutter_asset_gen/validation.py
import logging
import os
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import yaml

from .models import ValidationResult
from .utils import normalize_path

logger = logging.getLogger(__name__)

DEFAULT_PUBSPEC = 'pubspec.yaml'


def _expand_directory(asset_dir: str) -> List[str]:
    """'assets/' 처럼 '/' 로 끝나는 선언은 해당 디렉토리 아래 모든 파일로 확장 (cwd 기준 상대 경로)"""
    directory = Path(asset_dir)
    if not directory.is_dir():
        return []
    return [
        normalize_path(os.path.relpath(item, '.'))
        for item in sorted(directory.rglob('*'))
        if item.is_file()
    ]


def _declared_assets(doc) -> List[str]:
    declared: Dict[str, None] = {}  # 선언 순서를 유지하는 set 대용
    if doc is None:
        return []
    flutter_section = doc.get('flutter')
    if flutter_section is None:
        return []
    assets = flutter_section.get('assets')
    if assets is None:
        return []
    for asset in assets:
        asset_str = str(asset)
        if asset_str.endswith('/'):
            for rel_path in _expand_directory(asset_str):
                declared[rel_path] = None
        else:
            declared[asset_str] = None
    return list(declared)


def validate_assets(
    asset_paths: Sequence[str],
    roots: Sequence[str],
    pubspec_path: Optional[str] = None,
) -> ValidationResult:
    """
    생성된 에셋 경로와 pubspec.yaml 의 flutter.assets 선언을 비교합니다.
    missing_assets 가 비어있을 때만 유효합니다. (unused_assets 는 경고 성격)
    """
    pubspec_file = Path(pubspec_path or DEFAULT_PUBSPEC)
    if not pubspec_file.is_file():
        return ValidationResult(
            is_valid=False,
            warnings=[f"{pubspec_file.as_posix()} not found"],
        )

    try:
        with open(pubspec_file, 'rt', encoding='utf-8') as f:
            doc = yaml.safe_load(f.read())
        declared = _declared_assets(doc)
    except (yaml.YAMLError, AttributeError, TypeError) as e:
        # 잘못된 문서는 예외 대신 경고가 담긴 invalid 결과로 변환
        logger.debug(f"Could not parse {pubspec_file}: {e}")
        return ValidationResult(
            is_valid=False,
            warnings=[f"Error parsing {pubspec_file.as_posix()}: {e}"],
        )

    logger.debug(f"Checking {len(asset_paths)} asset(s) under {list(roots)} against {len(declared)} declaration(s)")
    normalized = [normalize_path(p) for p in asset_paths]
    discovered = set(normalized)
    declared_set = {normalize_path(d) for d in declared}

    missing_assets = [p for p in normalized if p not in declared_set]
    unused_assets = [normalize_path(d) for d in declared if normalize_path(d) not in discovered]

    return ValidationResult(
        is_valid=not missing_assets,
        missing_assets=missing_assets,
        unused_assets=unused_assets,
    )


def format_validation_report(result: ValidationResult) -> List[str]:
    """검증 결과를 사람이 읽을 수 있는 줄 목록으로 만듭니다."""
    if result.is_valid and not result.unused_assets and not result.warnings:
        return ["All assets are properly declared in pubspec.yaml"]

    lines: List[str] = []
    if result.missing_assets:
        lines.append("Missing assets in pubspec.yaml:")
        lines.extend(f"  - {asset}" for asset in result.missing_assets)
        lines.append("")
        lines.append("Add these to your pubspec.yaml:")
        lines.append("flutter:")
        lines.append("  assets:")
        lines.extend(f"    - {asset}" for asset in result.missing_assets)

    if result.unused_assets:
        lines.append("Unused assets in pubspec.yaml:")
        lines.extend(f"  - {asset}" for asset in result.unused_assets)

    lines.extend(f"WARN: {warning}" for warning in result.warnings)
    return lines
