# src/flutter_asset_gen/logic.py
import logging
from pathlib import Path, PurePosixPath
from typing import Dict, List, Optional, Tuple, Union

from .config import load_config
from .hashing import content_hash
from .models import AssetEntry, AssetGenConfig, GenerationResult
from .render import render_output
from .utils import build_identifier, matches_any, normalize_path
from .validation import format_validation_report, validate_assets

logger = logging.getLogger(__name__)


# --- 1. 디렉토리 스캔 ---
def scan_root(root: str) -> List[str]:
    """
    root 아래의 모든 파일을 재귀적으로 찾아 root 기준 상대 경로('/' 구분자) 리스트를 반환합니다.
    root 가 없거나 읽을 수 없으면 빈 리스트 (오류 아님).
    """
    root_dir = Path(root)
    if not root_dir.is_dir():
        return []

    relative_paths: List[str] = []
    try:
        for item in root_dir.rglob('*'):
            if not item.is_file():
                continue
            relative_path = item.relative_to(root_dir).as_posix()
            # 디렉토리 항목 방어용 필터
            if not relative_path or relative_path.endswith('/'):
                continue
            relative_paths.append(relative_path)
    except OSError as e:
        # 일시적인 오류로 목록을 못 읽으면 root 가 없는 것으로 취급
        logger.debug(f"Could not list {root}: {e}. Skipping.")
        return []

    # 파일시스템 순서에 의존하지 않도록 정렬 (중복 해결 결과가 플랫폼마다 같아야 함)
    return sorted(relative_paths)


# --- 2. 필터링 ---
def is_included(config: AssetGenConfig, root: str, relative_path: str) -> bool:
    full_path = f"{normalize_path(root)}/{relative_path}"
    if matches_any(full_path, config.exclude):
        return False

    if config.include_extensions is not None:
        extension = PurePosixPath(relative_path).suffix.lower()
        if extension not in config.include_extensions:
            return False
    return True


# --- 4. 중복 식별자 해결 ---
def deduplicate(entries: List[AssetEntry]) -> Tuple[List[AssetEntry], List[str]]:
    """
    발견 순서대로 처리하며, 이미 쓰인 식별자에는 2 부터 시작하는 숫자 접미사를 붙입니다.
    예: logo, logo2, logo3 ...
    """
    used: Dict[str, int] = {}
    warnings: List[str] = []
    resolved: List[AssetEntry] = []

    for entry in entries:
        base = entry.identifier
        if base not in used:
            used[base] = 1
            resolved.append(entry)
            continue

        used[base] += 1
        n = used[base]
        candidate = f"{base}{n}"
        while candidate in used:
            n += 1
            candidate = f"{base}{n}"

        warnings.append(f'Duplicate "{base}" for {entry.relative_path} -> {candidate}')
        used[candidate] = 1
        resolved.append(entry.model_copy(update={'identifier': candidate}))

    return resolved, warnings


def sort_entries(config: AssetGenConfig, entries: List[AssetEntry]) -> List[AssetEntry]:
    if config.sort == 'path':
        return sorted(entries, key=lambda e: e.relative_path)
    # 기본값 (알 수 없는 값 포함): 식별자 순
    return sorted(entries, key=lambda e: e.identifier)


def collect_entries(config: AssetGenConfig) -> Tuple[List[AssetEntry], List[str]]:
    """스캔 -> 필터 -> 식별자 생성 -> 중복 해결 -> 정렬"""
    entries: List[AssetEntry] = []
    for root in config.roots:
        for relative_path in scan_root(root):
            if not is_included(config, root, relative_path):
                continue
            identifier = build_identifier(
                relative_path,
                case_style=config.naming_case,
                prefix=config.prefix,
            )
            entries.append(AssetEntry(root=root, relative_path=relative_path, identifier=identifier))

    entries, warnings = deduplicate(entries)
    return sort_entries(config, entries), warnings


# --- 전체 파이프라인 ---
def generate_assets(
    config: Optional[AssetGenConfig] = None,
    config_path: Optional[Union[str, Path]] = None,
    dry_run: bool = False,
    verbose: bool = False,
) -> GenerationResult:
    """
    에셋 디렉토리를 스캔해 Dart 상수 파일을 생성합니다.
    내용이 기존 파일과 같으면(해시 비교) 쓰지 않습니다.
    출력 경로에 대한 OSError 만 호출자에게 전달됩니다.
    """
    cfg = config if config is not None else load_config(config_path)
    report = logger.info if verbose else logger.debug

    entries, warnings = collect_entries(cfg)

    validation = None
    if cfg.validate_pubspec:
        asset_paths = [entry.path for entry in entries]
        validation = validate_assets(asset_paths, cfg.roots, cfg.pubspec_path)
        if verbose:
            for line in format_validation_report(validation):
                report(line)

    new_content = render_output(cfg, entries)

    output_path = Path(cfg.output)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    old_content = output_path.read_text(encoding='utf-8', errors='replace') if output_path.is_file() else ''
    skipped = content_hash(new_content) == content_hash(old_content)

    if not dry_run and not skipped:
        output_path.write_text(new_content, encoding='utf-8')

    if skipped:
        report(f"No changes. ({len(entries)} assets)")
    else:
        report(f"Generated {len(entries)} assets → {cfg.output}")
    for warning in warnings:
        report(f"WARN: {warning}")

    return GenerationResult(
        count=len(entries),
        skipped=skipped,
        warnings=warnings,
        validation=validation,
    )
