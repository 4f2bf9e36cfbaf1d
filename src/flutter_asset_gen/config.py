# src/flutter_asset_gen/config.py
import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import ValidationError

from .models import AssetGenConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = 'asset_gen.yaml'

# 디스크 키 -> 모델 필드 이름
LIST_KEYS = {
    'roots': 'roots',
    'exclude': 'exclude',
    'include_extensions': 'include_extensions',
}
STRING_KEYS = {
    'output': 'output',
    'class_name': 'class_name',
    'case': 'naming_case',
    'sort': 'sort',
    'prefix': 'prefix',
    'pubspec_path': 'pubspec_path',
}
BOOL_KEYS = {
    'group_by_root': 'group_by_root',
    'add_header': 'add_header',
    'generate_map': 'generate_map',
    'watch_mode': 'watch_mode',
    'generate_enum': 'generate_enum',
    'validate_pubspec': 'validate_pubspec',
    'build_runner_mode': 'build_runner_mode',
}


_INLINE_COMMENT_RE = re.compile(r'(^|\s+)#.*$')
NULL_VALUES = ('null', '~')


class ConfigError(ValueError):
    """설정 문서의 형식이 잘못된 경우"""


def _overrides_from_mapping(doc: Dict[str, Any]) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    for key, field in LIST_KEYS.items():
        value = doc.get(key)
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            overrides[field] = [str(v) for v in value]
        else:
            # 단일 값도 리스트로 취급
            overrides[field] = [str(value)]
    for key, field in STRING_KEYS.items():
        value = doc.get(key)
        if value is not None:
            overrides[field] = str(value)
    for key, field in BOOL_KEYS.items():
        value = doc.get(key)
        if isinstance(value, bool):  # bool 이 아닌 값은 무시하고 기본값 유지
            overrides[field] = value
    return overrides


def config_from_mapping(doc: Dict[str, Any]) -> AssetGenConfig:
    try:
        return AssetGenConfig.defaults().copy_with(**_overrides_from_mapping(doc))
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def load_config(path: Optional[Union[str, Path]] = None) -> AssetGenConfig:
    """
    YAML 설정 파일을 읽어 AssetGenConfig 를 반환합니다.
    파일이 없거나 비어있으면 기본 설정을 그대로 사용합니다. (오류 아님)
    """
    config_path = Path(path) if path is not None else Path(DEFAULT_CONFIG_FILE)
    if not config_path.is_file():
        logger.debug(f"Config file not found at {config_path}. Using defaults.")
        return AssetGenConfig.defaults()

    try:
        with open(config_path, 'rt', encoding='utf-8') as f:
            doc = yaml.safe_load(f.read())
    except yaml.YAMLError as e:
        raise ConfigError(f"Failed to parse {config_path}: {e}") from e

    if doc is None:
        logger.debug(f"Config file {config_path} is empty. Using defaults.")
        return AssetGenConfig.defaults()
    if not isinstance(doc, dict):
        raise ConfigError(f"{config_path} must contain a mapping at the top level")

    logger.debug(f"Loaded configuration from {config_path}")
    return config_from_mapping(doc)


# --- build hook 용 관대한(line 기반) 파서 ---

def _strip_quotes(value: str) -> str:
    return value.replace('"', '').replace("'", '')


def _strip_comment(value: str) -> str:
    # 'case: camel   # camel | snake' 처럼 값 뒤에 붙은 주석 제거
    return _INLINE_COMMENT_RE.sub('', value).strip()


def _parse_string_list(lines: List[str], start_index: int) -> Optional[List[str]]:
    """
    'key: [a, b]' 인라인 리스트 또는 'key:' 다음의 들여쓴 '- item' 줄들을 파싱합니다.
    항목이 하나도 없으면 None.
    """
    start_line = _strip_comment(lines[start_index].strip())

    list_start = start_line.find('[')
    list_end = start_line.find(']')
    if list_start != -1 and list_end > list_start:
        items = [_strip_quotes(s.strip()) for s in start_line[list_start + 1:list_end].split(',')]
        return [s for s in items if s] or None

    result: List[str] = []
    if start_line.endswith(':'):
        for line in lines[start_index + 1:]:
            trimmed = line.strip()
            # 들여쓰기 없는 줄 = 다음 키
            if trimmed and not line.startswith((' ', '\t')):
                break
            if trimmed.startswith('-'):
                value = _strip_quotes(_strip_comment(trimmed[1:]))
                if value:
                    result.append(value)
    return result or None


def parse_config_text(content: str) -> AssetGenConfig:
    """
    build hook 에서 사용하는 line 기반 파서.
    'key: value', 'key:' + '- item' 목록, 'key: [a, b]' 형식을 인식하고
    알 수 없는 키는 무시합니다.
    """
    lines = content.split('\n')
    doc: Dict[str, Any] = {}

    for i, line in enumerate(lines):
        trimmed = line.strip()
        if not trimmed or trimmed.startswith('#'):
            continue
        if line.startswith((' ', '\t')):
            continue  # 리스트 항목 등 들여쓴 줄은 상위 키에서 처리
        key, sep, value = trimmed.partition(':')
        if not sep:
            continue
        key = key.strip()
        value = _strip_comment(value)

        if key in LIST_KEYS:
            items = _parse_string_list(lines, i)
            if items is not None:
                doc[key] = items
        elif key in BOOL_KEYS:
            if value in ('true', 'false'):
                doc[key] = value == 'true'
        elif key in STRING_KEYS:
            if value in NULL_VALUES:
                continue  # YAML 의 null 과 같게 취급 (기본값 유지)
            value = _strip_quotes(value)
            if key == 'pubspec_path' and not value:
                continue
            doc[key] = value

    return config_from_mapping(doc)
