# src/flutter_asset_gen/render.py
from enum import Enum
from typing import Dict, List, Sequence

from .models import AssetEntry, AssetGenConfig

HEADER_BANNER = '// GENERATED CODE – DO NOT MODIFY.'
HEADER_USAGE = '// Run: flutter-asset-gen'
HEADER_BUILD_RUNNER = '// Generated by build_runner'


class OutputKind(Enum):
    CLASS = 'class'
    ENUM = 'enum'

    @classmethod
    def for_config(cls, config: AssetGenConfig) -> "OutputKind":
        return cls.ENUM if config.generate_enum else cls.CLASS


def _render_header(config: AssetGenConfig) -> List[str]:
    lines = [HEADER_BANNER, HEADER_USAGE]
    if config.build_runner_mode:
        lines.append(HEADER_BUILD_RUNNER)
    lines.append('')
    return lines


def _dart_string(value: str) -> str:
    # 파일 이름의 \ " $ 가 Dart 문자열 리터럴/보간을 깨지 않도록 escape
    escaped = value.replace('\\', '\\\\').replace('"', '\\"').replace('$', '\\$')
    return f'"{escaped}"'


def _render_constant(entry: AssetEntry) -> List[str]:
    return [
        f'  /// {entry.path}',
        f'  static const {entry.identifier} = {_dart_string(entry.path)};',
    ]


def _group_by_root(entries: Sequence[AssetEntry]) -> Dict[str, List[AssetEntry]]:
    # 정렬된 항목에서 root 가 처음 등장한 순서대로 묶음
    groups: Dict[str, List[AssetEntry]] = {}
    for entry in entries:
        groups.setdefault(entry.root, []).append(entry)
    return groups


def _render_class(config: AssetGenConfig, entries: Sequence[AssetEntry]) -> List[str]:
    name = config.class_name
    lines = [
        f'class {name} {{',
        f'  const {name}._();',
        '',
    ]

    if config.group_by_root:
        for root, group in _group_by_root(entries).items():
            lines.append(f'  // --- {root} ---')
            for entry in group:
                lines.extend(_render_constant(entry))
            lines.append('')
    else:
        for entry in entries:
            lines.extend(_render_constant(entry))
        lines.append('')

    if config.generate_map:
        lines.append('  static const Map<String,String> all = {')
        lines.extend(f'    "{e.identifier}": {e.identifier},' for e in entries)
        lines.append('  };')

    lines.append('}')
    return lines


def _render_enum(config: AssetGenConfig, entries: Sequence[AssetEntry]) -> List[str]:
    name = config.class_name
    lines = [f'enum {name} {{']

    for index, entry in enumerate(entries):
        terminator = ';' if index == len(entries) - 1 else ','
        lines.append(f'  /// {entry.path}')
        lines.append(f'  {entry.identifier}({_dart_string(entry.path)}){terminator}')
    if not entries:
        lines.append('  ;')  # 값이 없는 enum 도 생성자/멤버를 가지려면 ';' 가 필요

    lines.extend([
        '',
        f'  const {name}(this.path);',
        '',
        '  final String path;',
        '',
        '  @override',
        '  String toString() => path;',
        '',
        f'  static const Map<String, {name}> all = {{',
    ])
    lines.extend(f'    "{e.identifier}": {name}.{e.identifier},' for e in entries)
    lines.append('  };')
    lines.append('}')
    return lines


def render_output(config: AssetGenConfig, entries: Sequence[AssetEntry]) -> str:
    """
    정렬/중복 제거가 끝난 항목들로 Dart 소스 전체를 만듭니다.
    같은 입력이면 항상 같은 바이트를 반환합니다. (타임스탬프 등 없음)
    """
    lines: List[str] = []
    if config.add_header:
        lines.extend(_render_header(config))

    if OutputKind.for_config(config) is OutputKind.ENUM:
        lines.extend(_render_enum(config, entries))
    else:
        lines.extend(_render_class(config, entries))

    return '\n'.join(lines) + '\n'
