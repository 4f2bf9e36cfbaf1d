# src/flutter_asset_gen/utils.py
import re
from functools import lru_cache

_EXTENSION_RE = re.compile(r'\.[^.]+$')          # 마지막 '.' 부터 끝까지
_NON_ALNUM_RE = re.compile(r'[^A-Za-z0-9]+')
_LEADING_DIGIT_RE = re.compile(r'[0-9]')


def normalize_path(path: str) -> str:
    """Windows 구분자('\\')를 '/' 로 통일합니다."""
    return path.replace('\\', '/')


def build_identifier(relative_path: str, case_style: str = 'camel', prefix: str = '') -> str:
    """
    상대 경로를 Dart 식별자로 변환합니다.

    1. 확장자 제거
    2. '/' 와 영숫자가 아닌 문자열 기준으로 세그먼트 분리 (빈 세그먼트 제거)
    3. case_style 에 따라 결합 (camel / snake / keep, 알 수 없는 값은 camel)
    4. prefix 가 있으면 맨 앞 camel 세그먼트로 붙임
    5. 숫자로 시작하면 '_' 를 앞에 붙임

    예: 'icons/play_button.svg' -> 'iconsPlayButton'
    """
    without_ext = _EXTENSION_RE.sub('', relative_path)
    raw = [
        part
        for segment in without_ext.split('/')
        for part in _NON_ALNUM_RE.split(segment)
        if part
    ]
    if not raw:
        return '_'  # 비어있는 식별자는 허용되지 않으므로 고정 대체값

    if case_style == 'snake':
        identifier = '_'.join(s.lower() for s in raw)
    elif case_style == 'keep':
        identifier = '_'.join(raw)
    else:
        identifier = raw[0].lower() + ''.join(s[0].upper() + s[1:] for s in raw[1:])

    if prefix:
        identifier = prefix + identifier[0].upper() + identifier[1:]

    if _LEADING_DIGIT_RE.match(identifier):
        identifier = f"_{identifier}"
    return identifier


@lru_cache(maxsize=256)
def _compile_pattern(pattern: str) -> re.Pattern:
    # '*' 만 와일드카드, 나머지는 모두 리터럴
    return re.compile('.*'.join(re.escape(part) for part in pattern.split('*')), re.DOTALL)


def matches_pattern(path: str, pattern: str) -> bool:
    """exclude 패턴이 경로 전체와 일치하는지 확인합니다. ('*' 는 '/' 를 포함한 임의의 문자열)"""
    return _compile_pattern(pattern).fullmatch(path) is not None


def matches_any(path: str, patterns) -> bool:
    return any(matches_pattern(path, p) for p in patterns)
