# src/flutter_asset_gen/models.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Any, List, Optional

from .utils import normalize_path


class AssetGenConfig(BaseModel):
    """asset_gen.yaml 의 구조를 정의하고 유효성을 검사하는 모델 (한 번 만들면 변경 불가)"""

    model_config = ConfigDict(frozen=True, extra='forbid', populate_by_name=True)

    roots: List[str] = Field(default_factory=lambda: ['assets'])  # 스캔할 디렉토리 (순서 중요)
    output: str = 'lib/generated/assets.dart'
    class_name: str = 'Assets'
    exclude: List[str] = Field(default_factory=list)              # glob 패턴 ('*' 만 특수문자)
    include_extensions: Optional[List[str]] = None                # None 이면 모든 확장자 허용
    naming_case: str = Field(default='camel', alias='case')      # camel | snake | keep
    sort: str = 'identifier'                                      # identifier | path
    group_by_root: bool = True
    add_header: bool = True
    generate_map: bool = True
    prefix: str = ''
    watch_mode: bool = False
    generate_enum: bool = False
    validate_pubspec: bool = True
    build_runner_mode: bool = False
    pubspec_path: Optional[str] = None

    @classmethod
    def defaults(cls) -> "AssetGenConfig":
        return cls()

    def copy_with(self, **overrides: Any) -> "AssetGenConfig":
        """지정한 필드만 바꾼 새 설정을 반환합니다. (model_copy 와 달리 값 검증을 다시 수행)"""
        data = self.model_dump()
        data.update(overrides)
        return type(self).model_validate(data)


class AssetEntry(BaseModel):
    """한 번의 실행 동안만 존재하는 에셋 항목"""
    root: str
    relative_path: str      # root 기준 상대 경로 (항상 '/' 구분자)
    identifier: str

    @property
    def path(self) -> str:
        # 생성 파일에 들어가는 경로: root 의 '\' 를 '/' 로 바꾼 뒤 상대 경로를 붙임
        return f"{normalize_path(self.root)}/{self.relative_path}"


class ValidationResult(BaseModel):
    """pubspec.yaml 선언 목록과 실제 발견된 에셋의 비교 결과"""

    model_config = ConfigDict(frozen=True)

    is_valid: bool
    missing_assets: List[str] = Field(default_factory=list)  # 발견됐지만 pubspec 에 없는 것
    unused_assets: List[str] = Field(default_factory=list)   # pubspec 에 있지만 발견되지 않은 것
    warnings: List[str] = Field(default_factory=list)


class GenerationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    count: int
    skipped: bool            # 새 내용의 해시 == 기존 파일 해시 (쓰기 생략)
    warnings: List[str] = Field(default_factory=list)
    validation: Optional[ValidationResult] = None
