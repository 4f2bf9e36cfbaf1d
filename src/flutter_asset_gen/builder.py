# src/flutter_asset_gen/builder.py
import logging
from pathlib import Path
from typing import Callable, Dict, List, Union

from .config import DEFAULT_CONFIG_FILE, parse_config_text
from .logic import collect_entries
from .render import render_output

logger = logging.getLogger(__name__)

# (출력 경로, 생성된 텍스트) 를 받아 저장하는 호스트 빌드 시스템 쪽 writer
Writer = Callable[[str, str], None]


class AssetGenBuilder:
    """
    빌드 파이프라인 훅: 센티널 설정 파일(asset_gen.yaml)이 감지되면
    같은 렌더링 로직으로 텍스트를 만들어 호스트가 제공한 writer 에 넘깁니다.
    저장과 해시 비교(idempotence)는 호스트 쪽 책임입니다.
    """

    build_extensions: Dict[str, List[str]] = {
        DEFAULT_CONFIG_FILE: ['lib/generated/assets.dart'],
    }

    def build(self, config_text: str, writer: Writer) -> str:
        config = parse_config_text(config_text).copy_with(build_runner_mode=True)
        entries, warnings = collect_entries(config)
        for warning in warnings:
            logger.debug(f"WARN: {warning}")

        content = render_output(config, entries)
        writer(config.output, content)
        return content

    def build_from_file(self, config_path: Union[str, Path], writer: Writer) -> bool:
        """센티널 파일이 없으면 아무것도 하지 않고 False 를 반환합니다."""
        path = Path(config_path)
        if not path.is_file():
            logger.debug(f"Sentinel config {path} not found. Nothing to build.")
            return False
        self.build(path.read_text(encoding='utf-8'), writer)
        return True
