# src/flutter_asset_gen/logging_config.py
import logging
import logging.config
import sys
from pathlib import Path

import coloredlogs  # dictConfig 가 coloredlogs.ColoredFormatter 를 찾을 수 있도록 임포트
import yaml

# 설정 과정 자체를 기록하는 로거
config_logger = logging.getLogger(__name__)

PACKAGE_LOGGER = 'flutter_asset_gen'
CONFIG_PATH = Path(__file__).parent / 'logging_config.yaml'  # 패키지 데이터로 함께 배포됨


def _fallback(level: int) -> None:
    logging.basicConfig(level=level, format='%(levelname)s:%(name)s:%(message)s')


def setup_logging(verbose: bool = False) -> None:
    """패키지에 포함된 YAML 설정으로 로깅 시스템을 구성합니다. verbose 면 DEBUG 까지 출력."""

    # dictConfig 전에 coloredlogs 의 전역 설정을 먼저 초기화
    try:
        coloredlogs.install()
        config_logger.debug("Called coloredlogs.install() for initial setup.")
    except Exception as install_e:
        print(f"Warning: coloredlogs.install() failed during initial setup: {install_e}", file=sys.stderr)

    level = logging.DEBUG if verbose else logging.INFO

    try:
        if CONFIG_PATH.is_file():
            with open(CONFIG_PATH, 'rt', encoding='utf-8') as f:
                config = yaml.safe_load(f.read())

            if config:
                logging.config.dictConfig(config)
                config_logger.debug("Logging setup complete from YAML using dictConfig.")
            else:
                print(f"Warning: Logging configuration file {CONFIG_PATH} is empty. Using basicConfig.", file=sys.stderr)
                _fallback(level)
        else:
            print(f"Warning: Logging configuration file not found at {CONFIG_PATH}. Using basicConfig.", file=sys.stderr)
            _fallback(level)

    except yaml.YAMLError as yaml_e:
        print(f"Error parsing logging configuration file {CONFIG_PATH}: {yaml_e}", file=sys.stderr)
        print("Using basicConfig as fallback.", file=sys.stderr)
        _fallback(level)
    except (ValueError, TypeError, AttributeError, ImportError) as e:
        # dictConfig 가 잘못된 설정에 대해 던지는 예외들
        print(f"Error loading logging configuration from {CONFIG_PATH}: {e}", file=sys.stderr)
        print("Using basicConfig as fallback.", file=sys.stderr)
        _fallback(level)

    logging.getLogger(PACKAGE_LOGGER).setLevel(level)
