# src/flutter_asset_gen/watcher.py
"""
에셋 디렉토리를 감시하다가 변경이 생기면 생성 파이프라인을 다시 실행합니다.

상태는 두 가지뿐입니다: Idle (start 전 / stop 후) 과 Watching.
이벤트가 연달아 들어오면 마지막 이벤트로부터 DEBOUNCE_SECONDS 후에 한 번만 재생성합니다.
"""
import logging
import os
import threading
from pathlib import PurePosixPath
from typing import List, Optional

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer
from watchdog.observers.api import ObservedWatch

from . import logic
from .models import AssetGenConfig
from .utils import matches_any, normalize_path

logger = logging.getLogger(__name__)

DEBOUNCE_SECONDS = 0.3

# 생성/수정/삭제/이름변경만 관심 대상 (opened/closed 등은 무시)
WATCHED_EVENT_TYPES = frozenset({'created', 'modified', 'deleted', 'moved'})
IGNORED_SUFFIXES = ('.tmp', '.swp', '~')


class _RootEventHandler(FileSystemEventHandler):
    """watchdog 이벤트를 AssetWatcher 로 전달"""

    def __init__(self, watcher: "AssetWatcher"):
        super().__init__()
        self._watcher = watcher

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.event_type not in WATCHED_EVENT_TYPES:
            return
        paths = [os.fsdecode(event.src_path)]
        if event.event_type == 'moved' and getattr(event, 'dest_path', ''):
            # 감시 대상에서 빠져나가는 이름변경도 재생성이 필요하므로 양쪽 경로 모두 검사
            paths.append(os.fsdecode(event.dest_path))
        self._watcher.handle_paths(paths)


class AssetWatcher:
    def __init__(self, config: AssetGenConfig, debounce_seconds: float = DEBOUNCE_SECONDS):
        self.config = config
        self.debounce_seconds = debounce_seconds
        self._lock = threading.RLock()  # stop() 이 시그널 핸들러에서 호출될 수 있음
        self._generation_lock = threading.Lock()  # 재생성은 한 번에 하나만
        self._running = False
        self._observer: Optional[Observer] = None
        self._watches: List[ObservedWatch] = []
        self._debounce_timer: Optional[threading.Timer] = None
        self._output_realpath = os.path.realpath(config.output)

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self) -> None:
        """초기 생성을 한 번 실행한 뒤, 존재하는 root 들을 재귀적으로 감시합니다."""
        with self._lock:
            if self._running:
                return
            self._running = True

        logger.info("Starting watch mode...")
        logger.info(f"Watching directories: {', '.join(self.config.roots)}")
        logger.info(f"Output: {self.config.output}")

        self._regenerate()

        observer = Observer()
        handler = _RootEventHandler(self)
        watches: List[ObservedWatch] = []
        for root in self.config.roots:
            if not os.path.isdir(root):
                # 없는 root 는 이후에도 다시 시도하지 않음
                logger.warning(f"Directory {root} does not exist, skipping...")
                continue
            watches.append(observer.schedule(handler, root, recursive=True))

        with self._lock:
            # 초기 생성 도중 stop() 이 호출됐다면 감시를 시작하지 않음
            if not self._running:
                return
            observer.start()
            self._observer = observer
            self._watches = watches

    def stop(self) -> None:
        """대기 중인 타이머와 모든 감시를 취소합니다. 이미 실행 중인 재생성은 끝까지 진행됩니다."""
        with self._lock:
            if not self._running:
                return
            self._running = False
            if self._debounce_timer is not None:
                self._debounce_timer.cancel()
                self._debounce_timer = None

        logger.info("Stopping watch mode...")
        observer = self._observer
        if observer is not None:
            for watch in self._watches:
                observer.unschedule(watch)
            observer.stop()
            if observer.is_alive():
                observer.join()
        self._watches.clear()
        self._observer = None
        logger.info("Watch mode stopped")

    def should_trigger(self, path: str) -> bool:
        """임시 파일, 출력 파일 자신, 허용되지 않은 확장자, exclude 패턴은 무시"""
        file_name = os.path.basename(path)
        if file_name.startswith('.') or file_name.endswith(IGNORED_SUFFIXES):
            return False

        # 출력 파일 자신이 바뀐 이벤트로 다시 생성하면 무한 루프
        if os.path.realpath(path) == self._output_realpath:
            return False

        if self.config.include_extensions is not None:
            extension = PurePosixPath(normalize_path(path)).suffix.lower()
            if extension not in self.config.include_extensions:
                return False

        relative_path = normalize_path(os.path.relpath(os.path.realpath(path)))
        if matches_any(relative_path, self.config.exclude):
            return False
        return True

    def handle_path(self, path: str) -> None:
        self.handle_paths([path])

    def handle_paths(self, paths: List[str]) -> None:
        if not self._running:
            return
        triggered = [p for p in paths if self.should_trigger(p)]
        if not triggered:
            return
        logger.debug(f"Change detected: {', '.join(triggered)}")
        self._schedule()

    def _schedule(self) -> None:
        # 기존 타이머 취소 + 새 타이머 등록을 원자적으로 (대기 중인 재생성은 최대 하나)
        with self._lock:
            if not self._running:
                return
            if self._debounce_timer is not None:
                self._debounce_timer.cancel()
            timer = threading.Timer(self.debounce_seconds, self._on_debounce_expired)
            timer.daemon = True
            self._debounce_timer = timer
            timer.start()

    def _on_debounce_expired(self) -> None:
        with self._lock:
            # 취소 직전에 이미 만료된 이전 타이머라면 무시
            if not self._running or threading.current_thread() is not self._debounce_timer:
                return
            self._debounce_timer = None
        self._regenerate()

    def _regenerate(self) -> None:
        """재생성 중 발생한 오류는 기록만 하고 감시는 계속합니다."""
        # 이전 재생성이 아직 실행 중이면 끝날 때까지 대기 (출력 파일 동시 쓰기 방지)
        with self._generation_lock:
            try:
                result = logic.generate_assets(config=self.config, verbose=True)
            except Exception as e:
                logger.error(f"Generation error: {e}")
                return

        if result.skipped:
            logger.info(f"No changes detected ({result.count} assets)")
        else:
            logger.info(f"Generated {result.count} assets → {self.config.output}")
