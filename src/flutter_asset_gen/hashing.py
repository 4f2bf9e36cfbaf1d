# src/flutter_asset_gen/hashing.py
import hashlib


def content_hash(content: str) -> str:
    """생성된 내용이 기존 파일과 같은지 비교하기 위한 MD5 hex digest."""
    return hashlib.md5(content.encode('utf-8')).hexdigest()
