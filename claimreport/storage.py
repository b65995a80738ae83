from __future__ import annotations

from pathlib import Path

from .config import get_settings
from .types import RenderResult


def output_root(output_dir: Path | str | None = None) -> Path:
    root = Path(output_dir) if output_dir is not None else get_settings().output_dir
    root.mkdir(parents=True, exist_ok=True)
    return root


def write_bytes_atomic(path: Path, content: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + '.tmp')
    tmp.write_bytes(content)
    tmp.replace(path)


def write_text_atomic(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + '.tmp')
    tmp.write_text(content, encoding='utf-8')
    tmp.replace(path)


def save_render_result(result: RenderResult, output_dir: Path | str | None = None) -> Path:
    if not result.success or not result.file_name:
        raise ValueError(f'cannot save a failed render: {result.error}')

    path = output_root(output_dir) / Path(result.file_name).name
    if result.buffer is not None:
        write_bytes_atomic(path, result.buffer)
    elif result.html is not None:
        write_text_atomic(path, result.html)
    else:
        raise ValueError(f'render result for {result.file_name} has no content')
    return path
