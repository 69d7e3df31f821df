"""文件系统工具

目录创建/删除、保留权限的复制、递归遍历、可执行判断、
文本行读写（原子写入）。
"""

from __future__ import annotations

import logging
import os
import shutil
import stat
import tempfile
from collections.abc import Iterator
from pathlib import Path

logger = logging.getLogger(__name__)

# 任意 POSIX 执行位（属主/属组/其他）
EXEC_BITS = stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH


def ensure_dir(path: str | Path) -> Path:
    p = Path(path)
    p.mkdir(parents=True, exist_ok=True)
    return p


def remove_dir(path: str | Path) -> bool:
    """递归删除目录，不存在时返回 False"""
    p = Path(path)
    if not p.exists() and not p.is_symlink():
        return False
    if p.is_dir() and not p.is_symlink():
        shutil.rmtree(p)
    else:
        p.unlink()
    return True


def copy_file_with_permissions(src: str | Path, dest: str | Path) -> None:
    """复制文件内容并保留权限位

    目标已存在且为软链接时先删除，避免写穿到链接目标。
    """
    d = Path(dest)
    if d.is_symlink():
        d.unlink()
    shutil.copyfile(src, d)
    shutil.copymode(src, d)


def copy_dir(src: str | Path, dest: str | Path) -> None:
    """递归合并复制目录（已有文件被覆盖，软链接按原样重建）"""
    s, d = Path(src), Path(dest)
    ensure_dir(d)
    for entry in os.scandir(s):
        target = d / entry.name
        if entry.is_symlink():
            if target.is_symlink() or target.exists():
                if target.is_dir() and not target.is_symlink():
                    shutil.rmtree(target)
                else:
                    target.unlink()
            os.symlink(os.readlink(entry.path), target)
        elif entry.is_dir(follow_symlinks=False):
            copy_dir(entry.path, target)
        else:
            copy_file_with_permissions(entry.path, target)


def walk_dir(root: str | Path, *, skip: frozenset[str] = frozenset()) -> Iterator[Path]:
    """深度优先遍历，目录本身先于其内容产出

    不跟随指向目录的软链接；名字在 skip 中的目录既不产出也不进入。
    根目录不存在时不产出任何条目。
    """
    r = Path(root)
    if not r.is_dir():
        return
    with os.scandir(r) as it:
        entries = sorted(it, key=lambda e: e.name)
    for entry in entries:
        path = Path(entry.path)
        if entry.is_dir(follow_symlinks=False):
            if entry.name in skip:
                continue
            yield path
            yield from walk_dir(path, skip=skip)
        else:
            yield path


def is_executable(path: str | Path) -> bool:
    """普通文件且设置了任意执行位（跟随软链接，断链视为否）"""
    try:
        st = os.stat(path)
    except OSError:
        return False
    return stat.S_ISREG(st.st_mode) and bool(st.st_mode & EXEC_BITS)


def resolve_link(link: str | Path) -> Path:
    """把软链接的目标解析为绝对路径（按链接所在目录解析相对目标，不访问目标本身）"""
    p = Path(link)
    target = os.readlink(p)
    return Path(os.path.normpath(os.path.join(p.parent, target)))


def is_within(path: str | Path, root: str | Path) -> bool:
    """path 是否等于 root 或位于 root 之下（按路径分段比较）"""
    p = os.path.normpath(str(path))
    r = os.path.normpath(str(root))
    return p == r or p.startswith(r.rstrip(os.sep) + os.sep)


def atomic_write(path: Path, content: str) -> None:
    """原子写入文件：先写临时文件再 rename，防止中途崩溃导致损坏"""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=str(path.parent), suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp, str(path))
    except Exception:
        # 只捕获普通异常，不拦截 KeyboardInterrupt/SystemExit
        try:
            os.unlink(tmp)
        except OSError:
            pass
        raise


def read_lines(path: str | Path) -> list[str]:
    """读取非空行（去除首尾空白），文件不存在返回空列表"""
    p = Path(path)
    if not p.exists():
        return []
    text = p.read_text(encoding="utf-8")
    return [line.strip() for line in text.splitlines() if line.strip()]


def write_lines(path: str | Path, lines: list[str]) -> None:
    content = "".join(f"{line}\n" for line in lines)
    atomic_write(Path(path), content)


def append_line(path: str | Path, line: str) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    existing = p.read_text(encoding="utf-8") if p.exists() else ""
    if existing and not existing.endswith("\n"):
        existing += "\n"
    atomic_write(p, f"{existing}{line}\n")
