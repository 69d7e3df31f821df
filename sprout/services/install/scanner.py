"""构建产物分类

一次完整递归遍历，把条目分到 可执行文件 / 库 / 头文件 / 特殊目录 几个桶里。

对每个条目，目录名匹配优先于文件类型判断:
  - 自身或父目录名为 include          → include 目录（按绝对路径去重）
  - 自身或父目录名为 bin              → bin 目录
  - 自身或父目录名为 lib/libs/lib32/lib64 → lib 目录
命中特殊目录的条目不再单独分类，但遍历仍会进入其中。

其余非目录条目按文件名归类:
  - 可执行: 普通文件且带任意执行位（bldit 脚本除外）
  - 库: 扩展名 .so/.o/.a/.prl/.spec，或文件名含 .so./.o./.a.（如 libfoo.so.1.2.3）
  - 头文件: 扩展名 .h/.hpp/.hxx/.h++

这是基于命名约定的启发式分类，并不检查文件内容。
"""

from __future__ import annotations

import logging
from pathlib import Path

from sprout.core.models import BLDIT_SCRIPT, ScannedFileSet
from sprout.utils.fs import is_executable, walk_dir

logger = logging.getLogger(__name__)

INCLUDE_DIR_NAMES = frozenset({"include"})
BIN_DIR_NAMES = frozenset({"bin"})
LIB_DIR_NAMES = frozenset({"lib", "libs", "lib32", "lib64"})

LIBRARY_SUFFIXES = (".so", ".o", ".a", ".prl", ".spec")
LIBRARY_INFIXES = (".so.", ".o.", ".a.")
HEADER_SUFFIXES = (".h", ".hpp", ".hxx", ".h++")

# 版本控制元数据不属于构建产物
SKIP_DIRS = frozenset({".git"})


def is_library(file_name: str) -> bool:
    return file_name.endswith(LIBRARY_SUFFIXES) or any(
        infix in file_name for infix in LIBRARY_INFIXES
    )


def is_header(file_name: str) -> bool:
    return file_name.endswith(HEADER_SUFFIXES)


def _push_once(bucket: list[str], path: Path) -> None:
    p = str(path)
    if p not in bucket:
        bucket.append(p)


class FileScanner:
    """构建目录分类器"""

    def scan(self, build_dir: str | Path) -> ScannedFileSet:
        root = Path(build_dir).absolute()
        scanned = ScannedFileSet()

        # 按 include → bin → lib 的顺序匹配特殊目录桶
        special = (
            (INCLUDE_DIR_NAMES, scanned.include_dirs),
            (BIN_DIR_NAMES, scanned.bin_dirs),
            (LIB_DIR_NAMES, scanned.lib_dirs),
        )

        for path in walk_dir(root, skip=SKIP_DIRS):
            base, parent = path.name, path.parent.name

            for names, bucket in special:
                if base in names or parent in names:
                    # 看到的可能是目录本身，也可能是其中的文件；后者记录父目录
                    _push_once(bucket, path if base in names else path.parent)
                    break
            else:
                if path.is_dir() and not path.is_symlink():
                    continue
                if base != BLDIT_SCRIPT and is_executable(path):
                    scanned.executables.append(str(path))
                elif is_library(base):
                    scanned.libraries.append(str(path))
                elif is_header(base):
                    scanned.headers.append(str(path))

        logger.debug("扫描完成 %s: %s", root, scanned.summary())
        return scanned
