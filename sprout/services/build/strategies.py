"""各工具链的构建策略

| 策略      | 标记文件                         | 所需工具       |
|-----------|----------------------------------|----------------|
| Autotools | configure / configure.ac         | (configure 时) |
| Cargo     | Cargo.toml                       | cargo          |
| CMake     | CMakeLists.txt                   | cmake, make    |
| Go        | go.mod                           | go             |
| Make      | Makefile / Makefile.am           | make           |
| Meson     | meson.build                      | meson          |
| Ninja     | build.ninja                      | ninja          |
| Nimble    | *.nimble                         | nimble         |
| pnpm      | pnpm-lock.yaml                   | pnpm           |
| Python    | pyproject.toml                   | pipx           |
| Zig       | build.zig                        | zig            |
"""

from __future__ import annotations

import logging
import tomllib
from pathlib import Path
from typing import Any

from sprout.core.exceptions import BuildError
from sprout.core.models import HEAD
from sprout.services.build.strategy import BuildContext, MarkerStrategy
from sprout.utils.fs import ensure_dir
from sprout.utils.git import extract_package_name, normalize_git_url

logger = logging.getLogger(__name__)


def _load_manifest(path: Path, strategy: str) -> dict[str, Any]:
    """读取 TOML 清单，格式错误视为构建失败"""
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise BuildError(f"无法解析 {path.name}: {e}", strategy) from e


def go_module_path(url: str) -> str:
    """git URL → Go 模块路径（去掉协议与 .git 后缀）"""
    path = normalize_git_url(url)
    for prefix in ("https://", "http://", "ssh://", "git://"):
        if path.startswith(prefix):
            path = path[len(prefix):]
            break
    if path.startswith("git@"):
        path = path[len("git@"):].replace(":", "/", 1)
    return path.rstrip("/")


class AutotoolsStrategy(MarkerStrategy):
    name = "Autotools"
    markers = ("configure", "configure.ac")

    def build(self, ctx: BuildContext) -> None:
        src = ctx.project_dir
        if not (src / "configure").exists() and (src / "autogen.sh").exists():
            self.run(ctx, ["sh", "autogen.sh"], "autogen.sh 执行失败")
        self.run(ctx, ["sh", "configure"], "configure 失败")

        # 同时带 CMake 清单的项目额外走一遍 CMake 配置与构建
        if (src / "CMakeLists.txt").exists():
            self.require("cmake")
            build_dir = ensure_dir(src / "build")
            self.run(ctx, ["cmake", ".."], "CMake 配置失败", cwd=build_dir)
            self.run(ctx, ["make"], "CMake 构建失败", cwd=build_dir)

        self.run(ctx, ["make"], "Make 构建失败")


class CargoStrategy(MarkerStrategy):
    name = "Cargo (Rust)"
    markers = ("Cargo.toml",)

    def build(self, ctx: BuildContext) -> None:
        self.require("cargo")
        manifest = _load_manifest(ctx.project_dir / "Cargo.toml", self.name)
        crate = str(manifest.get("package", {}).get("name", ""))

        args = ["cargo", "install", "--git", ctx.url, "--root", str(ctx.install_dir)]
        if ctx.version != HEAD:
            args += ["--tag", ctx.version]
        if crate:
            args.append(crate)
        self.run(ctx, args, "Cargo 构建失败")


class CMakeStrategy(MarkerStrategy):
    name = "CMake"
    markers = ("CMakeLists.txt",)

    def build(self, ctx: BuildContext) -> None:
        self.require("cmake", "make")
        build_dir = ensure_dir(ctx.project_dir / "build")
        self.run(ctx, ["cmake", ".."], "CMake 配置失败", cwd=build_dir)
        self.run(ctx, ["make"], "Make 构建失败", cwd=build_dir)


class GoStrategy(MarkerStrategy):
    name = "Go"
    markers = ("go.mod",)

    def build(self, ctx: BuildContext) -> None:
        self.require("go")
        # HEAD 对应模块的最新版本
        version = "latest" if ctx.version == HEAD else ctx.version
        target = f"{go_module_path(ctx.url)}@{version}"
        env = ctx.merged_env(GOBIN=str(ctx.install_dir))
        self.run(ctx, ["go", "install", target], "Go 构建失败", env=env)


class MakeStrategy(MarkerStrategy):
    name = "Make"
    markers = ("Makefile", "Makefile.am")

    def build(self, ctx: BuildContext) -> None:
        self.require("make")
        src = ctx.project_dir
        if (src / "autogen.sh").exists():
            self.run(ctx, ["sh", "autogen.sh"], "autogen.sh 执行失败")
        if (src / "configure").exists():
            self.run(ctx, ["sh", "configure"], "configure 失败")
        self.run(ctx, ["make"], "Make 构建失败")


class MesonStrategy(MarkerStrategy):
    name = "Meson"
    markers = ("meson.build",)

    def build(self, ctx: BuildContext) -> None:
        self.require("meson")
        self.run(ctx, ["meson", "setup", "build"], "Meson 配置失败")
        self.run(ctx, ["meson", "compile", "-C", "build"], "Meson 构建失败")


class NinjaStrategy(MarkerStrategy):
    name = "Ninja"
    markers = ("build.ninja",)

    def build(self, ctx: BuildContext) -> None:
        self.require("ninja")
        self.run(ctx, ["ninja"], "Ninja 构建失败")


class NimbleStrategy(MarkerStrategy):
    name = "Nimble"
    markers = ("*.nimble",)

    def detect(self, project_dir: Path) -> bool:
        p = Path(project_dir)
        return p.is_dir() and any(
            f.name.endswith(".nimble") for f in p.iterdir()
        )

    def build(self, ctx: BuildContext) -> None:
        self.require("nimble")
        pkg = extract_package_name(ctx.url)
        self.run(
            ctx, ["nimble", "install", pkg, "-p", str(ctx.install_dir)],
            "Nimble 构建失败",
        )


class PnpmStrategy(MarkerStrategy):
    name = "pnpm"
    markers = ("pnpm-lock.yaml",)

    def build(self, ctx: BuildContext) -> None:
        self.require("pnpm")
        self.run(ctx, ["pnpm", "install"], "pnpm install 失败")
        self.run(ctx, ["pnpm", "run", "build"], "pnpm 构建失败")


class PythonStrategy(MarkerStrategy):
    name = "Python (pipx)"
    markers = ("pyproject.toml",)

    def build(self, ctx: BuildContext) -> None:
        self.require("pipx")
        manifest = _load_manifest(ctx.project_dir / "pyproject.toml", self.name)
        project = str(manifest.get("project", {}).get("name", ""))
        if not project:
            raise BuildError("pyproject.toml 缺少 [project].name", self.name)

        logger.info("通过 pipx 安装 %s", project)
        env = ctx.merged_env(PIPX_BIN_DIR=str(ctx.install_dir))
        self.run(
            ctx, ["pipx", "install", "--force", str(ctx.project_dir)],
            "pipx 安装失败", env=env,
        )


class ZigStrategy(MarkerStrategy):
    name = "Zig"
    markers = ("build.zig",)

    def build(self, ctx: BuildContext) -> None:
        self.require("zig")
        self.run(ctx, ["zig", "build"], "Zig 构建失败")
