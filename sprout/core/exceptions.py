"""统一异常体系

所有业务异常继承 SproutError，替代散落的 ValueError / RuntimeError。
CLI 层据 code 输出友好提示并以非零状态退出。

传播约定:
  - BuildError 仅在 Builder 内部被捕获，转为「尝试下一个构建策略」
  - 其余异常原样上抛到命令入口
"""

from __future__ import annotations


class SproutError(Exception):
    """sprout 基础异常"""

    code: str = "UNKNOWN"

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ConfigError(SproutError):
    """配置文件缺失、内容无效或运行环境不满足要求"""

    code = "CONFIG_ERROR"


class ValidationError(SproutError):
    """输入数据校验失败"""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, details: list[str] | None = None) -> None:
        super().__init__(message)
        self.details = details or []


class ExecutionError(SproutError):
    """外部命令执行失败"""

    code = "EXECUTION_ERROR"


class BuildError(SproutError):
    """构建失败（可恢复：Builder 会继续尝试下一个匹配的策略）"""

    code = "BUILD_FAILED"

    def __init__(self, message: str, build_system: str = "") -> None:
        super().__init__(message)
        self.build_system = build_system


class InstallError(SproutError):
    """安装失败（不重试，不回滚）"""

    code = "INSTALL_FAILED"

    def __init__(self, message: str, package_name: str = "") -> None:
        super().__init__(message)
        self.package_name = package_name


class DependencyError(SproutError):
    """循环依赖、依赖安装失败或仍被其他包依赖"""

    code = "DEPENDENCY_ERROR"

    def __init__(self, message: str, package_name: str = "") -> None:
        super().__init__(message)
        self.package_name = package_name


class RepositoryError(SproutError):
    """仓库列表读写或远程获取失败"""

    code = "REPOSITORY_ERROR"

    def __init__(self, message: str, url: str = "") -> None:
        super().__init__(message)
        self.url = url


class PackageNotFoundError(SproutError):
    """包在仓库列表或本地安装中不存在"""

    code = "PACKAGE_NOT_FOUND"

    def __init__(self, package_name: str, message: str = "") -> None:
        super().__init__(message or f"包不存在: {package_name}")
        self.package_name = package_name
