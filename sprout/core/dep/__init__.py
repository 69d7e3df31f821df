"""依赖声明模块

拆分说明:
- models.py: 依赖条目数据模型
- parser.py: pkgdeps 文本格式解析
- resolver.py: 依赖查询、被依赖检查、循环检测
"""

from sprout.core.dep.models import Dependency
from sprout.core.dep.parser import parse_dependency_file
from sprout.core.dep.resolver import DependencyResolver

__all__ = [
    "Dependency",
    "DependencyResolver",
    "parse_dependency_file",
]
