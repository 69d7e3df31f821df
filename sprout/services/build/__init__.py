"""构建服务模块

拆分说明:
- strategy.py: 构建策略协议与标记文件检测公共部分
- strategies.py: 各工具链策略实现
- builder.py: 覆盖脚本 + 固定优先级策略链
"""

from sprout.services.build.builder import Builder, default_strategies
from sprout.services.build.strategy import BuildContext, BuildStrategy

__all__ = ["Builder", "BuildContext", "BuildStrategy", "default_strategies"]
