"""godeps - Go 模块依赖解析器"""

__version__ = "0.1.0"
