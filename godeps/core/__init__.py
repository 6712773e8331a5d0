"""依赖解析核心

数据流: source (清单读取) -> parser (记录流) -> identity (坐标+证据)
-> coordinate (package-url 标识) -> resolver (对外入口)
"""
