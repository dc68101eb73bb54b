"""工具模块.

主要工具:
- structlog_config: 结构化日志配置
- time_utils: 日期时间文本解析与显示
- request_context: 请求级页面辅助对象的存取
- logging.console: 请求级调试控制台
"""
