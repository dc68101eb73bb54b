"""日志子模块: 上下文变量、structlog 处理器与请求级调试控制台."""
