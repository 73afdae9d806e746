"""工具模块

异常、状态码、认证、日志与响应格式等通用工具
"""
