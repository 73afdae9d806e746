"""配置模块

包含应用设置、应用创建、中间件配置和异常处理配置。
应用入口从 config.app_config 导入 create_app。
"""
