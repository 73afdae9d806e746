"""TaskHive API 入口

开发环境: python main.py
生产环境: uvicorn main:app
"""
import uvicorn

from config.app_config import create_app
from config.settings import settings

app = create_app()

if __name__ == "__main__":
    print(f"启动 {settings.APP_NAME}: http://{settings.HOST}:{settings.PORT} (docs: /docs)")
    uvicorn.run(
        "main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level="debug" if settings.DEBUG else "info",
    )
