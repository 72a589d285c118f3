"""
环境变量配置
"""
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """应用配置"""

    # 应用配置
    app_name: str = "Taskboard"
    debug: bool = False

    # 数据库配置
    # 普通的 sqlite:// 会在 DatabaseManager 中升级为 sqlite+aiosqlite://
    database_url: str = "sqlite+aiosqlite:///./taskboard.sqlite3"

    # 服务监听
    host: str = "127.0.0.1"
    port: int = 3000

    model_config = SettingsConfigDict(
        env_prefix="TASKBOARD_",  # TASKBOARD_DATABASE_URL 等
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


# 只给进程入口使用，库代码通过参数拿到需要的配置
settings = Settings()
