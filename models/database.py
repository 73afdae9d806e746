"""数据库基础配置模块

提供声明式基类、引擎与会话工厂的创建函数，以及会话/事务边界。
引擎和会话工厂在进程启动时创建一次，不在模块级别保存全局实例。
"""
import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.orm.exc import StaleDataError
from sqlalchemy.pool import StaticPool

from utils.exceptions import BusinessException, ResourceConflictException, TransactionException

logger = logging.getLogger(__name__)

# 创建基础模型类
Base = declarative_base()


def create_db_engine(database_url: str, echo: bool = False) -> Engine:
    """根据数据库URL创建引擎"""
    if database_url.startswith("sqlite"):
        connect_args = {"check_same_thread": False}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            # 内存数据库需要所有会话共享同一个连接
            return create_engine(
                database_url,
                echo=echo,
                connect_args=connect_args,
                poolclass=StaticPool,
            )
        return create_engine(database_url, echo=echo, connect_args=connect_args)

    return create_engine(database_url, echo=echo, pool_pre_ping=True)


def create_session_factory(engine: Engine) -> sessionmaker:
    """创建会话工厂

    expire_on_commit=False 使服务方法返回的实体在会话关闭后仍可读取。
    """
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        expire_on_commit=False,
        bind=engine,
    )


def create_tables(engine: Engine) -> None:
    """创建所有数据表"""
    # 导入模型以注册到 Base.metadata
    import models  # noqa: F401

    Base.metadata.create_all(bind=engine)


@contextmanager
def session_scope(session_factory: sessionmaker, action: Optional[str] = None) -> Iterator[Session]:
    """会话/事务边界

    正常退出时提交，任何异常都回滚，会话在所有退出路径上关闭。
    业务异常原样抛出；版本冲突转换为 ResourceConflictException；
    传入 action 时，其他异常包装为 TransactionException。
    """
    session = session_factory()
    try:
        yield session
        session.commit()
    except BusinessException:
        session.rollback()
        raise
    except StaleDataError as e:
        session.rollback()
        logger.warning(f"并发修改冲突，事务已回滚: {e}")
        raise ResourceConflictException("数据已被其他请求修改，请刷新后重试") from e
    except Exception as e:
        session.rollback()
        if action is None:
            raise
        logger.error(f"{action}失败，事务已回滚: {e}")
        raise TransactionException(f"{action}失败: {e}") from e
    finally:
        session.close()
