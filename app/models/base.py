from sqlalchemy.orm import declarative_base

# 所有 ORM 模型共享的声明基类
Base = declarative_base()
