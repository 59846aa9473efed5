from sqlalchemy import Boolean, Column, Integer, String, SmallInteger, TIMESTAMP, Text, Index
from enum import IntEnum

from app.models.base import Base
from app.core.time import now

# 文章的发布状态
class PostStatus(IntEnum):
    PUBLISHED = 0     # 已发布
    DRAFT = 1         # 草稿
    RECYCLE = 2       # 回收站
    INTIMATE = 3      # 私密

# 文章的类型（同一张表存放不同的文章变体）
class PostType(IntEnum):
    POST = 0          # 普通文章
    SHEET = 1         # 独立页面

class BasePost(Base):
    """ 文章表，文章与独立页面共用，通过 type 区分。

        CREATE TABLE IF NOT EXISTS posts (
            id INT AUTO_INCREMENT PRIMARY KEY,            -- 主键ID（自增）
            type SMALLINT NOT NULL DEFAULT 0,             -- 类型（0:文章, 1:独立页面）
            title VARCHAR(100) NOT NULL,                  -- 标题
            url VARCHAR(255) NOT NULL,                    -- 访问路径（同类型内唯一，由业务层校验）
            status SMALLINT DEFAULT 1,                    -- 状态（0:发布, 1:草稿, 2:回收站, 3:私密）
            summary TEXT,                                 -- 摘要
            original_content LONGTEXT NOT NULL,           -- 原文（markdown）
            format_content LONGTEXT,                      -- 渲染后的内容（html）
            password VARCHAR(255),                        -- 访问密码（argon2 哈希）
            thumbnail VARCHAR(1023),                      -- 缩略图
            visits BIGINT DEFAULT 0,                      -- 访问量
            likes BIGINT DEFAULT 0,                       -- 点赞数
            top_priority INT DEFAULT 0,                   -- 置顶优先级
            disallow_comment BOOLEAN DEFAULT FALSE,       -- 是否禁止评论
            create_time TIMESTAMP,                        -- 创建时间
            edit_time TIMESTAMP NULL,                     -- 编辑时间（只在更新时写入）
            update_time TIMESTAMP                         -- 行修改时间
        );

        -- 索引建议：
        -- 1) 按 type + url 查询单篇文章
        CREATE INDEX idx_posts_type_url ON posts (type, url);

        -- 2) 按 type + status + create_time 查询上一篇 / 下一篇
        CREATE INDEX idx_posts_type_status_create_time ON posts (type, status, create_time);
    """

    __tablename__ = "posts"

    id = Column(Integer, primary_key=True, autoincrement=True)                # 主键ID
    type = Column(SmallInteger, nullable=False, default=PostType.POST.value)  # 类型
    title = Column(String(100), nullable=False)                               # 标题
    url = Column(String(255), nullable=False)                                 # 访问路径
    status = Column(SmallInteger, default=PostStatus.DRAFT.value)             # 发布状态
    summary = Column(Text, nullable=True)                                     # 摘要
    original_content = Column(Text, nullable=False, default="")               # 原文
    format_content = Column(Text, nullable=True)                              # 渲染结果
    password = Column(String(255), nullable=True)                             # 访问密码
    thumbnail = Column(String(1023), nullable=True)                           # 缩略图
    visits = Column(Integer, nullable=False, default=0)                       # 访问量
    likes = Column(Integer, nullable=False, default=0)                        # 点赞数
    top_priority = Column(Integer, nullable=False, default=0)                 # 置顶优先级
    disallow_comment = Column(Boolean, nullable=False, default=False)         # 禁止评论
    create_time = Column(TIMESTAMP(timezone=True), default=now)               # 创建时间
    edit_time = Column(TIMESTAMP(timezone=True), nullable=True)               # 编辑时间
    update_time = Column(TIMESTAMP(timezone=True), default=now, onupdate=now) # 修改时间

    __table_args__ = (
        Index("idx_posts_type_url", "type", "url"),
        Index("idx_posts_type_status_create_time", "type", "status", "create_time"),
    )
