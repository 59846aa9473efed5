from typing import Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError

# 可以全局复用一个实例
pwd_hasher = PasswordHasher()

def hash_password(plain_password: str) -> str:
    """
    使用 Argon2 对文章访问密码进行哈希
    """
    return pwd_hasher.hash(plain_password)

def verify_password(plain_password: Optional[str], hashed_password: Optional[str]) -> bool:
    """
    校验明文密码是否匹配哈希，任意一方为空都视为不匹配
    """
    if not plain_password or not hashed_password:
        return False
    try:
        return pwd_hasher.verify(hashed_password, plain_password)
    except (VerificationError, InvalidHashError):
        return False
