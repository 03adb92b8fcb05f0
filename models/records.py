# models/records.py
# Notion에 저장된 사용자/동네 레코드 모델을 정의합니다.

from dataclasses import dataclass
from typing import Optional


@dataclass
class User:
    """사용자 레코드"""
    page_id: str
    slack_id: str
    agreed_to_policy: bool = False
    kudos_count: int = 0
    last_kudos_comment: Optional[str] = None


@dataclass
class Neighborhood:
    """동네 레코드"""
    page_id: str
    name: str
    link: Optional[str] = None
