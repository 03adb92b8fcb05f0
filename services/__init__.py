
# 서비스 인스턴스 접근 함수들 import (인스턴스는 처음 사용할 때 생성)
from .notion_service import get_notion_service
from .gateway_service import get_gateway_service

# 명확한 인터페이스 노출
__all__ = [
    'get_notion_service',
    'get_gateway_service'
]
