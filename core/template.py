import os

from fastapi.templating import Jinja2Templates

from core.settings import settings
from lib.template_filters import datetime_format, number_format

# 프로젝트 최상위 경로 기준 템플릿 경로
ROOT_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def get_templates_dir() -> str:
    """템플릿 경로를 반환
    - 상대경로로 설정된 경우 프로젝트 최상위 경로를 기준으로 합니다.

    Returns:
        str: 템플릿 경로
    """
    template_dir = settings.TEMPLATE_DIR
    if not os.path.isabs(template_dir):
        template_dir = os.path.join(ROOT_DIR, template_dir)
    return template_dir


class PagerTemplates(Jinja2Templates):
    """
    Jinja2Template 설정 클래스
    - 페이징 목록 출력에 사용되는 필터를 등록
    - 싱글톤 패턴으로 구현
    """
    _instance = None

    def __new__(cls, *args, **kwargs):
        if not cls._instance:
            cls._instance = super(PagerTemplates, cls).__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, directory: str = None):
        if not getattr(self, '_initialized', False):
            self._initialized = True
            super().__init__(directory=directory or get_templates_dir())

            # 템플릿 필터 설정
            self.env.filters["datetime_format"] = datetime_format
            self.env.filters["number_format"] = number_format


templates = PagerTemplates()
