"""예외처리 Core 모듈"""
import logging
from typing import Any, Dict

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.templating import _TemplateResponse

logger = logging.getLogger(__name__)


class AlertException(HTTPException):
    """스크립트 경고창 출력을 위한 예외 클래스
    - HTTPExceptiond에서 페이지 이동을 위한 url 매개변수를 추가적으로 받는다.
    """

    def __init__(self, detail: str = None, status_code: int = 200, url: str = None):
        self.status_code = status_code
        self.detail = detail
        self.url = url


class PagerError(ValueError):
    """페이징 처리 중 잘못된 인수가 전달된 경우의 기본 예외 클래스"""


class PagerLimitError(PagerError):
    """한 페이지당 항목 수(limit)가 0 이하인 경우"""

    def __init__(self, limit: Any = None):
        self.limit = limit
        super().__init__("limit should be > 0")


class PagerSourceError(PagerError):
    """페이징할 수 없는 컬렉션이 전달된 경우"""


def regist_core_exception_handler(app: FastAPI) -> None:
    """애플리케이션 인스턴스에 예외처리 핸들러를 등록합니다."""

    @app.exception_handler(AlertException)
    async def alert_exception_handler(
            request: Request, exc: AlertException):
        """AlertException 예외처리 handler 등록"""
        context = {
            "request": request,
            "errors": exc.detail,
            "url": exc.url
        }
        return template_response("alert.html", context, exc.status_code)

    @app.exception_handler(PagerError)
    async def pager_exception_handler(request: Request, exc: PagerError):
        """PagerError 예외처리 handler 등록
        - 잘못된 페이징 인수는 400 응답으로 변환합니다.
        """
        logger.warning(f"pager error on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=400,
            content={"message": str(exc)}
        )


def template_response(
        template_html: str,
        context: Dict[str, Any],
        status_code: int = 200) -> _TemplateResponse:
    """템플릿 응답 객체를 반환합니다.

    Args:
        template_html (str): 템플릿 파일명
        context (Dict[str, Any]): context 객체
        status_code (int, optional): HTTP 상태코드. Defaults to 200.

    Returns:
        _TemplateResponse: 템플릿 응답 객체
    """
    from core.template import templates

    return templates.TemplateResponse(
        request=context["request"],
        name=template_html,
        context=context,
        status_code=status_code
    )
