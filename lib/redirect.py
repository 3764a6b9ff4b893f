"""303 See Other 리디렉션 응답을 위한 모듈

사용 예시:
    @router.get("/go", response_class=HTMLResponse)
    async def go(request: Request, response: Response):
        return redirect(request, response, "foo/bar")

    redirect(request, response, article_list)            # 라우트 함수
    redirect(request, response, article_view, id=3)      # 라우트 함수 + 경로 매개변수
    redirect(request, response, article_list, "recent")  # 라우트 경로 + 하위 경로
"""
import logging
from typing import Any, Optional

from fastapi import Request, Response, status
from fastapi.responses import HTMLResponse
from markupsafe import escape
from starlette.routing import BaseRoute

logger = logging.getLogger(__name__)


def _find_route(request: Request, endpoint: Any) -> Optional[BaseRoute]:
    """요청된 앱에서 endpoint 함수가 연결된 라우트를 찾습니다."""
    for route in request.app.router.routes:
        if getattr(route, "endpoint", None) is endpoint:
            return route
    return None


def resolve_target(request: Request, *target: Any, **path_params: Any) -> str:
    """리디렉션 대상을 경로 문자열로 변환합니다.
    - 라우트 함수는 해당 라우트의 경로로 변환합니다.
    - 그 외의 값은 문자열로 변환하며, 모든 값을 '/' 로 연결합니다.

    Args:
        request (Request): FastAPI Request 객체
        *target (Any): 경로 문자열 또는 라우트 함수
        **path_params (Any): 라우트 경로 매개변수

    Returns:
        str: 리디렉션 경로
    """
    parts = []
    for i, part in enumerate(target):
        if part is None:
            parts.append("")
        elif callable(part):
            route = _find_route(request, part)
            if route is None:
                raise ValueError(f"no route registered for {getattr(part, '__name__', part)!r}")
            path = str(request.app.url_path_for(route.name, **path_params))
            # 뒤에 경로가 이어지면 중복되는 '/' 제거
            parts.append(path.rstrip("/") if i < len(target) - 1 else path)
        else:
            parts.append(str(part))

    return "/".join(parts)


def follow_body(target: str) -> str:
    """리디렉션을 따르지 않는 클라이언트를 위한 HTML 본문"""
    href = escape(target)
    return f'Please follow <a href="{href}">{href}</a>!'


def redirect(request: Request, response: Response, *target: Any, **path_params: Any) -> str:
    """응답 상태를 303 See Other 로, Location 헤더를 대상 경로로 설정합니다.
    - 기존에 설정된 상태코드는 무시합니다.

    Args:
        request (Request): FastAPI Request 객체
        response (Response): 라우트 함수에 주입된 Response 객체
        *target (Any): 경로 문자열 또는 라우트 함수
        **path_params (Any): 라우트 경로 매개변수

    Returns:
        str: 이동 링크가 포함된 HTML 본문
    """
    location = resolve_target(request, *target, **path_params)
    logger.debug(f"redirect {request.url.path} -> {location!r}")

    response.status_code = status.HTTP_303_SEE_OTHER
    response.headers["Location"] = location
    return follow_body(location)


def redirect_referer(request: Request, response: Response) -> str:
    """이전 페이지(Referer 헤더)로 리디렉션합니다.
    - Referer 헤더를 검증하지 않으며, 헤더가 없으면 빈 경로로 리디렉션합니다.
    """
    referer = request.headers.get("referer")
    if referer is None:
        logger.warning(f"redirect_referer without Referer header: {request.url.path}")
    return redirect(request, response, referer)


def redirect_response(request: Request, *target: Any, **path_params: Any) -> HTMLResponse:
    """303 리디렉션 응답 객체를 반환합니다."""
    response = HTMLResponse(content="")
    body = redirect(request, response, *target, **path_params)
    return HTMLResponse(
        content=body,
        status_code=response.status_code,
        headers={"Location": response.headers["Location"]},
    )
