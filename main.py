import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, Form, Query, Request, Response
from fastapi.responses import HTMLResponse

from core.database import DBConnect, db_session
from core.exception import AlertException, regist_core_exception_handler
from core.models import Article, Base
from core.settings import settings
from core.template import templates
from lib.pager import paginate
from lib.redirect import redirect, redirect_referer, redirect_response

# .env 파일로부터 환경 변수를 로드합니다.
load_dotenv()

logging.basicConfig(level=logging.DEBUG if settings.APP_IS_DEBUG else logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    앱의 시작과 종료 시점에 실행되는 코드를 정의합니다.
    - yield 이전의 코드: 서버가 시작될 때 실행
    - yield 이후의 코드: 서버가 종료될 때 실행
    """
    Base.metadata.create_all(bind=DBConnect().engine)
    yield

app = FastAPI(
    debug=settings.APP_IS_DEBUG,  # 디버그 모드가 활성화 설정
    lifespan=lifespan,
    title="Pager",
    description="페이징/리디렉션 예제"
)
regist_core_exception_handler(app)


@app.get("/articles", response_class=HTMLResponse, name="article_list")
async def article_list(request: Request, db: db_session):
    """게시글 목록
    - 최신 게시글부터 PAGER_LIMIT 개씩 출력합니다.
    """
    articles, pager = paginate(request, Article, db=db, order_by=Article.id.desc())
    context = {
        "request": request,
        "articles": articles,
        "pager": pager,
    }
    return templates.TemplateResponse(request, "article_list.html", context)


@app.get("/articles/{article_id}", response_class=HTMLResponse, name="article_view")
async def article_view(request: Request, db: db_session, article_id: int):
    """게시글 보기"""
    article = db.get(Article, article_id)
    if not article:
        raise AlertException("존재하지 않는 게시글입니다.", 404, request.app.url_path_for("article_list"))

    context = {
        "request": request,
        "article": article,
    }
    return templates.TemplateResponse(request, "article_view.html", context)


@app.post("/articles")
async def article_create(
    request: Request,
    db: db_session,
    title: str = Form(...),
    content: str = Form(""),
):
    """게시글 등록 후 등록한 게시글로 이동"""
    article = Article(title=title, content=content)
    db.add(article)
    db.commit()
    logger.info(f"article created: {article.id}")

    return redirect_response(request, article_view, article_id=article.id)


@app.get("/numbers", response_class=HTMLResponse, name="number_list")
async def number_list(
    request: Request,
    limit: int = Query(10),
):
    """1 ~ 25 숫자 목록
    - 게시글 목록과 겹치지 않도록 '_p' 매개변수로 페이지를 전달합니다.
    """
    numbers, pager = paginate(request, list(range(1, 26)), limit=limit, pager_key="_p")
    context = {
        "request": request,
        "numbers": numbers,
        "pager": pager,
    }
    return templates.TemplateResponse(request, "number_list.html", context)


@app.get("/go", response_class=HTMLResponse)
async def go_articles(request: Request, response: Response):
    """게시글 목록으로 이동"""
    return redirect(request, response, article_list)


@app.get("/go/{target:path}", response_class=HTMLResponse)
async def go_target(request: Request, response: Response, target: str):
    """지정한 경로로 이동"""
    return redirect(request, response, target)


@app.get("/back", response_class=HTMLResponse)
async def go_back(request: Request, response: Response):
    """이전 페이지로 이동"""
    return redirect_referer(request, response)
