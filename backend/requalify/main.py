"""FastAPI application entrypoint and HTTP controllers.

This module defines the HTTP endpoints of the Requalify backend.
Controllers are intentionally thin: they delegate to services, turn
service errors into 404 responses carrying the error message, and hand
entities to the composer, which attaches hypermedia links and paging
metadata.

Endpoints implemented (each resource under its own API version):
- /api/v1/users       GET, GET /{id}, GET /email/{email}, POST, PUT /{id}, DELETE /{id}
- /api/v2/skills      GET, GET /user/{user_id}, GET /{id}, POST, PUT /{id}, DELETE /{id}
- /api/v3/education   same as skills
- /api/v4/courses     same as skills
- POST /api/ml/predict-interest
- GET /health
"""

from fastapi import FastAPI, Depends, HTTPException, Query, Request
from fastapi.responses import HTMLResponse, JSONResponse, Response
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import Session
import json
import logging
import time
import uuid
from .database import create_db_and_tables, get_session, ping
from . import composer, schemas, services
from .config import settings
from .links import Action, LinkContext, ResourceKind, collection_path
from .ml import get_predictor
from .results import is_error

app = FastAPI(title="Requalify API", version="1.0.0")
logger = logging.getLogger("requalify.api")
if not logger.handlers:
    logging.basicConfig(level=settings.LOG_LEVEL)

if settings.ALLOW_DEV_CORS:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

create_db_and_tables()

USERS = collection_path(ResourceKind.USER).format(version="1")
SKILLS = collection_path(ResourceKind.SKILL).format(version="2")
EDUCATION = collection_path(ResourceKind.EDUCATION).format(version="3")
COURSES = collection_path(ResourceKind.COURSE).format(version="4")


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    req_id = request.headers.get("X-Request-ID", uuid.uuid4().hex)
    request.state.request_id = req_id
    started = time.perf_counter()
    response: Response
    try:
        response = await call_next(request)
    except Exception:
        elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
        logger.exception(
            "request_failed %s",
            json.dumps(
                {
                    "request_id": req_id,
                    "path": request.url.path,
                    "method": request.method,
                    "duration_ms": elapsed_ms,
                    "client": request.client.host if request.client else "unknown",
                },
                ensure_ascii=True,
            ),
        )
        raise
    response.headers["X-Request-ID"] = req_id
    elapsed_ms = round((time.perf_counter() - started) * 1000.0, 2)
    if request.url.path.startswith("/api"):
        logger.info(
            "request_done %s",
            json.dumps(
                {
                    "request_id": req_id,
                    "path": request.url.path,
                    "method": request.method,
                    "status_code": response.status_code,
                    "duration_ms": elapsed_ms,
                    "client": request.client.host if request.client else "unknown",
                },
                ensure_ascii=True,
            ),
        )
    return response


class PageQuery:
    """`pageNumber` / `pageSize` query parameters of list endpoints."""
    def __init__(
        self,
        page_number: int = Query(1, ge=1, alias="pageNumber"),
        page_size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, alias="pageSize"),
    ):
        self.page_number = page_number
        self.page_size = page_size


def _unwrap(result):
    """Return the value of an `Ok` result or raise a 404 with the error message."""
    if is_error(result):
        raise HTTPException(status_code=404, detail=result.message)
    return result.value


def _created(kind: ResourceKind, entity, response: Response, ctx: LinkContext = None):
    """Compose a new resource and point `Location` at its `self` link when it resolves."""
    out = composer.compose(kind, entity, ctx or LinkContext.for_resource(kind))
    if out.links[0].href:
        response.headers["Location"] = out.links[0].href
    return out


def _page(kind: ResourceKind, rows, page: PageQuery, action: Action = Action.GET_ALL, **route_params):
    ctx = LinkContext.for_resource(kind)
    return composer.compose_page(kind, rows, page.page_number, page.page_size, ctx, action, route_params)


# --- users -----------------------------------------------------------------

@app.get(USERS, response_model=schemas.PagedResponse[schemas.UserOut])
def list_users(page: PageQuery = Depends(), db: Session = Depends(get_session)):
    """Return a page of users with their skills, courses and education embedded."""
    logger.info("Fetching users page %s (size %s)", page.page_number, page.page_size)
    users = _unwrap(services.UserService(db).get_all())
    return _page(ResourceKind.USER, users, page)


@app.get(USERS + "/email/{email}", response_model=schemas.UserOut)
def get_user_by_email(email: str, db: Session = Depends(get_session)):
    user = _unwrap(services.UserService(db).get_by_email(email))
    return composer.compose_user(user, LinkContext.for_resource(ResourceKind.USER))


@app.get(USERS + "/{user_id}", response_model=schemas.UserOut)
def get_user(user_id: int, db: Session = Depends(get_session)):
    user = _unwrap(services.UserService(db).get_by_id(user_id))
    return composer.compose_user(user, LinkContext.for_resource(ResourceKind.USER))


@app.post(USERS, status_code=201, response_model=schemas.UserOut)
def create_user(payload: schemas.CreateUserRequest, response: Response, db: Session = Depends(get_session)):
    """Create a user. The password is hashed and never returned."""
    user = _unwrap(services.UserService(db).create(payload))
    return _created(ResourceKind.USER, user, response)


@app.put(USERS + "/{user_id}", status_code=204)
def update_user(user_id: int, payload: schemas.UpdateUserRequest, db: Session = Depends(get_session)):
    _unwrap(services.UserService(db).update(user_id, payload))
    return Response(status_code=204)


@app.delete(USERS + "/{user_id}", status_code=204)
def delete_user(user_id: int, db: Session = Depends(get_session)):
    """Delete a user and every skill, course and education record it owns."""
    _unwrap(services.UserService(db).delete(user_id))
    return Response(status_code=204)


# --- skills ----------------------------------------------------------------

@app.get(SKILLS, response_model=schemas.PagedResponse[schemas.SkillOut])
def list_skills(page: PageQuery = Depends(), db: Session = Depends(get_session)):
    skills = _unwrap(services.SkillService(db).get_all())
    return _page(ResourceKind.SKILL, skills, page)


@app.get(SKILLS + "/user/{user_id}", response_model=schemas.PagedResponse[schemas.SkillOut])
def list_user_skills(user_id: int, page: PageQuery = Depends(), db: Session = Depends(get_session)):
    skills = _unwrap(services.SkillService(db).get_by_user_id(user_id))
    return _page(ResourceKind.SKILL, skills, page, Action.GET_BY_USER, user_id=user_id)


@app.get(SKILLS + "/{skill_id}", response_model=schemas.SkillOut)
def get_skill(skill_id: int, db: Session = Depends(get_session)):
    skill = _unwrap(services.SkillService(db).get_by_id(skill_id))
    return composer.compose_skill(skill, LinkContext.for_resource(ResourceKind.SKILL))


@app.post(SKILLS, status_code=201, response_model=schemas.SkillOut)
def create_skill(payload: schemas.CreateSkillRequest, response: Response, db: Session = Depends(get_session)):
    """Create a skill for an existing user; proficiency must be within 0-100."""
    skill = _unwrap(services.SkillService(db).create(payload))
    return _created(ResourceKind.SKILL, skill, response)


@app.put(SKILLS + "/{skill_id}", status_code=204)
def update_skill(skill_id: int, payload: schemas.UpdateSkillRequest, db: Session = Depends(get_session)):
    _unwrap(services.SkillService(db).update(skill_id, payload))
    return Response(status_code=204)


@app.delete(SKILLS + "/{skill_id}", status_code=204)
def delete_skill(skill_id: int, db: Session = Depends(get_session)):
    _unwrap(services.SkillService(db).delete(skill_id))
    return Response(status_code=204)


# --- education -------------------------------------------------------------

@app.get(EDUCATION, response_model=schemas.PagedResponse[schemas.EducationOut])
def list_education(page: PageQuery = Depends(), db: Session = Depends(get_session)):
    rows = _unwrap(services.EducationService(db).get_all())
    return _page(ResourceKind.EDUCATION, rows, page)


@app.get(EDUCATION + "/user/{user_id}", response_model=schemas.PagedResponse[schemas.EducationOut])
def list_user_education(user_id: int, page: PageQuery = Depends(), db: Session = Depends(get_session)):
    logger.info("Fetching education records for user %s", user_id)
    rows = _unwrap(services.EducationService(db).get_by_user_id(user_id))
    return _page(ResourceKind.EDUCATION, rows, page, Action.GET_BY_USER, user_id=user_id)


@app.get(EDUCATION + "/{education_id}", response_model=schemas.EducationOut)
def get_education(education_id: int, db: Session = Depends(get_session)):
    education = _unwrap(services.EducationService(db).get_by_id(education_id))
    return composer.compose_education(education, LinkContext.for_resource(ResourceKind.EDUCATION))


@app.post(EDUCATION, status_code=201, response_model=schemas.EducationOut)
def create_education(payload: schemas.CreateEducationRequest, response: Response, db: Session = Depends(get_session)):
    education = _unwrap(services.EducationService(db).create(payload))
    return _created(ResourceKind.EDUCATION, education, response)


@app.put(EDUCATION + "/{education_id}", status_code=204)
def update_education(education_id: int, payload: schemas.UpdateEducationRequest, db: Session = Depends(get_session)):
    _unwrap(services.EducationService(db).update(education_id, payload))
    return Response(status_code=204)


@app.delete(EDUCATION + "/{education_id}", status_code=204)
def delete_education(education_id: int, db: Session = Depends(get_session)):
    _unwrap(services.EducationService(db).delete(education_id))
    return Response(status_code=204)


# --- courses ---------------------------------------------------------------

@app.get(COURSES, response_model=schemas.PagedResponse[schemas.CourseOut])
def list_courses(page: PageQuery = Depends(), db: Session = Depends(get_session)):
    logger.info("Fetching courses page %s (size %s)", page.page_number, page.page_size)
    rows = _unwrap(services.CourseService(db).get_all())
    return _page(ResourceKind.COURSE, rows, page)


@app.get(COURSES + "/user/{user_id}", response_model=schemas.PagedResponse[schemas.CourseOut])
def list_user_courses(user_id: int, page: PageQuery = Depends(), db: Session = Depends(get_session)):
    rows = _unwrap(services.CourseService(db).get_by_user_id(user_id))
    return _page(ResourceKind.COURSE, rows, page, Action.GET_BY_USER, user_id=user_id)


@app.get(COURSES + "/{course_id}", response_model=schemas.CourseOut)
def get_course(course_id: int, db: Session = Depends(get_session)):
    course = _unwrap(services.CourseService(db).get_by_id(course_id))
    return composer.compose_course(course, LinkContext.for_resource(ResourceKind.COURSE))


@app.post(COURSES, status_code=201, response_model=schemas.CourseOut)
def create_course(payload: schemas.CreateCourseRequest, response: Response, db: Session = Depends(get_session)):
    """Create a course; `created_at` and `updated_at` are set by the server."""
    course = _unwrap(services.CourseService(db).create(payload))
    return _created(ResourceKind.COURSE, course, response)


@app.put(COURSES + "/{course_id}", status_code=204)
def update_course(course_id: int, payload: schemas.UpdateCourseRequest, db: Session = Depends(get_session)):
    _unwrap(services.CourseService(db).update(course_id, payload))
    return Response(status_code=204)


@app.delete(COURSES + "/{course_id}", status_code=204)
def delete_course(course_id: int, db: Session = Depends(get_session)):
    _unwrap(services.CourseService(db).delete(course_id))
    return Response(status_code=204)


# --- ml / misc ---------------------------------------------------------------

@app.post("/api/ml/predict-interest", response_model=schemas.PredictInterestOut)
def predict_interest(payload: schemas.PredictInterestRequest):
    """Recommend a professional area from role, main skill, level and education."""
    area = get_predictor().predict(payload.current_role, payload.main_skill, payload.skill_level, payload.education)
    return {"recommended_area": area}


@app.get("/health")
def health(db: Session = Depends(get_session)):
    """Report API and database status; 503 when a check fails."""
    checks = [{"name": "self", "status": "Healthy", "description": "API is running."}]
    try:
        ping(db.get_bind())
        checks.append({"name": "database", "status": "Healthy", "description": "Database reachable."})
    except Exception as e:
        logger.warning("Database health check failed: %s", e)
        checks.append({"name": "database", "status": "Unhealthy", "description": str(e)})
    healthy = all(c["status"] == "Healthy" for c in checks)
    body = {"status": "Healthy" if healthy else "Unhealthy", "checks": checks}
    return JSONResponse(status_code=200 if healthy else 503, content=body)


@app.get("/", response_class=HTMLResponse)
def home():
    """Minimal homepage for quick manual testing."""
    return f"""
    <!DOCTYPE html>
    <html>
    <head>
      <meta charset="UTF-8" />
      <title>Requalify API</title>
      <style>
        body {{ font-family: Arial, sans-serif; margin: 32px; }}
        a {{ color: #0a6; }}
        .card {{ max-width: 640px; padding: 16px; border: 1px solid #ddd; border-radius: 8px; }}
      </style>
    </head>
    <body>
      <div class="card">
        <h1>Requalify API</h1>
        <p>Quick links for local testing:</p>
        <ul>
          <li><a href="/docs">Swagger UI</a></li>
          <li><a href="{USERS}">Users (v1)</a></li>
          <li><a href="{SKILLS}">Skills (v2)</a></li>
          <li><a href="{EDUCATION}">Education (v3)</a></li>
          <li><a href="{COURSES}">Courses (v4)</a></li>
          <li><a href="/health">Health</a></li>
        </ul>
      </div>
    </body>
    </html>
    """
