import logging
import os

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.datastructures import Headers
from starlette.exceptions import HTTPException as StarletteHTTPException

from event_generator.generator import EventGenerator, build_event_generator
from event_generator.models import ErrorResponse, GenerateEventPayload, GenerationOutcome, GenerationRequest

# Load .env file when running locally so provider keys are picked up.
load_dotenv()

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("ai_event_generator")

app = FastAPI(
  title="AI Event Generator",
  version="0.1.0",
  description="Drafts events from a category and free-text details using LLMs, with a built-in fallback.",
)


class EmptyPreflightCORSMiddleware(CORSMiddleware):
  """CORSMiddleware whose preflight answers carry no body."""

  def preflight_response(self, request_headers: Headers) -> Response:
    response = super().preflight_response(request_headers)
    headers = {
      key: value
      for key, value in response.headers.items()
      if key.lower() not in ("content-length", "content-type")
    }
    return Response(status_code=response.status_code, headers=headers)


app.add_middleware(
  EmptyPreflightCORSMiddleware,
  allow_origins=["*"],
  allow_credentials=False,
  allow_methods=["*"],
  allow_headers=["*"],
)

_CORS_HEADERS = {
  "Access-Control-Allow-Origin": "*",
  "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}


def _error(status_code: int, message: str) -> JSONResponse:
  return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


@app.exception_handler(RequestValidationError)
async def _invalid_body(request: Request, exc: RequestValidationError) -> JSONResponse:
  logger.info("Rejected malformed request body: %s", exc.errors())
  return _error(400, "Request body must be a JSON object with eventCategory and eventDetails")


@app.exception_handler(StarletteHTTPException)
async def _http_error(request: Request, exc: StarletteHTTPException) -> JSONResponse:
  response = _error(exc.status_code, str(exc.detail))
  if exc.headers:
    response.headers.update(exc.headers)
  return response


def get_event_generator() -> EventGenerator:
  return build_event_generator()


@app.get("/health")
async def health() -> dict:
  return {"ok": True}


@app.options("/ai-event-generator")
async def ai_event_generator_preflight() -> Response:
  return Response(status_code=200, headers=_CORS_HEADERS)


@app.post(
  "/ai-event-generator",
  response_model=GenerationOutcome,
  response_model_exclude_none=True,
  responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def ai_event_generator(
  payload: GenerateEventPayload,
  generator: EventGenerator = Depends(get_event_generator),
):
  category = payload.eventCategory
  details = payload.eventDetails
  if not category or not category.strip() or not details or not details.strip():
    return _error(400, "Category and details are required")

  logger.info("Generating event for category: %s", category)
  try:
    return await generator.generate(GenerationRequest(category=category, details=details))
  except Exception as exc:
    logger.exception("Error in ai-event-generator")
    return _error(500, str(exc) or exc.__class__.__name__)


if __name__ == "__main__":
  import uvicorn

  host = os.getenv("HOST", "0.0.0.0")
  port = int(os.getenv("PORT", "8000"))
  uvicorn.run("event_generator.main:app", host=host, port=port, reload=True)
