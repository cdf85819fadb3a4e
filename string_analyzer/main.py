from fastapi import FastAPI, Depends, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from typing import Any, Optional
import json
import logging

from string_analyzer import config, crud
from string_analyzer.database import StringStore, get_store, init_store
from string_analyzer.errors import (
    ConflictError,
    InvalidQueryError,
    InvalidTypeError,
    NotFoundError,
    StringAnalyzerError,
    ValidationError,
)
from string_analyzer.models import AnalysisRecord
from string_analyzer.schemas import (
    FilterCriteria,
    InterpretedQuery,
    NaturalLanguageResponse,
    StringCreate,
    StringListResponse,
)

# Configure logging
logging.basicConfig(
    level=config.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


class AsciiJSONResponse(JSONResponse):
    """JSON response with non-ASCII escaped, so lone surrogates in stored values can still be encoded.

    Record routes return it directly; their response_model only documents the schema.
    """

    def render(self, content: Any) -> bytes:
        return json.dumps(
            content,
            ensure_ascii=True,
            allow_nan=False,
            indent=None,
            separators=(",", ":"),
        ).encode("utf-8")


app = FastAPI(
    title="String Analyzer Service",
    description="Analyze strings, store their properties and query them",
    version="1.0.0",
    default_response_class=AsciiJSONResponse
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Most specific class first; InvalidTypeError must be checked before ValidationError
ERROR_STATUS = [
    (InvalidTypeError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (ConflictError, status.HTTP_409_CONFLICT),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (InvalidQueryError, status.HTTP_400_BAD_REQUEST),
]


# Load the store on startup
@app.on_event("startup")
def on_startup():
    logger.info("Loading string store...")
    store = init_store()
    logger.info(f"String store ready with {len(store)} strings ({store.path})")


@app.get("/")
async def root():
    """Root endpoint"""
    return {
        "message": "String Analyzer Service",
        "version": "1.0.0",
        "endpoints": {
            "POST /strings": "Analyze and store a string",
            "GET /strings/{string_value}": "Get specific string analysis",
            "GET /strings": "Get all strings with optional filters",
            "GET /strings/filter-by-natural-language": "Filter using natural language",
            "DELETE /strings/{string_value}": "Delete a string"
        }
    }


@app.post("/strings", response_model=AnalysisRecord, status_code=status.HTTP_201_CREATED)
async def create_string(
    string_data: StringCreate,
    store: StringStore = Depends(get_store)
):
    """
    Analyze and store a string.
    Returns 409 if string already exists.
    """
    record = crud.create_string_analysis(store, string_data.value)
    return AsciiJSONResponse(content=record.model_dump(), status_code=status.HTTP_201_CREATED)


@app.get("/strings", response_model=StringListResponse)
async def get_all_strings(
    is_palindrome: Optional[bool] = Query(None),
    min_length: Optional[int] = Query(None, ge=0),
    max_length: Optional[int] = Query(None, ge=0),
    word_count: Optional[int] = Query(None, ge=0),
    contains_character: Optional[str] = Query(None, min_length=1),
    store: StringStore = Depends(get_store)
):
    """
    Get all strings with optional filtering.
    """
    criteria = FilterCriteria(
        is_palindrome=is_palindrome,
        min_length=min_length,
        max_length=max_length,
        word_count=word_count,
        contains_character=contains_character
    )
    data = crud.get_all_strings(store, criteria)
    filters_applied = criteria.applied()

    response = StringListResponse(
        data=data,
        count=len(data),
        filters_applied=filters_applied if filters_applied else None
    )
    return AsciiJSONResponse(content=response.model_dump())


@app.get("/strings/filter-by-natural-language", response_model=NaturalLanguageResponse)
async def filter_by_natural_language(
    query: Optional[str] = Query(None, description="Natural language query"),
    store: StringStore = Depends(get_store)
):
    """
    Filter strings using natural language queries.
    Example: "all single word palindromic strings"
    """
    data, filters = crud.filter_by_natural_language(store, query)

    response = NaturalLanguageResponse(
        data=data,
        count=len(data),
        interpreted_query=InterpretedQuery(original=query, parsed_filters=filters)
    )
    return AsciiJSONResponse(content=response.model_dump())


@app.get("/strings/{string_value}", response_model=AnalysisRecord)
async def get_string(
    string_value: str,
    store: StringStore = Depends(get_store)
):
    """
    Get analysis for a specific string.
    Returns 404 if string doesn't exist.
    """
    record = crud.get_string_by_value(store, string_value)
    return AsciiJSONResponse(content=record.model_dump())


@app.delete("/strings/{string_value}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_string(
    string_value: str,
    store: StringStore = Depends(get_store)
):
    """
    Delete a string from the system.
    Returns 404 if string doesn't exist.
    """
    crud.delete_string(store, string_value)
    return None


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy"}


# Domain error handler
@app.exception_handler(StringAnalyzerError)
async def string_analyzer_exception_handler(request: Request, exc: StringAnalyzerError):
    status_code = next(
        (code for error_type, code in ERROR_STATUS if isinstance(exc, error_type)),
        status.HTTP_400_BAD_REQUEST
    )
    logger.info(f"{request.method} {request.url.path} -> {status_code}: {exc}")
    return JSONResponse(
        status_code=status_code,
        content={"error": str(exc)}
    )


# Validation error handler
@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = {}
    for error in exc.errors():
        field = error['loc'][-1]
        message = error['msg']
        errors[field] = message

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "error": "Invalid request body or query parameters",
            "details": errors
        }
    )


# HTTPException handler
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)}
    )


# Generic error handler
@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception: {str(exc)}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "Internal server error"
        }
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("string_analyzer.main:app", host="0.0.0.0", port=config.PORT)
