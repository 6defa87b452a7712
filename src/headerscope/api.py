"""FastAPI REST API for headerscope analyses."""

from pathlib import Path
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field
from typing import Optional

from . import __version__
from .config_store import ConfigStore
from .coverage import build_matrix, unreferenced_declarations
from .diff_parser import DiffParser
from .doc_checker import check_doc_coverage
from .errors import HeaderscopeError, ConfigError, InvalidSchemaVersionError
from .extractor import extract_declarations
from .logging import get_logger
from .models import CoverageReport, DocCoverageReport
from .references import extract_calls

logger = get_logger("api")


# --- Pydantic Schemas ---


class DeclarationSchema(BaseModel):
    name: str
    kind: str  # "function"|"method"|"class"|"struct"|"concept"
    line: int
    visibility: str  # "public"|"non_public"
    file: Optional[str] = None


class SourceFileSchema(BaseModel):
    """A source file passed inline."""

    path: str
    text: str


class DeclarationsRequest(BaseModel):
    """Request body for listing declarations of one file."""

    text: str
    path: Optional[str] = None
    definitions_only: bool = Field(
        default=False,
        description="Keep only functions/methods followed by a body",
    )
    public_only: bool = False


class DeclarationsResponse(BaseModel):
    path: Optional[str] = None
    declarations: list[DeclarationSchema]
    count: int


class CoverageRequest(BaseModel):
    """Request body for building a coverage matrix."""

    headers: list[SourceFileSchema]
    tests: list[SourceFileSchema]


class CoverageRowSchema(DeclarationSchema):
    scope_count: int
    scopes: list[str]


class CoverageResponse(BaseModel):
    rows: list[CoverageRowSchema]
    unreferenced: list[DeclarationSchema]
    total: int
    referenced: int
    percentage: float


class DocCoverageRequest(BaseModel):
    """Request body for checking documentation of the lines a diff adds."""

    path: str
    text: str = Field(..., description="File contents after the change")
    diff: str = Field(..., description="Unified diff of the file (any context size)")
    min_coverage: float = Field(default=80.0, ge=0, le=100)


class DocCoverageRowSchema(DeclarationSchema):
    documented: bool


class DocCoverageResponse(BaseModel):
    documented_rows: list[DocCoverageRowSchema]
    undocumented_rows: list[DocCoverageRowSchema]
    total: int
    documented: int
    percentage: float
    min_coverage: float
    passed: bool


class ConfigResponse(BaseModel):
    min_coverage: float
    header_extensions: list[str]
    excluded_top_level: list[str]
    excluded_prefixes: list[str]
    max_listed: int
    max_scopes_shown: int


class ErrorResponse(BaseModel):
    detail: str
    error_type: str


# --- FastAPI App ---


app = FastAPI(
    title="headerscope API",
    description="REST API for C++ header declaration, test coverage and doc coverage analysis",
    version=__version__,
)

# CORS for local development
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",
        "http://localhost:3000",
        "http://127.0.0.1:5173",
        "http://127.0.0.1:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Global Exception Handler ---


# Map exception types to HTTP status codes
ERROR_STATUS_CODES: dict[type, int] = {
    ConfigError: 500,
    InvalidSchemaVersionError: 500,
}


@app.exception_handler(HeaderscopeError)
async def headerscope_error_handler(request: Request, exc: HeaderscopeError) -> JSONResponse:
    """Map HeaderscopeError subclasses to appropriate HTTP responses."""
    status_code = ERROR_STATUS_CODES.get(type(exc), 500)
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(detail=str(exc), error_type=type(exc).__name__).model_dump(),
    )


# --- Endpoints ---


@app.get("/api/health")
def health_check():
    """Health check endpoint."""
    return {"status": "ok", "version": __version__}


@app.get("/api/config", response_model=ConfigResponse)
def get_config():
    """
    Return the scan configuration of the server's working directory.

    Falls back to defaults when no config file exists.
    """
    config = ConfigStore(Path.cwd()).load()
    data = config.to_dict()
    data.pop("schema_version")
    return ConfigResponse(**data)


@app.post("/api/declarations", response_model=DeclarationsResponse)
def list_declarations(request: DeclarationsRequest):
    """Recover declarations from one file's text."""
    declarations = extract_declarations(
        request.text, definitions_only=request.definitions_only, path=request.path
    )
    if request.public_only:
        declarations = [d for d in declarations if d.is_public]
    return DeclarationsResponse(
        path=request.path,
        declarations=[DeclarationSchema(**d.to_dict()) for d in declarations],
        count=len(declarations),
    )


@app.post("/api/coverage", response_model=CoverageResponse)
def build_coverage(request: CoverageRequest):
    """
    Join header definitions with the test scopes that call them.

    Headers contribute definitions only; every call-like expression in the
    test sources counts as a reference.
    """
    declarations = []
    for header in request.headers:
        declarations.extend(
            extract_declarations(header.text, definitions_only=True, path=header.path)
        )
    references = []
    for test in request.tests:
        references.extend(extract_calls(test.text, test.path))

    rows = build_matrix(declarations, references)
    report = CoverageReport(
        rows=rows,
        unreferenced=unreferenced_declarations(rows),
        headers=[h.path for h in request.headers],
        tests=[t.path for t in request.tests],
    )
    logger.debug("coverage request: %d row(s)", report.total)
    return CoverageResponse(
        rows=[CoverageRowSchema(**row.to_dict()) for row in report.rows],
        unreferenced=[DeclarationSchema(**d.to_dict()) for d in report.unreferenced],
        total=report.total,
        referenced=report.referenced,
        percentage=report.percentage,
    )


@app.post("/api/doc-coverage", response_model=DocCoverageResponse)
def doc_coverage(request: DocCoverageRequest):
    """Check documentation of the public declarations on lines the diff adds."""
    added = DiffParser().parse_added_lines(request.diff)
    rows = check_doc_coverage(request.text, added, path=request.path)
    report = DocCoverageReport(
        rows=rows,
        min_coverage=request.min_coverage,
        files=[request.path],
    )
    return DocCoverageResponse(
        documented_rows=[DocCoverageRowSchema(**row.to_dict()) for row in report.documented],
        undocumented_rows=[DocCoverageRowSchema(**row.to_dict()) for row in report.undocumented],
        total=report.total,
        documented=len(report.documented),
        percentage=report.percentage,
        min_coverage=report.min_coverage,
        passed=report.passed,
    )
