"""
RepoRadar Schema Definitions

Pydantic models for the scoring pipeline and the API contract.
Outbound JSON uses camelCase keys (overallScore, codeQuality, ...); Python code
constructs and reads the models with snake_case field names.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_serializer
from pydantic.alias_generators import to_camel


# =============================================================================
# ENUMS
# =============================================================================

class Severity(str, Enum):
    """Severity level for issues"""
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


# Most severe first
SEVERITY_ORDER = {
    Severity.CRITICAL: 0,
    Severity.WARNING: 1,
    Severity.INFO: 2,
}


class ApiModel(BaseModel):
    """Base for models that cross the API boundary."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# REPOSITORY INPUTS
# =============================================================================

class TreeEntry(BaseModel):
    """One entry of the recursive tree listing."""
    model_config = ConfigDict(frozen=True)

    path: str
    type: str = Field(..., description="'blob' for files, 'tree' for directories")


class RepoFile(BaseModel):
    """A fetched file. Immutable once fetched."""
    model_config = ConfigDict(frozen=True)

    path: str
    content: str


class RepositoryInfo(ApiModel):
    """Repository identity as reported by the source-hosting API."""
    name: str
    full_name: str
    description: str | None = None
    stars: int = 0
    forks: int = 0
    url: str
    default_branch: str = Field("main", exclude=True)


# =============================================================================
# ANALYZER OUTPUT
# =============================================================================

class Issue(ApiModel):
    """A single issue raised by an analyzer."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    severity: Severity
    message: str
    file: str | None = None

    @model_serializer(mode="wrap")
    def omit_missing_file(self, handler):
        # Repository-wide issues carry no "file" key at all
        data = handler(self)
        if self.file is None:
            data.pop("file", None)
        return data


class CategoryResult(ApiModel):
    """Score and ordered issues for one category."""
    score: int = Field(..., ge=0, le=100)
    issues: list[Issue] = Field(default_factory=list)


class ScoreBreakdown(ApiModel):
    """The three category results; sole input to the score combiner."""
    security: CategoryResult
    code_quality: CategoryResult
    best_practices: CategoryResult


class Narrative(BaseModel):
    """Prose produced by the narrative layer."""
    summary: str
    recommendations: list[str]


# =============================================================================
# API CONTRACT
# =============================================================================

class AnalysisResult(ApiModel):
    """Terminal artifact handed to the presentation layer."""
    overall_score: int = Field(..., ge=0, le=100)
    summary: str
    code_quality: CategoryResult
    security: CategoryResult
    best_practices: CategoryResult
    recommendations: list[str] = Field(default_factory=list, max_length=3)
    languages: dict[str, int] = Field(default_factory=dict, description="Language -> percentage of bytes")


class ScanRequest(BaseModel):
    """Request body for POST /scan"""
    url: str = Field(..., min_length=1, description="GitHub repository URL (e.g., https://github.com/owner/repo)")


class ScanResponse(ApiModel):
    """Response body for POST /scan"""
    success: bool = True
    repository: RepositoryInfo
    analysis: AnalysisResult
