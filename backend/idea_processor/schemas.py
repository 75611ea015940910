from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator


NonEmptyStr = Annotated[str, Field(min_length=1)]


# ---- Idea map ----

class BranchRole(str, Enum):
    """The five fixed branches of an idea map, in display order."""
    USER_JOURNEY = "User Journey"
    CORE_FUNCTIONS = "Core Functions"
    DATA_OUTPUT = "Data Output"
    INTERNAL_ENGINE = "Internal Engine"
    AUTOMATION_LOGIC = "Automation & Logic"


BRANCH_LABELS = [role.value for role in BranchRole]


class Branch(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: NonEmptyStr
    children: List[NonEmptyStr] = Field(min_length=3, max_length=5)


class IdeaRoot(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: NonEmptyStr  # generated product name
    branches: List[Branch] = Field(min_length=5, max_length=5)

    @field_validator("branches")
    @classmethod
    def check_branch_roles(cls, branches: List[Branch]) -> List[Branch]:
        labels = [b.label for b in branches]
        if len(set(labels)) != len(labels):
            raise ValueError(f"branch labels must be distinct, got {labels}")

        unknown = [label for label in labels if label not in BRANCH_LABELS]
        if unknown:
            raise ValueError(
                f"unknown branch labels {unknown}, expected {BRANCH_LABELS}"
            )
        return branches

    def branch(self, role: BranchRole) -> List[str]:
        for b in self.branches:
            if b.label == role.value:
                return list(b.children)
        return []


class Insight(BaseModel):
    model_config = ConfigDict(frozen=True)

    summary: NonEmptyStr
    themes: List[NonEmptyStr] = Field(min_length=1)
    next_steps: List[NonEmptyStr] = Field(min_length=1, alias="nextSteps")


class IdeaMap(BaseModel):
    """What the model returns for the idea-map prompt."""
    model_config = ConfigDict(frozen=True)

    root: IdeaRoot
    insight: Insight


# ---- Stored idea ----

class Idea(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    original_text: str = Field(alias="originalText")
    memory_context: str = Field("", alias="memoryContext")
    generated_at: datetime = Field(alias="generatedAt")
    root: IdeaRoot
    insight: Insight

    def to_document(self) -> Dict[str, Any]:
        """Full JSON-ready record, camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)

    def to_public(self) -> Dict[str, Any]:
        """What the Process flow hands back to its caller."""
        return self.model_dump(
            mode="json",
            by_alias=True,
            include={"id", "root", "insight", "generated_at"},
        )

    def summarize(self) -> "IdeaSummary":
        return IdeaSummary(
            id=self.id,
            name=self.root.label,
            summary=self.insight.summary,
            generated_at=self.generated_at,
        )


class IdeaSummary(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    name: str
    summary: str
    generated_at: datetime = Field(alias="generatedAt")


# ---- Derived artifacts ----

# Recommended, not exhaustive
TECH_CATEGORIES = [
    "Frontend",
    "Backend",
    "Database",
    "Auth",
    "Deployment",
    "AI/ML",
    "Styling",
]


class TechStackItem(BaseModel):
    name: NonEmptyStr
    category: NonEmptyStr
    reason: NonEmptyStr  # ~5 words by convention


TechStack = Annotated[List[TechStackItem], Field(min_length=5, max_length=7)]


class MvpPlan(BaseModel):
    """Wire keys only: "in_progress" is not accepted for "inProgress"."""

    todo: List[str]
    in_progress: List[str] = Field(alias="inProgress")
    done: List[str]


class DevPrompt(BaseModel):
    prompt: NonEmptyStr


# ---- Requests ----

class ProcessRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    text: str = Field(min_length=1)
    memory_context: str = Field("", alias="memoryContext")
