from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from idea_processor import config
from idea_processor.pipeline import IdeaPipeline, get_pipeline
from idea_processor.schemas import ProcessRequest

router = APIRouter()


FEATURES = [
    "Idea Processing",
    "Idea Registry",
    "Tech Stack Recommendations",
    "MVP Generation",
    "Development Prompts",
]


# ============================================================
# GENERATION FLOWS
# ============================================================

@router.post("/process")
def process_idea(request: ProcessRequest, pipeline: IdeaPipeline = Depends(get_pipeline)):
    """Process a new SaaS idea into an idea map and store it."""
    idea = pipeline.process(request.text, request.memory_context)
    return {
        "success": True,
        "data": idea.to_public(),
    }


@router.get("/tech-stack/{idea_id}")
def get_tech_stack(idea_id: str, pipeline: IdeaPipeline = Depends(get_pipeline)):
    stack = pipeline.tech_stack(idea_id)
    return [item.model_dump() for item in stack]


@router.get("/mvp/{idea_id}")
def get_mvp(idea_id: str, pipeline: IdeaPipeline = Depends(get_pipeline)):
    plan = pipeline.mvp(idea_id)
    return plan.model_dump(by_alias=True)


@router.get("/prompt/{idea_id}")
def get_dev_prompt(idea_id: str, pipeline: IdeaPipeline = Depends(get_pipeline)):
    return pipeline.dev_prompt(idea_id).model_dump()


# ============================================================
# STORED IDEAS
# ============================================================

@router.get("/ideas")
def list_ideas(pipeline: IdeaPipeline = Depends(get_pipeline)):
    summaries = [
        s.model_dump(mode="json", by_alias=True) for s in pipeline.list_ideas()
    ]
    return {
        "success": True,
        "data": summaries,
        "count": len(summaries),
    }


@router.get("/idea/{idea_id}")
def get_idea(idea_id: str, pipeline: IdeaPipeline = Depends(get_pipeline)):
    return {
        "success": True,
        "data": pipeline.get_idea(idea_id).to_document(),
    }


# ============================================================
# SERVICE INFO
# ============================================================

@router.get("/health")
def health():
    return {
        "status": "ok",
        "service": config.SERVICE_NAME,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "features": FEATURES,
    }


@router.get("/")
def index():
    return {
        "message": "SaaS Idea Processor Service",
        "version": config.SERVICE_VERSION,
        "features": [
            "AI-powered idea analysis with recent-idea context",
            "Tech stack recommendations",
            "MVP to-do list generation",
            "Complete development prompts",
            "In-memory or SQL idea registry",
        ],
        "endpoints": {
            "POST /process": "Process a new SaaS idea",
            "GET /ideas": "List all saved ideas",
            "GET /idea/{id}": "Get full idea details",
            "GET /tech-stack/{id}": "Get tech stack recommendations",
            "GET /mvp/{id}": "Get MVP to-do list",
            "GET /prompt/{id}": "Get development prompt",
            "GET /health": "Health check endpoint",
        },
    }
