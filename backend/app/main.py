from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from stepchecker.config import configure_logging, load_settings
from stepchecker.serialize import from_dict
from stepchecker.trail import check_step_trail

settings = load_settings()
configure_logging(settings)

app = FastAPI(title="StepChecker API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class CheckStepRequest(BaseModel):
    prev: dict
    next: dict


class StepInfo(BaseModel):
    step_number: int
    description: str
    nodes: list[dict]


class Summary(BaseModel):
    runtime_ms: float
    total_steps: int
    validation_status: str
    timestamp: str
    library: str


class CheckStepResponse(BaseModel):
    before: dict
    after: dict
    equivalent: bool
    steps: list[StepInfo]
    summary: Optional[Summary] = None


@app.post("/api/check-step", response_model=CheckStepResponse)
def check(req: CheckStepRequest):
    try:
        prev = from_dict(req.prev)
        next_ = from_dict(req.next)
        result = check_step_trail(prev, next_, settings)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Checker error: {str(e)}")

    return result
