from typing import Optional

import numpy as np
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from planesolver.analysis import analyze
from planesolver.constants import LINE_SEGMENT_LENGTH
from planesolver.geometry import build_scene
from planesolver.parsing import format_equation, parse_system
from planesolver.rref import compute_rref_steps

app = FastAPI(title="PlaneSolver API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class MatrixRequest(BaseModel):
    matrix: list[list[float]]


class SceneRequest(MatrixRequest):
    segment_length: float = LINE_SEGMENT_LENGTH


class ParseRequest(BaseModel):
    equations: str


class StepInfo(BaseModel):
    operation: str
    description: str
    rows: list[int]
    matrix: list[list[float]]


class AnalysisInfo(BaseModel):
    consistency: str
    solution_type: str
    summary: str
    solution_point: Optional[list[float]] = None
    rank: int
    free_vars: int
    num_vars: int


class RrefResponse(BaseModel):
    steps: list[StepInfo]
    history: list[list[list[float]]]
    analysis: AnalysisInfo


class PlaneInfo(BaseModel):
    row: int
    equation: str
    position: Optional[list[float]] = None
    orientation: Optional[list[float]] = None
    normal: Optional[list[float]] = None
    is_degenerate: bool
    is_identity: bool


class LineInfo(BaseModel):
    rows: list[int]
    equation: str
    point: list[float]
    direction: list[float]
    start: list[float]
    end: list[float]


class PointInfo(BaseModel):
    rows: list[int]
    point: list[float]


class SceneResponse(BaseModel):
    planes: list[PlaneInfo]
    lines: list[LineInfo]
    points: list[PointInfo]


class ParseResponse(BaseModel):
    matrix: list[list[float]]
    equations: list[str]


def _check_rectangular(matrix: list[list[float]]) -> None:
    if matrix and len({len(row) for row in matrix}) != 1:
        raise HTTPException(status_code=400,
                            detail="Every row of the matrix must have the same length.")
    if matrix and not matrix[0]:
        raise HTTPException(status_code=400, detail="Matrix rows cannot be empty.")


def _plain(value):
    """numpy arrays and tuples → lists so pydantic can validate them."""
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, tuple):
        return list(value)
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_plain(v) for v in value]
    return value


@app.post("/api/rref", response_model=RrefResponse)
def rref(req: MatrixRequest):
    _check_rectangular(req.matrix)
    steps = compute_rref_steps(req.matrix)
    return {
        "steps": steps,
        "history": [step["matrix"] for step in steps],
        "analysis": _plain(analyze(steps[-1]["matrix"])),
    }


@app.post("/api/analyze", response_model=AnalysisInfo)
def analyze_matrix(req: MatrixRequest):
    _check_rectangular(req.matrix)
    return _plain(analyze(req.matrix))


@app.post("/api/scene", response_model=SceneResponse)
def scene(req: SceneRequest):
    _check_rectangular(req.matrix)
    try:
        result = build_scene(req.matrix, req.segment_length)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _plain(result)


@app.post("/api/parse", response_model=ParseResponse)
def parse(req: ParseRequest):
    text = req.equations.strip()
    if not text:
        raise HTTPException(status_code=400, detail="Equations cannot be empty.")

    try:
        matrix = parse_system(text)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise HTTPException(status_code=500, detail=f"Parser error: {str(e)}")

    return {"matrix": matrix, "equations": [format_equation(row) for row in matrix]}
