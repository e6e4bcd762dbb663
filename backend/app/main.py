import logging
import math
from typing import Optional, Union

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from console.evaluator import Evaluator
from engine.formatting import format_value
from engine.linsolve import solve_system
from engine.matrix import Matrix
from engine.value import Scalar, Value

logger = logging.getLogger(__name__)

app = FastAPI(title="MatCalc API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

Rows = list[list[float]]
# JSON has no inf / nan: non-finite numbers go out as null and ``text``
# carries the readable form.
Cell = Optional[float]
CellRows = list[list[Cell]]


class EvaluateRequest(BaseModel):
    expression: str
    variables: dict[str, Union[float, Rows]] = Field(default_factory=dict)


class ValueInfo(BaseModel):
    name: str
    kind: str
    value: Union[Cell, CellRows] = Field(
        description="Numeric value; non-finite numbers (inf, nan) are null."
    )
    text: str


class EvaluateResponse(BaseModel):
    results: list[ValueInfo]


class LinsolveRequest(BaseModel):
    a: Rows
    b: Rows


class LinsolveResponse(BaseModel):
    kind: str
    rank: int
    unknowns: int
    solution: Optional[CellRows] = None
    parametrization: list[str] = Field(default_factory=list)


def _to_value(raw: Union[float, Rows]) -> Value:
    if isinstance(raw, list):
        return Matrix.from_rows(raw)
    return Scalar(raw)


def _cell(x: float) -> Cell:
    return x if math.isfinite(x) else None


def _cell_rows(matrix: Matrix) -> CellRows:
    return [[_cell(x) for x in row] for row in matrix.to_rows()]


def _describe(name: str, value: Value) -> ValueInfo:
    if isinstance(value, Matrix):
        return ValueInfo(name=name, kind="matrix", value=_cell_rows(value),
                         text=format_value(value).strip("\n"))
    return ValueInfo(name=name, kind="scalar", value=_cell(value.value),
                     text=format_value(value))


@app.post("/api/evaluate", response_model=EvaluateResponse)
def evaluate(req: EvaluateRequest):
    expression = req.expression.strip()
    if not expression:
        raise HTTPException(status_code=400, detail="Expression cannot be empty.")

    try:
        evaluator = Evaluator({k: _to_value(v) for k, v in req.variables.items()})
        results = evaluator.run(expression)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Evaluation of %r failed", expression)
        raise HTTPException(status_code=500, detail=f"Evaluation error: {str(e)}")

    return EvaluateResponse(results=[_describe(name, value) for name, value in results])


@app.post("/api/linsolve", response_model=LinsolveResponse)
def linsolve(req: LinsolveRequest):
    try:
        result = solve_system(Matrix.from_rows(req.a), Matrix.from_rows(req.b))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("linsolve failed")
        raise HTTPException(status_code=500, detail=f"Solver error: {str(e)}")

    return LinsolveResponse(
        kind=result.kind.value,
        rank=result.rank,
        unknowns=result.unknowns,
        solution=_cell_rows(result.solution) if result.solution is not None else None,
        parametrization=result.parametrization,
    )
