from __future__ import annotations

from fastapi import APIRouter, Depends

from src.adapters.api.dependencies import get_operator_selection
from src.adapters.api.schemas.views import SelectionSchema, SetActiveOperatorSchema
from src.app.services.operator_selection import OperatorSelection, OperatorSelectionStore

router = APIRouter(prefix="/api/selection", tags=["selection"])


def _selection_to_schema(selection: OperatorSelection) -> SelectionSchema:
    return SelectionSchema(
        active_operator=selection.active_operator,
        comparison_operators=list(selection.comparison_operators),
    )


@router.get("", response_model=SelectionSchema)
def get_selection(
    store: OperatorSelectionStore = Depends(get_operator_selection),
) -> SelectionSchema:
    return _selection_to_schema(store.snapshot)


@router.put("/active", response_model=SelectionSchema)
def set_active_operator(
    req: SetActiveOperatorSchema,
    store: OperatorSelectionStore = Depends(get_operator_selection),
) -> SelectionSchema:
    return _selection_to_schema(store.set_active_operator(req.operator))


@router.post("/comparison/{operator}/toggle", response_model=SelectionSchema)
def toggle_comparison_operator(
    operator: str,
    store: OperatorSelectionStore = Depends(get_operator_selection),
) -> SelectionSchema:
    return _selection_to_schema(store.toggle_comparison_operator(operator))
