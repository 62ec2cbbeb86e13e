from fastapi import APIRouter, HTTPException, Query

from .schemas import (
    BmiRequest,
    BmiResponse,
    CalorieTallyRequest,
    CalorieTallyResponse,
    DietPlanResponse,
)
from .service import CalorieCounter, FitnessValidationError, calculate_bmi, diet_plan

router = APIRouter(prefix="/api/fitness", tags=["Fitness"])


@router.post("/bmi", response_model=BmiResponse)
async def bmi(payload: BmiRequest):
    try:
        result = calculate_bmi(payload.height, payload.weight)
    except FitnessValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return BmiResponse(bmi=result.bmi, category=result.category, message=result.message)


@router.post("/calories/tally", response_model=CalorieTallyResponse)
async def tally_calories(payload: CalorieTallyRequest):
    counter = CalorieCounter()
    try:
        for entry in payload.entries:
            counter.add(entry.meal_type, entry.meal, entry.calories)
    except FitnessValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return CalorieTallyResponse(slots=counter.slots, total=counter.total)


@router.get("/diet/{diet_type}", response_model=DietPlanResponse)
async def get_diet_plan(diet_type: str, alternative: bool = Query(default=False)):
    meals = diet_plan(diet_type, alternative)
    if meals is None:
        raise HTTPException(status_code=404, detail="Diet type not found")
    return DietPlanResponse(diet_type=diet_type.lower(), alternative=alternative, meals=meals)
