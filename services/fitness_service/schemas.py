from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field

# Form fields arrive as text; numbers are accepted too
FormValue = Optional[Union[float, str]]


class BmiRequest(BaseModel):
    height: FormValue = None # cm
    weight: FormValue = None # kg


class BmiResponse(BaseModel):
    bmi: float
    category: str
    message: str


class CalorieEntry(BaseModel):
    meal_type: str
    meal: str = ""
    calories: FormValue = None


class CalorieTallyRequest(BaseModel):
    entries: List[CalorieEntry] = Field(default_factory=list)


class CalorieTallyResponse(BaseModel):
    slots: Dict[str, int]
    total: int


class MealCard(BaseModel):
    slot: str
    meal: str
    nutrients: Dict[str, str]


class DietPlanResponse(BaseModel):
    diet_type: str
    alternative: bool
    meals: List[MealCard]
