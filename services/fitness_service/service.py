"""
Fitness calculators: BMI, a per-meal calorie counter, and the diet chart.

Pure functions and an in-memory counter; nothing here touches the database
or the cache.
"""
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

UNDERWEIGHT_BELOW = 18.6
NORMAL_UP_TO = 24.9

INVALID_HEIGHT = "Please provide a valid height."
INVALID_WEIGHT = "Please provide a valid weight."
INVALID_MEAL = "Please enter a valid meal description and calorie amount."

MEAL_SLOTS = ("breakfast", "brunch", "lunch", "snacks", "dinner")


class FitnessValidationError(ValueError):
    """Bad calculator input; the message is meant to be shown inline."""


def parse_positive_number(raw: Any) -> Optional[float]:
    """Returns the value as a float, or None if it is not a finite number > 0."""
    if raw is None or isinstance(raw, bool):
        return None
    try:
        value = float(str(raw).strip())
    except ValueError:
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return value


@dataclass
class BmiResult:
    bmi: float
    category: str
    message: str


def classify_bmi(bmi: float) -> str:
    if bmi < UNDERWEIGHT_BELOW:
        return "underweight"
    if bmi <= NORMAL_UP_TO:
        return "normal range"
    return "overweight"


_CATEGORY_MESSAGES = {
    "underweight": "You are underweight.",
    "normal range": "You are in the normal range.",
    "overweight": "You are overweight.",
}


def calculate_bmi(height_cm: Any, weight_kg: Any) -> BmiResult:
    """
    BMI = weight / (height / 100)^2, rounded to two places.

    The category is decided on the rounded value, so what is displayed and
    how it is classified always agree.
    """
    height = parse_positive_number(height_cm)
    if height is None:
        raise FitnessValidationError(INVALID_HEIGHT)
    weight = parse_positive_number(weight_kg)
    if weight is None:
        raise FitnessValidationError(INVALID_WEIGHT)

    bmi = round(weight / ((height / 100) ** 2), 2)
    category = classify_bmi(bmi)
    return BmiResult(bmi=bmi, category=category, message=_CATEGORY_MESSAGES[category])


class CalorieCounter:
    """Running calorie sums per meal slot. Lives only as long as the instance."""

    def __init__(self):
        self.slots: Dict[str, int] = {slot: 0 for slot in MEAL_SLOTS}
        self.total = 0

    def add(self, meal_type: str, description: str, calories: Any) -> int:
        """Adds an entry and returns the new total for its slot."""
        slot = (meal_type or "").strip().lower()
        amount = parse_positive_number(calories)
        if not (description or "").strip() or amount is None or slot not in self.slots:
            raise FitnessValidationError(INVALID_MEAL)

        amount = int(amount)
        if amount <= 0:
            raise FitnessValidationError(INVALID_MEAL)

        self.slots[slot] += amount
        self.total += amount
        return self.slots[slot]

    def reset(self) -> None:
        for slot in self.slots:
            self.slots[slot] = 0
        self.total = 0


def _meal(meal: str, protein: str, vitamins: str, minerals: str) -> Dict[str, Any]:
    return {"meal": meal, "nutrients": {"protein": protein, "vitamins": vitamins, "minerals": minerals}}


# Two options per slot: index 0 is the default meal, index 1 the alternative
DIET_PLANS: Dict[str, Dict[str, List[Dict[str, Any]]]] = {
    "veg": {
        "breakfast": [
            _meal("Oatmeal with fruits", "10g", "Vitamin A, C", "Iron, Calcium"),
            _meal("Veggie Smoothie", "7g", "Vitamin B, C", "Magnesium, Potassium"),
        ],
        "lunch": [
            _meal("Grilled Veggie Wrap", "12g", "Vitamin A, B", "Iron, Zinc"),
            _meal("Chickpea Salad", "15g", "Vitamin C, K", "Calcium, Iron"),
        ],
        "snacks": [
            _meal("Mixed Nuts", "6g", "Vitamin E", "Magnesium, Zinc"),
            _meal("Fruit Salad", "2g", "Vitamin C", "Potassium, Fiber"),
        ],
        "dinner": [
            _meal("Vegetable Stir Fry with Tofu", "18g", "Vitamin A, K", "Iron, Calcium"),
            _meal("Lentil Soup", "16g", "Vitamin B", "Iron, Magnesium"),
        ],
    },
    "nonveg": {
        "breakfast": [
            _meal("Scrambled Eggs with Avocado", "15g", "Vitamin B, D", "Zinc, Selenium"),
            _meal("Greek Yogurt with Berries", "12g", "Vitamin C, B12", "Calcium, Magnesium"),
        ],
        "lunch": [
            _meal("Grilled Chicken Salad", "25g", "Vitamin A, C", "Iron, Potassium"),
            _meal("Salmon with Quinoa", "30g", "Vitamin D, B12", "Omega-3, Iron"),
        ],
        "snacks": [
            _meal("Boiled Eggs", "6g", "Vitamin B12", "Iron, Zinc"),
            _meal("Turkey Jerky", "12g", "Vitamin B6", "Sodium, Potassium"),
        ],
        "dinner": [
            _meal("Grilled Steak with Vegetables", "35g", "Vitamin B12", "Iron, Zinc"),
            _meal("Chicken Stir Fry", "30g", "Vitamin C, B", "Iron, Magnesium"),
        ],
    },
}


def diet_plan(diet_type: str, alternative: bool = False) -> Optional[List[Dict[str, Any]]]:
    """Meal cards for each slot of a diet, or None for an unknown diet type."""
    plan = DIET_PLANS.get((diet_type or "").strip().lower())
    if plan is None:
        return None
    index = 1 if alternative else 0
    return [
        {"slot": slot, "meal": options[index]["meal"], "nutrients": dict(options[index]["nutrients"])}
        for slot, options in plan.items()
    ]
