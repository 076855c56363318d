# src/soil_dashboard/learning.py
"""
Gardening lessons for the child view: quiz scoring, learner progress,
prerequisite locking and soil-triggered fun facts.

Lesson prose lives in the dashboard front end; this module only keeps
what the rules need (ids, categories, quizzes, rewards).
"""
from __future__ import annotations

from datetime import datetime

from .config import METRICS

# -------------------------
# Catalogue
# -------------------------
CATEGORIES = {
    "plant-biology": {
        "name": "Plant Biology",
        "lessons": ["roots-101", "stems-and-leaves", "photosynthesis-magic", "plant-lifecycle"],
    },
    "soil-science": {
        "name": "Soil Science",
        "lessons": ["soil-composition", "ph-basics", "nutrients-explained", "water-cycle"],
    },
    "gardening-basics": {
        "name": "Gardening Basics",
        "lessons": ["watering-wisdom", "planting-perfect", "plant-care", "tool-time"],
    },
    "seasonal-tips": {
        "name": "Seasonal Gardening",
        "lessons": ["spring-planting", "summer-care", "fall-harvest", "winter-prep"],
    },
}

LESSONS = {
    "roots-101": {
        "title": "Amazing Roots!",
        "category": "plant-biology",
        "prerequisites": [],
        "reward_points": 50,
        "badges": ["root-explorer"],
        "quiz": {
            "passing_score": 70,
            "questions": [
                {"id": "q1", "question": "What do roots use to drink water?", "answer": "Tiny root hairs", "points": 10},
                {"id": "q2", "question": "Roots help plants stay upright in windy weather.", "answer": "true", "points": 10},
            ],
        },
    },
    "photosynthesis-magic": {
        "title": "Photosynthesis Magic!",
        "category": "plant-biology",
        "prerequisites": [],
        "reward_points": 75,
        "badges": ["photosynthesis-wizard"],
        "quiz": {
            "passing_score": 70,
            "questions": [
                {
                    "id": "q1",
                    "question": "What do plants need to make their own food?",
                    "answer": "Sunlight, water, and carbon dioxide",
                    "points": 15,
                },
            ],
        },
    },
    "ph-basics": {
        "title": "pH: The Soil's Mood!",
        "category": "soil-science",
        "prerequisites": [],
        "reward_points": 60,
        "badges": ["ph-expert"],
        "quiz": {
            "passing_score": 70,
            "questions": [
                {"id": "q1", "question": "What pH range do most plants prefer?", "answer": "6-7", "points": 15},
            ],
        },
    },
    "watering-wisdom": {
        "title": "Watering Wisdom!",
        "category": "gardening-basics",
        "prerequisites": [],
        "reward_points": 50,
        "badges": ["watering-wizard"],
        "quiz": {
            "passing_score": 70,
            "questions": [
                {"id": "q1", "question": "What's the best time to water plants?", "answer": "Early morning", "points": 10},
            ],
        },
    },
    "spring-planting": {
        "title": "Spring Planting Party!",
        "category": "seasonal-tips",
        "prerequisites": [],
        "reward_points": 60,
        "badges": ["spring-planter"],
        "quiz": None,
    },
}

# A lesson without a quiz completes with a full score
NO_QUIZ_SCORE = 100
POINTS_PER_SCORE = 10

FUN_FACTS = [
    {"id": "fact-1", "category": "plant-biology", "fact": "A single sunflower can have up to 2,000 seeds!", "trigger": None},
    {
        "id": "fact-2",
        "category": "soil-science",
        "fact": "One teaspoon of soil contains more living organisms than there are people on Earth!",
        "trigger": None,
    },
    {"id": "fact-3", "category": "gardening-basics", "fact": "Plants can communicate with each other through their roots!", "trigger": None},
    {"id": "fact-4", "category": "seasonal-tips", "fact": "Some plants can predict the weather better than meteorologists!", "trigger": None},
]

# Fun fact trigger bands, applied to whichever metric the fact names
FACT_LOW = 50
FACT_HIGH = 80

# (minimum score, message), checked top down
QUIZ_FEEDBACK = [
    (90, "Amazing! You're a garden genius!"),
    (70, "Great job! You're learning so much!"),
    (50, "Good try! Keep learning and growing!"),
    (0, "That's okay! Every gardener learns by trying!"),
]

# (minimum overall progress %, level)
LEARNER_LEVELS = [
    (90, "Garden Master"),
    (70, "Plant Expert"),
    (50, "Growing Gardener"),
    (25, "Seedling Learner"),
    (0, "New Sprout"),
]


def _band(value: float, bands: list) -> str:
    for minimum, label in bands:
        if value >= minimum:
            return label
    return bands[-1][1]


# -------------------------
# Quiz
# -------------------------
def score_quiz(quiz: dict, answers: dict) -> dict:
    """
    Grades `answers` ({question_id: answer}) against a quiz.
    Output: {correct, total, score, points, passed, feedback}
      score   = correct / total * 100
      points  = sum of points of the correctly answered questions
      passed  = score >= quiz["passing_score"]
      feedback: {question_id: bool}
    """
    questions = quiz["questions"]
    feedback = {q["id"]: answers.get(q["id"]) == q["answer"] for q in questions}
    correct = sum(feedback.values())
    total = len(questions)
    score = correct / total * 100 if total else 0.0

    return {
        "correct": correct,
        "total": total,
        "score": score,
        "points": sum(q["points"] for q in questions if feedback[q["id"]]),
        "passed": score >= quiz["passing_score"],
        "feedback": feedback,
    }


def quiz_feedback(score: float) -> str:
    return _band(score, QUIZ_FEEDBACK)


# -------------------------
# Progress
# -------------------------
def new_progress(user_id: str = "child-user") -> dict:
    return {
        "user_id": user_id,
        "completed_lessons": [],
        "total_points": 0,
        "quiz_scores": {},
        "last_activity": None,
    }


def complete_lesson(progress: dict, lesson_id: str, score: float | None = None, now: datetime | None = None) -> dict:
    """
    Records a finished lesson and returns the updated progress (a new dict).

    Adds score * POINTS_PER_SCORE to the total and stores the score under the
    lesson id. A lesson counts once: completing it again only updates its
    quiz score.
    """
    if lesson_id not in LESSONS:
        raise ValueError(f"Unknown lesson {lesson_id!r}")
    if score is None:
        score = NO_QUIZ_SCORE

    completed = list(progress["completed_lessons"])
    total_points = progress["total_points"]
    if lesson_id not in completed:
        completed.append(lesson_id)
        total_points += score * POINTS_PER_SCORE

    return {
        **progress,
        "completed_lessons": completed,
        "total_points": total_points,
        "quiz_scores": {**progress["quiz_scores"], lesson_id: score},
        "last_activity": now or datetime.now(),
    }


def is_locked(lesson_id: str, progress: dict) -> bool:
    """True while any prerequisite of the lesson is still unfinished."""
    done = set(progress["completed_lessons"])
    return not all(p in done for p in LESSONS[lesson_id]["prerequisites"])


def category_progress(progress: dict) -> dict:
    """{category_id: {"completed": n, "total": m}} over each category's planned lessons."""
    done = set(progress["completed_lessons"])
    return {
        cat_id: {
            "completed": sum(1 for lesson in cat["lessons"] if lesson in done),
            "total": len(cat["lessons"]),
        }
        for cat_id, cat in CATEGORIES.items()
    }


def overall_progress(progress: dict) -> float:
    total = sum(len(cat["lessons"]) for cat in CATEGORIES.values())
    return len(progress["completed_lessons"]) / total * 100 if total else 0.0


def learner_level(progress: dict) -> str:
    return _band(overall_progress(progress), LEARNER_LEVELS)


def average_quiz_score(progress: dict) -> float:
    scores = list(progress["quiz_scores"].values())
    return sum(scores) / len(scores) if scores else 0.0


# -------------------------
# Fun facts
# -------------------------
def _fact_matches(fact: dict, reading: dict) -> bool:
    trigger = fact.get("trigger")
    if not trigger:
        return True

    metric, condition = trigger["metric"], trigger["condition"]
    if metric not in METRICS:
        return False
    value = float(reading[metric])

    if condition == "low":
        return value < FACT_LOW
    if condition == "high":
        return value > FACT_HIGH
    if condition == "optimal":
        return FACT_LOW <= value <= FACT_HIGH
    return False


def relevant_facts(reading: dict, facts: list[dict] | None = None, limit: int = 3) -> list[dict]:
    """
    Facts that suit the current reading, in catalogue order, at most `limit`.
    Facts without a trigger always qualify.
    """
    facts = FUN_FACTS if facts is None else facts
    return [f for f in facts if _fact_matches(f, reading)][:limit]
