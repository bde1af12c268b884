# game.py
"""
Shape-counting quiz: "how many <shape>s are in the picture?"
"""
import random
from dataclasses import dataclass, field

SHAPES = ["circle", "square", "triangle"]
QUESTION_COUNT = 5
SEQUENCE_LENGTH = 9
MAX_TARGET_COUNT = 5

FACE_NEUTRAL = "😊"
FACE_HAPPY = "😃"
FACE_VERY_HAPPY = "😁"
FACE_SAD = "😢"


@dataclass
class Question:
    shape: str
    sequence: list[str]
    options: list[int] = field(default_factory=list)

    @property
    def correct_answer(self) -> int:
        return self.sequence.count(self.shape)


def make_question(rng: random.Random) -> Question:
    shape = rng.choice(SHAPES)
    count = rng.randint(1, MAX_TARGET_COUNT)
    # the random filler may contain the target too, so the answer can exceed `count`
    sequence = [shape] * count + [rng.choice(SHAPES) for _ in range(SEQUENCE_LENGTH - count)]
    question = Question(shape=shape, sequence=sequence)
    correct = question.correct_answer
    question.options = [correct + i for i in range(4)]
    rng.shuffle(question.options)
    return question


def generate_questions(count: int = QUESTION_COUNT, rng: random.Random | None = None) -> list[Question]:
    rng = rng or random.Random()
    return [make_question(rng) for _ in range(count)]


class ShapeGame:
    def __init__(self, questions: list[Question] | None = None, rng: random.Random | None = None):
        self.questions = questions if questions is not None else generate_questions(rng=rng)
        self.current = 0
        self.score = 0
        self.streak = 0
        self.selected: int | None = None
        self.is_correct: bool | None = None

    @property
    def is_over(self) -> bool:
        return self.current >= len(self.questions)

    @property
    def question(self) -> Question | None:
        return None if self.is_over else self.questions[self.current]

    @property
    def answered(self) -> bool:
        return self.selected is not None

    def answer(self, value: int) -> bool:
        """Record the answer to the current question; later answers to the same question are ignored."""
        if self.is_over:
            raise RuntimeError("Game is over")
        if self.answered:
            return bool(self.is_correct)
        self.selected = value
        self.is_correct = value == self.question.correct_answer
        if self.is_correct:
            self.score += 1
            self.streak += 1
        else:
            self.streak = 0
        return self.is_correct

    def next_question(self):
        self.selected = None
        self.is_correct = None
        if not self.is_over:
            self.current += 1

    def restart(self):
        self.current = 0
        self.score = 0
        self.streak = 0
        self.selected = None
        self.is_correct = None

    def face(self) -> str:
        if not self.answered:
            return FACE_NEUTRAL
        if self.is_correct:
            return FACE_VERY_HAPPY if self.streak > 1 else FACE_HAPPY
        return FACE_SAD
