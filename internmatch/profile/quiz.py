"""Skill quiz grading. Produces the score stored on the candidate profile."""

from pydantic import BaseModel, ConfigDict, Field

from internmatch.pipeline.scorer import round_half_up


class QuizQuestion(BaseModel):
    """A multiple-choice question; ``correct_answer`` indexes ``options``."""

    model_config = ConfigDict(populate_by_name=True)

    question: str
    options: list[str] = Field(default_factory=list)
    correct_answer: int = Field(alias="correctAnswer")


class QuizAnswer(BaseModel):
    """How the candidate answered one question."""

    question: str
    answer: str
    is_correct: bool


class QuizResult(BaseModel):
    """Graded quiz, ready to be recorded against the profile."""

    score: int = Field(ge=0, le=100)
    correct_answers: int
    questions_count: int
    answers: list[QuizAnswer] = Field(default_factory=list)


def grade_quiz(questions: list[QuizQuestion], answers: list[int | None]) -> QuizResult:
    """Grade submitted option indexes against the questions.

    Missing or out-of-range answers count as wrong and are recorded as
    "No answer". Extra answers beyond the question list are ignored.

    Raises:
        ValueError: If there are no questions.
    """
    if not questions:
        msg = "quiz must contain at least one question"
        raise ValueError(msg)

    graded: list[QuizAnswer] = []
    correct = 0
    for i, question in enumerate(questions):
        choice = answers[i] if i < len(answers) else None
        is_correct = choice is not None and choice == question.correct_answer
        if is_correct:
            correct += 1
        if choice is not None and 0 <= choice < len(question.options):
            answer_text = question.options[choice]
        else:
            answer_text = "No answer"
        graded.append(
            QuizAnswer(question=question.question, answer=answer_text, is_correct=is_correct)
        )

    return QuizResult(
        score=round_half_up(correct / len(questions) * 100),
        correct_answers=correct,
        questions_count=len(questions),
        answers=graded,
    )


class QuizSubmission(BaseModel):
    """A submitted quiz as posted by the test page."""

    model_config = ConfigDict(populate_by_name=True)

    questions: list[QuizQuestion] = Field(default_factory=list)
    answers: list[int | None] = Field(default_factory=list)
    auto_submitted: bool = Field(default=False, alias="autoSubmitted")
    reason: str = ""
