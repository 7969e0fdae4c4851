"""Mock interview rules: question bank, progression and grading."""

from __future__ import annotations

import random
from typing import Final, Optional

from .metrics import round_half_up
from .models import InterviewAnswer, InterviewCategory, InterviewQuestion, InterviewRecord

QUESTIONS_PER_INTERVIEW: Final = 5


class InterviewNotFound(LookupError):
    """No interview with that id belongs to the user."""


class InterviewCompleted(ValueError):
    """Every question of the interview has already been answered."""


def _bank(
    category: InterviewCategory,
    prefix: str,
    texts: tuple[str, ...],
) -> tuple[InterviewQuestion, ...]:
    return tuple(
        InterviewQuestion(id=f"{prefix}-{index:02d}", text=text, category=category)
        for index, text in enumerate(texts, start=1)
    )


QUESTION_BANK: Final[dict[InterviewCategory, tuple[InterviewQuestion, ...]]] = {
    InterviewCategory.HR: _bank(
        InterviewCategory.HR,
        "hr",
        (
            "Tell me about yourself.",
            "What are your greatest strengths?",
            "What is your biggest weakness and how are you working on it?",
            "Where do you see yourself in 5 years?",
            "Why do you want to work for our company?",
            "Describe a challenge you faced and how you overcame it.",
            "Why are you leaving your current job?",
            "What motivates you to do your best work?",
            "How do you handle pressure and tight deadlines?",
            "What are your salary expectations?",
            "Tell me about a time you worked in a team.",
            "Describe your ideal work environment.",
            "How do you prioritize your tasks when you have multiple deadlines?",
            "What makes you the best candidate for this role?",
            "Tell me about a time you showed leadership.",
            "How do you handle criticism or negative feedback?",
            "Do you prefer working independently or in a team?",
            "What are your hobbies and interests outside of work?",
            "Describe a time when you had to learn something new quickly.",
            "What does success mean to you?",
            "How do you stay updated with industry trends?",
            "Tell me about a time you failed and what you learned.",
            "What is one professional achievement you are most proud of?",
            "How would your colleagues describe you?",
            "Are you comfortable with travel or relocation?",
            "What do you know about our company and products?",
            "How do you manage work-life balance?",
            "Tell me about a time you disagreed with your manager.",
            "What type of work culture do you thrive in?",
            "Do you have any questions for us?",
        ),
    ),
    InterviewCategory.TECHNICAL: _bank(
        InterviewCategory.TECHNICAL,
        "tech",
        (
            "Explain the difference between a stack and a queue.",
            "What is object-oriented programming? Give an example.",
            "What is the difference between SQL and NoSQL databases?",
            "Explain what REST APIs are and how they work.",
            "What is version control and why is Git important?",
            "What is the difference between frontend and backend development?",
            "Explain the concept of recursion with an example.",
            "What is a hash map and when would you use it?",
            "What is agile methodology? Have you worked in an agile team?",
            "Explain the concept of time complexity with an example.",
            "What debugging tools or techniques do you use?",
            "What is the difference between synchronous and asynchronous code?",
            "Explain a design pattern you have used in a project.",
            "What is unit testing and why is it important?",
            "How would you optimize a slow database query?",
            "What is the difference between authentication and authorization?",
            "Describe a technical project you are proud of.",
            "What programming languages are you most comfortable with and why?",
            "What is continuous integration and continuous deployment (CI/CD)?",
            "How do you approach learning a new technology?",
            "What is the concept of microservices architecture?",
            "Explain the HTTP request-response cycle.",
            "What are the SOLID principles in software development?",
            "How would you ensure the security of a web application?",
            "What is a binary search tree and when would you use it?",
            "Describe the difference between process and thread.",
            "What tools do you use for project management and collaboration?",
            "What is cloud computing? Have you used any cloud platforms?",
            "Explain how garbage collection works in a programming language you know.",
            "How do you approach code review?",
        ),
    ),
    InterviewCategory.SITUATIONAL: _bank(
        InterviewCategory.SITUATIONAL,
        "sit",
        (
            "If you had two critical tasks due at the same time, how would you handle it?",
            "If a client was unhappy with your work, what would you do?",
            "How would you handle a situation where you disagreed with a team decision?",
            "What would you do if you made a significant mistake at work?",
            "If you were given a task you had never done before, how would you approach it?",
            "How would you handle a difficult team member who is not cooperating?",
            "What would you do if you realized mid-project that the requirements had changed?",
            "If your manager gave you unclear instructions, how would you proceed?",
            "How would you handle it if you were asked to do something unethical?",
            "What would you do if a project was going to miss its deadline?",
            "If a senior colleague constantly took credit for your work, how would you address it?",
            "How would you manage a sudden increase in workload?",
            "What would you do if you noticed a colleague was struggling and falling behind?",
            "How would you handle it if your team made a decision you thought was wrong?",
            "If you were new to a team and noticed an inefficient process, how would you handle it?",
            "What would you do if a customer was extremely rude to you?",
            "How would you react if you received no feedback on your work for a long time?",
            "What would you do if you were asked to do a task outside your job description?",
            "How would you motivate a team that has low morale?",
            "If resources were suddenly cut on your project, how would you adapt?",
            "How would you handle two team members who are in constant conflict?",
            "What would you do if you had to deliver bad news to a client?",
            "If you had to train a junior who was slower than expected, how would you approach it?",
            "What would you do if you discovered a critical bug right before a release?",
            "How would you handle a situation where your priorities conflict with your manager's?",
            "If you were asked to lead a project you felt underprepared for, what would you do?",
            "What would you do if your team was missing a key skill needed for a project?",
            "How would you deal with a situation where you had to work with very little guidance?",
            "What would you do if a teammate was consistently late to meetings?",
            "What would you say to a junior colleague who was losing confidence?",
        ),
    ),
}


def pick_questions(
    category: InterviewCategory,
    count: int = QUESTIONS_PER_INTERVIEW,
    rng: Optional[random.Random] = None,
) -> list[InterviewQuestion]:
    """Random distinct questions from the category's bank."""

    pool = QUESTION_BANK[category]
    return (rng or random).sample(pool, min(count, len(pool)))


def current_question(interview: InterviewRecord) -> Optional[InterviewQuestion]:
    if interview.current_question_index >= len(interview.questions):
        return None
    return interview.questions[interview.current_question_index]


def record_answer(interview: InterviewRecord, answer: InterviewAnswer) -> InterviewRecord:
    """Append an answer and advance; the last answer completes the interview.

    The overall score is the rounded mean of all answer scores and is only
    set once the interview is complete.
    """

    if interview.completed:
        raise InterviewCompleted("Interview is already completed")

    answers = [*interview.answers, answer]
    next_index = interview.current_question_index + 1
    completed = next_index >= len(interview.questions)
    overall_score = None
    if completed:
        overall_score = int(round_half_up(sum(item.score for item in answers) / len(answers)))

    return interview.model_copy(
        update={
            "answers": answers,
            "current_question_index": next_index,
            "completed": completed,
            "overall_score": overall_score,
        }
    )


def score_to_grade(score: Optional[int]) -> str:
    score = score or 0
    if score >= 90:
        return "A"
    if score >= 75:
        return "B"
    if score >= 60:
        return "C"
    return "D"


__all__ = [
    "InterviewCompleted",
    "InterviewNotFound",
    "QUESTION_BANK",
    "QUESTIONS_PER_INTERVIEW",
    "current_question",
    "pick_questions",
    "record_answer",
    "score_to_grade",
]
